"""Input format checks for the values collected before install."""

from __future__ import annotations

import re

from .errors import ValidationError

HOSTNAME_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$")
USERNAME_RE = re.compile(r"^[a-z_][a-z0-9_-]{0,31}$")
PACKAGE_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._+-]*$")


def validate_hostname(value: str) -> bool:
    return bool(value) and HOSTNAME_RE.fullmatch(value) is not None


def validate_username(value: str) -> bool:
    return bool(value) and USERNAME_RE.fullmatch(value) is not None


def validate_package_name(value: str) -> bool:
    return bool(value) and PACKAGE_RE.fullmatch(value) is not None


def require_hostname(value: str) -> str:
    if not value:
        raise ValidationError("hostname cannot be empty")
    if not validate_hostname(value):
        raise ValidationError(
            f"invalid hostname {value!r}: use letters, digits and inner hyphens (max 63)"
        )
    return value


def require_username(value: str) -> str:
    if not value:
        raise ValidationError("username cannot be empty")
    if not validate_username(value):
        raise ValidationError(
            f"invalid username {value!r}: start with a lowercase letter or underscore (max 32)"
        )
    return value


def require_password(first: str, second: str, what: str = "password") -> str:
    if not first:
        raise ValidationError(f"{what} cannot be empty")
    if first != second:
        raise ValidationError(f"{what}s did not match")
    return first
