from __future__ import annotations

import os
from pathlib import Path

_DEFAULT_BASE = "/root/archcrypt"


def _expand(path: str) -> str:
    candidate = Path(path).expanduser()
    try:
        return str(candidate.resolve())
    except FileNotFoundError:
        return str(candidate)


def archcrypt_base_path() -> str:
    """Return the base directory for installer logs.

    The location can be overridden via the ``ARCHCRYPT_BASE_PATH``
    environment variable.  On the live ISO ``/root`` lives in RAM, so the
    default tree disappears with the live session.
    """

    override = os.environ.get("ARCHCRYPT_BASE_PATH")
    if override:
        return _expand(override)
    return _expand(_DEFAULT_BASE)


def archcrypt_logs_dir() -> str:
    return str(Path(archcrypt_base_path()) / "logs")


def target_path(mnt: str, path: str) -> str:
    """Map an absolute path inside the new system onto the host mount."""

    return os.path.join(mnt, path.lstrip("/"))
