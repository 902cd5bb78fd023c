"""Interactive input through the ``dialog`` program, or TEST_MODE_* variables."""

from __future__ import annotations

import os
import shutil
import subprocess
from typing import Callable, Mapping, Sequence

from .devices import has_nvidia_gpu, list_disks
from .errors import AbortedError, InputError, PreflightError, ValidationError
from .executil import run, trace
from .model import Flags, InstallMode, InstallPlan
from .validation import require_hostname, require_password, require_username

DIALOG = "dialog"

MODE_CHOICES = [(m.value, m.label) for m in InstallMode]
VIDEO_DRIVERS = ("nvidia", "nvidia-340xx", "nvidia-390xx", "xf86-video-nouveau")

TEST_MODE_VARS = {
    "mode": "TEST_MODE_MODE",
    "hostname": "TEST_MODE_HOSTNAME",
    "user": "TEST_MODE_USER",
    "password": "TEST_MODE_PASSWORD",
    "device": "TEST_MODE_DEVICE",
    "luks_password": "TEST_MODE_LUKS_PASSWORD",
}


def ensure_dialog(flags: Flags) -> None:
    if flags.test_mode or shutil.which(DIALOG):
        return
    try:
        run(["pacman", "-Sy", "--noconfirm", DIALOG], dry_run=flags.dry_run, timeout=None)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise PreflightError(f"could not install {DIALOG}: {exc}") from exc


def _dialog(*args: str) -> subprocess.CompletedProcess:
    # The UI is drawn on the terminal; only the answer comes back on stdout.
    cmd = [DIALOG, "--stdout", "--clear", *args]
    try:
        return subprocess.run(cmd, stdout=subprocess.PIPE, text=True)
    except FileNotFoundError as exc:
        raise PreflightError("dialog program not found; install it with pacman -Sy dialog") from exc


def _answer(*args: str) -> str:
    proc = _dialog(*args)
    if proc.returncode != 0:
        raise AbortedError("input cancelled")
    return (proc.stdout or "").rstrip("\n")


def menu(text: str, items: Sequence[tuple[str, str]]) -> str:
    flat = [str(part) for item in items for part in item]
    return _answer("--menu", text, "0", "0", "0", *flat)


def inputbox(text: str) -> str:
    return _answer("--inputbox", text, "0", "40")


def passwordbox(text: str) -> str:
    return _answer("--insecure", "--passwordbox", text, "0", "40")


def msgbox(text: str) -> None:
    _dialog("--msgbox", text, "0", "0")


def yesno(text: str) -> bool:
    proc = _dialog("--yesno", text, "0", "0")
    if proc.returncode == 0:
        return True
    if proc.returncode == 1:
        return False
    raise AbortedError("input cancelled")


def _ask(prompt: Callable[[], str], check: Callable[[str], str]) -> str:
    while True:
        value = prompt()
        try:
            return check(value)
        except ValidationError as exc:
            msgbox(str(exc))


def _ask_password(text: str, what: str) -> str:
    def prompt_twice() -> tuple[str, str]:
        first = passwordbox(text)
        if not first:
            return first, first
        return first, passwordbox(f"{text} again")

    while True:
        first, second = prompt_twice()
        try:
            return require_password(first, second, what)
        except ValidationError as exc:
            msgbox(str(exc))


def choose_video_driver(mode: InstallMode) -> str:
    if mode is not InstallMode.WORKSTATION or not has_nvidia_gpu():
        return ""
    items = [(str(idx), name) for idx, name in enumerate(VIDEO_DRIVERS)]
    return VIDEO_DRIVERS[int(menu("Select video driver", items))]


def collect_inputs(flags: Flags, env: Mapping[str, str] | None = None) -> InstallPlan:
    """Gather every value the install needs before anything is modified."""

    if flags.test_mode:
        return inputs_from_env(os.environ if env is None else env)

    mode = InstallMode(menu("Select install mode", MODE_CHOICES))
    hostname = _ask(lambda: inputbox("Enter hostname"), require_hostname)
    user = _ask(lambda: inputbox("Enter username"), require_username)
    password = _ask_password("Enter password", "password")

    disks = list_disks()
    if not disks:
        raise InputError("no installation disk found")
    device = menu("Select installation disk", disks)

    luks_password = _ask_password("Enter disk encryption password", "disk encryption password")
    video_driver = choose_video_driver(mode)

    if not flags.assume_yes and not flags.dry_run:
        if not yesno(f"All data on {device} will be destroyed.\n\nContinue?"):
            raise AbortedError(f"install onto {device} declined")

    plan = InstallPlan(
        mode=mode,
        hostname=hostname,
        user=user,
        device=device,
        password=password,
        luks_password=luks_password,
        video_driver=video_driver,
    )
    trace("prompts.collected", **plan.summary())
    return plan


def inputs_from_env(env: Mapping[str, str]) -> InstallPlan:
    """Build the plan from TEST_MODE_* variables for unattended runs."""

    values = {}
    missing = []
    for key, var in TEST_MODE_VARS.items():
        value = env.get(var, "")
        if not value:
            missing.append(var)
        values[key] = value
    if missing:
        raise InputError(f"test mode requires {', '.join(missing)}")

    try:
        mode = InstallMode(values["mode"])
    except ValueError as exc:
        raise ValidationError(f"TEST_MODE_MODE must be one of 1, 2, 3 (got {values['mode']!r})") from exc

    video_driver = env.get("TEST_MODE_VIDEO_DRIVER", "")
    if video_driver and video_driver not in VIDEO_DRIVERS:
        raise ValidationError(f"unsupported video driver {video_driver!r}")

    plan = InstallPlan(
        mode=mode,
        hostname=require_hostname(values["hostname"]),
        user=require_username(values["user"]),
        device=values["device"],
        password=values["password"],
        luks_password=values["luks_password"],
        video_driver=video_driver,
    )
    trace("prompts.test_mode", **plan.summary())
    return plan
