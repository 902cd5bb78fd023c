"""Preflight checks and destructive-op refusals."""

from __future__ import annotations

import os
import shutil
import subprocess

from .errors import PreflightError, RefuseSafeError

REQUIRED_TOOLS = (
    "lsblk",
    "fdisk",
    "cryptsetup",
    "pvcreate",
    "vgcreate",
    "lvcreate",
    "mkfs.ext4",
    "mkfs.vfat",
    "mkswap",
    "pacstrap",
    "genfstab",
    "arch-chroot",
    "curl",
)

ARCHISO_BOOTMNT = "/run/archiso/bootmnt"


def require_root() -> None:
    if os.geteuid() != 0:
        raise PreflightError("the installer must be run as root")


def require_uefi(efi_dir: str = "/sys/firmware/efi") -> None:
    if not os.path.isdir(efi_dir):
        raise PreflightError("system is not booted in UEFI mode")


def require_tools(tools=REQUIRED_TOOLS) -> None:
    missing = [t for t in tools if shutil.which(t) is None]
    if missing:
        raise PreflightError(f"required commands not found: {', '.join(missing)}")


def _capture(cmd: list[str]) -> str:
    try:
        return subprocess.check_output(cmd, text=True, stderr=subprocess.DEVNULL).strip()
    except (OSError, subprocess.CalledProcessError):
        return ""


def _backing_disks(source: str) -> list[str]:
    """Whole disks under ``source``, walking through dm-crypt and LVM layers."""

    if not source.startswith("/dev/"):
        return []
    out = _capture(["lsblk", "-nrso", "NAME,TYPE", source])
    disks = []
    for line in out.splitlines():
        parts = line.split()
        if len(parts) == 2 and parts[1] == "disk" and parts[0] not in disks:
            disks.append(parts[0])
    if not disks and out:
        # lsblk knew the source but reported no disk row
        disks.append(os.path.basename(source))
    return disks


def guard_not_live_disk(device: str) -> tuple[bool, str]:
    """Refuse when ``device`` holds the running root or the archiso medium.

    Returns (ok, reason).
    """

    live = []
    for mountpoint in ("/", ARCHISO_BOOTMNT):
        src = _capture(["findmnt", "-no", "SOURCE", mountpoint])
        live.extend(_backing_disks(src))
    target = os.path.basename(device.rstrip("/"))
    for disk in live:
        if disk == target:
            return False, f"Target {device} looks like live disk ({disk})."
    return True, ""


def require_safe_target(device: str) -> None:
    ok, reason = guard_not_live_disk(device)
    if not ok:
        raise RefuseSafeError(reason)


def preflight_host(dry_run: bool = False) -> None:
    """Host checks that must pass before any prompt or package install."""

    if dry_run:
        return
    require_root()
    require_uefi()
    require_tools()
