"""GPT layout: EFI system partition + LVM partition for the LUKS container."""
from __future__ import annotations

from .executil import run, udev_settle
from .model import DeviceMap


def fdisk_script(esp_size: str = "+512M") -> str:
    # g: new GPT; 1: ESP; 2: rest of disk; t 2 8e: Linux LVM; w: write
    lines = [
        "g",
        "n", "1", "", esp_size,
        "n", "2", "", "",
        "t", "2", "8e",
        "w",
    ]
    return "\n".join(lines) + "\n"


def precleanup(dm: DeviceMap, mnt: str, dry_run: bool = False):
    """Release leftovers from an earlier attempt on the same disk."""

    run(["swapoff", "-a"], check=False, dry_run=dry_run)
    run(["umount", "-R", mnt], check=False, dry_run=dry_run)
    run(["vgchange", "-an", dm.vg], check=False, dry_run=dry_run)
    run(["cryptsetup", "close", dm.luks_name], check=False, dry_run=dry_run)
    udev_settle(dry_run=dry_run)


def reread(device: str, dry_run: bool = False):
    run(["partprobe", device], check=False, dry_run=dry_run)
    udev_settle(dry_run=dry_run)


def apply_layout(device: str, esp_size: str = "+512M", dry_run: bool = False):
    run(["wipefs", "-a", device], check=False, dry_run=dry_run)
    run(["fdisk", device], input=fdisk_script(esp_size), dry_run=dry_run)
    reread(device, dry_run=dry_run)


def verify_layout(dm: DeviceMap, dry_run: bool = False):
    run(["lsblk", "-no", "NAME", dm.esp], dry_run=dry_run)
    run(["lsblk", "-no", "NAME", dm.luks], dry_run=dry_run)
