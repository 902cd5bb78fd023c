"""Filesystems and mounts for the target root."""
from __future__ import annotations

import os

from .executil import run
from .model import DeviceMap
from .paths import target_path


def format_filesystems(dm: DeviceMap, dry_run: bool = False):
    run(["mkswap", dm.swap_lv], dry_run=dry_run)
    run(["mkfs.ext4", "-F", dm.root_lv], dry_run=dry_run, timeout=None)
    run(["mkfs.vfat", "-F32", "-n", "EFI", dm.esp], dry_run=dry_run)


def mount_targets(dm: DeviceMap, mnt: str, dry_run: bool = False):
    boot = target_path(mnt, "/boot")
    run(["mount", dm.root_lv, mnt], dry_run=dry_run)
    run(["swapon", dm.swap_lv], dry_run=dry_run)
    if dry_run:
        run(["mkdir", "-p", boot], dry_run=True)
    else:
        os.makedirs(boot, exist_ok=True)
    run(["mount", dm.esp, boot], dry_run=dry_run)


def unmount_all(mnt: str, dry_run: bool = False):
    run(["umount", "-R", mnt], dry_run=dry_run)
    run(["swapoff", "-a"], dry_run=dry_run)
