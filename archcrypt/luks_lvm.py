"""LUKS2 container and LVM volumes (swap + root)."""

from __future__ import annotations

from .executil import run, udev_settle
from .model import DeviceMap

LUKS_TIMEOUT = 360.0


def format_luks(part: str, password: str, dry_run: bool = False):
    # "-" reads the key from stdin; no trailing newline so the key is exact.
    cmd = ["cryptsetup", "-q", "luksFormat", "--type", "luks2", part, "-"]
    run(cmd, input=password, dry_run=dry_run, timeout=LUKS_TIMEOUT)
    udev_settle(dry_run=dry_run)


def open_luks(part: str, name: str, password: str, dry_run: bool = False):
    cmd = ["cryptsetup", "open", part, name, "-"]
    run(cmd, input=password, dry_run=dry_run, timeout=LUKS_TIMEOUT)
    udev_settle(dry_run=dry_run)


def make_volumes(dm: DeviceMap, swap_size: str = "1G", dry_run: bool = False):
    run(["pvcreate", dm.mapper], dry_run=dry_run)
    run(["vgcreate", dm.vg, dm.mapper], dry_run=dry_run)
    run(["lvcreate", "-L", swap_size, dm.vg, "-n", "swap"], dry_run=dry_run)
    run(["lvcreate", "-l", "100%FREE", dm.vg, "-n", "root"], dry_run=dry_run)
    udev_settle(dry_run=dry_run)


def deactivate_vg(vg: str, dry_run: bool = False):
    run(["vgchange", "-an", vg], check=False, dry_run=dry_run)


def close_luks(name: str, dry_run: bool = False):
    run(["cryptsetup", "close", name], check=False, dry_run=dry_run)
