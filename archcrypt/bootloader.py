"""Initramfs hooks and GRUB for an encrypted LVM root."""

from __future__ import annotations

import re

from .executil import edit_text, run
from .model import DeviceMap
from .paths import target_path

MKINITCPIO_HOOKS = (
    "base",
    "udev",
    "autodetect",
    "keyboard",
    "keymap",
    "consolefont",
    "modconf",
    "block",
    "encrypt",
    "lvm2",
    "filesystems",
    "fsck",
)


def set_hooks(text: str, hooks=MKINITCPIO_HOOKS) -> str:
    line = f"HOOKS=({' '.join(hooks)})"
    return re.sub(r"^HOOKS.*$", line, text, flags=re.MULTILINE)


def kernel_line(dm: DeviceMap) -> str:
    return (
        f"linux /vmlinuz-linux root={dm.root_lv} rw "
        f"cryptdevice={dm.luks}:{dm.vg} quiet"
    )


def patch_grub_cfg(text: str, dm: DeviceMap) -> str:
    """Point every vmlinuz-linux line at the encrypted root."""

    replacement = kernel_line(dm)
    return re.sub(r"^.*vmlinuz-linux.*$", lambda _m: replacement, text, flags=re.MULTILINE)


def build_initramfs(mnt: str, dry_run: bool = False):
    edit_text(target_path(mnt, "/etc/mkinitcpio.conf"), set_hooks, dry_run=dry_run)
    run(["arch-chroot", mnt, "mkinitcpio", "-p", "linux"], dry_run=dry_run, timeout=None)


def install_grub(dm: DeviceMap, mnt: str, dry_run: bool = False):
    run(["arch-chroot", mnt, "grub-install", dm.device, "--efi-directory=/boot"], dry_run=dry_run, timeout=None)
    run(["arch-chroot", mnt, "grub-mkconfig", "-o", "/boot/grub/grub.cfg"], dry_run=dry_run, timeout=None)
    edit_text(
        target_path(mnt, "/boot/grub/grub.cfg"),
        lambda text: patch_grub_cfg(text, dm),
        dry_run=dry_run,
    )
