"""paru AUR helper, built by a throwaway user."""

from __future__ import annotations

from .executil import run, write_text
from .model import Settings
from .paths import target_path

BUILD_USER = "aurbuilder"
BUILD_HOME = f"/opt/{BUILD_USER}"
SUDOERS_RULE = f"{BUILD_USER} ALL=(ALL) NOPASSWD: /usr/bin/pacman\n"


def build_command(settings: Settings) -> str:
    src = f"{BUILD_HOME}/paru-bin"
    return (
        f"git clone {settings.paru_repo} {src}"
        f" && cd {src}"
        f" && git checkout {settings.paru_commit}"
        " && makepkg -si --noconfirm"
    )


def install_paru(settings: Settings, dry_run: bool = False):
    mnt = settings.mnt
    sudoers = target_path(mnt, f"/etc/sudoers.d/{BUILD_USER}")
    run(["arch-chroot", mnt, "useradd", "-m", "-d", BUILD_HOME, BUILD_USER], dry_run=dry_run)
    write_text(sudoers, SUDOERS_RULE, mode=0o440, dry_run=dry_run)
    try:
        run(
            ["arch-chroot", mnt, "su", BUILD_USER, "-c", build_command(settings)],
            dry_run=dry_run,
            timeout=None,
            stream=True,
        )
    finally:
        remove_build_user(mnt, dry_run=dry_run)


def remove_build_user(mnt: str, dry_run: bool = False):
    run(["arch-chroot", mnt, "userdel", BUILD_USER], check=False, dry_run=dry_run)
    run(["rm", "-rf", target_path(mnt, BUILD_HOME)], check=False, dry_run=dry_run)
    run(["rm", "-f", target_path(mnt, f"/etc/sudoers.d/{BUILD_USER}")], check=False, dry_run=dry_run)
