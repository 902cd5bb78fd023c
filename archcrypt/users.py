"""Main user account, root lockdown, sudo policy and dotfiles."""

from __future__ import annotations

import re

from .executil import edit_text, run
from .model import InstallPlan, Settings
from .paths import target_path

USER_GROUPS = "docker,wheel"
USER_SHELL = "/bin/zsh"

# Stock sudoers writes "(ALL)" or "(ALL:ALL)" depending on the sudo release.
_RUNAS = r"\(ALL(?::ALL)?\)"
_NOPASSWD_COMMENTED = re.compile(rf"^# (%wheel ALL={_RUNAS} NOPASSWD: ALL)$", re.MULTILINE)
_NOPASSWD_ACTIVE = re.compile(rf"^(%wheel ALL={_RUNAS} NOPASSWD: ALL)$", re.MULTILINE)
_PASSWD_COMMENTED = re.compile(rf"^# (%wheel ALL={_RUNAS} ALL)$", re.MULTILINE)


def enable_nopasswd(text: str) -> str:
    return _NOPASSWD_COMMENTED.sub(r"\1", text)


def restore_passwd(text: str) -> str:
    text = _NOPASSWD_ACTIVE.sub(r"# \1", text)
    return _PASSWD_COMMENTED.sub(r"\1", text)


def dotfiles_dir(user: str) -> str:
    return f"/home/{user}/src/dotfiles"


def create_user(mnt: str, user: str, password: str, dry_run: bool = False):
    run(["arch-chroot", mnt, "useradd", "-mU", "-G", USER_GROUPS, "-s", USER_SHELL, user], dry_run=dry_run)
    # chpasswd hashes with the target's login.defs method; the secret stays on stdin
    run(["arch-chroot", mnt, "chpasswd"], input=f"{user}:{password}\n", dry_run=dry_run)
    run(["arch-chroot", mnt, "chsh", "-s", USER_SHELL, user], dry_run=dry_run)


def lock_root(mnt: str, dry_run: bool = False):
    run(["arch-chroot", mnt, "passwd", "-l", "root"], dry_run=dry_run)
    run(["arch-chroot", mnt, "usermod", "-s", "/sbin/nologin", "root"], dry_run=dry_run)


def install_dotfiles(mnt: str, user: str, repo: str, profile: str, dry_run: bool = False):
    dest = dotfiles_dir(user)
    run(["arch-chroot", mnt, "su", user, "-c", f"git clone {repo} {dest}"], dry_run=dry_run, timeout=None)
    run(
        ["arch-chroot", mnt, "su", user, "-c", f"{dest}/dotfiles.sh -I --profile {profile}"],
        dry_run=dry_run,
        timeout=None,
        stream=True,
    )


def setup_users(plan: InstallPlan, settings: Settings, dry_run: bool = False):
    mnt = settings.mnt
    sudoers = target_path(mnt, "/etc/sudoers")
    create_user(mnt, plan.user, plan.password, dry_run=dry_run)
    edit_text(sudoers, enable_nopasswd, dry_run=dry_run)
    try:
        lock_root(mnt, dry_run=dry_run)
        install_dotfiles(mnt, plan.user, settings.dotfiles_repo, plan.mode.dotfiles_profile, dry_run=dry_run)
    finally:
        edit_text(sudoers, restore_passwd, dry_run=dry_run)
