"""pacman.conf cosmetics and transaction hooks."""
from __future__ import annotations

import re

from .executil import edit_text, write_text
from .paths import target_path

PACMAN_OPTIONS = ("ILoveCandy", "Color")

DASH_HOOK = """\
[Trigger]
Type = Package
Operation = Install
Operation = Upgrade
Target = bash
[Action]
Description = Re-pointing /bin/sh symlink to dash...
When = PostTransaction
Exec = /usr/bin/ln -sfT dash /usr/bin/sh
Depends = dash
"""

PACCACHE_HOOK = """\
[Trigger]
Operation = Remove
Operation = Install
Operation = Upgrade
Type = Package
Target = *
[Action]
Description = Clean package cache
When = PostTransaction
Exec = /usr/bin/paccache -rk5
Depends = pacman-contrib
"""

XMONAD_HOOK = """\
[Trigger]
Type = Package
Operation = Install
Operation = Upgrade
Target = xmonad
[Action]
Description = Recompile xmonad
When = PostTransaction
Exec = /usr/bin/sudo XMONAD_CONFIG_DIR=/home/{user}/.config/xmonad -u {user} /usr/bin/xmonad --recompile
Depends = xmonad
"""


def add_options(text: str, options=PACMAN_OPTIONS) -> str:
    """Enable ``options`` in the ``[options]`` section of pacman.conf text."""

    wanted = []
    for opt in options:
        # "#Color" in the stock file is uncommented rather than duplicated
        pattern = re.compile(rf"^#[ \t]*{re.escape(opt)}[ \t]*$", re.MULTILINE)
        if re.search(rf"^{re.escape(opt)}[ \t]*$", text, re.MULTILINE):
            continue
        if pattern.search(text):
            text = pattern.sub(opt, text, count=1)
            continue
        wanted.append(opt)
    if not wanted:
        return text
    block = "\n".join(wanted) + "\n"
    match = re.search(r"^\[options\]\s*\n", text, re.MULTILINE)
    if match:
        return text[: match.end()] + block + text[match.end():]
    return text.rstrip("\n") + "\n[options]\n" + block


def hooks(user: str) -> dict[str, str]:
    return {
        "dash.hook": DASH_HOOK,
        "paccache.hook": PACCACHE_HOOK,
        "xmonad.hook": XMONAD_HOOK.format(user=user),
    }


def configure_pacman(mnt: str, user: str, dry_run: bool = False):
    edit_text(target_path(mnt, "/etc/pacman.conf"), add_options, dry_run=dry_run)
    hook_dir = target_path(mnt, "/etc/pacman.d/hooks")
    for name, body in hooks(user).items():
        write_text(f"{hook_dir}/{name}", body, dry_run=dry_run)
