"""Package selection, mirror list and pacstrap."""

from __future__ import annotations

import re

from .errors import ValidationError
from .executil import run, trace, write_text
from .model import InstallMode
from .validation import validate_package_name

BASE_PACKAGES = (
    "base",
    "base-devel",
    "bat",
    "btop",
    "ctags",
    "curl",
    "dash",
    "dhcpcd",
    "docker",
    "duf",
    "efibootmgr",
    "eza",
    "fd",
    "fzf",
    "git",
    "git-delta",
    "grub",
    "jq",
    "lazygit",
    "linux",
    "linux-firmware",
    "linux-headers",
    "lvm2",
    "man-db",
    "man-pages",
    "neovim",
    "openssh",
    "pacman-contrib",
    "ripgrep",
    "sed",
    "shellcheck",
    "tmux",
    "vim",
    "wget",
    "xdg-user-dirs",
    "zip",
    "zoxide",
    "zsh",
    "zsh-autosuggestions",
    "zsh-completions",
    "zsh-syntax-highlighting",
)

GUI_PACKAGES = (
    "adobe-source-code-pro-fonts",
    "alacritty",
    "alsa-utils",
    "chromium",
    "dunst",
    "feh",
    "flameshot",
    "noto-fonts-cjk",
    "noto-fonts-emoji",
    "papirus-icon-theme",
    "picom",
    "redshift",
    "rofi",
    "rxvt-unicode",
    "urxvt-perls",
    "xclip",
    "xmonad",
    "xmonad-contrib",
    "xorg",
    "xorg-server",
    "xorg-xinit",
    "xterm",
)

VBOX_PACKAGES = ("virtualbox-guest-utils",)

FALLBACK_VIDEO_DRIVER = "xf86-video-vesa"

MIRRORLIST_URL = "https://www.archlinux.org/mirrorlist/?country={country}&protocol=https&ip_version=4"
MIRRORLIST_PATH = "/etc/pacman.d/mirrorlist"


def select_packages(mode: InstallMode, video_driver: str = "") -> list[str]:
    selected = list(BASE_PACKAGES)
    if mode.gui:
        selected += GUI_PACKAGES
        selected.append(video_driver or FALLBACK_VIDEO_DRIVER)
    if mode is InstallMode.VIRTUALBOX:
        selected += VBOX_PACKAGES
    seen = set()
    result = []
    for pkg in selected:
        if pkg in seen:
            continue
        if not validate_package_name(pkg):
            raise ValidationError(f"invalid package name {pkg!r}")
        seen.add(pkg)
        result.append(pkg)
    trace("packages.selected", mode=mode.label, count=len(result))
    return result


def uncomment_servers(text: str) -> str:
    return re.sub(r"^#Server", "Server", text, flags=re.MULTILINE)


def update_mirrorlist(country: str = "US", dry_run: bool = False, path: str = MIRRORLIST_PATH):
    url = MIRRORLIST_URL.format(country=country)
    res = run(["curl", "-sfL", url], dry_run=dry_run, timeout=120.0)
    if dry_run:
        write_text(path, "", dry_run=True)
        return
    servers = uncomment_servers(res.out)
    if "Server" not in servers:
        raise RuntimeError(f"mirror list from {url} contains no servers")
    write_text(path, servers)


def pacstrap(mnt: str, packages: list[str], dry_run: bool = False):
    run(["pacstrap", mnt, *packages], dry_run=dry_run, timeout=None, stream=True)
