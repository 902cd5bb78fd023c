from __future__ import annotations

import enum
from dataclasses import dataclass, field


class InstallMode(enum.Enum):
    MINIMAL = "1"
    WORKSTATION = "2"
    VIRTUALBOX = "3"

    @property
    def label(self) -> str:
        return {"1": "Minimal", "2": "Workstation", "3": "VirtualBox"}[self.value]

    @property
    def gui(self) -> bool:
        return self is not InstallMode.MINIMAL

    @property
    def dotfiles_profile(self) -> str:
        return "arch-desktop" if self.gui else "arch"


@dataclass
class Flags:
    plan: bool = False
    dry_run: bool = False
    test_mode: bool = False
    assume_yes: bool = False


@dataclass
class Settings:
    mnt: str = "/mnt"
    esp_size: str = "+512M"
    swap_size: str = "1G"
    luks_name: str = "cryptlvm"
    vg: str = "volgroup0"
    timezone: str = "US/Pacific"
    locale: str = "en_US.UTF-8 UTF-8"
    mirror_country: str = "US"
    nameservers: tuple[str, ...] = ("8.8.8.8", "8.8.4.4")
    dotfiles_repo: str = "https://github.com/sneivandt/dotfiles.git"
    paru_repo: str = "https://aur.archlinux.org/paru-bin.git"
    paru_commit: str = "0313c65"


@dataclass
class InstallPlan:
    mode: InstallMode
    hostname: str
    user: str
    device: str
    password: str = field(repr=False)
    luks_password: str = field(repr=False)
    video_driver: str = ""

    def summary(self) -> dict:
        return {
            "mode": self.mode.label,
            "hostname": self.hostname,
            "user": self.user,
            "device": self.device,
            "video_driver": self.video_driver or None,
        }


@dataclass
class DeviceMap:
    device: str
    esp: str
    luks: str
    luks_name: str = "cryptlvm"
    vg: str = "volgroup0"

    @property
    def mapper(self) -> str:
        return f"/dev/mapper/{self.luks_name}"

    @property
    def swap_lv(self) -> str:
        return f"/dev/mapper/{self.vg}-swap"

    @property
    def root_lv(self) -> str:
        return f"/dev/mapper/{self.vg}-root"
