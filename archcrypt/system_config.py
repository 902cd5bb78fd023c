"""General configuration of the installed system."""

from __future__ import annotations

from .executil import run, write_text
from .model import InstallMode, InstallPlan, Settings
from .paths import target_path

BASE_SERVICES = (
    "dhcpcd.service",
    "docker.service",
    "systemd-timesyncd.service",
    "paccache.timer",
)
VBOX_SERVICES = ("vboxservice.service",)


def hosts_text(hostname: str) -> str:
    return (
        "127.0.0.1 localhost.localdomain localhost\n"
        "::1 localhost.localdomain localhost\n"
        f"127.0.0.1 {hostname}.localdomain {hostname}\n"
    )


def resolv_text(nameservers) -> str:
    return "".join(f"nameserver {ns}\n" for ns in nameservers)


def services_for(mode: InstallMode) -> list[str]:
    services = list(BASE_SERVICES)
    if mode is InstallMode.VIRTUALBOX:
        services += VBOX_SERVICES
    return services


def generate_fstab(mnt: str, dry_run: bool = False):
    res = run(["genfstab", "-U", mnt], dry_run=dry_run)
    write_text(target_path(mnt, "/etc/fstab"), res.out if not dry_run else "", append=True, dry_run=dry_run)


def link_sh_to_dash(mnt: str, dry_run: bool = False):
    run(["arch-chroot", mnt, "ln", "-sfT", "dash", "/usr/bin/sh"], dry_run=dry_run)


def set_hostname(mnt: str, hostname: str, dry_run: bool = False):
    write_text(target_path(mnt, "/etc/hostname"), hostname + "\n", dry_run=dry_run)
    write_text(target_path(mnt, "/etc/hosts"), hosts_text(hostname), append=True, dry_run=dry_run)


def set_locale(mnt: str, locale: str, dry_run: bool = False):
    write_text(target_path(mnt, "/etc/locale.gen"), locale + "\n", dry_run=dry_run)
    run(["arch-chroot", mnt, "locale-gen"], dry_run=dry_run)


def set_nameservers(mnt: str, nameservers, dry_run: bool = False):
    path = target_path(mnt, "/etc/resolv.conf")
    write_text(path, resolv_text(nameservers), append=True, dry_run=dry_run)
    # immutable so resolvconf/dhcpcd cannot replace it
    run(["chattr", "+i", path], dry_run=dry_run)


def store_audio_levels(mnt: str, dry_run: bool = False):
    run(["arch-chroot", mnt, "amixer", "-q", "sset", "Master", "100%"], dry_run=dry_run)
    run(["arch-chroot", mnt, "alsactl", "store"], dry_run=dry_run)


def set_timezone(mnt: str, timezone: str, dry_run: bool = False):
    zone = f"/usr/share/zoneinfo/{timezone}"
    run(["arch-chroot", mnt, "ln", "-sf", zone, "/etc/localtime"], dry_run=dry_run)


def enable_services(mnt: str, services, dry_run: bool = False):
    for unit in services:
        run(["arch-chroot", mnt, "systemctl", "enable", unit], dry_run=dry_run)


def configure_system(plan: InstallPlan, settings: Settings, dry_run: bool = False):
    mnt = settings.mnt
    generate_fstab(mnt, dry_run=dry_run)
    link_sh_to_dash(mnt, dry_run=dry_run)
    set_hostname(mnt, plan.hostname, dry_run=dry_run)
    set_locale(mnt, settings.locale, dry_run=dry_run)
    set_nameservers(mnt, settings.nameservers, dry_run=dry_run)
    if plan.mode.gui:
        store_audio_levels(mnt, dry_run=dry_run)
    set_timezone(mnt, settings.timezone, dry_run=dry_run)
    enable_services(mnt, services_for(plan.mode), dry_run=dry_run)
