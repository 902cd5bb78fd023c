"""The fixed install sequence, one phase after another."""

from __future__ import annotations

import subprocess
from typing import Callable, NamedTuple

from . import aur, bootloader, luks_lvm, mounts, packages, partitioning, pacman_conf, system_config, users
from .devices import device_map
from .errors import InstallError, StepError
from .executil import announce, trace
from .model import DeviceMap, InstallPlan, Settings


class Phase(NamedTuple):
    name: str
    result: str
    title: str
    action: Callable[[InstallPlan, Settings, DeviceMap, bool], None]


def _partition(plan, settings, dm, dry_run):
    partitioning.precleanup(dm, settings.mnt, dry_run=dry_run)
    partitioning.apply_layout(dm.device, settings.esp_size, dry_run=dry_run)
    partitioning.verify_layout(dm, dry_run=dry_run)


def _encrypt(plan, settings, dm, dry_run):
    luks_lvm.format_luks(dm.luks, plan.luks_password, dry_run=dry_run)
    luks_lvm.open_luks(dm.luks, dm.luks_name, plan.luks_password, dry_run=dry_run)


def _volumes(plan, settings, dm, dry_run):
    luks_lvm.make_volumes(dm, settings.swap_size, dry_run=dry_run)


def _filesystems(plan, settings, dm, dry_run):
    mounts.format_filesystems(dm, dry_run=dry_run)
    mounts.mount_targets(dm, settings.mnt, dry_run=dry_run)


def _pacstrap(plan, settings, dm, dry_run):
    selected = packages.select_packages(plan.mode, plan.video_driver)
    packages.update_mirrorlist(settings.mirror_country, dry_run=dry_run)
    packages.pacstrap(settings.mnt, selected, dry_run=dry_run)


def _general(plan, settings, dm, dry_run):
    system_config.configure_system(plan, settings, dry_run=dry_run)


def _pacman(plan, settings, dm, dry_run):
    pacman_conf.configure_pacman(settings.mnt, plan.user, dry_run=dry_run)


def _aur(plan, settings, dm, dry_run):
    aur.install_paru(settings, dry_run=dry_run)


def _users(plan, settings, dm, dry_run):
    users.setup_users(plan, settings, dry_run=dry_run)


def _boot(plan, settings, dm, dry_run):
    bootloader.build_initramfs(settings.mnt, dry_run=dry_run)
    bootloader.install_grub(dm, settings.mnt, dry_run=dry_run)


def _cleanup(plan, settings, dm, dry_run):
    mounts.unmount_all(settings.mnt, dry_run=dry_run)


PHASES = (
    Phase("partition", "FAIL_PARTITIONING", "Partitioning disk", _partition),
    Phase("encrypt", "FAIL_LUKS", "Creating LUKS2 container", _encrypt),
    Phase("volumes", "FAIL_LVM", "Creating LVM volumes", _volumes),
    Phase("filesystems", "FAIL_MKFS", "Formatting and mounting", _filesystems),
    Phase("pacstrap", "FAIL_PACSTRAP", "Installing packages", _pacstrap),
    Phase("general", "FAIL_CONFIG", "Configuring system", _general),
    Phase("pacman", "FAIL_CONFIG", "Configuring pacman", _pacman),
    Phase("aur", "FAIL_AUR", "Building AUR helper", _aur),
    Phase("users", "FAIL_USERS", "Creating users", _users),
    Phase("boot", "FAIL_BOOTLOADER", "Installing initramfs and bootloader", _boot),
    Phase("cleanup", "FAIL_CLEANUP", "Releasing mounts", _cleanup),
)


def planned_steps() -> list[str]:
    return [f"{p.name}: {p.title}" for p in PHASES]


def run_phase(phase: Phase, plan: InstallPlan, settings: Settings, dm: DeviceMap, dry_run: bool):
    announce("INFO", phase.title, phase=phase.name)
    trace("install.phase.start", phase=phase.name)
    try:
        phase.action(plan, settings, dm, dry_run)
    except InstallError:
        raise
    except subprocess.CalledProcessError as exc:
        raise StepError(
            phase.name, exc.cmd, exc.returncode, result=phase.result, stderr=(exc.stderr or "")[-2000:]
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise StepError(phase.name, exc.cmd, result=phase.result, detail="timed out") from exc
    except (OSError, RuntimeError) as exc:
        raise StepError(phase.name, result=phase.result, detail=str(exc)) from exc
    trace("install.phase.done", phase=phase.name)


def run_install(plan: InstallPlan, settings: Settings, dry_run: bool = False) -> list[str]:
    """Run every phase in order; the first failure stops the run."""

    dm = device_map(plan.device, settings)
    done = []
    for phase in PHASES:
        run_phase(phase, plan, settings, dm, dry_run)
        done.append(phase.name)
    return done
