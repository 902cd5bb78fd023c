"""Disk discovery and partition naming."""
from __future__ import annotations

import re

from .executil import run, trace
from .model import DeviceMap, Settings

_SKIP_RE = re.compile(r"boot|rpmb|loop")


def partition_suffix(device: str) -> str:
    # nvme0n1, mmcblk0 and loop0 need a ``p`` before the partition index.
    base = device.rstrip("/") or device
    return "p" if base[-1:].isdigit() else ""


def partition_path(device: str, number: int | str) -> str:
    return f"{device}{partition_suffix(device)}{number}"


def device_map(device: str, settings: Settings | None = None) -> DeviceMap:
    settings = settings or Settings()
    return DeviceMap(
        device=device,
        esp=partition_path(device, 1),
        luks=partition_path(device, 2),
        luks_name=settings.luks_name,
        vg=settings.vg,
    )


def list_disks() -> list[tuple[str, str]]:
    """Return ``(path, size)`` for candidate install disks, largest first."""

    out = run(["lsblk", "-dplnx", "size", "-o", "name,size"], check=True).out
    disks = []
    for line in (out or "").splitlines():
        parts = line.split()
        if len(parts) < 2 or _SKIP_RE.search(line):
            continue
        disks.append((parts[0], parts[1]))
    disks.reverse()
    trace("devices.list", disks=disks)
    return disks


def has_nvidia_gpu() -> bool:
    res = run(["lspci"], check=False)
    for line in (res.out or "").splitlines():
        if ("VGA" in line or "3D" in line) and "NVIDIA" in line:
            return True
    return False
