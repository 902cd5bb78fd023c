from types import SimpleNamespace

from archcrypt import devices
from archcrypt.model import Settings


def test_partition_suffix():
    assert devices.partition_suffix("/dev/nvme0n1") == "p"
    assert devices.partition_suffix("/dev/mmcblk0") == "p"
    assert devices.partition_suffix("/dev/loop0") == "p"
    assert devices.partition_suffix("/dev/sda") == ""
    assert devices.partition_suffix("/dev/vdb") == ""


def test_partition_path():
    assert devices.partition_path("/dev/nvme0n1", 1) == "/dev/nvme0n1p1"
    assert devices.partition_path("/dev/nvme0n1", "2") == "/dev/nvme0n1p2"
    assert devices.partition_path("/dev/sda", 1) == "/dev/sda1"
    assert devices.partition_path("/dev/sda", 2) == "/dev/sda2"


def test_device_map_uses_settings():
    dm = devices.device_map("/dev/nvme0n1", Settings(vg="vg1", luks_name="crypt"))
    assert dm.esp == "/dev/nvme0n1p1"
    assert dm.luks == "/dev/nvme0n1p2"
    assert dm.mapper == "/dev/mapper/crypt"
    assert dm.root_lv == "/dev/mapper/vg1-root"
    assert dm.swap_lv == "/dev/mapper/vg1-swap"


def test_list_disks_filters_and_orders(make_recorder, monkeypatch):
    listing = (
        "/dev/loop0      700M\n"
        "/dev/mmcblk0boot0 4M\n"
        "/dev/sda         32G\n"
        "/dev/nvme0n1    477G\n"
    )
    rec = make_recorder({("lsblk",): listing})
    monkeypatch.setattr(devices, "run", rec)

    assert devices.list_disks() == [("/dev/nvme0n1", "477G"), ("/dev/sda", "32G")]
    assert rec.cmds[0] == ["lsblk", "-dplnx", "size", "-o", "name,size"]


def test_has_nvidia_gpu(monkeypatch):
    out = "01:00.0 VGA compatible controller: NVIDIA Corporation GP104\n"
    monkeypatch.setattr(devices, "run", lambda cmd, **kwargs: SimpleNamespace(rc=0, out=out))
    assert devices.has_nvidia_gpu()

    out = "00:02.0 VGA compatible controller: Intel Corporation UHD 620\n01:00.0 Audio device: NVIDIA\n"
    monkeypatch.setattr(devices, "run", lambda cmd, **kwargs: SimpleNamespace(rc=0, out=out))
    assert not devices.has_nvidia_gpu()
