from archcrypt import mounts
from archcrypt.devices import device_map


def test_format_filesystems(recorder, monkeypatch):
    monkeypatch.setattr(mounts, "run", recorder)
    mounts.format_filesystems(device_map("/dev/nvme0n1"))
    assert recorder.cmds == [
        ["mkswap", "/dev/mapper/volgroup0-swap"],
        ["mkfs.ext4", "-F", "/dev/mapper/volgroup0-root"],
        ["mkfs.vfat", "-F32", "-n", "EFI", "/dev/nvme0n1p1"],
    ]


def test_mount_targets_creates_boot(recorder, monkeypatch, tmp_path):
    monkeypatch.setattr(mounts, "run", recorder)
    mnt = tmp_path / "mnt"
    mnt.mkdir()
    mounts.mount_targets(device_map("/dev/sda"), str(mnt))

    assert (mnt / "boot").is_dir()
    assert recorder.cmds == [
        ["mount", "/dev/mapper/volgroup0-root", str(mnt)],
        ["swapon", "/dev/mapper/volgroup0-swap"],
        ["mount", "/dev/sda1", str(mnt / "boot")],
    ]


def test_mount_targets_dry_run_touches_nothing(recorder, monkeypatch, tmp_path):
    monkeypatch.setattr(mounts, "run", recorder)
    mounts.mount_targets(device_map("/dev/sda"), str(tmp_path / "mnt"), dry_run=True)
    assert not (tmp_path / "mnt").exists()
    assert ["mkdir", "-p", str(tmp_path / "mnt" / "boot")] in recorder.cmds


def test_unmount_all(recorder, monkeypatch):
    monkeypatch.setattr(mounts, "run", recorder)
    mounts.unmount_all("/mnt")
    assert recorder.cmds == [["umount", "-R", "/mnt"], ["swapoff", "-a"]]
