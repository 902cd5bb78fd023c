from archcrypt import luks_lvm
from archcrypt.devices import device_map


def test_format_and_open_keep_password_off_argv(recorder, monkeypatch):
    monkeypatch.setattr(luks_lvm, "run", recorder)
    monkeypatch.setattr(luks_lvm, "udev_settle", lambda dry_run=False: recorder(["udevadm", "settle"]))

    luks_lvm.format_luks("/dev/sda2", "s3cret")
    luks_lvm.open_luks("/dev/sda2", "cryptlvm", "s3cret")

    assert ["cryptsetup", "-q", "luksFormat", "--type", "luks2", "/dev/sda2", "-"] in recorder.cmds
    assert ["cryptsetup", "open", "/dev/sda2", "cryptlvm", "-"] in recorder.cmds
    assert recorder.kwargs_for("cryptsetup", "-q")["input"] == "s3cret"
    assert recorder.kwargs_for("cryptsetup", "open")["input"] == "s3cret"
    assert not any("s3cret" in part for cmd in recorder.cmds for part in cmd)


def test_make_volumes(recorder, monkeypatch):
    monkeypatch.setattr(luks_lvm, "run", recorder)
    monkeypatch.setattr(luks_lvm, "udev_settle", lambda dry_run=False: recorder(["udevadm", "settle"]))
    luks_lvm.make_volumes(device_map("/dev/sda"), "2G")

    assert recorder.cmds[:4] == [
        ["pvcreate", "/dev/mapper/cryptlvm"],
        ["vgcreate", "volgroup0", "/dev/mapper/cryptlvm"],
        ["lvcreate", "-L", "2G", "volgroup0", "-n", "swap"],
        ["lvcreate", "-l", "100%FREE", "volgroup0", "-n", "root"],
    ]


def test_close_helpers(recorder, monkeypatch):
    monkeypatch.setattr(luks_lvm, "run", recorder)
    monkeypatch.setattr(luks_lvm, "udev_settle", lambda dry_run=False: recorder(["udevadm", "settle"]))
    luks_lvm.deactivate_vg("volgroup0")
    luks_lvm.close_luks("cryptlvm")
    assert recorder.cmds == [["vgchange", "-an", "volgroup0"], ["cryptsetup", "close", "cryptlvm"]]
