from types import SimpleNamespace

import pytest

from archcrypt import prompts
from archcrypt.errors import AbortedError, InputError, ValidationError
from archcrypt.model import Flags, InstallMode

ENV = {
    "TEST_MODE_MODE": "1",
    "TEST_MODE_HOSTNAME": "archtest",
    "TEST_MODE_USER": "testuser",
    "TEST_MODE_PASSWORD": "testpassword123",
    "TEST_MODE_DEVICE": "/dev/loop0",
    "TEST_MODE_LUKS_PASSWORD": "lukspassword123",
}


class FakeDialog:
    def __init__(self, answers):
        self.answers = list(answers)
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)
        answer = self.answers.pop(0)
        if isinstance(answer, int):
            return SimpleNamespace(returncode=answer, stdout="")
        return SimpleNamespace(returncode=0, stdout=answer + "\n")

    def kinds(self):
        return [next(a for a in call if a.startswith("--") and a != "--insecure") for call in self.calls]


@pytest.fixture
def no_hardware(monkeypatch):
    monkeypatch.setattr(prompts, "list_disks", lambda: [("/dev/nvme0n1", "477G"), ("/dev/sda", "32G")])
    monkeypatch.setattr(prompts, "has_nvidia_gpu", lambda: False)


def test_collect_inputs_reprompts_until_valid(monkeypatch, no_hardware):
    dialog = FakeDialog(
        ["1", "-bad", "", "box", "alice", "a", "b", "", "pw", "pw", "/dev/sda", "l", "l", 0]
    )
    monkeypatch.setattr(prompts, "_dialog", dialog)

    plan = prompts.collect_inputs(Flags())

    assert plan.mode is InstallMode.MINIMAL
    assert (plan.hostname, plan.user, plan.device) == ("box", "alice", "/dev/sda")
    assert plan.password == "pw" and plan.luks_password == "l"
    assert plan.video_driver == ""
    msgs = [call[1] for call in dialog.calls if call[0] == "--msgbox"]
    assert "invalid hostname" in msgs[0]
    assert msgs[1] == "passwords did not match"
    assert dialog.kinds()[-1] == "--yesno"
    disk_menu = dialog.calls[10]
    assert disk_menu[-4:] == ("/dev/nvme0n1", "477G", "/dev/sda", "32G")


def test_password_prompts_are_masked(monkeypatch, no_hardware):
    dialog = FakeDialog(["1", "box", "alice", "pw", "pw", "/dev/sda", "l", "l"])
    monkeypatch.setattr(prompts, "_dialog", dialog)
    prompts.collect_inputs(Flags(assume_yes=True))
    pw_calls = [call for call in dialog.calls if "--passwordbox" in call]
    assert len(pw_calls) == 4
    assert all(call[0] == "--insecure" for call in pw_calls)
    assert "--yesno" not in [a for call in dialog.calls for a in call]


def test_cancel_aborts(monkeypatch, no_hardware):
    monkeypatch.setattr(prompts, "_dialog", FakeDialog(["2", 1]))
    with pytest.raises(AbortedError):
        prompts.collect_inputs(Flags())


def test_declined_confirmation_aborts(monkeypatch, no_hardware):
    dialog = FakeDialog(["1", "box", "alice", "pw", "pw", "/dev/sda", "l", "l", 1])
    monkeypatch.setattr(prompts, "_dialog", dialog)
    with pytest.raises(AbortedError, match="declined"):
        prompts.collect_inputs(Flags())


def test_no_disks(monkeypatch):
    monkeypatch.setattr(prompts, "list_disks", lambda: [])
    monkeypatch.setattr(prompts, "_dialog", FakeDialog(["1", "box", "alice", "pw", "pw"]))
    with pytest.raises(InputError, match="no installation disk"):
        prompts.collect_inputs(Flags())


def test_video_driver_only_for_workstation_with_nvidia(monkeypatch):
    monkeypatch.setattr(prompts, "has_nvidia_gpu", lambda: True)
    monkeypatch.setattr(prompts, "_dialog", FakeDialog(["1"]))
    assert prompts.choose_video_driver(InstallMode.WORKSTATION) == "nvidia-340xx"
    assert prompts.choose_video_driver(InstallMode.VIRTUALBOX) == ""

    monkeypatch.setattr(prompts, "has_nvidia_gpu", lambda: False)
    assert prompts.choose_video_driver(InstallMode.WORKSTATION) == ""


def test_test_mode_reads_environment():
    plan = prompts.collect_inputs(Flags(test_mode=True), env=ENV)
    assert plan.mode is InstallMode.MINIMAL
    assert plan.device == "/dev/loop0"
    assert plan.luks_password == "lukspassword123"
    assert "lukspassword123" not in repr(plan)


def test_test_mode_rejects_bad_values():
    with pytest.raises(InputError, match="TEST_MODE_DEVICE"):
        prompts.inputs_from_env({k: v for k, v in ENV.items() if k != "TEST_MODE_DEVICE"})
    with pytest.raises(ValidationError, match="TEST_MODE_MODE"):
        prompts.inputs_from_env({**ENV, "TEST_MODE_MODE": "4"})
    with pytest.raises(ValidationError, match="hostname"):
        prompts.inputs_from_env({**ENV, "TEST_MODE_HOSTNAME": "bad_host"})
    with pytest.raises(ValidationError, match="video driver"):
        prompts.inputs_from_env({**ENV, "TEST_MODE_VIDEO_DRIVER": "fglrx"})


def test_ensure_dialog(recorder, monkeypatch):
    monkeypatch.setattr(prompts, "run", recorder)
    monkeypatch.setattr(prompts.shutil, "which", lambda name: None)

    prompts.ensure_dialog(Flags(test_mode=True))
    assert recorder.cmds == []

    prompts.ensure_dialog(Flags())
    assert recorder.cmds == [["pacman", "-Sy", "--noconfirm", "dialog"]]

    monkeypatch.setattr(prompts.shutil, "which", lambda name: "/usr/bin/dialog")
    prompts.ensure_dialog(Flags())
    assert len(recorder.cmds) == 1


def test_missing_dialog_binary(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError("dialog")

    monkeypatch.setattr(prompts.subprocess, "run", missing)
    with pytest.raises(prompts.PreflightError):
        prompts.inputbox("Enter hostname")
