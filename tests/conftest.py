from types import SimpleNamespace

import pytest

from archcrypt import executil


class Recorder:
    """Stand-in for ``executil.run`` that records commands.

    ``outputs`` maps a command prefix tuple to the stdout returned for it.
    """

    def __init__(self, outputs=None):
        self.calls = []
        self.outputs = dict(outputs or {})

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append((cmd, kwargs))
        out = ""
        for prefix, text in self.outputs.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                out = text
        return SimpleNamespace(rc=0, out=out, err="", duration=0.0)

    @property
    def cmds(self):
        return [cmd for cmd, _ in self.calls]

    def kwargs_for(self, *prefix):
        for cmd, kwargs in self.calls:
            if tuple(cmd[: len(prefix)]) == prefix:
                return kwargs
        raise AssertionError(f"no call starting with {prefix}")


@pytest.fixture(autouse=True)
def isolated_log(tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(executil, "LOG_DIRS", [str(log_dir)])
    monkeypatch.setattr(executil, "LOG_PATH", None)
    return log_dir


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_recorder():
    return Recorder
