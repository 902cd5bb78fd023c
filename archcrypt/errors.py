"""Installer error types."""

from __future__ import annotations


class InstallError(RuntimeError):
    """Base class for failures the CLI reports as a result kind."""


class InputError(InstallError):
    """Required input is missing or unusable."""


class ValidationError(InputError):
    """A value was supplied but does not pass its format check."""


class AbortedError(InstallError):
    """The operator cancelled a prompt."""


class PreflightError(InstallError):
    """The live environment cannot run the install."""


class RefuseSafeError(InstallError):
    """The target disk backs the running system."""


class StepError(InstallError):
    """An install phase failed; ``result`` is the kind the CLI reports."""

    def __init__(
        self,
        phase: str,
        cmd=(),
        rc: int | None = None,
        *,
        result: str = "FAIL_GENERIC",
        stderr: str = "",
        detail: str = "",
    ):
        self.phase = phase
        self.cmd = [str(c) for c in cmd] if isinstance(cmd, (list, tuple)) else [str(cmd)]
        self.rc = rc
        self.result = result
        self.stderr = stderr
        self.detail = detail
        what = " ".join(self.cmd) if self.cmd else detail
        super().__init__(f"Error in {phase}: {what}")
