from __future__ import annotations

"""Subprocess wrapper, dry-run hook and JSONL trace log."""

import datetime as _dt
import json
import os
import shlex
import subprocess
import sys
import time
from typing import Callable, Sequence

from .paths import archcrypt_logs_dir


LOG_DIRS: list[str] | None = None
LOG_PATH: str | None = None
LOG_NAME = "archcrypt.jsonl"


def _log_dirs() -> list[str]:
    if LOG_DIRS:
        return list(LOG_DIRS)
    return [
        archcrypt_logs_dir(),
        "/var/log/archcrypt",
        "/tmp/archcrypt-logs",
    ]


def _ensure_logger() -> str | None:
    global LOG_PATH
    if LOG_PATH:
        return LOG_PATH
    for d in _log_dirs():
        d_expanded = os.path.expanduser(d)
        try:
            os.makedirs(d_expanded, exist_ok=True)
        except OSError:
            continue
        LOG_PATH = os.path.join(d_expanded, LOG_NAME)
        return LOG_PATH
    LOG_PATH = None
    return None


def resolve_log_path() -> str | None:
    """Return the active log path, creating directories when possible."""

    return _ensure_logger()


class Result:
    def __init__(self, rc: int, out: str, err: str, duration: float):
        self.rc, self.out, self.err, self.duration = rc, out, err, duration


LEVELS = {"TRACE": 10, "INFO": 20, "WARN": 30, "ERROR": 40, "NONE": 100}
LOG_LEVEL = os.environ.get("ARCHCRYPT_LOG_LEVEL", "TRACE").upper()


def append_jsonl(path: str, obj: dict):
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(obj, ensure_ascii=False) + "\n")
    except OSError:
        pass


def log(level: str, event: str, **fields):
    lvl = LEVELS.get(level.upper(), 100)
    cur = LEVELS.get(LOG_LEVEL, 100)
    if lvl < cur:
        return
    ts = _dt.datetime.now(_dt.timezone.utc).isoformat()
    rec = {"ts": ts, "level": level.upper(), "event": event}
    rec.update(fields)
    path = _ensure_logger()
    if path:
        append_jsonl(path, rec)


def trace(event: str, **fields):
    log("TRACE", event, **fields)


def announce(level: str, message: str, **fields):
    """Print an operator-facing ``[LEVEL] message`` line and log it."""

    print(f"[{level.upper()}] {message}", file=sys.stderr, flush=True)
    log(level, "announce", message=message, **fields)


def format_cmd(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(c) for c in cmd)


def run(
    cmd: Sequence[str],
    check: bool = True,
    dry_run: bool = False,
    timeout: float | None = 60.0,
    env: dict | None = None,
    input: str | None = None,
    stream: bool = False,
) -> Result:
    """Run ``cmd`` and return its :class:`Result`.

    ``input`` is fed on stdin and is never written to the log, only its
    length.  With ``stream`` the child inherits the terminal so long-running
    tools (pacstrap, makepkg) show their own progress; ``out``/``err`` are
    empty in that case.
    """

    fields = {"cmd": list(cmd)}
    if input is not None:
        fields["stdin_len"] = len(input)
    trace("exec.start", dry_run=dry_run, **fields)
    if dry_run:
        text = "DRY-RUN: " + format_cmd(cmd)
        print(text, flush=True)
        return Result(0, text, "", 0.0)
    started = time.time()
    env2 = (env or os.environ).copy()
    env2.setdefault("ARCHCRYPT_LOG_LEVEL", LOG_LEVEL)
    try:
        if stream:
            proc = subprocess.run(list(cmd), input=input, text=True, timeout=timeout, env=env2)
        else:
            proc = subprocess.run(
                list(cmd), input=input, capture_output=True, text=True, timeout=timeout, env=env2
            )
    except subprocess.TimeoutExpired:
        trace("exec.timeout", cmd=list(cmd), timeout=timeout)
        raise
    except FileNotFoundError:
        trace("exec.missing", cmd=list(cmd))
        raise
    dur = time.time() - started
    out = proc.stdout or ""
    err = proc.stderr or ""
    trace("exec.done", cmd=list(cmd), rc=proc.returncode, dur=dur, out=out[-2000:], err=err[-2000:])
    if check and proc.returncode != 0:
        raise subprocess.CalledProcessError(proc.returncode, list(cmd), out, err)
    return Result(proc.returncode, out, err, dur)


def udev_settle(dry_run: bool = False):
    try:
        run(["udevadm", "settle"], check=False, dry_run=dry_run)
    except (OSError, subprocess.TimeoutExpired):
        pass


def write_text(
    path: str,
    data: str,
    *,
    append: bool = False,
    mode: int | None = None,
    dry_run: bool = False,
):
    """Write ``data`` to ``path``, creating parent directories."""

    trace("file.write", path=path, append=append, size=len(data), dry_run=dry_run)
    if dry_run:
        print(f"DRY-RUN: {'append' if append else 'write'} {path}", flush=True)
        return
    os.makedirs(os.path.dirname(path), exist_ok=True)
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    # created with the final mode so it is never readable beyond it
    fd = os.open(path, flags, 0o666 if mode is None else mode)
    with os.fdopen(fd, "a" if append else "w", encoding="utf-8") as f:
        f.write(data)
        try:
            f.flush()
            os.fsync(f.fileno())
        except OSError:
            pass
    if mode is not None:
        os.chmod(path, mode)


def edit_text(path: str, transform: Callable[[str], str], *, dry_run: bool = False) -> bool:
    """Rewrite ``path`` through ``transform``; return True when it changed."""

    trace("file.edit", path=path, dry_run=dry_run)
    if dry_run:
        print(f"DRY-RUN: edit {path}", flush=True)
        return False
    with open(path, "r", encoding="utf-8") as f:
        current = f.read()
    updated = transform(current)
    if updated == current:
        return False
    write_text(path, updated)
    return True
