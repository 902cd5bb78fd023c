"""CLI entrypoint for the encrypted Arch Linux installer."""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from dataclasses import asdict
from typing import Any, Dict, Optional

from . import safety
from .errors import AbortedError, InputError, PreflightError, RefuseSafeError, StepError
from .executil import append_jsonl, resolve_log_path, trace
from .install import planned_steps, run_install
from .model import Flags, Settings
from .prompts import collect_inputs, ensure_dialog

RESULT_CODES: Dict[str, int] = {
    "PLAN_OK": 0,
    "DRYRUN_OK": 0,
    "INSTALL_OK": 0,
    "FAIL_ABORTED": 1,
    "FAIL_INPUT": 2,
    "FAIL_LIVE_DISK_GUARD": 2,
    "FAIL_INVALID_DEVICE": 2,
    "FAIL_PREFLIGHT": 3,
    "FAIL_PARTITIONING": 4,
    "FAIL_LUKS": 5,
    "FAIL_LVM": 6,
    "FAIL_MKFS": 6,
    "FAIL_PACSTRAP": 7,
    "FAIL_CONFIG": 8,
    "FAIL_AUR": 8,
    "FAIL_USERS": 8,
    "FAIL_GENERIC": 9,
    "FAIL_CLEANUP": 10,
    "FAIL_BOOTLOADER": 11,
    "FAIL_UNHANDLED": 12,
}

CLI_START_MONO = time.perf_counter()
JSON_OUTPUT_ENABLED = True


def _emit_result(kind: str, extra: Optional[Dict[str, Any]] = None) -> None:
    payload: Dict[str, Any] = {"result": kind, "ts": int(time.time())}
    if extra:
        payload.update(extra)
    payload["timing_total_ms"] = int(max(0.0, (time.perf_counter() - CLI_START_MONO) * 1000))
    log_path = resolve_log_path()
    if log_path:
        payload.setdefault("log_path", log_path)
        append_jsonl(log_path, payload)
    if JSON_OUTPUT_ENABLED:
        print(json.dumps(payload, sort_keys=True, separators=(",", ":")))
    else:
        why = payload.get("why") or payload.get("error") or ""
        print(f"result={kind} why={why} log_path={payload.get('log_path', '')}")
    raise SystemExit(RESULT_CODES.get(kind, 1))


def build_parser() -> argparse.ArgumentParser:
    defaults = Settings()
    parser = argparse.ArgumentParser(
        prog="archcrypt",
        description="Install Arch Linux onto a LUKS2 + LVM disk. Destroys the selected disk.",
    )
    parser.add_argument("--plan", action="store_true", help="list the install phases and exit")
    parser.add_argument("--dry-run", action="store_true", help="echo commands instead of running them")
    parser.add_argument("--test-mode", action="store_true", help="read inputs from TEST_MODE_* variables")
    parser.add_argument("--yes", dest="assume_yes", action="store_true", help="skip the wipe confirmation")
    parser.add_argument("--mnt", default=defaults.mnt)
    parser.add_argument("--swap-size", default=defaults.swap_size)
    parser.add_argument("--timezone", default=defaults.timezone)
    parser.add_argument("--mirror-country", default=defaults.mirror_country)
    parser.add_argument("--dotfiles-repo", default=defaults.dotfiles_repo)
    parser.add_argument("--json", dest="json", action="store_true", default=True)
    parser.add_argument("--no-json", dest="json", action="store_false")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        mnt=args.mnt,
        swap_size=args.swap_size,
        timezone=args.timezone,
        mirror_country=args.mirror_country,
        dotfiles_repo=args.dotfiles_repo,
    )


def _main_impl(argv: Optional[list[str]] = None) -> int:
    global JSON_OUTPUT_ENABLED
    args = build_parser().parse_args(argv)
    JSON_OUTPUT_ENABLED = bool(args.json)

    flags = Flags(
        plan=args.plan,
        dry_run=args.dry_run,
        test_mode=args.test_mode,
        assume_yes=args.assume_yes,
    )
    settings = settings_from_args(args)
    trace("cli.args", **asdict(flags), mnt=settings.mnt)

    if flags.plan:
        _emit_result("PLAN_OK", {"steps": planned_steps(), "settings": asdict(settings)})

    try:
        safety.preflight_host(dry_run=flags.dry_run)
        ensure_dialog(flags)
        plan = collect_inputs(flags)
    except AbortedError as exc:
        _emit_result("FAIL_ABORTED", {"why": str(exc)})
    except InputError as exc:
        _emit_result("FAIL_INPUT", {"why": str(exc)})
    except PreflightError as exc:
        _emit_result("FAIL_PREFLIGHT", {"why": str(exc)})

    summary = plan.summary()
    if not flags.dry_run and not os.path.exists(plan.device):
        _emit_result("FAIL_INVALID_DEVICE", {"device": plan.device})

    try:
        safety.require_safe_target(plan.device)
    except RefuseSafeError as exc:
        _emit_result("FAIL_LIVE_DISK_GUARD", {"why": str(exc), "device": plan.device})

    try:
        phases = run_install(plan, settings, dry_run=flags.dry_run)
    except StepError as exc:
        print(f"archcrypt: {exc}", file=sys.stderr)
        extra = {"why": str(exc), "phase": exc.phase, "cmd": exc.cmd, "rc": exc.rc, **summary}
        if exc.stderr:
            extra["stderr"] = exc.stderr
        _emit_result(exc.result, extra)
    except InputError as exc:
        _emit_result("FAIL_INPUT", {"why": str(exc)})

    kind = "DRYRUN_OK" if flags.dry_run else "INSTALL_OK"
    _emit_result(kind, {"phases": phases, **summary})
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    try:
        return _main_impl(argv)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _emit_result("FAIL_ABORTED", {"why": "interrupted"})
    except Exception as exc:  # noqa: BLE001
        _emit_result("FAIL_UNHANDLED", {"error": str(exc)})
    return 0


if __name__ == "__main__":
    sys.exit(main())
