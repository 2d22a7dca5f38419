"""CLI entrypoint for schedule validation, verification and replay."""

from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Any

from wsn_verify.analysis import build_audit_report
from wsn_verify.core import LatencyVerifier, ModelError, ScheduleReplay
from wsn_verify.io import ConfigError, ConfigLoader
from wsn_verify.model import CompletionPolicy


def _write_jsonl(path: str, rows: list[dict[str, Any]]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def _write_json(path: str, payload: dict[str, Any]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _write_text(path: str, lines: list[str]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _write_rows_csv(path: str, rows: list[list[str]]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(rows)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


def cmd_validate(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
        # Bind-time preconditions must hold as well.
        LatencyVerifier().build(spec)
    except (ConfigError, ValueError) as exc:
        print(f"[ERROR] {args.config}: {exc}")
        return 1
    print("[OK] config validation passed")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1

    verifier = LatencyVerifier()
    try:
        verifier.build(spec, completion_policy=args.policy)
    except ModelError as exc:
        print(f"[ERROR] {exc}")
        return 1

    table = verifier.build_latency_table()
    lines = verifier.build_latency_report()
    metrics = verifier.metric_report()

    if args.report_out:
        _write_text(args.report_out, lines)
    else:
        for line in lines:
            print(line)
    if args.table_out:
        _write_rows_csv(args.table_out, table.to_rows())
    if args.metrics_out:
        _write_json(args.metrics_out, metrics)
    if args.events_out:
        _write_jsonl(args.events_out, [event.model_dump(mode="json") for event in verifier.events])
    if args.audit_out:
        audit_report = build_audit_report(verifier.oracle, verifier.schedule_table, verifier.decoder)
        _write_json(args.audit_out, audit_report)
        if audit_report["status"] != "pass":
            print(f"[ERROR] schedule audit failed, report={args.audit_out}")
            return 2

    print(
        f"[OK] verification completed, instances={metrics['instances']}, "
        f"misses={metrics['deadline_miss_count']}, unknown={metrics['unknown']}"
    )
    if args.fail_on_miss and not metrics["schedulable"]:
        print("[ERROR] schedule has deadline misses or unverified instances")
        return 2
    return 0


def cmd_replay(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    loader = ConfigLoader()
    try:
        spec = loader.load(args.config)
    except ConfigError as exc:
        print(f"[ERROR] {exc}")
        return 1
    if args.until is not None and args.until <= 0:
        print("[ERROR] --until must be > 0")
        return 1

    replay = ScheduleReplay()
    replay.build(spec)
    replay.run(until=args.until)

    events = [event.model_dump(mode="json") for event in replay.events]
    metrics = replay.metric_report()
    events_out = args.events_out or "artifacts/replay_events.jsonl"
    metrics_out = args.metrics_out or "artifacts/replay_metrics.json"
    _write_jsonl(events_out, events)
    _write_json(metrics_out, metrics)
    print(f"[OK] replay completed, events={len(events)}, now={replay.now}, metrics={metrics_out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wsn-verify", description="Time-triggered WSN schedule verifier")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="validate config file")
    validate_parser.add_argument("-c", "--config", required=True, help="path to config YAML/JSON")
    validate_parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    validate_parser.set_defaults(func=cmd_validate)

    verify_parser = subparsers.add_parser("verify", help="verify flow latencies against the schedule")
    verify_parser.add_argument("-c", "--config", required=True, help="path to config YAML/JSON")
    verify_parser.add_argument("--report-out", default=None, help="path to write the latency report")
    verify_parser.add_argument("--table-out", default=None, help="path to write the latency table CSV")
    verify_parser.add_argument("--metrics-out", default=None, help="path to write metric JSON")
    verify_parser.add_argument("--events-out", default=None, help="path to write JSONL trace events")
    verify_parser.add_argument("--audit-out", default=None, help="path to write schedule audit JSON")
    verify_parser.add_argument(
        "--policy",
        choices=[policy.value for policy in CompletionPolicy],
        default=None,
        help="override analysis.completion_policy",
    )
    verify_parser.add_argument(
        "--fail-on-miss",
        action="store_true",
        help="return non-zero when any instance misses its deadline or stays unknown",
    )
    verify_parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    verify_parser.set_defaults(func=cmd_verify)

    replay_parser = subparsers.add_parser("replay", help="replay the schedule slot by slot")
    replay_parser.add_argument("-c", "--config", required=True, help="path to config YAML/JSON")
    replay_parser.add_argument("--until", type=int, default=None, help="override replay horizon")
    replay_parser.add_argument("--events-out", default=None, help="path to write JSONL events")
    replay_parser.add_argument("--metrics-out", default=None, help="path to write metric JSON")
    replay_parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    replay_parser.set_defaults(func=cmd_replay)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
