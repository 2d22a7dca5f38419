from __future__ import annotations

import csv
import json
from pathlib import Path

import yaml

from wsn_verify.cli.main import main


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _write_config(tmp_path: Path, mutate) -> Path:
    payload = yaml.safe_load((EXAMPLES / "multi_hop.yaml").read_text(encoding="utf-8"))
    mutate(payload)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def test_cli_validate_ok(capsys) -> None:
    code = main(["validate", "-c", str(EXAMPLES / "multi_hop.yaml")])
    assert code == 0
    assert "[OK] config validation passed" in capsys.readouterr().out


def test_cli_validate_missing_file(tmp_path: Path, capsys) -> None:
    code = main(["validate", "-c", str(tmp_path / "nope.yaml")])
    assert code == 1
    assert "config file not found" in capsys.readouterr().out


def test_cli_validate_rejects_bad_deadline(tmp_path: Path, capsys) -> None:
    def mutate(payload) -> None:
        payload["flows"][0]["deadline"] = 12

    code = main(["validate", "-c", str(_write_config(tmp_path, mutate))])
    assert code == 1
    assert "exceeds period" in capsys.readouterr().out


def test_cli_verify_prints_report(capsys) -> None:
    code = main(["verify", "-c", str(EXAMPLES / "single_hop.yaml")])
    out = capsys.readouterr().out
    assert code == 0
    assert "Maximum latency for F:0 is 4" in out
    assert "[OK] verification completed, instances=1, misses=0, unknown=0" in out


def test_cli_verify_writes_outputs(tmp_path: Path) -> None:
    report_out = tmp_path / "report.txt"
    table_out = tmp_path / "table.csv"
    metrics_out = tmp_path / "metrics.json"
    events_out = tmp_path / "events.jsonl"

    code = main(
        [
            "verify",
            "-c",
            str(EXAMPLES / "multi_hop.yaml"),
            "--report-out",
            str(report_out),
            "--table-out",
            str(table_out),
            "--metrics-out",
            str(metrics_out),
            "--events-out",
            str(events_out),
        ]
    )
    assert code == 0

    lines = report_out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Maximum latency for F0:0 is 4"
    assert lines[1] == "Maximum latency for F0:1 is 9 => DEADLINE MISS"

    with table_out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["flow"] + [str(slot) for slot in range(20)]
    assert [row[0] for row in rows[1:]] == ["F0", "F1"]

    metrics = json.loads(metrics_out.read_text(encoding="utf-8"))
    assert metrics["deadline_miss_count"] == 1
    assert metrics["hyperperiod"] == 20

    first_event = json.loads(events_out.read_text(encoding="utf-8").splitlines()[0])
    assert first_event["type"] == "FlowReleased"


def test_cli_fail_on_miss_sets_exit_code(tmp_path: Path) -> None:
    report_out = tmp_path / "report.txt"
    assert main(["verify", "-c", str(EXAMPLES / "multi_hop.yaml"), "--report-out", str(report_out), "--fail-on-miss"]) == 2
    assert main(["verify", "-c", str(EXAMPLES / "single_hop.yaml"), "--report-out", str(report_out), "--fail-on-miss"]) == 0


def test_cli_policy_override(tmp_path: Path) -> None:
    metrics_out = tmp_path / "metrics.json"
    code = main(
        [
            "verify",
            "-c",
            str(EXAMPLES / "multi_hop.yaml"),
            "--policy",
            "all_links",
            "--report-out",
            str(tmp_path / "report.txt"),
            "--metrics-out",
            str(metrics_out),
        ]
    )
    assert code == 0
    assert json.loads(metrics_out.read_text(encoding="utf-8"))["completion_policy"] == "all_links"


def test_cli_verify_audit(tmp_path: Path) -> None:
    audit_out = tmp_path / "audit.json"
    code = main(
        [
            "verify",
            "-c",
            str(EXAMPLES / "multi_hop.yaml"),
            "--report-out",
            str(tmp_path / "report.txt"),
            "--audit-out",
            str(audit_out),
        ]
    )
    assert code == 0
    assert json.loads(audit_out.read_text(encoding="utf-8"))["status"] == "pass"


def test_cli_verify_audit_failure_returns_two(tmp_path: Path) -> None:
    def mutate(payload) -> None:
        payload["schedule"]["cells"].append({"time": 5, "node": "A", "content": "push(F0: A->C)"})

    audit_out = tmp_path / "audit.json"
    code = main(
        [
            "verify",
            "-c",
            str(_write_config(tmp_path, mutate)),
            "--report-out",
            str(tmp_path / "report.txt"),
            "--audit-out",
            str(audit_out),
        ]
    )
    assert code == 2
    assert json.loads(audit_out.read_text(encoding="utf-8"))["issues"][0]["rule"] == "off_path_link"


def test_cli_replay_outputs(tmp_path: Path) -> None:
    events_out = tmp_path / "replay.jsonl"
    metrics_out = tmp_path / "replay.json"
    code = main(
        [
            "replay",
            "-c",
            str(EXAMPLES / "multi_hop.yaml"),
            "--events-out",
            str(events_out),
            "--metrics-out",
            str(metrics_out),
        ]
    )
    assert code == 0
    assert len(events_out.read_text(encoding="utf-8").splitlines()) == 12
    assert json.loads(metrics_out.read_text(encoding="utf-8"))["active_slots"] == 9


def test_cli_replay_rejects_non_positive_until(capsys) -> None:
    code = main(["replay", "-c", str(EXAMPLES / "multi_hop.yaml"), "--until", "0"])
    assert code == 1
    assert "--until must be > 0" in capsys.readouterr().out
