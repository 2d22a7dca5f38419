"""Structural audit of a schedule table against its workload."""

from __future__ import annotations

from typing import Any

from wsn_verify.schedule import CellDecodeCache, IInstructionDecoder, ScheduleTable
from wsn_verify.workload import ITimingOracle


SAMPLE_LIMIT = 20


def build_audit_report(
    oracle: ITimingOracle,
    table: ScheduleTable,
    decoder: IInstructionDecoder,
) -> dict[str, Any]:
    """Check every cell of ``table`` for instructions the verifier cannot account for."""

    cells = CellDecodeCache(table, decoder)
    flow_links = {
        flow: set(zip(oracle.path_nodes(flow)[:-1], oracle.path_nodes(flow)[1:]))
        for flow in oracle.flow_ids()
    }

    unknown_flows: list[dict[str, Any]] = []
    off_path: list[dict[str, Any]] = []
    misplaced: list[dict[str, Any]] = []
    for time in range(table.row_count()):
        for column, record in cells.row_records(time):
            node = table.columns[column]
            sample = {
                "time": time,
                "node": node,
                "flow": record.flow,
                "link": f"{record.source}->{record.sink}",
            }
            if record.flow not in flow_links:
                unknown_flows.append(sample)
                continue
            if record.link not in flow_links[record.flow]:
                off_path.append(sample)
            if node not in record.link:
                misplaced.append(sample)

    undecodable = [
        {"time": time, "node": table.columns[column], "error": message}
        for (time, column), message in sorted(cells.failures.items())
    ]

    issues: list[dict[str, Any]] = []
    checks: dict[str, Any] = {}
    rules = (
        ("undecodable_cells", undecodable, "cells do not follow the instruction grammar"),
        ("unknown_flow_reference", unknown_flows, "instructions reference flows outside the workload"),
        ("off_path_link", off_path, "instructions use a link that is not a hop of their flow"),
        ("column_mismatch", misplaced, "instructions placed at a node that is neither source nor sink"),
    )
    for rule, samples, message in rules:
        if samples:
            issues.append(
                {
                    "rule": rule,
                    "severity": "error",
                    "message": message,
                    "count": len(samples),
                    "samples": samples[:SAMPLE_LIMIT],
                }
            )
        checks[rule] = {"passed": not samples}

    return {
        "status": "pass" if not issues else "fail",
        "issue_count": len(issues),
        "issues": issues,
        "checks": checks,
    }
