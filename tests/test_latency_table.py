from __future__ import annotations

from pathlib import Path

from wsn_verify.core import InstanceScanner, LatencyTable, LatencyTableBuilder, LatencyVerifier
from wsn_verify.io import ConfigLoader
from wsn_verify.model import CompletionPolicy, Marker
from wsn_verify.schedule import CellDecodeCache, PushPullDecoder, ScheduleTable
from wsn_verify.workload import PeriodicWorkload


EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def _builder(name: str, policy: CompletionPolicy = CompletionPolicy.FINAL_LINK) -> LatencyTableBuilder:
    spec = ConfigLoader().load(str(EXAMPLES / name))
    oracle = PeriodicWorkload.from_spec(spec)
    table = ScheduleTable.from_spec(spec, slots=oracle.hyperperiod())
    cells = CellDecodeCache(table, PushPullDecoder())
    return LatencyTableBuilder(oracle, cells, InstanceScanner(oracle, cells, policy))


def test_table_shape_follows_flows_and_schedule_rows() -> None:
    table = _builder("multi_hop.yaml").build()
    assert table.flow_ids == ["F0", "F1"]
    assert table.slot_count == 20


def test_multi_hop_markers() -> None:
    table = _builder("multi_hop.yaml").build()
    assert table.cell_text("F0", 0) == "RE"
    assert table.cell_text("F0", 1) == "E"
    assert table.cell_text("F0", 3) == "EC"
    assert table.cell_text("F0", 8) == "D"
    assert table.cell_text("F0", 10) == "RE"
    assert table.cell_text("F0", 18) == "DEC"
    assert table.cell_text("F0", 4) == ""
    assert table.cell_text("F1", 0) == "R"
    assert table.cell_text("F1", 4) == "EC"
    # deadline of F1 falls on slot 20, outside the table
    assert not any(Marker.DEADLINE in cell for cell in table.rows()[1][1])


def test_mark_operations_are_silent_no_ops_when_nothing_applies() -> None:
    builder = _builder("multi_hop.yaml")
    builder.mark_release("F0", 5)
    builder.mark_deadline("F0", 5)
    builder.mark_executing("F0", 5)
    builder.mark_complete("F0", 5)
    assert builder.table.markers("F0", 5) == ()


def test_complete_requires_executing_marker() -> None:
    builder = _builder("multi_hop.yaml")
    builder.mark_complete("F0", 3)
    assert not builder.table.has("F0", 3, Marker.COMPLETE)
    builder.mark_executing("F0", 3)
    builder.mark_complete("F0", 3)
    assert builder.table.markers("F0", 3) == (Marker.EXECUTING, Marker.COMPLETE)


def test_same_event_recorded_once_per_cell() -> None:
    builder = _builder("multi_hop.yaml")
    builder.mark_release("F0", 0)
    builder.mark_release("F0", 0)
    builder.mark_executing("F0", 0)
    builder.mark_executing("F0", 0)
    assert builder.table.markers("F0", 0) == (Marker.RELEASE, Marker.EXECUTING)


def test_annotate_never_removes_markers() -> None:
    table = LatencyTable(["F"], 3)
    assert table.annotate("F", 1, Marker.EXECUTING)
    assert table.annotate("F", 1, Marker.COMPLETE)
    assert not table.annotate("F", 1, Marker.EXECUTING)
    assert table.markers("F", 1) == (Marker.EXECUTING, Marker.COMPLETE)


def test_to_rows_renders_header_and_flow_rows() -> None:
    rows = _builder("multi_hop.yaml").build().to_rows()
    assert rows[0][:3] == ["flow", "0", "1"]
    assert len(rows[0]) == 21
    assert rows[1][0] == "F0"
    assert rows[1][1] == "RE"
    assert rows[2][0] == "F1"


def test_all_links_policy_drives_complete_marker() -> None:
    payload = {
        "version": "0.1",
        "nodes": ["A", "B", "C"],
        "flows": [{"id": "F", "path": ["A", "B", "C"], "period": 10, "deadline": 10, "attempts": [2, 2]}],
        "schedule": {
            "cells": [
                {"time": 0, "node": "A", "content": "push(F: A->B, #0)"},
                {"time": 2, "node": "B", "content": "push(F: B->C, #1)"},
                {"time": 3, "node": "B", "content": "push(F: B->C, #1)"},
            ]
        },
    }
    spec = ConfigLoader().load_data(payload)

    final_link = LatencyVerifier()
    final_link.build(spec)
    assert final_link.build_latency_table().has("F", 3, Marker.COMPLETE)

    all_links = LatencyVerifier()
    all_links.build(spec, completion_policy=CompletionPolicy.ALL_LINKS)
    table = all_links.build_latency_table()
    assert not any(Marker.COMPLETE in cell for cell in table.rows()[0][1])
    assert all_links.build_latency_report()[0].startswith("UNKNOWN latency for F:0")
