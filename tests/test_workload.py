from __future__ import annotations

import pytest

from wsn_verify.model import FlowSpec
from wsn_verify.workload import PeriodicWorkload


def _flow(flow_id: str, period: int, deadline: int, *, phase: int = 0, priority: int = 0) -> FlowSpec:
    return FlowSpec(
        id=flow_id,
        path=["A", "B", "C"],
        period=period,
        deadline=deadline,
        phase=phase,
        priority=priority,
        attempts=[1, 2],
    )


def test_hyperperiod_is_lcm_of_periods() -> None:
    workload = PeriodicWorkload([_flow("f4", 4, 4), _flow("f6", 6, 5)])
    assert workload.hyperperiod() == 12


def test_release_queries_respect_phase() -> None:
    workload = PeriodicWorkload([_flow("f", 10, 6, phase=3)])
    assert workload.next_release_time("f", 0) == 3
    assert workload.next_release_time("f", 3) == 3
    assert workload.next_release_time("f", 4) == 13
    assert workload.current_release_time("f", 2) is None
    assert workload.current_release_time("f", 12) == 3
    assert workload.current_release_time("f", 13) == 13
    assert workload.next_absolute_deadline("f", 4) == 19


def test_flow_ids_follow_priority_then_declaration_order() -> None:
    workload = PeriodicWorkload(
        [
            _flow("late", 10, 10, priority=2),
            _flow("first", 10, 10, priority=0),
            _flow("second", 10, 10, priority=0),
        ]
    )
    assert workload.flow_ids() == ["first", "second", "late"]


def test_attempt_queries() -> None:
    workload = PeriodicWorkload([_flow("f", 10, 10)])
    assert workload.path_nodes("f") == ["A", "B", "C"]
    assert workload.attempts_per_link("f") == [1, 2]
    assert workload.total_required_attempts("f") == 3


def test_unknown_flow_raises_key_error() -> None:
    workload = PeriodicWorkload([_flow("f", 10, 10)])
    with pytest.raises(KeyError, match="unknown flow"):
        workload.period("g")


def test_duplicate_flow_ids_rejected() -> None:
    with pytest.raises(ValueError, match="duplicate flow id"):
        PeriodicWorkload([_flow("f", 10, 10), _flow("f", 5, 5)])
