"""Latency table and its incremental builder."""

from __future__ import annotations

from wsn_verify.model import Marker
from wsn_verify.schedule import CellDecodeCache
from wsn_verify.workload import ITimingOracle

from .scanner import InstanceScanner


class LatencyTable:
    """Flows x time slots grid of ordered annotation markers.

    Markers are only ever appended, and each marker appears at most once per
    cell.
    """

    def __init__(self, flow_ids: list[str], slot_count: int) -> None:
        self._flow_ids = list(flow_ids)
        self._slot_count = slot_count
        self._cells: dict[str, list[list[Marker]]] = {
            flow: [[] for _ in range(slot_count)] for flow in self._flow_ids
        }

    @property
    def flow_ids(self) -> list[str]:
        return list(self._flow_ids)

    @property
    def slot_count(self) -> int:
        return self._slot_count

    def annotate(self, flow: str, time: int, marker: Marker) -> bool:
        cell = self._cells[flow][time]
        if marker in cell:
            return False
        cell.append(marker)
        return True

    def markers(self, flow: str, time: int) -> tuple[Marker, ...]:
        return tuple(self._cells[flow][time])

    def has(self, flow: str, time: int, marker: Marker) -> bool:
        return marker in self._cells[flow][time]

    def cell_text(self, flow: str, time: int) -> str:
        return "".join(marker.value for marker in self._cells[flow][time])

    def rows(self) -> list[tuple[str, list[tuple[Marker, ...]]]]:
        return [(flow, [tuple(cell) for cell in self._cells[flow]]) for flow in self._flow_ids]

    def to_rows(self) -> list[list[str]]:
        """Text grid: a header row of slot numbers, then one row per flow."""

        header = ["flow"] + [str(time) for time in range(self._slot_count)]
        body = [
            [flow] + [self.cell_text(flow, time) for time in range(self._slot_count)]
            for flow in self._flow_ids
        ]
        return [header] + body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LatencyTable):
            return NotImplemented
        return self.rows() == other.rows()


class LatencyTableBuilder:
    """Annotate release, deadline, activity and completion per (flow, slot).

    Every ``mark_*`` operation is a silent no-op when nothing applies at the
    queried slot.
    """

    def __init__(self, oracle: ITimingOracle, cells: CellDecodeCache, scanner: InstanceScanner) -> None:
        self._oracle = oracle
        self._cells = cells
        self._scanner = scanner
        self._table = LatencyTable(oracle.flow_ids(), cells.table.row_count())

    @property
    def table(self) -> LatencyTable:
        return self._table

    def build(self) -> LatencyTable:
        slots = self._table.slot_count
        for flow in self._oracle.flow_ids():
            for time in range(slots):
                self.mark_deadline(flow, time)
            for time in range(slots):
                self.mark_release(flow, time)
            for time in range(slots):
                self.mark_executing(flow, time)
            for time in range(slots):
                self.mark_complete(flow, time)
        return self._table

    def _is_release(self, flow: str, time: int) -> bool:
        return self._oracle.next_release_time(flow, time) == time

    def mark_release(self, flow: str, time: int) -> None:
        if self._is_release(flow, time):
            self._table.annotate(flow, time, Marker.RELEASE)

    def mark_deadline(self, flow: str, time: int) -> None:
        if not self._is_release(flow, time):
            return
        deadline = self._oracle.next_absolute_deadline(flow, time)
        if deadline < self._table.slot_count:
            self._table.annotate(flow, deadline, Marker.DEADLINE)

    def mark_executing(self, flow: str, time: int) -> None:
        for column in range(self._cells.table.column_count()):
            if any(record.flow == flow for record in self._cells.records(time, column)):
                self._table.annotate(flow, time, Marker.EXECUTING)
                return

    def mark_complete(self, flow: str, time: int) -> None:
        if not self._table.has(flow, time, Marker.EXECUTING):
            return
        release = self._oracle.current_release_time(flow, time)
        if release is None:
            return
        if self._scanner.scan(flow, release).completion_time == time:
            self._table.annotate(flow, time, Marker.COMPLETE)
