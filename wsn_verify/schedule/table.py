"""Read-only schedule table (time slots x node columns)."""

from __future__ import annotations

from typing import Optional

from wsn_verify.model import ModelSpec


class ScheduleTable:
    """Fixed-size grid of encoded instruction strings."""

    def __init__(self, columns: list[str], rows: list[list[Optional[str]]]) -> None:
        if len(columns) != len(set(columns)):
            raise ValueError("duplicate schedule columns")
        width = len(columns)
        for time, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"schedule row {time} has {len(row)} cells, expected {width}")
        self._columns = list(columns)
        self._index = {node: idx for idx, node in enumerate(self._columns)}
        self._rows = tuple(tuple(row) for row in rows)

    @classmethod
    def from_spec(cls, spec: ModelSpec, *, slots: int | None = None) -> "ScheduleTable":
        """Build the grid from dense ``rows`` and sparse ``cells`` of a ``ModelSpec``.

        ``slots`` defaults to ``spec.schedule.slots``, then to the number of
        dense rows.
        """

        schedule = spec.schedule
        row_count = schedule.slots or slots or len(schedule.rows)
        row_count = max(row_count, len(schedule.rows))
        if schedule.cells:
            row_count = max(row_count, max(cell.time for cell in schedule.cells) + 1)

        width = len(spec.nodes)
        grid: list[list[Optional[str]]] = [[None] * width for _ in range(row_count)]
        for time, row in enumerate(schedule.rows):
            for column, content in enumerate(row):
                grid[time][column] = content or None

        index = {node: idx for idx, node in enumerate(spec.nodes)}
        for cell in schedule.cells:
            column = index[cell.node]
            existing = grid[cell.time][column]
            grid[cell.time][column] = f"{existing}; {cell.content}" if existing else cell.content
        return cls(spec.nodes, grid)

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    def row_count(self) -> int:
        return len(self._rows)

    def column_count(self) -> int:
        return len(self._columns)

    def column_index_of(self, node: str) -> int:
        try:
            return self._index[node]
        except KeyError:
            raise KeyError(f"schedule table has no column for node '{node}'") from None

    def has_column(self, node: str) -> bool:
        return node in self._index

    def get(self, time: int, column: int) -> Optional[str]:
        if time < 0 or time >= len(self._rows):
            return None
        if column < 0 or column >= len(self._columns):
            return None
        return self._rows[time][column]
