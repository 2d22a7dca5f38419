"""Per-run cache of decoded schedule cells."""

from __future__ import annotations

import logging

from wsn_verify.model import TransmissionRecord

from .decoders import DecodeError, IInstructionDecoder
from .table import ScheduleTable

logger = logging.getLogger(__name__)


class CellDecodeCache:
    """Decode each ``(time, column)`` at most once.

    Undecodable cells are logged and treated as idle; they are kept in
    :attr:`failures` for auditing.
    """

    def __init__(self, table: ScheduleTable, decoder: IInstructionDecoder) -> None:
        self._table = table
        self._decoder = decoder
        self._decoded: dict[tuple[int, int], tuple[TransmissionRecord, ...]] = {}
        self.failures: dict[tuple[int, int], str] = {}

    @property
    def table(self) -> ScheduleTable:
        return self._table

    def records(self, time: int, column: int) -> tuple[TransmissionRecord, ...]:
        key = (time, column)
        cached = self._decoded.get(key)
        if cached is not None:
            return cached
        content = self._table.get(time, column)
        try:
            decoded = tuple(self._decoder.decode(content))
        except DecodeError as exc:
            logger.warning(
                "undecodable cell at slot %d column %s: %s",
                time,
                self._table.columns[column],
                exc,
            )
            self.failures[key] = str(exc)
            decoded = ()
        self._decoded[key] = decoded
        return decoded

    def row_records(self, time: int) -> list[tuple[int, TransmissionRecord]]:
        """All records of one slot as ``(column, record)`` pairs, column order."""

        rows: list[tuple[int, TransmissionRecord]] = []
        for column in range(self._table.column_count()):
            rows.extend((column, record) for record in self.records(time, column))
        return rows

    def clear(self) -> None:
        self._decoded.clear()
        self.failures.clear()
