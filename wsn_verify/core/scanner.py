"""Flow-instance scanner."""

from __future__ import annotations

import logging

from wsn_verify.model import CompletionPolicy, InstanceOutcome
from wsn_verify.schedule import CellDecodeCache
from wsn_verify.workload import ITimingOracle

logger = logging.getLogger(__name__)


class InstanceScanner:
    """Count transmission attempts of one release instance inside its window.

    The window of a release ``r`` is ``[r, next_release)``. Under the
    ``final_link`` policy only attempts on the last hop of the path count,
    against that hop's requirement; under ``all_links`` attempts on every hop
    count, against the flow's total requirement. Both the report and the
    Complete marker use the same outcome, so they never disagree.
    """

    def __init__(
        self,
        oracle: ITimingOracle,
        cells: CellDecodeCache,
        policy: CompletionPolicy = CompletionPolicy.FINAL_LINK,
    ) -> None:
        self._oracle = oracle
        self._cells = cells
        self._policy = CompletionPolicy(policy)
        self._memo: dict[tuple[str, int], InstanceOutcome] = {}

    @property
    def policy(self) -> CompletionPolicy:
        return self._policy

    def watched_links(self, flow: str) -> set[tuple[str, str]]:
        path = self._oracle.path_nodes(flow)
        if self._policy == CompletionPolicy.FINAL_LINK:
            return {(path[-2], path[-1])}
        return set(zip(path[:-1], path[1:]))

    def required_attempts(self, flow: str) -> int:
        if self._policy == CompletionPolicy.FINAL_LINK:
            return self._oracle.attempts_per_link(flow)[-1]
        return self._oracle.total_required_attempts(flow)

    def instance_index(self, flow: str, release_time: int) -> int:
        first_release = self._oracle.next_release_time(flow, 0)
        return (release_time - first_release) // self._oracle.period(flow)

    def scan(self, flow: str, release_time: int) -> InstanceOutcome:
        memo_key = (flow, release_time)
        cached = self._memo.get(memo_key)
        if cached is not None:
            return cached

        next_release = self._oracle.next_release_time(flow, release_time + 1)
        outcome = InstanceOutcome(
            flow_id=flow,
            instance=self.instance_index(flow, release_time),
            release_time=release_time,
            next_release_time=next_release,
            absolute_deadline=self._oracle.next_absolute_deadline(flow, release_time),
            relative_deadline=self._oracle.relative_deadline(flow),
            required_attempts=self.required_attempts(flow),
        )

        links = self.watched_links(flow)
        table = self._cells.table
        nodes = sorted({node for link in links for node in link}, key=table.column_index_of)
        columns = [table.column_index_of(node) for node in nodes]
        stop = min(next_release, table.row_count())

        for time in range(release_time, stop):
            attempts = {
                record.key
                for column in columns
                for record in self._cells.records(time, column)
                if record.flow == flow and record.link in links
            }
            if not attempts:
                continue
            outcome.observed_attempts += len(attempts)
            if outcome.completion_time is None and outcome.observed_attempts >= outcome.required_attempts:
                outcome.completion_time = time

        logger.debug(
            "scanned %s:%d window [%d, %d): %d/%d attempts",
            flow,
            outcome.instance,
            release_time,
            next_release,
            outcome.observed_attempts,
            outcome.required_attempts,
        )
        self._memo[memo_key] = outcome
        return outcome
