"""Workload/schedule domain models and semantic validation."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CompletionPolicy(str, Enum):
    """Which transmission attempts decide that a flow instance is complete."""

    FINAL_LINK = "final_link"
    ALL_LINKS = "all_links"


class FlowSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    path: list[str] = Field(min_length=2)
    period: int = Field(gt=0)
    deadline: int = Field(gt=0)
    phase: int = Field(default=0, ge=0)
    priority: int = 0
    attempts: list[int]

    @model_validator(mode="after")
    def validate_timing_fields(self) -> "FlowSpec":
        if self.deadline > self.period:
            raise ValueError(
                f"flow '{self.id}' deadline {self.deadline} exceeds period {self.period}"
            )
        if self.phase >= self.period:
            raise ValueError(f"flow '{self.id}' phase must be < period")
        if len(set(self.path)) != len(self.path):
            raise ValueError(f"flow '{self.id}' path visits a node twice")
        if len(self.attempts) != len(self.path) - 1:
            raise ValueError(
                f"flow '{self.id}' defines {len(self.attempts)} attempt counts "
                f"for {len(self.path) - 1} links"
            )
        if any(count < 1 for count in self.attempts):
            raise ValueError(f"flow '{self.id}' attempts must be >= 1")
        return self

    @property
    def links(self) -> list[tuple[str, str]]:
        return list(zip(self.path[:-1], self.path[1:]))


class CellSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    time: int = Field(ge=0)
    node: str
    content: str


class ScheduleSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    decoder: str = "push_pull"
    slots: Optional[int] = Field(default=None, gt=0)
    rows: list[list[Optional[str]]] = Field(default_factory=list)
    cells: list[CellSpec] = Field(default_factory=list)


class AnalysisSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    completion_policy: CompletionPolicy = CompletionPolicy.FINAL_LINK
    separator: str = "-" * 40


class ModelSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    nodes: list[str] = Field(min_length=2)
    flows: list[FlowSpec] = Field(min_length=1)
    schedule: ScheduleSpec = Field(default_factory=ScheduleSpec)
    analysis: AnalysisSpec = Field(default_factory=AnalysisSpec)

    @model_validator(mode="after")
    def validate_semantics(self) -> "ModelSpec":
        if len(self.nodes) != len(set(self.nodes)):
            raise ValueError("duplicate nodes")
        node_set = set(self.nodes)

        flow_ids = [flow.id for flow in self.flows]
        if len(flow_ids) != len(set(flow_ids)):
            raise ValueError("duplicate flows.id")
        for flow in self.flows:
            for node in flow.path:
                if node not in node_set:
                    raise ValueError(f"flow '{flow.id}' path references unknown node '{node}'")

        slots = self.schedule.slots
        if slots is not None and len(self.schedule.rows) > slots:
            raise ValueError(
                f"schedule defines {len(self.schedule.rows)} rows but only {slots} slots"
            )
        for time, row in enumerate(self.schedule.rows):
            if len(row) != len(self.nodes):
                raise ValueError(
                    f"schedule row {time} has {len(row)} cells, expected {len(self.nodes)}"
                )
        for cell in self.schedule.cells:
            if cell.node not in node_set:
                raise ValueError(f"schedule cell at time {cell.time} references unknown node '{cell.node}'")
            if slots is not None and cell.time >= slots:
                raise ValueError(f"schedule cell time {cell.time} is outside {slots} slots")
        return self

    def ordered_flows(self) -> list[FlowSpec]:
        """Flows in priority order; equal priorities keep declaration order."""

        return sorted(self.flows, key=lambda flow: flow.priority)
