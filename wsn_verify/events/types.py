"""Analysis trace event definitions."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    FLOW_RELEASED = "FlowReleased"
    TRANSMISSION = "Transmission"
    INSTANCE_COMPLETE = "InstanceComplete"
    DEADLINE_MISS = "DeadlineMiss"
    INSTANCE_UNKNOWN = "InstanceUnknown"


class AnalysisEvent(BaseModel):
    """Normalized event envelope for tracing and metrics."""

    model_config = ConfigDict(extra="forbid")

    event_id: str
    seq: int = Field(ge=0)
    time: int = Field(ge=0)
    type: EventType
    flow_id: Optional[str] = None
    instance: Optional[int] = Field(default=None, ge=0)
    node_id: Optional[str] = None
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False)
