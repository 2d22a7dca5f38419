"""Schedule table, decoders and decode cache exports."""

from .cache import CellDecodeCache
from .decoders import (
    CompactDecoder,
    DecodeError,
    IInstructionDecoder,
    PushPullDecoder,
    available_decoders,
    create_decoder,
    register_decoder,
)
from .table import ScheduleTable

__all__ = [
    "CellDecodeCache",
    "CompactDecoder",
    "DecodeError",
    "IInstructionDecoder",
    "PushPullDecoder",
    "ScheduleTable",
    "available_decoders",
    "create_decoder",
    "register_decoder",
]
