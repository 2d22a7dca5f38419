"""Instruction decoder exports."""

from .base import DecodeError, IInstructionDecoder
from .builtins import CompactDecoder, PushPullDecoder
from .registry import available_decoders, create_decoder, register_decoder

__all__ = [
    "CompactDecoder",
    "DecodeError",
    "IInstructionDecoder",
    "PushPullDecoder",
    "available_decoders",
    "create_decoder",
    "register_decoder",
]
