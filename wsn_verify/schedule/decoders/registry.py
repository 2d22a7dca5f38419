"""Instruction decoder registry."""

from __future__ import annotations

from collections.abc import Callable

from .base import IInstructionDecoder
from .builtins import CompactDecoder, PushPullDecoder


DecoderFactory = Callable[[], IInstructionDecoder]


_REGISTRY: dict[str, DecoderFactory] = {
    "push_pull": PushPullDecoder,
    "default": PushPullDecoder,
    "compact": CompactDecoder,
}


def register_decoder(name: str, factory: DecoderFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def create_decoder(name: str = "default") -> IInstructionDecoder:
    key = name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown instruction decoder {name}")
    return _REGISTRY[key]()


def available_decoders() -> list[str]:
    return sorted(_REGISTRY)
