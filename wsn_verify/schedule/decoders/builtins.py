"""Built-in instruction decoders."""

from __future__ import annotations

import re
from typing import Optional

from wsn_verify.model import TransmissionKind, TransmissionRecord

from .base import DecodeError, IInstructionDecoder


_NAME = r"[A-Za-z0-9_.\-]+?"

_TRANSFER_RE = re.compile(
    rf"^(?P<kind>push|pull)\s*\(\s*(?P<flow>{_NAME})\s*:\s*(?P<src>{_NAME})\s*->\s*(?P<snk>{_NAME})"
    r"\s*(?:,\s*#\s*(?P<channel>\d+)\s*)?\)$",
    re.IGNORECASE,
)
_CONDITIONAL_RE = re.compile(
    rf"^if\s+has\s*\(\s*{_NAME}\s*\)\s+(?P<then>.+?)\s+else\s+(?P<other>.+)$",
    re.IGNORECASE,
)
_IDLE_RE = re.compile(r"^(sleep|wait\s*\(\s*(#\s*\d+)?\s*\))$", re.IGNORECASE)
_COMPACT_RE = re.compile(
    rf"^(?P<flow>{_NAME}):(?P<src>{_NAME})->(?P<snk>{_NAME})(?:@(?P<channel>\d+))?$"
)


class PushPullDecoder(IInstructionDecoder):
    """Decode ``push(F0: A->B, #1)`` style programs.

    A cell holds ``;``-separated instructions. ``if has(F) X else Y`` contributes
    the records of both branches, since either one may execute at runtime.
    ``sleep`` and ``wait(#ch)`` schedule nothing.
    """

    def decode(self, content: Optional[str]) -> list[TransmissionRecord]:
        if content is None:
            return []
        records: list[TransmissionRecord] = []
        for raw in content.split(";"):
            instruction = raw.strip()
            if instruction:
                records.extend(self._decode_instruction(instruction))
        return records

    def _decode_instruction(self, instruction: str) -> list[TransmissionRecord]:
        if _IDLE_RE.match(instruction):
            return []
        conditional = _CONDITIONAL_RE.match(instruction)
        if conditional:
            return self._decode_instruction(conditional.group("then").strip()) + self._decode_instruction(
                conditional.group("other").strip()
            )
        transfer = _TRANSFER_RE.match(instruction)
        if transfer is None:
            raise DecodeError(f"unrecognized instruction '{instruction}'")
        channel = transfer.group("channel")
        return [
            TransmissionRecord(
                flow=transfer.group("flow"),
                source=transfer.group("src"),
                sink=transfer.group("snk"),
                channel=int(channel) if channel is not None else 0,
                kind=TransmissionKind(transfer.group("kind").lower()),
            )
        ]


class CompactDecoder(IInstructionDecoder):
    """Decode ``F0:A->B`` / ``F0:A->B@2`` tokens separated by ``;``, ``,`` or spaces."""

    def decode(self, content: Optional[str]) -> list[TransmissionRecord]:
        if content is None:
            return []
        records: list[TransmissionRecord] = []
        for token in re.split(r"[;,\s]+", content.strip()):
            if not token or token == "-":
                continue
            match = _COMPACT_RE.match(token)
            if match is None:
                raise DecodeError(f"unrecognized transmission token '{token}'")
            channel = match.group("channel")
            records.append(
                TransmissionRecord(
                    flow=match.group("flow"),
                    source=match.group("src"),
                    sink=match.group("snk"),
                    channel=int(channel) if channel is not None else 0,
                )
            )
        return records
