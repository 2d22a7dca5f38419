"""Instruction decoder abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from wsn_verify.model import TransmissionRecord


class DecodeError(ValueError):
    """Cell content does not follow the decoder's instruction grammar."""


class IInstructionDecoder(ABC):
    """Decode one schedule cell into transmission records."""

    @abstractmethod
    def decode(self, content: Optional[str]) -> list[TransmissionRecord]:
        """Return the transmission attempts scheduled by ``content``.

        Absent, blank and non-transmission content decodes to an empty list.
        """
