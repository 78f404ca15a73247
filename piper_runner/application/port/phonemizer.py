from __future__ import annotations

from typing import Protocol

from piper_runner.domain.vo.phoneme import PhonemeResult


class Phonemizer(Protocol):
    def initialize(self, data_path: str) -> None:
        """Prepare native resources; called once before the first `process`."""
        ...

    def process(self, text: str, voice: str) -> PhonemeResult | None:
        """Return sentences in synthesis order, or None when there is nothing to say."""
        ...

    def release(self) -> None:
        """Free native resources; called once at shutdown."""
        ...
