from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence


@dataclass(frozen=True)
class Sentence:
    index: int
    phoneme_ids: tuple[int, ...]
    phonemes: str = ""

    @staticmethod
    def of(index: int, phoneme_ids: Sequence[int], phonemes: str = "") -> "Sentence":
        return Sentence(index=index, phoneme_ids=tuple(phoneme_ids), phonemes=phonemes)

    def __len__(self) -> int:
        return len(self.phoneme_ids)

    @property
    def is_empty(self) -> bool:
        return len(self.phoneme_ids) == 0


@dataclass(frozen=True)
class PhonemeResult:
    """Ordered sentences produced by the phonemizer for one request."""

    sentences: tuple[Sentence | None, ...] = field(default_factory=tuple)

    @staticmethod
    def from_id_lists(id_lists: Sequence[Sequence[int] | None]) -> "PhonemeResult":
        return PhonemeResult(
            sentences=tuple(
                None if ids is None else Sentence.of(i, ids)
                for i, ids in enumerate(id_lists)
            )
        )

    def __iter__(self) -> Iterator[Sentence | None]:
        return iter(self.sentences)

    def __len__(self) -> int:
        return len(self.sentences)


@dataclass(frozen=True)
class SynthesisControls:
    speed: float = 1.0
    pitch: float = 1.0
    glottal: float = 0.8

    def as_scales(self) -> tuple[float, float, float]:
        return (self.speed, self.pitch, self.glottal)
