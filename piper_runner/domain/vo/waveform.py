from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np


@dataclass(frozen=True)
class SampleRun:
    """Float32 samples produced by one sentence."""

    sentence_index: int
    samples: np.ndarray

    def __len__(self) -> int:
        return int(self.samples.size)


@dataclass(frozen=True)
class SentenceSkip:
    sentence_index: int
    reason: str


SentenceOutcome = Union[SampleRun, SentenceSkip]


@dataclass
class SynthesisReport:
    sentence_count: int = 0
    synthesized: list[int] = field(default_factory=list)
    skipped: list[SentenceSkip] = field(default_factory=list)
    steps: int = 0

    def record(self, outcome: SentenceOutcome) -> None:
        if isinstance(outcome, SampleRun):
            self.synthesized.append(outcome.sentence_index)
        else:
            self.skipped.append(outcome)


@dataclass(frozen=True)
class Waveform:
    samples: np.ndarray
    report: SynthesisReport = field(default_factory=SynthesisReport, compare=False)

    def __len__(self) -> int:
        return int(self.samples.size)


@dataclass(frozen=True)
class NoAudio:
    """Distinguished "nothing was synthesized" outcome of a request."""

    reason: str
    report: SynthesisReport = field(default_factory=SynthesisReport, compare=False)

    def __bool__(self) -> bool:
        return False


SynthesisOutcome = Union[Waveform, NoAudio]
