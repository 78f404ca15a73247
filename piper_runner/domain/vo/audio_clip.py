from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class AudioClip:
    name: str
    samples: np.ndarray
    sample_rate: int
    channels: int = 1
    streaming: bool = False

    @property
    def length(self) -> int:
        """Frames per channel."""
        return int(self.samples.size // max(self.channels, 1))

    @property
    def duration(self) -> float:
        return self.length / float(self.sample_rate)
