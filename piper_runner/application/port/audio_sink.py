from __future__ import annotations

from typing import Protocol

import numpy as np

from piper_runner.domain.vo.audio_clip import AudioClip


class AudioSink(Protocol):
    def create_clip(
        self,
        samples: np.ndarray,
        *,
        channel_count: int = 1,
        sample_rate: int,
        streaming: bool = False,
    ) -> AudioClip:
        """Package mono float32 samples as a playable clip."""
        ...
