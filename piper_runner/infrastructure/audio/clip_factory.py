from __future__ import annotations

from pathlib import Path

import numpy as np
from scipy.io import wavfile

from piper_runner.application.errors import AudioOutputError
from piper_runner.domain.vo.audio_clip import AudioClip

DEFAULT_CLIP_NAME = "PiperTTS"


class ClipFactory:
    def __init__(self, *, name: str = DEFAULT_CLIP_NAME):
        self.name = name

    def create_clip(
        self,
        samples: np.ndarray,
        *,
        channel_count: int = 1,
        sample_rate: int,
        streaming: bool = False,
    ) -> AudioClip:
        if channel_count < 1:
            raise ValueError("channel_count must be at least 1.")
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive.")

        data = np.ascontiguousarray(np.asarray(samples, dtype=np.float32).reshape(-1))
        if data.size % channel_count:
            raise ValueError(
                f"{data.size} samples cannot be split evenly into {channel_count} channels."
            )

        return AudioClip(
            name=self.name,
            samples=data,
            sample_rate=sample_rate,
            channels=channel_count,
            streaming=streaming,
        )


def write_wav(clip: AudioClip, path: str | Path) -> Path:
    """Write `clip` as 16-bit PCM WAV."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    pcm = np.clip(clip.samples, -1.0, 1.0)
    pcm_int16 = (pcm * 32767.0).astype(np.int16)
    if clip.channels > 1:
        pcm_int16 = pcm_int16.reshape(-1, clip.channels)

    try:
        wavfile.write(str(out), clip.sample_rate, pcm_int16)
    except OSError as e:
        raise AudioOutputError(f"Failed to write {out}: {e}") from e
    return out
