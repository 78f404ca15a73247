from __future__ import annotations

from threading import Event, Lock

import numpy as np
import sounddevice as sd

from piper_runner.application.errors import AudioOutputError
from piper_runner.domain.vo.audio_clip import AudioClip


class Speaker:
    """Plays clips on the default output device."""

    def __init__(self, *, prime_silence_ms: int = 200, chunk_size: int = 1024):
        self.prime_silence_ms = prime_silence_ms
        self.chunk_size = chunk_size
        self._interrupt_event = Event()
        self._lock = Lock()

    def play(self, clip: AudioClip, stop_event: Event | None = None) -> bool:
        """Block until `clip` finished playing; False if it was interrupted."""
        audio = np.asarray(clip.samples, dtype=np.float32).reshape(-1, clip.channels)
        if audio.size == 0:
            return True

        self._interrupt_event.clear()
        with self._lock:
            try:
                with sd.OutputStream(
                    samplerate=clip.sample_rate,
                    channels=clip.channels,
                    dtype="float32",
                ) as stream:
                    # Prime the device path with silence to avoid startup clicks.
                    prime_frames = int(clip.sample_rate * (self.prime_silence_ms / 1000.0))
                    if prime_frames > 0:
                        stream.write(np.zeros((prime_frames, clip.channels), dtype=np.float32))

                    for i in range(0, len(audio), self.chunk_size):
                        if self._interrupt_event.is_set():
                            return False
                        if stop_event and stop_event.is_set():
                            return False
                        stream.write(audio[i : i + self.chunk_size])
            except (sd.PortAudioError, OSError) as e:
                raise AudioOutputError(f"Playback failed: {e}") from e
        return True

    def interrupt(self) -> None:
        """Stop current playback (best-effort)."""
        self._interrupt_event.set()
