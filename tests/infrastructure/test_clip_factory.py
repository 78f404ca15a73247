"""Unit tests for ClipFactory and write_wav."""
from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

import numpy as np
from scipy.io import wavfile

from piper_runner.infrastructure.audio.clip_factory import ClipFactory, write_wav


class TestClipFactory(unittest.TestCase):
    """Test cases for ClipFactory."""

    def setUp(self):
        """Set up test fixtures."""
        self.factory = ClipFactory()

    def test_create_clip(self):
        """Test that a mono clip keeps its samples and reports its duration."""
        samples = np.full(22_050, 0.25, dtype=np.float32)

        clip = self.factory.create_clip(samples, channel_count=1, sample_rate=22_050)

        self.assertEqual(clip.name, "PiperTTS")
        self.assertEqual(clip.length, 22_050)
        self.assertAlmostEqual(clip.duration, 1.0)
        self.assertFalse(clip.streaming)

    def test_invalid_parameters(self):
        """Test that bad channel counts and sample rates are rejected."""
        samples = np.zeros(3, dtype=np.float32)
        with self.assertRaises(ValueError):
            self.factory.create_clip(samples, channel_count=0, sample_rate=22_050)
        with self.assertRaises(ValueError):
            self.factory.create_clip(samples, channel_count=1, sample_rate=0)
        with self.assertRaises(ValueError):
            self.factory.create_clip(samples, channel_count=2, sample_rate=22_050)

    def test_write_wav(self):
        """Test that a clip is written as 16-bit PCM at its sample rate."""
        clip = self.factory.create_clip(
            np.array([0.0, 0.5, -0.5, 2.0], dtype=np.float32),
            sample_rate=16_000,
        )

        with tempfile.TemporaryDirectory() as tmp:
            path = write_wav(clip, Path(tmp) / "out" / "speech.wav")
            rate, data = wavfile.read(path)

        self.assertEqual(rate, 16_000)
        self.assertEqual(data.dtype, np.int16)
        self.assertEqual(data.tolist(), [0, 16383, -16383, 32767])


if __name__ == "__main__":
    unittest.main()
