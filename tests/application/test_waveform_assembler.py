"""Unit tests for WaveformAssembler."""
from __future__ import annotations

import unittest

import numpy as np

from piper_runner.application.waveform_assembler import WaveformAssembler
from piper_runner.domain.vo.waveform import NoAudio, SampleRun, Waveform


def _run(index: int, *values: float) -> SampleRun:
    return SampleRun(sentence_index=index, samples=np.array(values, dtype=np.float32))


class TestWaveformAssembler(unittest.TestCase):
    """Test cases for WaveformAssembler."""

    def test_concatenates_in_append_order(self):
        """Test that runs are joined in the order they were appended."""
        assembler = WaveformAssembler()
        assembler.append(_run(0, 0.1, 0.2))
        assembler.append(_run(2, 0.3))
        assembler.append(_run(3, 0.4, 0.5, 0.6))

        result = assembler.assemble()

        self.assertIsInstance(result, Waveform)
        np.testing.assert_allclose(result.samples, [0.1, 0.2, 0.3, 0.4, 0.5, 0.6], rtol=1e-6)
        self.assertEqual(result.samples.dtype, np.float32)

    def test_no_runs_is_no_audio(self):
        """Test that assembling nothing yields NoAudio rather than an empty waveform."""
        result = WaveformAssembler().assemble()

        self.assertIsInstance(result, NoAudio)

    def test_zero_length_runs_are_no_audio(self):
        """Test that runs without samples still count as no audio."""
        assembler = WaveformAssembler()
        assembler.append(_run(0))

        self.assertIsInstance(assembler.assemble(), NoAudio)
        self.assertEqual(len(assembler), 1)
        self.assertEqual(assembler.sample_count, 0)

    def test_deterministic(self):
        """Test that the same runs always give the same bytes."""
        runs = [_run(0, 0.25, -0.5), _run(1, 0.75)]
        outputs = []
        for _ in range(2):
            assembler = WaveformAssembler()
            for run in runs:
                assembler.append(run)
            outputs.append(assembler.assemble().samples.tobytes())

        self.assertEqual(outputs[0], outputs[1])

    def test_no_processing_applied(self):
        """Test that values outside [-1, 1] are left untouched."""
        assembler = WaveformAssembler()
        assembler.append(_run(0, 2.0, -3.0))

        np.testing.assert_array_equal(assembler.assemble().samples, [2.0, -3.0])


if __name__ == "__main__":
    unittest.main()
