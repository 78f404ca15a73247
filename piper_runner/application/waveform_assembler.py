from __future__ import annotations

import numpy as np

from piper_runner.domain.vo.waveform import NoAudio, SampleRun, SynthesisOutcome, SynthesisReport, Waveform


class WaveformAssembler:
    """Collects sample runs in emission order and joins them end to end."""

    def __init__(self) -> None:
        self._runs: list[SampleRun] = []

    def append(self, run: SampleRun) -> None:
        self._runs.append(run)

    def __len__(self) -> int:
        return len(self._runs)

    @property
    def sample_count(self) -> int:
        return sum(len(run) for run in self._runs)

    def assemble(self, report: SynthesisReport | None = None) -> SynthesisOutcome:
        report = report or SynthesisReport()
        if self.sample_count == 0:
            return NoAudio(reason="No audio samples generated.", report=report)

        samples = np.concatenate([run.samples for run in self._runs]).astype(np.float32, copy=False)
        return Waveform(samples=samples, report=report)
