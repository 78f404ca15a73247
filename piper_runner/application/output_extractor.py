from __future__ import annotations

from typing import Any

import numpy as np

from piper_runner.application.errors import EmptyOutputError, OutputTypeMismatchError
from piper_runner.domain.vo.waveform import SampleRun


def describe_output(output: Any) -> str:
    if isinstance(output, np.ndarray):
        return f"ndarray[{output.dtype}] shape={output.shape}"
    return type(output).__name__


class OutputExtractor:
    """Validates a run's primary output and flattens it into a sample run."""

    def extract(self, output: Any | None, *, sentence_index: int) -> SampleRun:
        if output is None:
            raise EmptyOutputError("Output tensor is empty.")
        if not isinstance(output, np.ndarray) or not np.issubdtype(output.dtype, np.floating):
            raise OutputTypeMismatchError(
                f"Output is not a float tensor, but {describe_output(output)}."
            )

        samples = np.array(output, dtype=np.float32, copy=True).reshape(-1)
        return SampleRun(sentence_index=sentence_index, samples=samples)
