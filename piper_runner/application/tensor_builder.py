from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

import numpy as np

from piper_runner.application.errors import RequestAbortError, TensorBuildError
from piper_runner.application.port.inference_session import InferenceSession
from piper_runner.domain.vo.model_input import REQUIRED_INPUT_COUNT, ModelInputSpec
from piper_runner.domain.vo.phoneme import SynthesisControls

ID_DTYPE = np.int64
SCALE_DTYPE = np.float32


@dataclass
class InputTensorSet:
    """Buffers for one sentence, keyed by the model's first three input names."""

    ids_name: str
    lengths_name: str
    scales_name: str
    ids: np.ndarray | None
    lengths: np.ndarray | None
    scales: np.ndarray | None

    def items(self) -> list[tuple[str, np.ndarray]]:
        if self.ids is None or self.lengths is None or self.scales is None:
            raise TensorBuildError("Input tensors were already released.")
        return [
            (self.ids_name, self.ids),
            (self.lengths_name, self.lengths),
            (self.scales_name, self.scales),
        ]

    def describe(self) -> list[str]:
        lines = []
        for name, buffer in self.items():
            values = ",".join(str(v) for v in buffer.ravel().tolist())
            lines.append(
                f"Setting input: {name}, shape: {buffer.shape}, type: {buffer.dtype}, values: [{values}]"
            )
        return lines

    def release(self) -> None:
        self.ids = None
        self.lengths = None
        self.scales = None

    @property
    def released(self) -> bool:
        return self.ids is None and self.lengths is None and self.scales is None


def require_input_spec(spec: ModelInputSpec | None) -> ModelInputSpec:
    if spec is None or not spec.is_complete:
        declared = 0 if spec is None else len(spec)
        raise RequestAbortError(
            f"Model declares {declared} inputs; at least {REQUIRED_INPUT_COUNT} are required."
        )
    return spec


class TensorBuilder:
    """Adapts phoneme ids and synthesis controls to the model's input buffers.

    Inputs are matched by position: (ids, id count, scales). No numeric change
    is applied to the ids themselves.
    """

    def __init__(self, spec: ModelInputSpec | None) -> None:
        self.spec = require_input_spec(spec)

    def build(
        self,
        phoneme_ids: Sequence[int],
        length: int,
        controls: SynthesisControls,
    ) -> InputTensorSet:
        if length <= 0 or len(phoneme_ids) == 0:
            raise TensorBuildError("Cannot build tensors for an empty phoneme sequence.")
        if length != len(phoneme_ids):
            raise TensorBuildError(
                f"Declared length {length} does not match {len(phoneme_ids)} phoneme ids."
            )

        raw = np.asarray(phoneme_ids)
        if not np.issubdtype(raw.dtype, np.integer):
            raise TensorBuildError(f"Phoneme ids are not integers (got {raw.dtype}).")
        try:
            ids = raw.astype(ID_DTYPE).reshape(1, length)
        except (TypeError, ValueError, OverflowError) as e:
            raise TensorBuildError(f"Phoneme ids are not integers: {e}") from e
        if (ids < 0).any():
            raise TensorBuildError("Phoneme ids must be non-negative.")

        lengths = np.array([length], dtype=ID_DTYPE)
        scales = np.array(controls.as_scales(), dtype=SCALE_DTYPE)

        ids_name, lengths_name, scales_name = self.spec.names[:3]
        return InputTensorSet(
            ids_name=ids_name,
            lengths_name=lengths_name,
            scales_name=scales_name,
            ids=ids,
            lengths=lengths,
            scales=scales,
        )


@contextmanager
def bound_inputs(session: InferenceSession, tensors: InputTensorSet) -> Iterator[InputTensorSet]:
    """Bind `tensors` for the duration of one sentence, then release them."""
    try:
        for name, buffer in tensors.items():
            session.bind(name, buffer)
        yield tensors
    finally:
        session.clear_bindings()
        tensors.release()
