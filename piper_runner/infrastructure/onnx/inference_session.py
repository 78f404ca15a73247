from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Sequence

import numpy as np

from piper_runner.application.cooperative_executor import CooperativeExecutor, StepGenerator
from piper_runner.application.errors import (
    InferenceStepError,
    MissingInputError,
    SessionBusyError,
    SessionClosedError,
    TensorBuildError,
)


class OnnxInferenceSession:
    """Runs an onnxruntime session as a sequence of cooperative steps.

    onnxruntime cannot pause inside a graph, so with `offload=True` the native
    call is handed to a private single-worker pool and the remaining steps
    poll it until it finishes. With `offload=False` the call runs inline as a
    single step.

    A native call cannot be interrupted either. `close()` waits up to
    `close_timeout` seconds for one that is still running; past that the
    worker thread finishes it in the background and its result is discarded.
    """

    def __init__(
        self,
        session: Any,
        *,
        input_names: Sequence[str],
        output_names: Sequence[str] | None = None,
        offload: bool = True,
        close_timeout: float = 5.0,
    ) -> None:
        self._session = session
        self.input_names = tuple(input_names)
        self.output_names = list(output_names) if output_names else None
        self.offload = offload
        self.close_timeout = close_timeout

        self._bindings: dict[str, np.ndarray] = {}
        self._output: Any | None = None
        self._active: CooperativeExecutor | None = None
        self._pool: ThreadPoolExecutor | None = None
        self._pending: Future | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> bool:
        return self._active is not None

    @property
    def bindings(self) -> dict[str, np.ndarray]:
        return dict(self._bindings)

    def bind(self, name: str, buffer: np.ndarray) -> None:
        self._ensure_open()
        if name not in self.input_names:
            raise TensorBuildError(f"'{name}' is not a declared model input.")
        self._bindings[name] = buffer

    def clear_bindings(self) -> None:
        self._bindings.clear()

    def run(self) -> CooperativeExecutor:
        self._ensure_open()
        if self._active is not None:
            raise SessionBusyError("A run is already in flight on this session.")

        missing = [name for name in self.input_names if name not in self._bindings]
        if missing:
            raise MissingInputError(f"Inputs were never bound: {', '.join(missing)}.")

        self._output = None
        executor = CooperativeExecutor(self._steps(dict(self._bindings)), on_close=self._end_run)
        self._active = executor
        return executor

    def peek_output(self) -> Any | None:
        return self._output

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        pending = self._pending
        if self._active is not None:
            self._active.cancel()
        if pending is not None and not pending.done():
            wait([pending], timeout=self.close_timeout)
        if self._pool is not None:
            self._pool.shutdown(wait=False, cancel_futures=True)
            self._pool = None

        self._bindings.clear()
        self._output = None
        self._session = None

    def _steps(self, feeds: dict[str, np.ndarray]) -> StepGenerator:
        # Feeds are snapshotted; the first step hands control back before any compute.
        yield

        if not self.offload:
            outputs = self._invoke(feeds)
        else:
            future = self._pending = self._submit(feeds)
            try:
                while not future.done():
                    yield
            finally:
                if not future.done():
                    future.cancel()
                self._pending = None
            outputs = future.result()

        self._output = outputs[0] if outputs else None

    def _submit(self, feeds: dict[str, np.ndarray]) -> Future:
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="onnx-run")
        return self._pool.submit(self._invoke, feeds)

    def _invoke(self, feeds: dict[str, np.ndarray]) -> list[Any]:
        session = self._session
        if session is None:
            raise SessionClosedError("Inference session was released.")
        try:
            return list(session.run(self.output_names, feeds))
        except Exception as e:
            raise InferenceStepError(f"Model run failed: {e}") from e

    def _end_run(self) -> None:
        self._active = None

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Inference session was released.")
