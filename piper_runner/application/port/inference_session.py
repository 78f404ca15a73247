from __future__ import annotations

from typing import Any, Protocol

import numpy as np

from piper_runner.application.cooperative_executor import CooperativeExecutor


class InferenceSession(Protocol):
    def bind(self, name: str, buffer: np.ndarray) -> None:
        """Associate a buffer with a declared input name (last bind wins)."""
        ...

    def run(self) -> CooperativeExecutor:
        """Begin a run; the returned executor must be advanced to completion."""
        ...

    def peek_output(self) -> Any | None:
        """Primary output of the last completed run, or None."""
        ...

    def clear_bindings(self) -> None:
        ...

    def close(self) -> None:
        ...
