from __future__ import annotations

from enum import Enum


class BackendType(str, Enum):
    CPU = "cpu"
    CUDA = "cuda"
    DIRECTML = "directml"
    COREML = "coreml"

    @staticmethod
    def parse(value: str) -> "BackendType":
        try:
            return BackendType(value.strip().lower())
        except ValueError as exc:
            choices = ", ".join(b.value for b in BackendType)
            raise ValueError(f"Unknown backend '{value}'. Choose one of: {choices}.") from exc

    @property
    def execution_providers(self) -> list[str]:
        preferred = {
            BackendType.CPU: [],
            BackendType.CUDA: ["CUDAExecutionProvider"],
            BackendType.DIRECTML: ["DmlExecutionProvider"],
            BackendType.COREML: ["CoreMLExecutionProvider"],
        }[self]
        return preferred + ["CPUExecutionProvider"]
