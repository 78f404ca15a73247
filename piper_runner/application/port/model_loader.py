from __future__ import annotations

from typing import Protocol

from piper_runner.application.port.inference_session import InferenceSession
from piper_runner.domain.vo.backend import BackendType
from piper_runner.domain.vo.model_input import ModelInputSpec


class LoadedModel(Protocol):
    @property
    def inputs(self) -> ModelInputSpec:
        ...


class ModelLoader(Protocol):
    def load(self, model_path: str) -> LoadedModel:
        ...

    def create_session(self, model: LoadedModel, backend: BackendType) -> InferenceSession:
        ...
