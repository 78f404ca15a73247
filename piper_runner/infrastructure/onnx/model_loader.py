from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from piper_runner.application.errors import ModelLoadError
from piper_runner.domain.vo.backend import BackendType
from piper_runner.domain.vo.model_input import ModelInputSlot, ModelInputSpec
from piper_runner.infrastructure.onnx.inference_session import OnnxInferenceSession
from piper_runner.utils.logger import Logger


@dataclass(frozen=True)
class OnnxModel:
    path: Path
    content: bytes
    inputs: ModelInputSpec
    output_names: tuple[str, ...]


class OnnxModelLoader:
    def __init__(self, *, logger: Logger | None = None, offload: bool = True) -> None:
        self._logger = logger
        self.offload = offload

    def load(self, model_path: str) -> OnnxModel:
        import onnxruntime as ort

        path = Path(model_path)
        if not path.exists():
            raise ModelLoadError(f"ONNX model not found: {path}")

        content = path.read_bytes()
        try:
            # Introspection only: the session used for synthesis is built in
            # create_session with the configured backend.
            probe = ort.InferenceSession(content, providers=["CPUExecutionProvider"])
        except Exception as e:
            raise ModelLoadError(f"Failed to load ONNX model {path}: {e}") from e

        inputs = ModelInputSpec.of(
            [
                ModelInputSlot(name=arg.name, shape=tuple(arg.shape or ()), element_type=arg.type)
                for arg in probe.get_inputs()
            ]
        )
        output_names = tuple(arg.name for arg in probe.get_outputs())
        del probe

        self._log(f"Loaded model {path.name}: {len(inputs)} inputs, outputs={list(output_names)}")
        return OnnxModel(path=path, content=content, inputs=inputs, output_names=output_names)

    def create_session(self, model: OnnxModel, backend: BackendType) -> OnnxInferenceSession:
        import onnxruntime as ort

        available = set(ort.get_available_providers())
        providers = [p for p in backend.execution_providers if p in available]
        if not providers:
            providers = ["CPUExecutionProvider"]
        if providers[0] not in backend.execution_providers[:1]:
            self._log(f"Backend '{backend.value}' is unavailable; using {providers[0]}.")

        sess_options = ort.SessionOptions()
        sess_options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL

        try:
            session = ort.InferenceSession(
                model.content,
                sess_options=sess_options,
                providers=providers,
            )
        except Exception as e:
            raise ModelLoadError(f"Failed to create inference session: {e}") from e

        self._log(f"Inference session ready: providers={session.get_providers()}")
        return OnnxInferenceSession(
            session,
            input_names=model.inputs.names,
            output_names=model.output_names,
            offload=self.offload,
        )

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log(message)
