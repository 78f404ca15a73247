from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from piper_runner.domain.vo.backend import BackendType
from piper_runner.domain.vo.phoneme import SynthesisControls

DEFAULT_SAMPLE_RATE = 22_050
DEFAULT_VOICE = "en-us"
DEFAULT_ASSETS_DIR = "assets"
DEFAULT_ESPEAK_DATA_RELATIVE_PATH = "espeak-ng-data"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number.") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive.")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if not raw:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    model_path: str
    config_path: str | None = None
    sample_rate: int = DEFAULT_SAMPLE_RATE
    controls: SynthesisControls = field(default_factory=SynthesisControls)
    voice: str = DEFAULT_VOICE
    assets_dir: str = DEFAULT_ASSETS_DIR
    espeak_data_relative_path: str = DEFAULT_ESPEAK_DATA_RELATIVE_PATH
    backend: BackendType = BackendType.CPU
    offload: bool = True

    @staticmethod
    def from_env() -> "AppConfig":
        model_path = os.getenv("PIPER_MODEL_PATH")
        if not model_path:
            raise ValueError("PIPER_MODEL_PATH is required.")

        return AppConfig(
            model_path=model_path,
            config_path=os.getenv("PIPER_CONFIG_PATH") or None,
            sample_rate=_env_int("PIPER_SAMPLE_RATE", DEFAULT_SAMPLE_RATE),
            controls=SynthesisControls(
                speed=_env_float("PIPER_SCALE_SPEED", 1.0),
                pitch=_env_float("PIPER_SCALE_PITCH", 1.0),
                glottal=_env_float("PIPER_SCALE_GLOTTAL", 0.8),
            ),
            voice=os.getenv("PIPER_VOICE") or DEFAULT_VOICE,
            assets_dir=os.getenv("PIPER_ASSETS_DIR") or DEFAULT_ASSETS_DIR,
            espeak_data_relative_path=(
                os.getenv("PIPER_ESPEAK_DATA_PATH") or DEFAULT_ESPEAK_DATA_RELATIVE_PATH
            ),
            backend=BackendType.parse(os.getenv("PIPER_BACKEND") or BackendType.CPU.value),
            offload=_env_bool("PIPER_OFFLOAD", True),
        )

    @property
    def espeak_data_path(self) -> str:
        return str(Path(self.assets_dir) / self.espeak_data_relative_path)

    def resolve_config_path(self) -> str:
        """Voice config path; Piper ships it next to the model as `<model>.json`."""
        if self.config_path:
            return self.config_path
        return f"{self.model_path}.json"
