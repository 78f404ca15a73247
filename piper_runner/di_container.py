from __future__ import annotations

from dataclasses import dataclass

from piper_runner.application.port.audio_sink import AudioSink
from piper_runner.application.port.model_loader import ModelLoader
from piper_runner.application.port.phonemizer import Phonemizer
from piper_runner.application.speech_synthesizer import SpeechSynthesizer
from piper_runner.config import AppConfig
from piper_runner.infrastructure.audio.clip_factory import ClipFactory
from piper_runner.infrastructure.audio.speaker import Speaker
from piper_runner.infrastructure.espeak.phonemizer import EspeakPhonemizer
from piper_runner.infrastructure.onnx.model_loader import OnnxModelLoader
from piper_runner.utils.logger import Logger


@dataclass(frozen=True)
class AppContainer:
    config: AppConfig
    logger: Logger
    speaker: Speaker
    phonemizer: Phonemizer
    model_loader: ModelLoader
    audio_sink: AudioSink
    synthesizer: SpeechSynthesizer


def build_container(
    config: AppConfig,
    *,
    logger: Logger | None = None,
    speaker: Speaker | None = None,
    phonemizer: Phonemizer | None = None,
    model_loader: ModelLoader | None = None,
    audio_sink: AudioSink | None = None,
) -> AppContainer:
    logger = logger or Logger()
    speaker = speaker or Speaker()
    phonemizer = phonemizer or EspeakPhonemizer(
        config_path=config.resolve_config_path(),
        logger=logger,
    )
    model_loader = model_loader or OnnxModelLoader(logger=logger, offload=config.offload)
    audio_sink = audio_sink or ClipFactory()

    synthesizer = SpeechSynthesizer(
        config,
        phonemizer=phonemizer,
        model_loader=model_loader,
        audio_sink=audio_sink,
        logger=logger,
    )

    return AppContainer(
        config=config,
        logger=logger,
        speaker=speaker,
        phonemizer=phonemizer,
        model_loader=model_loader,
        audio_sink=audio_sink,
        synthesizer=synthesizer,
    )
