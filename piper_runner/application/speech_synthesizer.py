from __future__ import annotations

import asyncio

from piper_runner.application.errors import PhonemizerError, SessionClosedError
from piper_runner.application.port.audio_sink import AudioSink
from piper_runner.application.port.inference_session import InferenceSession
from piper_runner.application.port.model_loader import LoadedModel, ModelLoader
from piper_runner.application.port.phonemizer import Phonemizer
from piper_runner.application.sentence_scheduler import SentenceScheduler
from piper_runner.config import AppConfig
from piper_runner.domain.vo.audio_clip import AudioClip
from piper_runner.domain.vo.waveform import NoAudio, SynthesisOutcome
from piper_runner.utils.logger import Logger


class SpeechSynthesizer:
    """Owns the phonemizer and inference session for the lifetime of the host.

    `start()` prepares both (it also runs lazily on the first request) and
    `close()` releases them exactly once, abandoning any run in flight.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        phonemizer: Phonemizer,
        model_loader: ModelLoader,
        audio_sink: AudioSink,
        logger: Logger | None = None,
        scheduler: SentenceScheduler | None = None,
    ) -> None:
        self.config = config
        self.phonemizer = phonemizer
        self.model_loader = model_loader
        self.audio_sink = audio_sink
        self.logger = logger
        self.scheduler = scheduler or SentenceScheduler(logger=logger)

        self._model: LoadedModel | None = None
        self._session: InferenceSession | None = None
        self._phonemizer_ready = False
        self._closed = False
        self._request_lock = asyncio.Lock()

    @property
    def started(self) -> bool:
        return self._session is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        if self._closed:
            raise SessionClosedError("Synthesizer was closed.")
        if self._session is not None:
            return

        if not self._phonemizer_ready:
            self.phonemizer.initialize(self.config.espeak_data_path)
            self._phonemizer_ready = True

        self._model = self.model_loader.load(self.config.model_path)
        self._session = self.model_loader.create_session(self._model, self.config.backend)
        self._log(f"Synthesizer ready: voice={self.config.voice}, backend={self.config.backend.value}")

    async def synthesize(self, text: str) -> SynthesisOutcome:
        async with self._request_lock:
            self.start()
            if self._model is None or self._session is None:
                raise SessionClosedError("Synthesizer has no inference session.")

            try:
                phonemes = self.phonemizer.process(text, self.config.voice)
            except PhonemizerError as e:
                self._log(f"Phonemizer failed: {e}. Aborting TTS.")
                return NoAudio(reason=str(e))

            return await self.scheduler.synthesize(
                phonemes,
                self.config.controls,
                self._model.inputs,
                self._session,
                should_stop=lambda: self._closed,
            )

    async def text_to_speech(self, text: str) -> AudioClip | None:
        outcome = await self.synthesize(text)
        if isinstance(outcome, NoAudio):
            self._log(f"No audio: {outcome.reason}")
            return None

        return self.audio_sink.create_clip(
            outcome.samples,
            channel_count=1,
            sample_rate=self.config.sample_rate,
            streaming=False,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        self.scheduler.cancel_current()
        session, self._session = self._session, None
        self._model = None
        try:
            if session is not None:
                session.close()
        finally:
            if self._phonemizer_ready:
                self._phonemizer_ready = False
                self.phonemizer.release()
        self._log("Synthesizer closed.")

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)
