from __future__ import annotations

import asyncio

from PySide6.QtCore import QThread, Signal

from piper_runner.application.errors import ExternalServiceError, SynthesisError
from piper_runner.application.speech_synthesizer import SpeechSynthesizer
from piper_runner.infrastructure.audio.speaker import Speaker
from piper_runner.utils.logger import Logger


class SynthesisWorker(QThread):
    """Hosts the asyncio loop that drives synthesis off the UI thread."""

    log = Signal(str)
    busy_changed = Signal(bool)
    clip_ready = Signal(float)
    failed = Signal(str)

    def __init__(self, synthesizer: SpeechSynthesizer, *, speaker: Speaker, logger: Logger):
        super().__init__()
        self.synthesizer = synthesizer
        self.speaker = speaker
        self.logger = logger
        self._loop: asyncio.AbstractEventLoop | None = None

        self.logger.on_emit = self.log.emit

    def run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.close()
            self._loop = None

    def request(self, text: str) -> None:
        loop = self._loop
        if loop is None or not text.strip():
            return
        asyncio.run_coroutine_threadsafe(self._speak(text), loop)

    def shutdown(self) -> None:
        loop = self._loop
        if loop is not None:
            loop.call_soon_threadsafe(self._teardown, loop)
        else:
            self.synthesizer.close()
        self.wait(2000)

    async def _speak(self, text: str) -> None:
        self.busy_changed.emit(True)
        try:
            clip = await self.synthesizer.text_to_speech(text)
            if clip is None:
                self.failed.emit("No audio was generated.")
                return
            self.clip_ready.emit(clip.duration)
            await asyncio.get_running_loop().run_in_executor(None, self.speaker.play, clip)
        except (ExternalServiceError, SynthesisError) as e:
            self.log.emit(f"Error: {e}")
            self.failed.emit(str(e))
        finally:
            self.busy_changed.emit(False)

    def _teardown(self, loop: asyncio.AbstractEventLoop) -> None:
        self.speaker.interrupt()
        self.synthesizer.close()
        loop.stop()
