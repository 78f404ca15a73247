from __future__ import annotations

import asyncio
import dataclasses
import sys

from piper_runner.application.errors import AudioOutputError, ExternalServiceError
from piper_runner.config import AppConfig
from piper_runner.di_container import AppContainer, build_container
from piper_runner.domain.vo.audio_clip import AudioClip
from piper_runner.domain.vo.backend import BackendType
from piper_runner.utils.args import parse_args
from piper_runner.utils.env import load_dotenv
from piper_runner.utils.logger import Logger


def _read_text(text: str | None) -> str:
    if text is not None:
        return text
    text = sys.stdin.read().strip()
    if not text:
        text = input("> ").strip()
    return text


async def _speak(container: AppContainer, text: str) -> AudioClip | None:
    try:
        return await container.synthesizer.text_to_speech(text)
    finally:
        container.synthesizer.close()


def _run_gui(container: AppContainer) -> int:
    from PySide6.QtWidgets import QApplication

    from piper_runner.presentation.main_window import MainWindow
    from piper_runner.presentation.synthesis_worker import SynthesisWorker

    app = QApplication(sys.argv)
    worker = SynthesisWorker(container.synthesizer, speaker=container.speaker, logger=container.logger)
    window = MainWindow(worker, logger=container.logger)
    window.show()
    worker.start()
    try:
        return app.exec()
    finally:
        worker.shutdown()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    load_dotenv(args.env_file)

    try:
        config = AppConfig.from_env()
        if args.voice:
            config = dataclasses.replace(config, voice=args.voice)
        if args.backend:
            config = dataclasses.replace(config, backend=BackendType.parse(args.backend))
    except ValueError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    echo = None if args.quiet else (lambda line: print(line, file=sys.stderr))
    container = build_container(config, logger=Logger(echo=echo))

    try:
        if args.gui:
            return _run_gui(container)

        text = _read_text(args.text)
        clip = asyncio.run(_speak(container, text))
        if clip is None:
            print("No audio was generated.", file=sys.stderr)
            return 1

        print(f"{clip.name}: {clip.length} samples, {clip.duration:.2f}s @ {clip.sample_rate} Hz")
        if args.output:
            from piper_runner.infrastructure.audio.clip_factory import write_wav

            print(f"Saved {write_wav(clip, args.output)}")
        if args.play:
            container.speaker.play(clip)
        return 0
    except AudioOutputError as exc:
        print(f"Audio output error: {exc}", file=sys.stderr)
        return 4
    except ExternalServiceError as exc:
        print(f"Voice load error: {exc}", file=sys.stderr)
        return 3
    finally:
        if args.save_log:
            container.logger.save()


if __name__ == "__main__":
    raise SystemExit(main())
