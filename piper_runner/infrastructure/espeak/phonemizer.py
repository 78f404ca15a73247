from __future__ import annotations

import json
import os
import re
import unicodedata
from pathlib import Path
from typing import TYPE_CHECKING

from piper_runner.application.errors import PhonemizerError
from piper_runner.domain.vo.phoneme import PhonemeResult, Sentence
from piper_runner.utils.logger import Logger

if TYPE_CHECKING:
    from phonemizer.backend import EspeakBackend

BOS = "^"
EOS = "$"
PAD = "_"

_SENTENCE_END = re.compile(r"(?<=[.!?。！？])\s+")


def split_sentences(text: str) -> list[str]:
    return [part.strip() for part in _SENTENCE_END.split(text) if part.strip()]


def load_phoneme_id_map(config_path: str | Path) -> dict[str, list[int]]:
    """Read `phoneme_id_map` from a Piper voice config (`<voice>.onnx.json`)."""
    path = Path(config_path)
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise PhonemizerError(f"Voice config not found: {path}") from e
    except json.JSONDecodeError as e:
        raise PhonemizerError(f"Voice config is not valid JSON: {path}: {e}") from e

    id_map = config.get("phoneme_id_map")
    if not isinstance(id_map, dict) or not id_map:
        raise PhonemizerError(f"Voice config has no phoneme_id_map: {path}")
    for marker in (BOS, EOS, PAD):
        if marker not in id_map:
            raise PhonemizerError(f"phoneme_id_map is missing '{marker}': {path}")
    return {str(k): [int(i) for i in v] for k, v in id_map.items()}


class EspeakPhonemizer:
    """Text to Piper phoneme ids via espeak-ng (through `phonemizer`)."""

    def __init__(
        self,
        *,
        config_path: str | Path,
        logger: Logger | None = None,
    ) -> None:
        self.config_path = Path(config_path)
        self._logger = logger
        self._id_map: dict[str, list[int]] | None = None
        self._backends: dict[str, EspeakBackend] = {}

    @property
    def initialized(self) -> bool:
        return self._id_map is not None

    def initialize(self, data_path: str) -> None:
        if not Path(data_path).is_dir():
            raise PhonemizerError(f"espeak-ng data folder not found: {data_path}")

        # Read by the espeak-ng library when the backend is first created.
        os.environ["ESPEAK_DATA_PATH"] = str(data_path)
        self._id_map = load_phoneme_id_map(self.config_path)
        self._log(f"[Phonemizer] Initialized: data={data_path}, phonemes={len(self._id_map)}")

    def process(self, text: str, voice: str) -> PhonemeResult | None:
        if self._id_map is None:
            raise PhonemizerError("Phonemizer is not initialized.")

        sentences = split_sentences(text or "")
        if not sentences:
            return None

        backend = self._backend(voice)
        try:
            phonemized = backend.phonemize(sentences, strip=True)
        except (RuntimeError, ValueError) as e:
            raise PhonemizerError(f"espeak failed for voice '{voice}': {e}") from e

        return PhonemeResult(
            sentences=tuple(
                Sentence.of(i, self.phonemes_to_ids(phonemes), phonemes)
                for i, phonemes in enumerate(phonemized)
            )
        )

    def phonemes_to_ids(self, phonemes: str) -> list[int]:
        if self._id_map is None:
            raise PhonemizerError("Phonemizer is not initialized.")

        id_map = self._id_map
        ids = list(id_map[BOS])
        for phoneme in unicodedata.normalize("NFD", phonemes):
            if phoneme not in id_map:
                self._log(f"[Phonemizer] Missing phoneme from id map: {phoneme!r}")
                continue
            ids.extend(id_map[phoneme])
            ids.extend(id_map[PAD])
        ids.extend(id_map[EOS])
        return ids

    def release(self) -> None:
        self._backends.clear()
        self._id_map = None

    def _backend(self, voice: str) -> EspeakBackend:
        backend = self._backends.get(voice)
        if backend is not None:
            return backend

        try:
            from phonemizer.backend import EspeakBackend as _EspeakBackend
        except ModuleNotFoundError as e:
            raise PhonemizerError(
                "espeak phonemization requires 'phonemizer'. Install it with: pip install phonemizer"
            ) from e

        try:
            backend = _EspeakBackend(voice, preserve_punctuation=True, with_stress=True)
        except RuntimeError as e:
            raise PhonemizerError(f"espeak-ng is unavailable for voice '{voice}': {e}") from e

        self._backends[voice] = backend
        return backend

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log(message)
