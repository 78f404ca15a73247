from __future__ import annotations


class SynthesisError(RuntimeError):
    """Base class for failures inside the synthesis pipeline."""


class RequestAbortError(SynthesisError):
    """Raised when a whole synthesis request cannot proceed."""


class SentenceSkipError(SynthesisError):
    """Raised when a single sentence fails; the request continues without it."""


class EmptySentenceError(SentenceSkipError):
    """Raised when a sentence is absent or has no phoneme ids."""


class TensorBuildError(SentenceSkipError):
    """Raised when input buffers cannot be built for a sentence."""


class MissingInputError(SentenceSkipError):
    """Raised when a run starts without every required input bound."""


class InferenceStepError(SentenceSkipError):
    """Raised when the model fails while a run is being advanced."""


class EmptyOutputError(SentenceSkipError):
    """Raised when a finished run has no primary output."""


class OutputTypeMismatchError(SentenceSkipError):
    """Raised when the primary output is not a floating point tensor."""


class SessionBusyError(SynthesisError):
    """Raised when a run is started while another one is still in flight."""


class SessionClosedError(SynthesisError):
    """Raised when a released session or synthesizer is used."""


class ExternalServiceError(RuntimeError):
    """Raised when a collaborator (phonemizer, model runtime, audio device) fails."""


class PhonemizerError(ExternalServiceError):
    """Raised when text cannot be phonemized."""


class ModelLoadError(ExternalServiceError):
    """Raised when a voice model cannot be loaded or a session cannot be created."""


class AudioOutputError(ExternalServiceError):
    """Raised when a clip cannot be written or played."""
