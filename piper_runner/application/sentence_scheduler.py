from __future__ import annotations

from collections.abc import Callable

from piper_runner.application.cooperative_executor import (
    CooperativeExecutor,
    YieldControl,
    drive,
    yield_to_event_loop,
)
from piper_runner.application.errors import EmptySentenceError, RequestAbortError, SentenceSkipError
from piper_runner.application.output_extractor import OutputExtractor, describe_output
from piper_runner.application.port.inference_session import InferenceSession
from piper_runner.application.tensor_builder import TensorBuilder, bound_inputs
from piper_runner.application.waveform_assembler import WaveformAssembler
from piper_runner.domain.vo.model_input import ModelInputSpec
from piper_runner.domain.vo.phoneme import PhonemeResult, Sentence, SynthesisControls
from piper_runner.domain.vo.waveform import (
    NoAudio,
    SampleRun,
    SentenceOutcome,
    SentenceSkip,
    SynthesisOutcome,
    SynthesisReport,
)
from piper_runner.utils.logger import Logger


class _Cancelled(Exception):
    pass


class SentenceScheduler:
    """Drives every sentence of a request through the inference pipeline.

    Sentences run strictly one after another in index order. A failing
    sentence is logged and left out; only a missing phoneme result or an
    incomplete model input declaration aborts the whole request.
    """

    def __init__(
        self,
        *,
        logger: Logger | None = None,
        extractor: OutputExtractor | None = None,
        yield_control: YieldControl = yield_to_event_loop,
    ) -> None:
        self.logger = logger
        self.extractor = extractor or OutputExtractor()
        self.yield_control = yield_control
        self._current_executor: CooperativeExecutor | None = None

    @property
    def current_executor(self) -> CooperativeExecutor | None:
        return self._current_executor

    def cancel_current(self) -> None:
        executor = self._current_executor
        if executor is not None:
            executor.cancel()

    async def synthesize(
        self,
        phonemes: PhonemeResult | None,
        controls: SynthesisControls,
        spec: ModelInputSpec | None,
        session: InferenceSession,
        *,
        should_stop: Callable[[], bool] | None = None,
    ) -> SynthesisOutcome:
        report = SynthesisReport()

        if phonemes is None or len(phonemes) == 0:
            self._log("Phoneme result or sentences are null/empty. Aborting TTS.")
            return NoAudio(reason="Nothing to synthesize.", report=report)

        self._log_model_inputs(spec)
        try:
            builder = TensorBuilder(spec)
        except RequestAbortError as e:
            self._log(f"{e} Aborting.")
            return NoAudio(reason=str(e), report=report)

        report.sentence_count = len(phonemes)
        assembler = WaveformAssembler()

        for position, sentence in enumerate(phonemes):
            if should_stop is not None and should_stop():
                return self._cancelled(report)

            try:
                outcome = await self._synthesize_sentence(
                    position, sentence, controls, builder, session, report, should_stop
                )
            except _Cancelled:
                return self._cancelled(report)

            report.record(outcome)
            if isinstance(outcome, SampleRun):
                assembler.append(outcome)

        outcome = assembler.assemble(report)
        if isinstance(outcome, NoAudio):
            self._log("No audio samples generated.")
        else:
            self._log(
                f"Synthesized {len(report.synthesized)}/{report.sentence_count} sentences, "
                f"{len(outcome)} samples."
            )
        return outcome

    async def _synthesize_sentence(
        self,
        position: int,
        sentence: Sentence | None,
        controls: SynthesisControls,
        builder: TensorBuilder,
        session: InferenceSession,
        report: SynthesisReport,
        should_stop: Callable[[], bool] | None,
    ) -> SentenceOutcome:
        index = position if sentence is None else sentence.index
        try:
            if sentence is None or sentence.is_empty:
                raise EmptySentenceError(f"Sentence {index} or its phoneme IDs are null/empty.")

            tensors = builder.build(sentence.phoneme_ids, len(sentence), controls)
            with bound_inputs(session, tensors):
                for line in tensors.describe():
                    self._log(line)

                executor = session.run()
                self._current_executor = executor
                try:
                    finished = await drive(
                        executor,
                        yield_control=self.yield_control,
                        should_stop=should_stop,
                    )
                finally:
                    self._current_executor = None
                    report.steps += executor.steps
                if not finished:
                    raise _Cancelled()

                output = session.peek_output()
                self._log(f"Sentence {index} output: {describe_output(output)}")
                return self.extractor.extract(output, sentence_index=index)
        except SentenceSkipError as e:
            self._log(f"{e} Skipping sentence {index}.")
            return SentenceSkip(sentence_index=index, reason=str(e))

    def _cancelled(self, report: SynthesisReport) -> NoAudio:
        self._log("Synthesis cancelled.")
        return NoAudio(reason="cancelled", report=report)

    def _log_model_inputs(self, spec: ModelInputSpec | None) -> None:
        count = 0 if spec is None else len(spec)
        self._log(f"Model expects {count} inputs:")
        for i, slot in enumerate(spec or ()):
            self._log(f"Input {i}: {slot.describe()}")

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)
