from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Generator
from typing import Optional

StepGenerator = Generator[None, None, None]
YieldControl = Callable[[], Awaitable[None]]


async def yield_to_event_loop() -> None:
    # A zero-length sleep hands one turn back to the running event loop.
    await asyncio.sleep(0)


class CooperativeExecutor:
    """One inference run expressed as resumable steps.

    Each `advance()` performs a bounded piece of work and reports whether more
    steps remain. Whoever drives the executor decides what happens between
    steps; the executor never waits on anything itself.
    """

    def __init__(
        self,
        steps: StepGenerator,
        *,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._steps = steps
        self._on_close = on_close
        self._done = False
        self._cancelled = False
        self._step_count = 0

    @property
    def done(self) -> bool:
        return self._done

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def steps(self) -> int:
        return self._step_count

    def advance(self) -> bool:
        if self._done:
            return False

        self._step_count += 1
        try:
            next(self._steps)
        except StopIteration:
            self._finish()
            return False
        except BaseException:
            self._finish()
            raise
        return True

    def cancel(self) -> None:
        """Abandon remaining steps; later `advance()` calls do nothing."""
        if self._done:
            return
        self._cancelled = True
        try:
            self._steps.close()
        finally:
            self._finish()

    def _finish(self) -> None:
        self._done = True
        callback, self._on_close = self._on_close, None
        if callback is not None:
            callback()


async def drive(
    executor: CooperativeExecutor,
    *,
    yield_control: YieldControl = yield_to_event_loop,
    should_stop: Optional[Callable[[], bool]] = None,
) -> bool:
    """Advance `executor` to completion, yielding once per unfinished step.

    Returns False when `should_stop` asked to abandon the run (the executor is
    cancelled in that case), True once every step has run. If the driving task
    itself is cancelled, the executor is cancelled before the error propagates.
    """
    try:
        while True:
            if should_stop is not None and should_stop():
                executor.cancel()
                return False
            if not executor.advance():
                return not executor.cancelled
            await yield_control()
    finally:
        if not executor.done:
            executor.cancel()
