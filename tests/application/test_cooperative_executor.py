"""Unit tests for CooperativeExecutor and drive()."""
from __future__ import annotations

import asyncio
import unittest

from piper_runner.application.cooperative_executor import CooperativeExecutor, drive


def _steps(trace: list[str], count: int):
    try:
        for i in range(count):
            trace.append(f"step {i}")
            if i < count - 1:
                yield
    finally:
        trace.append("closed")


class TestCooperativeExecutor(unittest.TestCase):
    """Test cases for CooperativeExecutor."""

    def test_advance_reports_remaining_steps(self):
        """Test that advance returns True until the last step ran."""
        trace: list[str] = []
        executor = CooperativeExecutor(_steps(trace, 3))

        self.assertTrue(executor.advance())
        self.assertTrue(executor.advance())
        self.assertFalse(executor.advance())

        self.assertTrue(executor.done)
        self.assertEqual(executor.steps, 3)
        self.assertEqual(trace, ["step 0", "step 1", "step 2", "closed"])

    def test_advance_after_done_does_nothing(self):
        """Test that a finished executor does no further work."""
        trace: list[str] = []
        executor = CooperativeExecutor(_steps(trace, 1))
        executor.advance()

        self.assertFalse(executor.advance())
        self.assertEqual(executor.steps, 1)

    def test_on_close_called_once(self):
        """Test that the close callback fires exactly once."""
        calls: list[int] = []
        executor = CooperativeExecutor(_steps([], 2), on_close=lambda: calls.append(1))

        while executor.advance():
            pass
        executor.cancel()

        self.assertEqual(calls, [1])

    def test_cancel_abandons_remaining_steps(self):
        """Test that cancel closes the step generator and stops advancing."""
        trace: list[str] = []
        calls: list[int] = []
        executor = CooperativeExecutor(_steps(trace, 5), on_close=lambda: calls.append(1))
        executor.advance()

        executor.cancel()

        self.assertTrue(executor.cancelled)
        self.assertFalse(executor.advance())
        self.assertEqual(trace, ["step 0", "closed"])
        self.assertEqual(calls, [1])

    def test_cancel_before_first_step_still_closes(self):
        """Test that an executor cancelled before starting still runs its close callback."""
        calls: list[int] = []
        executor = CooperativeExecutor(_steps([], 2), on_close=lambda: calls.append(1))

        executor.cancel()

        self.assertEqual(calls, [1])
        self.assertEqual(executor.steps, 0)

    def test_step_error_propagates_and_finishes(self):
        """Test that an exception in a step surfaces from advance and ends the run."""

        def failing():
            yield
            raise ValueError("bad step")

        calls: list[int] = []
        executor = CooperativeExecutor(failing(), on_close=lambda: calls.append(1))
        executor.advance()

        with self.assertRaises(ValueError):
            executor.advance()
        self.assertTrue(executor.done)
        self.assertEqual(calls, [1])


class TestDrive(unittest.IsolatedAsyncioTestCase):
    """Test cases for drive()."""

    async def test_yields_between_steps(self):
        """Test that drive yields once for each step that left work behind."""
        yields: list[int] = []

        async def yield_control() -> None:
            yields.append(1)
            await asyncio.sleep(0)

        executor = CooperativeExecutor(_steps([], 4))

        finished = await drive(executor, yield_control=yield_control)

        self.assertTrue(finished)
        self.assertEqual(len(yields), 3)

    async def test_should_stop_cancels(self):
        """Test that drive cancels the executor when asked to stop."""
        executor = CooperativeExecutor(_steps([], 4))
        checks = {"n": 0}

        def should_stop() -> bool:
            checks["n"] += 1
            return checks["n"] > 2

        finished = await drive(executor, should_stop=should_stop)

        self.assertFalse(finished)
        self.assertTrue(executor.cancelled)
        self.assertEqual(executor.steps, 2)

    async def test_external_cancel_is_reported(self):
        """Test that a cancel from outside the driver ends drive with False."""
        executor = CooperativeExecutor(_steps([], 10))

        async def cancel_on_yield() -> None:
            executor.cancel()

        finished = await drive(executor, yield_control=cancel_on_yield)

        self.assertFalse(finished)

    async def test_task_cancellation_cancels_executor(self):
        """Test that cancelling the driving task abandons the remaining steps."""
        trace: list[str] = []
        closed: list[bool] = []
        executor = CooperativeExecutor(_steps(trace, 10), on_close=lambda: closed.append(True))

        task = asyncio.create_task(drive(executor))
        await asyncio.sleep(0)
        task.cancel()

        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertTrue(executor.cancelled)
        self.assertTrue(executor.done)
        self.assertEqual(closed, [True])
        self.assertEqual(trace[-1], "closed")

    async def test_other_tasks_progress_during_run(self):
        """Test that the event loop keeps serving other tasks while a run advances."""
        ticks: list[int] = []

        async def ticker() -> None:
            for i in range(3):
                ticks.append(i)
                await asyncio.sleep(0)

        task = asyncio.create_task(ticker())
        await drive(CooperativeExecutor(_steps([], 5)))
        await task

        self.assertEqual(ticks, [0, 1, 2])


if __name__ == "__main__":
    unittest.main()
