import asyncio
import unittest
from unittest.mock import AsyncMock

from navigator.errors import AnalysisError
from navigator.schema import normalize_payload
from navigator.state import AnalysisSession, AppState, ViewState
from tests.fixtures import invalid_payload, valid_payload


class HeldAnalyzer:
    """Analyzer whose call stays in flight until released."""

    def __init__(self, result):
        self.result = result
        self.release = asyncio.Event()
        self.calls = 0

    async def analyze(self, user_input, mode, fast_track):
        self.calls += 1
        await self.release.wait()
        return self.result


class TestInitialState(unittest.TestCase):

    def test_starts_on_input_view(self):
        session = AnalysisSession(AsyncMock())
        self.assertEqual(session.state, AppState())
        self.assertEqual(session.state.view, ViewState.INPUT)
        self.assertFalse(session.is_busy)


class TestSubmit(unittest.IsolatedAsyncioTestCase):

    async def test_success_switches_to_result(self):
        result = normalize_payload(valid_payload())
        analyzer = AsyncMock()
        analyzer.analyze.return_value = result
        session = AnalysisSession(analyzer)

        accepted = await session.submit("Efficient LLM Inference", "idea", False)

        self.assertTrue(accepted)
        state = session.state
        self.assertEqual(state.view, ViewState.RESULT)
        self.assertIs(state.result, result)
        self.assertIsNone(state.error)
        self.assertFalse(state.is_loading)
        self.assertEqual(state.last_input, "Efficient LLM Inference")
        analyzer.analyze.assert_awaited_once_with("Efficient LLM Inference", "idea", False)

    async def test_invalid_verdict_still_shows_result_view(self):
        analyzer = AsyncMock()
        analyzer.analyze.return_value = normalize_payload(invalid_payload())
        session = AnalysisSession(analyzer)

        await session.submit("1234", "abstract", False)

        self.assertEqual(session.state.view, ViewState.RESULT)
        self.assertFalse(session.state.result.is_valid)

    async def test_failure_stays_on_input_with_error(self):
        analyzer = AsyncMock()
        analyzer.analyze.side_effect = AnalysisError()
        session = AnalysisSession(analyzer)

        accepted = await session.submit("Efficient LLM Inference", "idea", False)

        self.assertTrue(accepted)
        state = session.state
        self.assertEqual(state.view, ViewState.INPUT)
        self.assertEqual(state.error, "Analysis failed. Please try again.")
        self.assertIsNone(state.result)
        self.assertFalse(state.is_loading)
        self.assertEqual(state.last_input, "Efficient LLM Inference")

    async def test_retry_after_failure_clears_error(self):
        analyzer = AsyncMock()
        analyzer.analyze.side_effect = [AnalysisError(), normalize_payload(valid_payload())]
        session = AnalysisSession(analyzer)

        await session.submit("Efficient LLM Inference", "idea", False)
        await session.submit("Efficient LLM Inference", "idea", False)

        self.assertEqual(session.state.view, ViewState.RESULT)
        self.assertIsNone(session.state.error)
        self.assertEqual(analyzer.analyze.await_count, 2)

    async def test_blank_input_is_ignored(self):
        analyzer = AsyncMock()
        session = AnalysisSession(analyzer)

        self.assertFalse(await session.submit("   \n", "idea", False))

        analyzer.analyze.assert_not_awaited()
        self.assertEqual(session.state, AppState())

    async def test_submission_while_in_flight_is_refused(self):
        analyzer = HeldAnalyzer(normalize_payload(valid_payload()))
        session = AnalysisSession(analyzer)

        first = asyncio.create_task(session.submit("Efficient LLM Inference", "idea", False))
        await asyncio.sleep(0)
        self.assertTrue(session.is_busy)

        second = await session.submit("Another topic", "abstract", True)

        self.assertFalse(second)
        analyzer.release.set()
        self.assertTrue(await first)
        self.assertEqual(analyzer.calls, 1)
        self.assertFalse(session.is_busy)
        self.assertEqual(session.state.last_input, "Efficient LLM Inference")

    async def test_submit_from_result_view_is_refused(self):
        analyzer = AsyncMock()
        analyzer.analyze.return_value = normalize_payload(valid_payload())
        session = AnalysisSession(analyzer)
        await session.submit("Efficient LLM Inference", "idea", False)

        self.assertFalse(await session.submit("Another topic", "idea", False))
        self.assertEqual(analyzer.analyze.await_count, 1)

    async def test_unexpected_error_clears_loading_and_propagates(self):
        analyzer = AsyncMock()
        analyzer.analyze.side_effect = RuntimeError("bug")
        session = AnalysisSession(analyzer)

        with self.assertRaises(RuntimeError):
            await session.submit("Efficient LLM Inference", "idea", False)

        self.assertFalse(session.is_busy)
        self.assertEqual(session.state.view, ViewState.INPUT)


class TestReset(unittest.IsolatedAsyncioTestCase):

    async def test_reset_from_valid_result(self):
        analyzer = AsyncMock()
        analyzer.analyze.return_value = normalize_payload(valid_payload())
        session = AnalysisSession(analyzer)
        await session.submit("Efficient LLM Inference", "idea", False)

        state = session.reset()

        self.assertEqual(state.view, ViewState.INPUT)
        self.assertIsNone(state.result)
        self.assertIsNone(state.error)
        self.assertEqual(state.last_input, "Efficient LLM Inference")

    async def test_reset_from_invalid_result(self):
        analyzer = AsyncMock()
        analyzer.analyze.return_value = normalize_payload(invalid_payload())
        session = AnalysisSession(analyzer)
        await session.submit("1234", "abstract", False)

        session.reset()

        self.assertEqual(session.state.view, ViewState.INPUT)
        self.assertIsNone(session.state.result)

    async def test_reset_clears_error(self):
        analyzer = AsyncMock()
        analyzer.analyze.side_effect = AnalysisError()
        session = AnalysisSession(analyzer)
        await session.submit("Efficient LLM Inference", "idea", False)

        session.reset()

        self.assertIsNone(session.state.error)


class TestStateSerialization(unittest.TestCase):

    def test_to_dict(self):
        state = AppState(
            view=ViewState.RESULT,
            result=normalize_payload(invalid_payload()),
            last_input="1234",
        )

        self.assertEqual(state.to_dict(), {
            "view": "result",
            "result": {"isValid": False, "validationFeedback": "Input is not a coherent research abstract."},
            "error": None,
            "is_loading": False,
            "last_input": "1234",
        })


if __name__ == "__main__":
    unittest.main()
