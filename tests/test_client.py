import json
import os
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from google.genai import types

from navigator.client import AnalysisClient, describe_failure
from navigator.errors import AnalysisError, SchemaValidationError
from navigator.prompts import MODEL_ID, SYSTEM_INSTRUCTION, build_prompt
from navigator.schema import RESPONSE_SCHEMA, InvalidAnalysis, ValidAnalysis
from tests.fixtures import invalid_payload, valid_payload


class GeminiMockMixin:
    """Patches genai.Client so every call sees a scripted async client."""

    def mock_gemini(self, response=None, side_effect=None):
        patcher = patch("navigator.client.genai.Client")
        client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        aio = client_cls.return_value.aio
        aio.__aexit__.return_value = False
        aclient = aio.__aenter__.return_value
        aclient.models.generate_content = AsyncMock(return_value=response, side_effect=side_effect)
        return client_cls, aclient.models.generate_content


class TestClientInit(unittest.TestCase):

    @patch("navigator.client.genai.Client")
    def test_explicit_key(self, mock_client_cls):
        client = AnalysisClient(api_key="test-key")
        self.assertEqual(client.api_key, "test-key")
        mock_client_cls.assert_not_called()

    @patch.dict(os.environ, {"GEMINI_API_KEY": "env-key"})
    def test_key_from_environment(self):
        client = AnalysisClient()
        self.assertEqual(client.api_key, "env-key")
        self.assertEqual(client.model, MODEL_ID)

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_key_raises(self):
        with self.assertRaises(ValueError):
            AnalysisClient()

    @patch("navigator.client.genai.Client")
    def test_create_client_passes_http_options(self, mock_client_cls):
        options = types.HttpOptions(base_url="http://127.0.0.1:9")
        AnalysisClient(api_key="test-key", http_options=options).create_client()
        mock_client_cls.assert_called_once_with(api_key="test-key", http_options=options)


class TestAnalyze(GeminiMockMixin, unittest.IsolatedAsyncioTestCase):

    async def test_success_returns_normalized_result(self):
        _, generate = self.mock_gemini(MagicMock(text=json.dumps(valid_payload())))
        client = AnalysisClient(api_key="test-key")

        result = await client.analyze("Efficient LLM Inference", "idea", False)

        self.assertIsInstance(result, ValidAnalysis)
        self.assertEqual(result.trend_match_score, 72)
        generate.assert_awaited_once()

    async def test_each_call_uses_a_fresh_closed_client(self):
        client_cls, generate = self.mock_gemini(MagicMock(text=json.dumps(valid_payload())))
        client = AnalysisClient(api_key="test-key")

        await client.analyze("Efficient LLM Inference", "idea", False)
        await client.analyze("Efficient LLM Inference", "idea", False)

        self.assertEqual(client_cls.call_count, 2)
        self.assertEqual(client_cls.return_value.aio.__aexit__.await_count, 2)
        self.assertEqual(generate.await_count, 2)

    async def test_request_carries_prompt_schema_and_persona(self):
        _, generate = self.mock_gemini(MagicMock(text=json.dumps(invalid_payload())))
        client = AnalysisClient(api_key="test-key")

        await client.analyze("1234", "abstract", True)

        kwargs = generate.await_args.kwargs
        self.assertEqual(kwargs["model"], MODEL_ID)
        self.assertEqual(kwargs["contents"], build_prompt("1234", "abstract", True))
        config = kwargs["config"]
        self.assertEqual(config.response_mime_type, "application/json")
        self.assertEqual(config.response_schema, RESPONSE_SCHEMA)
        self.assertIn(SYSTEM_INSTRUCTION, str(config.system_instruction))

    async def test_invalid_verdict_is_not_a_failure(self):
        self.mock_gemini(MagicMock(text=json.dumps(invalid_payload())))
        client = AnalysisClient(api_key="test-key")

        result = await client.analyze("1234", "abstract", False)

        self.assertIsInstance(result, InvalidAnalysis)

    async def test_call_exception_becomes_analysis_error(self):
        _, generate = self.mock_gemini(side_effect=ConnectionError("network unreachable"))
        client = AnalysisClient(api_key="test-key")

        with self.assertRaises(AnalysisError) as ctx:
            await client.analyze("Efficient LLM Inference", "idea", False)

        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)
        self.assertEqual(str(ctx.exception), AnalysisError.USER_MESSAGE)
        generate.assert_awaited_once()

    async def test_empty_text_becomes_analysis_error(self):
        self.mock_gemini(MagicMock(text=None))
        client = AnalysisClient(api_key="test-key")

        with self.assertRaises(AnalysisError):
            await client.analyze("Efficient LLM Inference", "idea", False)

    async def test_non_json_text_becomes_analysis_error(self):
        self.mock_gemini(MagicMock(text="I cannot answer that."))
        client = AnalysisClient(api_key="test-key")

        with self.assertRaises(AnalysisError) as ctx:
            await client.analyze("Efficient LLM Inference", "idea", False)

        self.assertIsInstance(ctx.exception.__cause__, SchemaValidationError)

    async def test_schema_violation_becomes_analysis_error(self):
        payload = valid_payload()
        payload["trendMatchScore"] = "very high"
        self.mock_gemini(MagicMock(text=json.dumps(payload)))
        client = AnalysisClient(api_key="test-key")

        with self.assertRaises(AnalysisError):
            await client.analyze("Efficient LLM Inference", "idea", False)


class TestDescribeFailure(unittest.TestCase):

    def test_classifies_common_errors(self):
        self.assertIn("quota", describe_failure(Exception("429 RESOURCE_EXHAUSTED")))
        self.assertIn("timed out", describe_failure(TimeoutError("Deadline exceeded")))
        self.assertEqual(describe_failure(Exception("boom")), "unclassified failure")


if __name__ == "__main__":
    unittest.main()
