"""
Research Analysis Client

Sends one research submission to Gemini and returns a normalized
AnalysisResult.

This module:
1. Builds the instruction text for the submission
2. Calls Gemini once with RESPONSE_SCHEMA as the output constraint
3. Parses and validates the JSON text in the response
4. Collapses every failure into AnalysisError

There is no retry. The caller decides whether the user may resubmit.
"""

import os
import time
import logging
from typing import Optional

from google import genai
from google.genai import types

from .errors import AnalysisError, SchemaValidationError
from .prompts import MODEL_ID, SYSTEM_INSTRUCTION, AnalysisMode, build_prompt
from .schema import RESPONSE_SCHEMA, AnalysisResult, parse_analysis

logger = logging.getLogger(__name__)


def describe_failure(error: Exception) -> str:
    """Classify an SDK/transport exception for the diagnostic log."""
    error_str = str(error).lower()

    if "permission_denied" in error_str or "api key" in error_str:
        return "API key is invalid or lacks required permissions"
    elif "resource_exhausted" in error_str or "quota" in error_str:
        return "API quota exceeded"
    elif "invalid_argument" in error_str:
        return "invalid request parameters"
    elif "safety" in error_str or "blocked" in error_str:
        return "blocked by safety filters"
    elif "deadline" in error_str or "timeout" in error_str:
        return "request timed out"
    elif "not found" in error_str:
        return "model not available"
    else:
        return "unclassified failure"


class AnalysisClient:
    """
    Runs research analyses against Gemini.

    Usage:
        client = AnalysisClient(api_key="...")
        result = await client.analyze("Efficient LLM Inference", "idea", fast_track=False)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = MODEL_ID,
        http_options: Optional[types.HttpOptions] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key (defaults to GEMINI_API_KEY env var)
            model: Gemini model to use
            http_options: Transport overrides passed to genai.Client (base_url, timeout)
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError("Gemini API key required")

        self.model = model
        self.http_options = http_options

    def create_client(self) -> genai.Client:
        """
        Create a Gemini client for a single call.

        The async transport's connection pool is bound to the event loop
        that opened it, and each async Flask view runs on its own loop.
        """
        return genai.Client(api_key=self.api_key, http_options=self.http_options)

    def create_generation_config(self) -> types.GenerateContentConfig:
        """Create the Gemini generation configuration."""
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
            system_instruction=SYSTEM_INSTRUCTION,
        )

    async def analyze(
        self,
        user_input: str,
        mode: str | AnalysisMode,
        fast_track: bool,
    ) -> AnalysisResult:
        """
        Analyze a research topic or abstract.

        Args:
            user_input: Non-blank topic or abstract
            mode: "idea" or "abstract"
            fast_track: Compressed submission deadline

        Returns:
            ValidAnalysis or InvalidAnalysis

        Raises:
            AnalysisError: On any call, empty-response, JSON or schema failure
        """
        prompt = build_prompt(user_input, mode, fast_track)
        logger.info(f"Analyzing submission: mode={mode}, fast_track={fast_track}, {len(user_input)} chars")

        start_time = time.time()
        try:
            async with self.create_client().aio as aclient:
                response = await aclient.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=self.create_generation_config(),
                )
        except Exception as e:
            elapsed = time.time() - start_time
            logger.error(f"Gemini analysis call failed after {elapsed:.2f}s ({describe_failure(e)}): {e}")
            raise AnalysisError() from e

        elapsed = time.time() - start_time
        text = getattr(response, "text", None)
        if not text:
            logger.error(f"Gemini returned no text payload after {elapsed:.2f}s")
            raise AnalysisError()

        logger.info(f"Gemini response received in {elapsed:.2f}s: {len(text)} chars")

        try:
            result = parse_analysis(text)
        except SchemaValidationError as e:
            logger.error(f"Gemini response rejected: {e}")
            logger.debug(f"Rejected payload: {text[:500]}")
            raise AnalysisError() from e

        logger.info(f"Analysis complete: is_valid={result.is_valid}")
        return result
