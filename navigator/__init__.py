"""
Navigator module for research topic and abstract analysis.

This module provides:
- The Gemini response schema and its validating models
- Prompt templates for the idea and abstract modes
- The analysis client (one Gemini call per submission)
- The view state machine driving the single-page UI
- Display utilities that build the result page view model
"""

from .errors import AnalysisError, SchemaValidationError

from .schema import (
    RESPONSE_SCHEMA,
    AnalysisResult,
    ValidAnalysis,
    InvalidAnalysis,
    Paper,
    ConferenceRecommendation,
    Methodology,
    RadarMetric,
    RoadmapStep,
    normalize_payload,
    parse_analysis,
)

from .prompts import (
    AnalysisMode,
    MODE_METADATA,
    MODEL_ID,
    MODEL_NAME,
    PROMPT_SUMMARY,
    SIMULATED_DATE,
    SYSTEM_INSTRUCTION,
    build_prompt,
    get_mode,
)

from .client import AnalysisClient, describe_failure

from .state import AnalysisSession, AppState, ViewState

from .presentation import (
    LOADING_STEPS,
    LOADING_STEP_INTERVAL_MS,
    build_view_model,
    external_link,
    github_link,
    scholar_link,
    score_badge,
)

__all__ = [
    # Errors
    "AnalysisError",
    "SchemaValidationError",
    # Schema
    "RESPONSE_SCHEMA",
    "AnalysisResult",
    "ValidAnalysis",
    "InvalidAnalysis",
    "Paper",
    "ConferenceRecommendation",
    "Methodology",
    "RadarMetric",
    "RoadmapStep",
    "normalize_payload",
    "parse_analysis",
    # Prompts
    "AnalysisMode",
    "MODE_METADATA",
    "MODEL_ID",
    "MODEL_NAME",
    "PROMPT_SUMMARY",
    "SIMULATED_DATE",
    "SYSTEM_INSTRUCTION",
    "build_prompt",
    "get_mode",
    # Client
    "AnalysisClient",
    "describe_failure",
    # State
    "AnalysisSession",
    "AppState",
    "ViewState",
    # Presentation
    "LOADING_STEPS",
    "LOADING_STEP_INTERVAL_MS",
    "build_view_model",
    "external_link",
    "github_link",
    "scholar_link",
    "score_badge",
]
