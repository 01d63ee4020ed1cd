"""
Prompt templates for research analysis requests.
"""

from .analysis_templates import (
    AnalysisMode,
    ModeMetadata,
    MODE_METADATA,
    MODE_TEMPLATES,
    MODEL_ID,
    MODEL_NAME,
    PROMPT_SUMMARY,
    SIMULATED_DATE,
    SYSTEM_INSTRUCTION,
    build_prompt,
    get_mode,
    get_mode_metadata,
)

__all__ = [
    "AnalysisMode",
    "ModeMetadata",
    "MODE_METADATA",
    "MODE_TEMPLATES",
    "MODEL_ID",
    "MODEL_NAME",
    "PROMPT_SUMMARY",
    "SIMULATED_DATE",
    "SYSTEM_INSTRUCTION",
    "build_prompt",
    "get_mode",
    "get_mode_metadata",
]
