"""
Analysis Response Schema

The contract between the navigator and the generative model.

This module:
1. Declares RESPONSE_SCHEMA, the Gemini output constraint sent with every request
2. Mirrors it as frozen pydantic models used to validate the returned JSON
3. Normalizes a validated payload into the AnalysisResult variant

AnalysisResult is either ValidAnalysis (every content field present, missing
sequences defaulted to empty) or InvalidAnalysis (feedback only). Content the
model sends alongside isValid=false is dropped, never carried.
"""

import json
import logging
from typing import Annotated, Any, Literal, Optional, Union

from google.genai import types
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
)

from .errors import SchemaValidationError

logger = logging.getLogger(__name__)


# =============================================================================
# GEMINI OUTPUT CONSTRAINT
# =============================================================================

_PAPER_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "title": types.Schema(type=types.Type.STRING, description="Exact title of a real existing paper."),
        "year": types.Schema(type=types.Type.INTEGER),
        "oneLiner": types.Schema(type=types.Type.STRING, description="A very short takeaway."),
        "abstract": types.Schema(type=types.Type.STRING, description="2-3 sentences summary of the paper."),
        "github": types.Schema(
            type=types.Type.STRING,
            description="Leave empty/null if unsure. Do not hallucinate.",
            nullable=True,
        ),
    },
    required=["title", "year", "oneLiner", "abstract"],
)

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "isValid": types.Schema(
            type=types.Type.BOOLEAN,
            description=(
                "Set to FALSE if the user input is gibberish, random numbers, too short to be "
                "meaningful, or completely unrelated to research/tech. Otherwise TRUE."
            ),
        ),
        "validationFeedback": types.Schema(
            type=types.Type.STRING,
            description=(
                "If isValid is false, explain why and ask the user to revise. "
                "If isValid is true, leave empty or null."
            ),
            nullable=True,
        ),
        "generatedAbstract": types.Schema(
            type=types.Type.STRING,
            description="If mode is 'Ideation' and valid, this is the generated abstract. Else null.",
            nullable=True,
        ),
        "keywords": types.Schema(
            type=types.Type.ARRAY,
            description="3-4 core technical keywords extracted from the idea.",
            items=types.Schema(type=types.Type.STRING),
            nullable=True,
        ),
        "trendMatchScore": types.Schema(
            type=types.Type.INTEGER,
            description="Strict Match score (0-100). 50 is average. 80+ is rare/exceptional. Do not inflate.",
            nullable=True,
        ),
        "oneLiner": types.Schema(
            type=types.Type.STRING,
            description="A punchy one-sentence summary.",
            nullable=True,
        ),
        "methodology": types.Schema(
            type=types.Type.OBJECT,
            description="Proposed methodology visualization and description.",
            properties={
                "mermaidCode": types.Schema(
                    type=types.Type.STRING,
                    description=(
                        "Professional Mermaid.js 'graph TD' code. MUST use 'subgraph' to group components. "
                        "MUST use 'classDef' for modern styling (rounded corners, pastel colors). "
                        "MUST use distinct shapes (cylinder for data, rhombus for decision)."
                    ),
                ),
                "description": types.Schema(
                    type=types.Type.STRING,
                    description="Brief text explanation of the methodology figure.",
                ),
            },
            nullable=True,
        ),
        "conferences": types.Schema(
            type=types.Type.ARRAY,
            description="Top 3 recommended conferences.",
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "name": types.Schema(type=types.Type.STRING, description="Conference Name (e.g. CVPR 2026)"),
                    "url": types.Schema(type=types.Type.STRING, description="Official homepage URL"),
                    "reason": types.Schema(type=types.Type.STRING, description="Why it fits"),
                    "relevantPapers": types.Schema(
                        type=types.Type.ARRAY,
                        description="3 REAL, EXISTING papers relevant to this specific conference.",
                        items=_PAPER_SCHEMA,
                    ),
                },
                required=["name", "url", "reason", "relevantPapers"],
            ),
            nullable=True,
        ),
        "metrics": types.Schema(
            type=types.Type.ARRAY,
            description="5 radar chart metrics.",
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "metric": types.Schema(type=types.Type.STRING),
                    "value": types.Schema(type=types.Type.INTEGER),
                },
                required=["metric", "value"],
            ),
            nullable=True,
        ),
        "roadmap": types.Schema(
            type=types.Type.ARRAY,
            description="Implementation roadmap steps.",
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "phase": types.Schema(type=types.Type.STRING),
                    "description": types.Schema(type=types.Type.STRING),
                    "timeline": types.Schema(type=types.Type.STRING),
                },
                required=["phase", "description", "timeline"],
            ),
            nullable=True,
        ),
    },
    required=["isValid"],
)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

Percentage = Annotated[StrictInt, Field(ge=0, le=100)]


class _Contract(BaseModel):
    """Base for every schema model: immutable, closed, camelCase on the wire."""
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class Paper(_Contract):
    """A real, existing paper recommended for a venue."""
    title: StrictStr
    year: StrictInt
    one_liner: StrictStr = Field(alias="oneLiner")
    abstract: StrictStr
    github: Optional[StrictStr] = None


class ConferenceRecommendation(_Contract):
    name: StrictStr
    url: StrictStr
    reason: StrictStr
    relevant_papers: tuple[Paper, ...] = Field(alias="relevantPapers")


class Methodology(_Contract):
    mermaid_code: StrictStr = Field("", alias="mermaidCode")
    description: StrictStr = ""


class RadarMetric(_Contract):
    metric: StrictStr
    value: Percentage


class RoadmapStep(_Contract):
    phase: StrictStr
    description: StrictStr
    timeline: StrictStr


class AnalysisPayload(_Contract):
    """The raw model output, exactly as RESPONSE_SCHEMA allows it."""
    is_valid: StrictBool = Field(alias="isValid")
    validation_feedback: Optional[StrictStr] = Field(None, alias="validationFeedback")
    generated_abstract: Optional[StrictStr] = Field(None, alias="generatedAbstract")
    keywords: Optional[tuple[StrictStr, ...]] = None
    trend_match_score: Optional[Percentage] = Field(None, alias="trendMatchScore")
    one_liner: Optional[StrictStr] = Field(None, alias="oneLiner")
    methodology: Optional[Methodology] = None
    conferences: Optional[tuple[ConferenceRecommendation, ...]] = None
    metrics: Optional[tuple[RadarMetric, ...]] = None
    roadmap: Optional[tuple[RoadmapStep, ...]] = None


class ValidAnalysis(_Contract):
    """A usable analysis. Every field is present; sequences may be empty."""
    is_valid: Literal[True] = Field(True, alias="isValid")
    generated_abstract: Optional[str] = Field(None, alias="generatedAbstract")
    keywords: tuple[str, ...] = ()
    trend_match_score: int = Field(0, alias="trendMatchScore")
    one_liner: str = Field("", alias="oneLiner")
    methodology: Methodology = Field(default_factory=Methodology)
    conferences: tuple[ConferenceRecommendation, ...] = ()
    metrics: tuple[RadarMetric, ...] = ()
    roadmap: tuple[RoadmapStep, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InvalidAnalysis(_Contract):
    """The input was rejected as a research topic/abstract."""
    is_valid: Literal[False] = Field(False, alias="isValid")
    validation_feedback: Optional[str] = Field(None, alias="validationFeedback")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


AnalysisResult = Union[ValidAnalysis, InvalidAnalysis]


# =============================================================================
# PARSING
# =============================================================================

def _format_validation_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    return f"{location}: {error.get('msg', 'invalid value')}"


def normalize_payload(data: Any) -> AnalysisResult:
    """
    Validate a decoded payload and build the matching AnalysisResult.

    Args:
        data: The decoded JSON value returned by the model

    Returns:
        ValidAnalysis with defaults applied, or InvalidAnalysis

    Raises:
        SchemaValidationError: If the payload violates the schema
    """
    if not isinstance(data, dict):
        raise SchemaValidationError(
            f"Expected a JSON object at the top level, got {type(data).__name__}"
        )

    try:
        payload = AnalysisPayload.model_validate(data)
    except ValidationError as e:
        errors = [_format_validation_error(err) for err in e.errors()]
        raise SchemaValidationError(
            "Response does not match the analysis schema: " + "; ".join(errors),
            errors,
        ) from e

    if not payload.is_valid:
        dropped = [key for key in data if key not in ("isValid", "validationFeedback") and data[key]]
        if dropped:
            logger.info(f"Discarding content fields on invalid result: {dropped}")
        return InvalidAnalysis(validation_feedback=payload.validation_feedback)

    return ValidAnalysis(
        generated_abstract=payload.generated_abstract,
        keywords=payload.keywords or (),
        trend_match_score=payload.trend_match_score if payload.trend_match_score is not None else 0,
        one_liner=payload.one_liner or "",
        methodology=payload.methodology or Methodology(),
        conferences=payload.conferences or (),
        metrics=payload.metrics or (),
        roadmap=payload.roadmap or (),
    )


def parse_analysis(text: str) -> AnalysisResult:
    """Decode the model's JSON text and normalize it."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaValidationError(f"Response is not valid JSON: {e}") from e
    return normalize_payload(data)
