"""
Display Utilities for the Result Page

Turns a normalized AnalysisResult into the view model the page renders.
The page does no business logic of its own: links, score text and the
invalid/valid layout choice are all decided here.

Key functions:
- build_view_model: Layout-tagged view model for a result and the user's input
- scholar_link: Search link for a paper title
- github_link: Repository link, only when the model supplied one
- external_link: Venue link, only when it is an http(s) URL
- score_badge: Emoji for the trend match score
"""

from typing import Any, Optional
from urllib.parse import quote, urlsplit

from .schema import (
    AnalysisResult,
    ConferenceRecommendation,
    InvalidAnalysis,
    Paper,
    ValidAnalysis,
)

SCHOLAR_SEARCH_URL = "https://scholar.google.com/scholar?q="

DEFAULT_INVALID_FEEDBACK = (
    "The input provided doesn't appear to be a valid research topic or abstract. "
    "Please try again with more specific technical details."
)

# Rotated on the submit button while an analysis is in flight
LOADING_STEPS = [
    "Initializing Vibe Check...",
    "Scanning CVPR/NeurIPS Trends...",
    "Synthesizing Novel Methodology...",
    "Cross-referencing SOTA Papers...",
    "Calculating Success Probability...",
    "Finalizing Visual Roadmap...",
]
LOADING_STEP_INTERVAL_MS = 2500


def scholar_link(title: str) -> str:
    """
    Build a Google Scholar search URL for a paper title.

    Percent-encodes with the same reserved set as JavaScript's
    encodeURIComponent.

    Examples:
        scholar_link("Attention Is All You Need")
            -> "https://scholar.google.com/scholar?q=Attention%20Is%20All%20You%20Need"
    """
    return SCHOLAR_SEARCH_URL + quote(title, safe="!~*'()")


def github_link(github: Optional[str]) -> Optional[str]:
    """Prefix the model's repository path with https://, or None when absent/blank."""
    if not github or not github.strip():
        return None
    return f"https://{github.strip()}"


def external_link(url: Optional[str]) -> Optional[str]:
    """Return the URL only when it is an absolute http(s) link, else None."""
    if not url or not url.strip():
        return None
    url = url.strip()
    if urlsplit(url).scheme.lower() not in ("http", "https"):
        return None
    return url


def score_badge(score: int) -> str:
    if score > 80:
        return "🔥"
    elif score > 50:
        return "⚖️"
    return "❄️"


def format_score(score: int) -> str:
    return f"{score}%"


def _paper_view(paper: Paper) -> dict[str, Any]:
    return {
        "title": paper.title,
        "year": paper.year,
        "oneLiner": paper.one_liner,
        "abstract": paper.abstract,
        "github": paper.github.strip() if paper.github and paper.github.strip() else None,
        "scholarUrl": scholar_link(paper.title),
        "githubUrl": github_link(paper.github),
    }


def _conference_view(conference: ConferenceRecommendation) -> dict[str, Any]:
    return {
        "name": conference.name,
        "url": external_link(conference.url),
        "reason": conference.reason,
        "relevantPapers": [_paper_view(paper) for paper in conference.relevant_papers],
    }


def _invalid_view(result: InvalidAnalysis, user_input: str) -> dict[str, Any]:
    return {
        "layout": "invalid",
        "userInput": user_input,
        "feedback": result.validation_feedback or DEFAULT_INVALID_FEEDBACK,
    }


def _valid_view(result: ValidAnalysis, user_input: str) -> dict[str, Any]:
    return {
        "layout": "result",
        "userInput": user_input,
        "generatedAbstract": result.generated_abstract or None,
        "keywords": list(result.keywords),
        "oneLiner": result.one_liner,
        "trendMatchScore": result.trend_match_score,
        "scoreText": format_score(result.trend_match_score),
        "scoreBadge": score_badge(result.trend_match_score),
        "methodology": {
            "mermaidCode": result.methodology.mermaid_code,
            "description": result.methodology.description,
        },
        "conferences": [_conference_view(conf) for conf in result.conferences],
        "metrics": [{"metric": m.metric, "value": m.value} for m in result.metrics],
        "roadmap": [
            {"phase": step.phase, "description": step.description, "timeline": step.timeline}
            for step in result.roadmap
        ],
    }


def build_view_model(result: AnalysisResult, user_input: str) -> dict[str, Any]:
    """
    Build the page view model for a result.

    Invalid results get a terminal layout carrying only the feedback and
    the echoed input; no content field is ever included for them.

    Args:
        result: The normalized analysis
        user_input: The text the user submitted

    Returns:
        Dict with "layout" set to "invalid" or "result"
    """
    if isinstance(result, InvalidAnalysis):
        return _invalid_view(result, user_input)
    return _valid_view(result, user_input)
