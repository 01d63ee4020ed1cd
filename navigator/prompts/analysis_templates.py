"""
Analysis Prompt Templates - 2 Input Modes

Each submission is composed from a mode-specific opening plus the shared
task guidelines (validation, scoring calibration, methodology figure,
venue and paper rules).

Modes:
1. Idea - a terse topic; the model writes a novel abstract, then analyzes it
2. Abstract - an existing abstract, analyzed directly

The builder is pure: no network, no validation of the model's verdict, no
clock. The "current date" the model reasons about is the fixed
SIMULATED_DATE so that deadline advice is reproducible.
"""

from dataclasses import dataclass
from enum import Enum


class AnalysisMode(Enum):
    """The two ways a user can submit research input."""
    IDEA = "idea"
    ABSTRACT = "abstract"


@dataclass(frozen=True)
class ModeMetadata:
    """Display metadata for each input mode."""
    key: str
    label: str
    icon: str
    heading: str
    description: str
    placeholder: str
    prompt_label: str


MODE_METADATA: dict[str, ModeMetadata] = {
    "idea": ModeMetadata(
        key="idea",
        label="Get Research Idea",
        icon="💡",
        heading="Enter a Research Topic",
        description="We will generate a novel abstract for you and then analyze its vibe.",
        placeholder="e.g., 'Generative Video for Robotics', 'Efficient LLM Inference'...",
        prompt_label="Ideation",
    ),
    "abstract": ModeMetadata(
        key="abstract",
        label="Evaluate Abstract",
        icon="📝",
        heading="Input Research Abstract",
        description="Paste your existing abstract to check its trendiness and conference fit.",
        placeholder="Paste your research abstract here...",
        prompt_label="Evaluation",
    ),
}


MODEL_ID = "gemini-2.5-flash"
MODEL_NAME = "Gemini 2.5 Flash"

SIMULATED_DATE = "December 2025"

SYSTEM_INSTRUCTION = (
    "You are the 'Research Vibe Navigator,' a strict AI research evaluator. "
    "You provide professional, modern visualizations and cite REAL research papers."
)

# Shown behind the "Show Prompt Used" toggle on the result page
PROMPT_SUMMARY: dict[str, str] = {
    "role": "Research Vibe Navigator",
    "simulated_date": SIMULATED_DATE,
    "grading": "Strict/Objective (Normal Dist.)",
    "validation": "Enabled",
}


# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

IDEA_TEMPLATE = '''
User Input Topic: "{user_input}"
MODE: Ideation.
STEP 1: Validate input. If meaningful, generate a high-quality, novel SOTA-level research abstract based on this topic.
STEP 2: Analyze the generated abstract.
'''

ABSTRACT_TEMPLATE = '''
User Input Abstract: "{user_input}"
MODE: Evaluation.
STEP 1: Validate input. If meaningful, analyze the provided abstract directly.
'''

COMPRESSED_DEADLINE_RULE = (
    "DEADLINE WINDOW: COMPRESSED. The author must submit within 2 months. "
    "Only recommend venues with submission deadlines in Jan/Feb 2026."
)

STANDARD_DEADLINE_RULE = (
    "DEADLINE WINDOW: STANDARD. Recommend the best-fitting venues regardless of deadline."
)

GUIDELINES_TEMPLATE = '''
CONFIG:
- Fast Track Mode: {fast_track}
- Current Simulated Date: {simulated_date}
- {deadline_rule}

Task Guidelines:
1. VALIDATION (CRITICAL):
   - Check if the input is nonsense (e.g. "1234", "asdf"), profane, or completely unrelated to research/science.
   - If Invalid: Set "isValid" to false, explain why in "validationFeedback", and leave every other field empty.

2. SCORING (STRICT & OBJECTIVE):
   - Trend Match Score & Radar Metrics must be OBJECTIVE.
   - 50% = Average. 80%+ = Exceptional. Do not inflate scores.

3. Content Generation (Only if Valid):
   - Methodology Figure:
       - Create a HIGHLY DETAILED Mermaid.js 'graph TD'.
       - Use 'subgraph' to organize logical blocks (e.g., 'Encoder', 'Latent Space', 'Decoder').
       - Define and Apply classes:
         classDef data fill:#e0f2f1,stroke:#00695c,stroke-width:2px;
         classDef process fill:#fff3e0,stroke:#e65100,stroke-width:2px;
         classDef model fill:#f3e5f5,stroke:#7b1fa2,stroke-width:2px;
       - Assign these classes to nodes to make it visually professional.
   - Conferences & Papers:
       - Recommend the top 3 conferences.
       - FIND REAL PAPERS: Provide 3 *existing* papers per conference that actually exist in the real world.
       - Do NOT hallucinate GitHub links unless you are 100% certain.
   - Roadmap: Plan the execution phases starting from {simulated_date}.

Return the result in strict JSON format.
'''

MODE_TEMPLATES: dict[str, str] = {
    "idea": IDEA_TEMPLATE,
    "abstract": ABSTRACT_TEMPLATE,
}


def get_mode(mode: str | AnalysisMode) -> AnalysisMode:
    """Resolve a mode key to an AnalysisMode."""
    if isinstance(mode, AnalysisMode):
        return mode
    try:
        return AnalysisMode(mode)
    except ValueError:
        raise ValueError(f"Unknown mode: {mode}. Valid modes: {list(MODE_TEMPLATES.keys())}") from None


def get_mode_metadata(mode: str | AnalysisMode) -> ModeMetadata:
    """Get display metadata for a mode."""
    return MODE_METADATA[get_mode(mode).value]


def build_prompt(user_input: str, mode: str | AnalysisMode, fast_track: bool) -> str:
    """
    Compose the instruction text for one analysis.

    Args:
        user_input: The topic or abstract, non-blank
        mode: "idea" or "abstract"
        fast_track: Whether the author is on a compressed (< 2 months) deadline

    Returns:
        The full instruction; identical inputs always give identical text
    """
    if not user_input or not user_input.strip():
        raise ValueError("user_input must not be blank")

    resolved = get_mode(mode)
    opening = MODE_TEMPLATES[resolved.value].format(user_input=user_input)

    guidelines = GUIDELINES_TEMPLATE.format(
        fast_track="true" if fast_track else "false",
        simulated_date=SIMULATED_DATE,
        deadline_rule=COMPRESSED_DEADLINE_RULE if fast_track else STANDARD_DEADLINE_RULE,
    )

    return opening + guidelines
