"""Canned Gemini payloads shared by the test modules."""

import copy


def _paper(title, year=2024, github=None):
    paper = {
        "title": title,
        "year": year,
        "oneLiner": f"Takeaway of {title}.",
        "abstract": f"{title} studies something. It reports strong results.",
    }
    if github is not None:
        paper["github"] = github
    return paper


VALID_IDEA_PAYLOAD = {
    "isValid": True,
    "validationFeedback": None,
    "generatedAbstract": "We propose speculative decoding with adaptive draft lengths for efficient LLM inference.",
    "keywords": ["LLM Inference", "Speculative Decoding", "KV Cache"],
    "trendMatchScore": 72,
    "oneLiner": "Faster LLM serving through adaptive speculation.",
    "methodology": {
        "mermaidCode": "graph TD\n  subgraph Draft\n  A[Draft Model]\n  end\n  A --> B{Verify}",
        "description": "A small draft model proposes tokens that the target model verifies.",
    },
    "conferences": [
        {
            "name": "ICML 2026",
            "url": "https://icml.cc",
            "reason": "Strong systems-for-ML track.",
            "relevantPapers": [
                _paper("Fast Inference from Transformers via Speculative Decoding", 2023),
                _paper("Efficient Memory Management for Large Language Model Serving with PagedAttention", 2023, "github.com/vllm-project/vllm"),
                _paper("FlashAttention: Fast and Memory-Efficient Exact Attention with IO-Awareness", 2022, ""),
            ],
        },
        {
            "name": "MLSys 2026",
            "url": "https://mlsys.org",
            "reason": "Systems venue.",
            "relevantPapers": [_paper("Orca: A Distributed Serving System for Transformer-Based Generative Models", 2022)],
        },
        {
            "name": "NeurIPS 2026",
            "url": "https://neurips.cc",
            "reason": "Broad ML audience.",
            "relevantPapers": [_paper("Medusa: Simple LLM Inference Acceleration Framework", 2024)],
        },
    ],
    "metrics": [
        {"metric": "Novelty", "value": 65},
        {"metric": "Feasibility", "value": 80},
        {"metric": "Impact", "value": 70},
        {"metric": "Trendiness", "value": 85},
        {"metric": "Clarity", "value": 60},
    ],
    "roadmap": [
        {"phase": "Baseline", "description": "Reproduce speculative decoding.", "timeline": "Dec 2025"},
        {"phase": "Method", "description": "Adaptive draft lengths.", "timeline": "Jan 2026"},
        {"phase": "Submission", "description": "Write and submit.", "timeline": "Feb 2026"},
    ],
}

INVALID_PAYLOAD = {
    "isValid": False,
    "validationFeedback": "Input is not a coherent research abstract.",
}


def valid_payload():
    return copy.deepcopy(VALID_IDEA_PAYLOAD)


def invalid_payload():
    return copy.deepcopy(INVALID_PAYLOAD)
