"""Prompt templates for the Gemini assessment oracle.

Modules:
    verification_prompts: Expert assessment and consensus prompts
"""

from research_verifier.config.prompts.verification_prompts import (
    CONSENSUS_PROMPT,
    EXPERT_ASSESSMENT_PROMPT,
    format_claim_lines,
    format_source_lines,
    format_summary_lines,
)

__all__ = [
    "EXPERT_ASSESSMENT_PROMPT",
    "CONSENSUS_PROMPT",
    "format_claim_lines",
    "format_source_lines",
    "format_summary_lines",
]
