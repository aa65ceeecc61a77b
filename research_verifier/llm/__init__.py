"""Gemini integration for the claim-assessment oracle."""

from research_verifier.llm.gemini_oracle import GeminiAssessmentOracle, build_oracle

__all__ = ["GeminiAssessmentOracle", "build_oracle"]
