"""Gemini-backed AssessmentOracle for the expert and consensus rounds.

Each call is one prompt and one completion. Retries happen inside
GeminiClient; any error raised here is caught by the verification engine,
which then falls back to the algorithmic oracle for that round.
"""

import asyncio
from typing import Optional, Sequence

from research_verifier.config.logging import get_logger
from research_verifier.config.prompts import (
    CONSENSUS_PROMPT,
    EXPERT_ASSESSMENT_PROMPT,
    format_claim_lines,
    format_source_lines,
    format_summary_lines,
)
from research_verifier.config.settings import Settings, settings as default_settings
from research_verifier.exceptions import OracleResponseError
from research_verifier.llm.gemini_client import GeminiClient
from research_verifier.schemas import Source
from research_verifier.verification.oracle import (
    AlgorithmicOracle,
    AssessmentOracle,
    ClaimSummary,
    parse_claim_assessments,
    parse_consensus,
)


class GeminiAssessmentOracle(AssessmentOracle):
    """
    Claim-assessment oracle answering through Gemini.

    The client is created on first use so that building the oracle never
    needs credentials; a missing key surfaces as OracleUnavailableError
    from the first call.

    Usage:
        oracle = GeminiAssessmentOracle()
        engine = VerificationEngine(oracle=oracle)
    """

    external = True

    def __init__(self, client=None, config: Optional[Settings] = None):
        """
        Args:
            client: Object with generate_content(prompt, temperature) -> str.
                    A GeminiClient is built from config when None.
            config: Settings for model, temperature and retries.
        """
        self.config = config or default_settings
        self._client = client
        self.logger = get_logger("GeminiAssessmentOracle")

    @property
    def client(self):
        if self._client is None:
            self._client = GeminiClient(self.config)
        return self._client

    async def _complete(self, prompt: str) -> str:
        client = self.client
        return await asyncio.to_thread(
            client.generate_content, prompt, self.config.oracle_temperature
        )

    async def assess(
        self,
        topic: str,
        claims: Sequence[ClaimSummary],
        sources: Sequence[Source],
    ) -> dict[int, float]:
        """Ask Gemini for a confidence per claim.

        Raises:
            OracleUnavailableError: If Gemini is not configured
            OracleResponseError: If the answer holds no usable assessment
        """
        if not claims:
            return {}

        prompt = EXPERT_ASSESSMENT_PROMPT.format(
            topic=topic,
            claims=format_claim_lines(claims),
            sources=format_source_lines(sources),
        )
        response_text = await self._complete(prompt)

        # claimIndex values are positions in the run; only accept ones we sent
        sent = {claim.index for claim in claims}
        assessments = {
            index: confidence
            for index, confidence in parse_claim_assessments(
                response_text, max(sent) + 1
            ).items()
            if index in sent
        }
        if not assessments:
            raise OracleResponseError("No claim assessments found in oracle response")

        self.logger.info(f"Oracle assessed {len(assessments)}/{len(claims)} claims")
        return assessments

    async def consensus(self, topic: str, claims: Sequence[ClaimSummary]) -> Optional[float]:
        """Ask Gemini for one overall confidence.

        Raises:
            OracleUnavailableError: If Gemini is not configured
            OracleResponseError: If the answer holds no confidence in [0, 1]
        """
        prompt = CONSENSUS_PROMPT.format(
            topic=topic,
            summaries=format_summary_lines(claims),
        )
        response_text = await self._complete(prompt)

        value = parse_consensus(response_text)
        if value is None:
            raise OracleResponseError("No overall confidence found in oracle response")

        self.logger.info(f"Oracle consensus confidence: {value:.2f}")
        return value


def build_oracle(config: Optional[Settings] = None) -> AssessmentOracle:
    """Gemini oracle when oracle_enabled is set, the algorithmic oracle otherwise."""
    config = config or default_settings
    if config.oracle_enabled:
        return GeminiAssessmentOracle(config=config)
    return AlgorithmicOracle()


__all__ = ["GeminiAssessmentOracle", "build_oracle"]
