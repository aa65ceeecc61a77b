"""Prompt templates for the expert and consensus verification rounds.

Both prompts ask for strict JSON so the answers can be parsed with
parse_claim_assessments() / parse_consensus(). Literal braces are doubled
for str.format().
"""

EXPERT_ASSESSMENT_PROMPT = '''You are an expert fact-checker reviewing research claims.

TOPIC:
{topic}

CLAIMS:
{claims}

SOURCES (with credibility 0.0-1.0):
{sources}

For each claim, judge how well the listed sources support it.
Consider source credibility, how many sources agree, and whether the claim
is specific enough to be checked.

Return ONLY a JSON array, one entry per claim you assessed:
[
    {{"claimIndex": 0, "confidence": 0.0-1.0, "assessment": "one sentence"}},
    ...
]

claimIndex is the number shown in brackets before each claim.'''


CONSENSUS_PROMPT = '''You are summarising the outcome of a multi-round verification.

TOPIC:
{topic}

CLAIM SUMMARIES:
{summaries}

Each summary lists the claim's average confidence across verification rounds
and how many sources support it.

Give one overall confidence (0.0-1.0) that the research findings on this
topic are reliable as a whole.

Return ONLY JSON:
{{"confidence": 0.0-1.0, "rationale": "one or two sentences"}}'''


def format_claim_lines(claims) -> str:
    """Render claims as '[index] text' lines."""
    return "\n".join(f"[{claim.index}] {claim.text}" for claim in claims) or "(none)"


def format_source_lines(sources) -> str:
    """Render sources as '- title (url) credibility=x.xx' lines."""
    lines = [
        f"- {source.title or source.url} ({source.url}) credibility={source.credibility_score:.2f}"
        for source in sources
    ]
    return "\n".join(lines) or "(none)"


def format_summary_lines(claims) -> str:
    """Render per-claim summaries for the consensus prompt."""
    lines = [
        f"[{claim.index}] {claim.text} | average confidence={claim.average_confidence:.2f} "
        f"| supporting sources={claim.supporting_sources}/{claim.total_sources}"
        for claim in claims
    ]
    return "\n".join(lines) or "(none)"
