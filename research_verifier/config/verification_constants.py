"""Verification and credibility configuration.

Credibility model (weights sum to 1.0):
1. Source credibility: 0.40
2. Cross-verification agreement: 0.30
3. Recency (half-life decay): 0.15
4. Citation count (log scale): 0.10
5. Expert verification: 0.05

Source hierarchy for web sources without a supplied score:
1. Government domains: 0.90
2. Educational institutions: 0.85
3. Reputable news outlets: 0.80
4. General web: 0.60

Conflict keyword lists are shared by the verification rounds and the
standalone resolver so both classify claims identically.
"""

from typing import Dict, Tuple

# Credibility factor weights
CREDIBILITY_WEIGHTS: Dict[str, float] = {
    "source_credibility": 0.40,
    "cross_verification_agreement": 0.30,
    "recency": 0.15,
    "citation_count": 0.10,
    "expert_verification": 0.05,
}

# Neutral score used whenever a factor has no data to work with
NEUTRAL_SCORE: float = 0.5

# Academic sources
ACADEMIC_BASE_SCORE: float = 0.90
ACADEMIC_CITATION_BOOST: float = 0.05
ACADEMIC_HIGH_CITATION_THRESHOLD: int = 100
ACADEMIC_TOP_CITATION_THRESHOLD: int = 1000
ACADEMIC_RECENT_YEARS: float = 2.0
ACADEMIC_RECENT_BOOST: float = 0.02
ACADEMIC_OLD_YEARS: float = 10.0
ACADEMIC_OLD_PENALTY: float = 0.05
ACADEMIC_OLD_FLOOR: float = 0.80

# Web sources (domain heuristics)
WEB_GOVERNMENT_SCORE: float = 0.90
WEB_EDUCATIONAL_SCORE: float = 0.85
WEB_REPUTABLE_NEWS_SCORE: float = 0.80
WEB_DEFAULT_SCORE: float = 0.60
REPUTABLE_NEWS_DOMAINS: Tuple[str, ...] = ("nytimes", "reuters", "bbc")

# Other source types
USER_PROVIDED_DEFAULT_SCORE: float = 0.70
OTHER_SOURCE_DEFAULT_SCORE: float = 0.60

# Recency half-life in days (6 months)
RECENCY_HALF_LIFE_DAYS: float = 180.0

# Citation scaling: log10(c + 1) / log10(CITATION_SCALE + 1)
CITATION_SCALE: int = 1000

# Agreement: claims need this many supporting sources to count as cross-verified
MIN_SUPPORTING_SOURCES: int = 2
CLAIM_AGREEMENT_SUPPORTED: float = 0.8

# compare(): overall scores closer than this are "equal"
COMPARISON_EQUALITY_BAND: float = 0.05
COMPARISON_FACTOR_GAP: float = 0.1

# Credibility level thresholds, highest first
CREDIBILITY_LEVEL_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (0.9, "very-high"),
    (0.8, "high"),
    (0.6, "medium"),
    (0.4, "low"),
)

# Recommendation thresholds per factor
RECOMMENDATION_THRESHOLDS: Dict[str, float] = {
    "source_credibility": 0.7,
    "cross_verification_agreement": 0.7,
    "recency": 0.5,
    "citation_count": 0.5,
    "expert_verification": 0.8,
}

RECOMMENDATION_MESSAGES: Dict[str, str] = {
    "source_credibility": "Add more high-credibility sources (academic, official)",
    "cross_verification_agreement": "Verify claims with additional independent sources",
    "recency": "Include more recent sources for up-to-date information",
    "citation_count": "Include well-cited academic papers to boost credibility",
    "expert_verification": "Seek expert verification or peer review",
}

# Conflict classification keywords (case-insensitive substring match)
SCOPE_KEYWORDS: Tuple[str, ...] = (
    "only", "including", "excluding", "total", "average", "ceremony", "honeymoon",
)
STATISTICAL_KEYWORDS: Tuple[str, ...] = ("average", "mean", "median", "mode", "percentile")
MEASUREMENT_KEYWORDS: Tuple[str, ...] = (
    "ranked", "rating", "score", "performance", "quality", "speed",
)

# Resolution confidences per conflict type
RESOLUTION_CONFIDENCE: Dict[str, float] = {
    "SCOPE_DIFFERENCE": 0.90,
    "TEMPORAL_DIFFERENCE": 0.85,
    "STATISTICAL_METHOD": 0.88,
    "MEASUREMENT_UNIT": 0.87,
    "TRUST_HIGHER_SOURCE": 0.70,
    "MULTIPLE_PERSPECTIVES": 0.65,
    "MANUAL_REVIEW": 0.50,
}

# TRUE_CONTRADICTION: credibility spread above which the higher source wins
CREDIBILITY_SPREAD_THRESHOLD: float = 0.20

# Detection confidences for conflicts raised by the verification rounds
DETECTION_CONFIDENCE: Dict[str, float] = {
    "TEMPORAL_DIFFERENCE": 0.80,
    "STATISTICAL_METHOD": 0.70,
    "SCOPE_DIFFERENCE": 0.85,
}

# Lexical evidence scoring
MIN_TOKEN_LENGTH: int = 3
SUPPORT_OVERLAP_THRESHOLD: float = 0.15
CV_DIVERGENCE_THRESHOLD: float = 0.5

# Collection rounds: round r considers the first r * SOURCES_PER_ROUND sources
COLLECTION_ROUNDS: int = 4
SOURCES_PER_ROUND: int = 3
NO_SOURCE_CONFIDENCE: float = 0.3

# Confidence bumps applied to the running average by rounds 5-9
ROUND_CONFIDENCE_BUMPS: Dict[str, float] = {
    "temporal": 0.02,
    "statistical": 0.02,
    "scope": 0.01,
    "resolution": 0.02,
    "expert_oracle": 0.03,
    "expert_fallback": 0.01,
}

# Expert round limits and fallback
ORACLE_MAX_CLAIMS: int = 15
ORACLE_MAX_SOURCES: int = 10
FALLBACK_SUPPORT_MULTIPLIER: float = 1.2
FALLBACK_BASE_CONFIDENCE: float = 0.3

# Weighted history: weight = 1 + HISTORY_WEIGHT_STEP * index
HISTORY_WEIGHT_STEP: float = 0.5

# Claim status thresholds
VERIFIED_THRESHOLD: float = 0.8
DISPUTED_THRESHOLD: float = 0.5
