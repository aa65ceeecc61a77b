"""Multi-round cross-verification of research claims.

Usage:
    from research_verifier.verification import VerificationEngine
    from research_verifier.pipeline import CrossVerifyPipeline
"""

__version__ = "0.1.0"
