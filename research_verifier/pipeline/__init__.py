"""Pipelines built on the verification engine."""

from research_verifier.pipeline.cross_verify import CrossVerifyPipeline

__all__ = ["CrossVerifyPipeline"]
