"""Tests for the Typer CLI."""

from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from research_verifier.cli.main import app
from research_verifier.schemas import ClaimReport, CrossVerifyReport, VerificationStatus

runner = CliRunner()


def test_status():
    """status prints the configuration table."""
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0
    assert "Research Verifier Status" in result.stdout
    assert "Oracle" in result.stdout


def test_version():
    """version prints the package version."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.stdout


def test_verify_prints_report():
    """verify prints per-claim results."""
    report = CrossVerifyReport(
        success=True,
        session_id="abc123",
        topic="weddings",
        total_claims=1,
        verified_claims=[
            ClaimReport(
                text="Wedding cost survey results",
                status=VerificationStatus.DISPUTED,
                final_confidence=0.62,
                supporting_sources=2,
            )
        ],
        total_rounds=10,
        final_confidence=0.62,
        credibility_score=0.55,
        credibility_breakdown="Source Credibility: 50.0% (weight: 40%)",
    )
    with patch("research_verifier.cli.main.CrossVerifyPipeline") as pipeline_cls:
        pipeline_cls.return_value.run = AsyncMock(return_value=report)
        result = runner.invoke(
            app,
            ["verify", "--claim", "Wedding cost survey results", "--topic", "weddings",
             "--source", "https://example.org/a"],
        )

    assert result.exit_code == 0
    assert "disputed" in result.stdout
    assert "abc123" in result.stdout
    pipeline_cls.return_value.run.assert_awaited_once_with(
        ["Wedding cost survey results"], "weddings", source_urls=["https://example.org/a"]
    )


def test_verify_failure_exits_nonzero():
    """A failed report exits with status 1."""
    report = CrossVerifyReport(success=False, error="boom", message="Cross-verification failed")
    with patch("research_verifier.cli.main.CrossVerifyPipeline") as pipeline_cls:
        pipeline_cls.return_value.run = AsyncMock(return_value=report)
        result = runner.invoke(app, ["verify", "--claim", "x", "--topic", "t"])

    assert result.exit_code == 1
    assert "boom" in result.stdout
