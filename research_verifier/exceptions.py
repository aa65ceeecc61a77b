"""Exception hierarchy for research_verifier.

Oracle errors are raised by oracle adapters and caught by the verification
engine, which falls back to algorithmic scoring. They never reach callers of
VerificationEngine.verify().
"""


class VerifierError(Exception):
    """Base class for research_verifier errors."""


class OracleError(VerifierError):
    """The claim-assessment oracle could not produce a usable answer."""


class OracleUnavailableError(OracleError):
    """The oracle is not configured (missing API key or client library)."""


class OracleResponseError(OracleError):
    """The oracle answered, but the response text held no usable JSON."""


__all__ = [
    "VerifierError",
    "OracleError",
    "OracleUnavailableError",
    "OracleResponseError",
]
