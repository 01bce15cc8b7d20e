"""Error kinds raised by the clients and the workflow orchestrator.

Every error carries a human-readable message that is safe to show the user.
"""

from __future__ import annotations


class DesignIRLError(Exception):
    """Base class for all Design IRL errors."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CredentialInvalid(DesignIRLError):
    """The search backend rejected the API key (401/403)."""

    kind = "credential_invalid"


class CredentialMissing(DesignIRLError):
    """A required API key was blank before any network call."""

    kind = "credential_missing"


class FetchFailure(DesignIRLError):
    """Network failure or non-2xx response from search or the image proxy."""

    kind = "fetch_failure"


class AnalysisParseFailure(DesignIRLError):
    """The vision backend returned something that is not a valid description."""

    kind = "analysis_parse_failure"


class NoSuccessfulAnalyses(DesignIRLError):
    kind = "no_successful_analyses"


class GenerationEmpty(DesignIRLError):
    """The image stream finished without any inline image data."""

    kind = "generation_empty"


class ValidationFailure(DesignIRLError):
    kind = "validation_failure"


class InvalidTransition(DesignIRLError):
    """An operation was called from a workflow state that does not allow it."""

    kind = "invalid_transition"
