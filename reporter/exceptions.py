"""Errors raised by the bug report pipeline."""


class ReporterError(Exception):
    """Base error. Carries the HTTP status returned to the caller."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(ReporterError):
    """Request is missing fields or carries malformed ones."""

    status_code = 400


class EmptyConversationError(ReporterError):
    """Conversation has no messages to analyze."""

    status_code = 400


class InvalidRepositoryError(ReporterError):
    """Target repository is not in owner/name form."""

    status_code = 400


class UpstreamFetchError(ReporterError):
    """Chat platform could not return the conversation."""


class AnalysisError(ReporterError):
    """Language model output was missing or did not match the bug schema."""


class IssueCreationError(ReporterError):
    """GitHub rejected the issue."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message)


class NotificationError(ReporterError):
    """Confirmation note could not be posted. Logged, never returned."""
