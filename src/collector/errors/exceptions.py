"""Custom exception classes for the collector engine."""


class CollectorError(Exception):
    """Base exception for the collector."""

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(CollectorError):
    """A mutation named a field or sub-field that does not exist."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details)


class NotFoundError(CollectorError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            details={"resource": resource, "id": resource_id},
        )


class ConflictError(CollectorError):
    """Session state conflict."""

    def __init__(self, message: str):
        super().__init__("CONFLICT", message)


class SubmissionInProgressError(ConflictError):
    """A submission is already in flight for this session."""

    def __init__(self):
        super().__init__("A submission is already in progress")


class PersistenceError(CollectorError):
    """Local slot is unreadable, malformed or unwritable."""

    def __init__(self, message: str, details=None):
        super().__init__("PERSISTENCE_ERROR", message, details)


class SubmissionError(CollectorError):
    """Base for failures of the outbound submission request."""


class SubmissionTimeout(SubmissionError):
    """The endpoint did not settle within the submission deadline."""

    def __init__(self, timeout: float):
        super().__init__(
            "SUBMISSION_TIMEOUT",
            f"Submission timed out after {timeout:g}s",
            details={"timeout_seconds": timeout},
        )


class SubmissionTransportError(SubmissionError):
    """The request failed before the endpoint accepted it."""

    def __init__(self, message: str, details=None):
        super().__init__("SUBMISSION_TRANSPORT_ERROR", message, details)
