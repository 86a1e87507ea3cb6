"""Pydantic models for submission payloads and outcomes."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from collector.models.common import ErrorDetail
from collector.models.enums import SubmissionStatus


class SubmissionResult(BaseModel):
    """Outcome of one submit attempt, as reported to the renderer."""

    model_config = ConfigDict(extra="forbid")

    status: SubmissionStatus
    submission_id: str | None = None
    title: str
    message: str
    # Enables a separate informational acknowledgment after success.
    acknowledge: bool = False
    error: ErrorDetail | None = None
    field_errors: dict[str, str] | None = None
    completed_at: datetime

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.SUCCEEDED
