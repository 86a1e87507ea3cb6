"""Pydantic models shared across results."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from collector.errors.exceptions import CollectorError


class ErrorDetail(BaseModel):
    """Error detail carried in submission results."""

    model_config = ConfigDict(extra="forbid")

    code: str
    message: str
    details: dict[str, Any] | list[Any] | str | None = None
    timestamp: datetime

    @classmethod
    def from_exception(cls, exc: CollectorError, timestamp: datetime) -> "ErrorDetail":
        return cls(code=exc.code, message=exc.message, details=exc.details, timestamp=timestamp)
