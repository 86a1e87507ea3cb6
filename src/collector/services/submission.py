"""Submission pipeline: formats the record and posts it to the collector endpoint.

The endpoint is acknowledgment-less: its response is never inspected, so a send
that neither raises nor times out is the only success signal.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone

import httpx

from collector.errors.exceptions import (
    SubmissionError,
    SubmissionInProgressError,
    SubmissionTimeout,
    SubmissionTransportError,
)
from collector.logging_config import bind_submission_context, clear_submission_context
from collector.models.common import ErrorDetail
from collector.models.enums import SubmissionStatus
from collector.models.record import Record
from collector.models.submission import SubmissionResult
from collector.services import resource_list
from collector.services.id_generator import generate_id
from collector.services.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def build_payload(record: Record) -> dict:
    """Wire body: the record with ``resources`` as a JSON string of non-blank items.

    Resource ids are local addressing keys and are not sent.
    """
    body = record.model_dump(mode="json", by_alias=True, exclude={"resources"})
    kept = [
        {"remark": item.remark, "link": item.link}
        for item in resource_list.non_blank(record.resources)
    ]
    body["resources"] = json.dumps(kept)
    return body


class SubmissionTransport(ABC):
    """Sends one JSON body to the endpoint. Raises ``SubmissionTransportError`` on failure."""

    @abstractmethod
    async def send(self, url: str, payload: dict) -> None:
        ...


class HttpxTransport(SubmissionTransport):
    """POSTs the payload with httpx and discards the response.

    No httpx timeout is set: the pipeline's deadline is the only one, so a slow
    endpoint always surfaces as ``SubmissionTimeout``.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def send(self, url: str, payload: dict) -> None:
        headers = {"Content-Type": "application/json"}
        content = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        try:
            if self._client is not None:
                response = await self._client.post(url, content=content, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=None, follow_redirects=True) as client:
                    response = await client.post(url, content=content, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SubmissionTransportError(
                f"Could not reach collector endpoint: {exc}",
                details={"url": url, "error_type": type(exc).__name__},
            ) from exc
        logger.debug("Endpoint answered %s (not inspected)", response.status_code)


class SubmissionPipeline:
    """Submits the current record of one ``RecordStore``.

    Only one request per store may be in flight; a second ``submit`` while one
    is pending raises ``SubmissionInProgressError``. Failures are never retried
    here: the user retries with the still-populated form.
    """

    def __init__(
        self,
        store: RecordStore,
        endpoint_url: str,
        transport: SubmissionTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._endpoint_url = endpoint_url
        self._transport = transport or HttpxTransport()
        self._timeout = timeout
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    async def submit(self) -> SubmissionResult:
        if self._submitting:
            raise SubmissionInProgressError()

        self._submitting = True
        submission_id = generate_id("sub_")
        bind_submission_context(submission_id, self._endpoint_url)
        try:
            payload = build_payload(self._store.get())
            try:
                await self._send_with_deadline(payload)
            except SubmissionError as exc:
                logger.warning("Submission %s failed: %s", submission_id, exc.message)
                return _failure(submission_id, exc)

            self._store.reset_project_fields()
            logger.info("Submission %s sent", submission_id)
            return SubmissionResult(
                status=SubmissionStatus.SUCCEEDED,
                submission_id=submission_id,
                title="Project Submitted!",
                message="Thank you for sharing your amazing project with us!",
                acknowledge=True,
                completed_at=datetime.now(timezone.utc),
            )
        finally:
            self._submitting = False
            clear_submission_context()

    async def _send_with_deadline(self, payload: dict) -> None:
        # wait_for cancels the send task when the deadline wins the race.
        try:
            await asyncio.wait_for(
                self._transport.send(self._endpoint_url, payload), timeout=self._timeout
            )
        except TimeoutError:
            raise SubmissionTimeout(self._timeout) from None


def _failure(submission_id: str, exc: SubmissionError) -> SubmissionResult:
    now = datetime.now(timezone.utc)
    return SubmissionResult(
        status=SubmissionStatus.FAILED,
        submission_id=submission_id,
        title="Submission Error",
        message="There was an error submitting your project. Please try again.",
        error=ErrorDetail.from_exception(exc, now),
        completed_at=now,
    )
