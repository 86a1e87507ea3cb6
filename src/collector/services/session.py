"""Form session: the interface renderers drive.

Owns the validation state and its trigger policy, and gates submission. Every
field is validated when it loses focus; once a field has been blurred it is
"touched" and is re-validated on every change, so an error clears as soon as
the input is fixed instead of waiting for the next blur.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from collector.models.enums import RecordField, ResourceField, SubmissionStatus
from collector.models.record import Record, ResourceItem
from collector.models.submission import SubmissionResult
from collector.services import resource_list, validator
from collector.services.progress import SectionStatus, compute_progress, section_status
from collector.services.record_store import RecordStore
from collector.services.submission import SubmissionPipeline

logger = logging.getLogger(__name__)


@dataclass
class ValidationState:
    """Field key to error message. A missing key means "no known error"."""

    errors: dict[str, str] = field(default_factory=dict)

    def record(self, key: str, message: str | None) -> None:
        if message:
            self.errors[key] = message
        else:
            self.errors.pop(key, None)

    def get(self, key: str) -> str | None:
        return self.errors.get(key) or None

    def has_errors(self) -> bool:
        return any(self.errors.values())

    def drop_resource(self, item_id: str) -> None:
        prefix = f"resources.{item_id}."
        for key in [k for k in self.errors if k.startswith(prefix)]:
            del self.errors[key]

    def clear(self) -> None:
        self.errors.clear()


@dataclass(frozen=True)
class FormSnapshot:
    record: Record
    validation_state: dict[str, str]
    progress: int
    sections: list[SectionStatus]
    is_submitting: bool
    submission_result: SubmissionResult | None


class FormSession:
    """Binds a record store to validation timing and the submission pipeline."""

    def __init__(self, store: RecordStore, pipeline: SubmissionPipeline) -> None:
        self._store = store
        self._pipeline = pipeline
        self._validation = ValidationState()
        self._touched: set[str] = set()
        self._last_result: SubmissionResult | None = None

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def validation(self) -> ValidationState:
        return self._validation

    def snapshot(self) -> FormSnapshot:
        record = self._store.get()
        progress = compute_progress(record)
        return FormSnapshot(
            record=record,
            validation_state=dict(self._validation.errors),
            progress=progress,
            sections=section_status(progress),
            is_submitting=self._pipeline.is_submitting,
            submission_result=self._last_result,
        )

    # --- Record fields ---

    def change(self, name: str, value: str) -> Record:
        record = self._store.set_field(name, value)
        if name in self._touched:
            self._validate_field(name)
        return record

    def blur(self, name: str) -> str | None:
        self._touched.add(validator.parse_field(name).value)
        return self._validate_field(name)

    def _validate_field(self, name: str) -> str | None:
        field_ = validator.parse_field(name)
        message = validator.validate(field_, self._store.get().get_field(field_))
        self._validation.record(field_.value, message)
        return message

    # --- Resources ---

    def add_resource(self) -> ResourceItem:
        return self._store.add_resource()

    def change_resource(self, item_id: str, sub_field: str, value: str) -> Record:
        record = self._store.update_resource(item_id, sub_field, value)
        if validator.resource_key(item_id) in self._touched:
            self._validate_resource(item_id)
        return record

    def blur_resource(self, item_id: str) -> str | None:
        message = self._validate_resource(item_id)
        self._touched.add(validator.resource_key(item_id))
        return message

    def _validate_resource(self, item_id: str) -> str | None:
        item = resource_list.find(self._store.get().resources, item_id)
        message = validator.validate_resource_link(item.link)
        self._validation.record(validator.resource_key(item_id, ResourceField.LINK), message)
        return message

    def remove_resource(self, item_id: str) -> Record:
        record = self._store.remove_resource(item_id)
        self._validation.drop_resource(item_id)
        self._touched.discard(validator.resource_key(item_id))
        return record

    def reorder_resource(self, item_id: str, new_position: int) -> Record:
        return self._store.reorder_resource(item_id, new_position)

    # --- Validation and submission ---

    def validate_all(self) -> dict[str, str]:
        """Validate every field and resource link, marking all of them touched."""
        record = self._store.get()
        self._validation.clear()
        for key, message in validator.validate_record(record).items():
            self._validation.record(key, message)
        self._touched.update(f.value for f in RecordField)
        self._touched.update(validator.resource_key(item.id) for item in record.resources)
        return dict(self._validation.errors)

    def can_submit(self) -> bool:
        """Required fields filled and no recorded field error."""
        return validator.is_submittable(self._store.get()) and not self._validation.has_errors()

    async def submit(self) -> SubmissionResult:
        """Validate, then hand the record to the pipeline if the gate passes."""
        if not self._pipeline.is_submitting:
            self.validate_all()
            if not self.can_submit():
                logger.info("Submission blocked by %d field error(s)", len(self._validation.errors))
                self._last_result = SubmissionResult(
                    status=SubmissionStatus.BLOCKED,
                    title="Incomplete Form",
                    message="Please fix the highlighted fields before submitting.",
                    field_errors=dict(self._validation.errors),
                    completed_at=datetime.now(timezone.utc),
                )
                return self._last_result

        result = await self._pipeline.submit()
        if result.ok:
            self._reset_validation()
        self._last_result = result
        return result

    # --- Resets ---

    def reset_all(self) -> Record:
        record = self._store.reset_all()
        self._reset_validation()
        self._last_result = None
        return record

    def reset_project_fields(self) -> Record:
        record = self._store.reset_project_fields()
        self._reset_validation()
        return record

    def _reset_validation(self) -> None:
        self._validation.clear()
        self._touched.clear()
