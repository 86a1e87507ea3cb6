"""Record store: owns the single current record and persists every mutation."""

from __future__ import annotations

import logging
from typing import Protocol

from collector.errors.exceptions import PersistenceError, ValidationError
from collector.models.enums import IDENTITY_FIELDS
from collector.models.record import Record, ResourceItem, attribute_for
from collector.services import resource_list
from collector.services.validator import parse_field

logger = logging.getLogger(__name__)


class RecordPersistence(Protocol):
    def save(self, record: Record) -> None: ...

    def load(self) -> Record | None: ...

    def clear(self) -> None: ...


def fresh_record() -> Record:
    """All scalar fields empty and one blank resource item."""
    return Record(resources=(resource_list.new_item(),))


class RecordStore:
    """Holds exactly one current ``Record``; every mutation replaces it.

    Mutations are synchronous and write the persistence adapter before they
    return. A failed write is logged and the in-memory record is kept, so no
    entered data is lost.
    """

    def __init__(self, persistence: RecordPersistence, record: Record | None = None) -> None:
        self._persistence = persistence
        self._record = record if record is not None else fresh_record()

    @classmethod
    def open(cls, persistence: RecordPersistence) -> RecordStore:
        """Rehydrate from *persistence*, or start fresh when the slot is empty."""
        record = persistence.load()
        if record is None:
            logger.info("Starting with a fresh record")
        return cls(persistence, record)

    def get(self) -> Record:
        return self._record

    def set_field(self, name: str, value: str) -> Record:
        field = parse_field(name)
        if not isinstance(value, str):
            raise ValidationError(
                f"Field '{field}' expects a string",
                details={"field": field.value, "type": type(value).__name__},
            )
        return self._commit(self._record.model_copy(update={attribute_for(field): value}))

    def reset_all(self) -> Record:
        self._record = fresh_record()
        try:
            self._persistence.clear()
        except PersistenceError as exc:
            logger.warning("Could not clear slot: %s", exc.message)
        return self._record

    def reset_project_fields(self) -> Record:
        identity = {attribute_for(f): self._record.get_field(f) for f in IDENTITY_FIELDS}
        return self._commit(Record(**identity, resources=(resource_list.new_item(),)))

    # --- Resource list ---

    def add_resource(self) -> ResourceItem:
        items, item = resource_list.add(self._record.resources)
        self._commit_resources(items)
        return item

    def update_resource(self, item_id: str, field: str, value: str) -> Record:
        return self._commit_resources(
            resource_list.update(self._record.resources, item_id, field, value)
        )

    def remove_resource(self, item_id: str) -> Record:
        return self._commit_resources(resource_list.remove(self._record.resources, item_id))

    def reorder_resource(self, item_id: str, new_position: int) -> Record:
        return self._commit_resources(
            resource_list.reorder(self._record.resources, item_id, new_position)
        )

    def _commit_resources(self, items: resource_list.Items) -> Record:
        return self._commit(self._record.model_copy(update={"resources": items}))

    def _commit(self, record: Record) -> Record:
        self._record = record
        try:
            self._persistence.save(record)
        except PersistenceError as exc:
            logger.warning("Record kept in memory only: %s", exc.message)
        return record
