"""Durable local slot holding the in-progress record as JSON."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from collector.errors.exceptions import PersistenceError
from collector.models.record import Record

logger = logging.getLogger(__name__)


class LocalSlotPersistence:
    """Saves, loads and clears one named slot under *storage_dir*.

    The slot is ``<storage_dir>/<slot>.json``. Writes go through a temp file
    and ``os.replace`` so a crash mid-write never leaves a truncated slot.
    """

    def __init__(self, storage_dir: Path, slot: str = "projectCollectorFormData") -> None:
        self._dir = Path(storage_dir)
        self._slot = slot

    @property
    def path(self) -> Path:
        return self._dir / f"{self._slot}.json"

    def save(self, record: Record) -> None:
        """Overwrite the slot with the full record, resource ids included."""
        payload = record.to_storage()
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=f"{self._slot}.", suffix=".tmp", dir=str(self._dir)
            )
        except OSError as exc:
            raise PersistenceError(
                f"Cannot write slot {self.path}", details={"error": str(exc)}
            ) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                json.dump(payload, handle, ensure_ascii=False)
            os.replace(temp_path, self.path)
        except OSError as exc:
            Path(temp_path).unlink(missing_ok=True)
            raise PersistenceError(
                f"Cannot write slot {self.path}", details={"error": str(exc)}
            ) from exc

    def load(self) -> Record | None:
        """Return the stored record, or None when the slot is absent or malformed."""
        if not self.path.exists():
            return None
        try:
            return self._read()
        except PersistenceError as exc:
            logger.warning("Discarding unreadable slot %s: %s", self.path, exc.message)
            return None

    def clear(self) -> None:
        """Remove the slot entirely."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(
                f"Cannot remove slot {self.path}", details={"error": str(exc)}
            ) from exc

    def _read(self) -> Record:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PersistenceError("Slot is not valid JSON", details={"error": str(exc)}) from exc
        try:
            return Record.model_validate(raw)
        except PydanticValidationError as exc:
            raise PersistenceError(
                "Slot does not hold a record", details=exc.errors(include_url=False)
            ) from exc
