"""Form completion progress, derived from the record on every read."""

from __future__ import annotations

from dataclasses import dataclass

from collector.models.enums import RecordField, Section
from collector.models.record import Record

SECTIONS: tuple[Section, ...] = (Section.PERSONAL, Section.PROJECT, Section.RESOURCES)


@dataclass(frozen=True)
class SectionStatus:
    section: Section
    step: int
    complete: bool


def compute_progress(record: Record) -> int:
    """Percentage of record entries filled, counting ``resources`` as one entry."""
    filled = sum(1 for field in RecordField if record.get_field(field) != "")
    if any(item.remark or item.link for item in record.resources):
        filled += 1
    total = len(RecordField) + 1
    return round(filled / total * 100)


def section_status(progress: int) -> list[SectionStatus]:
    """Section *i* is complete once progress reaches its share of the form."""
    count = len(SECTIONS)
    return [
        SectionStatus(section=section, step=i + 1, complete=progress >= (i + 1) / count * 100)
        for i, section in enumerate(SECTIONS)
    ]
