"""String enums for record fields, sections and submission outcomes."""

from enum import StrEnum


class RecordField(StrEnum):
    NAME = "name"
    WHATSAPP = "whatsapp"
    LINKEDIN = "linkedin"
    EMAIL = "email"
    CODEBASE = "codebase"
    DEMO = "demo"
    TITLE = "title"
    DESCRIPTION = "description"
    PROBLEM_STATEMENT = "problemStatement"


class ResourceField(StrEnum):
    REMARK = "remark"
    LINK = "link"


class Section(StrEnum):
    PERSONAL = "personal"
    PROJECT = "project"
    RESOURCES = "resources"


class SubmissionStatus(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    BLOCKED = "blocked"


IDENTITY_FIELDS: tuple[RecordField, ...] = (
    RecordField.NAME,
    RecordField.WHATSAPP,
    RecordField.LINKEDIN,
    RecordField.EMAIL,
)

REQUIRED_FIELDS: tuple[RecordField, ...] = (
    RecordField.NAME,
    RecordField.LINKEDIN,
    RecordField.EMAIL,
    RecordField.CODEBASE,
    RecordField.TITLE,
    RecordField.DESCRIPTION,
    RecordField.PROBLEM_STATEMENT,
)
