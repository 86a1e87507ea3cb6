"""Field validation rules for the submission record.

Rules are tabled: each field maps to a ``FieldRule`` holding whether the field
is required, the predicate a present value must satisfy, and the message shown
when it does not. ``validate`` is pure; timing lives in the form session.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from collector.errors.exceptions import ValidationError
from collector.models.enums import REQUIRED_FIELDS, RecordField
from collector.models.record import Record

_HTTP_URL = TypeAdapter(HttpUrl)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_WHATSAPP_RE = re.compile(r"^[0-9]{10}$")

RESOURCE_LINK_MESSAGE = "Please enter a valid resource URL"


def _host_of(value: str) -> str | None:
    candidate = value if _SCHEME_RE.match(value) else f"https://{value}"
    try:
        url = _HTTP_URL.validate_python(candidate)
    except PydanticValidationError:
        return None
    return url.host


def _host_is_well_formed(host: str) -> bool:
    labels = host.split(".")
    if len(labels) < 2:
        return False
    if any(not label for label in labels):
        return False
    return len(labels[-1]) >= 2


def is_well_formed_url(value: str) -> bool:
    """Accept a URL as given or with an implicit ``https://``, then check its host.

    Bare domains such as ``linkedin.com/in/x`` pass; hosts with fewer than two
    labels, empty labels, or a one-character final label fail.
    """
    value = value.strip()
    if not value:
        return False
    host = _host_of(value)
    return host is not None and _host_is_well_formed(host)


def is_linkedin_url(value: str) -> bool:
    if not is_well_formed_url(value):
        return False
    host = _host_of(value.strip()) or ""
    return "linkedin.com" in host


@dataclass(frozen=True)
class FieldRule:
    required: bool
    message: str
    predicate: Callable[[str], bool] | None = None
    required_message: str | None = None


FIELD_RULES: dict[RecordField, FieldRule] = {
    RecordField.NAME: FieldRule(
        required=True, message="Please enter your full name",
    ),
    RecordField.WHATSAPP: FieldRule(
        required=False,
        message="Please enter a 10-digit number",
        predicate=lambda v: bool(_WHATSAPP_RE.match(v)),
    ),
    RecordField.LINKEDIN: FieldRule(
        required=True,
        message="Please enter a valid LinkedIn URL",
        predicate=is_linkedin_url,
        required_message="LinkedIn profile is required",
    ),
    RecordField.EMAIL: FieldRule(
        required=True,
        message="Please enter a valid email address",
        predicate=lambda v: bool(_EMAIL_RE.match(v)),
        required_message="Email address is required",
    ),
    RecordField.CODEBASE: FieldRule(
        required=True,
        message="Please enter a valid codebase URL",
        predicate=is_well_formed_url,
        required_message="Project codebase link is required",
    ),
    RecordField.DEMO: FieldRule(
        required=False,
        message="Please enter a valid demo URL",
        predicate=is_well_formed_url,
    ),
    RecordField.TITLE: FieldRule(
        required=True, message="Please enter a project title",
    ),
    RecordField.DESCRIPTION: FieldRule(
        required=True, message="Please describe your project",
    ),
    RecordField.PROBLEM_STATEMENT: FieldRule(
        required=True, message="Please describe the purpose of this project",
    ),
}


def parse_field(name: str) -> RecordField:
    """Resolve a scalar field name, rejecting unknown names and ``resources``."""
    try:
        return RecordField(name)
    except ValueError:
        raise ValidationError(
            f"Unknown record field '{name}'",
            details={"allowed": [f.value for f in RecordField]},
        ) from None


def validate(field_name: str, value: str) -> str | None:
    """Return the error message for *value* in *field_name*, or None."""
    rule = FIELD_RULES[parse_field(field_name)]
    value = value.strip()
    if not value:
        if rule.required:
            return rule.required_message or rule.message
        return None
    if rule.predicate is not None and not rule.predicate(value):
        return rule.message
    return None


def validate_resource_link(value: str) -> str | None:
    """Validate one resource link. An empty link is allowed; anything else must be a URL."""
    value = value.strip()
    if value and not is_well_formed_url(value):
        return RESOURCE_LINK_MESSAGE
    return None


def validate_record(record: Record) -> dict[str, str]:
    """Validate every field of *record*, keyed like the session's validation state."""
    errors: dict[str, str] = {}
    for field in RecordField:
        message = validate(field, record.get_field(field))
        if message:
            errors[field.value] = message
    for item in record.resources:
        message = validate_resource_link(item.link)
        if message:
            errors[resource_key(item.id)] = message
    return errors


def resource_key(item_id: str, sub_field: str = "link") -> str:
    return f"resources.{item_id}.{sub_field}"


def is_submittable(record: Record) -> bool:
    """True iff every required scalar field is non-empty after trimming."""
    return all(record.get_field(field).strip() for field in REQUIRED_FIELDS)
