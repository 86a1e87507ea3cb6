"""Pydantic models for the submission record and its resource citations."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from collector.models.enums import RecordField


class ResourceItem(BaseModel):
    """One citation within a record. ``id`` is a local addressing key only."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1)
    remark: str = ""
    link: str = ""

    def is_blank(self) -> bool:
        return not self.remark.strip() and not self.link.strip()


class Record(BaseModel):
    """The complete submission entity for one project contribution."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    name: str = ""
    whatsapp: str = ""
    linkedin: str = ""
    email: str = ""
    codebase: str = ""
    demo: str = ""
    title: str = ""
    description: str = ""
    problem_statement: str = Field("", alias="problemStatement")
    resources: tuple[ResourceItem, ...] = ()

    @model_validator(mode="after")
    def _unique_resource_ids(self) -> "Record":
        ids = [item.id for item in self.resources]
        if len(ids) != len(set(ids)):
            raise ValueError("resource ids must be unique")
        return self

    def get_field(self, field: RecordField) -> str:
        return getattr(self, attribute_for(field))

    def to_storage(self) -> dict:
        """Serialize with wire names, keeping resource ids."""
        return self.model_dump(mode="json", by_alias=True)


def attribute_for(field: RecordField) -> str:
    """Map a wire field name to the model attribute holding it."""
    if field is RecordField.PROBLEM_STATEMENT:
        return "problem_statement"
    return field.value
