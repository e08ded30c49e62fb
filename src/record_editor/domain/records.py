"""Domain models for editable records."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class DbRecord(BaseModel):
    """Base model for a record that can be loaded into an edit form."""

    model_config = ConfigDict(extra="forbid")

    id: int = 0


class NamedRecord(DbRecord):
    """Default record shape served by the HTTP surface."""

    name: str = Field(default="", min_length=1, max_length=200)
    description: str | None = None


@dataclass(frozen=True)
class RecordConfiguration:
    """Describes a record type for titles and navigation."""

    record_name: str = "record"
    record_description: str = "Record"
    record_list_url: str = "/"
