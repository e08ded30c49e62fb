"""Pydantic models for edit session requests."""

from typing import Any

from pydantic import BaseModel, Field


class OpenSessionRequest(BaseModel):
    """Request to open an edit form on a record."""

    record_id: int | None = None
    modal: bool = False


class FieldEdit(BaseModel):
    """A single field value typed into the form."""

    field_name: str = Field(alias="field")
    value: Any = None
