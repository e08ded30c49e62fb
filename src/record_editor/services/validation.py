"""Validation context bound to a single loaded record."""

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from record_editor.domain.records import DbRecord

logger = logging.getLogger(__name__)


@dataclass
class ValidationContext:
    """Tracks field modification and validity for one record instance.

    The record is referenced, never copied: field editors write straight to
    it and call ``notify_field_changed`` afterwards.
    """

    record: DbRecord
    field_errors: dict[str, list[str]] = field(default_factory=dict)
    _modified: set[str] = field(default_factory=set)

    def notify_field_changed(self, field_name: str) -> None:
        """Mark a field as edited since the last save."""
        if field_name not in type(self.record).model_fields:
            raise KeyError(field_name)
        self._modified.add(field_name)
        self.field_errors.pop(field_name, None)

    def is_modified(self, field_name: str | None = None) -> bool:
        if field_name is None:
            return bool(self._modified)
        return field_name in self._modified

    def mark_as_unmodified(self, field_name: str | None = None) -> None:
        if field_name is None:
            self._modified.clear()
        else:
            self._modified.discard(field_name)

    def validate(self) -> bool:
        """Re-validate the record's current values and collect field errors."""
        model = type(self.record)
        values = {name: getattr(self.record, name) for name in model.model_fields}
        self.field_errors = {}
        try:
            model.model_validate(values)
        except ValidationError as exc:
            for error in exc.errors():
                location = error["loc"]
                key = str(location[0]) if location else ""
                self.field_errors.setdefault(key, []).append(error["msg"])
            logger.debug(
                "Validation failed for %s: %s",
                model.__name__,
                sorted(self.field_errors),
            )
            return False
        return True

    def messages_for(self, field_name: str) -> list[str]:
        return list(self.field_errors.get(field_name, []))
