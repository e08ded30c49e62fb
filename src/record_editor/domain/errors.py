"""Errors raised by the record layer."""


class RecordEditorError(Exception):
    """Base class for record editor errors."""


class RecordNotFoundError(RecordEditorError):
    """Raised when a record id does not resolve to a stored record."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"Record {record_id} not found")
        self.record_id = record_id


class RecordPersistenceError(RecordEditorError):
    """Raised by repositories when the backing store fails."""
