"""Record service owning the edited record and its dirty state."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from record_editor.domain.alerts import TaskResult
from record_editor.domain.errors import RecordNotFoundError, RecordPersistenceError
from record_editor.domain.records import DbRecord, RecordConfiguration
from record_editor.services.events import EventChannel, EventHandler, Subscription

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Record saved"
SAVE_FAILED_MESSAGE = "Error saving the record"


class RecordRepository(Protocol):
    """Persistence interface for editable records."""

    async def get_record(self, record_id: int) -> DbRecord | None:
        """Return a record by id, if present."""

    async def add_record(self, record: DbRecord) -> DbRecord:
        """Store a new record and return it with its assigned id."""

    async def update_record(self, record: DbRecord) -> DbRecord:
        """Store changes to an existing record and return it."""


@dataclass
class RecordService:
    """Owns one record, its persisted shadow copy and dirty/clean signaling."""

    repository: RecordRepository
    record_type: type[DbRecord] = DbRecord
    configuration: RecordConfiguration = field(default_factory=RecordConfiguration)
    new_record_id: int = 0
    record: DbRecord | None = None
    is_clean: bool = True
    task_result: TaskResult | None = None
    _shadow: DbRecord | None = None
    _dirty: EventChannel = field(default_factory=lambda: EventChannel("dirty"))
    _clean: EventChannel = field(default_factory=lambda: EventChannel("clean"))

    @property
    def record_id(self) -> int:
        if self.record is None:
            return self.new_record_id
        return self.record.id

    @property
    def record_description(self) -> str:
        return self.configuration.record_description

    @property
    def is_record(self) -> bool:
        return self.record is not None

    def subscribe_dirty(self, handler: EventHandler) -> Subscription:
        return self._dirty.subscribe(handler)

    def subscribe_clean(self, handler: EventHandler) -> Subscription:
        return self._clean.subscribe(handler)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Release a handle returned by ``subscribe_dirty``/``subscribe_clean``."""
        for channel in (self._dirty, self._clean):
            if channel.unsubscribe(subscription):
                return True
        return False

    @property
    def subscriber_count(self) -> int:
        return self._dirty.subscriber_count + self._clean.subscriber_count

    async def load_record(self, record_id: int) -> DbRecord:
        """Load a stored record, or build a fresh one for the new-record id."""
        if record_id == self.new_record_id:
            record = self.record_type(id=self.new_record_id)
        else:
            record = await self.repository.get_record(record_id)
            if record is None:
                raise RecordNotFoundError(record_id)
        self.record = record
        self._shadow = record.model_copy(deep=True)
        self.task_result = None
        if not self.is_clean:
            # Discarding unsaved edits is a clean transition observers must see.
            self.set_dirty_state(False)
        logger.info("Loaded %s %s", self.configuration.record_name, record.id)
        return record

    def has_changes(self) -> bool:
        """Return True when the record differs from its last persisted copy."""
        if self.record is None or self._shadow is None:
            return False
        return _field_values(self.record) != _field_values(self._shadow)

    def set_dirty_state(self, is_dirty: bool) -> None:
        """Set the dirty flag and fire the matching event."""
        self.is_clean = not is_dirty
        if is_dirty:
            self._dirty.emit()
        else:
            self._clean.emit()

    async def save_record(self) -> bool:
        """Persist the record.

        Success clears the dirty flag unless the record was edited again while
        the save was suspended.
        """
        if self.record is None:
            self.task_result = TaskResult.failed(SAVE_FAILED_MESSAGE)
            return False
        # Edits made while the save is suspended are not part of this save.
        snapshot = self.record.model_copy(deep=True)
        try:
            if snapshot.id == self.new_record_id:
                saved = await self.repository.add_record(snapshot)
            else:
                saved = await self.repository.update_record(snapshot)
        except RecordPersistenceError:
            logger.exception(
                "Failed to save %s %s", self.configuration.record_name, self.record.id
            )
            self.task_result = TaskResult.failed(SAVE_FAILED_MESSAGE)
            return False
        self.record.id = saved.id
        snapshot.id = saved.id
        self._shadow = snapshot
        self.task_result = TaskResult.ok(SAVED_MESSAGE)
        logger.info("Saved %s %s", self.configuration.record_name, saved.id)
        self.set_dirty_state(self.has_changes())
        return True


def _field_values(record: DbRecord) -> dict[str, object]:
    return {name: getattr(record, name) for name in type(record).model_fields}
