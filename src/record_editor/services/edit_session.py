"""Edit session controller: dirty-state handling for a single-record form."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum

from record_editor.domain.alerts import AlertColour
from record_editor.domain.records import DbRecord
from record_editor.domain.view import ViewState
from record_editor.services.alerts import AlertSurface
from record_editor.services.events import Subscription
from record_editor.services.navigation import ModalHost, NavigationGuard
from record_editor.services.records import RecordService
from record_editor.services.validation import ValidationContext

logger = logging.getLogger(__name__)

DEFAULT_RECORD_DESCRIPTION = "Record"
UNSAVED_MESSAGE = "The Record isn't Saved"
VALIDATION_ERROR_MESSAGE = (
    "A validation error occurred.  Check individual fields for the relevant error."
)


class SavePhase(StrEnum):
    """Phases of the save state machine."""

    IDLE = "idle"
    VALIDATING = "validating"
    SAVING = "saving"
    SAVED = "saved"
    INVALID = "invalid"


@dataclass(frozen=True)
class NoSession:
    """No record loaded yet, or the session was disposed."""


@dataclass(frozen=True)
class LoadedSession:
    """A loaded record and the validation context bound to it."""

    record: DbRecord
    validation: ValidationContext


SessionState = NoSession | LoadedSession


@dataclass
class RenderRequests:
    """Render-request channel polled by the UI layer after each call.

    Requests made inside ``coalesce`` collapse into a single request when the
    outermost block exits.
    """

    pending: int = 0
    _hold_depth: int = 0
    _held: bool = False

    def request(self) -> None:
        if self._hold_depth:
            self._held = True
            return
        self.pending += 1

    @contextmanager
    def coalesce(self) -> Iterator[None]:
        self._hold_depth += 1
        try:
            yield
        finally:
            self._hold_depth -= 1
            if not self._hold_depth and self._held:
                self._held = False
                self.pending += 1

    def drain(self) -> int:
        """Return the number of pending requests and reset the counter."""
        pending, self.pending = self.pending, 0
        return pending


@dataclass
class EditSessionController:
    """Controller behind a single-record edit form.

    Lifecycle: ``load`` -> ``on_first_render`` -> edits/saves -> ``dispose``.
    The record belongs to ``service``; the controller only observes it and
    requests dirty-state transitions.
    """

    service: RecordService
    navigation: NavigationGuard
    alerts: AlertSurface
    record_id: int | None = None
    is_modal: bool = False
    modal: ModalHost | None = None
    renders: RenderRequests = field(default_factory=RenderRequests)
    phase: SavePhase = field(default=SavePhase.IDLE, init=False)
    _state: SessionState = field(default_factory=NoSession, init=False)
    _subscriptions: tuple[Subscription, ...] = field(default=(), init=False)
    _clean_at_dispose: bool = field(default=True, init=False)
    _disposed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.is_modal and self.modal is None:
            raise ValueError("A modal edit session needs a modal host")

    @property
    def is_subscribed(self) -> bool:
        return bool(self._subscriptions)

    @property
    def record(self) -> DbRecord | None:
        if isinstance(self._state, LoadedSession):
            return self._state.record
        return None

    @property
    def validation(self) -> ValidationContext | None:
        if isinstance(self._state, LoadedSession):
            return self._state.validation
        return None

    async def load(self, first_load: bool = False) -> None:
        """Load the record through the service, then bind a validation context."""
        record_id = self.record_id
        if record_id is None:
            record_id = self.service.new_record_id
        record = await self.service.load_record(record_id)
        if self._disposed:
            logger.debug("Session disposed while loading record %s", record_id)
            return
        self._state = LoadedSession(
            record=record, validation=ValidationContext(record)
        )
        if not first_load:
            self.renders.request()

    def after_render(self, first_render: bool) -> None:
        if first_render:
            self.on_first_render()

    def on_first_render(self) -> None:
        """Subscribe to the service's dirty and clean notifications once."""
        if self._disposed or self._subscriptions:
            return
        self._subscriptions = (
            self.service.subscribe_dirty(self.on_record_dirty),
            self.service.subscribe_clean(self.on_record_clean),
        )

    def on_record_dirty(self) -> None:
        if self._disposed:
            return
        self.navigation.set_locked(True)
        self.navigation.set_page_exit_check(True)
        self.alerts.set_alert(UNSAVED_MESSAGE, AlertColour.WARNING)
        self.renders.request()

    def on_record_clean(self) -> None:
        if self._disposed:
            return
        self.navigation.set_locked(False)
        self.navigation.set_page_exit_check(False)
        self.alerts.clear_alert()
        self.renders.request()

    def on_field_changed(self, is_dirty: bool) -> None:
        """Forward a field editor's dirty flag to the service."""
        if self.validation is not None:
            self.service.set_dirty_state(is_dirty)

    async def save(self) -> bool:
        """Validate and persist the record. Returns True when it was saved."""
        state = self._state
        if not isinstance(state, LoadedSession):
            logger.warning("Save requested with no record loaded")
            return False
        if self.phase is not SavePhase.IDLE:
            logger.warning("Save requested while already %s", self.phase)
            return False
        try:
            self._transition(SavePhase.VALIDATING)
            if not state.validation.validate():
                self._transition(SavePhase.INVALID)
                self.alerts.set_alert(VALIDATION_ERROR_MESSAGE, AlertColour.DANGER)
                return False
            self._transition(SavePhase.SAVING)
            with self.renders.coalesce():
                ok = await self.service.save_record()
                # State may have moved on while the save was suspended.
                state = self._state
                if self._disposed or not isinstance(state, LoadedSession):
                    logger.debug(
                        "Session disposed during save of record %s",
                        self.service.record_id,
                    )
                    return ok
                if ok:
                    if self.service.is_clean:
                        state.validation.mark_as_unmodified()
                    self._transition(SavePhase.SAVED)
                self.alerts.set_task_result(self.service.task_result)
                self.renders.request()
            return ok
        finally:
            self._transition(SavePhase.IDLE)

    async def save_and_exit(self) -> bool:
        if await self.save():
            self.confirm_exit()
            return True
        return False

    def try_exit(self) -> bool:
        """Exit when clean. Returns False when the caller must confirm first."""
        if self.is_clean:
            self.confirm_exit()
            return True
        return False

    def confirm_exit(self) -> None:
        """Force the record clean and leave the form."""
        if self._disposed:
            return
        self.service.set_dirty_state(False)
        if self.is_modal and self.modal is not None:
            self.modal.close()
        else:
            self.navigation.exit()

    def dispose(self) -> None:
        """Release both subscriptions and drop the validation context."""
        if not self._disposed:
            self._clean_at_dispose = self.service.is_clean
        for subscription in self._subscriptions:
            self.service.unsubscribe(subscription)
        self._subscriptions = ()
        self._state = NoSession()
        self._disposed = True

    @property
    def is_clean(self) -> bool:
        if self._disposed:
            return self._clean_at_dispose
        return self.service.is_clean

    @property
    def is_new_record(self) -> bool:
        return self.service.record_id == self.service.new_record_id

    @property
    def page_title(self) -> str:
        description = self.service.record_description or DEFAULT_RECORD_DESCRIPTION
        if self.is_new_record:
            return f"New {description}"
        return f"{description} Editor"

    @property
    def card_border_colour(self) -> str:
        return "border-secondary" if self.is_clean else "border-danger"

    @property
    def card_header_colour(self) -> str:
        return "bg-secondary text-white" if self.is_clean else "bg-danger text-white"

    @property
    def card_css(self) -> str:
        return "m-0" if self.is_modal else ""

    @property
    def is_error(self) -> bool:
        return not (isinstance(self._state, LoadedSession) and self.service.is_record)

    def view_state(self) -> ViewState:
        return ViewState(
            page_title=self.page_title,
            card_border_colour=self.card_border_colour,
            card_header_colour=self.card_header_colour,
            card_css=self.card_css,
            is_error=self.is_error,
            is_clean=self.is_clean,
            is_new_record=self.is_new_record,
            is_modal=self.is_modal,
        )

    def _transition(self, phase: SavePhase) -> None:
        if phase is not self.phase:
            logger.debug("Save phase %s -> %s", self.phase, phase)
        self.phase = phase
