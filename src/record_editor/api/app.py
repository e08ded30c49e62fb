"""FastAPI application hosting edit sessions for the UI layer."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from uuid import UUID, uuid4

from fastapi import FastAPI, HTTPException, Request, status

from record_editor.api.models import FieldEdit, OpenSessionRequest
from record_editor.app_logging import configure_logging
from record_editor.containers import AppContainer
from record_editor.domain.errors import RecordNotFoundError, RecordPersistenceError
from record_editor.domain.records import DbRecord
from record_editor.services.alerts import AlertPanel
from record_editor.services.edit_session import EditSessionController
from record_editor.services.navigation import ModalDialog, ViewManager


@dataclass
class HostedSession:
    """An edit session together with the UI collaborators it drives."""

    controller: EditSessionController
    view_manager: ViewManager
    alerts: AlertPanel
    modal: ModalDialog | None = None

    @property
    def exited(self) -> bool:
        if self.modal is not None:
            return not self.modal.is_open
        return self.view_manager.current_url is not None


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level, container.settings.environment)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        for hosted in app.state.sessions.values():
            hosted.controller.dispose()
        app.state.sessions.clear()
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.state.sessions = {}

    def _get_session(request: Request, session_id: UUID) -> HostedSession:
        hosted = request.app.state.sessions.get(session_id)
        if hosted is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return hosted

    def _close_if_exited(request: Request, session_id: UUID) -> None:
        hosted = request.app.state.sessions[session_id]
        if hosted.exited:
            hosted.controller.dispose()
            del request.app.state.sessions[session_id]
            logger.info("Closed edit session %s", session_id)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def open_session(
        payload: OpenSessionRequest, request: Request
    ) -> dict[str, object]:
        """Open an edit form on a record, or on a new record."""
        state_container: AppContainer = request.app.state.container
        view_manager = ViewManager(
            exit_url=state_container.record_configuration.record_list_url
        )
        alerts = AlertPanel()
        modal = ModalDialog() if payload.modal else None
        controller = EditSessionController(
            service=state_container.new_record_service(),
            navigation=view_manager,
            alerts=alerts,
            record_id=payload.record_id,
            is_modal=payload.modal,
            modal=modal,
        )
        try:
            await controller.load(first_load=True)
        except RecordNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except RecordPersistenceError as exc:
            logger.exception("Failed to load record %s", payload.record_id)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        controller.after_render(first_render=True)
        session_id = uuid4()
        hosted = HostedSession(
            controller=controller,
            view_manager=view_manager,
            alerts=alerts,
            modal=modal,
        )
        request.app.state.sessions[session_id] = hosted
        logger.info("Opened edit session %s", session_id)
        return _session_view(session_id, hosted)

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: UUID, request: Request) -> dict[str, object]:
        """Return the current view of an edit session."""
        return _session_view(session_id, _get_session(request, session_id))

    @app.patch("/sessions/{session_id}/fields")
    async def edit_field(
        session_id: UUID, payload: FieldEdit, request: Request
    ) -> dict[str, object]:
        """Write a field value into the record and report the new dirty state."""
        hosted = _get_session(request, session_id)
        controller = hosted.controller
        record = controller.record
        validation = controller.validation
        if record is None or validation is None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT)
        if payload.field_name == "id" or payload.field_name not in type(
            record
        ).model_fields:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown field {payload.field_name}",
            )
        setattr(record, payload.field_name, payload.value)
        validation.notify_field_changed(payload.field_name)
        controller.on_field_changed(controller.service.has_changes())
        return _session_view(session_id, hosted)

    @app.post("/sessions/{session_id}/save")
    async def save(session_id: UUID, request: Request) -> dict[str, object]:
        """Validate and persist the record."""
        hosted = _get_session(request, session_id)
        ok = await hosted.controller.save()
        return {"ok": ok, "session": _session_view(session_id, hosted)}

    @app.post("/sessions/{session_id}/save-and-exit")
    async def save_and_exit(session_id: UUID, request: Request) -> dict[str, object]:
        """Save the record and leave the form when the save succeeded."""
        hosted = _get_session(request, session_id)
        ok = await hosted.controller.save_and_exit()
        view = _session_view(session_id, hosted)
        _close_if_exited(request, session_id)
        return {"ok": ok, "session": view}

    @app.post("/sessions/{session_id}/exit")
    async def try_exit(session_id: UUID, request: Request) -> dict[str, object]:
        """Leave a clean form; a dirty form reports that confirmation is needed."""
        hosted = _get_session(request, session_id)
        exited = hosted.controller.try_exit()
        view = _session_view(session_id, hosted)
        _close_if_exited(request, session_id)
        return {
            "ok": exited,
            "requires_confirmation": not exited,
            "session": view,
        }

    @app.post("/sessions/{session_id}/exit/confirm")
    async def confirm_exit(session_id: UUID, request: Request) -> dict[str, object]:
        """Discard unsaved changes and leave the form."""
        hosted = _get_session(request, session_id)
        hosted.controller.confirm_exit()
        view = _session_view(session_id, hosted)
        _close_if_exited(request, session_id)
        return {"ok": True, "session": view}

    @app.delete("/sessions/{session_id}")
    async def close_session(session_id: UUID, request: Request) -> dict[str, str]:
        """Dispose an edit session, e.g. when the form is unmounted."""
        hosted = request.app.state.sessions.pop(session_id, None)
        if hosted is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        hosted.controller.dispose()
        logger.info("Disposed edit session %s", session_id)
        return {"status": "disposed"}

    return app


def _session_view(session_id: UUID, hosted: HostedSession) -> dict[str, object]:
    controller = hosted.controller
    record = controller.record
    validation = controller.validation
    alert = hosted.alerts.current
    return {
        "session_id": str(session_id),
        "view": asdict(controller.view_state()),
        "record": _record_values(record) if record is not None else None,
        "field_errors": dict(validation.field_errors) if validation else {},
        "alert": (
            {"message": alert.message, "colour": alert.colour.value}
            if alert is not None
            else None
        ),
        "navigation_locked": hosted.view_manager.is_locked,
        "page_exit_check": hosted.view_manager.page_exit_check,
        "phase": controller.phase.value,
        "render_requests": controller.renders.drain(),
        "exited": hosted.exited,
    }


def _record_values(record: DbRecord) -> dict[str, object]:
    return {name: getattr(record, name) for name in type(record).model_fields}
