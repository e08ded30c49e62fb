"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest
from pydantic import Field

from record_editor.config import Settings
from record_editor.containers import AppContainer
from record_editor.domain.errors import RecordPersistenceError
from record_editor.domain.records import DbRecord, RecordConfiguration
from record_editor.services.alerts import AlertPanel
from record_editor.services.edit_session import EditSessionController
from record_editor.services.navigation import ModalHost, NavigationGuard
from record_editor.services.records import RecordRepository, RecordService


class Widget(DbRecord):
    """Record type used throughout the tests."""

    name: str = Field(default="", min_length=1)
    quantity: int = Field(default=0, ge=0)


WIDGET_CONFIGURATION = RecordConfiguration(
    record_name="widget", record_description="Widget", record_list_url="/widgets"
)


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record repository for tests."""

    records: dict[int, DbRecord] = field(default_factory=dict)
    next_id: int = 100
    fail: bool = False
    gate: asyncio.Event | None = None
    add_calls: int = 0
    update_calls: int = 0

    async def get_record(self, record_id: int) -> DbRecord | None:
        await self._wait()
        record = self.records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    async def add_record(self, record: DbRecord) -> DbRecord:
        self.add_calls += 1
        payload = record.model_copy(deep=True)
        await self._wait()
        if self.fail:
            raise RecordPersistenceError("store unavailable")
        stored = payload.model_copy(update={"id": self.next_id})
        self.next_id += 1
        self.records[stored.id] = stored
        return stored.model_copy(deep=True)

    async def update_record(self, record: DbRecord) -> DbRecord:
        self.update_calls += 1
        payload = record.model_copy(deep=True)
        await self._wait()
        if self.fail:
            raise RecordPersistenceError("store unavailable")
        self.records[payload.id] = payload
        return payload.model_copy(deep=True)

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()


@dataclass
class FakeNavigationGuard(NavigationGuard):
    """Navigation guard that records every command."""

    locked: bool = False
    page_exit_check: bool = False
    exits: int = 0
    lock_history: list[bool] = field(default_factory=list)

    def set_locked(self, locked: bool) -> None:
        self.locked = locked
        self.lock_history.append(locked)

    def set_page_exit_check(self, enabled: bool) -> None:
        self.page_exit_check = enabled

    def exit(self) -> None:
        self.exits += 1


@dataclass
class FakeModalHost(ModalHost):
    """Modal host that counts close calls."""

    closes: int = 0

    def close(self) -> None:
        self.closes += 1


@pytest.fixture
def repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository(
        records={42: Widget(id=42, name="Sprocket", quantity=3)}
    )


@pytest.fixture
def record_service(repository: InMemoryRecordRepository) -> RecordService:
    return RecordService(
        repository=repository,
        record_type=Widget,
        configuration=WIDGET_CONFIGURATION,
    )


@pytest.fixture
def navigation() -> FakeNavigationGuard:
    return FakeNavigationGuard()


@pytest.fixture
def alerts() -> AlertPanel:
    return AlertPanel()


@pytest.fixture
def modal_host() -> FakeModalHost:
    return FakeModalHost()


@pytest.fixture
def open_session(record_service, navigation, alerts, modal_host):
    """Return a factory for loaded and rendered edit sessions."""

    def _open(record_id: int | None = 42, is_modal: bool = False):
        controller = EditSessionController(
            service=record_service,
            navigation=navigation,
            alerts=alerts,
            record_id=record_id,
            is_modal=is_modal,
            modal=modal_host if is_modal else None,
        )
        asyncio.run(controller.load(first_load=True))
        controller.on_first_render()
        return controller

    return _open


@pytest.fixture
def settings() -> Settings:
    return Settings(
        records_base_url="https://records.example.com/api",
        record_name="widget",
        record_description="Widget",
        record_list_url="/widgets",
    )


@pytest.fixture
def container(
    settings: Settings, repository: InMemoryRecordRepository
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        record_type=Widget,
        record_configuration=settings.record_configuration(),
        record_repository=repository,
        close_resources=close_resources,
    )
