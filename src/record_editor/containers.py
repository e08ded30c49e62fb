"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from record_editor.adapters.http_record_repository import HttpxRecordRepository
from record_editor.config import Settings
from record_editor.domain.records import DbRecord, NamedRecord, RecordConfiguration
from record_editor.services.records import RecordRepository, RecordService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    record_type: type[DbRecord]
    record_configuration: RecordConfiguration
    record_repository: RecordRepository
    close_resources: Callable[[], Awaitable[None]]

    def new_record_service(self) -> RecordService:
        """Create a record service for one edit session."""
        return RecordService(
            repository=self.record_repository,
            record_type=self.record_type,
            configuration=self.record_configuration,
            new_record_id=self.settings.new_record_id,
        )


def build_container(
    settings: Settings | None = None, record_type: type[DbRecord] = NamedRecord
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    record_repository = HttpxRecordRepository.create(
        base_url=resolved_settings.records_base_url,
        record_name=resolved_settings.record_name,
        record_type=record_type,
        timeout=resolved_settings.records_timeout_seconds,
    )

    async def close_resources() -> None:
        await record_repository.close()

    return AppContainer(
        settings=resolved_settings,
        record_type=record_type,
        record_configuration=resolved_settings.record_configuration(),
        record_repository=record_repository,
        close_resources=close_resources,
    )
