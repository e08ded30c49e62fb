"""HTTP-backed record repository."""

from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from record_editor.domain.errors import RecordPersistenceError
from record_editor.domain.records import DbRecord
from record_editor.services.records import RecordRepository


@dataclass
class HttpxRecordRepository(RecordRepository):
    """Record repository talking to a REST records API."""

    base_url: str
    record_name: str
    record_type: type[DbRecord]
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(
        cls,
        base_url: str,
        record_name: str,
        record_type: type[DbRecord],
        timeout: float = 10.0,
    ) -> "HttpxRecordRepository":
        """Create a repository with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            record_name=record_name,
            record_type=record_type,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}/{self.record_name}"

    async def get_record(self, record_id: int) -> DbRecord | None:
        """Fetch a record by id; a 404 yields None."""
        try:
            response = await self.http_client.get(
                f"{self.collection_url}/{record_id}", timeout=self.timeout
            )
            if response.status_code == httpx.codes.NOT_FOUND:
                return None
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RecordPersistenceError(str(exc)) from exc
        return self._parse(response)

    async def add_record(self, record: DbRecord) -> DbRecord:
        """Create a record; the server assigns the id."""
        payload = record.model_dump(mode="json", exclude={"id"})
        return await self._send("POST", self.collection_url, payload)

    async def update_record(self, record: DbRecord) -> DbRecord:
        """Replace an existing record."""
        payload = record.model_dump(mode="json")
        return await self._send("PUT", f"{self.collection_url}/{record.id}", payload)

    async def _send(self, method: str, url: str, payload: dict) -> DbRecord:
        try:
            response = await self.http_client.request(
                method, url, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RecordPersistenceError(str(exc)) from exc
        return self._parse(response)

    def _parse(self, response: httpx.Response) -> DbRecord:
        try:
            return self.record_type.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RecordPersistenceError(f"Malformed record payload: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
