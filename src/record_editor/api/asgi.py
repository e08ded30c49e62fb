"""ASGI entrypoint serving ``NamedRecord`` edit sessions.

Run with ``uvicorn record_editor.api.asgi:app``; the record endpoint and
labels come from ``RECORD_EDITOR_*`` settings.
"""

from record_editor.api.app import create_app
from record_editor.config import Settings
from record_editor.containers import build_container
from record_editor.domain.records import NamedRecord

settings = Settings()
app = create_app(build_container(settings, record_type=NamedRecord))
