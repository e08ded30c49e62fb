"""Alert surface collaborator."""

from dataclasses import dataclass
from typing import Protocol

from record_editor.domain.alerts import AlertColour, AlertMessage, TaskResult


class AlertSurface(Protocol):
    """Interface for the component that displays alerts."""

    def set_alert(self, message: str, colour: AlertColour) -> None:
        """Show a message with the given colour."""

    def set_task_result(self, result: TaskResult | None) -> None:
        """Show the outcome of a service task."""

    def clear_alert(self) -> None:
        """Hide the current message."""


@dataclass
class AlertPanel(AlertSurface):
    """In-process alert surface holding the visible message."""

    current: AlertMessage | None = None

    def set_alert(self, message: str, colour: AlertColour) -> None:
        self.current = AlertMessage(message=message, colour=colour)

    def set_task_result(self, result: TaskResult | None) -> None:
        self.current = result.to_alert() if result is not None else None

    def clear_alert(self) -> None:
        self.current = None
