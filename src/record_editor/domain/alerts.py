"""Domain models for user-facing alerts."""

from dataclasses import dataclass
from enum import StrEnum


class AlertColour(StrEnum):
    """Bootstrap colour codes used by the alert surface."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    SUCCESS = "success"
    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class AlertMessage:
    """Message currently shown on the alert surface."""

    message: str
    colour: AlertColour = AlertColour.INFO


@dataclass(frozen=True)
class TaskResult:
    """Outcome of a service task such as a save."""

    is_ok: bool
    message: str
    colour: AlertColour = AlertColour.INFO

    @classmethod
    def ok(cls, message: str) -> "TaskResult":
        return cls(is_ok=True, message=message, colour=AlertColour.SUCCESS)

    @classmethod
    def failed(cls, message: str) -> "TaskResult":
        return cls(is_ok=False, message=message, colour=AlertColour.DANGER)

    def to_alert(self) -> AlertMessage:
        """Return the alert this result is displayed as."""
        return AlertMessage(message=self.message, colour=self.colour)
