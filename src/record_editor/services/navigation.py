"""Navigation guard and modal host collaborators."""

from dataclasses import dataclass
from typing import Protocol


class NavigationGuard(Protocol):
    """Interface for the router that owns page transitions."""

    def set_locked(self, locked: bool) -> None:
        """Block or allow route changes away from the current view."""

    def set_page_exit_check(self, enabled: bool) -> None:
        """Toggle the browser-level page exit confirmation."""

    def exit(self) -> None:
        """Leave the current view."""


class ModalHost(Protocol):
    """Interface for the overlay hosting a modal edit form."""

    def close(self) -> None:
        """Close the overlay."""


@dataclass
class ViewManager(NavigationGuard):
    """In-process navigation guard that records where the view went."""

    exit_url: str = "/"
    is_locked: bool = False
    page_exit_check: bool = False
    current_url: str | None = None

    def set_locked(self, locked: bool) -> None:
        self.is_locked = locked

    def set_page_exit_check(self, enabled: bool) -> None:
        self.page_exit_check = enabled

    def exit(self) -> None:
        self.current_url = self.exit_url


@dataclass
class ModalDialog(ModalHost):
    """In-process modal host."""

    is_open: bool = True

    def close(self) -> None:
        self.is_open = False
