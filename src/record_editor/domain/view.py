"""Render-facing projections of an edit session."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewState:
    """Snapshot of everything the edit form needs to paint itself."""

    page_title: str
    card_border_colour: str
    card_header_colour: str
    card_css: str
    is_error: bool
    is_clean: bool
    is_new_record: bool
    is_modal: bool
