from __future__ import annotations

from typing import Sequence, TypeVar

from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Markdown, SelectionList, Static

from ..config import SectionConfig
from ..logging import get_logger

T = TypeVar("T")
LOG = get_logger(__name__)


class BaseModalScreen(ModalScreen[T]):
    """Modal screen that closes on Escape."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)


class SectionsScreen(BaseModalScreen[list[SectionConfig] | None]):
    """Choose which filter sections are shown; order is kept."""

    def __init__(self, sections: Sequence[SectionConfig]) -> None:
        super().__init__()
        self.sections = list(sections)

    def compose(self):
        with Container(classes="modal-container", id="sections-box"):
            yield Static("Filter Sections", classes="modal-title")
            yield SelectionList[str](
                *[(s.section, s.section, s.visible) for s in self.sections],
                id="sections",
            )
            with Horizontal(classes="buttons"):
                yield Button("Apply", id="ok", variant="primary")
                yield Button("Cancel", id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "ok":
            self.dismiss(None)
            return
        chosen = set(self.query_one("#sections", SelectionList).selected)
        LOG.info("SectionsScreen submit: visible=%s", sorted(chosen))
        self.dismiss([SectionConfig(s.section, s.section in chosen) for s in self.sections])


class HelpScreen(BaseModalScreen[None]):
    """Key bindings."""

    def compose(self):
        with Container(classes="modal-container", id="help-box"):
            yield Static("Help", classes="modal-title")
            yield Markdown(
                """
`enter` show only this filter · `space` add/remove filter from selection
`right`/`+` expand directory · `left`/`-` collapse directory
`s` filter sections · `r` reload snapshot · `q` quit
"""
            )
            with Horizontal(classes="buttons"):
                yield Button("Close", id="close", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)
