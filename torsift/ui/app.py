from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from rich.markup import escape
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import DataTable, Footer, Header, OptionList, RichLog, Static
from textual.widgets.option_list import Option, OptionDoesNotExist

from ..config import AppConfig, SectionConfig, save_config
from ..counts import FilterRow
from ..filters import FilterKind, TorrentFilter
from ..logging import get_logger
from ..panel import FilterPanel
from ..snapshot import SnapshotError, load_snapshot
from ..torrent import TorrentRecord
from .formatters import format_rate, format_size, row_label, status_label
from .modals import HelpScreen, SectionsScreen


LOG = get_logger(__name__)

SECTION_PREFIX = "section-"


class SiftApp(App):
    DEFAULT_CSS = """
    #left {
        width: 40;
    }
    #filters {
        height: 1fr;
    }
    #table {
        height: 2fr;
    }
    #log {
        height: 1fr;
    }
    .panel-title {
        text-style: bold;
    }
    .modal-container {
        width: 60;
        height: auto;
        border: tall $accent;
        background: $panel;
        padding: 1 2;
    }
    SectionsScreen, HelpScreen {
        align: center middle;
    }
    """
    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("space", "toggle_filter", "Add/remove filter"),
        Binding("plus,right", "expand", "Expand"),
        Binding("minus,left", "collapse", "Collapse"),
        Binding("s", "sections", "Sections"),
        Binding("r", "reload", "Reload"),
        Binding("?", "help", "Help"),
    ]

    def __init__(
        self,
        config: AppConfig,
        torrents: Iterable[TorrentRecord] = (),
        snapshot_path: Optional[Path] = None,
        panel: FilterPanel | None = None,
        persist: bool = True,
    ):
        super().__init__()
        self.config = config
        self.snapshot_path = snapshot_path
        self.persist = persist
        self.panel = panel or FilterPanel(
            torrents,
            expanded=config.filters.expanded_dirs,
            sections=config.filters.sections,
        )
        self._rows: dict[str, FilterRow] = {}

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="main"):
            with Horizontal():
                with Vertical(id="left"):
                    yield Static("Filters", classes="panel-title")
                    yield OptionList(id="filters")
                with Vertical(id="right"):
                    yield Static("Torrents", classes="panel-title")
                    yield DataTable(id="table", zebra_stripes=True)
                    yield RichLog(id="log", highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#table", DataTable)
        table.add_columns("ID", "Name", "Status", "Size", "↓", "↑", "Tracker", "Directory")
        table.cursor_type = "row"
        self._render_filters()
        self._render_table()
        self.query_one("#filters", OptionList).focus()

    # rendering

    def _render_filters(self) -> None:
        options = self.query_one("#filters", OptionList)
        keep = self._highlighted_id()
        self._rows = {}
        items: list[Option] = []
        for group in self.panel.groups():
            items.append(Option(f"── {group.section} ──", id=f"{SECTION_PREFIX}{group.section}", disabled=True))
            for row in group.rows:
                self._rows[row.id] = row
                items.append(Option(Text(row_label(row, self.panel.is_selected(row))), id=self._option_id(row.id)))
        options.clear_options()
        options.add_options(items)
        if keep is not None:
            try:
                options.highlighted = options.get_option_index(self._option_id(keep))
            except OptionDoesNotExist:
                pass

    def _render_table(self) -> None:
        table = self.query_one("#table", DataTable)
        table.clear()
        for t in self.panel.visible_torrents():
            table.add_row(
                str(t.id),
                t.name,
                status_label(t),
                format_size(t.size_when_done or t.total_size),
                format_rate(t.rate_download) if self.config.ui.show_rates else "",
                format_rate(t.rate_upload) if self.config.ui.show_rates else "",
                t.cached_main_tracker,
                t.download_dir,
            )

    def _log(self, message: str) -> None:
        self.query_one("#log", RichLog).write(message)

    # option ids must not collide with section headers, filter ids may be ""

    @staticmethod
    def _option_id(filter_id: str) -> str:
        return f"filter:{filter_id}"

    def _highlighted_id(self) -> str | None:
        options = self.query_one("#filters", OptionList)
        if options.highlighted is None:
            return None
        option = options.get_option_at_index(options.highlighted)
        if option.id is None or not option.id.startswith("filter:"):
            return None
        return option.id[len("filter:"):]

    def _highlighted_row(self) -> FilterRow | None:
        filter_id = self._highlighted_id()
        return self._rows.get(filter_id) if filter_id is not None else None

    # selection

    def _apply(self, verb: str, torrent_filter: TorrentFilter) -> None:
        self.panel.select(verb, torrent_filter)
        active = ", ".join(repr(i) for i in self.panel.active.ids) or "(none)"
        self._log(f"[cyan]Filters:[/] {escape(active)}")
        self._render_filters()
        self._render_table()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        option_id = event.option.id or ""
        if not option_id.startswith("filter:"):
            return
        row = self._rows.get(option_id[len("filter:"):])
        if row is not None:
            self._apply("set", row.filter)

    def action_toggle_filter(self) -> None:
        row = self._highlighted_row()
        if row is not None:
            self._apply("toggle", row.filter)

    # directories

    def _set_expansion(self, verb: str) -> None:
        row = self._highlighted_row()
        if row is None or row.filter.kind is not FilterKind.DIRECTORY or not row.expandable:
            return
        if (verb == "add") == row.expanded:
            return
        self.config.filters.expanded_dirs = list(self.panel.expand(verb, row.filter.value))
        self._render_filters()
        self._persist_ui()

    def action_expand(self) -> None:
        self._set_expansion("add")

    def action_collapse(self) -> None:
        self._set_expansion("remove")

    # sections

    def action_sections(self) -> None:
        self.push_screen(SectionsScreen(self.panel.sections), self._on_sections)

    def _on_sections(self, sections: list[SectionConfig] | None) -> None:
        if sections is None:
            return
        if self.panel.set_sections(sections):
            self.config.filters.sections = list(self.panel.sections)
            self._log("[yellow]Filter sections changed, selection reset[/]")
            self._render_filters()
            self._render_table()
            self._persist_ui()

    # misc

    def action_reload(self) -> None:
        if self.snapshot_path is None:
            self._log("[yellow]No snapshot file to reload[/]")
            return
        try:
            self.panel.set_torrents(load_snapshot(self.snapshot_path))
        except SnapshotError as exc:
            LOG.error("Reload failed: %s", exc)
            self._log(f"[red]Reload failed: {exc}[/]")
            return
        self._log(f"[green]Reloaded[/] {len(self.panel.torrents)} torrents")
        self._render_filters()
        self._render_table()

    def action_help(self) -> None:
        self.push_screen(HelpScreen())

    def _persist_ui(self) -> None:
        if not self.persist:
            return
        try:
            save_config(self.config)
        except Exception as exc:  # noqa: BLE001
            self._log(f"[yellow]Config save failed: {exc}[/]")
