"""Headless tests for the Textual viewer."""

import asyncio

from textual.widgets import DataTable, OptionList

from torsift.config import AppConfig, SectionConfig
from torsift.snapshot import parse_snapshot
from torsift.ui.app import SiftApp


def _run(app: SiftApp, scenario) -> None:
    async def runner() -> None:
        async with app.run_test() as pilot:
            await scenario(pilot)

    asyncio.run(runner())


def _highlight(app: SiftApp, filter_id: str) -> None:
    options = app.query_one("#filters", OptionList)
    options.highlighted = options.get_option_index(f"filter:{filter_id}")


class TestSiftApp:
    def test_initial_render(self, sample_torrents) -> None:
        app = SiftApp(config=AppConfig(), torrents=sample_torrents, persist=False)

        async def scenario(pilot) -> None:
            assert app.query_one("#table", DataTable).row_count == 5
            options = app.query_one("#filters", OptionList)
            assert options.get_option_index("filter:dir-/data/") is not None

        _run(app, scenario)

    def test_enter_sets_filter(self, sample_torrents) -> None:
        app = SiftApp(config=AppConfig(), torrents=sample_torrents, persist=False)

        async def scenario(pilot) -> None:
            _highlight(app, "label-movies")
            await pilot.press("enter")
            await pilot.pause()
            assert app.panel.active.ids == ("label-movies",)
            assert app.query_one("#table", DataTable).row_count == 2

        _run(app, scenario)

    def test_toggle_adds_to_selection(self, sample_torrents) -> None:
        app = SiftApp(config=AppConfig(), torrents=sample_torrents, persist=False)

        async def scenario(pilot) -> None:
            _highlight(app, "label-movies")
            app.action_toggle_filter()
            _highlight(app, "tracker-trackerA")
            app.action_toggle_filter()
            await pilot.pause()
            assert app.panel.active.ids == ("", "label-movies", "tracker-trackerA")
            assert app.query_one("#table", DataTable).row_count == 2

        _run(app, scenario)

    def test_expand_directory(self, sample_torrents) -> None:
        config = AppConfig()
        app = SiftApp(config=config, torrents=sample_torrents, persist=False)

        async def scenario(pilot) -> None:
            _highlight(app, "dir-/data/")
            app.action_expand()
            await pilot.pause()
            options = app.query_one("#filters", OptionList)
            assert options.get_option_index("filter:dir-/data/movies/") is not None
            assert config.filters.expanded_dirs == ["/data/"]

            app.action_collapse()
            assert config.filters.expanded_dirs == []

        _run(app, scenario)

    def test_section_change_resets_selection(self, sample_torrents) -> None:
        config = AppConfig()
        app = SiftApp(config=config, torrents=sample_torrents, persist=False)

        async def scenario(pilot) -> None:
            _highlight(app, "label-movies")
            await pilot.press("enter")
            await pilot.pause()
            assert app.panel.active.ids == ("label-movies",)
            app._on_sections([SectionConfig(s.section, s.section != "Trackers") for s in app.panel.sections])
            await pilot.pause()
            assert app.panel.active.ids == ("",)
            assert config.filters.sections[-1] == SectionConfig("Trackers", False)
            assert app.query_one("#table", DataTable).row_count == 5

        _run(app, scenario)

    def test_torrents_without_ids_all_listed(self) -> None:
        torrents = parse_snapshot(
            [
                {"name": "a", "downloadDir": "/x"},
                {"name": "b", "downloadDir": "/y"},
            ]
        )
        app = SiftApp(config=AppConfig(), torrents=torrents, persist=False)

        async def scenario(pilot) -> None:
            table = app.query_one("#table", DataTable)
            assert [t.id for t in torrents] == [0, 0]
            assert table.row_count == 2

            _highlight(app, "dir-/y/")
            await pilot.press("enter")
            await pilot.pause()
            assert table.row_count == 1

        _run(app, scenario)
