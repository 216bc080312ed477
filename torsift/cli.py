from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import AppConfig, load_config, save_config
from .dirtree import normalize_dir
from .filters import TorrentFilter
from .logging import configure_logging, get_logger
from .panel import FilterPanel
from .snapshot import SnapshotError, load_snapshot
from .ui.app import SiftApp
from .ui.formatters import row_label


LOG = get_logger(__name__)


def _apply_overrides(config: AppConfig, snapshot: Optional[str], expand: tuple[str, ...], save: bool) -> AppConfig:
    if snapshot:
        config.ui.snapshot_path = Path(snapshot).expanduser()
    for raw in expand:
        path = normalize_dir(raw)
        if not path:
            LOG.warning("Ignoring --expand %r: not an absolute directory", raw)
            continue
        if path not in config.filters.expanded_dirs:
            config.filters.expanded_dirs.append(path)
    if save:
        save_config(config)
    return config


def _print_panel(panel: FilterPanel) -> None:
    for group in panel.groups():
        click.echo(f"== {group.section} ==")
        for row in group.rows:
            click.echo(row_label(row, panel.is_selected(row)))
    click.echo("== Torrents ==")
    for t in panel.visible_torrents():
        click.echo(f"{t.id}\t{t.name}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("snapshot", required=False, type=click.Path(dir_okay=False))
@click.option("--select", "select_ids", multiple=True, help="Filter id to show exclusively (e.g. label-movies)")
@click.option("--toggle", "toggle_ids", multiple=True, help="Filter id to add to or remove from the selection")
@click.option("--expand", multiple=True, help="Directory to expand (e.g. /data/movies); may be repeated")
@click.option("--plain", is_flag=True, help="Print the filter sidebar and matching torrents instead of the TUI")
@click.option("--no-save", is_flag=True, help="Do not write changes back to the config file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: TORSIFT_LOG_LEVEL or INFO)",
)
@click.option("--log-file", default=None, type=click.Path(dir_okay=False), help="Write the debug log here instead of ~/.cache/torsift/debug.log")
@click.version_option(__version__, "-v", "--version", message="torsift %(version)s")
def main(
    snapshot: Optional[str],
    select_ids: tuple[str, ...],
    toggle_ids: tuple[str, ...],
    expand: tuple[str, ...],
    plain: bool,
    no_save: bool,
    log_level: Optional[str],
    log_file: Optional[str],
):
    """Browse a torrent snapshot through status, directory, label and tracker filters."""
    if log_level or log_file:
        configure_logging(
            level=log_level,
            to_stdout=False if log_file else None,
            path=Path(log_file) if log_file else None,
            force=True,
        )
    config = load_config(save=not no_save)
    config = _apply_overrides(config, snapshot, expand, save=not no_save)

    path = config.ui.snapshot_path
    if path is None:
        raise click.UsageError("No snapshot given and none configured")
    try:
        torrents = load_snapshot(path)
    except SnapshotError as exc:
        raise click.ClickException(str(exc)) from exc

    panel = FilterPanel(torrents, expanded=config.filters.expanded_dirs, sections=config.filters.sections)
    for filter_id in select_ids:
        panel.select("set", TorrentFilter.parse(filter_id))
    for filter_id in toggle_ids:
        panel.select("toggle", TorrentFilter.parse(filter_id))

    if plain:
        _print_panel(panel)
        return

    app = SiftApp(config=config, snapshot_path=path, panel=panel, persist=not no_save)
    try:
        app.run()
    except KeyboardInterrupt:
        LOG.info("Interrupted by user (Ctrl+C)")


if __name__ == "__main__":
    main()
