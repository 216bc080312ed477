"""
Text formatting for sidebar rows and torrent table cells.
"""

import humanize

from ..counts import FilterRow
from ..filters import FilterKind
from ..torrent import Status, TorrentRecord


STATUS_LABELS = {
    Status.stopped: "Stopped",
    Status.queuedToVerify: "Queued to verify",
    Status.verifying: "Verifying",
    Status.queuedToDownload: "Queued",
    Status.downloading: "Downloading",
    Status.queuedToSeed: "Queued to seed",
    Status.seeding: "Seeding",
}


def row_label(row: FilterRow, selected: bool = False) -> str:
    """Single-line sidebar entry: selection mark, indent, expander, name, count."""
    mark = "*" if selected else " "
    if row.filter.kind is FilterKind.DIRECTORY:
        expander = ("-" if row.expanded else "+") if row.expandable else " "
        indent = "  " * max(row.level, 0)
        return f"{mark} {indent}{expander} {row.name} ({row.count})"
    name = row.name
    if row.filter.kind is FilterKind.TRACKER and not name:
        name = "<no tracker>"
    return f"{mark} {name} ({row.count})"


def format_rate(value: int) -> str:
    return humanize.naturalsize(max(0, value), binary=True) + "/s"


def format_size(value: int) -> str:
    return humanize.naturalsize(max(0, value), binary=True)


def status_label(torrent: TorrentRecord) -> str:
    if torrent.error or torrent.error_string:
        return "Error"
    if torrent.status == Status.downloading and torrent.piece_count == 0:
        return "Magnetizing"
    return STATUS_LABELS.get(torrent.status, torrent.status.name)
