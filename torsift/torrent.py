from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping
from urllib.parse import urlsplit

from transmission_rpc import Torrent

from .logging import get_logger


LOG = get_logger(__name__)


class Status(IntEnum):
    """Transmission torrent status codes."""

    stopped = 0
    queuedToVerify = 1
    verifying = 2
    queuedToDownload = 3
    downloading = 4
    queuedToSeed = 5
    seeding = 6

    @classmethod
    def coerce(cls, value: Any) -> "Status":
        if isinstance(value, Status):
            return value
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            pass
        # transmission_rpc exposes statuses as strings ("download pending", ...)
        named = _RPC_STATUS_NAMES.get(str(value).strip().lower())
        if named is None:
            LOG.debug("Unknown torrent status %r, treating as stopped", value)
            return cls.stopped
        return named


_RPC_STATUS_NAMES = {
    "stopped": Status.stopped,
    "check pending": Status.queuedToVerify,
    "checking": Status.verifying,
    "download pending": Status.queuedToDownload,
    "downloading": Status.downloading,
    "seed pending": Status.queuedToSeed,
    "seeding": Status.seeding,
}


@dataclass(frozen=True)
class TorrentRecord:
    """Read-only view of a torrent as the filter sidebar sees it.

    ``labels`` is ``None`` when the source did not report labels at all, which
    is different from an empty tuple.
    """

    id: int
    name: str
    status: Status = Status.stopped
    rate_download: int = 0
    rate_upload: int = 0
    size_when_done: int = 0
    have_valid: int = 0
    total_size: int = 0
    error: int = 0
    error_string: str = ""
    labels: tuple[str, ...] | None = ()
    cached_main_tracker: str = ""
    download_dir: str = ""
    piece_count: int = 0

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "TorrentRecord":
        """Build a record from raw Transmission RPC torrent fields."""
        labels = fields.get("labels")
        tracker = fields.get("cachedMainTracker")
        if tracker is None:
            tracker = main_tracker(fields.get("trackers") or fields.get("trackerStats") or [])
        return cls(
            id=_as_int(fields.get("id")),
            name=str(fields.get("name") or ""),
            status=Status.coerce(fields.get("status", Status.stopped)),
            rate_download=_as_int(fields.get("rateDownload")),
            rate_upload=_as_int(fields.get("rateUpload")),
            size_when_done=_as_int(fields.get("sizeWhenDone")),
            have_valid=_as_int(fields.get("haveValid")),
            total_size=_as_int(fields.get("totalSize")),
            error=_as_int(fields.get("error")),
            error_string=str(fields.get("errorString") or fields.get("cachedError") or ""),
            labels=None if labels is None else tuple(str(label) for label in labels),
            cached_main_tracker=str(tracker),
            download_dir=str(fields.get("downloadDir") or ""),
            piece_count=_as_int(fields.get("pieceCount")),
        )

    @classmethod
    def from_rpc(cls, torrent: Torrent) -> "TorrentRecord":
        return cls.from_fields(torrent.fields)


def main_tracker(trackers: Any) -> str:
    """Host of the first announce URL, lowest tier first."""
    entries = [t for t in trackers if isinstance(t, Mapping) and t.get("announce")]
    if not entries:
        return ""
    first = min(entries, key=lambda t: _as_int(t.get("tier")))
    host = urlsplit(str(first["announce"])).hostname or ""
    if host.startswith("www."):
        host = host[4:]
    return host


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
