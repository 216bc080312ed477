from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, NamedTuple

from .dirtree import normalize_dir
from .logging import get_logger
from .torrent import Status, TorrentRecord


LOG = get_logger(__name__)

Predicate = Callable[[TorrentRecord], bool]


class NamedFilter(NamedTuple):
    name: str
    predicate: Predicate


def _completed(t: TorrentRecord) -> bool:
    return t.status == Status.seeding or (
        t.size_when_done > 0 and max(t.size_when_done - t.have_valid, 0) == 0
    )


STATUS_FILTERS: list[NamedFilter] = [
    NamedFilter("All Torrents", lambda t: True),
    NamedFilter("Downloading", lambda t: t.status == Status.downloading),
    NamedFilter("Completed", _completed),
    NamedFilter("Active", lambda t: t.rate_download > 0 or t.rate_upload > 0),
    # stopped torrents with zero rates are "Stopped", not "Inactive"
    NamedFilter(
        "Inactive",
        lambda t: t.rate_download == 0 and t.rate_upload == 0 and t.status != Status.stopped,
    ),
    NamedFilter("Stopped", lambda t: t.status == Status.stopped),
    NamedFilter("Error", lambda t: t.error != 0 or t.error_string != ""),
    NamedFilter(
        "Waiting",
        lambda t: t.status in (Status.verifying, Status.queuedToVerify, Status.queuedToDownload),
    ),
    NamedFilter("Magnetizing", lambda t: t.status == Status.downloading and t.piece_count == 0),
]

STATUS_BY_NAME = {f.name: f for f in STATUS_FILTERS}

NO_LABELS_NAME = "<No labels>"


class FilterKind(str, Enum):
    DEFAULT = "default"
    STATUS = "status"
    NO_LABELS = "nolabels"
    LABEL = "label"
    TRACKER = "tracker"
    DIRECTORY = "dir"


def _match_status(value: str, t: TorrentRecord) -> bool:
    named = STATUS_BY_NAME.get(value)
    return named is not None and named.predicate(t)


def _match_no_labels(value: str, t: TorrentRecord) -> bool:
    return t.labels is not None and len(t.labels) == 0


def _match_label(value: str, t: TorrentRecord) -> bool:
    return t.labels is not None and value in t.labels


def _match_directory(value: str, t: TorrentRecord) -> bool:
    return bool(value) and normalize_dir(t.download_dir).startswith(value)


_MATCHERS: dict[FilterKind, Callable[[str, TorrentRecord], bool]] = {
    FilterKind.DEFAULT: lambda value, t: True,
    FilterKind.STATUS: _match_status,
    FilterKind.NO_LABELS: _match_no_labels,
    FilterKind.LABEL: _match_label,
    FilterKind.TRACKER: lambda value, t: t.cached_main_tracker == value,
    FilterKind.DIRECTORY: _match_directory,
}


@dataclass(frozen=True, eq=False)
class TorrentFilter:
    """A selectable filter, identified by its id rather than its predicate."""

    kind: FilterKind
    value: str = ""

    @property
    def id(self) -> str:
        if self.kind is FilterKind.DEFAULT:
            return ""
        if self.kind is FilterKind.NO_LABELS:
            return "nolabels"
        return f"{self.kind.value}-{self.value}"

    def __call__(self, torrent: TorrentRecord) -> bool:
        return _MATCHERS[self.kind](self.value, torrent)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TorrentFilter):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def status(cls, name: str) -> "TorrentFilter":
        return cls(FilterKind.STATUS, name)

    @classmethod
    def no_labels(cls) -> "TorrentFilter":
        return cls(FilterKind.NO_LABELS)

    @classmethod
    def label(cls, label: str) -> "TorrentFilter":
        return cls(FilterKind.LABEL, label)

    @classmethod
    def tracker(cls, tracker: str) -> "TorrentFilter":
        return cls(FilterKind.TRACKER, tracker)

    @classmethod
    def directory(cls, path: str) -> "TorrentFilter":
        return cls(FilterKind.DIRECTORY, path)

    @classmethod
    def parse(cls, filter_id: str) -> "TorrentFilter":
        """Inverse of ``id``; unrecognised ids fall back to the default filter."""
        if filter_id == "nolabels":
            return cls.no_labels()
        kind, sep, value = filter_id.partition("-")
        if sep:
            for candidate in FilterKind:
                if candidate.value == kind and candidate not in (FilterKind.DEFAULT, FilterKind.NO_LABELS):
                    return cls(candidate, value)
        if filter_id:
            LOG.debug("Unrecognised filter id %r, using default", filter_id)
        return DEFAULT_FILTER


DEFAULT_FILTER = TorrentFilter(FilterKind.DEFAULT)


def combined_predicate(filters: Iterable[TorrentFilter]) -> Predicate:
    active = tuple(filters)

    def predicate(torrent: TorrentRecord) -> bool:
        return all(f(torrent) for f in active)

    return predicate


class ActiveFilters:
    """Ordered set of applied filters, unique by id.

    Instances are immutable; ``update`` returns the next state.
    """

    __slots__ = ("_filters",)

    def __init__(self, filters: Iterable[TorrentFilter] = (DEFAULT_FILTER,)):
        unique: dict[str, TorrentFilter] = {}
        for f in filters:
            unique.setdefault(f.id, f)
        self._filters = tuple(unique.values())

    def __iter__(self) -> Iterator[TorrentFilter]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, TorrentFilter):
            item = item.id
        return any(f.id == item for f in self._filters)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActiveFilters):
            return NotImplemented
        return self.ids == other.ids

    def __repr__(self) -> str:
        return f"ActiveFilters({list(self.ids)!r})"

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(f.id for f in self._filters)

    def update(self, verb: str, torrent_filter: TorrentFilter) -> "ActiveFilters":
        if verb == "set":
            LOG.debug("Filter set: %r", torrent_filter.id)
            return ActiveFilters((torrent_filter,))
        if verb == "toggle":
            if torrent_filter in self:
                LOG.debug("Filter toggled off: %r", torrent_filter.id)
                return ActiveFilters(f for f in self._filters if f.id != torrent_filter.id)
            LOG.debug("Filter toggled on: %r", torrent_filter.id)
            return ActiveFilters(self._filters + (torrent_filter,))
        raise ValueError(f"Unknown filter verb: {verb!r}")

    def predicate(self) -> Predicate:
        return combined_predicate(self._filters)
