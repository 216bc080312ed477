"""Filter sidebar state: torrents, expanded directories, active filters and layout.

The panel owns nothing the collaborator cannot replace. Each input is a
snapshot; derived rows are recomputed lazily when the snapshot they depend on
is swapped for a different object.
"""

from __future__ import annotations

from collections import Counter
from typing import Callable, Iterable, NamedTuple, Sequence, TypeVar

from .config import DEFAULT_SECTIONS, SectionConfig, normalize_sections
from .counts import FilterRow, directory_rows, label_rows, status_rows, tally_labels_and_trackers, tracker_rows
from .dirtree import DirectoryNode, build_tree, flatten_tree, update_expanded
from .filters import ActiveFilters, TorrentFilter
from .logging import get_logger
from .torrent import TorrentRecord


LOG = get_logger(__name__)

T = TypeVar("T")


class FilterGroup(NamedTuple):
    section: str
    rows: list[FilterRow]


class FilterPanel:
    def __init__(
        self,
        torrents: Iterable[TorrentRecord] = (),
        expanded: Iterable[str] = (),
        sections: Iterable[SectionConfig] = DEFAULT_SECTIONS,
        active: ActiveFilters | None = None,
    ):
        self._torrents: tuple[TorrentRecord, ...] = tuple(torrents)
        self._expanded: tuple[str, ...] = tuple(expanded)
        self._sections: tuple[SectionConfig, ...] = tuple(normalize_sections(sections))
        self.active = active if active is not None else ActiveFilters()
        self._cache: dict[str, tuple[tuple[object, ...], object]] = {}

    @property
    def torrents(self) -> tuple[TorrentRecord, ...]:
        return self._torrents

    @property
    def expanded(self) -> tuple[str, ...]:
        return self._expanded

    @property
    def sections(self) -> tuple[SectionConfig, ...]:
        return self._sections

    def set_torrents(self, torrents: Iterable[TorrentRecord]) -> None:
        self._torrents = tuple(torrents)

    def _memo(self, key: str, inputs: tuple[object, ...], compute: Callable[[], T]) -> T:
        cached = self._cache.get(key)
        if cached is not None and all(a is b for a, b in zip(cached[0], inputs)):
            return cached[1]
        value = compute()
        self._cache[key] = (inputs, value)
        return value

    # derivations

    def tree(self) -> DirectoryNode:
        return self._memo(
            "tree",
            (self._torrents, self._expanded),
            lambda: build_tree(sorted(t.download_dir for t in self._torrents), self._expanded),
        )

    def status_rows(self) -> list[FilterRow]:
        return self._memo("status", (self._torrents,), lambda: status_rows(self._torrents))

    def directory_rows(self) -> list[FilterRow]:
        return self._memo(
            "dirs",
            (self._torrents, self._expanded),
            lambda: directory_rows(flatten_tree(self.tree())),
        )

    def _tally(self) -> tuple[Counter[str], Counter[str], int]:
        return self._memo("tally", (self._torrents,), lambda: tally_labels_and_trackers(self._torrents))

    def label_rows(self) -> list[FilterRow]:
        def compute() -> list[FilterRow]:
            labels, _, no_labels = self._tally()
            return label_rows(labels, no_labels)

        return self._memo("labels", (self._torrents,), compute)

    def tracker_rows(self) -> list[FilterRow]:
        return self._memo("trackers", (self._torrents,), lambda: tracker_rows(self._tally()[1]))

    def rows(self, section: str) -> list[FilterRow]:
        getters = {
            "Status": self.status_rows,
            "Directories": self.directory_rows,
            "Labels": self.label_rows,
            "Trackers": self.tracker_rows,
        }
        getter = getters.get(section)
        return getter() if getter else []

    def groups(self) -> list[FilterGroup]:
        """Visible sections in configured order."""
        return [FilterGroup(s.section, self.rows(s.section)) for s in self._sections if s.visible]

    def visible_torrents(self) -> list[TorrentRecord]:
        predicate = self.active.predicate()
        return [t for t in self._torrents if predicate(t)]

    def is_selected(self, row: FilterRow) -> bool:
        return row.filter in self.active

    # update entry points

    def select(self, verb: str, torrent_filter: TorrentFilter) -> ActiveFilters:
        self.active = self.active.update(verb, torrent_filter)
        return self.active

    def expand(self, verb: str, path: str) -> tuple[str, ...]:
        self._expanded = update_expanded(self._expanded, verb, path)
        LOG.debug("Expanded dirs after %s %r: %s", verb, path, len(self._expanded))
        return self._expanded

    def set_expanded(self, expanded: Iterable[str]) -> None:
        self._expanded = tuple(expanded)

    def set_sections(self, sections: Sequence[SectionConfig]) -> bool:
        """Apply a new layout; any change drops the current selection."""
        normalized = tuple(normalize_sections(sections))
        if normalized == self._sections:
            return False
        self._sections = normalized
        self.active = ActiveFilters()
        LOG.debug("Filter sections changed, selection reset")
        return True
