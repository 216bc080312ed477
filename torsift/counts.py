"""Per-group filter rows with match counts over the unfiltered collection."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, NamedTuple, Sequence

from .dirtree import DirectoryNode
from .filters import NO_LABELS_NAME, STATUS_FILTERS, TorrentFilter
from .torrent import TorrentRecord


class FilterRow(NamedTuple):
    name: str
    filter: TorrentFilter
    count: int
    level: int = 0
    expandable: bool = False
    expanded: bool = False

    @property
    def id(self) -> str:
        return self.filter.id


def status_rows(torrents: Sequence[TorrentRecord]) -> list[FilterRow]:
    return [
        FilterRow(f.name, TorrentFilter.status(f.name), sum(1 for t in torrents if f.predicate(t)))
        for f in STATUS_FILTERS
    ]


def tally_labels_and_trackers(torrents: Iterable[TorrentRecord]) -> tuple[Counter[str], Counter[str], int]:
    """Single pass: per-label counts, per-tracker counts and the no-labels count."""
    labels: Counter[str] = Counter()
    trackers: Counter[str] = Counter()
    no_labels = 0
    for t in torrents:
        if t.labels is not None:
            if t.labels:
                # a label listed twice on one torrent still counts that torrent once
                labels.update(set(t.labels))
            else:
                no_labels += 1
        trackers[t.cached_main_tracker] += 1
    return labels, trackers, no_labels


def label_rows(labels: Counter[str], no_labels: int) -> list[FilterRow]:
    rows = [FilterRow(NO_LABELS_NAME, TorrentFilter.no_labels(), no_labels)]
    rows.extend(FilterRow(label, TorrentFilter.label(label), labels[label]) for label in sorted(labels))
    return rows


def tracker_rows(trackers: Counter[str]) -> list[FilterRow]:
    return [FilterRow(tracker, TorrentFilter.tracker(tracker), trackers[tracker]) for tracker in sorted(trackers)]


def directory_rows(nodes: Iterable[DirectoryNode]) -> list[FilterRow]:
    return [
        FilterRow(
            node.name,
            TorrentFilter.directory(node.path),
            node.count,
            level=node.level,
            expandable=node.expandable,
            expanded=node.expanded,
        )
        for node in nodes
    ]
