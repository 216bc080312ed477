"""Tests for per-group filter rows and counts."""

from torsift.counts import (
    directory_rows,
    label_rows,
    status_rows,
    tally_labels_and_trackers,
    tracker_rows,
)
from torsift.dirtree import build_tree, flatten_tree
from torsift.filters import NO_LABELS_NAME
from torsift.torrent import Status, TorrentRecord


class TestStatusRows:
    def test_counts_are_independent(self, sample_torrents) -> None:
        counts = {row.name: row.count for row in status_rows(sample_torrents)}

        assert counts == {
            "All Torrents": 5,
            "Downloading": 2,
            "Completed": 1,
            "Active": 2,
            "Inactive": 2,
            "Stopped": 1,
            "Error": 1,
            "Waiting": 1,
            "Magnetizing": 1,
        }

    def test_ids(self, sample_torrents) -> None:
        assert status_rows(sample_torrents)[0].id == "status-All Torrents"

    def test_magnet_counts_twice(self) -> None:
        t = TorrentRecord(id=1, name="x", status=Status.downloading, piece_count=0)

        counts = {row.name: row.count for row in status_rows([t])}

        assert counts["Downloading"] == 1
        assert counts["Magnetizing"] == 1

    def test_empty_collection(self) -> None:
        assert all(row.count == 0 for row in status_rows([]))


class TestLabelAndTrackerRows:
    def test_label_rows_sorted_with_no_labels_first(self, sample_torrents) -> None:
        labels, _, no_labels = tally_labels_and_trackers(sample_torrents)

        rows = label_rows(labels, no_labels)

        assert [(r.name, r.count) for r in rows] == [
            (NO_LABELS_NAME, 1),
            ("iso", 1),
            ("linux", 1),
            ("movies", 2),
        ]
        assert rows[0].id == "nolabels"
        assert rows[3].id == "label-movies"

    def test_unlabelled_torrent_not_in_any_label(self) -> None:
        t = TorrentRecord(id=1, name="x", labels=())

        labels, _, no_labels = tally_labels_and_trackers([t])

        assert no_labels == 1
        assert not labels

    def test_missing_labels_counted_nowhere(self) -> None:
        t = TorrentRecord(id=1, name="x", labels=None)

        labels, _, no_labels = tally_labels_and_trackers([t])

        assert no_labels == 0
        assert not labels

    def test_repeated_label_counts_torrent_once(self) -> None:
        t = TorrentRecord(id=1, name="x", labels=("a", "a"))

        labels, _, _ = tally_labels_and_trackers([t])

        assert labels["a"] == 1

    def test_tracker_rows_sorted(self, sample_torrents) -> None:
        _, trackers, _ = tally_labels_and_trackers(sample_torrents)

        rows = tracker_rows(trackers)

        assert [(r.name, r.count) for r in rows] == [
            ("torrent.ubuntu.com", 1),
            ("trackerA", 2),
            ("trackerB", 2),
        ]
        assert rows[1].id == "tracker-trackerA"


class TestDirectoryRows:
    def test_rows_carry_tree_fields(self, sample_torrents) -> None:
        tree = build_tree(sorted(t.download_dir for t in sample_torrents), ["/data/"])

        rows = directory_rows(flatten_tree(tree))

        assert [(r.name, r.count, r.level, r.expandable, r.expanded) for r in rows] == [
            ("archive", 1, 0, False, False),
            ("data", 4, 0, True, True),
            ("linux", 1, 1, False, False),
            ("movies", 3, 1, True, False),
        ]
        assert rows[3].id == "dir-/data/movies/"

    def test_count_agrees_with_predicate(self, sample_torrents) -> None:
        tree = build_tree(sorted(t.download_dir for t in sample_torrents), ["/data/", "/data/movies/"])

        for row in directory_rows(flatten_tree(tree)):
            assert row.count == sum(1 for t in sample_torrents if row.filter(t))
