import os

os.environ.setdefault("TORSIFT_LOG_TO_STDOUT", "1")
os.environ.pop("TORSIFT_SNAPSHOT", None)

import pytest

from torsift import config as config_module
from torsift.torrent import Status, TorrentRecord


def torrent(id: int, **fields) -> TorrentRecord:
    fields.setdefault("name", f"torrent-{id}")
    return TorrentRecord(id=id, **fields)


@pytest.fixture
def sample_torrents() -> list[TorrentRecord]:
    """Five torrents spread over statuses, labels, trackers and directories."""
    return [
        torrent(
            1,
            name="Ubuntu",
            status=Status.seeding,
            labels=("linux", "iso"),
            cached_main_tracker="torrent.ubuntu.com",
            download_dir="/data/linux",
            size_when_done=100,
            have_valid=100,
            rate_upload=50,
            piece_count=40,
        ),
        torrent(
            2,
            name="Movie A",
            status=Status.downloading,
            labels=("movies",),
            cached_main_tracker="trackerA",
            download_dir="/data/movies/action",
            size_when_done=200,
            have_valid=50,
            rate_download=100,
            piece_count=10,
        ),
        torrent(
            3,
            name="Magnet",
            status=Status.downloading,
            labels=(),
            cached_main_tracker="trackerB",
            download_dir="/data/movies",
            piece_count=0,
        ),
        torrent(
            4,
            name="Old",
            status=Status.stopped,
            labels=("movies",),
            cached_main_tracker="trackerA",
            download_dir="/archive",
            error=3,
            error_string="tracker gone",
        ),
        torrent(
            5,
            name="Verify",
            status=Status.verifying,
            labels=None,
            cached_main_tracker="trackerB",
            download_dir="/data/movies/action/",
            piece_count=7,
        ),
    ]


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_dir / "config.yaml")
    return config_dir / "config.yaml"
