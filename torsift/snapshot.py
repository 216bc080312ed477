from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from transmission_rpc import Torrent

from .logging import get_logger
from .torrent import TorrentRecord


LOG = get_logger(__name__)


class SnapshotError(Exception):
    pass


def parse_snapshot(data: Any) -> list[TorrentRecord]:
    """Accept a list of torrent field dicts or Torrent objects, or a torrent-get response body."""
    if isinstance(data, dict):
        if isinstance(data.get("arguments"), dict):
            data = data["arguments"]
        data = data.get("torrents")
    if data is None:
        return []
    if not isinstance(data, list):
        raise SnapshotError(f"Expected a list of torrents, got {type(data).__name__}")

    records: list[TorrentRecord] = []
    for idx, entry in enumerate(data):
        if isinstance(entry, Torrent):
            records.append(TorrentRecord.from_rpc(entry))
            continue
        if not isinstance(entry, dict):
            LOG.warning("Skipping snapshot entry %s: not a mapping", idx)
            continue
        records.append(TorrentRecord.from_fields(entry))
    return records


def load_snapshot(path: Path) -> list[TorrentRecord]:
    # yaml.safe_load also reads JSON dumps of torrent-get responses
    try:
        text = Path(path).expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SnapshotError(f"Malformed snapshot {path}: {exc}") from exc
    records = parse_snapshot(data)
    LOG.info("Loaded %s torrents from %s", len(records), path)
    return records
