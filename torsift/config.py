import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable

import yaml

from .dirtree import normalize_dir
from .logging import get_logger


LOG = get_logger(__name__)

CONFIG_DIR = Path(os.environ.get("TORSIFT_CONFIG_DIR", "~/.config/torsift")).expanduser()
CONFIG_FILE = CONFIG_DIR / "config.yaml"

SECTION_NAMES = ("Status", "Directories", "Labels", "Trackers")


@dataclass(frozen=True)
class SectionConfig:
    section: str
    visible: bool = True


DEFAULT_SECTIONS: tuple[SectionConfig, ...] = tuple(SectionConfig(name) for name in SECTION_NAMES)


@dataclass
class FilterConfig:
    sections: list[SectionConfig] = field(default_factory=lambda: list(DEFAULT_SECTIONS))
    expanded_dirs: list[str] = field(default_factory=list)


@dataclass
class UIConfig:
    snapshot_path: Path | None = Path(os.environ["TORSIFT_SNAPSHOT"]).expanduser() if os.environ.get("TORSIFT_SNAPSHOT") else None
    show_rates: bool = True


@dataclass
class AppConfig:
    filters: FilterConfig = field(default_factory=FilterConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def normalize_sections(entries: Iterable[Any]) -> list[SectionConfig]:
    """Keep known sections once each, in the given order; append any missing ones."""
    result: list[SectionConfig] = []
    seen: set[str] = set()
    for entry in entries or []:
        if isinstance(entry, SectionConfig):
            name, visible = entry.section, entry.visible
        elif isinstance(entry, dict):
            name, visible = entry.get("section"), entry.get("visible", True)
        else:
            name, visible = entry, True
        if name not in SECTION_NAMES or name in seen:
            LOG.warning("Ignoring filter section entry %r", entry)
            continue
        seen.add(name)
        result.append(SectionConfig(name, bool(visible)))
    for name in SECTION_NAMES:
        if name not in seen:
            result.append(SectionConfig(name))
    return result


def _normalize_expanded(paths: Iterable[Any]) -> list[str]:
    result: list[str] = []
    for raw in paths:
        path = normalize_dir(str(raw))
        if path and path not in result:
            result.append(path)
    return result


def ensure_config_dir() -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_config(save: bool = True) -> AppConfig:
    """Read config.yaml, filling defaults; write the normalized result back when ``save``."""
    if CONFIG_FILE.exists():
        data = yaml.safe_load(CONFIG_FILE.read_text()) or {}
    else:
        data = {}

    filters_data: Dict[str, Any] = data.get("filters", {})
    ui_data: Dict[str, Any] = data.get("ui", {})

    snapshot = ui_data.get("snapshot_path") or UIConfig().snapshot_path
    config = AppConfig(
        filters=FilterConfig(
            sections=normalize_sections(filters_data.get("sections", DEFAULT_SECTIONS)),
            expanded_dirs=_normalize_expanded(filters_data.get("expanded_dirs", []) or []),
        ),
        ui=UIConfig(
            snapshot_path=Path(snapshot).expanduser() if snapshot else None,
            show_rates=bool(ui_data.get("show_rates", UIConfig().show_rates)),
        ),
    )

    if save:
        save_config(config)
    return config


def save_config(config: AppConfig) -> None:
    ensure_config_dir()
    payload = {
        "filters": {
            "sections": [{"section": s.section, "visible": s.visible} for s in config.filters.sections],
            "expanded_dirs": list(config.filters.expanded_dirs),
        },
        "ui": {
            "snapshot_path": str(config.ui.snapshot_path) if config.ui.snapshot_path else "",
            "show_rates": config.ui.show_rates,
        },
    }
    CONFIG_FILE.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=False))
