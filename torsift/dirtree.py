from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .logging import get_logger


LOG = get_logger(__name__)


@dataclass
class DirectoryNode:
    name: str
    path: str
    children: dict[str, "DirectoryNode"] = field(default_factory=dict)
    expanded: bool = False
    count: int = 0
    level: int = -1

    @property
    def expandable(self) -> bool:
        return bool(self.children)


def path_segments(path: str) -> list[str]:
    """Non-empty segments of an absolute path, or [] for anything else."""
    if not path or not path.startswith("/"):
        return []
    return [part for part in path.split("/") if part]


def normalize_dir(path: str) -> str:
    """Absolute directory path with single separators and a trailing slash.

    Paths the tree cannot place (empty or relative) collapse to "".
    """
    parts = path_segments(path)
    if not parts:
        return ""
    return "/" + "/".join(parts) + "/"


def build_tree(paths: Iterable[str], expanded: Iterable[str] = ()) -> DirectoryNode:
    """Merge download directories into a tree of cumulative counts.

    Every directory on the way to a path gets its count bumped once for that
    path, so a node's count covers the node and everything below it.
    """
    expanded_set = set(expanded)
    root = DirectoryNode(name="", path="", expanded=True)
    total = 0
    for path in paths:
        total += 1
        node = root
        current = "/"
        for part in path_segments(path):
            current = current + part + "/"
            child = node.children.get(part)
            if child is None:
                child = DirectoryNode(
                    name=part,
                    path=current,
                    expanded=current in expanded_set,
                    level=node.level + 1,
                )
                node.children[part] = child
            node = child
            node.count += 1
    LOG.debug("Built directory tree: %s paths, %s top-level dirs", total, len(root.children))
    return root


def flatten_tree(root: DirectoryNode) -> list[DirectoryNode]:
    """Pre-order list of the visible nodes below ``root``.

    Children of a collapsed node are skipped along with their whole subtree.
    """
    result: list[DirectoryNode] = []

    def append(node: DirectoryNode) -> None:
        for child in node.children.values():
            result.append(child)
            if child.expanded:
                append(child)

    append(root)
    return result


def update_expanded(expanded: Iterable[str], verb: str, path: str) -> tuple[str, ...]:
    current = tuple(expanded)
    if verb == "add":
        if path in current:
            return current
        return current + (path,)
    if verb == "remove":
        return tuple(p for p in current if p != path)
    raise ValueError(f"Unknown expansion verb: {verb!r}")
