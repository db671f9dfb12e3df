# SPDX-License-Identifier: MIT
"""File tree nodes.

A FileNode tree is the read-only, hierarchical view of one module's
source directory. Directories are nodes with children; files are leaves.
Providers walk it to emit per-target file lists.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Separator used in every emitted path, whatever the host platform uses.
CANONICAL_SEP = "/"


def canonical_join(*parts: str) -> str:
    """Join path fragments with the canonical separator.

    Backslashes are treated as separators, empty and "." fragments are
    dropped, and a leading "/" on the first non-empty fragment is kept.

    Examples:
        >>> canonical_join("..", "engines\\\\scumm", "script.cpp")
        '../engines/scumm/script.cpp'
        >>> canonical_join("", ".", "a.cpp")
        'a.cpp'
    """
    pieces: list[str] = []
    absolute = False
    for part in parts:
        if not part:
            continue
        normalized = part.replace("\\", CANONICAL_SEP)
        if not pieces and not absolute and normalized.startswith(CANONICAL_SEP):
            absolute = True
        pieces.extend(p for p in normalized.split(CANONICAL_SEP) if p and p != ".")
    joined = CANONICAL_SEP.join(pieces)
    return CANONICAL_SEP + joined if absolute else joined


@dataclass(frozen=True)
class FileNode:
    """A file or directory in a module tree.

    A node without children is a file. A node with children is a
    directory and never represents a file itself.

    Attributes:
        name: Entry name (no separators expected, but tolerated).
        children: Ordered child nodes; empty for files.
    """

    name: str
    children: tuple[FileNode, ...] = ()

    @classmethod
    def directory(cls, name: str, children: Iterable[FileNode]) -> FileNode:
        return cls(name, tuple(children))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self, prefix: str = "") -> Iterator[tuple[str, FileNode]]:
        """Yield (canonical relative path, leaf) for every file below this node.

        The node's own name is not part of the path; it is the module root.
        """
        for child in self.children:
            path = canonical_join(prefix, child.name)
            if child.is_leaf:
                yield path, child
            else:
                yield from child.walk(path)

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


def scan_directory(path: Path | str, *, include_hidden: bool = False) -> FileNode:
    """Build a FileNode tree from a directory on disk.

    Children are sorted by name so the tree (and everything generated from
    it) is the same on every platform. Empty directories are skipped since
    a node without children would read as a file. Symlinked directories
    are followed unless they lead back to a directory already being
    scanned.

    Args:
        path: Directory to scan.
        include_hidden: Keep entries whose name starts with ".".

    Returns:
        The tree rooted at ``path``.
    """
    root = Path(path)
    ancestors = frozenset({os.path.realpath(root)})
    return FileNode.directory(
        root.name, _scan_children(root, include_hidden, ancestors)
    )


def _scan_children(
    directory: Path, include_hidden: bool, ancestors: frozenset[str]
) -> list[FileNode]:
    children: list[FileNode] = []
    with os.scandir(directory) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            if not include_hidden and entry.name.startswith("."):
                continue
            if entry.is_dir():
                real = os.path.realpath(entry.path)
                if real in ancestors:
                    logger.debug("Skipping directory loop %s -> %s", entry.path, real)
                    continue
                sub = _scan_children(
                    Path(entry.path), include_hidden, ancestors | {real}
                )
                if not sub:
                    logger.debug("Skipping empty directory %s", entry.path)
                    continue
                children.append(FileNode.directory(entry.name, sub))
            else:
                children.append(FileNode(entry.name))
    return children
