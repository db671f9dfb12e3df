# SPDX-License-Identifier: MIT
"""Include/exclude filtering and file classification.

Filters apply to leaves only; directories are always traversed. A file
is excluded if it matches any exclude pattern, otherwise included if it
matches an include pattern or the include list is empty.

After path filtering, files are classified by extension so each
provider can render (or skip) resource and assembly files its own way.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatchcase

from projgen.core.node import CANONICAL_SEP, FileNode, canonical_join


class Classification(Enum):
    INCLUDED = "included"
    EXCLUDED = "excluded"


class FileKind(Enum):
    """Category of a file, decided by its extension."""

    SOURCE = "source"
    RESOURCE = "resource"
    ASSEMBLY = "assembly"
    OTHER = "other"


SOURCE_EXTENSIONS = frozenset({"c", "cc", "cpp", "cxx", "c++", "m", "mm"})
RESOURCE_EXTENSIONS = frozenset({"rc"})
ASSEMBLY_EXTENSIONS = frozenset({"asm", "nasm"})

_GLOB_CHARS = frozenset("*?[")


def split_filename(name: str) -> tuple[str, str]:
    """Split a file name into (stem, extension) at the last dot.

    The extension is returned without the dot. Names without a dot (or
    starting with their only dot) have an empty extension.
    """
    pos = name.rfind(".")
    if pos <= 0:
        return name, ""
    return name[:pos], name[pos + 1 :]


def file_kind(name: str) -> FileKind:
    _, ext = split_filename(name)
    ext = ext.lower()
    if ext in RESOURCE_EXTENSIONS:
        return FileKind.RESOURCE
    if ext in ASSEMBLY_EXTENSIONS:
        return FileKind.ASSEMBLY
    if ext in SOURCE_EXTENSIONS:
        return FileKind.SOURCE
    return FileKind.OTHER


def _matches(path: str, pattern: str) -> bool:
    """Check a module-relative canonical path against one pattern.

    Glob patterns (``*``, ``?``, ``[``) are matched against the whole path,
    and against the file name when the pattern has no separator. Plain
    fragments match the whole path, the file name, or a leading directory.
    """
    pattern = canonical_join(pattern)
    if not pattern:
        return False
    basename = path.rsplit(CANONICAL_SEP, 1)[-1]
    if _GLOB_CHARS.intersection(pattern):
        if fnmatchcase(path, pattern):
            return True
        return CANONICAL_SEP not in pattern and fnmatchcase(basename, pattern)
    if path == pattern or path.startswith(pattern + CANONICAL_SEP):
        return True
    return CANONICAL_SEP not in pattern and basename == pattern


@dataclass(frozen=True)
class FilterRules:
    """Ordered include and exclude pattern lists for one target.

    Attributes:
        include: Patterns a file must match (any), unless empty.
        exclude: Patterns that remove a file; they win over include.
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @classmethod
    def of(
        cls, include: Iterable[str] = (), exclude: Iterable[str] = ()
    ) -> FilterRules:
        return cls(tuple(include), tuple(exclude))

    def classify(self, path: str) -> Classification:
        """Classify a leaf by its module-relative path."""
        path = canonical_join(path)
        if any(_matches(path, p) for p in self.exclude):
            return Classification.EXCLUDED
        if not self.include or any(_matches(path, p) for p in self.include):
            return Classification.INCLUDED
        return Classification.EXCLUDED

    def accepts(self, path: str) -> bool:
        return self.classify(path) is Classification.INCLUDED


def filter_tree(
    node: FileNode, rules: FilterRules, prefix: str = ""
) -> FileNode | None:
    """Return a copy of ``node`` without excluded files.

    Directories left without files are pruned. Returns None when nothing
    under ``node`` survives.
    """
    kept: list[FileNode] = []
    for child in node.children:
        path = canonical_join(prefix, child.name)
        if child.is_leaf:
            if rules.accepts(path):
                kept.append(child)
        else:
            sub = filter_tree(child, rules, path)
            if sub is not None:
                kept.append(sub)
    if not kept:
        return None
    return FileNode.directory(node.name, kept)


def iter_files(
    node: FileNode | None, rules: FilterRules | None = None
) -> Iterator[tuple[str, FileKind]]:
    """Yield (module-relative path, kind) for each included file, in tree order."""
    if node is None:
        return
    for path, leaf in node.walk():
        if rules is None or rules.accepts(path):
            yield path, file_kind(leaf.name)
