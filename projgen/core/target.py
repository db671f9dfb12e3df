# SPDX-License-Identifier: MIT
"""Build target descriptors.

A Target is one emitted build unit: the single main executable or a
supporting library built from one module directory.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
import os
from pathlib import Path

from projgen.core.errors import ConfigurationError
from projgen.core.filters import FilterRules
from projgen.core.node import FileNode, canonical_join


class TargetKind(Enum):
    EXECUTABLE = "executable"
    LIBRARY = "library"

    @classmethod
    def parse(cls, value: str) -> TargetKind:
        """Parse a kind name case-insensitively ("executable", "library")."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(
                f"unknown target kind {value!r} (expected one of: {valid})"
            ) from None


@dataclass(frozen=True)
class Target:
    """A named build target and the module tree it is built from.

    Attributes:
        name: Target name; also the key in the identifier registry.
        kind: Executable or library.
        tree: File tree of the module directory.
        module_dir: Module directory, absolute or relative to the source root.
        filters: Include/exclude rules applied to the tree's files.
    """

    name: str
    kind: TargetKind
    tree: FileNode
    module_dir: Path = Path(".")
    filters: FilterRules = field(default_factory=FilterRules)

    @classmethod
    def create(
        cls,
        name: str,
        kind: TargetKind | str,
        tree: FileNode,
        *,
        module_dir: Path | str = ".",
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> Target:
        if isinstance(kind, str):
            kind = TargetKind.parse(kind)
        return cls(
            name=name,
            kind=kind,
            tree=tree,
            module_dir=Path(module_dir),
            filters=FilterRules.of(include, exclude),
        )

    @property
    def is_executable(self) -> bool:
        return self.kind is TargetKind.EXECUTABLE

    @property
    def include(self) -> tuple[str, ...]:
        return self.filters.include

    @property
    def exclude(self) -> tuple[str, ...]:
        return self.filters.exclude

    def module_path(self, source_dir: Path | str) -> str:
        """Module directory relative to ``source_dir``, canonical separators.

        Returns "" when the module is the source root itself.

        Raises:
            ConfigurationError: If the module lies outside ``source_dir``.
        """
        root = Path(os.path.normpath(os.path.abspath(source_dir)))
        module = self.module_dir
        if not module.is_absolute():
            module = root / module
        try:
            rel = Path(os.path.normpath(module)).relative_to(root)
        except ValueError:
            raise ConfigurationError(
                f"module {self.module_dir} of target {self.name!r} is outside "
                f"the source root {source_dir}"
            ) from None
        return canonical_join(rel.as_posix())
