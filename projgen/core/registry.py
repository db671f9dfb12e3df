# SPDX-License-Identifier: MIT
"""Run-scoped registry of target identifiers.

The registry maps every target name to a stable identifier. It is owned
by the driving loop and passed to each provider call, so later targets
can refer to earlier ones (and the executable to all of them).
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator

# Fixed namespace so identifiers only depend on the names they are built from.
PROJGEN_NAMESPACE = uuid.UUID("6f1c2d58-6a43-4e0b-9d51-2f0e8c7b3a91")


class IdentifierRegistry:
    """Insertion-ordered, append-only mapping of target name to identifier.

    Identifiers look like Visual Studio project GUIDs
    (``{8C1E...}``) and are derived from the target name, so two runs
    over the same targets produce the same identifiers.

    Example:
        registry = IdentifierRegistry()
        registry.register("main")
        registry.register("enginelib")
        registry.dependencies_of("main")  # [("enginelib", "{...}")]
    """

    def __init__(self) -> None:
        self._ids: dict[str, str] = {}

    def register(self, name: str) -> str:
        """Return the identifier for ``name``, allocating it on first use."""
        existing = self._ids.get(name)
        if existing is not None:
            return existing
        identifier = "{" + str(uuid.uuid5(PROJGEN_NAMESPACE, name)).upper() + "}"
        self._ids[name] = identifier
        return identifier

    def lookup(self, name: str) -> str | None:
        return self._ids.get(name)

    def lookup_all(self) -> list[tuple[str, str]]:
        """All (name, identifier) pairs in registration order."""
        return list(self._ids.items())

    def dependencies_of(self, name: str) -> list[tuple[str, str]]:
        """Every registered target except ``name``, in registration order.

        This is the link policy used for the executable: it depends on all
        other targets, not on a computed dependency graph.
        """
        return [(other, ident) for other, ident in self._ids.items() if other != name]

    def derive_id(self, *parts: str) -> str:
        """Derive a 24-digit hex object id (Xcode style) from name parts."""
        return uuid.uuid5(PROJGEN_NAMESPACE, "/".join(parts)).hex[:24].upper()

    def __contains__(self, name: object) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __repr__(self) -> str:
        return f"IdentifierRegistry({list(self._ids)!r})"
