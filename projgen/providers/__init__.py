# SPDX-License-Identifier: MIT
"""Project file providers for projgen."""

from __future__ import annotations

from collections.abc import Callable

from projgen.core.errors import ConfigurationError
from projgen.providers.cmake import CMakeProvider
from projgen.providers.codeblocks import CodeBlocksProvider
from projgen.providers.provider import (
    BaseProvider,
    Provider,
    Workspace,
    WorkspaceState,
    normalize_library_name,
)
from projgen.providers.xcode import XcodeProvider

# Provider factories by command-line name
PROVIDERS: dict[str, Callable[[], BaseProvider]] = {
    "cmake": CMakeProvider,
    "codeblocks": CodeBlocksProvider,
    "xcode": XcodeProvider,
}


def get_provider(name: str) -> Provider:
    """Create a provider by name.

    Raises:
        ConfigurationError: If no provider has that name.
    """
    try:
        factory = PROVIDERS[name.lower()]
    except KeyError:
        available = ", ".join(sorted(PROVIDERS))
        raise ConfigurationError(
            f"unknown provider {name!r} (available: {available})"
        ) from None
    return factory()


__all__ = [
    "BaseProvider",
    "CMakeProvider",
    "CodeBlocksProvider",
    "PROVIDERS",
    "Provider",
    "Workspace",
    "WorkspaceState",
    "XcodeProvider",
    "get_provider",
    "normalize_library_name",
]
