# SPDX-License-Identifier: MIT
"""The generation driver.

``generate_project`` validates the configuration and targets, registers
every target in the identifier registry, then drives one provider
through its lifecycle:

    open_workspace -> add_target (once per target, in order) -> close_workspace

Generation is deterministic: the same inputs give byte-identical files.
Any artifact I/O failure aborts the run; there are no retries.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from projgen.core.errors import ConfigurationError, UnsupportedFeature
from projgen.core.registry import IdentifierRegistry

if TYPE_CHECKING:
    from projgen.config import BuildConfiguration
    from projgen.core.target import Target
    from projgen.providers.provider import Provider

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one generation run.

    Attributes:
        provider: Name of the provider used.
        files: Paths written, primary artifact first.
        identifiers: (target name, identifier) pairs in registry order.
        warnings: Unsupported features that were requested.
    """

    provider: str
    files: list[Path] = field(default_factory=list)
    identifiers: list[tuple[str, str]] = field(default_factory=list)
    warnings: list[UnsupportedFeature] = field(default_factory=list)


def validate(config: BuildConfiguration, targets: Sequence[Target]) -> None:
    """Check a configuration and its targets before anything is written.

    Raises:
        ConfigurationError: On the first problem found.
    """
    if not config.project_name.strip():
        raise ConfigurationError("project name must not be empty")

    seen: set[str] = set()
    for target in targets:
        if not target.name.strip():
            raise ConfigurationError("target name must not be empty")
        if target.name in seen:
            raise ConfigurationError(f"duplicate target name {target.name!r}")
        seen.add(target.name)

    executables = [t.name for t in targets if t.is_executable]
    if len(executables) != 1:
        raise ConfigurationError(
            f"expected exactly one executable target, found {len(executables)}"
            + (f" ({', '.join(executables)})" if executables else "")
        )
    if executables[0] != config.project_name:
        raise ConfigurationError(
            f"executable target {executables[0]!r} must be named after the "
            f"project ({config.project_name!r})"
        )

    for target in targets:
        target.module_path(config.source_dir)


def generate_project(
    provider: Provider,
    config: BuildConfiguration,
    targets: Sequence[Target],
    registry: IdentifierRegistry | None = None,
) -> GenerationResult:
    """Generate one backend's project files.

    Args:
        provider: Backend to drive.
        config: Global configuration.
        targets: Targets in emission order.
        registry: Registry to extend; a new one is created when omitted.

    Returns:
        The files written, the registry contents and collected warnings.

    Raises:
        ConfigurationError: If validation fails (nothing is written).
        ArtifactIOError: If an artifact cannot be written.
    """
    validate(config, targets)

    if registry is None:
        registry = IdentifierRegistry()
    for target in targets:
        registry.register(target.name)

    logger.info(
        "Generating %s project for %s (%d targets)",
        provider.name,
        config.project_name,
        len(targets),
    )
    warnings_before = len(provider.warnings)
    workspace = provider.open_workspace(config)
    with workspace:
        for target in targets:
            provider.add_target(workspace, target, registry, config)
        provider.close_workspace(workspace)

    result = GenerationResult(
        provider=provider.name,
        files=list(workspace.written),
        identifiers=registry.lookup_all(),
        warnings=provider.warnings[warnings_before:],
    )
    for path in result.files:
        logger.debug("  wrote %s", path)
    return result
