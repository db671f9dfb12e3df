# SPDX-License-Identifier: MIT
"""Build configuration for projgen.

BuildConfiguration carries the global, read-only settings injected into
every provider call. ``load_config`` reads them, together with the
target list, from a TOML project description.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from projgen.core.errors import ConfigurationError
from projgen.core.node import canonical_join
from projgen.core.target import TargetKind

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "projgen.toml"


@dataclass(frozen=True)
class BuildConfiguration:
    """Global settings for one generation run.

    Attributes:
        project_name: Name of the executable (main) target.
        description: Display name of the project; defaults to project_name.
        source_dir: Root of the source tree.
        output_dir: Directory the project files are written to.
        defines: Global preprocessor defines, in emission order.
        warnings: Global warning flags, in emission order.
        target_warnings: Extra warning flags per target name.
        libraries: External libraries the executable links against.
        include_dirs: Extra include directories, relative to source_dir.
        libs_env_var: Environment variable pointing at prebuilt libraries.
    """

    project_name: str
    source_dir: Path
    output_dir: Path
    description: str = ""
    defines: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    target_warnings: dict[str, tuple[str, ...]] = field(default_factory=dict)
    libraries: tuple[str, ...] = ()
    include_dirs: tuple[str, ...] = ()
    libs_env_var: str | None = None

    @property
    def display_name(self) -> str:
        return self.description or self.project_name

    @property
    def file_prefix(self) -> str:
        """Source root as seen from the output directory, canonical separators."""
        try:
            rel = os.path.relpath(self.source_dir, self.output_dir)
        except ValueError:
            # Different drives on Windows
            rel = str(Path(self.source_dir).absolute())
        return canonical_join(rel) or "."

    def warnings_for(self, target_name: str) -> tuple[str, ...]:
        return self.target_warnings.get(target_name, ())


@dataclass(frozen=True)
class TargetSpec:
    """A target as described in the configuration file, before scanning.

    Attributes:
        name: Target name.
        kind: Executable or library.
        module: Module directory, relative to the source root.
        include: Include patterns.
        exclude: Exclude patterns.
    """

    name: str
    kind: TargetKind
    module: Path
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


def _string_list(table: dict[str, Any], key: str, where: str) -> tuple[str, ...]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"{where}.{key} must be a list of strings")
    return tuple(value)


def _required_string(table: dict[str, Any], key: str, where: str) -> str:
    value = table.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(
            f"{where}.{key} is required and must be a non-empty string"
        )
    return value


def parse_config(
    data: dict[str, Any],
    base_dir: Path | str = ".",
    *,
    output_dir: Path | str | None = None,
) -> tuple[BuildConfiguration, list[TargetSpec]]:
    """Build a configuration and target list from parsed TOML data.

    Args:
        data: Parsed TOML document.
        base_dir: Directory relative paths in the document are resolved against.
            The resulting paths are absolute.
        output_dir: Overrides ``project.output_dir`` when given.

    Returns:
        Tuple of (configuration, target specs in file order).

    Raises:
        ConfigurationError: If a field is missing or has the wrong type.
    """
    base = Path(base_dir).absolute()
    project = data.get("project")
    if not isinstance(project, dict):
        raise ConfigurationError("missing [project] table")

    name = _required_string(project, "name", "project")
    source_dir = base / project.get("source_dir", ".")
    if output_dir is not None:
        out = Path(output_dir).absolute()
    else:
        out = base / project.get("output_dir", "build")

    raw_warnings = project.get("target_warnings", {})
    if not isinstance(raw_warnings, dict):
        raise ConfigurationError("project.target_warnings must be a table")
    target_warnings = {
        target: _string_list(raw_warnings, target, "project.target_warnings")
        for target in raw_warnings
    }

    libs_env_var = project.get("libs_env_var")
    if libs_env_var is not None and not isinstance(libs_env_var, str):
        raise ConfigurationError("project.libs_env_var must be a string")

    config = BuildConfiguration(
        project_name=name,
        description=str(project.get("description", "")),
        source_dir=source_dir,
        output_dir=out,
        defines=_string_list(project, "defines", "project"),
        warnings=_string_list(project, "warnings", "project"),
        target_warnings=target_warnings,
        libraries=_string_list(project, "libraries", "project"),
        include_dirs=_string_list(project, "include_dirs", "project"),
        libs_env_var=libs_env_var or None,
    )

    raw_targets = data.get("targets", [])
    if not isinstance(raw_targets, list):
        raise ConfigurationError("targets must be an array of tables")

    specs: list[TargetSpec] = []
    for index, entry in enumerate(raw_targets):
        where = f"targets[{index}]"
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{where} must be a table")
        try:
            kind = TargetKind.parse(str(entry.get("kind", "library")))
        except ValueError as e:
            raise ConfigurationError(f"{where}.kind: {e}") from e
        specs.append(
            TargetSpec(
                name=_required_string(entry, "name", where),
                kind=kind,
                module=Path(entry.get("module", ".")),
                include=_string_list(entry, "include", where),
                exclude=_string_list(entry, "exclude", where),
            )
        )

    logger.debug("Loaded configuration for %s with %d targets", name, len(specs))
    return config, specs


def load_config(
    path: Path | str, *, output_dir: Path | str | None = None
) -> tuple[BuildConfiguration, list[TargetSpec]]:
    """Load a TOML project description.

    Relative paths in the file are resolved against the file's directory.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    config_path = Path(path)
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"invalid TOML in {config_path}: {e}") from e

    return parse_config(data, config_path.parent, output_dir=output_dir)
