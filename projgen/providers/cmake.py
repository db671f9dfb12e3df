# SPDX-License-Identifier: MIT
"""CMake project provider.

Writes a single ``CMakeLists.txt`` into the output directory:

    cmake_minimum_required(VERSION 3.2)
    project(Demo)
    ...
    add_definitions(
    	-Wall
    )
    add_definitions(
    	-DUSE_ZLIB
    )
    add_library(enginelib
    	../engines/engine/engine.cpp
    )
    add_executable(demo
    	../main.cpp
    )
    target_link_libraries(demo
    	${ZLIB_LIBRARIES}
    	enginelib
    )

Files are listed flat, one per line, quoted when they contain whitespace.
Resource (.rc) and assembly (.asm) files are not part of a CMake target
and are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import IO, TYPE_CHECKING, NamedTuple

from projgen.core.filters import FileKind
from projgen.providers.provider import (
    BaseProvider,
    FileHandler,
    Workspace,
    normalize_library_name,
)

if TYPE_CHECKING:
    from projgen.config import BuildConfiguration
    from projgen.core.registry import IdentifierRegistry
    from projgen.core.target import Target

logger = logging.getLogger(__name__)

CMAKE_MINIMUM_VERSION = "3.2"


class CMakePackage(NamedTuple):
    """A library located through one of CMake's Find modules."""

    module: str
    include_var: str
    library_var: str


# Keyed by normalized, lower-cased library name
CMAKE_PACKAGES: dict[str, CMakePackage] = {
    "sdl": CMakePackage("SDL", "${SDL_INCLUDE_DIR}", "${SDL_LIBRARY}"),
    "sdl2": CMakePackage("SDL2", "${SDL2_INCLUDE_DIRS}", "${SDL2_LIBRARIES}"),
    "freetype": CMakePackage(
        "Freetype", "${FREETYPE_INCLUDE_DIRS}", "${FREETYPE_LIBRARIES}"
    ),
    "libz": CMakePackage("ZLIB", "${ZLIB_INCLUDE_DIRS}", "${ZLIB_LIBRARIES}"),
}


def find_package(library: str) -> CMakePackage | None:
    return CMAKE_PACKAGES.get(normalize_library_name(library).lower())


class CMakeProvider(BaseProvider):
    """Provider that produces a CMakeLists.txt.

    Per-target warnings cannot be expressed: warnings go through the
    directory-scoped ``add_definitions``. Requests for them are reported
    in ``warnings``.

    Example:
        provider = CMakeProvider()
        workspace = provider.open_workspace(config)
        with workspace:
            provider.add_target(workspace, target, registry, config)
            provider.close_workspace(workspace)
        # Creates <output_dir>/CMakeLists.txt
    """

    supports_target_warnings = False

    def __init__(self) -> None:
        super().__init__("cmake")

    def file_extension(self) -> str:
        return ".txt"

    def artifact_path(self, config: BuildConfiguration) -> Path:
        return config.output_dir / f"CMakeLists{self.file_extension()}"

    def _write_header(self, workspace: Workspace, config: BuildConfiguration) -> None:
        out = workspace.output()
        desc = config.display_name
        packages = self._packages(config.libraries)

        out.write(f"cmake_minimum_required(VERSION {CMAKE_MINIMUM_VERSION})\n")
        out.write(f"project({desc})\n\n")
        for package in packages:
            out.write(f"Include(Find{package.module})\n")
        for package in packages:
            out.write(f"Find_Package({package.module} REQUIRED)\n")

        include_dirs = [f"${{{desc}_SOURCE_DIR}}"]
        include_dirs.extend(
            f"${{{desc}_SOURCE_DIR}}/{inc}" for inc in config.include_dirs
        )
        out.write(f"include_directories({' '.join(include_dirs)}\n")
        if config.libs_env_var:
            out.write(f"$ENV{{{config.libs_env_var}}}/include\n")
        for package in packages:
            out.write(f"{package.include_var}\n")
        out.write(")\n\n")

        self.write_warnings(config.warnings, out)
        self.write_defines(config.defines, out)

    def write_warnings(self, warnings: Iterable[str], sink: IO[str]) -> None:
        sink.write("add_definitions(\n")
        for flag in warnings:
            sink.write(f"\t{flag}\n")
        sink.write(")\n")

    def write_defines(self, defines: Iterable[str], sink: IO[str]) -> None:
        sink.write("add_definitions(\n")
        for define in defines:
            sink.write(f"\t-D{define}\n")
        sink.write(")\n")

    def _write_target(
        self,
        workspace: Workspace,
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> None:
        out = workspace.output()

        command = "add_executable" if target.is_executable else "add_library"
        out.write(f"{command}({target.name}\n")
        count = self.write_files(out, target, self.source_prefix(config, target))
        out.write(")\n")
        logger.debug("cmake: %s lists %d files", target.name, count)

        if target.is_executable:
            self._write_link_libraries(out, target, registry, config)

    def _write_link_libraries(
        self,
        out: IO[str],
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> None:
        out.write(f"target_link_libraries({target.name}\n")
        for library in config.libraries:
            package = find_package(library)
            if package is not None:
                out.write(f"\t{package.library_var}\n")
            else:
                out.write(f"\t{normalize_library_name(library)}\n")
        for name, _ in registry.dependencies_of(target.name):
            out.write(f"\t{name}\n")
        out.write(")\n")

    def _file_handlers(self) -> dict[FileKind, FileHandler | None]:
        return {
            FileKind.SOURCE: self._write_file,
            FileKind.OTHER: self._write_file,
            FileKind.RESOURCE: None,
            FileKind.ASSEMBLY: None,
        }

    def _write_file(self, out: IO[str], path: str, target_name: str) -> None:
        if any(c.isspace() for c in path):
            path = f'"{path}"'
        out.write(f"\t{path}\n")

    @staticmethod
    def _packages(libraries: Iterable[str]) -> list[CMakePackage]:
        packages: list[CMakePackage] = []
        for library in libraries:
            package = find_package(library)
            if package is not None and package not in packages:
                packages.append(package)
        return packages
