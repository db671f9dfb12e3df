# SPDX-License-Identifier: MIT
"""Code::Blocks project provider.

Each target gets its own ``<target>.cbp`` project file. The
``<project>.workspace`` file ties them together; its project list,
including the executable's ``<Depends>`` entries, is written once when
the workspace is closed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import IO, TYPE_CHECKING
from xml.sax.saxutils import quoteattr

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

XML_HEADER = '<?xml version="1.0" encoding="UTF-8" standalone="yes" ?>\n'

# Code::Blocks build target types
TYPE_CONSOLE_APPLICATION = 1
TYPE_STATIC_LIBRARY = 2


class CodeBlocksProvider(BaseProvider):
    """Provider that produces Code::Blocks project and workspace files.

    Warnings and defines are written into the ``<Compiler>`` block of every
    project file, since a workspace has no compiler settings of its own.
    Per-target warnings are appended after the global ones.

    Example:
        provider = CodeBlocksProvider()
        # ... open, add targets, close ...
        # Creates <output_dir>/<project>.workspace and one .cbp per target
    """

    def __init__(self) -> None:
        super().__init__("codeblocks")
        self._libs_var: str | None = None

    def file_extension(self) -> str:
        return ".cbp"

    def artifact_path(self, config: BuildConfiguration) -> Path:
        return config.output_dir / f"{config.project_name}.workspace"

    def _write_header(self, workspace: Workspace, config: BuildConfiguration) -> None:
        out = workspace.output()
        out.write(XML_HEADER)
        self._libs_var = config.libs_env_var
        out.write("<CodeBlocks_workspace_file>\n")
        out.write(f"\t<Workspace title={quoteattr(config.display_name)}>\n")

    def _write_target(
        self,
        workspace: Workspace,
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> None:
        project_path = config.output_dir / f"{target.name}{self.file_extension()}"
        with self._open_artifact(project_path) as out:
            self._write_project(out, target, registry, config)
        workspace.written.append(project_path)
        workspace.data["registry"] = registry
        if target.is_executable:
            workspace.data["executable"] = target.name
        logger.info("Wrote %s", project_path)

    def _write_project(
        self,
        out: IO[str],
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> None:
        name = quoteattr(target.name)
        kind = TYPE_CONSOLE_APPLICATION if target.is_executable else TYPE_STATIC_LIBRARY

        out.write(XML_HEADER)
        out.write("<CodeBlocks_project_file>\n")
        out.write('\t<FileVersion major="1" minor="6" />\n')
        out.write("\t<Project>\n")
        out.write(f"\t\t<Option title={name} />\n")
        out.write('\t\t<Option pch_mode="2" />\n')
        out.write('\t\t<Option compiler="gcc" />\n')
        out.write("\t\t<Build>\n")
        out.write('\t\t\t<Target title="default">\n')
        out.write(
            f'\t\t\t\t<Option output={name} prefix_auto="1" extension_auto="1" />\n'
        )
        out.write(f"\t\t\t\t<Option object_output={name} />\n")
        out.write(f'\t\t\t\t<Option type="{kind}" />\n')
        out.write('\t\t\t\t<Option compiler="gcc" />\n')

        out.write("\t\t\t\t<Compiler>\n")
        self.write_warnings(
            [*config.warnings, *config.warnings_for(target.name)], out
        )
        self.write_defines(config.defines, out)
        out.write("\t\t\t\t</Compiler>\n")

        if target.is_executable:
            out.write("\t\t\t\t<Linker>\n")
            for library in config.libraries:
                lib = quoteattr(normalize_library_name(library))
                out.write(f"\t\t\t\t\t<Add library={lib} />\n")
            for dep, _ in registry.dependencies_of(target.name):
                out.write(f"\t\t\t\t\t<Add library={quoteattr(dep)} />\n")
            out.write("\t\t\t\t</Linker>\n")

        out.write("\t\t\t</Target>\n")
        out.write("\t\t</Build>\n")
        self.write_files(out, target, self.source_prefix(config, target))
        out.write("\t</Project>\n")
        out.write("</CodeBlocks_project_file>\n")

    def write_warnings(self, warnings: Iterable[str], sink: IO[str]) -> None:
        for flag in warnings:
            sink.write(f"\t\t\t\t\t<Add option={quoteattr(flag)} />\n")

    def write_defines(self, defines: Iterable[str], sink: IO[str]) -> None:
        for define in defines:
            sink.write(f"\t\t\t\t\t<Add option={quoteattr('-D' + define)} />\n")

    def _write_footer(self, workspace: Workspace) -> None:
        out = workspace.output()
        ext = self.file_extension()
        main = workspace.data.get("executable")
        registry: IdentifierRegistry | None = workspace.data.get("registry")
        if registry is not None:
            names = [n for n, _ in registry.lookup_all() if n in workspace.targets]
        else:
            names = list(workspace.targets)

        # Executable first and active, depending on every other project
        if main is not None:
            out.write(f'\t\t<Project filename={quoteattr(main + ext)} active="1">\n')
            for name in names:
                if name != main:
                    out.write(f"\t\t\t<Depends filename={quoteattr(name + ext)} />\n")
            out.write("\t\t</Project>\n")
        for name in names:
            if name != main:
                out.write(f"\t\t<Project filename={quoteattr(name + ext)} />\n")

        out.write("\t</Workspace>\n")
        out.write("</CodeBlocks_workspace_file>\n")

    def _file_handlers(self) -> dict[FileKind, FileHandler | None]:
        return {
            FileKind.SOURCE: self._write_unit,
            FileKind.OTHER: self._write_unit,
            FileKind.RESOURCE: self._write_resource_unit,
            FileKind.ASSEMBLY: self._write_assembly_unit,
        }

    def _write_unit(self, out: IO[str], path: str, target_name: str) -> None:
        out.write(f"\t\t<Unit filename={quoteattr(path)} />\n")

    def _write_resource_unit(self, out: IO[str], path: str, target_name: str) -> None:
        out.write(f"\t\t<Unit filename={quoteattr(path)}>\n")
        out.write('\t\t\t<Option compilerVar="WINDRES" />\n')
        out.write("\t\t</Unit>\n")

    def _write_assembly_unit(self, out: IO[str], path: str, target_name: str) -> None:
        nasm = f"$({self._libs_var})bin/nasm" if self._libs_var else "nasm"
        command = quoteattr(f"{nasm} -f win32 -g $file -o $object")
        out.write(f"\t\t<Unit filename={quoteattr(path)}>\n")
        out.write(f'\t\t\t<Option compiler="gcc" use="1" buildCommand={command} />\n')
        out.write("\t\t</Unit>\n")
