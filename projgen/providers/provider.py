# SPDX-License-Identifier: MIT
"""Provider protocol for project file generation.

A Provider turns targets into one backend's project files (CMake,
Code::Blocks, Xcode, ...). Every provider follows the same lifecycle so
the driving loop never needs to know which backend it holds:

    workspace = provider.open_workspace(config)
    with workspace:
        for target in targets:
            provider.add_target(workspace, target, registry, config)
        provider.close_workspace(workspace)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Protocol, runtime_checkable

from projgen.core.errors import (
    ArtifactIOError,
    GenerateError,
    UnsupportedFeature,
)
from projgen.core.filters import FileKind, iter_files
from projgen.core.node import canonical_join

if TYPE_CHECKING:
    from projgen.config import BuildConfiguration
    from projgen.core.registry import IdentifierRegistry
    from projgen.core.target import Target

logger = logging.getLogger(__name__)


def normalize_library_name(name: str) -> str:
    """Map a configured library name to the name the linker expects.

    The MSVC and mingw prebuilt libraries use different names, so the
    "_static"/"-static" suffix is removed and "zlib" becomes "libz".
    Only applied when emitting; the configuration is never changed.
    """
    for marker in ("_static", "-static"):
        pos = name.find(marker)
        if pos != -1:
            return name[:pos] + name[pos + len(marker) :]
    if name == "zlib":
        return "libz"
    return name


class WorkspaceState(Enum):
    UNINITIALIZED = "uninitialized"
    OPEN = "open"
    CLOSED = "closed"


class Workspace:
    """Handle on an open set of project artifacts.

    Returned by ``Provider.open_workspace`` and passed back to every other
    provider call. Used as a context manager it guarantees the primary
    stream is released even if a target fails to emit.

    Attributes:
        path: Path of the primary artifact.
        config: Configuration the workspace was opened with.
        stream: Open text stream on the primary artifact, if the backend
            writes directly; None for backends that save at close.
        state: Lifecycle state.
        targets: Names of targets added so far, in order.
        data: Backend-private accumulated state.
    """

    def __init__(
        self,
        path: Path,
        config: BuildConfiguration,
        stream: IO[str] | None = None,
    ) -> None:
        self.path = path
        self.config = config
        self.stream = stream
        self.state = WorkspaceState.UNINITIALIZED
        self.targets: list[str] = []
        self.data: dict[str, Any] = {}
        self.written: list[Path] = [path]

    @property
    def is_open(self) -> bool:
        return self.state is WorkspaceState.OPEN

    def output(self) -> IO[str]:
        """The open primary stream.

        Raises:
            GenerateError: If the workspace has no open stream.
        """
        if self.stream is None or self.stream.closed:
            raise GenerateError(f"workspace {self.path} has no open output stream")
        return self.stream

    def release(self) -> None:
        """Close the primary stream if it is still open."""
        if self.stream is not None and not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> Workspace:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Workspace({str(self.path)!r}, {self.state.value})"


@runtime_checkable
class Provider(Protocol):
    """Protocol for project file providers.

    Implementations must write identical output for identical input.
    """

    @property
    def name(self) -> str:
        """Provider name (e.g., 'cmake', 'codeblocks', 'xcode')."""
        ...

    @property
    def warnings(self) -> list[UnsupportedFeature]:
        """Unsupported features requested so far."""
        ...

    def file_extension(self) -> str:
        """Canonical suffix of the backend's project artifact."""
        ...

    def open_workspace(self, config: BuildConfiguration) -> Workspace:
        """Create or truncate the top-level artifact and write its header."""
        ...

    def add_target(
        self,
        workspace: Workspace,
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> str:
        """Emit one target and return its identifier."""
        ...

    def close_workspace(self, workspace: Workspace) -> None:
        """Write any trailing sections and flush."""
        ...


FileHandler = Callable[[Any, str, str], None]


class BaseProvider:
    """Base class for providers with common functionality.

    Subclasses implement ``_write_header``, ``_write_target`` and
    optionally ``_write_footer``, and declare which file kinds they render
    through ``_file_handlers``. Lifecycle checks, artifact error mapping
    and the define/warning blocks are shared.

    Link policy: the executable links every other name in the registry.
    Names that were added to the workspace in this run also become
    project-level dependencies (Code::Blocks ``<Depends>``, Xcode target
    dependencies). A registered name that was never added is linked as a
    plain library by name and gets no project dependency.
    """

    #: Whether warnings can be set per target.
    supports_target_warnings = True
    #: Whether targets are written straight to the open primary artifact.
    #: Backends that serialize everything at close set this to False.
    streams_output = True

    def __init__(self, name: str) -> None:
        self._name = name
        self._warnings: list[UnsupportedFeature] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def warnings(self) -> list[UnsupportedFeature]:
        return list(self._warnings)

    def file_extension(self) -> str:
        raise NotImplementedError

    def artifact_path(self, config: BuildConfiguration) -> Path:
        """Path of the primary artifact for a configuration."""
        return config.output_dir / f"{config.project_name}{self.file_extension()}"

    # -- lifecycle ---------------------------------------------------------

    def open_workspace(self, config: BuildConfiguration) -> Workspace:
        path = self.artifact_path(config)
        stream: IO[str] | None = self._open_artifact(path)
        if not self.streams_output:
            stream.close()
            stream = None
        workspace = Workspace(path, config, stream)
        workspace.state = WorkspaceState.OPEN
        try:
            self._write_header(workspace, config)
        except ArtifactIOError:
            workspace.release()
            raise
        except OSError as e:
            workspace.release()
            raise ArtifactIOError(str(path), str(e)) from e
        except Exception:
            workspace.release()
            raise
        logger.debug("Opened %s workspace %s", self.name, path)
        return workspace

    def add_target(
        self,
        workspace: Workspace,
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> str:
        if not workspace.is_open:
            raise GenerateError(
                f"cannot add target {target.name!r}: workspace {workspace.path} "
                f"is {workspace.state.value}"
            )
        if target.name in workspace.targets:
            raise GenerateError(f"target {target.name!r} was already added")

        identifier = registry.register(target.name)
        if config.warnings_for(target.name) and not self.supports_target_warnings:
            self._report_unsupported("per-target warnings", target.name)

        try:
            self._write_target(workspace, target, registry, config)
        except ArtifactIOError:
            raise
        except OSError as e:
            failed = e.filename or workspace.path
            raise ArtifactIOError(str(failed), e.strerror or str(e)) from e
        workspace.targets.append(target.name)
        logger.debug(
            "Added %s target %s (%s)", target.kind.value, target.name, identifier
        )
        return identifier

    def close_workspace(self, workspace: Workspace) -> None:
        if not workspace.is_open:
            raise GenerateError(
                f"workspace {workspace.path} is {workspace.state.value}"
            )
        try:
            self._write_footer(workspace)
            if workspace.stream is not None:
                workspace.stream.flush()
        except ArtifactIOError:
            raise
        except OSError as e:
            raise ArtifactIOError(str(workspace.path), str(e)) from e
        finally:
            workspace.release()
            workspace.state = WorkspaceState.CLOSED
        logger.info("Wrote %s", workspace.path)

    # -- hooks -------------------------------------------------------------

    def _write_header(self, workspace: Workspace, config: BuildConfiguration) -> None:
        raise NotImplementedError

    def _write_target(
        self,
        workspace: Workspace,
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> None:
        raise NotImplementedError

    def _write_footer(self, workspace: Workspace) -> None:
        pass

    def _file_handlers(self) -> dict[FileKind, FileHandler | None]:
        """Map each file kind to the method rendering it, or None to skip it."""
        raise NotImplementedError

    # -- shared helpers ----------------------------------------------------

    def _open_artifact(self, path: Path) -> IO[str]:
        """Create or truncate an artifact for writing."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return open(path, "w", encoding="utf-8", newline="\n")
        except OSError as e:
            raise ArtifactIOError(str(path), e.strerror) from e

    def write_defines(self, defines: Iterable[str], sink: Any) -> None:
        """Write the global define block. Defines keep their input order."""
        raise NotImplementedError

    def write_warnings(self, warnings: Iterable[str], sink: Any) -> None:
        """Write a warning flag block. Flags keep their input order."""
        raise NotImplementedError

    def module_path(self, config: BuildConfiguration, target: Target) -> str:
        """Target's module directory relative to the source root.

        Raises:
            ConfigurationError: If the module lies outside the source root.
        """
        return target.module_path(config.source_dir)

    def source_prefix(self, config: BuildConfiguration, target: Target) -> str:
        """Prefix that makes module-relative file paths valid from the output dir."""
        return canonical_join(config.file_prefix, self.module_path(config, target))

    def write_files(self, sink: Any, target: Target, prefix: str) -> int:
        """Render the target's included files through the per-kind handlers.

        Returns:
            Number of files rendered.
        """
        handlers = self._file_handlers()
        count = 0
        for rel_path, kind in iter_files(target.tree, target.filters):
            handler = handlers.get(kind)
            if handler is None:
                logger.debug("%s: skipping %s file %s", self.name, kind.value, rel_path)
                continue
            handler(sink, canonical_join(prefix, rel_path), target.name)
            count += 1
        return count

    def _report_unsupported(self, feature: str, subject: str = "") -> None:
        record = UnsupportedFeature(self.name, feature, subject)
        self._warnings.append(record)
        logger.warning("%s", record.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
