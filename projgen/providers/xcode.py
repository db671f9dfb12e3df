# SPDX-License-Identifier: MIT
"""Xcode project provider.

Generates ``<project>.xcodeproj/project.pbxproj``. Objects are collected
while targets are added and the whole project is serialized with
pbxproj when the workspace is closed. Every object id is derived from
the identifier registry, so regenerating gives the same file.

Source files keep their directory layout as nested groups under one
group per target.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pbxproj import XcodeProject

from projgen.core.filters import FileKind, file_kind, filter_tree
from projgen.core.node import FileNode, canonical_join
from projgen.core.registry import IdentifierRegistry
from projgen.providers.provider import (
    BaseProvider,
    FileHandler,
    Workspace,
    normalize_library_name,
)

if TYPE_CHECKING:
    from projgen.config import BuildConfiguration
    from projgen.core.target import Target

logger = logging.getLogger(__name__)

PRODUCT_TYPE_EXECUTABLE = "com.apple.product-type.tool"
PRODUCT_TYPE_LIBRARY = "com.apple.product-type.library.static"

# Map source extensions to Xcode file types
LAST_KNOWN_FILE_TYPES = {
    "c": "sourcecode.c.c",
    "cc": "sourcecode.cpp.cpp",
    "cpp": "sourcecode.cpp.cpp",
    "cxx": "sourcecode.cpp.cpp",
    "c++": "sourcecode.cpp.cpp",
    "m": "sourcecode.c.objc",
    "mm": "sourcecode.cpp.objcpp",
    "h": "sourcecode.c.h",
    "hh": "sourcecode.cpp.h",
    "hpp": "sourcecode.cpp.h",
    "hxx": "sourcecode.cpp.h",
}


def _file_type(name: str) -> str:
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    return LAST_KNOWN_FILE_TYPES.get(ext, "text")


@dataclass
class _TargetObjects:
    """Objects collected for one target while walking its tree."""

    name: str
    objects: dict[str, dict[str, Any]]
    registry: IdentifierRegistry
    prefix: str
    children: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)


class XcodeProvider(BaseProvider):
    """Provider that produces an Xcode project bundle.

    Example:
        provider = XcodeProvider()
        # ... open, add targets, close ...
        # Creates <output_dir>/<project>.xcodeproj/project.pbxproj
    """

    streams_output = False

    def __init__(self) -> None:
        super().__init__("xcode")

    def file_extension(self) -> str:
        return ".xcodeproj"

    def artifact_path(self, config: BuildConfiguration) -> Path:
        bundle = config.output_dir / f"{config.project_name}{self.file_extension()}"
        return bundle / "project.pbxproj"

    def _write_header(self, workspace: Workspace, config: BuildConfiguration) -> None:
        settings: dict[str, Any] = {
            "ALWAYS_SEARCH_USER_PATHS": "NO",
            "CLANG_CXX_LIBRARY": "libc++",
            "SDKROOT": "macosx",
            "SYMROOT": ".",
            "HEADER_SEARCH_PATHS": self._header_search_paths(config),
        }
        self.write_warnings(config.warnings, settings)
        self.write_defines(config.defines, settings)
        workspace.data["project_settings"] = settings
        workspace.data["objects"] = {}
        workspace.data["dependencies"] = {}

    def _header_search_paths(self, config: BuildConfiguration) -> list[str]:
        root = canonical_join("$(SRCROOT)", config.file_prefix)
        paths = [root]
        paths.extend(canonical_join(root, inc) for inc in config.include_dirs)
        if config.libs_env_var:
            paths.append(f"$({config.libs_env_var})/include")
        return paths

    def write_warnings(self, warnings: Iterable[str], sink: dict[str, Any]) -> None:
        flags = list(warnings)
        if flags:
            sink["WARNING_CFLAGS"] = [*sink.get("WARNING_CFLAGS", []), *flags]

    def write_defines(self, defines: Iterable[str], sink: dict[str, Any]) -> None:
        values = list(defines)
        if values:
            sink["GCC_PREPROCESSOR_DEFINITIONS"] = ["$(inherited)", *values]

    def _write_target(
        self,
        workspace: Workspace,
        target: Target,
        registry: IdentifierRegistry,
        config: BuildConfiguration,
    ) -> None:
        objects: dict[str, dict[str, Any]] = workspace.data["objects"]
        name = target.name
        ids = _TargetIds.of(registry, name)

        collected = _TargetObjects(
            name=name,
            objects=objects,
            registry=registry,
            prefix=self.source_prefix(config, target),
        )
        tree = filter_tree(target.tree, target.filters)
        if tree is not None:
            self._add_group_children(collected, tree, "")
        objects[ids.group] = {
            "isa": "PBXGroup",
            "children": collected.children,
            "name": name,
            "sourceTree": "<group>",
        }

        if target.is_executable:
            product_name = name
            product_type = PRODUCT_TYPE_EXECUTABLE
            explicit_type = "compiled.mach-o.executable"
        else:
            product_name = name if name.startswith("lib") else f"lib{name}"
            product_name = f"{product_name}.a"
            product_type = PRODUCT_TYPE_LIBRARY
            explicit_type = "archive.ar"

        settings: dict[str, Any] = {"PRODUCT_NAME": name}
        target_warnings = config.warnings_for(name)
        if target_warnings:
            self.write_warnings(["$(inherited)", *target_warnings], settings)
        if target.is_executable:
            ldflags = [
                f"-l{normalize_library_name(lib)}" for lib in config.libraries
            ]
            if ldflags:
                settings["OTHER_LDFLAGS"] = ldflags
            # Resolved at close, once every dependency has its product
            workspace.data["dependencies"][name] = [
                dep for dep, _ in registry.dependencies_of(name)
            ]

        for config_id, config_name in (
            (ids.debug, "Debug"),
            (ids.release, "Release"),
        ):
            objects[config_id] = {
                "isa": "XCBuildConfiguration",
                "buildSettings": dict(settings),
                "name": config_name,
            }
        objects[ids.config_list] = {
            "isa": "XCConfigurationList",
            "buildConfigurations": [ids.debug, ids.release],
            "defaultConfigurationIsVisible": "0",
            "defaultConfigurationName": "Release",
        }
        objects[ids.product] = {
            "isa": "PBXFileReference",
            "explicitFileType": explicit_type,
            "includeInIndex": "0",
            "path": product_name,
            "sourceTree": "BUILT_PRODUCTS_DIR",
        }
        objects[ids.sources_phase] = {
            "isa": "PBXSourcesBuildPhase",
            "buildActionMask": "2147483647",
            "files": collected.sources,
            "runOnlyForDeploymentPostprocessing": "0",
        }
        objects[ids.frameworks_phase] = {
            "isa": "PBXFrameworksBuildPhase",
            "buildActionMask": "2147483647",
            "files": [],
            "runOnlyForDeploymentPostprocessing": "0",
        }
        objects[ids.target] = {
            "isa": "PBXNativeTarget",
            "buildConfigurationList": ids.config_list,
            "buildPhases": [ids.sources_phase, ids.frameworks_phase],
            "buildRules": [],
            "dependencies": [],
            "name": name,
            "productName": name,
            "productReference": ids.product,
            "productType": product_type,
        }
        workspace.data["registry"] = registry
        logger.debug("xcode: %s has %d sources", name, len(collected.sources))

    def _add_group_children(
        self, collected: _TargetObjects, node: FileNode, rel_dir: str
    ) -> None:
        """Add file references and nested groups for a directory node."""
        handlers = self._file_handlers()
        for child in node.children:
            rel_path = canonical_join(rel_dir, child.name)
            if child.is_leaf:
                handler = handlers.get(file_kind(child.name))
                if handler is not None:
                    handler(collected, rel_path, collected.name)
                continue

            parent_children = collected.children
            collected.children = []
            self._add_group_children(collected, child, rel_path)
            group_children, collected.children = collected.children, parent_children
            if not group_children:
                continue
            group_id = collected.registry.derive_id(
                "target", collected.name, "group", rel_path
            )
            collected.objects[group_id] = {
                "isa": "PBXGroup",
                "children": group_children,
                "name": child.name,
                "sourceTree": "<group>",
            }
            collected.children.append(group_id)

    def _file_handlers(self) -> dict[FileKind, FileHandler | None]:
        return {
            FileKind.SOURCE: self._add_source,
            FileKind.OTHER: self._add_reference,
            FileKind.RESOURCE: None,
            FileKind.ASSEMBLY: None,
        }

    def _add_reference(
        self, collected: _TargetObjects, rel_path: str, target_name: str
    ) -> str:
        file_id = collected.registry.derive_id(
            "target", target_name, "file", rel_path
        )
        name = rel_path.rsplit("/", 1)[-1]
        collected.objects[file_id] = {
            "isa": "PBXFileReference",
            "lastKnownFileType": _file_type(name),
            "name": name,
            "path": canonical_join(collected.prefix, rel_path),
            "sourceTree": "SOURCE_ROOT",
        }
        collected.children.append(file_id)
        return file_id

    def _add_source(
        self, collected: _TargetObjects, rel_path: str, target_name: str
    ) -> None:
        file_id = self._add_reference(collected, rel_path, target_name)
        build_id = collected.registry.derive_id(
            "target", target_name, "build", rel_path
        )
        collected.objects[build_id] = {"isa": "PBXBuildFile", "fileRef": file_id}
        collected.sources.append(build_id)

    def _write_footer(self, workspace: Workspace) -> None:
        config = workspace.config
        objects: dict[str, dict[str, Any]] = workspace.data["objects"]
        registry: IdentifierRegistry | None = workspace.data.get("registry")
        if registry is None:
            # Nothing was added; ids only depend on names
            registry = IdentifierRegistry()
        names = [n for n, _ in registry.lookup_all() if n in workspace.targets]

        project = _ProjectIds.of(registry, config.project_name)
        for name, deps in workspace.data["dependencies"].items():
            self._link_dependencies(
                objects, registry, project, name, deps, workspace.targets
            )

        settings: dict[str, Any] = workspace.data["project_settings"]
        objects[project.debug] = {
            "isa": "XCBuildConfiguration",
            "buildSettings": {**settings, "GCC_OPTIMIZATION_LEVEL": "0"},
            "name": "Debug",
        }
        objects[project.release] = {
            "isa": "XCBuildConfiguration",
            "buildSettings": {**settings, "GCC_OPTIMIZATION_LEVEL": "s"},
            "name": "Release",
        }
        objects[project.config_list] = {
            "isa": "XCConfigurationList",
            "buildConfigurations": [project.debug, project.release],
            "defaultConfigurationIsVisible": "0",
            "defaultConfigurationName": "Release",
        }

        targets = [_TargetIds.of(registry, n) for n in names]
        objects[project.products_group] = {
            "isa": "PBXGroup",
            "children": [ids.product for ids in targets],
            "name": "Products",
            "sourceTree": "<group>",
        }
        objects[project.sources_group] = {
            "isa": "PBXGroup",
            "children": [ids.group for ids in targets],
            "name": "Sources",
            "sourceTree": "<group>",
        }
        objects[project.main_group] = {
            "isa": "PBXGroup",
            "children": [project.sources_group, project.products_group],
            "sourceTree": "<group>",
        }
        objects[project.project] = {
            "isa": "PBXProject",
            "buildConfigurationList": project.config_list,
            "compatibilityVersion": "Xcode 14.0",
            "developmentRegion": "en",
            "hasScannedForEncodings": "0",
            "knownRegions": ["en", "Base"],
            "mainGroup": project.main_group,
            "productRefGroup": project.products_group,
            "projectDirPath": "",
            "projectRoot": "",
            "targets": [ids.target for ids in targets],
        }

        tree = {
            "archiveVersion": "1",
            "classes": {},
            "objectVersion": "56",
            "objects": objects,
            "rootObject": project.project,
        }
        XcodeProject(tree, str(workspace.path)).save()

    def _link_dependencies(
        self,
        objects: dict[str, dict[str, Any]],
        registry: IdentifierRegistry,
        project: _ProjectIds,
        name: str,
        deps: list[str],
        added: list[str],
    ) -> None:
        """Make target ``name`` depend on, and link, every target in ``deps``.

        Names in ``deps`` that were never added have no product to link;
        they go into ``OTHER_LDFLAGS`` instead.
        """
        ids = _TargetIds.of(registry, name)
        native_target = objects[ids.target]
        frameworks = objects[ids.frameworks_phase]
        for dep in deps:
            if dep not in added:
                logger.debug("xcode: linking %s by name, it was never added", dep)
                for config_id in (ids.debug, ids.release):
                    build_settings = objects[config_id]["buildSettings"]
                    build_settings["OTHER_LDFLAGS"] = [
                        *build_settings.get("OTHER_LDFLAGS", []),
                        f"-l{dep}",
                    ]
                continue
            dep_ids = _TargetIds.of(registry, dep)
            proxy_id = registry.derive_id("target", name, "proxy", dep)
            dependency_id = registry.derive_id("target", name, "dependency", dep)
            link_id = registry.derive_id("target", name, "link", dep)
            objects[proxy_id] = {
                "isa": "PBXContainerItemProxy",
                "containerPortal": project.project,
                "proxyType": "1",
                "remoteGlobalIDString": dep_ids.target,
                "remoteInfo": dep,
            }
            objects[dependency_id] = {
                "isa": "PBXTargetDependency",
                "target": dep_ids.target,
                "targetProxy": proxy_id,
            }
            objects[link_id] = {"isa": "PBXBuildFile", "fileRef": dep_ids.product}
            native_target["dependencies"].append(dependency_id)
            frameworks["files"].append(link_id)


@dataclass(frozen=True)
class _TargetIds:
    """Object ids of the fixed objects every target owns."""

    target: str
    group: str
    product: str
    config_list: str
    debug: str
    release: str
    sources_phase: str
    frameworks_phase: str

    @classmethod
    def of(cls, registry: IdentifierRegistry, name: str) -> _TargetIds:
        def derive(role: str) -> str:
            return registry.derive_id("target", name, role)

        return cls(
            target=derive("native-target"),
            group=derive("group"),
            product=derive("product"),
            config_list=derive("config-list"),
            debug=derive("config-debug"),
            release=derive("config-release"),
            sources_phase=derive("sources-phase"),
            frameworks_phase=derive("frameworks-phase"),
        )


@dataclass(frozen=True)
class _ProjectIds:
    """Object ids of the project-level objects."""

    project: str
    main_group: str
    products_group: str
    sources_group: str
    config_list: str
    debug: str
    release: str

    @classmethod
    def of(cls, registry: IdentifierRegistry, name: str) -> _ProjectIds:
        def derive(role: str) -> str:
            return registry.derive_id("project", name, role)

        return cls(
            project=derive("project"),
            main_group=derive("main-group"),
            products_group=derive("products-group"),
            sources_group=derive("sources-group"),
            config_list=derive("config-list"),
            debug=derive("config-debug"),
            release=derive("config-release"),
        )
