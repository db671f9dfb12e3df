# SPDX-License-Identifier: MIT
"""
Projgen: generate native IDE/build-tool project files from one project description.

A single description of a source tree, its modules, global defines and
warning flags drives project files for several build ecosystems
(CMake, Code::Blocks, Xcode).
"""

from __future__ import annotations

from projgen.config import BuildConfiguration, load_config
from projgen.core.node import FileNode, scan_directory
from projgen.core.registry import IdentifierRegistry
from projgen.core.target import Target, TargetKind
from projgen.generate import GenerationResult, generate_project
from projgen.providers import PROVIDERS, get_provider

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BuildConfiguration",
    "FileNode",
    "GenerationResult",
    "IdentifierRegistry",
    "PROVIDERS",
    "Target",
    "TargetKind",
    "generate_project",
    "get_provider",
    "load_config",
    "scan_directory",
]
