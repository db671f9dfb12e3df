# SPDX-License-Identifier: MIT
"""Shared fixtures for projgen tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from projgen.config import BuildConfiguration
from projgen.core.node import FileNode
from projgen.core.target import Target


def _make_config(root: Path, **overrides: Any) -> BuildConfiguration:
    values: dict[str, Any] = {
        "project_name": "demo",
        "source_dir": root / "src",
        "output_dir": root / "build",
    }
    values.update(overrides)
    return BuildConfiguration(**values)


@pytest.fixture
def make_config() -> Callable[..., BuildConfiguration]:
    """Factory for configurations with sources in <root>/src, output in <root>/build."""
    return _make_config


@pytest.fixture
def demo_tree() -> FileNode:
    """A single module with two sources and a resource script."""
    return FileNode.directory(
        "src", [FileNode("a.cpp"), FileNode("b.cpp"), FileNode("icon.rc")]
    )


@pytest.fixture
def demo_target(demo_tree: FileNode) -> Target:
    return Target.create("demo", "executable", demo_tree)


@pytest.fixture
def engine_targets() -> list[Target]:
    """An executable "main" and a library "enginelib" in a subdirectory."""
    main_tree = FileNode.directory(
        "src",
        [
            FileNode.directory(
                "engines",
                [FileNode.directory("engine", [FileNode("engine.cpp")])],
            ),
            FileNode("main.cpp"),
        ],
    )
    engine_tree = FileNode.directory(
        "engine", [FileNode("engine.cpp"), FileNode("engine.h")]
    )
    return [
        Target.create("main", "executable", main_tree, exclude=["engines"]),
        Target.create(
            "enginelib", "library", engine_tree, module_dir="engines/engine"
        ),
    ]
