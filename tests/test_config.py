# SPDX-License-Identifier: MIT
"""Tests for projgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from projgen.config import BuildConfiguration, load_config, parse_config
from projgen.core.errors import ConfigurationError
from projgen.core.target import TargetKind

PROJECT_TOML = """\
[project]
name = "demo"
description = "Demo Game"
source_dir = "src"
output_dir = "out"
defines = ["USE_ZLIB", "VERSION=2"]
warnings = ["-Wall"]
libraries = ["zlib", "SDL_static"]
include_dirs = ["engines"]
libs_env_var = "DEMO_LIBS"

[project.target_warnings]
enginelib = ["-Wno-unused"]

[[targets]]
name = "demo"
kind = "executable"
exclude = ["engines"]

[[targets]]
name = "enginelib"
module = "engines/engine"
include = ["*.cpp"]
"""


class TestBuildConfiguration:
    """Tests for BuildConfiguration properties."""

    def test_display_name_defaults_to_project_name(self, tmp_path: Path) -> None:
        config = BuildConfiguration("demo", tmp_path, tmp_path)
        assert config.display_name == "demo"

    def test_display_name_uses_description(self, tmp_path: Path) -> None:
        config = BuildConfiguration("demo", tmp_path, tmp_path, description="Demo")
        assert config.display_name == "Demo"

    def test_file_prefix_relative(self, tmp_path: Path) -> None:
        config = BuildConfiguration("demo", tmp_path / "src", tmp_path / "build")
        assert config.file_prefix == "../src"

    def test_file_prefix_same_dir(self, tmp_path: Path) -> None:
        config = BuildConfiguration("demo", tmp_path, tmp_path)
        assert config.file_prefix == "."

    def test_warnings_for(self, tmp_path: Path) -> None:
        config = BuildConfiguration(
            "demo", tmp_path, tmp_path, target_warnings={"lib": ("-Wextra",)}
        )
        assert config.warnings_for("lib") == ("-Wextra",)
        assert config.warnings_for("demo") == ()


class TestLoadConfig:
    """Tests for reading projgen.toml files."""

    def test_full_document(self, tmp_path: Path) -> None:
        path = tmp_path / "projgen.toml"
        path.write_text(PROJECT_TOML)

        config, specs = load_config(path)

        assert config.project_name == "demo"
        assert config.display_name == "Demo Game"
        assert config.source_dir == tmp_path / "src"
        assert config.output_dir == tmp_path / "out"
        assert config.defines == ("USE_ZLIB", "VERSION=2")
        assert config.warnings == ("-Wall",)
        assert config.libraries == ("zlib", "SDL_static")
        assert config.include_dirs == ("engines",)
        assert config.libs_env_var == "DEMO_LIBS"
        assert config.warnings_for("enginelib") == ("-Wno-unused",)

        assert [s.name for s in specs] == ["demo", "enginelib"]
        assert specs[0].kind is TargetKind.EXECUTABLE
        assert specs[0].module == Path(".")
        assert specs[0].exclude == ("engines",)
        assert specs[1].kind is TargetKind.LIBRARY
        assert specs[1].module == Path("engines/engine")
        assert specs[1].include == ("*.cpp",)

    def test_output_dir_override(self, tmp_path: Path) -> None:
        path = tmp_path / "projgen.toml"
        path.write_text(PROJECT_TOML)

        config, _ = load_config(path, output_dir=tmp_path / "elsewhere")
        assert config.output_dir == tmp_path / "elsewhere"

    def test_defaults(self, tmp_path: Path) -> None:
        config, specs = parse_config({"project": {"name": "demo"}}, tmp_path)
        assert config.source_dir == tmp_path
        assert config.output_dir == tmp_path / "build"
        assert config.defines == ()
        assert config.libs_env_var is None
        assert specs == []

    def test_relative_paths_become_absolute(
        self, tmp_path: Path, monkeypatch
    ) -> None:
        (tmp_path / "proj").mkdir()
        (tmp_path / "proj" / "projgen.toml").write_text(PROJECT_TOML)
        monkeypatch.chdir(tmp_path)

        config, _ = load_config("proj/projgen.toml", output_dir="elsewhere")

        assert config.source_dir == tmp_path / "proj" / "src"
        assert config.output_dir == tmp_path / "elsewhere"
        assert config.file_prefix == "../proj/src"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="cannot read"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "projgen.toml"
        path.write_text("[project\nname = ")
        with pytest.raises(ConfigurationError, match="invalid TOML"):
            load_config(path)


class TestParseConfigErrors:
    """Configuration problems are reported as ConfigurationError."""

    def test_missing_project_table(self) -> None:
        with pytest.raises(ConfigurationError, match=r"\[project\]"):
            parse_config({})

    def test_empty_project_name(self) -> None:
        with pytest.raises(ConfigurationError, match="project.name"):
            parse_config({"project": {"name": "  "}})

    def test_defines_must_be_strings(self) -> None:
        with pytest.raises(ConfigurationError, match="project.defines"):
            parse_config({"project": {"name": "demo", "defines": [1, 2]}})

    def test_target_without_name(self) -> None:
        data = {"project": {"name": "demo"}, "targets": [{"kind": "library"}]}
        with pytest.raises(ConfigurationError, match=r"targets\[0\].name"):
            parse_config(data)

    def test_unknown_target_kind(self) -> None:
        data = {
            "project": {"name": "demo"},
            "targets": [{"name": "demo", "kind": "plugin"}],
        }
        with pytest.raises(ConfigurationError, match="unknown target kind"):
            parse_config(data)

    def test_target_warnings_must_be_table(self) -> None:
        data = {"project": {"name": "demo", "target_warnings": ["-Wall"]}}
        with pytest.raises(ConfigurationError, match="target_warnings"):
            parse_config(data)
