# SPDX-License-Identifier: MIT
"""Generate the bundled examples and check the output.

Each example under examples/ is copied to a temporary directory so
generated files never land in the source tree.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from projgen.cli import main
from projgen.config import DEFAULT_CONFIG_FILE
from projgen.providers import PROVIDERS

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


def discover_examples() -> list[Path]:
    if not EXAMPLES_DIR.is_dir():
        return []
    return sorted(
        d for d in EXAMPLES_DIR.iterdir() if (d / DEFAULT_CONFIG_FILE).is_file()
    )


@pytest.fixture
def hello(tmp_path: Path) -> Path:
    work = tmp_path / "hello"
    shutil.copytree(EXAMPLES_DIR / "hello", work)
    return work


@pytest.mark.parametrize("provider", sorted(PROVIDERS))
@pytest.mark.parametrize("example", discover_examples(), ids=lambda p: p.name)
def test_example(example: Path, provider: str, tmp_path: Path) -> None:
    work = tmp_path / example.name
    shutil.copytree(example, work)

    assert main(["generate", "-c", str(work / DEFAULT_CONFIG_FILE), "-p", provider]) == 0
    assert any((work / "build").iterdir())


class TestHelloExample:
    """Content checks for examples/hello."""

    def test_cmake(self, hello: Path) -> None:
        assert main(["generate", "-c", str(hello / DEFAULT_CONFIG_FILE)]) == 0

        content = (hello / "build" / "CMakeLists.txt").read_text()
        assert "add_executable(hello\n\t../src/main.cpp\n)\n" in content
        assert "\t../src/engine/engine.cpp\n" in content
        assert "\t../src/gui/window.cpp\n" in content
        assert "window_win32.cpp" not in content
        assert "hello.rc" not in content
        assert (
            "target_link_libraries(hello\n"
            "\t${ZLIB_LIBRARIES}\n"
            "\tGL\n"
            "\tengine\n"
            "\tgui\n"
            ")\n"
        ) in content

    def test_codeblocks(self, hello: Path) -> None:
        args = ["generate", "-c", str(hello / DEFAULT_CONFIG_FILE), "-p", "codeblocks"]
        assert main(args) == 0

        build = hello / "build"
        workspace = (build / "hello.workspace").read_text()
        assert (
            '\t\t<Project filename="hello.cbp" active="1">\n'
            '\t\t\t<Depends filename="engine.cbp" />\n'
            '\t\t\t<Depends filename="gui.cbp" />\n'
            "\t\t</Project>\n"
        ) in workspace
        project = (build / "hello.cbp").read_text()
        assert '<Unit filename="../src/main.cpp" />' in project
        assert '<Unit filename="../src/hello.rc">' in project
        assert "engine.cpp" not in project
        gui = (build / "gui.cbp").read_text()
        assert '<Unit filename="../src/gui/window.cpp" />' in gui
        assert "window_win32.cpp" not in gui

    def test_relative_config_path(self, hello: Path, monkeypatch) -> None:
        monkeypatch.chdir(hello.parent)

        assert main(["generate", "-c", f"hello/{DEFAULT_CONFIG_FILE}"]) == 0

        content = (hello / "build" / "CMakeLists.txt").read_text()
        assert "\t../src/main.cpp\n" in content
        assert "\t../src/engine/engine.cpp\n" in content
        assert "hello/src" not in content
