# SPDX-License-Identifier: MIT
"""Command-line interface for projgen."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from projgen.config import DEFAULT_CONFIG_FILE, TargetSpec, load_config
from projgen.core.errors import ConfigurationError, ProjgenError
from projgen.core.node import scan_directory
from projgen.core.target import Target
from projgen.generate import generate_project
from projgen.providers import PROVIDERS, get_provider

# Set up logging
logger = logging.getLogger("projgen")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def find_config(
    name: str = DEFAULT_CONFIG_FILE, search_dir: Path | None = None
) -> Path | None:
    """Find a project description by name.

    Args:
        name: File name (e.g., 'projgen.toml')
        search_dir: Directory to search in (default: current dir)

    Returns:
        Path to the file if found, None otherwise.
    """
    if search_dir is None:
        search_dir = Path.cwd()

    config_path = search_dir / name
    if config_path.exists() and config_path.is_file():
        return config_path

    return None


def build_targets(specs: list[TargetSpec], source_dir: Path) -> list[Target]:
    """Scan each target's module directory and build the Target list."""
    targets: list[Target] = []
    for spec in specs:
        module_dir = spec.module
        if not module_dir.is_absolute():
            module_dir = Path(source_dir).absolute() / module_dir
        if not module_dir.is_dir():
            raise ConfigurationError(
                f"module directory {module_dir} of target {spec.name!r} "
                "does not exist"
            )
        logger.debug("Scanning %s for target %s", module_dir, spec.name)
        try:
            tree = scan_directory(module_dir)
        except OSError as e:
            raise ConfigurationError(
                f"cannot scan module directory {module_dir} of target "
                f"{spec.name!r}: {e.strerror or e}"
            ) from e
        targets.append(
            Target.create(
                spec.name,
                spec.kind,
                tree,
                module_dir=module_dir,
                include=spec.include,
                exclude=spec.exclude,
            )
        )
    return targets


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate project files for one provider.

    This command:
    1. Loads projgen.toml (or the file given with -c)
    2. Scans every target's module directory
    3. Writes the provider's project files into the output directory
    """
    setup_logging(args.verbose, args.debug)

    config_path: Path
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            logger.error("Project description not found: %s", args.config)
            return 1
    else:
        found = find_config()
        if found is None:
            logger.error("No %s found in current directory", DEFAULT_CONFIG_FILE)
            return 1
        config_path = found

    try:
        config, specs = load_config(config_path, output_dir=args.output_dir)
        targets = build_targets(specs, config.source_dir)
        provider = get_provider(args.provider)
        result = generate_project(provider, config, targets)
    except ProjgenError as e:
        logger.error("%s", e)
        return 1

    for warning in result.warnings:
        logger.warning("%s", warning)
    for path in result.files:
        print(f"Generated {path}")
    return 0


def cmd_providers(args: argparse.Namespace) -> int:
    """List available providers and their artifact suffixes."""
    setup_logging(args.verbose, args.debug)

    for name in sorted(PROVIDERS):
        provider = PROVIDERS[name]()
        print(f"{name:12} {provider.file_extension()}")
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the projgen CLI."""
    parser = argparse.ArgumentParser(
        prog="projgen",
        description="Generate IDE and build-tool project files "
        "from one project description.",
        epilog="Run 'projgen <command> --help' for command-specific help.",
    )
    from projgen import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # projgen generate
    gen_parser = subparsers.add_parser(
        "generate", help="Generate project files from projgen.toml"
    )
    add_common_args(gen_parser)
    gen_parser.add_argument(
        "-c",
        "--config",
        help=f"Path to the project description (default: {DEFAULT_CONFIG_FILE})",
    )
    gen_parser.add_argument(
        "-p",
        "--provider",
        default="cmake",
        choices=sorted(PROVIDERS),
        help="Project file format (default: cmake)",
    )
    gen_parser.add_argument(
        "-B", "--output-dir", help="Output directory (overrides project.output_dir)"
    )
    gen_parser.set_defaults(func=cmd_generate)

    # projgen providers
    list_parser = subparsers.add_parser("providers", help="List available providers")
    add_common_args(list_parser)
    list_parser.set_defaults(func=cmd_providers)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
