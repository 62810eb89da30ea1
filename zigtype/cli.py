"""
Command-line interface for zigtype.

Loads a serialized type graph from a file, a URL or stdin, renders it and
writes the result to stdout, a file, or one file per declaration.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .codegen import (
    GenerationResult,
    RegistryError,
    generate_code,
    get_generator,
    list_all_language_info,
)
from .codegen.core.config import ConfigError, GeneratorConfig, load_config
from .codegen.core.typegraph import TypeGraph
from .logging_config import get_logger, setup_logging
from .utils import JSONLoaderError, load_json, load_json_from_stream, to_type_graph

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Generated code goes to stdout, everything else to stderr
console = Console()
err_console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="zigtype",
        description="Generate Zig declarations from a serialized type graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  zigtype graph.json
  zigtype graph.json --output models.zig
  zigtype --url https://example.com/graph.json --private
  zigtype graph.json --split-files --out-dir models/
  zigtype --stdin < graph.json
        """.strip(),
    )

    # Input options (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group()
    input_group.add_argument("file", nargs="?", help="Type graph JSON file")
    input_group.add_argument("--url", help="URL to fetch the type graph from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read the type graph from standard input"
    )

    parser.add_argument(
        "--language",
        "-l",
        default="zig",
        help="Target language (default: zig)",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument("--output", "-o", metavar="FILE", help="Output file (default: stdout)")
    output_group.add_argument(
        "--out-dir",
        metavar="DIR",
        help="Directory for per-declaration files (requires --split-files)",
    )
    output_group.add_argument(
        "--split-files",
        action="store_true",
        help="Write one file per top-level declaration",
    )

    generation_group = parser.add_argument_group("generation options")
    generation_group.add_argument("--config", metavar="FILE", help="JSON configuration file")
    generation_group.add_argument(
        "--private",
        action="store_true",
        help="Omit the pub modifier on declarations",
    )
    generation_group.add_argument(
        "--leading-comment",
        action="append",
        metavar="LINE",
        dest="leading_comments",
        help="Replace the generated header with this comment line (repeatable)",
    )
    generation_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't emit descriptions as doc comments",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported languages and exit",
    )
    info_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show generation metadata and debug logging",
    )
    info_group.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Entry point for the ``zigtype`` command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = create_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else args.log_level, err_console)

    try:
        if args.list_languages:
            return _list_languages()

        _validate_args(args)
        config = _build_config(args)
        source, graph = _load_input(args)
        logger.info("Rendering %s", source)

        result = generate_code(get_generator(args.language, config), graph)
        return _handle_result(result, args)

    except (CLIError, ConfigError, JSONLoaderError, RegistryError) as e:
        err_console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _validate_args(args: argparse.Namespace) -> None:
    if not (args.file or args.url or args.stdin):
        raise CLIError("Input source required (file, --url, or --stdin)")
    if args.split_files and not args.out_dir:
        raise CLIError("--split-files needs --out-dir")
    if args.out_dir and not args.split_files:
        raise CLIError("--out-dir is only used with --split-files")
    if args.output and args.split_files:
        raise CLIError("--output cannot be combined with --split-files")


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the configuration file with command-line overrides."""
    overrides: dict[str, Any] = {}

    if args.private:
        overrides["public"] = False
    if args.split_files:
        overrides["split_files"] = True
    if args.leading_comments:
        overrides["leading_comments"] = list(args.leading_comments)
    if args.no_comments:
        overrides["add_comments"] = False

    return load_config(args.language, custom_config=overrides, config_file=args.config)


def _load_input(args: argparse.Namespace) -> tuple[str, TypeGraph]:
    if args.stdin:
        source, data = load_json_from_stream(sys.stdin)
    else:
        source, data = load_json(file_path=args.file, url=args.url)
    return source, to_type_graph(source, data)


def _handle_result(result: GenerationResult, args: argparse.Namespace) -> int:
    if not result.success:
        err_console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    if args.split_files:
        _write_files(result, Path(args.out_dir))
    elif args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            raise CLIError(f"Failed to write to {output_path}: {e}") from e
        err_console.print(f"[green]✓[/green] Generated code saved to [cyan]{output_path}[/cyan]")
    else:
        _print_code(result.code)

    if args.verbose and result.metadata:
        _print_metadata(result)

    if result.warnings:
        err_console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            err_console.print(f"  [yellow]•[/yellow] {warning}")

    return 0


def _write_files(result: GenerationResult, out_dir: Path) -> None:
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        for output in result.files:
            (out_dir / output.filename).write_text(output.text, encoding="utf-8")
    except OSError as e:
        raise CLIError(f"Failed to write to {out_dir}: {e}") from e

    err_console.print(
        f"[green]✓[/green] Wrote {len(result.files)} file(s) to [cyan]{out_dir}[/cyan]"
    )


def _print_code(code: str) -> None:
    """Highlight on a terminal; write raw text when piped."""
    if not sys.stdout.isatty():
        sys.stdout.write(code)
        return

    console.print(
        Panel(
            Syntax(code, "zig", theme="monokai"),
            title="📄 Generated Zig Code",
            border_style="green",
        )
    )


def _print_metadata(result: GenerationResult) -> None:
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in result.metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    err_console.print()
    err_console.print(metadata_table)


def _list_languages() -> int:
    """List supported languages."""
    table = Table(title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Backend", style="dim")
    table.add_column("Aliases", style="blue")

    for language, info in sorted(list_all_language_info().items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(language, info["file_extension"], info["class"], aliases)

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
