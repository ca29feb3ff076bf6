"""
CLI integration for code generation functionality.

Provides the handlers behind ``cstr-enum generate``, ``languages`` and
``language-info``.
"""

import argparse
from pathlib import Path
from typing import Any, Dict

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich import box
from rich.markup import escape

from ..logging_config import get_logger
from ..utils import SourceLoaderError, load_source
from .registry import get_registry, is_language_supported
from . import (
    generate_from_source,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
    DeriveError,
    GeneratorConfig,
    GenerationResult,
    RegistryError,
    ConfigError,
    load_config,
)

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich consoles
console = Console()
err_console = Console(stderr=True, soft_wrap=True)

SYNTAX_LEXERS = {"python": "python", "c": "c"}


def add_generate_args(parser: argparse.ArgumentParser):
    """Add the ``generate`` arguments to a parser."""
    parser.add_argument("source", help="Python module declaring the derive targets")

    parser.add_argument(
        "--language",
        "-l",
        default="python",
        help="Target language (default: python; see 'cstr-enum languages')",
    )

    parser.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Output file for generated code (default: stdout)",
    )

    parser.add_argument(
        "--module",
        metavar="NAME",
        help="Import path of the declaration module (default: file stem)",
    )

    parser.add_argument(
        "--config", metavar="FILE", help="JSON configuration file for code generation"
    )

    parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't generate comments in output code",
    )

    parser.add_argument(
        "--no-attach",
        action="store_true",
        help="Don't bind as_cstr/from_cstr onto the declared types (Python)",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit 1 if --output is missing or out of date instead of writing it",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show generation result metadata",
    )


def handle_generate_command(args: argparse.Namespace) -> int:
    """
    Handle ``cstr-enum generate``.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    source = None
    try:
        if not _validate_language(args.language):
            return 1

        if args.check and not args.output:
            raise CLIError("--check requires --output")

        config = _build_config(args)
        filename, source = _load_input(args.source)

        result = generate_from_source(
            source, filename, args.language, config, source_module=args.module
        )

    except DeriveError as e:
        _print_diagnostic(e, source)
        return 1
    except CLIError as e:
        err_console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1
    except (RegistryError, SourceLoaderError) as e:
        err_console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1

    if not result.success:
        err_console.print(f"[red]✗ {escape(result.error_message)}[/red]")
        return 1

    if args.check:
        return _check_output(result, Path(args.output))

    return _write_output(result, args)


def _validate_language(language: str, silent: bool = False) -> bool:
    """Validate that a language is supported."""
    if is_language_supported(language):
        return True

    if not silent:
        supported = list_supported_languages()
        err_console.print(f"[red]✗ Unsupported language '{escape(language)}'[/red]")
        err_console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
    return False


def _load_input(path: str):
    try:
        return load_source(path)
    except FileNotFoundError as e:
        raise CLIError(str(e)) from e
    except SourceLoaderError as e:
        raise CLIError(f"Failed to load input: {e}") from e


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.output:
        overrides["output_file"] = args.output

    if args.no_comments:
        overrides["add_comments"] = False

    if args.no_attach:
        overrides["attach_methods"] = False

    try:
        return load_config(
            get_registry().resolve_language(args.language),
            custom_config=overrides,
            config_file=args.config,
        )
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e


def _print_diagnostic(error: DeriveError, source) -> None:
    """Print a derive diagnostic with its source excerpt."""
    logger.debug("Generation aborted: %s", error)
    for line in error.render(source):
        err_console.out(line, highlight=False)


def _check_output(result: GenerationResult, output_path: Path) -> int:
    """Compare generated code with an existing output file."""
    if not output_path.exists():
        err_console.print(f"[red]✗ {output_path} does not exist[/red]")
        return 1

    # Compare bytes so configured line endings survive the round trip
    if output_path.read_bytes() != result.code.encode("utf-8"):
        err_console.print(f"[red]✗ {output_path} is out of date[/red]")
        return 1

    console.print(f"[green]✓[/green] {output_path} is up to date")
    return 0


def _write_output(result: GenerationResult, args: argparse.Namespace) -> int:
    """Write generated code to a file or print it."""
    language = result.metadata.get("language", args.language)

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_bytes(result.code.encode("utf-8"))
        except OSError as e:
            err_console.print(f"[red]✗ Failed to write to {output_path}:[/red] {e}")
            return 1
        console.print(
            f"[green]✓[/green] Generated {language} code saved to [cyan]{output_path}[/cyan]"
        )
    elif console.is_terminal:
        console.print(
            Syntax(result.code, SYNTAX_LEXERS.get(language, "text"), theme="monokai")
        )
    else:
        # Piped output must stay byte-exact
        console.out(result.code, end="", highlight=False)

    if args.verbose and result.metadata:
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

    if result.warnings:
        err_console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            err_console.print(f"  [yellow]•[/yellow] {escape(warning)}")
        err_console.print()

    return 0


def handle_languages_command(args: argparse.Namespace) -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(lang_name, info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()

    console.print(
        Panel(
            "[bold]Usage:[/bold] cstr-enum generate [dim]constants.py[/dim] "
            "-l [cyan]LANGUAGE[/cyan]\n"
            "[bold]Info:[/bold] cstr-enum language-info [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )

    return 0


def handle_language_info_command(args: argparse.Namespace) -> int:
    """Show detailed information about a specific language."""
    if not _validate_language(args.language, silent=True):
        err_console.print(f"[red]✗ Language '{args.language}' is not supported[/red]")
        err_console.print("[dim]Use 'cstr-enum languages' to see available options[/dim]")
        return 1

    info = get_language_info(args.language)

    info_text = f"""[bold]Language:[/bold] {info['name']}
[bold]File Extension:[/bold] {info['file_extension']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(
            info_text,
            title=f"🔧 {info['name'].title()} Generator",
            border_style="green",
        )
    )

    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )

    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")

    for key, value in info["defaults"].items():
        config_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(config_table)

    examples_text = f"""Print generated code:
[cyan]cstr-enum generate -l {info['name']} constants.py[/cyan]

Generate to file:
[cyan]cstr-enum generate -l {info['name']} -o constants_cstr{info['file_extension']} constants.py[/cyan]

Verify a generated file in CI:
[cyan]cstr-enum generate -l {info['name']} -o constants_cstr{info['file_extension']} --check constants.py[/cyan]"""

    console.print()
    console.print(Panel(examples_text, title="💡 Usage Examples", border_style="blue"))

    return 0
