"""
Command-line interface for the driver source generator.

One subcommand per renderer family plus ``all``, which clears the output
tree and regenerates everything. Settings come from ``codegen.json`` or
the environment (see ``codegen.core.config.discover_config``).
"""

from __future__ import annotations

import argparse
from typing import Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .codegen import (
    FAMILY_ORDER,
    CodeGenerator,
    ConfigError,
    GenerationResult,
    GeneratorError,
    RegistryError,
    TemplateError,
    TemplateKind,
    create_default_registry,
)
from .codegen.core.config import discover_config, get_config_manager
from .logging_config import configure_logging, get_logger
from .metadata import MetadataError
from .utils import JSONLoaderError

logger = get_logger(__name__)

console = Console()

FAMILY_HELP = {
    "all": "Clear the output tree and regenerate every artifact",
    "proto-enums": "Render protocol enums into Proto/",
    "ast": "Render one AST class per term into Ast/",
    "global-options": "Render GlobalOptions into Model/",
    "exceptions": "Render the exception hierarchy into the output root",
    "optarg-enums": "Render optarg string enums into Model/",
}

# Failures that abort a run with exit status 1
RUN_ERRORS = (
    MetadataError,
    TemplateError,
    GeneratorError,
    RegistryError,
    ConfigError,
    JSONLoaderError,
    FileNotFoundError,
)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reql-codegen",
        description="Generate RethinkDB C# driver sources from protocol metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reql-codegen all
  reql-codegen ast
  REQL_CODEGEN_METADATA_DIR=./Metadata reql-codegen proto-enums
        """.strip(),
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    for family in ("all",) + FAMILY_ORDER:
        subparsers.add_parser(family, help=FAMILY_HELP[family])

    subparsers.add_parser("templates", help="List generic and specialized templates")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the CLI.

    Returns:
        Exit code (0 for success, 1 if any render failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(console=Console(stderr=True))

    if args.command == "templates":
        return _list_templates()

    try:
        config = discover_config()
        for warning in get_config_manager().validate_config(config):
            console.print(f"[yellow]⚠️ {warning}[/yellow]")

        generator = CodeGenerator(config)
        result = generator.run(args.command)

    except RUN_ERRORS as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        logger.debug("Generation aborted", exc_info=True)
        return 1
    except Exception as e:
        console.print(f"[red]✗ Unexpected error:[/red] {e}")
        logger.debug("Unexpected failure", exc_info=True)
        return 1

    _print_summary(result, config.output_dir)
    return 0


def _print_summary(result: GenerationResult, output_dir) -> None:
    """Print written artifacts per category and any warnings."""
    table = Table(
        title=f"📦 Generated into {output_dir}", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Category", style="bold green", no_wrap=True)
    table.add_column("Files", justify="right", style="cyan")
    table.add_column("Specialized", style="blue")

    by_category: dict = {}
    for artifact in result.artifacts:
        by_category.setdefault(artifact.category.value, []).append(artifact)

    for category, artifacts in by_category.items():
        specialized = [
            a.file_name for a in artifacts if a.template_name.startswith("specialized/")
        ]
        table.add_row(
            category.title(),
            str(len(artifacts)),
            ", ".join(specialized) if specialized else "[dim]none[/dim]",
        )

    console.print(table)

    for diagnostic in result.diagnostics:
        if diagnostic.level == "warning":
            console.print(f"[yellow]⚠️ {diagnostic.message}[/yellow]")

    console.print(f"✅ [green]{len(result.artifacts)} artifacts written[/green]")


def _list_templates() -> int:
    """Show the generic template and specializations of every kind."""
    registry = create_default_registry()

    table = Table(title="📋 Templates", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Kind", style="bold green", no_wrap=True)
    table.add_column("Generic", style="cyan")
    table.add_column("Specialized for", style="blue")

    for kind in TemplateKind:
        specializations = registry.list_specializations(kind)
        table.add_row(
            kind.value,
            registry.generic(kind).template_name,
            ", ".join(specializations) if specializations else "[dim]none[/dim]",
        )

    console.print(table)
    return 0
