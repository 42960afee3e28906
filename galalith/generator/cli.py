"""Command-line interface for galalith code generation."""

from __future__ import annotations

import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from galalith.generator.analysis import sub_protocol_ids
from galalith.generator.errors import GeneratorError
from galalith.generator.parser import load_registry_file
from galalith.generator.paths import capitalized_path
from galalith.generator.targets import GENERATORS, generator_for, languages
from galalith.generator.types import Registry


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every rendered file")
def cli(verbose: bool) -> None:
    """Galalith protocol code generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command()
@click.option(
    "--language", "-l", required=True, help=f"Target language ({', '.join(languages())})"
)
@click.option("--input", "-i", "input_file", required=True, help="Input registry file (JSON)")
@click.option("--output", "-o", "output_path", required=True, help="Output directory")
@click.option(
    "--no-clean",
    "no_clean",
    is_flag=True,
    default=False,
    help="Keep files from a previous run in the output directory",
)
def gen(language: str, input_file: str, output_path: str, no_clean: bool) -> None:
    """Generate protocol code from a registry file."""
    if language not in GENERATORS:
        print(f"Unknown language: {language}")
        sys.exit(1)

    generator = generator_for(language)
    try:
        registry = load_registry_file(input_file)
        output_root = generator.init(output_path, clean=not no_clean).output_root
        written = generator.generate(registry)
    except (GeneratorError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        generator.clear()

    print(f"Generated {len(written)} files in {output_root}")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input registry file (JSON)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display the messages of a registry and their dependencies."""
    try:
        registry = load_registry_file(input_file)
        rows = _message_rows(registry)
    except (GeneratorError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if output_json:
        print(json.dumps({"messages": rows}, indent=2))
    else:
        _output_plain(rows)


def _message_rows(registry: Registry) -> list[dict]:
    return [
        {
            "id": registration.protocol_id,
            "name": registration.name,
            "path": capitalized_path(registration),
            "fields": [
                {
                    "name": field.name,
                    "type": field.descriptor.canonical,
                    "compatible": field.compatible,
                }
                for field in registration.fields
            ],
            "dependencies": sub_protocol_ids(registry, registration.protocol_id),
        }
        for registration in registry
    ]


def _output_plain(rows: list[dict]) -> None:
    """Output registry info using rich text formatting."""
    console = Console()

    console.print("[bold cyan]Messages[/bold cyan]")
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("ID", style="green", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Path", style="dim")
    table.add_column("Fields", style="yellow")
    table.add_column("Depends on", style="dim")

    for row in rows:
        fields = ", ".join(
            f"{f['name']}: {f['type']}{' (compatible)' if f['compatible'] else ''}"
            for f in row["fields"]
        )
        table.add_row(
            str(row["id"]),
            row["name"],
            row["path"],
            fields,
            ", ".join(str(d) for d in row["dependencies"]),
        )

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
