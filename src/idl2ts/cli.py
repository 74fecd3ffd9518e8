"""
idl2ts command line.

    idl2ts gen [--config idl2ts.toml] [--project-root .]
    idl2ts parse path/to/file.thrift [--no-revise-tail-comment]
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ._version import get_version
from .core.errors import Idl2TsError, ParseError
from .core.parser import parse
from .generator.client import gen_client
from .generator.options import DEFAULT_CONFIG_FILE, load_api_config

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="""idl2ts - TypeScript API clients from Thrift and Protobuf IDL

Commands:
  • gen: generate clients for every [[api]] table of idl2ts.toml
  • parse: print the unified document of one IDL file as JSON
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"idl2ts {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """idl2ts CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command(name="gen")
def gen_command(
    config: str = typer.Option(DEFAULT_CONFIG_FILE, "--config", "-c", help="Path to idl2ts.toml"),
    project_root: str | None = typer.Option(
        None, "--project-root", "-p", help="Root for relative paths (defaults to the config's directory)"
    ),
) -> None:
    """
    Generate TypeScript clients for every [[api]] table of the project config.
    """
    config_path = Path(config).resolve()
    root = Path(project_root).resolve() if project_root else config_path.parent

    table = Table(title="Generated clients")
    table.add_column("Output")
    table.add_column("Documents", justify="right")
    table.add_column("APIs", justify="right")
    table.add_column("Files", justify="right")

    try:
        for api_config in load_api_config(config_path):
            options = api_config.to_options(root)
            result = gen_client(options)
            table.add_row(
                str(options.output_dir),
                str(len(result.documents)),
                str(len(result.apis)),
                str(len(result.files_created)),
            )
    except ParseError as e:
        err_console.print(f"[red]Parse error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)
    except Idl2TsError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)

    console.print(table)


@app.command(name="parse")
def parse_command(
    file: Path = typer.Argument(..., help="Thrift or Protobuf file"),
    revise_tail_comment: bool = typer.Option(
        True,
        "--revise-tail-comment/--no-revise-tail-comment",
        help="Fold same-line trailing comments into the preceding declaration",
    ),
) -> None:
    """
    Print the unified document of one IDL file as JSON.
    """
    try:
        document = parse(file, revise_tail_comment=revise_tail_comment)
    except Idl2TsError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)
    typer.echo(document.model_dump_json(indent=2))


def main() -> None:
    app(standalone_mode=True)


if __name__ == "__main__":
    main()
