"""sharedtable CLI - Main entry point."""

from typing import Annotated

import typer

import sharedtable
from sharedtable.cli.context import CLIContext

# Create main Typer app
app = typer.Typer(
    name="sharedtable",
    help="sharedtable CLI - Resolve name clashes between entity types sharing a table",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    dialect: Annotated[
        str | None,
        typer.Option(
            "--dialect",
            "-d",
            envvar="SHAREDTABLE_DIALECT",
            help="SQLAlchemy dialect whose identifier length limit applies (e.g. postgresql)",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every rename to stderr",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    cli_ctx = CLIContext(json_output=json_output, verbose=verbose, dialect=dialect)
    cli_ctx.configure_logging()

    # Store in Typer context for command access
    ctx.obj = cli_ctx


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"sharedtable v{sharedtable.__version__}")


# Register commands
from sharedtable.cli.commands import model

app.command(name="resolve")(model.resolve_command)
app.command(name="tables")(model.tables_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
