"""Model resolution commands."""

from typing import Annotated

import typer

from sharedtable.cli.context import CLIContext
from sharedtable.cli.output import OutputFormatter
from sharedtable.cli.parsing import read_json_file, write_json_file
from sharedtable.core.config import get_max_identifier_length
from sharedtable.core.types import ResolutionReport
from sharedtable.naming.convention import SharedTableConvention
from sharedtable.schema.builder import dump_model, load_model
from sharedtable.schema.model import SchemaModel

ModelFileArgument = Annotated[str, typer.Argument(help="Model document (JSON)")]
MaxLengthOption = Annotated[
    int | None,
    typer.Option(
        "--max-length",
        "-m",
        min=1,
        help="Maximum identifier length (overrides dialect and document)",
    ),
]


def _run(
    cli_ctx: CLIContext, model_file: str, max_length: int | None, strict: bool = False
) -> tuple[SchemaModel, ResolutionReport]:
    document = read_json_file(model_file)
    resolved_length = get_max_identifier_length(
        max_length, cli_ctx.dialect, document.get("max_identifier_length")
    )
    model = load_model(document)
    report = SharedTableConvention(resolved_length, strict=strict).process_model_finalizing(model)
    return model, report


def resolve_command(
    ctx: typer.Context,
    model_file: ModelFileArgument,
    max_length: MaxLengthOption = None,
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Write the resolved model to this file"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail when collisions between pinned names remain"),
    ] = False,
) -> None:
    """Resolve name clashes between entity types sharing a table."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        model, report = _run(cli_ctx, model_file, max_length, strict)
        if output:
            resolved = dump_model(model)
            resolved.max_identifier_length = report.max_identifier_length
            write_json_file(output, resolved.model_dump(mode="json"))
        formatter.print_report(report, output)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


def tables_command(
    ctx: typer.Context,
    model_file: ModelFileArgument,
    max_length: MaxLengthOption = None,
) -> None:
    """Show which entity types end up in which table."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        _, report = _run(cli_ctx, model_file, max_length)
        formatter.print_tables(report)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
