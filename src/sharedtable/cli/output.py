"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sharedtable.core.types import ResolutionReport
from sharedtable.exceptions import SharedTableError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_table(
        self,
        title: str,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        """Print data as Rich table or JSON array.

        Args:
            title: Table title
            data: List of row dictionaries
            columns: Column names to display
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            table = Table(title=title, show_header=True, header_style="bold magenta")
            for col in columns:
                table.add_column(col)
            for row in data:
                table.add_row(*[str(row.get(col) or "") for col in columns])
            console.print(table)

    def print_report(self, report: ResolutionReport, output_path: str | None = None) -> None:
        """Print the outcome of a resolution run.

        Args:
            report: Report returned by the convention
            output_path: Where the resolved model was written, if anywhere
        """
        if self.json_mode:
            data = report.model_dump()
            if output_path:
                data["output"] = output_path
            print(json.dumps(data, default=str, indent=2))
            return

        console.print(f"\n[bold]Max identifier length:[/bold] {report.max_identifier_length}")
        self._print_tables(report)

        if report.changes:
            changes_table = Table(
                title=f"Renames ({len(report.changes)})",
                show_header=True,
                header_style="bold cyan",
            )
            for col in ("Kind", "Table", "Entity Type", "Member", "Old Name", "New Name"):
                changes_table.add_column(col)
            for change in report.changes:
                changes_table.add_row(
                    str(change.kind),
                    change.table,
                    change.entity_type,
                    change.member or "",
                    change.old_name,
                    change.new_name,
                )
            console.print(changes_table)
        else:
            console.print("✓ No renames needed", style="green")

        if report.collisions:
            lines = [
                f"{c.kind} '{c.name}' on {c.table} ({', '.join(c.entity_types)})"
                for c in report.collisions
            ]
            console.print(
                Panel(
                    "\n".join(lines),
                    title="[yellow]Unresolved collisions (pinned names)[/yellow]",
                    border_style="yellow",
                )
            )

        if output_path:
            console.print(f"Resolved model written to {output_path}", style="dim")

    def print_tables(self, report: ResolutionReport) -> None:
        """Print the table partition only."""
        if self.json_mode:
            print(json.dumps([t.model_dump() for t in report.tables], indent=2))
        else:
            self._print_tables(report)

    def _print_tables(self, report: ResolutionReport) -> None:
        self.print_table(
            f"Tables ({len(report.tables)})",
            [
                {
                    "Table": t.name,
                    "Schema": t.table_schema,
                    "Entity Types": ", ".join(t.entity_types),
                }
                for t in report.tables
            ],
            ["Table", "Schema", "Entity Types"],
        )

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, SharedTableError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            # For SharedTableError, include context if available
            if isinstance(error, SharedTableError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)
