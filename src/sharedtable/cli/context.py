"""CLI context management for shared options."""

import logging
import sys
from dataclasses import dataclass


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Holds output preferences and the dialect used to look up the maximum
    identifier length when a command does not pass one.
    """

    json_output: bool
    verbose: bool
    dialect: str | None = None

    def configure_logging(self) -> None:
        """Send log records to stderr so JSON output on stdout stays parseable."""
        logging.basicConfig(
            level=logging.DEBUG if self.verbose else logging.WARNING,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
