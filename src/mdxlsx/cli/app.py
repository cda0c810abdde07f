"""CLI entrypoint for :mod:`mdxlsx`.

Exposes the mdxlsx CLI with:

- `convert` - convert a markdown pipe table to an Excel workbook.
- `version` - print the package version.
"""

from __future__ import annotations

import typer

from mdxlsx import __version__
from mdxlsx.cli.convert import convert_command


app = typer.Typer(
    help=(
        "mdxlsx - markdown table to Excel converter.\n\n"
        "## Quick Start\n\n"
        "```bash\n"
        "mdxlsx convert \\\n"
        "    --input life_table.md \\\n"
        "    --output life_table \\\n"
        "    --type 'Age(x)=integer' --type q_x=numeric\n"
        "```\n"
    ),
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

app.command("convert")(convert_command)


@app.command("version")
def version_command() -> None:
    """Print the package version."""
    typer.echo(__version__)


def main() -> None:
    """Entrypoint used by console scripts and `python -m mdxlsx`."""
    app()


__all__ = ["app", "main"]
