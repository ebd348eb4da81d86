"""CLI entry point."""

import typer

app = typer.Typer(
    name="codehealth",
    help="codehealth - Repeatable Codebase Health Scoring",
    add_completion=False,
    rich_markup_mode="rich",
)

# Import the command to register it
from .health import health as _health  # noqa: F401, E402


def main() -> None:
    app()


__all__ = ["app", "main"]
