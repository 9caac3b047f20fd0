"""
Human-readable output formatting.

Centralizes CLI output formatting so commands stay thin.
"""
from __future__ import annotations

from typing import List

import typer

from ..delta import TaskResult
from .facade import ApplyResult

_SYMBOLS = {
    "create": "+",
    "update": "~",
    "unchanged": "=",
    "skipped": "!",
}


def _format_result(result: TaskResult) -> str:
    label = result.name or result.location or "<unnamed>"
    line = f"  {_SYMBOLS.get(result.action, '?')} {label}"
    if result.location and result.location != label:
        line += f" ({result.location})"
    if result.changed_fields:
        line += f": {', '.join(result.changed_fields)}"
    return line


def print_plan(results: List[TaskResult]) -> None:
    """Print the planned changes per managed file."""
    if not results:
        typer.echo("No managed files in manifest")
        return

    typer.echo("Planned changes:")
    for result in results:
        typer.echo(_format_result(result))

    pending = sum(1 for r in results if r.action in ("create", "update"))
    typer.echo(f"{pending} to change, {len(results) - pending} unchanged")


def print_apply_summary(result: ApplyResult) -> None:
    """Print what apply did."""
    for entry in result.results:
        typer.echo(_format_result(entry))

    typer.echo(f"Applied {len(result.changed)} of {len(result.results)} managed files")
    if result.terraform_path is not None:
        typer.echo(f"Terraform configuration written to {result.terraform_path}")
