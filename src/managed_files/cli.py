"""
Managed Files CLI

Implements 2 CLI verbs with Operations facade integration:
- plan: Show which managed files would be created or updated
- apply: Converge managed files, directly or as Terraform output
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer

from .cli_context import CLIContext
from .models import Manifest
from .operations import Operations, OpsConfig, run_and_exit
from .operations.printers import print_apply_summary, print_plan

app = typer.Typer(name="managed-files", help="Managed Files CLI")


class Target(str, Enum):
    direct = "direct"
    terraform = "terraform"


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """Reconcile managed files in object storage."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def plan(
    manifest: Path = typer.Argument(..., help="Managed files manifest (YAML)"),
    base: Optional[str] = typer.Option(None, "--base", help="Storage root overriding the cluster config base"),
):
    """Show which managed files would change."""
    def _plan():
        ctx = CLIContext.from_env()
        ops = Operations(OpsConfig(base_override=base), settings=ctx.settings, storage=ctx.storage)
        print_plan(ops.plan(Manifest.from_yaml_file(manifest)))

    run_and_exit(_plan)


@app.command()
def apply(
    manifest: Path = typer.Argument(..., help="Managed files manifest (YAML)"),
    target: Target = typer.Option(Target.direct, "--target", help="Write directly or emit Terraform"),
    out: Path = typer.Option(Path("out/terraform"), "--out", help="Terraform output directory"),
    base: Optional[str] = typer.Option(None, "--base", help="Storage root overriding the cluster config base"),
    feature_flag: Optional[List[str]] = typer.Option(None, "--feature-flag", help="Enable a feature flag (repeatable)"),
):
    """Converge managed files to the manifest."""
    def _apply():
        ctx = CLIContext.from_env(feature_flag or ())
        config = OpsConfig(target=target.value, out_dir=str(out), base_override=base)
        ops = Operations(config, settings=ctx.settings, storage=ctx.storage)
        print_apply_summary(ops.apply(Manifest.from_yaml_file(manifest)))

    run_and_exit(_apply)


if __name__ == "__main__":
    app()
