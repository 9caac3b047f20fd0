"""
Operations Facade - Application service layer.

Provides a clean interface between CLI and the reconciler, centralizing
command orchestration and configuration while keeping CLI commands thin
and testable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional

from ..context import ReconcileContext
from ..delta import DirectTarget, TaskResult, plan_task, run_task
from ..managed_file import ManagedFile
from ..models import Manifest
from ..settings import Settings
from ..storage.factory import StorageContext
from ..terraform import TerraformTarget

logger = logging.getLogger(__name__)

TargetName = Literal["direct", "terraform"]


@dataclass(frozen=True)
class OpsConfig:
    """
    Configuration for Operations facade.

    Attributes:
        target: "direct" writes objects; "terraform" emits declarations
        out_dir: Where Terraform output is written
        base_override: Storage root replacing the cluster config base
    """
    target: TargetName = "direct"
    out_dir: str = "out/terraform"
    base_override: Optional[str] = None


@dataclass
class ApplyResult:
    """Results of an apply run."""
    results: List[TaskResult] = field(default_factory=list)
    terraform_path: Optional[Path] = None

    @property
    def changed(self) -> List[TaskResult]:
        return [r for r in self.results if r.action in ("create", "update")]


class Operations:
    """
    Application service facade for CLI operations.

    Each method builds a ReconcileContext from the manifest's cluster section
    and runs the managed files in manifest order, stopping at the first
    error. Exceptions bubble up for central exit-code mapping.
    """

    def __init__(self, config: OpsConfig, settings: Optional[Settings] = None,
                 storage: Optional[StorageContext] = None):
        self.cfg = config

        if settings is None:
            from ..settings import create_settings_from_env
            settings = create_settings_from_env()
        self.settings = settings
        self.storage = storage if storage is not None else StorageContext(settings)

    def _context(self, manifest: Manifest) -> ReconcileContext:
        context = ReconcileContext.create(self.settings, cluster=manifest.cluster, storage=self.storage)
        if self.cfg.base_override:
            context.cluster_config_base = self.storage.build_path(self.cfg.base_override)
        return context

    def plan(self, manifest: Manifest) -> List[TaskResult]:
        """
        Report what apply would do, without rendering anything.

        Lifecycle is honoured as in apply: Ignore files are reported as
        skipped, and a lifecycle violation raises here as it would there.

        Returns:
            One TaskResult per file with action create, update, unchanged or skipped
        """
        context = self._context(manifest)
        return [plan_task(ManagedFile(spec), context) for spec in manifest.files]

    def apply(self, manifest: Manifest) -> ApplyResult:
        """
        Converge every managed file in the manifest.

        With the terraform target, the collected declarations are written to
        cfg.out_dir once all files have been processed.
        """
        context = self._context(manifest)
        target = TerraformTarget() if self.cfg.target == "terraform" else DirectTarget()

        result = ApplyResult()
        for spec in manifest.files:
            result.results.append(run_task(ManagedFile(spec), context, target))

        if isinstance(target, TerraformTarget) and target.writer.resources:
            result.terraform_path = target.finish(self.cfg.out_dir)

        return result
