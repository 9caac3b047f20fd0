"""
Managed Files - declarative reconciliation of single objects in storage.
"""
from .context import ReconcileContext
from .delta import DirectTarget, TaskResult, compute_changes, plan_task, run_task
from .managed_file import ManagedFile, get_base_path
from .models import ClusterSpec, Lifecycle, ManagedFileChanges, ManagedFileSpec, ObservedState
from .settings import Settings
from .terraform import TerraformTarget

__version__ = "0.1.0"

__all__ = [
    "ReconcileContext",
    "DirectTarget",
    "TaskResult",
    "compute_changes",
    "plan_task",
    "run_task",
    "ManagedFile",
    "get_base_path",
    "ClusterSpec",
    "Lifecycle",
    "ManagedFileChanges",
    "ManagedFileSpec",
    "ObservedState",
    "Settings",
    "TerraformTarget",
]
