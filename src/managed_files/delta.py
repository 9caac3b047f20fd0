"""
Delta runner for managed files.

Runs the find -> diff -> check_changes -> render cycle for one managed file
against a render target, honouring the file's lifecycle.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from .context import ReconcileContext
from .errors import LifecycleViolationError, StorageWriteError
from .managed_file import ManagedFile
from .models import Lifecycle, ManagedFileChanges, ManagedFileSpec, ObservedState, contents_equal

__all__ = ["DirectTarget", "TaskResult", "compute_changes", "plan_task", "run_task"]

logger = logging.getLogger(__name__)

Action = Literal["create", "update", "unchanged", "skipped"]


class DirectTarget:
    """Render target that writes objects straight to storage."""

    name = "direct"

    def render(self, task: ManagedFile, context: ReconcileContext, actual, expected, changes) -> None:
        task.render(context, actual, expected, changes)


@dataclass(frozen=True)
class TaskResult:
    """Outcome of running one managed file."""
    name: Optional[str]
    location: Optional[str]
    action: Action
    changed_fields: Tuple[str, ...] = ()


def compute_changes(a: Optional[ObservedState], e: ManagedFileSpec) -> ManagedFileChanges:
    """
    Compute the fields of e that differ from a.

    Every set field counts as a change when there is no observed state.
    Contents are compared by bytes. public_acl is only compared when it is
    set on both sides, since backends without a public-readability query
    leave the observed value unset.
    """
    changes = ManagedFileChanges()

    for field in ("name", "lifecycle", "base", "location", "public_acl"):
        desired = getattr(e, field)
        if desired is None:
            continue
        if field == "public_acl" and a is not None and a.public_acl is None:
            continue
        if a is None or getattr(a, field) != desired:
            setattr(changes, field, desired)

    if e.contents is not None:
        if a is None or not contents_equal(a.contents, e.contents):
            changes.contents = e.contents

    return changes


def _decide(
    task: ManagedFile, context: ReconcileContext
) -> Tuple[TaskResult, Optional[ObservedState], ManagedFileChanges]:
    e = task.spec
    lifecycle = e.lifecycle

    if lifecycle == Lifecycle.IGNORE:
        logger.debug(f"Skipping ManagedFile {e.name!r}: lifecycle is Ignore")
        return TaskResult(e.name, e.location, "skipped"), None, ManagedFileChanges()

    a = task.find(context)
    changes = compute_changes(a, e)
    changed = tuple(changes.changed_fields())

    if a is not None and not changed:
        logger.debug(f"ManagedFile {e.name!r} is up to date")
        return TaskResult(e.name, e.location, "unchanged"), a, changes

    if lifecycle in (Lifecycle.EXISTS_AND_VALIDATES, Lifecycle.EXISTS_AND_WARN_IF_CHANGES):
        if a is None:
            raise LifecycleViolationError(
                f"lifecycle set to {lifecycle.value}, but ManagedFile {e.name!r} was not found"
            )
        if lifecycle == Lifecycle.EXISTS_AND_VALIDATES:
            raise LifecycleViolationError(
                f"lifecycle set to {lifecycle.value}, but ManagedFile {e.name!r} has changes: {', '.join(changed)}"
            )
        logger.warning(f"ManagedFile {e.name!r} has changes ({', '.join(changed)}) but lifecycle is {lifecycle.value}")
        return TaskResult(e.name, e.location, "skipped", changed), a, changes

    action: Action = "create" if a is None else "update"
    return TaskResult(e.name, e.location, action, changed), a, changes


def plan_task(task: ManagedFile, context: ReconcileContext) -> TaskResult:
    """
    Decide what run_task would do for one managed file, without rendering.

    Raises:
        LifecycleViolationError: If the lifecycle forbids the required change
        ManagedFileError: If the current state cannot be determined
    """
    result, _, _ = _decide(task, context)
    return result


def run_task(task: ManagedFile, context: ReconcileContext, target) -> TaskResult:
    """
    Converge one managed file.

    Args:
        task: Managed file to converge
        context: Reconciliation context
        target: DirectTarget or TerraformTarget

    Returns:
        TaskResult describing what was done

    Raises:
        LifecycleViolationError: If the lifecycle forbids the required change
        ManagedFileError: If validation or rendering fails
    """
    result, a, changes = _decide(task, context)
    if result.action not in ("create", "update"):
        return result

    e = task.spec
    task.check_changes(a, e, changes)

    try:
        target.render(task, context, a, e, changes)
    except StorageWriteError as err:
        if e.lifecycle == Lifecycle.WARN_IF_INSUFFICIENT_ACCESS and isinstance(err.__cause__, PermissionError):
            logger.warning(f"Insufficient access to write ManagedFile {e.name!r}: {err}")
            return TaskResult(e.name, e.location, "skipped", result.changed_fields)
        raise

    logger.info(
        f"ManagedFile {e.name!r}: {result.action} ({', '.join(result.changed_fields)}) via {target.name} target"
    )
    return result
