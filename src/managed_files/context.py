"""
Reconciliation context.

Carries everything a reconciliation pass reads besides the desired state:
settings (including feature flags), cluster configuration, the storage
factory and the ACL policy. Passed explicitly to every phase.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .models import ClusterSpec
from .settings import Settings
from .storage.acl import AclPolicy, DefaultAclPolicy
from .storage.base import StoragePath
from .storage.factory import StorageContext


@dataclass
class ReconcileContext:
    """
    Shared context for one reconciliation run.

    cluster_config_base is the default storage root used by managed files
    that do not set an explicit base.
    """
    settings: Settings
    storage: StorageContext
    cluster: Optional[ClusterSpec] = None
    cluster_config_base: Optional[StoragePath] = None
    acl_policy: AclPolicy = field(default_factory=DefaultAclPolicy)

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        cluster: Optional[ClusterSpec] = None,
        storage: Optional[StorageContext] = None,
        acl_policy: Optional[AclPolicy] = None,
    ) -> ReconcileContext:
        """
        Build a context, resolving the cluster config base.

        The cluster's configBase wins over settings.config_base.

        Raises:
            ValueError: If the config base URI is invalid
        """
        if storage is None:
            storage = StorageContext(settings)

        base_uri = (cluster.config_base if cluster else None) or settings.config_base
        config_base = storage.build_path(base_uri) if base_uri else None

        return cls(
            settings=settings,
            storage=storage,
            cluster=cluster,
            cluster_config_base=config_base,
            acl_policy=acl_policy if acl_policy is not None else DefaultAclPolicy(),
        )


__all__ = ["ReconcileContext"]
