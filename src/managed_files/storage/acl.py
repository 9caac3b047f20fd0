"""
Cluster-wide ACL policy.

Used for every object that does not ask for public access.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from .base import ObjectAcl, PublicAclGrantable, StoragePath

if TYPE_CHECKING:
    from ..models import ClusterSpec

__all__ = ["AclPolicy", "DefaultAclPolicy"]

logger = logging.getLogger(__name__)


@runtime_checkable
class AclPolicy(Protocol):
    """Protocol for resolving the ACL of a non-public object."""

    def get_acl(self, path: StoragePath, cluster: Optional[ClusterSpec]) -> Optional[ObjectAcl]:
        ...


class DefaultAclPolicy:
    """
    Applies the cluster's default object ACL on backends that take canned ACLs.

    Returns None (store default) when the cluster sets no default or the
    backend has no per-object ACLs.
    """

    def get_acl(self, path: StoragePath, cluster: Optional[ClusterSpec]) -> Optional[ObjectAcl]:
        if cluster is None or not cluster.default_object_acl:
            return None
        if not isinstance(path, PublicAclGrantable):
            logger.debug(f"Ignoring default object ACL for {path.path}: backend has no object ACLs")
            return None
        return ObjectAcl(request_acl=cluster.default_object_acl)
