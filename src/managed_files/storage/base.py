"""
Storage interfaces for managed files.

These protocols define the boundary between the reconciler and storage
implementations. Every path implements StoragePath; the optional capabilities
below are implemented only by the backends that support them, and callers
check for them with isinstance() before using them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..terraform import TerraformWriter


@dataclass(frozen=True)
class ObjectAcl:
    """
    Access control to apply when writing an object.

    Attributes:
        request_acl: Canned ACL sent with the write request ("public-read",
            "bucket-owner-full-control", ...). None keeps the store default.
    """
    request_acl: Optional[str] = None


PUBLIC_READ = ObjectAcl(request_acl="public-read")


__all__ = [
    "ObjectAcl",
    "PUBLIC_READ",
    "StoragePath",
    "PublicReadable",
    "ClusterReadable",
    "PublicAclGrantable",
    "TerraformRenderable",
]


@runtime_checkable
class StoragePath(Protocol):
    """Protocol every storage path implements."""

    @property
    def path(self) -> str:
        """Full URI of this path, for messages."""
        ...

    def join(self, *relative: str) -> StoragePath:
        """Return a child path."""
        ...

    def read_file(self) -> bytes:
        """
        Read the whole object.

        Raises:
            FileNotFoundError: If the object does not exist
            OSError: For other I/O errors
        """
        ...

    def write_file(self, data: bytes, acl: Optional[ObjectAcl]) -> None:
        """
        Replace the object with data.

        Raises:
            OSError: For I/O errors
        """
        ...


@runtime_checkable
class PublicReadable(Protocol):
    """Backend can report whether an object is world-readable."""

    def is_public(self) -> bool:
        ...


@runtime_checkable
class ClusterReadable(Protocol):
    """Backend carries a cluster-readable safety mark on its paths."""

    def is_cluster_readable(self) -> bool:
        ...


@runtime_checkable
class PublicAclGrantable(Protocol):
    """Backend can grant per-object public read access."""

    def public_read_acl(self) -> ObjectAcl:
        ...


@runtime_checkable
class TerraformRenderable(Protocol):
    """Backend can be expressed as a Terraform resource."""

    def render_terraform(
        self,
        writer: TerraformWriter,
        name: str,
        data: BinaryIO,
        acl: Optional[ObjectAcl],
    ) -> None:
        ...
