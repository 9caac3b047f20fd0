"""
Data models for managed file reconciliation.

These Pydantic models carry the desired state of a managed file, the state
observed in storage, and the delta between them.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .resources import BytesResource, FileResource, Resource, StringResource, resource_as_bytes


class Lifecycle(str, Enum):
    """Whether convergence may create or modify a resource."""
    SYNC = "Sync"
    IGNORE = "Ignore"
    WARN_IF_INSUFFICIENT_ACCESS = "WarnIfInsufficientAccess"
    EXISTS_AND_VALIDATES = "ExistsAndValidates"
    EXISTS_AND_WARN_IF_CHANGES = "ExistsAndWarnIfChanges"


class ClusterSpec(BaseModel):
    """The slice of cluster configuration the reconciler reads."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Cluster name")
    config_base: Optional[str] = Field(
        default=None, alias="configBase", description="Default storage root for managed files"
    )
    default_object_acl: Optional[str] = Field(
        default=None, alias="defaultObjectACL", description="Canned ACL for non-public objects"
    )


class ManagedFileSpec(BaseModel):
    """
    Desired state of a managed file.

    public_acl is tri-state: None means "not specified", which is distinct
    from False ("must not be world-readable").
    """
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    name: Optional[str] = Field(default=None, description="Stable identifier, immutable once the object exists")
    lifecycle: Lifecycle = Field(default=Lifecycle.SYNC, description="Convergence policy")
    base: Optional[str] = Field(default=None, description="Storage root; cluster config base when unset")
    location: Optional[str] = Field(default=None, description="Path relative to the storage root")
    contents: Optional[Any] = Field(default=None, description="Resource producing the file bytes")
    public_acl: Optional[bool] = Field(default=None, alias="publicACL", description="Object is world-readable")

    @field_validator("contents", mode="before")
    @classmethod
    def coerce_contents(cls, v):
        """Accept text or bytes as shorthand for an in-memory resource."""
        if v is None:
            return v
        if isinstance(v, str):
            return StringResource(v)
        if isinstance(v, (bytes, bytearray)):
            return BytesResource(bytes(v))
        if not isinstance(v, Resource):
            raise ValueError(f"contents must be a resource, str or bytes, got {type(v).__name__}")
        return v


class ObservedState(ManagedFileSpec):
    """
    State of a managed file as found in storage.

    contents holds the bytes actually read. public_acl is populated only for
    backends that can report public-readability. lifecycle is copied from the
    desired spec, since it is not a storage-level property.
    """
    pass


class ManagedFileChanges(BaseModel):
    """
    Delta between observed and desired state.

    Each field is None when unchanged and carries the desired value when changed.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: Optional[str] = None
    lifecycle: Optional[Lifecycle] = None
    base: Optional[str] = None
    location: Optional[str] = None
    contents: Optional[Any] = None
    public_acl: Optional[bool] = None

    def changed_fields(self) -> List[str]:
        """Names of the fields that differ, in declaration order."""
        return [name for name in type(self).model_fields if getattr(self, name) is not None]

    def is_empty(self) -> bool:
        return not self.changed_fields()


def contents_equal(a: Optional[Resource], b: Optional[Resource]) -> bool:
    """Compare two resources by their materialized bytes."""
    if a is None or b is None:
        return a is b
    return resource_as_bytes(a) == resource_as_bytes(b)


class Manifest(BaseModel):
    """
    Managed files manifest loaded from YAML.

    Example:
        cluster:
          name: dev.example.com
          configBase: s3://state-store/dev.example.com
        files:
          - name: cluster-completed.spec
            location: cluster-completed.spec
            contentsFile: ./cluster.yaml
            publicACL: false
    """
    cluster: Optional[ClusterSpec] = Field(default=None, description="Cluster settings")
    files: List[ManagedFileSpec] = Field(default_factory=list, description="Managed files")

    @classmethod
    def from_yaml_file(cls, path: Path) -> Manifest:
        """
        Load a manifest, resolving contentsFile entries relative to it.

        Raises:
            FileNotFoundError: If the manifest does not exist
            ValueError: If the manifest is malformed
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Manifest not found: {path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Manifest must be a mapping: {path}")

        for entry in data.get("files") or []:
            if isinstance(entry, dict) and "contentsFile" in entry:
                if "contents" in entry:
                    raise ValueError(f"File {entry.get('name')!r} sets both contents and contentsFile")
                entry["contents"] = FileResource(path.parent / entry.pop("contentsFile"))

        return cls.model_validate(data)


__all__ = [
    "Lifecycle",
    "ClusterSpec",
    "ManagedFileSpec",
    "ObservedState",
    "ManagedFileChanges",
    "Manifest",
    "contents_equal",
]
