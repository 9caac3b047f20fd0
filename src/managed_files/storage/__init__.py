"""
Storage backends and capability interfaces for managed files.
"""
from .acl import AclPolicy, DefaultAclPolicy
from .base import (
    PUBLIC_READ,
    ClusterReadable,
    ObjectAcl,
    PublicAclGrantable,
    PublicReadable,
    StoragePath,
    TerraformRenderable,
)
from .factory import StorageContext
from .memfs import MemFSContext, MemFSPath

__all__ = [
    "AclPolicy",
    "DefaultAclPolicy",
    "PUBLIC_READ",
    "ClusterReadable",
    "ObjectAcl",
    "PublicAclGrantable",
    "PublicReadable",
    "StoragePath",
    "TerraformRenderable",
    "StorageContext",
    "MemFSContext",
    "MemFSPath",
]
