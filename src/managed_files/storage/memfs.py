"""
In-memory storage backend.

Intended for tests and dry runs. Paths can report public-readability like a
real object store, but granting public access is only allowed below a path
that has been explicitly marked cluster-readable.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Set

from .base import PUBLIC_READ, ObjectAcl
from .uri import join_key

__all__ = ["MemFSContext", "MemFSPath"]

logger = logging.getLogger(__name__)


class MemFSContext:
    """
    Shared state of an in-memory filesystem.

    All MemFSPath objects built from the same context see the same objects.
    """

    def __init__(self) -> None:
        self._objects: Dict[str, bytes] = {}
        self._public: Set[str] = set()
        self._cluster_readable: Set[str] = set()

    def path(self, bucket: str, key: str = "") -> MemFSPath:
        """Build a path in this filesystem."""
        return MemFSPath(self, bucket, key)

    def clear(self) -> None:
        """Clear all stored data (test utility)."""
        self._objects.clear()
        self._public.clear()
        self._cluster_readable.clear()


class MemFSPath:
    """Path in a MemFSContext, addressed as memfs://bucket/key."""

    def __init__(self, context: MemFSContext, bucket: str, key: str = "") -> None:
        self._context = context
        self.bucket = bucket
        self.key = key.strip("/")

    @property
    def path(self) -> str:
        if self.key:
            return f"memfs://{self.bucket}/{self.key}"
        return f"memfs://{self.bucket}"

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"MemFSPath({self.path!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MemFSPath):
            return self._context is other._context and self.path == other.path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path)

    def join(self, *relative: str) -> MemFSPath:
        return MemFSPath(self._context, self.bucket, join_key(self.key, *relative, base=self.path))

    def read_file(self) -> bytes:
        try:
            return self._context._objects[self.path]
        except KeyError:
            raise FileNotFoundError(self.path) from None

    def write_file(self, data: bytes, acl: Optional[ObjectAcl]) -> None:
        self._context._objects[self.path] = bytes(data)
        if acl is not None and acl.request_acl == PUBLIC_READ.request_acl:
            self._context._public.add(self.path)
        else:
            self._context._public.discard(self.path)
        logger.debug(f"memfs wrote {len(data)} bytes to {self.path} (acl={acl})")

    def is_public(self) -> bool:
        if self.path not in self._context._objects:
            raise FileNotFoundError(self.path)
        return self.path in self._context._public

    def mark_cluster_readable(self) -> None:
        """Allow public access to be granted on this path and everything below it."""
        self._context._cluster_readable.add(self.path)

    def is_cluster_readable(self) -> bool:
        marked = self._context._cluster_readable
        candidate = self.path
        while True:
            if candidate in marked:
                return True
            head, sep, _ = candidate.rpartition("/")
            if not sep or head.endswith(":/"):
                return False
            candidate = head

    def public_read_acl(self) -> ObjectAcl:
        return PUBLIC_READ
