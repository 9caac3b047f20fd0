"""
Storage path factory.

Builds the right StoragePath implementation for a storage URI.
"""
from __future__ import annotations

from typing import Any, Optional

from ..settings import Settings
from .azure_blob import AzureBlobPath
from .base import StoragePath
from .fs import FSPath
from .memfs import MemFSContext
from .s3 import S3Path
from .uri import parse_storage_uri

__all__ = ["StorageContext"]


class StorageContext:
    """
    Builds storage paths from URIs.

    Holds the state shared by paths of one reconciliation run: the in-memory
    filesystem and an optional injected S3 client.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        memfs: Optional[MemFSContext] = None,
        s3_client: Any = None,
    ) -> None:
        self.settings = settings
        self.memfs = memfs if memfs is not None else MemFSContext()
        self._s3_client = s3_client

    def build_path(self, uri: str) -> StoragePath:
        """
        Build a storage path for a URI.

        Args:
            uri: s3://bucket/key, az://container/blob, memfs://ns/key or file:///path

        Returns:
            StoragePath for the URI scheme

        Raises:
            ValueError: For invalid URIs or incomplete backend configuration
        """
        parsed = parse_storage_uri(uri)

        if parsed.scheme == "s3":
            return S3Path(parsed.container_or_bucket, parsed.key, settings=self.settings, client=self._s3_client)
        elif parsed.scheme == "az":
            return AzureBlobPath(parsed.container_or_bucket, parsed.key, settings=self.settings)
        elif parsed.scheme == "memfs":
            return self.memfs.path(parsed.container_or_bucket, parsed.key)
        elif parsed.scheme == "file":
            return FSPath(parsed.key)
        else:
            # This shouldn't happen since parse_storage_uri validates schemes
            raise ValueError(f"Unsupported URI scheme: {parsed.scheme}")
