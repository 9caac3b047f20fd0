"""
Azure Blob Storage backend.

Blob containers carry access control at the container level only, so this
backend implements plain read/write and none of the ACL or Terraform
capabilities. Requests for a public object on an az:// path are rejected by
the reconciler.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from ..settings import Settings
from .base import ObjectAcl
from .uri import join_key

__all__ = ["AzureBlobPath"]

logger = logging.getLogger(__name__)


class AzureBlobPath:
    """
    Blob in an Azure storage container, addressed as az://container/blob.

    Uses azure-storage-blob SDK with connection string or account+key authentication.
    Supports custom endpoints for Azurite and private Azure clouds.
    """

    def __init__(self, container: str, blob: str = "", *, settings: Settings) -> None:
        """
        Initialize Azure path with settings.

        Raises:
            ValueError: If Azure authentication is not properly configured
        """
        self.container = container
        self.blob = blob.strip("/")
        self._settings = settings
        self._validate_azure_auth()

    def _validate_azure_auth(self) -> None:
        """Validate Azure authentication configuration."""
        has_conn_str = bool(self._settings.az_connection_string)
        has_account_key = bool(self._settings.az_account and self._settings.az_key)

        if not has_conn_str and not has_account_key:
            raise ValueError("Azure authentication not configured: need AZURE_STORAGE_CONNECTION_STRING or (AZURE_STORAGE_ACCOUNT + AZURE_STORAGE_KEY)")

    @property
    def path(self) -> str:
        if self.blob:
            return f"az://{self.container}/{self.blob}"
        return f"az://{self.container}"

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"AzureBlobPath({self.path!r})"

    def join(self, *relative: str) -> AzureBlobPath:
        return AzureBlobPath(self.container, join_key(self.blob, *relative, base=self.path), settings=self._settings)

    def _get_blob_client(self):
        """
        Get Azure blob client for this path.

        Connection patterns:
        1. Connection string, optionally with AZURE_BLOB_ENDPOINT overriding the
           endpoint (account name taken from the connection string)
        2. Account+key against https://{account}.blob.core.windows.net, or
           {endpoint}/{account} when a custom endpoint is set
        """
        try:
            from azure.storage.blob import BlobServiceClient
        except ImportError:
            raise ImportError("azure-storage-blob package required for Azure storage")

        settings = self._settings
        options = dict(
            connection_timeout=settings.ext_timeout_s,
            retry_total=5,
            retry_backoff_factor=0.4,
        )

        if settings.az_connection_string:
            account_match = re.search(r'AccountName=([^;]+)', settings.az_connection_string)
            if settings.az_blob_endpoint and account_match:
                endpoint_url = f"{settings.az_blob_endpoint.rstrip('/')}/{account_match.group(1)}"
                service_client = BlobServiceClient(account_url=endpoint_url, credential=None, **options)
            else:
                service_client = BlobServiceClient.from_connection_string(settings.az_connection_string, **options)
        else:
            if settings.az_blob_endpoint:
                account_url = f"{settings.az_blob_endpoint.rstrip('/')}/{settings.az_account}"
            else:
                account_url = f"https://{settings.az_account}.blob.core.windows.net"
            service_client = BlobServiceClient(account_url=account_url, credential=settings.az_key, **options)

        return service_client.get_blob_client(container=self.container, blob=self.blob)

    def read_file(self) -> bytes:
        """
        Read the blob.

        Raises:
            FileNotFoundError: If blob does not exist
            OSError: For other Azure/network errors
        """
        try:
            from azure.core.exceptions import ResourceNotFoundError
        except ImportError:
            raise ImportError("azure-storage-blob package required for Azure storage")

        blob_client = self._get_blob_client()

        try:
            return blob_client.download_blob().readall()
        except ResourceNotFoundError:
            raise FileNotFoundError(f"Blob not found: {self.path}")
        except Exception as e:
            raise OSError(f"Azure blob download error: {e}")

    def write_file(self, data: bytes, acl: Optional[ObjectAcl]) -> None:
        """
        Upload the blob, replacing any existing one.

        Blobs inherit their container's access level; an ACL carrying a
        canned request is logged and otherwise ignored.

        Raises:
            OSError: For Azure/network errors
        """
        if acl is not None and acl.request_acl:
            logger.warning(f"Ignoring object ACL {acl.request_acl!r} for {self.path}: Azure blobs inherit container access")

        blob_client = self._get_blob_client()
        try:
            blob_client.upload_blob(data, overwrite=True)
        except Exception as e:
            raise OSError(f"Azure blob upload error: {e}")
