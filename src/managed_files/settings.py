"""
Settings and configuration for managed files.

Centralizes configuration values and provides validation with fail-fast behavior.
Loads settings from environment variables; feature flags are carried on the
settings object and passed explicitly, never read from process-wide state.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

__all__ = ["Settings", "create_settings_from_env", "KNOWN_FEATURE_FLAGS", "TERRAFORM_MANAGED_FILES"]

# Emit managed files as Terraform resources instead of writing them directly
TERRAFORM_MANAGED_FILES = "TerraformManagedFiles"

KNOWN_FEATURE_FLAGS = frozenset({TERRAFORM_MANAGED_FILES})


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for the managed file reconciler.

    Cluster Settings:
        config_base: Cluster-scoped default storage root (s3://, az://, memfs://, file://)
        feature_flags: Enabled feature flags (see KNOWN_FEATURE_FLAGS)

    S3 Settings:
        s3_region: AWS region for S3 clients
        s3_endpoint_url: Custom S3 endpoint (MinIO, localstack)
        s3_server_side_encryption: Request AES256 encryption on writes

    Azure Settings:
        az_connection_string: Azure storage connection string
        az_account: Azure storage account name
        az_key: Azure storage account key
        az_blob_endpoint: Custom Azure blob endpoint (for Azurite/private endpoints)
        ext_timeout_s: Object store operation timeout
    """
    config_base: Optional[str] = None
    feature_flags: FrozenSet[str] = field(default_factory=frozenset)

    s3_region: Optional[str] = None
    s3_endpoint_url: Optional[str] = None
    s3_server_side_encryption: bool = True

    az_connection_string: Optional[str] = None
    az_account: Optional[str] = None
    az_key: Optional[str] = None
    az_blob_endpoint: Optional[str] = None
    ext_timeout_s: float = 60.0

    def __post_init__(self):
        """Validate settings on construction."""
        if self.config_base is not None:
            if not re.match(r"^(s3|az|memfs|file)://.+$", self.config_base):
                raise ValueError(f"Invalid config_base format: {self.config_base}")

        unknown = set(self.feature_flags) - KNOWN_FEATURE_FLAGS
        if unknown:
            raise ValueError(f"Unknown feature flags: {', '.join(sorted(unknown))}")

        if self.s3_endpoint_url is not None:
            if not re.match(r"^https?://[a-zA-Z0-9.-]+(?::[0-9]+)?(?:/.*)?$", self.s3_endpoint_url):
                raise ValueError(f"Invalid s3_endpoint_url format: {self.s3_endpoint_url}")

        if self.ext_timeout_s <= 0:
            raise ValueError(f"ext_timeout_s must be positive, got {self.ext_timeout_s}")

        # Validate Azure auth: either connection string OR (account + key)
        has_conn_str = bool(self.az_connection_string)
        has_account_key = bool(self.az_account and self.az_key)

        if has_conn_str and has_account_key:
            raise ValueError("Specify either az_connection_string OR (az_account + az_key), not both")

        if self.az_account and not self.az_key:
            raise ValueError("az_account specified but az_key is missing")
        if self.az_key and not self.az_account:
            raise ValueError("az_key specified but az_account is missing")

    def feature_enabled(self, flag: str) -> bool:
        """Check whether a feature flag is enabled."""
        return flag in self.feature_flags


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        Cluster:
        - MANAGED_FILES_CONFIG_BASE (optional)
        - MANAGED_FILES_FEATURE_FLAGS (comma separated, e.g. "TerraformManagedFiles")

        S3:
        - MANAGED_FILES_S3_REGION (optional)
        - MANAGED_FILES_S3_ENDPOINT (optional)
        - MANAGED_FILES_S3_SSE (default: true)

        Azure:
        - AZURE_STORAGE_CONNECTION_STRING (optional)
        - AZURE_STORAGE_ACCOUNT (optional)
        - AZURE_STORAGE_KEY (optional)
        - MANAGED_FILES_AZURE_BLOB_ENDPOINT (optional, for Azurite/custom endpoints)
        - MANAGED_FILES_EXT_TIMEOUT (default: 60.0)

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    def str_to_bool(value: str) -> bool:
        return value.lower() in ('true', '1', 'yes', 'on')

    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        return float(value) if value else default

    flags_raw = os.getenv("MANAGED_FILES_FEATURE_FLAGS", "")
    feature_flags = frozenset(f.strip() for f in flags_raw.split(",") if f.strip())

    return Settings(
        config_base=os.getenv("MANAGED_FILES_CONFIG_BASE") or None,
        feature_flags=feature_flags,
        s3_region=os.getenv("MANAGED_FILES_S3_REGION"),
        s3_endpoint_url=os.getenv("MANAGED_FILES_S3_ENDPOINT"),
        s3_server_side_encryption=str_to_bool(os.getenv("MANAGED_FILES_S3_SSE", "true")),
        az_connection_string=os.getenv("AZURE_STORAGE_CONNECTION_STRING"),
        az_account=os.getenv("AZURE_STORAGE_ACCOUNT"),
        az_key=os.getenv("AZURE_STORAGE_KEY"),
        az_blob_endpoint=os.getenv("MANAGED_FILES_AZURE_BLOB_ENDPOINT"),
        ext_timeout_s=get_float("MANAGED_FILES_EXT_TIMEOUT", 60.0),
    )
