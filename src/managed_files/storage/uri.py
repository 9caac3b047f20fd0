"""
URI parsing utilities for storage paths.

Provides consistent parsing and validation of storage URIs across the
supported backends (S3, Azure, in-memory, local filesystem).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
import re


__all__ = ["ParsedURI", "parse_storage_uri", "join_key", "normalize_location"]

Scheme = Literal["s3", "az", "memfs", "file"]


@dataclass(frozen=True)
class ParsedURI:
    """
    Parsed components of a storage URI.

    Attributes:
        scheme: Storage provider scheme (s3, az, memfs, file)
        container_or_bucket: Bucket, container or memfs namespace; empty for file://
        key: Object key within the bucket, or absolute path for file://
        original: Original URI string for error messages
    """
    scheme: Scheme
    container_or_bucket: str
    key: str
    original: str


def parse_storage_uri(uri: str) -> ParsedURI:
    """
    Parse and validate a storage URI.

    Accepts URIs in the form {s3|az|memfs}://bucket[/key] or file:///abs/path.
    Unlike object URIs, a base may name just a bucket, so the key may be empty.

    Validation:
    - Rejects URIs containing ".." (path traversal)
    - Rejects URIs with backslashes (non-POSIX paths)
    - Rejects empty bucket/container names
    - Rejects file:// URIs that are not absolute

    Args:
        uri: Storage URI to parse

    Returns:
        ParsedURI with validated components

    Raises:
        ValueError: If URI format is invalid or contains unsafe patterns

    Examples:
        >>> parse_storage_uri("s3://state-store/cluster.example.com")
        ParsedURI(scheme='s3', container_or_bucket='state-store', key='cluster.example.com', original='...')

        >>> parse_storage_uri("file:///var/lib/state")
        ParsedURI(scheme='file', container_or_bucket='', key='/var/lib/state', original='...')
    """
    if not uri:
        raise ValueError("URI cannot be empty")

    if ".." in uri:
        raise ValueError(f"URI contains path traversal: {uri}")

    if "\\" in uri:
        raise ValueError(f"URI contains backslashes (use forward slashes): {uri}")

    match = re.match(r"^(s3|az|memfs|file)://(.*)$", uri)
    if not match:
        raise ValueError(f"Invalid URI format, expected scheme://bucket/key: {uri}")

    scheme, remainder = match.groups()

    if scheme == "file":
        if not remainder.startswith("/"):
            raise ValueError(f"file:// URI must hold an absolute path: {uri}")
        return ParsedURI(scheme="file", container_or_bucket="", key=remainder.rstrip("/") or "/", original=uri)

    if remainder.startswith("/"):
        raise ValueError(f"URI path cannot start with '/': {uri}")

    bucket, _, key = remainder.partition("/")
    if not bucket:
        raise ValueError(f"Container/bucket name cannot be empty: {uri}")

    return ParsedURI(
        scheme=scheme,  # type: ignore  # We validated it's one of the literals
        container_or_bucket=bucket,
        key=key.strip("/"),
        original=uri,
    )


def normalize_location(location: str, base: str = "") -> str:
    """
    Check a managed file location against the base it is joined onto.

    Empty and "." segments are dropped, so "config//a.yaml" and
    "./config/a.yaml" both address "config/a.yaml".

    Raises:
        ValueError: If the location is absolute, climbs out of base with
            "..", uses backslashes, or addresses base itself
    """
    if location.startswith("/"):
        raise ValueError(f"location {location!r} is absolute; it must be relative to {base!r}")
    if "\\" in location:
        raise ValueError(f"location {location!r} contains a backslash")

    segments = [s for s in location.split("/") if s not in ("", ".")]
    if ".." in segments:
        raise ValueError(f"location {location!r} would escape {base!r}")
    if not segments:
        raise ValueError(f"location {location!r} addresses {base!r} itself")
    return "/".join(segments)


def join_key(key: str, *relative: str, base: str = "") -> str:
    """
    Join relative locations onto an object key.

    base only labels error messages; it defaults to the key.

    Raises:
        ValueError: If a relative part is not a valid location
    """
    label = base or key
    parts = [key.strip("/")] + [normalize_location(r, label) for r in relative]
    return "/".join(p for p in parts if p)
