"""
Content resources for managed files.

A resource produces the bytes a managed file should hold. It can be opened as
a stream (for Terraform assets) or materialized in full (for direct writes).
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Protocol, Union, runtime_checkable

__all__ = [
    "Resource",
    "BytesResource",
    "StringResource",
    "FileResource",
    "resource_as_bytes",
    "resource_as_string",
]


@runtime_checkable
class Resource(Protocol):
    """Protocol for content producers."""

    def open(self) -> BinaryIO:
        """
        Open the content as a readable binary stream.

        Raises:
            OSError: If the content cannot be opened
        """
        ...

    def materialize(self) -> bytes:
        """
        Read the full content.

        Raises:
            OSError: If the content cannot be read
        """
        ...


class BytesResource:
    """Resource backed by an in-memory byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def open(self) -> BinaryIO:
        return io.BytesIO(self._data)

    def materialize(self) -> bytes:
        return self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BytesResource):
            return self._data == other._data
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return f"BytesResource({len(self._data)} bytes)"


class StringResource(BytesResource):
    """Resource backed by text, encoded as UTF-8."""

    def __init__(self, text: str) -> None:
        super().__init__(text.encode("utf-8"))


class FileResource:
    """
    Resource backed by a local file.

    The file is read lazily: a missing file surfaces as FileNotFoundError
    when the resource is opened, not when it is constructed.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def open(self) -> BinaryIO:
        return open(self.path, "rb")

    def materialize(self) -> bytes:
        return self.path.read_bytes()

    def __repr__(self) -> str:
        return f"FileResource({str(self.path)!r})"


def resource_as_bytes(resource: Resource) -> bytes:
    """Materialize a resource into bytes."""
    return resource.materialize()


def resource_as_string(resource: Resource) -> str:
    """Materialize a resource and decode it as UTF-8."""
    return resource_as_bytes(resource).decode("utf-8")
