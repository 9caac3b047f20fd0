"""
Local filesystem backend.

Plain read/write with atomic replacement. There are no object ACLs on a local
filesystem; any ACL passed to write_file is ignored.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .base import ObjectAcl
from .uri import normalize_location

__all__ = ["FSPath"]

logger = logging.getLogger(__name__)


class FSPath:
    """File on the local filesystem, addressed as file:///abs/path."""

    def __init__(self, location: Union[str, Path]) -> None:
        self.location = Path(location)

    @property
    def path(self) -> str:
        return f"file://{self.location.as_posix()}"

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"FSPath({self.path!r})"

    def join(self, *relative: str) -> FSPath:
        return FSPath(self.location.joinpath(*(normalize_location(r, self.path) for r in relative)))

    def read_file(self) -> bytes:
        return self.location.read_bytes()

    def write_file(self, data: bytes, acl: Optional[ObjectAcl]) -> None:
        self.location.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temp file in the same directory, then rename over the target
        temp_fd, temp_path = tempfile.mkstemp(
            suffix='.tmp',
            dir=self.location.parent,
            prefix=self.location.name + '.',
        )
        try:
            with os.fdopen(temp_fd, "wb") as f:
                f.write(data)
            os.replace(temp_path, self.location)
        except BaseException:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
        logger.debug(f"Wrote {len(data)} bytes to {self.path}")
