"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and the
storage factory, avoiding global state and enabling proper dependency injection.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Iterable, Optional

from .settings import Settings, create_settings_from_env
from .storage.factory import StorageContext


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Manages application-level dependencies (settings, storage factory) that
    are initialized once and shared across a CLI command execution.
    """
    settings: Settings
    _storage: Optional[StorageContext] = None

    @classmethod
    def from_env(cls, extra_feature_flags: Iterable[str] = ()) -> CLIContext:
        """
        Create CLI context from environment variables.

        Args:
            extra_feature_flags: Flags enabled on the command line, added to
                those from MANAGED_FILES_FEATURE_FLAGS

        Raises:
            ValueError: If the environment holds invalid settings or a flag is unknown
        """
        settings = create_settings_from_env()
        extra = frozenset(extra_feature_flags)
        if extra:
            settings = dataclasses.replace(settings, feature_flags=settings.feature_flags | extra)
        return cls(settings=settings)

    @property
    def storage(self) -> StorageContext:
        """Get or create the storage factory (lazy initialization)."""
        if self._storage is None:
            self._storage = StorageContext(self.settings)
        return self._storage
