"""
Managed file error classes.

Provides a clear taxonomy of the failures a reconciliation pass can report.
An absent object is not an error: storage paths signal it with the builtin
FileNotFoundError and find() turns that into "no observed state".
"""
from __future__ import annotations


class ManagedFileError(Exception):
    """Base class for all managed file errors."""
    pass


class ConfigurationError(ManagedFileError):
    """
    The reconciler was pointed at something it cannot work with.

    Raised when:
    - An explicit base path cannot be parsed
    - A backend lacks a capability the desired state needs
    """
    pass


class InvalidBasePathError(ConfigurationError):
    """Explicit base path is malformed or uses an unsupported scheme."""

    def __init__(self, base: str, reason: str):
        super().__init__(f"error parsing ManagedFile Base {base!r}: {reason}")
        self.base = base


class UnsupportedBackendError(ConfigurationError):
    """Backend cannot express the requested operation."""
    pass


class DuplicateResourceError(ConfigurationError):
    """Two managed files map to the same Terraform resource name."""
    pass


class FieldValidationError(ManagedFileError, ValueError):
    """
    Desired state failed validation before any I/O.

    Attributes:
        field: Name of the offending field ("Name", "Location", "Contents")
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class RequiredFieldError(FieldValidationError):
    """A required field is missing."""

    def __init__(self, field: str):
        super().__init__(field, f"field is required: {field}")


class ImmutableFieldError(FieldValidationError):
    """A field that cannot change after creation was changed."""

    def __init__(self, field: str):
        super().__init__(field, f"field cannot be changed: {field}")


class AclPolicyError(ManagedFileError):
    """
    Requested access control violates backend policy.

    Raised when public access is requested on an in-memory path that has not
    been marked cluster-readable.
    """
    pass


class LifecycleViolationError(ManagedFileError):
    """
    The resource's lifecycle forbids the change convergence would make.

    Raised when an ExistsAndValidates or ExistsAndWarnIfChanges resource is
    missing, or an ExistsAndValidates resource differs from its desired state.
    """
    pass


class StorageError(ManagedFileError, OSError):
    """Storage I/O failed for a reason other than the object being absent."""
    pass


class ContentReadError(StorageError):
    """Desired contents could not be read."""
    pass


class StorageWriteError(StorageError):
    """
    Writing the object failed.

    Attributes:
        location: Location of the managed file relative to its base
    """

    def __init__(self, location: str, cause: BaseException):
        super().__init__(f"error creating ManagedFile {location!r}: {cause}")
        self.location = location


__all__ = [
    "ManagedFileError",
    "ConfigurationError",
    "InvalidBasePathError",
    "UnsupportedBackendError",
    "DuplicateResourceError",
    "FieldValidationError",
    "RequiredFieldError",
    "ImmutableFieldError",
    "AclPolicyError",
    "LifecycleViolationError",
    "StorageError",
    "ContentReadError",
    "StorageWriteError",
]
