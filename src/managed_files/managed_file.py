"""
Managed file reconciliation.

Implements the three reconciliation phases for a single stored object:

- find: read the object and its public-readability from storage
- check_changes: reject illegal transitions before any I/O
- render / render_terraform: write the object directly, or declare it as a
  Terraform resource for a provisioning tool to apply later

Backends are handled through capability checks (see storage.base), never by
concrete type.
"""
from __future__ import annotations

import logging
from typing import Optional

from .context import ReconcileContext
from .errors import (
    AclPolicyError,
    ConfigurationError,
    ContentReadError,
    FieldValidationError,
    ImmutableFieldError,
    InvalidBasePathError,
    RequiredFieldError,
    StorageWriteError,
    UnsupportedBackendError,
)
from .models import ManagedFileChanges, ManagedFileSpec, ObservedState
from .resources import BytesResource, resource_as_bytes
from .settings import TERRAFORM_MANAGED_FILES
from .storage.base import (
    ClusterReadable,
    ObjectAcl,
    PublicAclGrantable,
    PublicReadable,
    StoragePath,
    TerraformRenderable,
)
from .terraform import TerraformTarget

__all__ = ["ManagedFile", "get_base_path"]

logger = logging.getLogger(__name__)


def get_base_path(context: ReconcileContext, e: ManagedFileSpec) -> StoragePath:
    """
    Resolve the storage root of a managed file.

    An explicit base wins; otherwise the cluster config base is used.

    Raises:
        InvalidBasePathError: If the explicit base cannot be parsed
        ConfigurationError: If there is no explicit base and no cluster config base
    """
    base = e.base or ""
    if base:
        try:
            return context.storage.build_path(base)
        except ValueError as err:
            raise InvalidBasePathError(base, str(err)) from err

    if context.cluster_config_base is None:
        raise ConfigurationError(f"ManagedFile {e.name!r} has no Base and the cluster has no config base")
    return context.cluster_config_base


def _join(base: StoragePath, location: str) -> StoragePath:
    try:
        return base.join(location)
    except ValueError as err:
        raise FieldValidationError("Location", f"invalid ManagedFile Location {location!r}: {err}") from err


class ManagedFile:
    """
    Reconciles one managed file against its backing store.

    Holds the desired spec; the render methods take the desired state
    explicitly, matching the (actual, expected, changes) signature the delta
    runner uses for every phase.
    """

    def __init__(self, spec: ManagedFileSpec) -> None:
        self.spec = spec

    @property
    def name(self) -> Optional[str]:
        return self.spec.name

    def __repr__(self) -> str:
        return f"ManagedFile(name={self.spec.name!r}, location={self.spec.location!r})"

    def find(self, context: ReconcileContext) -> Optional[ObservedState]:
        """
        Read the current state of the object.

        Returns None when the location is not set yet or the object does not
        exist. When the backend can report public-readability, an unset
        desired public_acl is normalized to False so the diff compares two
        concrete values.

        Raises:
            ConfigurationError: If the base cannot be resolved, or public
                access is requested on a backend that cannot report it
            OSError: For storage errors other than "not found"
        """
        e = self.spec
        location = e.location or ""
        if not location:
            # A malformed explicit base still fails; a missing default base does not
            if e.base:
                get_base_path(context, e)
            return None

        file_path = _join(get_base_path(context, e), location)

        try:
            existing_data = file_path.read_file()
        except FileNotFoundError:
            logger.debug(f"ManagedFile {e.name!r} not found at {file_path.path}")
            return None

        actual = ObservedState(
            name=e.name,
            base=e.base,
            location=e.location,
            contents=BytesResource(existing_data),
        )

        if isinstance(file_path, PublicReadable):
            try:
                actual.public_acl = file_path.is_public()
            except FileNotFoundError:
                logger.debug(f"ManagedFile {e.name!r} was removed from {file_path.path} while being read")
                return None
            if e.public_acl is None:
                e.public_acl = False
        elif e.public_acl:
            raise UnsupportedBackendError(
                f"the {file_path.path!r} path cannot report public access, but ManagedFile {e.name!r} requests it"
            )

        # Avoid spurious changes
        actual.lifecycle = e.lifecycle

        return actual

    @staticmethod
    def check_changes(
        a: Optional[ObservedState],
        e: ManagedFileSpec,
        changes: ManagedFileChanges,
    ) -> None:
        """
        Validate a proposed transition. Performs no I/O.

        Raises:
            ImmutableFieldError: If the object exists and its name would change
            RequiredFieldError: If the desired state has no contents
        """
        if a is not None:
            if changes.name is not None:
                raise ImmutableFieldError("Name")
        if e.contents is None:
            raise RequiredFieldError("Contents")

    def get_acl(self, context: ReconcileContext, p: StoragePath) -> Optional[ObjectAcl]:
        """
        Resolve the ACL to write the object with.

        Public objects get the backend's public-read ACL; in-memory paths must
        be marked cluster-readable first. Everything else goes through the
        cluster ACL policy unchanged.

        Raises:
            AclPolicyError: If public access is requested on a test path that is not cluster-readable
            UnsupportedBackendError: If the backend cannot grant public access
        """
        if self.spec.public_acl:
            if isinstance(p, ClusterReadable) and not p.is_cluster_readable():
                raise AclPolicyError(f"the {p.path!r} path is intended for use in tests")
            if not isinstance(p, PublicAclGrantable):
                raise UnsupportedBackendError(f"the {p.path!r} path does not support public ACL")
            return p.public_read_acl()

        return context.acl_policy.get_acl(p, context.cluster)

    def render(
        self,
        context: ReconcileContext,
        a: Optional[ObservedState],
        e: ManagedFileSpec,
        changes: Optional[ManagedFileChanges],
    ) -> None:
        """
        Write the desired contents and ACL to storage.

        Raises:
            RequiredFieldError: If location is not set
            ContentReadError: If the contents cannot be read
            AclPolicyError, ConfigurationError: If the ACL cannot be resolved
            StorageWriteError: If the backend write fails
        """
        location = e.location or ""
        if not location:
            raise RequiredFieldError("Location")
        if e.contents is None:
            raise RequiredFieldError("Contents")

        try:
            data = resource_as_bytes(e.contents)
        except OSError as err:
            raise ContentReadError(f"error reading contents of ManagedFile: {err}") from err

        p = _join(get_base_path(context, e), location)

        acl = self.get_acl(context, p)

        logger.debug(f"Writing ManagedFile {e.name!r} to {p.path} ({len(data)} bytes)")
        try:
            p.write_file(data, acl)
        except OSError as err:
            raise StorageWriteError(location, err) from err

    def render_terraform(
        self,
        context: ReconcileContext,
        t: TerraformTarget,
        a: Optional[ObservedState],
        e: ManagedFileSpec,
        changes: Optional[ManagedFileChanges],
    ) -> None:
        """
        Declare the object as a Terraform resource.

        Falls back to render() when the TerraformManagedFiles feature flag is
        off, so storage ends up in the same state either way.

        Raises:
            RequiredFieldError: If location or name is not set
            UnsupportedBackendError: If the path cannot be rendered in Terraform
            ContentReadError: If the contents cannot be opened
        """
        if not context.settings.feature_enabled(TERRAFORM_MANAGED_FILES):
            return self.render(context, a, e, changes)

        location = e.location or ""
        if not location:
            raise RequiredFieldError("Location")

        p = _join(get_base_path(context, e), location)

        acl = self.get_acl(context, p)

        if not isinstance(p, TerraformRenderable):
            raise UnsupportedBackendError(f"path {p.path!r} must be of a type that can render in Terraform")
        if not e.name:
            raise RequiredFieldError("Name")
        if e.contents is None:
            raise RequiredFieldError("Contents")

        try:
            reader = e.contents.open()
        except OSError as err:
            raise ContentReadError(f"error opening contents of ManagedFile: {err}") from err

        with reader:
            p.render_terraform(t.writer, e.name, reader, acl)
