"""
Tests for ManagedFile.render (direct writes).
"""
from __future__ import annotations

from unittest.mock import Mock

import pytest

from managed_files.errors import AclPolicyError, ContentReadError, RequiredFieldError, StorageWriteError
from managed_files.managed_file import ManagedFile
from managed_files.models import ClusterSpec, ManagedFileSpec
from managed_files.resources import FileResource, resource_as_bytes
from managed_files.storage.fs import FSPath


def _render(context, spec: ManagedFileSpec) -> None:
    task = ManagedFile(spec)
    task.render(context, task.find(context), spec, None)


class TestRenderValidation:
    """Render-time validation."""

    @pytest.mark.parametrize("location", [None, ""])
    def test_empty_location_fails(self, context, location):
        spec = ManagedFileSpec(name="f", location=location, contents="x")

        with pytest.raises(RequiredFieldError) as exc_info:
            ManagedFile(spec).render(context, None, spec, None)

        assert exc_info.value.field == "Location"

    def test_unreadable_contents_wrapped(self, context, tmp_path):
        spec = ManagedFileSpec(name="f", location="f.txt", contents=FileResource(tmp_path / "missing"))

        with pytest.raises(ContentReadError, match="error reading contents of ManagedFile"):
            ManagedFile(spec).render(context, None, spec, None)

    def test_location_escaping_base_rejected(self, context):
        spec = ManagedFileSpec(name="f", location="../outside.txt", contents="x")

        with pytest.raises(ValueError, match="invalid ManagedFile Location"):
            ManagedFile(spec).render(context, None, spec, None)


class TestRenderMemFS:
    """Direct rendering against the in-memory backend."""

    def test_public_on_unmarked_test_backend_fails_without_write(self, context, memfs):
        spec = ManagedFileSpec(name="f", location="f.txt", contents="x", public_acl=True)

        with pytest.raises(AclPolicyError):
            _render(context, spec)

        with pytest.raises(FileNotFoundError):
            memfs.path("clusters", "dev.example.com/f.txt").read_file()

    def test_public_on_marked_test_backend_succeeds(self, context, memfs):
        context.cluster_config_base.mark_cluster_readable()
        spec = ManagedFileSpec(name="f", location="f.txt", contents="x", public_acl=True)

        _render(context, spec)

        path = memfs.path("clusters", "dev.example.com/f.txt")
        assert path.read_file() == b"x"
        assert path.is_public() is True

    def test_render_then_find_round_trip(self, context):
        spec = ManagedFileSpec(name="f", location="nested/dir/f.bin", contents=bytes(range(256)))

        _render(context, spec)
        actual = ManagedFile(spec).find(context)

        assert resource_as_bytes(actual.contents) == resource_as_bytes(spec.contents)

    def test_render_is_idempotent(self, context):
        spec = ManagedFileSpec(name="f", location="f.txt", contents="hello")

        _render(context, spec)
        first = ManagedFile(spec).find(context)
        _render(context, spec)
        second = ManagedFile(spec).find(context)

        assert first == second

    def test_explicit_base_is_used(self, context, memfs):
        spec = ManagedFileSpec(name="f", base="memfs://other/root", location="f.txt", contents="x")

        _render(context, spec)

        assert memfs.path("other", "root/f.txt").read_file() == b"x"

    def test_write_failure_wrapped_with_location(self, context):
        failing = Mock(spec=FSPath)
        failing.join.return_value = failing
        failing.path = "file:///broken/f.txt"
        failing.write_file.side_effect = OSError("disk full")
        context.cluster_config_base = failing
        spec = ManagedFileSpec(name="f", location="f.txt", contents="x")

        with pytest.raises(StorageWriteError, match="error creating ManagedFile 'f.txt': disk full") as exc_info:
            ManagedFile(spec).render(context, None, spec, None)

        assert exc_info.value.location == "f.txt"
        assert isinstance(exc_info.value.__cause__, OSError)


class TestRenderS3:
    """Direct rendering against S3."""

    def test_concrete_scenario_default_acl(self, s3_context, s3_client):
        spec = ManagedFileSpec(location="config/foo.yaml", contents="a: 1")

        _render(s3_context, spec)

        assert s3_client.objects[("state-store", "dev.example.com/config/foo.yaml")] == b"a: 1"
        request = s3_client.put_requests[-1]
        assert "ACL" not in request
        assert request["ServerSideEncryption"] == "AES256"

        actual = ManagedFile(spec).find(s3_context)
        assert resource_as_bytes(actual.contents) == b"a: 1"
        assert actual.public_acl is False

    def test_cluster_default_acl_applied(self, settings, storage, s3_client):
        from managed_files.context import ReconcileContext
        cluster = ClusterSpec(
            name="dev.example.com",
            config_base="s3://state-store/dev.example.com",
            default_object_acl="bucket-owner-full-control",
        )
        context = ReconcileContext.create(settings, cluster=cluster, storage=storage)
        spec = ManagedFileSpec(name="f", location="f.txt", contents="x")

        _render(context, spec)

        assert s3_client.put_requests[-1]["ACL"] == "bucket-owner-full-control"

    def test_public_object(self, s3_context, s3_client):
        spec = ManagedFileSpec(name="f", location="f.txt", contents="x", public_acl=True)

        _render(s3_context, spec)

        assert s3_client.put_requests[-1]["ACL"] == "public-read"
        assert ManagedFile(spec).find(s3_context).public_acl is True

    def test_public_to_private_transition(self, s3_context, s3_client):
        _render(s3_context, ManagedFileSpec(name="f", location="f.txt", contents="x", public_acl=True))

        spec = ManagedFileSpec(name="f", location="f.txt", contents="x", public_acl=False)
        _render(s3_context, spec)

        assert ManagedFile(spec).find(s3_context).public_acl is False

    def test_missing_bucket_write_wrapped(self, settings, storage):
        from managed_files.context import ReconcileContext
        cluster = ClusterSpec(name="c", config_base="s3://no-such-bucket/c")
        context = ReconcileContext.create(settings, cluster=cluster, storage=storage)
        spec = ManagedFileSpec(name="f", location="f.txt", contents="x")

        with pytest.raises(StorageWriteError, match="S3 upload error"):
            ManagedFile(spec).render(context, None, spec, None)


class TestRenderFS:
    """Direct rendering to the local filesystem."""

    def test_writes_file(self, context, tmp_path):
        spec = ManagedFileSpec(name="f", base=f"file://{tmp_path}", location="a/b.txt", contents="x")

        _render(context, spec)

        assert (tmp_path / "a" / "b.txt").read_bytes() == b"x"
