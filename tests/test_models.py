"""
Tests for data models and manifest loading.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from managed_files.models import (
    ClusterSpec,
    Lifecycle,
    ManagedFileChanges,
    ManagedFileSpec,
    Manifest,
    contents_equal,
)
from managed_files.resources import BytesResource, FileResource, StringResource


class TestManagedFileSpec:
    """Test ManagedFileSpec validation."""

    def test_defaults(self):
        spec = ManagedFileSpec()
        assert spec.lifecycle == Lifecycle.SYNC
        assert spec.public_acl is None
        assert spec.contents is None

    def test_aliases(self):
        """Test that camelCase manifest keys populate fields."""
        spec = ManagedFileSpec.model_validate({"name": "a", "publicACL": True, "lifecycle": "Ignore"})
        assert spec.public_acl is True
        assert spec.lifecycle == Lifecycle.IGNORE

    def test_contents_coercion(self):
        assert ManagedFileSpec(contents="text").contents == StringResource("text")
        assert ManagedFileSpec(contents=b"\x00").contents == BytesResource(b"\x00")

    def test_contents_rejects_other_types(self):
        with pytest.raises(ValidationError, match="contents must be a resource"):
            ManagedFileSpec(contents=42)

    def test_unknown_lifecycle_rejected(self):
        with pytest.raises(ValidationError):
            ManagedFileSpec(lifecycle="Sometimes")


class TestClusterSpec:

    def test_aliases(self):
        cluster = ClusterSpec.model_validate({
            "name": "c",
            "configBase": "s3://b/c",
            "defaultObjectACL": "bucket-owner-full-control",
        })
        assert cluster.config_base == "s3://b/c"
        assert cluster.default_object_acl == "bucket-owner-full-control"


class TestManagedFileChanges:
    """Test change-set helpers."""

    def test_empty(self):
        changes = ManagedFileChanges()
        assert changes.is_empty()
        assert changes.changed_fields() == []

    def test_false_counts_as_changed(self):
        """Test that a desired False public_acl is a change, not an absence."""
        changes = ManagedFileChanges(public_acl=False, contents=StringResource("x"))
        assert changes.changed_fields() == ["contents", "public_acl"]
        assert not changes.is_empty()


class TestContentsEqual:

    def test_compares_bytes(self):
        assert contents_equal(StringResource("a"), BytesResource(b"a"))
        assert not contents_equal(StringResource("a"), StringResource("b"))

    def test_none_handling(self):
        assert contents_equal(None, None)
        assert not contents_equal(None, StringResource(""))


class TestManifest:
    """Test Manifest.from_yaml_file."""

    def test_load(self, tmp_path):
        (tmp_path / "cluster.yaml").write_bytes(b"kind: Cluster\n")
        manifest_path = tmp_path / "manifest.yaml"
        manifest_path.write_text(
            "cluster:\n"
            "  name: dev.example.com\n"
            "  configBase: memfs://clusters/dev.example.com\n"
            "files:\n"
            "  - name: cluster-completed.spec\n"
            "    location: cluster-completed.spec\n"
            "    contentsFile: cluster.yaml\n"
            "    publicACL: false\n"
            "  - name: inline\n"
            "    location: inline.txt\n"
            "    contents: hello\n"
        )

        manifest = Manifest.from_yaml_file(manifest_path)

        assert manifest.cluster.name == "dev.example.com"
        first, second = manifest.files
        assert isinstance(first.contents, FileResource)
        assert first.contents.materialize() == b"kind: Cluster\n"
        assert first.public_acl is False
        assert second.contents == StringResource("hello")

    def test_empty_manifest(self, tmp_path):
        manifest_path = tmp_path / "manifest.yaml"
        manifest_path.write_text("")

        manifest = Manifest.from_yaml_file(manifest_path)
        assert manifest.cluster is None
        assert manifest.files == []

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Manifest not found"):
            Manifest.from_yaml_file(tmp_path / "nope.yaml")

    def test_non_mapping_manifest(self, tmp_path):
        manifest_path = tmp_path / "manifest.yaml"
        manifest_path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="Manifest must be a mapping"):
            Manifest.from_yaml_file(manifest_path)

    def test_contents_and_contents_file_conflict(self, tmp_path):
        manifest_path = tmp_path / "manifest.yaml"
        manifest_path.write_text(
            "files:\n"
            "  - name: both\n"
            "    contents: x\n"
            "    contentsFile: x.txt\n"
        )

        with pytest.raises(ValueError, match="sets both contents and contentsFile"):
            Manifest.from_yaml_file(manifest_path)
