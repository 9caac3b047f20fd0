"""
Test error mapping and CLI exit code functionality.

Validates that exceptions are correctly mapped to exit codes and that
the run_and_exit wrapper handles errors appropriately for CLI commands.
"""
from __future__ import annotations

import pytest
import typer
from pydantic import ValidationError

from managed_files.errors import (
    AclPolicyError,
    ConfigurationError,
    ContentReadError,
    DuplicateResourceError,
    FieldValidationError,
    ImmutableFieldError,
    InvalidBasePathError,
    LifecycleViolationError,
    RequiredFieldError,
    StorageWriteError,
    UnsupportedBackendError,
)
from managed_files.models import ManagedFileSpec
from managed_files.operations.mappers import EXIT_CODES, exit_code_for, run_and_exit


class TestExitCodeMapping:
    """Test exception to exit code mapping."""

    @pytest.mark.parametrize("exc,code", [
        (FileNotFoundError("Manifest not found"), 1),
        (RequiredFieldError("Contents"), 2),
        (ImmutableFieldError("Name"), 2),
        (FieldValidationError("Location", "bad"), 2),
        (ValueError("bad"), 2),
        (ContentReadError("unreadable"), 3),
        (StorageWriteError("a.txt", PermissionError("denied")), 3),
        (ConfigurationError("no base"), 4),
        (InvalidBasePathError("bogus://x", "bad scheme"), 4),
        (UnsupportedBackendError("no public ACL"), 4),
        (DuplicateResourceError("duplicate Terraform resource aws_s3_object.a"), 4),
        (AclPolicyError("tests only"), 5),
        (LifecycleViolationError("not found"), 6),
    ])
    def test_known_exceptions_mapped_correctly(self, exc, code):
        assert exit_code_for(exc) == code

    def test_pydantic_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            ManagedFileSpec(lifecycle="Sometimes")
        assert exit_code_for(exc_info.value) == 2

    def test_unknown_exception_maps_to_fallback(self):
        """Test that unknown exceptions map to fallback exit code."""
        assert exit_code_for(RuntimeError("boom")) == 3

    def test_most_specific_class_wins(self):
        """Test that the MRO is searched from the concrete class outward."""
        # ContentReadError is a StorageError and, through it, an OSError
        assert exit_code_for(ContentReadError("x")) == EXIT_CODES["StorageError"]

    def test_exit_codes_are_distinct_per_category(self):
        assert len({EXIT_CODES[name] for name in (
            "FileNotFoundError", "ValueError", "StorageError",
            "ConfigurationError", "AclPolicyError", "LifecycleViolationError",
        )}) == 6


class TestRunAndExit:
    """Test the CLI command wrapper."""

    def test_success_returns_value(self):
        assert run_and_exit(lambda: 42) == 42

    def test_exception_becomes_exit(self):
        def fail():
            raise AclPolicyError("the 'memfs://x' path is intended for use in tests")

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(fail)
        assert exc_info.value.exit_code == 5

    def test_typer_exit_passes_through(self):
        def done():
            raise typer.Exit(code=0)

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(done)
        assert exc_info.value.exit_code == 0

    def test_error_message_echoed(self, capsys):
        def fail():
            raise ConfigurationError("ManagedFile 'a' has no Base")

        with pytest.raises(typer.Exit):
            run_and_exit(fail)
        assert "Error: ManagedFile 'a' has no Base" in capsys.readouterr().err
