"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

T = TypeVar('T')

# Looked up by class name along the exception's MRO, most specific first
EXIT_CODES = {
    "FileNotFoundError": 1,
    "FieldValidationError": 2,
    "ValidationError": 2,
    "ValueError": 2,
    "StorageError": 3,
    "ConfigurationError": 4,
    "AclPolicyError": 5,
    "LifecycleViolationError": 6,
}


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    - 0: Success
    - 1: Manifest or content file not found
    - 2: Validation error (missing/immutable field, malformed manifest)
    - 3: Storage I/O error or unknown error
    - 4: Configuration error (bad base path, unsupported backend)
    - 5: ACL policy violation
    - 6: Lifecycle violation

    Args:
        exc: Exception to map

    Returns:
        Exit code (1-6, with 3 as fallback for unknown exceptions)
    """
    for cls in type(exc).__mro__:
        code = EXIT_CODES.get(cls.__name__)
        if code is not None:
            return code
    return 3


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function, prints the error and maps any exception to
    an exit code using typer.Exit.

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
