"""
Typegraph Exception Hierarchy

Centralized exception classes for structured error handling across the codebase.
All typegraph-specific exceptions inherit from TypeGraphError.

Every kind except UnsupportedTypeExpression is fatal: it propagates out of
TypeExtractor.extract() and the run produces no result.

Usage:
    from typegraph.exceptions import TypeGraphError, PackageResolutionError

    try:
        result = TypeExtractor().extract("models/order.go")
    except PackageResolutionError as e:
        logger.error(f"Extraction failed: {e}")
"""


class TypeGraphError(Exception):
    """Base exception for all typegraph errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TypeGraphError):
    """Error in typegraph configuration."""

    pass


# =============================================================================
# Module Errors
# =============================================================================


class ModuleError(TypeGraphError):
    """Base class for module manifest errors."""

    pass


class ManifestNotFound(ModuleError):
    """No go.mod found within the upward search limit."""

    def __init__(self, start_dir: str, limit: int):
        super().__init__(
            "go.mod not found",
            {"start_dir": start_dir, "limit": limit},
        )
        self.start_dir = start_dir
        self.limit = limit


class ManifestError(ModuleError):
    """go.mod exists but does not declare a module."""

    pass


# =============================================================================
# Parse Errors
# =============================================================================


class ParseError(TypeGraphError):
    """A compilation unit is unreadable or syntactically invalid."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None):
        details = {}
        if path:
            details["path"] = path
        if line is not None:
            details["line"] = line
        super().__init__(message, details)
        self.path = path
        self.line = line


# =============================================================================
# Resolution Errors
# =============================================================================


class ResolutionError(TypeGraphError):
    """Base class for type and package resolution errors."""

    pass


class PackageResolutionError(ResolutionError):
    """An import path cannot be mapped to a package directory."""

    def __init__(self, import_path: str, directory: str | None = None, reason: str | None = None):
        details = {"import_path": import_path}
        if directory:
            details["directory"] = directory
        super().__init__(reason or "cannot resolve package", details)
        self.import_path = import_path
        self.directory = directory


class UnsupportedTypeExpression(ResolutionError):
    """
    A type expression has no representable descriptor.

    Recoverable: recorded as a diagnostic, the field or argument is dropped.
    """

    def __init__(self, reason: str, path: str | None = None, line: int | None = None):
        details = {}
        if path:
            details["path"] = path
        if line is not None:
            details["line"] = line
        super().__init__(reason, details)
        self.reason = reason
        self.path = path
        self.line = line


class InternalInvariantViolation(TypeGraphError):
    """A structural condition that should always hold did not (a bug)."""

    pass
