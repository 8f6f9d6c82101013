"""
Errors and load reporting for the CIFP model.

Parsers raise one of the ``CifpError`` subclasses as soon as a record
cannot be read; the whole-file loader catches them per group and records
the skip in a ``LoadReport``.
"""

from dataclasses import dataclass, field
from typing import List, Any, Optional


class CifpError(Exception):
    """Base class for every error raised while reading or assembling CIFP data."""


class RecordFormatError(CifpError, ValueError):
    """A fixed column does not hold an expected literal or a parsable number."""

    def __init__(self, message: str, column: Optional[int] = None, line: Optional[str] = None):
        super().__init__(message)
        self.column = column
        self.line = line

    @classmethod
    def at_column(cls, column: int, line: Optional[str] = None) -> 'RecordFormatError':
        """Create the standard error for a failed column check."""
        return cls(f"Invalid record format; failed on character {column}.", column, line)


class ResolutionError(CifpError, LookupError):
    """An identifier, transition or magnetic variation could not be resolved."""


class GeometryError(CifpError, ValueError):
    """A boundary or arc does not satisfy its geometric invariants."""


class GuidanceError(CifpError, ValueError):
    """A via or endpoint cannot produce guidance in its current state."""


@dataclass
class ValidationError:
    """Represents a single validation error."""

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (value: {self.value})"
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def add_error(self, field: str, message: str, value: Any = None) -> None:
        self.errors.append(ValidationError(field, message, value))

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def __str__(self) -> str:
        if self.is_valid:
            if self.has_warnings:
                return f"Valid (with {len(self.warnings)} warnings)"
            return "Valid"
        return f"Invalid ({len(self.errors)} errors)"

    def get_error_messages(self) -> List[str]:
        """Get all error messages as strings."""
        return [str(error) for error in self.errors]


@dataclass
class LoadReport(ValidationResult):
    """
    Outcome of loading a CIFP file.

    Every group (procedure, airspace, airway) that failed to assemble is
    recorded as an error whose field is ``"<kind>:<key>"``. Groups that were
    skipped on purpose (unsupported geometry) are recorded as warnings.
    """

    lines_read: int = 0
    records_parsed: int = 0

    def add_skip(self, kind: str, key: str, error: Exception) -> None:
        self.add_error(f"{kind}:{key}", str(error), type(error).__name__)

    def skipped(self, kind: Optional[str] = None) -> List[str]:
        """Keys of the groups that failed, optionally restricted to one kind."""
        keys = []
        for error in self.errors:
            error_kind, _, key = error.field.partition(':')
            if kind is None or error_kind == kind:
                keys.append(key)
        return keys


class ModelValidationError(Exception):
    """Raised by a strict load when any group failed to assemble."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.validation_result = validation_result

    def __str__(self) -> str:
        if self.validation_result:
            error_messages = "\n  - ".join(self.validation_result.get_error_messages())
            return f"{super().__str__()}\nErrors:\n  - {error_messages}"
        return super().__str__()
