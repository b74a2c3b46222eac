"""
Custom exceptions for the impact engine with structured error context.

Every error carries a stable machine-readable ``code`` and the HTTP status
it maps to, so the API layer and the CLI can render it without inspecting
the exception type.

Exception Hierarchy:
    ImpactEngineError (base)
    ├── ValidationError
    │   └── InvalidIdentifierError
    ├── NotFoundError
    │   └── AssessmentNotFoundError
    ├── DomainError
    │   ├── UnsupportedMetalTypeError
    │   └── InsufficientDataError
    ├── InternalFailureError
    │   └── PersistenceError
    └── FactorTableError
"""

from typing import Optional, Dict, Any
from datetime import datetime


class ImpactEngineError(Exception):
    """
    Base exception for all engine errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (assessment_id, record_id, etc.)
        original_exception: The original exception that was caught (if any)
    """

    code = "INTERNAL_FAILURE"
    status_code = 500

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}[{self.code}]: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging and API responses."""
        return {
            "error": self.message,
            "code": self.code,
            "error_type": self.__class__.__name__,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Validation Errors (detected before any read)
# ============================================================================

class ValidationError(ImpactEngineError):
    """Base exception for malformed caller input."""
    code = "VALIDATION_ERROR"
    status_code = 400


class InvalidIdentifierError(ValidationError):
    """
    Raised when an assessment identifier is missing, non-numeric or not positive.

    Context should include:
        - raw_value: The value supplied by the caller
    """
    code = "INVALID_ID"


# ============================================================================
# Not Found Errors (detected after the first read)
# ============================================================================

class NotFoundError(ImpactEngineError):
    """Base exception for missing resources."""
    code = "NOT_FOUND"
    status_code = 404


class AssessmentNotFoundError(NotFoundError):
    """
    Raised when no assessment exists for the identifier.

    Context should include:
        - assessment_id: The identifier that was looked up
    """
    code = "ASSESSMENT_NOT_FOUND"


# ============================================================================
# Domain Errors (detected after all reads, before any write)
# ============================================================================

class DomainError(ImpactEngineError):
    """Base exception for data that cannot be processed by the engine."""
    code = "DOMAIN_ERROR"
    status_code = 400


class UnsupportedMetalTypeError(DomainError):
    """
    Raised by the estimator when the assessment's metal has no benchmark.

    Context should include:
        - assessment_id
        - metal_type: The unsupported metal
        - supported: Metals present in the benchmark table
    """
    code = "UNSUPPORTED_METAL_TYPE"


class InsufficientDataError(DomainError):
    """
    Raised by the aggregator when material or processing records are missing.

    Context should include:
        - assessment_id
        - material_records / processing_records: Counts found
    """
    code = "INSUFFICIENT_DATA"
    status_code = 422


# ============================================================================
# Internal Failures
# ============================================================================

class InternalFailureError(ImpactEngineError):
    """Unexpected fault while reading or writing records."""
    code = "INTERNAL_FAILURE"
    status_code = 500


class PersistenceError(InternalFailureError):
    """
    Raised when a repository operation fails.

    Context should include:
        - operation: SELECT, UPDATE or UPSERT
        - table_name: Name of the table
        - record_id / assessment_id (if applicable)
    """
    pass


class FactorTableError(ImpactEngineError):
    """
    Raised when a benchmark/factor table file cannot be loaded.

    Context should include:
        - path: File that was read
    """
    code = "INVALID_FACTOR_TABLES"
    status_code = 500
