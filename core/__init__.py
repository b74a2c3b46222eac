"""
Core utilities and configuration for the LCA impact engine.

Modules:
    config: Application configuration and environment variable management
    database: Database connection and session management
    exceptions: Exception hierarchy with stable error codes
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import get_session
    from core.exceptions import AssessmentNotFoundError, InsufficientDataError
    from core.logging import setup_logging
"""

__all__ = [
    "settings",
    "get_session",
    "setup_logging",
    # Exceptions
    "ImpactEngineError",
    "ValidationError",
    "InvalidIdentifierError",
    "NotFoundError",
    "AssessmentNotFoundError",
    "DomainError",
    "UnsupportedMetalTypeError",
    "InsufficientDataError",
    "InternalFailureError",
    "PersistenceError",
    "FactorTableError",
]
