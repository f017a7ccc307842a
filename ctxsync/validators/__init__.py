"""Validation of context documents and generated registries."""

from .base import (
    IssueCollector,
    RegistryReport,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from .consistency import check_global_registry, check_local_registry
from .schema import ContextSchemaValidator, validate_context_data

__all__ = [
    "ContextSchemaValidator",
    "IssueCollector",
    "RegistryReport",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "check_global_registry",
    "check_local_registry",
    "validate_context_data",
]
