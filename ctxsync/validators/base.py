"""Core validation data structures shared by schema and registry checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class Severity(str, Enum):
    """Only ``ERROR`` findings make a document or registry invalid."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """A single finding against a field of a document or registry."""

    field: str
    message: str
    severity: Severity = Severity.ERROR

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "severity": self.severity.value}


class IssueCollector:
    """Accumulates findings in the order they are raised."""

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def error(self, field_name: str, message: str) -> None:
        self.issues.append(ValidationIssue(field_name, message, Severity.ERROR))

    def warning(self, field_name: str, message: str) -> None:
        self.issues.append(ValidationIssue(field_name, message, Severity.WARNING))


def _errors(issues: List[ValidationIssue]) -> List[ValidationIssue]:
    return [issue for issue in issues if issue.severity is Severity.ERROR]


def _warnings(issues: List[ValidationIssue]) -> List[ValidationIssue]:
    return [issue for issue in issues if issue.severity is Severity.WARNING]


@dataclass
class ValidationResult:
    """Schema findings for one context document."""

    file: str
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> List[ValidationIssue]:
        return _errors(self.issues)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return _warnings(self.issues)

    def to_dict(self) -> Dict[str, object]:
        return {
            "file": self.file,
            "valid": self.valid,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class RegistryReport:
    """Consistency findings for a registry checked against the filesystem."""

    registry: str
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def errors(self) -> List[ValidationIssue]:
        return _errors(self.issues)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return _warnings(self.issues)

    def to_dict(self) -> Dict[str, object]:
        return {
            "registry": self.registry,
            "valid": not self.has_errors,
            "issues": [issue.to_dict() for issue in self.issues],
        }


__all__ = [
    "IssueCollector",
    "RegistryReport",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]
