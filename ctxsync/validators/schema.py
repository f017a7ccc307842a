"""Schema contract for a single context document."""

from __future__ import annotations

import re
from typing import Any, Mapping

from .base import IssueCollector, ValidationResult

_VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")

_TYPE_CHECKS = {
    "string": (lambda value: isinstance(value, str), "Must be a string"),
    "array": (lambda value: isinstance(value, list), "Must be an array"),
    "object": (lambda value: isinstance(value, dict), "Must be an object"),
}


class ContextSchemaValidator:
    """Checks required fields, element types and version format of a document."""

    def validate(self, data: Mapping[str, Any], file: str) -> ValidationResult:
        issues = IssueCollector()

        self._check_required(issues, data, "meta", "object")
        meta = data.get("meta")
        if isinstance(meta, dict):
            self._check_required(issues, meta, "target", "string", "meta.target")
            self._check_version(issues, meta.get("version"))

        self._check_required(issues, data, "what", "string")
        self._check_required(issues, data, "use_when", "array")
        self._check_required(issues, data, "do_not_use_when", "array")

        for name in ("use_when", "do_not_use_when"):
            value = data.get(name)
            if isinstance(value, list) and not value:
                issues.warning(name, "Array should have at least one item")

        for name in ("dependencies", "future"):
            if data.get(name):
                self._check_string_array(issues, data[name], name)

        constraints = data.get("constraints")
        if constraints:
            if isinstance(constraints, list):
                self._check_string_array(issues, constraints, "constraints")
            elif not isinstance(constraints, str):
                issues.error("constraints", "Must be a string or array of strings")

        if isinstance(meta, dict):
            target = meta.get("target")
            if isinstance(target, str) and target and not target.startswith("/"):
                issues.error(
                    "meta.target",
                    "Target path must start with / (absolute path from project root)",
                )

        return ValidationResult(file=file, issues=issues.issues)

    @staticmethod
    def _check_required(
        issues: IssueCollector,
        obj: Mapping[str, Any],
        name: str,
        kind: str,
        display: str | None = None,
    ) -> None:
        label = display or name
        if obj.get(name) is None:
            issues.error(label, "Required field is missing")
            return
        check, message = _TYPE_CHECKS[kind]
        if not check(obj[name]):
            issues.error(label, message)

    @staticmethod
    def _check_string_array(issues: IssueCollector, value: Any, name: str) -> None:
        if not isinstance(value, list):
            issues.error(name, "Must be an array")
            return
        for index, item in enumerate(value):
            if not isinstance(item, str):
                issues.error(f"{name}[{index}]", "Must be a string")

    @staticmethod
    def _check_version(issues: IssueCollector, version: Any) -> None:
        if version is None or version == "":
            issues.warning("meta.version", "Version is recommended")
            return
        if not _VERSION_PATTERN.match(str(version)):
            issues.warning("meta.version", f"Version format should be x.y.z (found: {version})")


def validate_context_data(data: Mapping[str, Any], file: str) -> ValidationResult:
    return ContextSchemaValidator().validate(data, file)


__all__ = ["ContextSchemaValidator", "validate_context_data"]
