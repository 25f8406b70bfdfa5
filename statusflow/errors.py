"""Exception hierarchy for statusflow."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .catalog.validation import CatalogIssue
    from .engine.validator import Violation


class StatusFlowError(Exception):
    """Base class for all statusflow errors."""


class CatalogError(StatusFlowError):
    """The status catalog breaks an authoring-time rule."""

    def __init__(self, message: str, issues: Iterable["CatalogIssue"] = ()) -> None:
        self.issues = list(issues)
        if self.issues:
            details = "; ".join(str(issue) for issue in self.issues)
            message = f"{message}: {details}"
        super().__init__(message)


class UnknownStatusError(CatalogError, KeyError):
    """A status id is not present in the catalog."""

    def __init__(self, status_id: str) -> None:
        self.status_id = status_id
        super().__init__(f"Unknown status id {status_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidPathError(StatusFlowError):
    """A path does not follow the branches declared in the catalog."""


class AmbiguousBranchError(StatusFlowError):
    """A stored branch value matches none of the field's mapped options."""

    def __init__(self, status_id: str, field_name: str, value: object) -> None:
        self.status_id = status_id
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Value {value!r} of branching field {field_name!r} on status "
            f"{status_id!r} matches no declared option"
        )


class ValidationError(StatusFlowError):
    """One or more required fields are unset.

    Always recoverable: the user fills the listed fields and retries.
    """

    def __init__(self, violations: Iterable["Violation"]) -> None:
        self.violations = list(violations)
        super().__init__(self._format())

    def grouped(self) -> dict[str, list[str]]:
        """Missing display names grouped by the status that requires them."""
        groups: dict[str, list[str]] = {}
        for violation in self.violations:
            groups.setdefault(violation.status_name, []).append(violation.field_name)
        return groups

    def _format(self) -> str:
        parts = [
            f"{status}: {', '.join(names)}" for status, names in self.grouped().items()
        ]
        return "Missing required fields - " + "; ".join(parts)


class SchemaDriftError(StatusFlowError):
    """Persisted data carries keys the current catalog does not recognize."""

    def __init__(self, keys: Iterable[str]) -> None:
        self.keys = list(keys)
        super().__init__(f"Keys unknown to the catalog: {', '.join(self.keys)}")


class PersistenceError(StatusFlowError):
    """A lead store failed to read or write a lead."""
