"""Required-field validation for a path."""

from __future__ import annotations

import logging
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from pydantic import BaseModel, Field

from ..catalog import Catalog, FieldType
from ..constants import DEFAULT_BASE_FIELDS
from ..errors import ValidationError
from .fields import FieldSpec, foreign_key_depths, resolve_fields, shared_field_names
from .path import Path

logger = logging.getLogger(__name__)


class Violation(BaseModel):
    """A required field left unset."""

    status_id: str
    status_name: str
    field_name: str
    key: str


class ValidationResult(BaseModel):
    """Outcome of validating a path against candidate values."""

    violations: List[Violation] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def grouped(self) -> Dict[str, List[str]]:
        """Missing display names grouped by status name."""
        groups: Dict[str, List[str]] = {}
        for violation in self.violations:
            groups.setdefault(violation.status_name, []).append(violation.field_name)
        return groups

    def raise_for_violations(self) -> None:
        if self.violations:
            raise ValidationError(self.violations)


def is_filled(spec: FieldSpec, value: Any) -> bool:
    """Presence check for a single value of ``spec``."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if spec.type == FieldType.CHECKBOX or isinstance(value, (list, tuple, set)):
        return len(value) > 0
    return True


def claimed_aliases(
    specs: Sequence[FieldSpec],
    values: Mapping[str, Any],
    base_fields: Optional[Iterable[str]] = None,
) -> Set[str]:
    """Plain names whose value cannot be read as any single field of ``specs``.

    A name is claimed when it occurs at several depths on the path, when it
    is a lead-level base field, or when a namespaced key outside the path
    carries it.
    """
    claimed = shared_field_names(specs)
    claimed.update(DEFAULT_BASE_FIELDS if base_fields is None else base_fields)
    claimed.update(foreign_key_depths(specs, values))
    return claimed


def lookup_value(spec: FieldSpec, values: Mapping[str, Any], claimed: Set[str]) -> Any:
    """Value for ``spec``, falling back to the plain alias when it is unclaimed."""
    if spec.key in values:
        return values[spec.key]
    if spec.depth and spec.display_name not in claimed:
        return values.get(spec.display_name)
    return None


def validate(
    path: Path,
    values: Mapping[str, Any],
    catalog: Catalog,
    only_keys: Optional[Collection[str]] = None,
    fields: Optional[Sequence[FieldSpec]] = None,
    base_fields: Optional[Iterable[str]] = None,
) -> ValidationResult:
    """Check every required field on ``path`` against ``values``.

    Args:
        path: Path whose fields are checked.
        values: Persisted values overlaid with in-progress edits.
        catalog: Catalog the path belongs to.
        only_keys: Restrict checking to these keys, for edits that do not
            change the lead's branch.
        fields: Output of :func:`resolve_fields` when already computed.
        base_fields: Lead-level keys, never read as a nested field's value.
    """

    specs = list(fields) if fields is not None else resolve_fields(path, catalog)
    claimed = claimed_aliases(specs, values, base_fields)
    violations = []
    for spec in specs:
        if not spec.required:
            continue
        if only_keys is not None and spec.key not in only_keys:
            continue
        if not is_filled(spec, lookup_value(spec, values, claimed)):
            violations.append(
                Violation(
                    status_id=spec.status_id,
                    status_name=spec.status_name,
                    field_name=spec.display_name,
                    key=spec.key,
                )
            )

    if violations:
        logger.debug(
            f"{len(violations)} required field(s) missing on path {path.status_ids}"
        )
    return ValidationResult(violations=violations)
