"""Resolve the fields to show and validate along a path."""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from pydantic import BaseModel, ConfigDict, Field

from ..catalog import Catalog, FieldType, FormField, Status
from .keys import BranchChoice, FieldKey, parse_key
from .path import Path, check_path


class FieldSpec(BaseModel):
    """A field as it must be rendered and validated for one path."""

    model_config = ConfigDict(frozen=True)

    key: str
    field_key: FieldKey
    display_name: str
    type: FieldType
    required: bool
    options: List[str] = Field(default_factory=list)
    depth: int
    status_id: str
    status_name: str
    is_branching: bool = False

    @classmethod
    def build(
        cls, status: Status, field: FormField, branches: tuple[BranchChoice, ...]
    ) -> "FieldSpec":
        field_key = FieldKey(branches=branches, field_name=field.name)
        return cls(
            key=field_key.encode(),
            field_key=field_key,
            display_name=field.name,
            type=field.type,
            required=field.required,
            options=list(field.options),
            depth=len(branches),
            status_id=status.id,
            status_name=status.name,
            is_branching=field.is_branching,
        )


def _resolve(path: Path, catalog: Catalog, depth: int) -> List[FieldSpec]:
    status = catalog.get(path.status_ids[depth])
    branches = path.branches(depth)
    specs = [FieldSpec.build(status, field, branches) for field in status.fields]
    if depth < path.depth:
        specs.extend(_resolve(path, catalog, depth + 1))
    return specs


def resolve_fields(path: Path, catalog: Catalog) -> List[FieldSpec]:
    """Return the ordered, de-duplicated fields for every status on ``path``.

    Each status contributes its declared fields in order, followed by the
    fields of the status its chosen branch opened. Branches not taken on the
    path contribute nothing.
    """
    check_path(path, catalog)
    seen: Set[str] = set()
    resolved: List[FieldSpec] = []
    for spec in _resolve(path, catalog, 0):
        if spec.key in seen:
            continue
        seen.add(spec.key)
        resolved.append(spec)
    return resolved


def shared_field_names(specs: Iterable[FieldSpec]) -> Set[str]:
    """Field names that occur at more than one depth among ``specs``.

    The plain alias of such a name belongs to no single field.
    """
    depths: Dict[str, Set[int]] = {}
    for spec in specs:
        depths.setdefault(spec.display_name, set()).add(spec.depth)
    return {name for name, found in depths.items() if len(found) > 1}


def foreign_key_depths(specs: Iterable[FieldSpec], data: Iterable[str]) -> Dict[str, Set[int]]:
    """Depths of namespaced keys in ``data`` that belong to none of ``specs``.

    Keyed by field name. Such keys come from branches the path no longer
    takes, and their field names stake a claim on the plain alias.
    """
    own = {spec.key for spec in specs}
    found: Dict[str, Set[int]] = {}
    for key in data:
        if key in own:
            continue
        field_key = parse_key(key)
        if field_key.is_namespaced:
            found.setdefault(field_key.field_name, set()).add(field_key.depth)
    return found
