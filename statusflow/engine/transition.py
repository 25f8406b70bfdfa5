"""Build the payload that moves a lead along the status tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..catalog import Catalog
from ..constants import DEFAULT_BASE_FIELDS
from ..errors import ValidationError
from .drift import find_schema_drift
from .fields import FieldSpec, foreign_key_depths, resolve_fields, shared_field_names
from .path import Path, lead_path
from .validator import validate

if TYPE_CHECKING:
    from ..leads.models import Lead

logger = logging.getLogger(__name__)


class TransitionPayload(BaseModel):
    """Exact payload to hand to the lead store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_id: str = Field(serialization_alias="statusId")
    data: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def merge_data(
    persisted: Mapping[str, Any],
    edited: Mapping[str, Any],
    fields: Sequence[FieldSpec],
    base_fields: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Overlay ``edited`` on ``persisted`` without dropping untouched keys.

    Each edited namespaced key also updates its plain alias, unless that plain
    name was itself edited, is a lead-level base field, or is claimed by a
    field or stored key at another depth.
    """
    merged = dict(persisted)
    merged.update(edited)

    by_key = {spec.key: spec for spec in fields}
    shared = shared_field_names(fields)
    base = set(DEFAULT_BASE_FIELDS if base_fields is None else base_fields)
    foreign = foreign_key_depths(fields, merged)
    for key, value in edited.items():
        spec = by_key.get(key)
        if spec is None or not spec.depth:
            continue
        name = spec.display_name
        if name in shared or name in edited or name in base:
            continue
        if foreign.get(name, set()) - {spec.depth}:
            continue
        merged[name] = value
    return merged


def _touched_keys(edited: Mapping[str, Any], fields: Iterable[FieldSpec]) -> set[str]:
    fields = list(fields)
    shared = shared_field_names(fields)
    return {
        spec.key
        for spec in fields
        if spec.key in edited
        or (spec.depth and spec.display_name not in shared and spec.display_name in edited)
    }


def build_transition_payload(
    lead: "Lead",
    path: Path,
    edited_values: Mapping[str, Any],
    catalog: Catalog,
    base_fields: Optional[Iterable[str]] = None,
) -> TransitionPayload:
    """Merge ``edited_values`` into ``lead`` for the edited ``path``.

    The effective status is the deepest status on ``path``. The function is
    pure; persisting the returned payload is the caller's responsibility.

    Raises:
        ValidationError: Required fields on ``path`` are unset. When ``path``
            is the lead's committed path only the edited fields are checked.
    """

    if base_fields is not None:
        base_fields = list(base_fields)
    fields = resolve_fields(path, catalog)
    merged = merge_data(lead.data, edited_values, fields, base_fields)

    unchanged = lead_path(lead, catalog) == path
    result = validate(
        path,
        merged,
        catalog,
        only_keys=_touched_keys(edited_values, fields) if unchanged else None,
        fields=fields,
        base_fields=base_fields,
    )
    if not result.ok:
        logger.info(
            f"Transition for lead {lead.id} blocked by {len(result.violations)} "
            "missing field(s)"
        )
        raise ValidationError(result.violations)

    drifted = find_schema_drift(merged, catalog, base_fields)
    if drifted:
        logger.warning(
            f"Lead {lead.id} carries keys unknown to the catalog, kept as-is: "
            f"{', '.join(drifted)}"
        )

    logger.info(
        f"Lead {lead.id} transition {lead.current_status_id} -> "
        f"{path.effective_status_id} via {' > '.join(path.status_ids)}"
    )
    return TransitionPayload(status_id=path.effective_status_id, data=merged)
