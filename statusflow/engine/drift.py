"""Detect persisted keys the current catalog no longer recognizes."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from ..catalog import Catalog
from ..constants import DEFAULT_BASE_FIELDS
from ..errors import SchemaDriftError
from .keys import FieldKey, parse_key

logger = logging.getLogger(__name__)


def _is_known_namespaced(field_key: FieldKey, catalog: Catalog) -> bool:
    candidates = list(catalog)
    for branch in field_key.branches:
        child_ids = {
            field.child_for(branch.option)
            for status in candidates
            for field in status.branching_fields
            if field.name == branch.field_name
        }
        candidates = [catalog.get(i) for i in child_ids if i and i in catalog]
        if not candidates:
            return False
    return any(status.field(field_key.field_name) for status in candidates)


def find_schema_drift(
    data: Mapping[str, Any],
    catalog: Catalog,
    base_fields: Optional[Iterable[str]] = None,
    strict: bool = False,
) -> List[str]:
    """Return the keys of ``data`` that no status in ``catalog`` declares.

    Keys listed in ``base_fields`` belong to the lead itself and are never
    reported. Drifted keys are opaque passthrough: callers keep them verbatim.
    With ``strict`` set, any drift raises ``SchemaDriftError`` instead.
    """

    known = {field.name for status in catalog for field in status.fields}
    known.update(DEFAULT_BASE_FIELDS if base_fields is None else base_fields)

    drifted = []
    for key in data:
        if key in known:
            continue
        field_key = parse_key(key)
        if field_key.is_namespaced and _is_known_namespaced(field_key, catalog):
            continue
        drifted.append(key)

    if drifted and strict:
        raise SchemaDriftError(drifted)
    return drifted
