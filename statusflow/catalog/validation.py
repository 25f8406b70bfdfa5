"""Authoring-time checks for status catalogs."""

from __future__ import annotations

import logging
from functools import partial
from typing import Dict, List, Optional

from pydantic import BaseModel

from ..constants import SEP
from ..errors import CatalogError
from .models import Catalog, FieldType

logger = logging.getLogger(__name__)


class CatalogIssue(BaseModel):
    """A single rule violation found in a catalog."""

    status_id: Optional[str] = None
    field_name: Optional[str] = None
    message: str

    def __str__(self) -> str:
        location = ".".join(p for p in (self.status_id, self.field_name) if p)
        return f"{location}: {self.message}" if location else self.message


def check_catalog(catalog: Catalog) -> List[CatalogIssue]:
    """Return every authoring-time rule the catalog breaks."""
    issues: List[CatalogIssue] = []

    seen_ids: set[str] = set()
    for status in catalog:
        if status.id in seen_ids:
            issues.append(CatalogIssue(status_id=status.id, message="duplicate status id"))
        seen_ids.add(status.id)

    defaults = [s.id for s in catalog if s.is_default_status]
    if len(defaults) != 1:
        issues.append(
            CatalogIssue(
                message=f"expected exactly one default status, found {len(defaults)}"
                + (f" ({', '.join(defaults)})" if defaults else "")
            )
        )

    for status in catalog:
        names: set[str] = set()
        for field in status.fields:
            issue = partial(CatalogIssue, status_id=status.id, field_name=field.name)
            if not field.name.strip():
                issues.append(issue(message="field name is empty"))
            if field.name in names:
                issues.append(issue(message="duplicate field name"))
            names.add(field.name)
            if SEP in field.name:
                issues.append(issue(message=f"field name contains the key separator {SEP!r}"))

            if not field.child_status_by_option:
                continue
            if field.type != FieldType.SELECT:
                issues.append(issue(message="only select fields may open child statuses"))
            for option, child_id in field.child_status_by_option.items():
                if option not in field.options:
                    issues.append(issue(message=f"mapped option {option!r} is not a declared option"))
                if SEP in option:
                    issues.append(
                        issue(message=f"branching option {option!r} contains the key separator {SEP!r}")
                    )
                if child_id not in catalog:
                    issues.append(issue(message=f"option {option!r} maps to unknown status {child_id!r}"))

    issues.extend(_find_cycles(catalog))
    return issues


def _find_cycles(catalog: Catalog) -> List[CatalogIssue]:
    edges: Dict[str, List[str]] = {
        status.id: [
            child_id
            for field in status.branching_fields
            for child_id in field.child_status_by_option.values()
            if child_id in catalog
        ]
        for status in catalog
    }
    issues: List[CatalogIssue] = []
    state: Dict[str, int] = {}

    def visit(node: str, trail: List[str]) -> None:
        state[node] = 1
        for child in edges.get(node, []):
            if state.get(child) == 1:
                cycle = trail[trail.index(child):] + [child]
                issues.append(
                    CatalogIssue(status_id=node, message=f"branch cycle {' -> '.join(cycle)}")
                )
            elif child not in state:
                visit(child, trail + [child])
        state[node] = 2

    for status_id in edges:
        if status_id not in state:
            visit(status_id, [status_id])
    return issues


def validate_catalog(catalog: Catalog) -> Catalog:
    """Raise ``CatalogError`` listing every issue, or return ``catalog``."""
    issues = check_catalog(catalog)
    if issues:
        raise CatalogError("Invalid status catalog", issues)
    logger.debug(f"Catalog with {len(catalog)} statuses passed validation")
    return catalog
