"""Path model and branch detection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..catalog import Catalog, FormField, Status
from ..errors import AmbiguousBranchError, InvalidPathError
from .keys import BranchChoice, encode_key

if TYPE_CHECKING:
    from ..leads.models import Lead

logger = logging.getLogger(__name__)


class PathStep(BaseModel):
    """One status on a path and the branch choice that reached it."""

    model_config = ConfigDict(frozen=True)

    status_id: str
    via: Optional[BranchChoice] = None


class Path(BaseModel):
    """Chain of statuses from a root to the deepest status reached.

    Paths are always derived from data and never stored. The last element is
    the effective current status.
    """

    model_config = ConfigDict(frozen=True)

    steps: Tuple[PathStep, ...]

    @classmethod
    def root(cls, status_id: str) -> "Path":
        return cls(steps=(PathStep(status_id=status_id),))

    @property
    def status_ids(self) -> List[str]:
        return [step.status_id for step in self.steps]

    @property
    def root_status_id(self) -> str:
        return self.steps[0].status_id

    @property
    def effective_status_id(self) -> str:
        return self.steps[-1].status_id

    @property
    def depth(self) -> int:
        """Depth of the deepest status; zero for a root-only path."""
        return len(self.steps) - 1

    def __len__(self) -> int:
        return len(self.steps)

    def branches(self, depth: int) -> Tuple[BranchChoice, ...]:
        """Branch choices leading to the status at ``depth``."""
        return tuple(step.via for step in self.steps[1 : depth + 1] if step.via)

    def truncate(self, depth: int) -> "Path":
        return Path(steps=self.steps[: depth + 1])

    def descend(self, field_name: str, option: str, catalog: Catalog) -> "Path":
        """Return a new path extended by choosing ``option`` on ``field_name``."""
        status = catalog.get(self.effective_status_id)
        if status.is_final_status:
            raise InvalidPathError(f"Status {status.id!r} is final and has no branches")
        field = status.field(field_name)
        if field is None or not field.is_branching:
            raise InvalidPathError(
                f"Status {status.id!r} has no branching field {field_name!r}"
            )
        child_id = field.child_for(option)
        if child_id is None:
            raise InvalidPathError(
                f"Option {option!r} of {field_name!r} does not open a child status"
            )
        step = PathStep(
            status_id=child_id, via=BranchChoice(field_name=field_name, option=option)
        )
        return Path(steps=self.steps + (step,))


def check_path(path: Path, catalog: Catalog) -> None:
    """Raise ``InvalidPathError`` unless every step follows a declared branch."""
    if not path.steps:
        raise InvalidPathError("Path is empty")
    if path.steps[0].via is not None:
        raise InvalidPathError("Root step cannot carry a branch choice")
    parent = catalog.get(path.root_status_id)
    for step in path.steps[1:]:
        if parent.is_final_status:
            raise InvalidPathError(f"Path continues past final status {parent.id!r}")
        field = parent.field(step.via.field_name) if step.via else None
        if field is None or field.child_for(step.via.option) != step.status_id:
            raise InvalidPathError(
                f"Status {step.status_id!r} is not reachable from {parent.id!r}"
                + (f" via {step.via.field_name}={step.via.option!r}" if step.via else "")
            )
        parent = catalog.get(step.status_id)


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def _branch_values(
    field: FormField, data: Mapping[str, Any], branches: Tuple[BranchChoice, ...]
) -> List[Any]:
    keys = [field.name]
    if branches:
        keys.append(encode_key(branches, field.name))
    return [data[key] for key in keys if _is_present(data.get(key))]


def _descend(
    status: Status,
    data: Mapping[str, Any],
    catalog: Catalog,
    branches: Tuple[BranchChoice, ...],
    strict: bool,
    visited: frozenset[str],
) -> List[PathStep]:
    if status.is_final_status:
        return []

    for field in status.branching_fields:
        values = _branch_values(field, data, branches)
        if not values:
            continue

        value, child_id = values[0], None
        for candidate in values:
            if field.child_for(candidate):
                value, child_id = candidate, field.child_for(candidate)
                break
        if child_id is None:
            if value not in field.options:
                error = AmbiguousBranchError(status.id, field.name, value)
                if strict:
                    raise error
                logger.warning(f"Stopping descent at {status.id!r}: {error}")
            return []

        if child_id in visited or child_id not in catalog:
            logger.warning(
                f"Branch {field.name}={value!r} on {status.id!r} leads to "
                f"{'a visited' if child_id in visited else 'an unknown'} status {child_id!r}"
            )
            return []

        choice = BranchChoice(field_name=field.name, option=value)
        logger.debug(f"Descending from {status.id!r} to {child_id!r} via {field.name}={value!r}")
        child = catalog.get(child_id)
        return [PathStep(status_id=child_id, via=choice)] + _descend(
            child, data, catalog, branches + (choice,), strict, visited | {child_id}
        )

    return []


def detect_path(
    root_status_id: str,
    data: Mapping[str, Any],
    catalog: Catalog,
    strict: bool = False,
) -> Path:
    """Reconstruct the chain of statuses ``data`` has descended into.

    At each status the first branching field with a value in ``data`` decides
    the next step. The plain key is consulted before the namespaced key for
    the current depth. A value matching no declared option stops descent at
    the parent; it is logged, or raised as ``AmbiguousBranchError`` when
    ``strict`` is set.
    """
    root = catalog.get(root_status_id)
    steps = [PathStep(status_id=root.id)] + _descend(
        root, data, catalog, (), strict, frozenset({root.id})
    )
    return Path(steps=tuple(steps))


def lead_path(lead: "Lead", catalog: Catalog, strict: bool = False) -> Path:
    """Recover the committed path of ``lead``.

    Only the effective status is persisted, so the root is found by trying
    every top-level status until one detects a path through
    ``lead.current_status_id``. The lead's own status is the last resort.
    """
    current = lead.current_status_id
    candidates = [s.id for s in catalog.top_level_statuses if s.id != current] + [current]
    for root_id in candidates:
        if root_id not in catalog:
            continue
        path = detect_path(root_id, lead.data, catalog, strict=strict)
        if current in path.status_ids:
            return path.truncate(path.status_ids.index(current))

    logger.warning(f"No root reaches status {current!r} for lead {lead.id!r}")
    return Path.root(current)
