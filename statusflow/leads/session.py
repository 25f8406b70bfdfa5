"""Caller-side edit session over a single lead."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..catalog import Catalog
from ..config import StatusFlowConfig, load_config
from ..engine.fields import FieldSpec, resolve_fields
from ..engine.path import Path, detect_path, lead_path
from ..engine.transition import TransitionPayload, build_transition_payload
from ..engine.validator import ValidationResult, claimed_aliases, lookup_value, validate
from ..errors import PersistenceError
from .models import Lead
from .store import LeadStore

logger = logging.getLogger(__name__)


class EditSession:
    """Holds in-progress edits for one lead until they are committed.

    The lead snapshot and the catalog are never mutated. Edits live only in
    the session: a failed commit keeps them for a retry and :meth:`discard`
    drops them without anything reaching the store.
    """

    def __init__(
        self,
        lead: Lead,
        catalog: Catalog,
        base_fields: Optional[Iterable[str]] = None,
        strict_branches: bool = False,
    ) -> None:
        self.lead = lead
        self.catalog = catalog
        self.base_fields = list(base_fields) if base_fields is not None else None
        self.strict_branches = strict_branches
        self._edits: Dict[str, Any] = {}
        self._root: Optional[str] = None

    @classmethod
    def from_config(
        cls, lead: Lead, catalog: Catalog, config: Optional[StatusFlowConfig] = None
    ) -> "EditSession":
        """Create a session using ``base_fields`` and ``strict_branches`` from config."""
        config = config or load_config()
        return cls(
            lead,
            catalog,
            base_fields=config.base_fields,
            strict_branches=config.strict_branches,
        )

    @property
    def edits(self) -> Dict[str, Any]:
        return dict(self._edits)

    @property
    def is_dirty(self) -> bool:
        return bool(self._edits) or self._root is not None

    @property
    def root_status_id(self) -> str:
        if self._root is not None:
            return self._root
        return lead_path(self.lead, self.catalog).root_status_id

    def select_root(self, status_id: str) -> None:
        """Start the edited path at a different top-level status."""
        self.catalog.get(status_id)
        self._root = status_id

    def set(self, key: str, value: Any) -> None:
        self._edits[key] = value

    def update(self, values: Mapping[str, Any]) -> None:
        self._edits.update(values)

    def discard(self) -> None:
        """Drop every pending edit."""
        self._edits.clear()
        self._root = None

    def values(self) -> Dict[str, Any]:
        """Persisted data overlaid with the pending edits."""
        return {**self.lead.data, **self._edits}

    def path(self) -> Path:
        return detect_path(
            self.root_status_id, self.values(), self.catalog, strict=self.strict_branches
        )

    def fields(self) -> List[FieldSpec]:
        return resolve_fields(self.path(), self.catalog)

    def form_values(self) -> Dict[str, Any]:
        """Current value of every resolved field, keyed by field key."""
        specs = self.fields()
        values = self.values()
        claimed = claimed_aliases(specs, values, self.base_fields)
        return {spec.key: lookup_value(spec, values, claimed) for spec in specs}

    def validate(self) -> ValidationResult:
        path = self.path()
        return validate(path, self.values(), self.catalog, base_fields=self.base_fields)

    def build_payload(self) -> TransitionPayload:
        return build_transition_payload(
            self.lead, self.path(), self._edits, self.catalog, self.base_fields
        )

    async def commit(self, store: LeadStore) -> Lead:
        """Validate, build and write the payload, then clear the edits.

        Raises:
            ValidationError: Required fields are unset; nothing is written.
            PersistenceError: The store rejected the write; edits are kept.
        """
        payload = self.build_payload()
        try:
            updated = await store.write(self.lead.id, payload)
        except PersistenceError as e:
            logger.error(f"Failed to persist lead {self.lead.id}: {e}. Edits kept for retry.")
            raise
        except Exception as e:
            logger.error(f"Failed to persist lead {self.lead.id}: {e}. Edits kept for retry.")
            raise PersistenceError(f"Write failed for lead {self.lead.id}") from e

        logger.info(f"Committed lead {self.lead.id} at status {payload.status_id}")
        self.lead = updated
        self.discard()
        return updated
