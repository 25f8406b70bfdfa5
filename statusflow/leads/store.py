"""Lead store contract."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .models import Lead

if TYPE_CHECKING:
    from ..engine.transition import TransitionPayload


class LeadStore(Protocol):
    """Protocol for lead persistence backends.

    A write commits status and data together or not at all. Failures raise
    ``PersistenceError`` and leave the previously persisted lead untouched.
    Concurrent writes to the same lead are last-writer-wins.
    """

    async def read(self, lead_id: str) -> Lead:
        """Return the lead with ``lead_id``."""

    async def write(self, lead_id: str, payload: "TransitionPayload") -> Lead:
        """Persist ``payload`` and return the updated lead."""
