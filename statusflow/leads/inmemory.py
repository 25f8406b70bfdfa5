"""In-memory implementation of the lead store."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Dict

from ..errors import PersistenceError
from .models import HistoryEntry, Lead
from .store import LeadStore

if TYPE_CHECKING:
    from ..engine.transition import TransitionPayload


class InMemoryLeadStore(LeadStore):
    """Store leads in local memory.

    Useful for tests and for callers that keep leads elsewhere. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._leads: Dict[str, Lead] = {}

    # ------------------------------------------------------------------
    async def add(self, lead: Lead) -> Lead:
        if lead.id in self._leads:
            raise PersistenceError(f"Lead {lead.id} already exists")
        self._leads[lead.id] = lead.model_copy(deep=True)
        return lead

    async def read(self, lead_id: str) -> Lead:
        lead = self._leads.get(lead_id)
        if lead is None:
            raise PersistenceError(f"Lead {lead_id} not found")
        return lead.model_copy(deep=True)

    async def write(self, lead_id: str, payload: "TransitionPayload") -> Lead:
        lead = self._leads.get(lead_id)
        if lead is None:
            raise PersistenceError(f"Lead {lead_id} not found")
        data = copy.deepcopy(payload.data)
        updated = lead.model_copy(
            update={
                "current_status_id": payload.status_id,
                "data": data,
                "history": lead.history
                + [HistoryEntry(status_id=payload.status_id, data=copy.deepcopy(data))],
            },
            deep=True,
        )
        self._leads[lead_id] = updated
        return updated.model_copy(deep=True)

    async def list_leads(self) -> list[Lead]:
        return [lead.model_copy(deep=True) for lead in self._leads.values()]
