"""Lead records, the store contract and edit sessions."""

from .inmemory import InMemoryLeadStore
from .models import HistoryEntry, Lead, new_lead
from .session import EditSession
from .store import LeadStore

__all__ = [
    "EditSession",
    "HistoryEntry",
    "InMemoryLeadStore",
    "Lead",
    "LeadStore",
    "new_lead",
]
