"""Lead records as persisted by a lead store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

if TYPE_CHECKING:
    from ..catalog import Catalog


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _status_ref(v: Any) -> Any:
    # Stores may embed the whole status object instead of its id.
    if isinstance(v, dict):
        v = v.get("id", v.get("_id"))
    return str(v) if v is not None else v


class HistoryEntry(BaseModel):
    """Snapshot of a lead's data when it entered a status."""

    status_id: str = Field(validation_alias=AliasChoices("status_id", "status"))
    data: Dict[str, Any] = Field(default_factory=dict)
    changed_at: datetime = Field(
        default_factory=_utcnow, validation_alias=AliasChoices("changed_at", "changedAt")
    )

    @field_validator("status_id", mode="before")
    @classmethod
    def _normalize_status(cls, v: Any) -> Any:
        return _status_ref(v)


class Lead(BaseModel):
    """A lead positioned at a node of the status tree."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    current_status_id: str = Field(
        validation_alias=AliasChoices("current_status_id", "currentStatus")
    )
    data: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("data", "customData")
    )
    history: List[HistoryEntry] = Field(
        default_factory=list, validation_alias=AliasChoices("history", "statusHistory")
    )

    @field_validator("current_status_id", mode="before")
    @classmethod
    def _normalize_status(cls, v: Any) -> Any:
        return _status_ref(v)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        return str(v) if v is not None else v


def new_lead(
    lead_id: str, catalog: "Catalog", data: Optional[Dict[str, Any]] = None
) -> Lead:
    """Create a lead at the catalog's default status."""
    return Lead(
        id=lead_id,
        current_status_id=catalog.default_status.id,
        data=dict(data or {}),
    )
