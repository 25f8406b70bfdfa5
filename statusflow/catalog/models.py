"""Pydantic models describing the status catalog."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import CatalogError, UnknownStatusError


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"


_TYPE_ALIASES = {"tel": FieldType.PHONE.value}


class FormField(BaseModel):
    """A single named, typed datum declared by a status."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    options: List[str] = Field(default_factory=list)
    child_status_by_option: Dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("child_status_by_option", "childStatusByOption"),
    )

    @model_validator(mode="before")
    @classmethod
    def _reject_positional_children(cls, data: Any) -> Any:
        if isinstance(data, dict) and "statusIds" in data:
            raise ValueError(
                "positional 'statusIds' are not supported; map option values to "
                "status ids with 'childStatusByOption'"
            )
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return _TYPE_ALIASES.get(v, v)
        return v

    @field_validator("options", mode="before")
    @classmethod
    def _normalize_options(cls, v: Any) -> Any:
        # Options may arrive as plain strings or as {"value", "label"} objects.
        if v is None:
            return []
        normalized = []
        for option in v:
            if isinstance(option, dict):
                option = option.get("value", option.get("label"))
            normalized.append(str(option))
        return normalized

    @field_validator("child_status_by_option", mode="before")
    @classmethod
    def _stringify_children(cls, v: Any) -> Any:
        if v is None:
            return {}
        return {str(option): str(status_id) for option, status_id in dict(v).items()}

    @property
    def is_branching(self) -> bool:
        """``True`` for select fields whose options open child statuses."""
        return self.type == FieldType.SELECT and bool(self.child_status_by_option)

    def child_for(self, value: Any) -> Optional[str]:
        """Return the child status id mapped to ``value``, matched by value."""
        if not isinstance(value, str):
            return None
        return self.child_status_by_option.get(value)


class Status(BaseModel):
    """A node in the workflow tree."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    fields: List[FormField] = Field(
        default_factory=list, validation_alias=AliasChoices("fields", "formFields")
    )
    is_default_status: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_default_status", "isDefaultStatus"),
    )
    is_final_status: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_final_status", "isFinalStatus"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        return str(v) if v is not None else v

    @property
    def branching_fields(self) -> List[FormField]:
        return [f for f in self.fields if f.is_branching]

    def field(self, name: str) -> Optional[FormField]:
        return next((f for f in self.fields if f.name == name), None)


class Catalog:
    """Read-only collection of statuses keyed by id.

    The catalog is immutable input for the duration of an edit session; it
    never changes once constructed.
    """

    def __init__(self, statuses: List[Status]) -> None:
        self._order: tuple[Status, ...] = tuple(statuses)
        self._by_id: Dict[str, Status] = {}
        for status in self._order:
            self._by_id.setdefault(status.id, status)

    def __iter__(self) -> Iterator[Status]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, status_id: object) -> bool:
        return status_id in self._by_id

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"Catalog({[s.id for s in self._order]!r})"

    def get(self, status_id: str) -> Status:
        """Return the status with ``status_id`` or raise ``UnknownStatusError``."""
        try:
            return self._by_id[status_id]
        except KeyError:
            raise UnknownStatusError(status_id) from None

    @property
    def default_status(self) -> Status:
        defaults = [s for s in self._order if s.is_default_status]
        if not defaults:
            raise CatalogError("Catalog declares no default status")
        return defaults[0]

    def parents_of(self, status_id: str) -> List[tuple[Status, FormField, str]]:
        """Every ``(status, branching field, option)`` that leads to ``status_id``."""
        parents = []
        for status in self._order:
            for field in status.branching_fields:
                for option, child_id in field.child_status_by_option.items():
                    if child_id == status_id:
                        parents.append((status, field, option))
        return parents

    @property
    def top_level_statuses(self) -> List[Status]:
        """Statuses that are not the child of any branch."""
        children = {
            child_id
            for status in self._order
            for field in status.branching_fields
            for child_id in field.child_status_by_option.values()
        }
        return [s for s in self._order if s.id not in children]
