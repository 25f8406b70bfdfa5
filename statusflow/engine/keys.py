"""Branch-qualified storage keys.

A field on the root status is stored under its bare name. A field reached
through one or more branches is stored under a key that carries one
``branch field SEP option`` segment per ancestor branch, followed by the field
name::

    Outcome_Interested_Next Meeting Date

Keys are handled as :class:`FieldKey` values inside the engine and flattened
to strings only where data is read from or written to the lead blob.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..constants import SEP

if TYPE_CHECKING:
    from ..catalog import Catalog
    from .path import Path


class BranchChoice(BaseModel):
    """The option chosen on a branching field."""

    model_config = ConfigDict(frozen=True)

    field_name: str
    option: str


class FieldKey(BaseModel):
    """Structured key: the branches taken plus the field name."""

    model_config = ConfigDict(frozen=True)

    branches: Tuple[BranchChoice, ...] = ()
    field_name: str

    @property
    def depth(self) -> int:
        return len(self.branches)

    @property
    def is_namespaced(self) -> bool:
        return bool(self.branches)

    def encode(self) -> str:
        return encode_key(self.branches, self.field_name)

    def __str__(self) -> str:
        return self.encode()


def encode_key(branches: Iterable[BranchChoice], field_name: str) -> str:
    """Flatten ``branches`` and ``field_name`` into a storage key."""
    parts: list[str] = []
    for branch in branches:
        parts.extend((branch.field_name, branch.option))
    parts.append(field_name)
    return SEP.join(parts)


def parse_key(key: str) -> FieldKey:
    """Split a storage key back into its branch segments and field name.

    Keys that cannot be namespaced (a single part, or an even number of parts)
    are returned as plain depth-0 keys.
    """
    parts = key.split(SEP)
    if len(parts) < 3 or len(parts) % 2 == 0:
        return FieldKey(field_name=key)
    branches = tuple(
        BranchChoice(field_name=parts[i], option=parts[i + 1])
        for i in range(0, len(parts) - 1, 2)
    )
    return FieldKey(branches=branches, field_name=parts[-1])


def decode_key(key: str, path: "Path", catalog: "Catalog") -> Optional[Tuple[int, str]]:
    """Recover ``(depth, field name)`` for ``key`` along ``path``.

    Returns ``None`` when ``key`` does not name a field of any status on the
    path under that status's prefix.
    """
    for depth, status_id in enumerate(path.status_ids):
        branches = path.branches(depth)
        for field in catalog.get(status_id).fields:
            if encode_key(branches, field.name) == key:
                return depth, field.name
    return None
