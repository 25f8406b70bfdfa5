"""Load status catalogs from files or already-decoded data."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..errors import CatalogError
from .models import Catalog, Status
from .validation import check_catalog

logger = logging.getLogger(__name__)

CatalogSource = Union[str, Path, Mapping[str, Any], Iterable[Mapping[str, Any]]]

# Keys under which a catalog document may wrap its list of statuses.
_LIST_KEYS = ("statuses", "leadStatuses")


def _read_file(path: Path) -> Any:
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")
    # YAML is a superset of JSON so both formats go through the same parser.
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def _extract_statuses(data: Any) -> list:
    if data is None:
        return []
    if isinstance(data, Mapping):
        for key in _LIST_KEYS:
            if key in data:
                return list(data[key] or [])
        raise CatalogError(
            f"Catalog document must contain one of: {', '.join(_LIST_KEYS)}"
        )
    return list(data)


def load_catalog(source: CatalogSource, strict: bool = True) -> Catalog:
    """Build a :class:`Catalog` from ``source``.

    Args:
        source: Path to a YAML or JSON file, a mapping wrapping a status list,
            or the list of status dicts itself.
        strict: Raise ``CatalogError`` when authoring-time checks fail. When
            ``False`` the issues are only logged.
    """

    if isinstance(source, (str, Path)):
        data = _read_file(Path(source))
    else:
        data = source

    try:
        statuses = [
            item if isinstance(item, Status) else Status.model_validate(item)
            for item in _extract_statuses(data)
        ]
    except PydanticValidationError as exc:
        raise CatalogError(f"Malformed catalog entry: {exc}") from exc

    catalog = Catalog(statuses)
    issues = check_catalog(catalog)
    if issues:
        if strict:
            raise CatalogError("Invalid status catalog", issues)
        for issue in issues:
            logger.warning(f"Catalog issue: {issue}")

    logger.info(f"Loaded catalog with {len(catalog)} statuses")
    return catalog
