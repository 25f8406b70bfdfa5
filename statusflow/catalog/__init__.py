"""Schema catalog for statusflow."""

from __future__ import annotations

import os
from typing import Optional

from ..config import StatusFlowConfig, load_config
from ..errors import CatalogError
from .loader import load_catalog
from .models import Catalog, FieldType, FormField, Status
from .validation import CatalogIssue, check_catalog, validate_catalog

_catalog_instance: Catalog | None = None


def get_catalog(
    path: Optional[str] = None, config: Optional[StatusFlowConfig] = None
) -> Catalog:
    """Factory function to obtain the configured catalog.

    The catalog file is taken from ``path``, the ``STATUSFLOW_CATALOG``
    environment variable, or the loaded configuration. The loaded catalog is
    cached and reused by later calls without arguments.
    """

    global _catalog_instance
    if _catalog_instance is not None and path is None and config is None:
        return _catalog_instance

    config = config or load_config()
    path = path or os.getenv("STATUSFLOW_CATALOG") or config.catalog_path
    if not path:
        raise CatalogError("No catalog configured")

    _catalog_instance = load_catalog(path, strict=config.strict_catalog)
    return _catalog_instance


__all__ = [
    "Catalog",
    "CatalogIssue",
    "FieldType",
    "FormField",
    "Status",
    "check_catalog",
    "get_catalog",
    "load_catalog",
    "validate_catalog",
]
