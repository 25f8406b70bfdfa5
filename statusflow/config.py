from __future__ import annotations

import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import DEFAULT_BASE_FIELDS, DEFAULT_CONFIG_FILE


class StatusFlowConfig(BaseModel):
    """Top-level configuration model."""

    catalog_path: Optional[str] = None
    strict_catalog: bool = True
    strict_branches: bool = False
    base_fields: List[str] = Field(default_factory=lambda: list(DEFAULT_BASE_FIELDS))


def load_config(path: Optional[str] = None) -> StatusFlowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to STATUSFLOW_CONFIG env
            variable or 'statusflow.yaml' in the current directory.
    """

    config_path = path or os.getenv("STATUSFLOW_CONFIG", DEFAULT_CONFIG_FILE)
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = StatusFlowConfig(**data)
    else:
        config = StatusFlowConfig()

    env_catalog = os.getenv("STATUSFLOW_CATALOG")
    if env_catalog:
        config.catalog_path = env_catalog
    return config
