"""statusflow: status-driven dynamic forms for lead workflows."""

from .catalog import Catalog, FieldType, FormField, Status, get_catalog, load_catalog
from .engine import (
    FieldSpec,
    Path,
    TransitionPayload,
    ValidationResult,
    build_transition_payload,
    detect_path,
    resolve_fields,
    validate,
)
from .errors import (
    AmbiguousBranchError,
    CatalogError,
    InvalidPathError,
    PersistenceError,
    SchemaDriftError,
    StatusFlowError,
    ValidationError,
)
from .leads import EditSession, InMemoryLeadStore, Lead, LeadStore, new_lead

__version__ = "0.1.0"
__all__ = [
    "AmbiguousBranchError",
    "Catalog",
    "CatalogError",
    "EditSession",
    "FieldSpec",
    "FieldType",
    "FormField",
    "InMemoryLeadStore",
    "InvalidPathError",
    "Lead",
    "LeadStore",
    "Path",
    "PersistenceError",
    "SchemaDriftError",
    "Status",
    "StatusFlowError",
    "TransitionPayload",
    "ValidationError",
    "ValidationResult",
    "build_transition_payload",
    "detect_path",
    "get_catalog",
    "load_catalog",
    "new_lead",
    "resolve_fields",
    "validate",
]
