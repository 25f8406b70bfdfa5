"""Status-driven form engine: path detection, field resolution, validation
and transitions."""

from .drift import find_schema_drift
from .fields import FieldSpec, resolve_fields
from .keys import BranchChoice, FieldKey, decode_key, encode_key, parse_key
from .path import Path, PathStep, check_path, detect_path, lead_path
from .transition import TransitionPayload, build_transition_payload, merge_data
from .validator import ValidationResult, Violation, validate

__all__ = [
    "BranchChoice",
    "FieldKey",
    "FieldSpec",
    "Path",
    "PathStep",
    "TransitionPayload",
    "ValidationResult",
    "Violation",
    "build_transition_payload",
    "check_path",
    "decode_key",
    "detect_path",
    "encode_key",
    "find_schema_drift",
    "lead_path",
    "merge_data",
    "parse_key",
    "resolve_fields",
    "validate",
]
