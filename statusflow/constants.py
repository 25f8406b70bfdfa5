"""Shared constants for statusflow."""

# Separator used when flattening branch-qualified keys. Catalog validation
# rejects field names and branching option values that contain it.
SEP = "_"

DEFAULT_CONFIG_FILE = "statusflow.yaml"

# Lead-level keys captured outside any status form. Deployments add their own
# through the ``base_fields`` config key.
DEFAULT_BASE_FIELDS = ["First Name", "Email", "Phone", "Notes"]
