"""Tests for field resolution."""

import pytest

from statusflow.catalog import FieldType, load_catalog
from statusflow.engine import Path, detect_path, resolve_fields
from statusflow.engine.fields import shared_field_names
from statusflow.engine.path import PathStep
from statusflow.errors import InvalidPathError, UnknownStatusError


def test_root_only_path_lists_root_fields(catalog) -> None:
    specs = resolve_fields(Path.root("new"), catalog)
    assert [s.key for s in specs] == ["Outcome", "Remarks"]
    outcome = specs[0]
    assert outcome.is_branching
    assert outcome.required
    assert outcome.options == ["Interested", "Not Interested"]
    assert outcome.depth == 0


def test_nested_fields_are_namespaced_in_path_order(catalog) -> None:
    path = (
        Path.root("new")
        .descend("Outcome", "Interested", catalog)
        .descend("Meeting Result", "Booked", catalog)
    )
    specs = resolve_fields(path, catalog)
    assert [s.key for s in specs] == [
        "Outcome",
        "Remarks",
        "Outcome_Interested_Next Meeting Date",
        "Outcome_Interested_Meeting Result",
        "Outcome_Interested_Meeting Result_Booked_Visit Date",
        "Outcome_Interested_Meeting Result_Booked_Interests",
        "Outcome_Interested_Meeting Result_Booked_Next Meeting Date",
        "Outcome_Interested_Meeting Result_Booked_Feedback",
    ]
    visit = specs[4]
    assert visit.display_name == "Visit Date"
    assert visit.type == FieldType.DATETIME
    assert visit.status_name == "Site Visit"
    assert visit.depth == 2


def test_untaken_branches_contribute_nothing(catalog) -> None:
    path = Path.root("new").descend("Outcome", "Not Interested", catalog)
    names = [s.display_name for s in resolve_fields(path, catalog)]
    assert "Reason" in names
    assert "Next Meeting Date" not in names
    # The final status still shows its own branching field.
    assert "Reopen" in names


def test_every_detected_path_resolves_to_union_of_node_fields(catalog) -> None:
    data = {
        "Outcome": "Interested",
        "Meeting Result": "Booked",
        "Feedback": "Positive",
    }
    path = detect_path("new", data, catalog)
    specs = resolve_fields(path, catalog)

    expected = sum(len(catalog.get(sid).fields) for sid in path.status_ids)
    assert len(specs) == expected
    assert len({s.key for s in specs}) == len(specs)
    for depth, status_id in enumerate(path.status_ids):
        declared = [f.name for f in catalog.get(status_id).fields]
        assert [s.display_name for s in specs if s.depth == depth] == declared


def test_duplicate_field_names_within_a_status_are_deduplicated() -> None:
    catalog = load_catalog(
        [
            {
                "id": "root",
                "name": "Root",
                "isDefaultStatus": True,
                "fields": [{"name": "Note"}, {"name": "Note", "type": "textarea"}],
            }
        ],
        strict=False,
    )
    specs = resolve_fields(Path.root("root"), catalog)
    assert [(s.key, s.type) for s in specs] == [("Note", FieldType.TEXT)]


def test_shared_field_names(catalog) -> None:
    path = (
        Path.root("new")
        .descend("Outcome", "Interested", catalog)
        .descend("Meeting Result", "Booked", catalog)
    )
    assert shared_field_names(resolve_fields(path, catalog)) == {"Next Meeting Date"}


def test_invalid_paths_are_rejected(catalog) -> None:
    with pytest.raises(InvalidPathError):
        resolve_fields(Path(steps=(PathStep(status_id="new"), PathStep(status_id="lost"))), catalog)
    with pytest.raises(UnknownStatusError):
        resolve_fields(Path.root("ghost"), catalog)
