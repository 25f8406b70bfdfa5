"""Tests for required-field validation."""

import pytest

from statusflow.engine import Path, validate
from statusflow.errors import ValidationError


@pytest.fixture
def visit_path(catalog):
    return (
        Path.root("new")
        .descend("Outcome", "Interested", catalog)
        .descend("Meeting Result", "Booked", catalog)
    )


def test_missing_required_leaf_field_is_listed(scenario_catalog) -> None:
    path = Path.root("New").descend("Outcome", "Interested", scenario_catalog)

    result = validate(path, {"Outcome": "Interested"}, scenario_catalog)
    assert not result.ok
    assert [(v.status_name, v.field_name) for v in result.violations] == [
        ("StatusB", "Next Meeting Date")
    ]

    filled = {"Outcome": "Interested", "Outcome_Interested_Next Meeting Date": "2024-05-01"}
    assert validate(path, filled, scenario_catalog).ok


def test_all_violations_are_accumulated_and_grouped(catalog, visit_path) -> None:
    values = {
        "Outcome": "Interested",
        "Outcome_Interested_Next Meeting Date": "   ",
        "Outcome_Interested_Meeting Result_Booked_Interests": [],
    }
    result = validate(visit_path, values, catalog)
    assert result.grouped() == {
        "Meeting": ["Next Meeting Date"],
        "Site Visit": ["Visit Date", "Interests"],
    }

    with pytest.raises(ValidationError) as exc:
        result.raise_for_violations()
    assert exc.value.grouped() == result.grouped()
    assert "Site Visit: Visit Date, Interests" in str(exc.value)


def test_branching_select_only_needs_a_choice(catalog) -> None:
    result = validate(Path.root("new"), {}, catalog)
    assert [v.field_name for v in result.violations] == ["Outcome"]
    assert validate(Path.root("new"), {"Outcome": "Interested"}, catalog).ok


def test_non_string_values_only_need_to_be_present(catalog) -> None:
    path = (
        Path.root("new")
        .descend("Outcome", "Interested", catalog)
        .descend("Meeting Result", "Booked", catalog)
        .descend("Feedback", "Positive", catalog)
    )
    prefix = "Outcome_Interested_Meeting Result_Booked_"
    values = {
        "Outcome": "Interested",
        "Outcome_Interested_Next Meeting Date": "2024-05-01",
        prefix + "Visit Date": "2024-05-02T10:00",
        prefix + "Interests": ["2BHK"],
        prefix + "Feedback_Positive_Amount": 0,
    }
    assert validate(path, values, catalog).ok

    values[prefix + "Feedback_Positive_Amount"] = None
    assert [v.field_name for v in validate(path, values, catalog).violations] == ["Amount"]


def test_plain_alias_satisfies_unshared_nested_field(scenario_catalog) -> None:
    path = Path.root("New").descend("Outcome", "Interested", scenario_catalog)
    values = {"Outcome": "Interested", "Next Meeting Date": "2024-05-01"}
    assert validate(path, values, scenario_catalog).ok


def test_plain_alias_ignored_for_shared_names(catalog, visit_path) -> None:
    values = {"Outcome": "Interested", "Next Meeting Date": "2024-05-01"}
    missing = [v.key for v in validate(visit_path, values, catalog).violations]
    assert "Outcome_Interested_Next Meeting Date" in missing


def test_only_keys_limits_checking(catalog, visit_path) -> None:
    result = validate(
        visit_path,
        {"Outcome": "Interested"},
        catalog,
        only_keys={"Outcome_Interested_Meeting Result_Booked_Visit Date"},
    )
    assert [v.field_name for v in result.violations] == ["Visit Date"]


def test_alias_from_another_branch_does_not_satisfy_required_field(overlap_catalog) -> None:
    path = (
        Path.root("New")
        .descend("Outcome", "Not Interested", overlap_catalog)
        .descend("Sub", "Y", overlap_catalog)
    )
    values = {
        "Outcome": "Not Interested",
        "Outcome_Not Interested_Sub": "Y",
        "Outcome_Interested_Date": "2024-01-01",
        "Date": "2024-01-01",
    }
    result = validate(path, values, overlap_catalog)
    assert [v.key for v in result.violations] == ["Outcome_Not Interested_Sub_Y_Date"]

    values["Outcome_Not Interested_Sub_Y_Date"] = "2024-09-09"
    assert validate(path, values, overlap_catalog).ok


def test_base_field_does_not_satisfy_nested_field(overlap_catalog) -> None:
    path = Path.root("New").descend("Outcome", "Interested", overlap_catalog)
    values = {"Outcome": "Interested", "Date": "2024-01-01"}
    assert validate(path, values, overlap_catalog).ok
    assert not validate(path, values, overlap_catalog, base_fields=["Date"]).ok
