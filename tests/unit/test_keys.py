"""Tests for branch-qualified storage keys."""

from statusflow.engine import BranchChoice, FieldKey, Path, decode_key, encode_key, parse_key


def test_root_fields_use_bare_names() -> None:
    assert encode_key((), "Email") == "Email"
    assert FieldKey(field_name="Email").encode() == "Email"


def test_prefix_accumulates_one_segment_per_branch() -> None:
    branches = (
        BranchChoice(field_name="Outcome", option="Interested"),
        BranchChoice(field_name="Meeting Result", option="Booked"),
    )
    assert encode_key(branches[:1], "Next Meeting Date") == "Outcome_Interested_Next Meeting Date"
    assert (
        encode_key(branches, "Visit Date")
        == "Outcome_Interested_Meeting Result_Booked_Visit Date"
    )


def test_parse_key_inverts_encoding() -> None:
    key = parse_key("Outcome_Interested_Meeting Result_Booked_Visit Date")
    assert key.depth == 2
    assert key.field_name == "Visit Date"
    assert key.branches[1] == BranchChoice(field_name="Meeting Result", option="Booked")
    assert key.encode() == "Outcome_Interested_Meeting Result_Booked_Visit Date"


def test_parse_key_keeps_unsplittable_keys_plain() -> None:
    assert parse_key("Email") == FieldKey(field_name="Email")
    assert parse_key("legacy_key") == FieldKey(field_name="legacy_key")


def test_decode_key_against_path(catalog) -> None:
    path = Path.root("new").descend("Outcome", "Interested", catalog)

    assert decode_key("Outcome", path, catalog) == (0, "Outcome")
    assert decode_key("Outcome_Interested_Next Meeting Date", path, catalog) == (
        1,
        "Next Meeting Date",
    )
    assert decode_key("Next Meeting Date", path, catalog) is None
    assert decode_key("Outcome_Not Interested_Reason", path, catalog) is None
