from pathlib import Path

import pytest

from statusflow.catalog import load_catalog

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def catalog_path() -> Path:
    return FIXTURES / "catalog.yaml"


@pytest.fixture
def catalog(catalog_path):
    return load_catalog(catalog_path)


@pytest.fixture
def scenario_catalog():
    """Two-level catalog: New branches to StatusB or StatusC on Outcome."""
    return load_catalog(
        [
            {
                "id": "New",
                "name": "New",
                "isDefaultStatus": True,
                "fields": [
                    {
                        "name": "Outcome",
                        "type": "select",
                        "options": ["Interested", "Not Interested"],
                        "childStatusByOption": {
                            "Interested": "StatusB",
                            "Not Interested": "StatusC",
                        },
                    }
                ],
            },
            {
                "id": "StatusB",
                "name": "StatusB",
                "fields": [{"name": "Next Meeting Date", "type": "date", "required": True}],
            },
            {"id": "StatusC", "name": "StatusC", "fields": []},
        ]
    )


@pytest.fixture
def overlap_catalog():
    """Catalog whose branches reuse field names: Date on B and D, Email on C."""
    return load_catalog(
        [
            {
                "id": "New",
                "name": "New",
                "isDefaultStatus": True,
                "fields": [
                    {
                        "name": "Outcome",
                        "type": "select",
                        "options": ["Interested", "Not Interested"],
                        "childStatusByOption": {"Interested": "B", "Not Interested": "C"},
                    }
                ],
            },
            {
                "id": "B",
                "name": "B",
                "fields": [{"name": "Date", "type": "date", "required": True}],
            },
            {
                "id": "C",
                "name": "C",
                "fields": [
                    {"name": "Email", "type": "email"},
                    {
                        "name": "Sub",
                        "type": "select",
                        "options": ["Y"],
                        "childStatusByOption": {"Y": "D"},
                    },
                ],
            },
            {
                "id": "D",
                "name": "D",
                "fields": [{"name": "Date", "type": "date", "required": True}],
            },
        ]
    )
