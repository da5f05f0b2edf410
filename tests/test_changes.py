from datetime import UTC, datetime

from app.models import User, UserRole
from app.utils.changes import DEFAULT_EXCLUDED_FIELDS, detect_changes, snapshot_row


def test_detect_changes_reports_only_changed_fields():
    old = {"name": "Somchai", "rank": "Sergeant", "phone": "0800000000"}
    new = {"name": "Somchai", "rank": "Lieutenant", "phone": "0811111111"}

    changes = detect_changes(old, new, [])

    assert changes == [
        {"field": "rank", "oldValue": "Sergeant", "newValue": "Lieutenant"},
        {"field": "phone", "oldValue": "0800000000", "newValue": "0811111111"},
    ]


def test_detect_changes_skips_excluded_fields():
    old = {"id": 1, "password": "a", "name": "x"}
    new = {"id": 2, "password": "b", "name": "y"}

    changes = detect_changes(old, new, ["id", "password"])

    assert [change["field"] for change in changes] == ["name"]


def test_detect_changes_is_empty_for_identical_records():
    record = {
        "name": "Radio",
        "tags": ["a", "b"],
        "meta": {"x": 1, "nested": {"y": [1, 2]}},
        "when": datetime(2026, 1, 1, tzinfo=UTC),
        "nothing": None,
    }

    assert detect_changes(record, dict(record), []) == []


def test_detect_changes_compares_structurally():
    old = {"meta": {"a": 1, "b": 2}, "tags": ["x"]}
    new = {"meta": {"b": 2, "a": 1}, "tags": ["x", "y"]}

    changes = detect_changes(old, new, [])

    assert changes == [{"field": "tags", "oldValue": ["x"], "newValue": ["x", "y"]}]


def test_detect_changes_reports_fields_missing_from_old():
    changes = detect_changes({}, {"notes": "new"}, [])

    assert changes == [{"field": "notes", "oldValue": None, "newValue": "new"}]


def test_detect_changes_distinguishes_value_types():
    changes = detect_changes({"count": 1}, {"count": "1"}, [])

    assert len(changes) == 1


def test_detect_changes_encodes_datetimes():
    before = datetime(2026, 1, 1, 8, 0, tzinfo=UTC)
    after = datetime(2026, 1, 2, 8, 0, tzinfo=UTC)

    changes = detect_changes({"at": before}, {"at": after}, [])

    assert changes == [{"field": "at", "oldValue": before.isoformat(), "newValue": after.isoformat()}]


def test_snapshot_row_uses_column_keys():
    user = User(username="u1", name="Name", role=UserRole.admin, is_active=True)

    row = snapshot_row(user)

    assert row["username"] == "u1"
    assert row["role"] == UserRole.admin
    assert DEFAULT_EXCLUDED_FIELDS <= set(row)
