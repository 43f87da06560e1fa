"""
Tests for roster loading and lookup.
"""
import json

import pytest

from config import ConfigurationError
from config.roster import DEFAULT_ROSTER_PATH, Roster, load_roster, normalize_student_id
from database import AccessLevel


def write_roster(tmp_path, data):
    path = tmp_path / "roster.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestRoster:

    def test_lookup_is_case_insensitive(self, tmp_path):
        roster = load_roster(write_roster(tmp_path, {
            "ab12": {"group_id": 2, "first_name": "Anna", "access_level": "monitor"},
        }))

        entry = roster.get("  AB12 ")
        assert entry.group_id == 2
        assert entry.first_name == "Anna"
        assert entry.access_level == AccessLevel.MONITOR
        assert "ab12" in roster
        assert list(roster) == ["AB12"]

    def test_access_level_defaults_to_student(self):
        roster = Roster.from_dict({"X1": {"group_id": 1}})
        assert roster.get("X1").access_level == AccessLevel.STUDENT

    def test_unknown_id(self):
        roster = Roster.from_dict({"X1": {"group_id": 1}})
        assert roster.get("X2") is None
        assert "X2" not in roster

    def test_invalid_access_level(self, tmp_path):
        path = write_roster(tmp_path, {"X1": {"group_id": 1, "access_level": "principal"}})
        with pytest.raises(ConfigurationError):
            load_roster(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_roster(str(tmp_path / "missing.json"))
        assert exc_info.value.setting == "roster_path"

    def test_not_an_object(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_roster(write_roster(tmp_path, ["ST001"]))

    def test_bundled_roster(self):
        roster = load_roster(str(DEFAULT_ROSTER_PATH))
        assert "ST001" in roster
        assert roster.group_ids() == {1, 2, 3}
        assert roster.get("ST005").access_level == AccessLevel.OWNER

    def test_normalize_student_id(self):
        assert normalize_student_id(" st001\n") == "ST001"
