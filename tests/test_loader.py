#!/usr/bin/env python3
"""Tests for YAML loading and saving of the state document."""

import yaml

from servicelogs import STORAGE_KEY, Draft, ServiceLog, ServiceState, initial_state, load_state, save_state
from servicelogs.loader import fields_from_dict, log_to_dict, state_from_dict, state_to_dict

# =============================================================================
# Serialization
# =============================================================================


class TestStateToDict:
    """Tests for state_to_dict."""

    def test_initial_state_layout(self):
        assert state_to_dict(initial_state()) == {
            "logs": [],
            "drafts": [],
            "activeDraftId": None,
            "currentForm": {},
            "isSaving": False,
        }

    def test_log_uses_camel_case(self, valid_fields):
        log = ServiceLog.from_fields(valid_fields, "log-1")
        assert log_to_dict(log) == {"id": "log-1", **valid_fields}

    def test_draft_layout(self):
        state = ServiceState(
            drafts=(Draft(id="d1", created_at="2024-01-05T10:00:00+00:00", data={"carId": "X1"}, is_saved=True),),
            active_draft_id="d1",
        )
        assert state_to_dict(state)["drafts"] == [
            {"id": "d1", "data": {"carId": "X1"}, "createdAt": "2024-01-05T10:00:00+00:00", "isSaved": True}
        ]


class TestStateFromDict:
    """Tests for state_from_dict."""

    def test_missing_sections_use_initial_values(self):
        assert state_from_dict({}) == initial_state()

    def test_dangling_active_draft_falls_back_to_first(self):
        state = state_from_dict(
            {
                "drafts": [{"id": "d1", "createdAt": "t", "data": {}}],
                "activeDraftId": "gone",
            }
        )
        assert state.active_draft_id == "d1"

    def test_dangling_active_draft_without_drafts(self):
        assert state_from_dict({"activeDraftId": "gone"}).active_draft_id is None


class TestFieldsFromDict:
    """Tests for fields_from_dict."""

    def test_keeps_only_log_fields(self, valid_fields):
        assert fields_from_dict({**valid_fields, "id": "x", "junk": 1}) == valid_fields


# =============================================================================
# Files
# =============================================================================


class TestSaveAndLoad:
    """Tests for save_state and load_state."""

    def test_round_trip(self, tmp_path, valid_fields):
        """A saved document loads back to an equal state."""
        state = ServiceState(
            logs=(
                ServiceLog.from_fields(valid_fields, "log-2"),
                ServiceLog.from_fields({**valid_fields, "odometer": 0, "type": "emergency"}, "log-1"),
            ),
            drafts=(
                Draft(id="d1", created_at="2024-01-05T10:00:00+00:00", data={"carId": "X1", "odometer": 100}, is_saved=True),
                Draft(id="d2", created_at="2024-01-06T10:00:00+00:00"),
            ),
            active_draft_id="d2",
            current_form={"providerId": "P1"},
            is_saving=True,
        )
        path = tmp_path / "logs.yaml"
        save_state(path, state)
        assert load_state(path) == state

    def test_saved_under_storage_key(self, tmp_path):
        path = tmp_path / "logs.yaml"
        save_state(path, initial_state())
        data = yaml.safe_load(path.read_text())
        assert list(data) == [STORAGE_KEY]
        assert data[STORAGE_KEY]["logs"] == []

    def test_dates_stay_strings_in_file(self, tmp_path, valid_fields):
        path = tmp_path / "logs.yaml"
        save_state(path, ServiceState(logs=(ServiceLog.from_fields(valid_fields, "log-1"),)))
        data = yaml.safe_load(path.read_text())
        assert data[STORAGE_KEY]["logs"][0]["startDate"] == "2024-01-05"

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "logs.yaml"
        save_state(path, initial_state())
        assert path.exists()

    def test_missing_file_gives_initial_state(self, tmp_path):
        assert load_state(tmp_path / "nope.yaml") == initial_state()

    def test_empty_file_gives_initial_state(self, tmp_path):
        path = tmp_path / "logs.yaml"
        path.write_text("")
        assert load_state(path) == initial_state()

    def test_missing_key_gives_initial_state(self, tmp_path):
        path = tmp_path / "logs.yaml"
        path.write_text("other_app:\n  logs: []\n")
        assert load_state(path) == initial_state()

    def test_invalid_yaml_gives_initial_state(self, tmp_path):
        path = tmp_path / "logs.yaml"
        path.write_text(f"{STORAGE_KEY}:\n  logs: [unclosed\n")
        assert load_state(path) == initial_state()

    def test_malformed_document_gives_initial_state(self, tmp_path):
        path = tmp_path / "logs.yaml"
        path.write_text(f"{STORAGE_KEY}:\n  logs:\n    - carId: X1\n")
        assert load_state(path) == initial_state()

    def test_non_mapping_gives_initial_state(self, tmp_path):
        path = tmp_path / "logs.yaml"
        path.write_text("- just\n- a list\n")
        assert load_state(path) == initial_state()

    def test_unquoted_dates_load_as_strings(self, tmp_path):
        """Hand-edited files with bare dates still load as ISO strings."""
        path = tmp_path / "logs.yaml"
        path.write_text(
            f"""
{STORAGE_KEY}:
  logs:
    - id: log-1
      providerId: P1
      serviceOrder: SO-1
      carId: X1
      odometer: 10
      engineHours: 1
      startDate: 2024-01-05
      endDate: 2024-01-06
      type: planned
      serviceDescription: Oil change
  currentForm:
    startDate: 2024-02-01
"""
        )
        state = load_state(path)
        assert state.logs[0].start_date == "2024-01-05"
        assert state.logs[0].end_date == "2024-01-06"
        assert state.current_form == {"startDate": "2024-02-01"}
