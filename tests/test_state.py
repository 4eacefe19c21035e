#!/usr/bin/env python3
"""Tests for ServiceState lookups."""

import pytest

from servicelogs import Draft, NotFoundError, ServiceLog, ServiceState, initial_state


class TestInitialState:
    """Tests for the documented initial state."""

    def test_initial_state_is_empty(self):
        state = initial_state()
        assert state.logs == ()
        assert state.drafts == ()
        assert state.active_draft_id is None
        assert state.current_form == {}
        assert state.is_saving is False


class TestServiceStateLookup:
    """Tests for ServiceState lookup helpers."""

    @pytest.fixture
    def state(self, valid_fields):
        return ServiceState(
            logs=(ServiceLog.from_fields(valid_fields, "log-1"),),
            drafts=(
                Draft(id="d1", created_at="t"),
                Draft(id="d2", created_at="t", data={"carId": "X1"}),
            ),
            active_draft_id="d2",
        )

    def test_active_draft(self, state):
        assert state.active_draft.id == "d2"
        assert state.form_target == "draft"

    def test_no_active_draft_targets_form(self):
        state = ServiceState(drafts=(Draft(id="d1", created_at="t"),))
        assert state.active_draft is None
        assert state.form_target == "form"

    def test_get_log(self, state):
        assert state.get_log("log-1").car_id == "X1"

    def test_get_log_missing_raises(self, state):
        with pytest.raises(NotFoundError) as exc:
            state.get_log("nope")
        assert exc.value.kind == "log"
        assert exc.value.item_id == "nope"

    def test_get_draft_missing_raises(self, state):
        with pytest.raises(NotFoundError):
            state.get_draft("nope")

    def test_not_found_is_lookup_error(self, state):
        with pytest.raises(LookupError):
            state.get_draft("nope")

    def test_has_log_and_draft(self, state):
        assert state.has_log("log-1")
        assert not state.has_log("log-2")
        assert state.has_draft("d1")
        assert not state.has_draft("d3")
