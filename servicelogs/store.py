"""ServiceLogStore - runtime wrapper around the service log state."""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from . import reducers
from .debounce import SaveDebouncer
from .defaults import adjust_end_date
from .filters import FilterCriteria, filter_logs
from .loader import load_state, save_state
from .service_log import ServiceLog
from .state import ServiceState, initial_state
from .validation import ValidationResult, validate

logger = logging.getLogger(__name__)


class ServiceLogStore:
    """
    Holds the current ServiceState and applies operations to it.

    Every operation goes through a pure reducer. Autosave writes (draft and
    scratch form updates) raise the saving flag and restart the debouncer;
    `settle()` drops the flag once the debouncer is due. When a path is
    given, state is loaded from it on start and written back after every
    change.

    Operations hold a reentrant lock, so a threaded web server applies them
    one at a time.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        state: Optional[ServiceState] = None,
        debouncer: Optional[SaveDebouncer] = None,
    ):
        self.path = Path(path) if path is not None else None
        self.debouncer = debouncer or SaveDebouncer()
        self._lock = threading.RLock()
        if state is None:
            state = load_state(self.path) if self.path is not None else initial_state()
        self._state = state
        # A stored flag has no timer behind it; give it one
        if self._state.is_saving:
            self.debouncer.touch()

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ServiceState:
        """Current state, with the saving flag settled."""
        self.settle()
        return self._state

    def _apply(self, reducer: Callable[..., ServiceState], *args, **kwargs) -> ServiceState:
        with self._lock:
            new_state = reducer(self._state, *args, **kwargs)
            if new_state is not self._state:
                self._state = new_state
                self._persist()
            return self._state

    def _autosave(self, reducer: Callable[..., ServiceState], *args) -> ServiceState:
        with self._lock:
            before = self._state
            self._apply(reducer, *args)
            if self._state is not before:
                self.debouncer.touch()
            return self._state

    def _persist(self) -> None:
        if self.path is not None:
            save_state(self.path, self._state)

    def settle(self, force: bool = False) -> bool:
        """
        Drop the saving flag if the quiet period has passed.

        With force=True the flag drops immediately. Returns True if the flag
        was cleared by this call.
        """
        with self._lock:
            if not (force or self.debouncer.due()):
                return False
            self.debouncer.cancel()
            if not self._state.is_saving:
                return False
            self._apply(reducers.stop_saving)
            return True

    def filtered_logs(self, criteria: Optional[FilterCriteria] = None):
        return filter_logs(self._state.logs, criteria)

    # -------------------------------------------------------------------------
    # Drafts and scratch form
    # -------------------------------------------------------------------------

    def create_draft(self, seed: Optional[Mapping[str, Any]] = None) -> ServiceState:
        return self._apply(reducers.create_draft, seed)

    def set_active_draft(self, draft_id: str) -> ServiceState:
        return self._apply(reducers.set_active_draft, draft_id)

    def update_draft(self, patch: Mapping[str, Any]) -> ServiceState:
        return self._autosave(reducers.update_draft, patch)

    def update_current_form(self, values: Mapping[str, Any]) -> ServiceState:
        return self._autosave(reducers.update_current_form, values)

    def autosave(self, values: Mapping[str, Any]) -> ServiceState:
        """Route a form change to the active draft, or to the scratch form."""
        with self._lock:
            if self._state.active_draft_id is not None:
                return self.update_draft(values)
            return self.update_current_form(values)

    def delete_draft(self) -> ServiceState:
        return self._apply(reducers.delete_draft)

    def clear_all_drafts(self) -> ServiceState:
        return self._apply(reducers.clear_all_drafts)

    # -------------------------------------------------------------------------
    # Logs
    # -------------------------------------------------------------------------

    def add_log(self, fields: Mapping[str, Any]) -> ServiceState:
        return self._apply(reducers.add_log, fields)

    def update_log(self, log) -> ServiceState:
        return self._apply(reducers.update_log, log)

    def delete_log(self, log_id: str) -> ServiceState:
        return self._apply(reducers.delete_log, log_id)

    def submit(self, fields: Mapping[str, Any]) -> ValidationResult:
        """
        Validate `fields` and commit them as a new log.

        Nothing changes when validation fails; the result carries the
        per-field messages either way.
        """
        result = validate(fields)
        if result.valid:
            self.add_log(fields)
            logger.debug("Committed log for car %s", fields.get("carId"))
        return result

    def edited(self, log_id: str, changes: Mapping[str, Any]) -> ServiceLog:
        """
        The log as it would read after `changes`, without saving it.

        Moving the start date alone pushes the end date along when it would
        no longer be after the start. Raises NotFoundError when the log is
        gone.
        """
        log = self._state.get_log(log_id)
        if "startDate" in changes and "endDate" not in changes:
            changes = adjust_end_date({**changes, "endDate": log.end_date})
        return log.replace_fields(changes)

    def edit(self, log_id: str, changes: Mapping[str, Any]) -> ValidationResult:
        """
        Apply `changes` to an existing log if the edited log is valid.

        Raises NotFoundError when the log is gone.
        """
        with self._lock:
            updated = self.edited(log_id, changes)
            result = validate(updated.to_fields())
            if result.valid:
                self.update_log(updated)
            return result
