"""
Service log state models.

This package holds the state model behind the service log form and table:
- LogType: Service categories (planned, unplanned, emergency)
- ServiceLog: Committed service records
- Draft: In-progress, unvalidated records
- ServiceState: The single state document (logs, drafts, active draft, scratch form)
- reducers: Pure state transitions, one per operation
- validate: Commit-time field rules
- filter_logs: Search/type/date projection for the table
- ServiceLogStore: Runtime wrapper with autosave debounce and persistence
"""

from .log_type import LogType
from .errors import NotFoundError
from .service_log import ServiceLog
from .draft import Draft
from .state import ServiceState, initial_state
from .validation import ValidationResult, validate
from .filters import ALL_TYPES, DateRange, FilterCriteria, filter_logs
from .debounce import SAVE_DELAY_SECONDS, SaveDebouncer
from .defaults import adjust_end_date, default_form_values, form_values_for, new_draft_seed
from .loader import STORAGE_KEY, load_state, save_state
from .store import ServiceLogStore

__all__ = [
    "LogType",
    "NotFoundError",
    "ServiceLog",
    "Draft",
    "ServiceState",
    "initial_state",
    "ValidationResult",
    "validate",
    "ALL_TYPES",
    "DateRange",
    "FilterCriteria",
    "filter_logs",
    "SAVE_DELAY_SECONDS",
    "SaveDebouncer",
    "adjust_end_date",
    "default_form_values",
    "form_values_for",
    "new_draft_seed",
    "STORAGE_KEY",
    "load_state",
    "save_state",
    "ServiceLogStore",
]
