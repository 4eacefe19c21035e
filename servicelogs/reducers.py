"""
State transitions for logs and drafts.

Each function takes the current ServiceState plus the operation's input and
returns the next state. The input state is never modified. Operations that
target a log or draft which no longer exists leave the state unchanged.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple

from .draft import Draft
from .service_log import ServiceLog
from .state import ServiceState

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Fresh opaque id for a log or draft."""
    return str(uuid.uuid4())


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _without_active_draft(state: ServiceState) -> Tuple[Tuple[Draft, ...], Optional[str]]:
    """Drafts minus the active one, and the pointer that should follow."""
    drafts = tuple(d for d in state.drafts if d.id != state.active_draft_id)
    return drafts, (drafts[0].id if drafts else None)


# =============================================================================
# Drafts
# =============================================================================


def create_draft(
    state: ServiceState,
    seed: Optional[Mapping[str, Any]] = None,
    draft_id: Optional[str] = None,
    created_at: Optional[str] = None,
) -> ServiceState:
    """Append a new draft, make it active and clear the scratch form."""
    draft = Draft(
        id=draft_id or new_id(),
        created_at=created_at or _now_iso(),
        data=dict(seed or {}),
        is_saved=False,
    )
    return replace(
        state,
        drafts=state.drafts + (draft,),
        active_draft_id=draft.id,
        current_form={},
    )


def set_active_draft(state: ServiceState, draft_id: str) -> ServiceState:
    """Point form edits at an existing draft."""
    if not state.has_draft(draft_id):
        logger.debug("set_active_draft: no draft %s", draft_id)
        return state
    return replace(state, active_draft_id=draft_id)


def update_draft(state: ServiceState, patch: Mapping[str, Any]) -> ServiceState:
    """
    Autosave into the active draft.

    Shallow merge: keys in `patch` overwrite, absent keys are kept.
    Without an active draft nothing changes; callers route those writes to
    update_current_form instead.
    """
    active = state.active_draft
    if active is None:
        logger.debug("update_draft: no active draft")
        return state

    updated = replace(active, data={**active.data, **patch}, is_saved=True)
    drafts = tuple(updated if d.id == active.id else d for d in state.drafts)
    return replace(state, drafts=drafts, is_saving=True)


def delete_draft(state: ServiceState) -> ServiceState:
    """Remove the active draft; the first remaining draft becomes active."""
    if state.active_draft_id is None:
        return state
    drafts, active_id = _without_active_draft(state)
    return replace(state, drafts=drafts, active_draft_id=active_id)


def clear_all_drafts(state: ServiceState) -> ServiceState:
    return replace(state, drafts=(), active_draft_id=None)


# =============================================================================
# Scratch form
# =============================================================================


def update_current_form(state: ServiceState, values: Mapping[str, Any]) -> ServiceState:
    """Replace the scratch form with a full snapshot of the form values."""
    return replace(state, current_form=dict(values), is_saving=True)


def stop_saving(state: ServiceState) -> ServiceState:
    if not state.is_saving:
        return state
    return replace(state, is_saving=False)


# =============================================================================
# Logs
# =============================================================================


def add_log(
    state: ServiceState, fields: Mapping[str, Any], log_id: Optional[str] = None
) -> ServiceState:
    """
    Commit `fields` as a new log at the front of the list.

    Fields are expected to be validated already. Committing retires the
    source of the form: the active draft is deleted (and the pointer moves
    on), or, without one, the scratch form is cleared.
    """
    log = ServiceLog.from_fields(fields, log_id or new_id())
    logs = (log,) + state.logs

    if state.active_draft_id is not None:
        drafts, active_id = _without_active_draft(state)
        return replace(state, logs=logs, drafts=drafts, active_draft_id=active_id)
    return replace(state, logs=logs, current_form={})


def update_log(state: ServiceState, log: ServiceLog) -> ServiceState:
    """Replace the log with the same id in place."""
    if not state.has_log(log.id):
        logger.debug("update_log: no log %s", log.id)
        return state
    logs = tuple(log if existing.id == log.id else existing for existing in state.logs)
    return replace(state, logs=logs)


def delete_log(state: ServiceState, log_id: str) -> ServiceState:
    if not state.has_log(log_id):
        logger.debug("delete_log: no log %s", log_id)
        return state
    return replace(state, logs=tuple(log for log in state.logs if log.id != log_id))
