"""ServiceState - the single state document for logs and drafts."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .draft import Draft
from .errors import NotFoundError
from .service_log import ServiceLog


@dataclass(frozen=True)
class ServiceState:
    """Committed logs, drafts, the active-draft pointer and the scratch form.

    Values are never mutated in place; the functions in `reducers` return a
    new state for every operation.
    """

    logs: Tuple[ServiceLog, ...] = ()
    drafts: Tuple[Draft, ...] = ()
    active_draft_id: Optional[str] = None
    current_form: Dict[str, Any] = field(default_factory=dict)
    is_saving: bool = False

    @property
    def active_draft(self) -> Optional[Draft]:
        """The draft receiving form edits, or None for the scratch form."""
        if self.active_draft_id is None:
            return None
        for draft in self.drafts:
            if draft.id == self.active_draft_id:
                return draft
        return None

    @property
    def form_target(self) -> str:
        """'draft' when a draft is active, otherwise 'form'."""
        return "draft" if self.active_draft_id is not None else "form"

    def get_log(self, log_id: str) -> ServiceLog:
        for log in self.logs:
            if log.id == log_id:
                return log
        raise NotFoundError("log", log_id)

    def get_draft(self, draft_id: str) -> Draft:
        for draft in self.drafts:
            if draft.id == draft_id:
                return draft
        raise NotFoundError("draft", draft_id)

    def has_log(self, log_id: str) -> bool:
        return any(log.id == log_id for log in self.logs)

    def has_draft(self, draft_id: str) -> bool:
        return any(draft.id == draft_id for draft in self.drafts)


def initial_state() -> ServiceState:
    """Empty state used on first run and when stored state is unusable."""
    return ServiceState()
