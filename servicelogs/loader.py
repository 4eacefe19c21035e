"""YAML loading and saving of the service log state document."""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .draft import Draft
from .service_log import FIELDS, ServiceLog
from .state import ServiceState, initial_state

logger = logging.getLogger(__name__)

# Namespaced key the whole state document is stored under
STORAGE_KEY = "medidrive_v1"

DATE_FIELDS = ("startDate", "endDate")


def _normalize_dates(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Unquoted YAML dates load as date objects; keep them as ISO strings."""
    result = dict(fields)
    for key in DATE_FIELDS:
        if isinstance(result.get(key), date):
            result[key] = result[key].isoformat()
    return result


def log_to_dict(log: ServiceLog) -> Dict[str, Any]:
    """Serialize a ServiceLog to the stored dict format (camelCase keys)."""
    return {"id": log.id, **log.to_fields()}


def log_from_dict(dct: Dict[str, Any]) -> ServiceLog:
    return ServiceLog.from_fields(_normalize_dates(dct), dct["id"])


def draft_to_dict(draft: Draft) -> Dict[str, Any]:
    """Serialize a Draft to the stored dict format (camelCase keys)."""
    return {
        "id": draft.id,
        "data": dict(draft.data),
        "createdAt": draft.created_at,
        "isSaved": draft.is_saved,
    }


def draft_from_dict(dct: Dict[str, Any]) -> Draft:
    data = dct.get("data") or {}
    if not isinstance(data, dict):
        raise TypeError(f"Draft data must be a mapping, got {type(data).__name__}")
    created_at = dct["createdAt"]
    if not isinstance(created_at, str):
        created_at = created_at.isoformat()
    return Draft(
        id=dct["id"],
        created_at=created_at,
        data=_normalize_dates(data),
        is_saved=bool(dct.get("isSaved", False)),
    )


def state_to_dict(state: ServiceState) -> Dict[str, Any]:
    """The whole state document as a flat camelCase mapping."""
    return {
        "logs": [log_to_dict(log) for log in state.logs],
        "drafts": [draft_to_dict(draft) for draft in state.drafts],
        "activeDraftId": state.active_draft_id,
        "currentForm": dict(state.current_form),
        "isSaving": state.is_saving,
    }


def state_from_dict(dct: Dict[str, Any]) -> ServiceState:
    """
    Rebuild a ServiceState from its stored mapping.

    Missing sections take their initial values. An active-draft id that
    names no stored draft falls back to the first draft (or none).
    """
    logs = tuple(log_from_dict(d) for d in dct.get("logs") or [])
    drafts = tuple(draft_from_dict(d) for d in dct.get("drafts") or [])
    current_form = dct.get("currentForm") or {}
    if not isinstance(current_form, dict):
        raise TypeError("currentForm must be a mapping")

    active_id = dct.get("activeDraftId")
    if active_id is not None and not any(d.id == active_id for d in drafts):
        logger.warning("Active draft %s not found in stored drafts", active_id)
        active_id = drafts[0].id if drafts else None

    return ServiceState(
        logs=logs,
        drafts=drafts,
        active_draft_id=active_id,
        current_form=_normalize_dates(current_form),
        is_saving=bool(dct.get("isSaving", False)),
    )


def load_state(filename: Union[str, Path]) -> ServiceState:
    """
    Load the state document from a YAML file.

    A missing file or missing key gives the initial state. A file that
    cannot be read or parsed into a state also gives the initial state,
    with a warning.
    """
    path = Path(filename)
    if not path.exists():
        return initial_state()

    try:
        with open(path, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader)
        if data is None:
            return initial_state()
        if not isinstance(data, dict):
            raise TypeError("state file must contain a mapping")
        document = data.get(STORAGE_KEY)
        if document is None:
            return initial_state()
        if not isinstance(document, dict):
            raise TypeError(f"'{STORAGE_KEY}' must be a mapping")
        return state_from_dict(document)
    except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Ignoring unreadable state file %s: %s", path, e)
        return initial_state()


def save_state(filename: Union[str, Path], state: ServiceState) -> None:
    """Write the whole state document to a YAML file under STORAGE_KEY."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as fp:
        yaml.dump(
            {STORAGE_KEY: state_to_dict(state)},
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def fields_from_dict(dct: Dict[str, Any]) -> Dict[str, Any]:
    """Only the log fields of an incoming mapping (drops id and unknown keys)."""
    return {key: value for key, value in dct.items() if key in FIELDS}
