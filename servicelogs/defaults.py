"""Default form values and the end-date auto-adjust rule."""

from datetime import date
from dateutil.relativedelta import relativedelta
from typing import Any, Dict, Mapping, Optional

from .log_type import LogType
from .state import ServiceState


def next_day(iso_date: str) -> str:
    """The calendar day after an ISO date."""
    return (date.fromisoformat(iso_date) + relativedelta(days=1)).isoformat()


def default_form_values(today: Optional[date] = None) -> Dict[str, Any]:
    """Values of a blank service log form: starts today, ends tomorrow."""
    today = today or date.today()
    return {
        "providerId": "",
        "serviceOrder": "",
        "carId": "",
        "odometer": 0,
        "engineHours": 0,
        "startDate": today.isoformat(),
        "endDate": next_day(today.isoformat()),
        "type": LogType.PLANNED.value,
        "serviceDescription": "",
    }


def new_draft_seed(today: Optional[date] = None) -> Dict[str, Any]:
    """Initial data of a draft created from the 'new draft' button."""
    defaults = default_form_values(today)
    return {key: defaults[key] for key in ("startDate", "endDate", "type")}


def adjust_end_date(values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Keep the end date at least one day after the start date.

    When startDate is set and endDate is missing or not after it, endDate
    becomes startDate + 1 day. Unparseable dates are left alone.
    """
    adjusted = dict(values)
    start = values.get("startDate")
    if not start:
        return adjusted
    try:
        start_day = date.fromisoformat(start)
        end = values.get("endDate")
        if end and date.fromisoformat(end) > start_day:
            return adjusted
    except (TypeError, ValueError):
        return adjusted
    adjusted["endDate"] = next_day(start)
    return adjusted


def form_values_for(state: ServiceState, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Values the form should show for the current edit target.

    Defaults overlaid with the active draft's data, or with the scratch form
    when no draft is active. Empty dates fall back to the defaults.
    """
    defaults = default_form_values(today)
    active = state.active_draft
    source = active.data if active is not None else state.current_form
    values = {**defaults, **source}
    for key in ("startDate", "endDate"):
        if not values.get(key):
            values[key] = defaults[key]
    return values
