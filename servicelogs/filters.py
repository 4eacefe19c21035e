"""Search and filter helpers for the service log table."""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from .service_log import ServiceLog

ALL_TYPES = "all"


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of ISO dates; either end may be open (None)."""

    start: Optional[str] = None
    end: Optional[str] = None


@dataclass(frozen=True)
class FilterCriteria:
    """Search text, type filter and start-date range for the log table."""

    query: str = ""
    type: str = ALL_TYPES
    date_range: DateRange = field(default_factory=DateRange)


def matches_query(log: ServiceLog, query: str) -> bool:
    """Case-insensitive substring match over the searchable text fields."""
    q = query.lower()
    if not q:
        return True
    searchable = (
        log.provider_id,
        log.service_order,
        log.car_id,
        log.service_description,
        log.type,
    )
    return any(q in (text or "").lower() for text in searchable)


def matches_type(log: ServiceLog, log_type: str) -> bool:
    return log_type == ALL_TYPES or log.type == log_type


def _parse_date(value: Optional[str]) -> Optional[date]:
    """ISO date or None for empty and unparseable values."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def matches_date_range(log: ServiceLog, date_range: DateRange) -> bool:
    """
    Keep logs whose start date falls within the range, both ends inclusive.

    A bound that is not a valid date is ignored.
    """
    start = _parse_date(date_range.start)
    end = _parse_date(date_range.end)
    if start is None and end is None:
        return True
    started = _parse_date(log.start_date)
    if started is None:
        return False
    if start is not None and started < start:
        return False
    if end is not None and started > end:
        return False
    return True


def filter_logs(
    logs: Iterable[ServiceLog], criteria: Optional[FilterCriteria] = None
) -> List[ServiceLog]:
    """
    Project the log list through the table filters.

    All predicates must pass. Order is preserved and the result is rebuilt
    from scratch on every call.
    """
    criteria = criteria or FilterCriteria()
    return [
        log
        for log in logs
        if matches_query(log, criteria.query)
        and matches_type(log, criteria.type)
        and matches_date_range(log, criteria.date_range)
    ]
