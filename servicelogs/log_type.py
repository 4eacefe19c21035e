"""LogType enum for service log categories."""

from enum import Enum


class LogType(Enum):
    """Service log categories, ordered from routine to urgent."""

    PLANNED = "planned"
    UNPLANNED = "unplanned"
    EMERGENCY = "emergency"

    @classmethod
    def values(cls):
        return [t.value for t in cls]
