"""Draft class for in-progress service logs."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Draft:
    """An uncommitted, possibly incomplete service log.

    `data` holds camelCase form fields and is never validated.
    """

    id: str
    created_at: str
    data: Dict[str, Any] = field(default_factory=dict)
    is_saved: bool = False

    def label(self, index: int) -> str:
        """Tab label: car id, then provider id, then 'Draft <n>' (1-based)."""
        return self.data.get("carId") or self.data.get("providerId") or f"Draft {index + 1}"
