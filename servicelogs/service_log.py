"""ServiceLog class for committed maintenance records."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping

# Form/wire field name -> attribute name
FIELDS = {
    "providerId": "provider_id",
    "serviceOrder": "service_order",
    "carId": "car_id",
    "odometer": "odometer",
    "engineHours": "engine_hours",
    "startDate": "start_date",
    "endDate": "end_date",
    "type": "type",
    "serviceDescription": "service_description",
}


@dataclass(frozen=True)
class ServiceLog:
    """A committed service record.

    Form data, drafts and the persisted file use the camelCase names in
    FIELDS; attributes are snake_case.
    """

    id: str
    provider_id: str
    service_order: str
    car_id: str
    odometer: float
    engine_hours: float
    start_date: str
    end_date: str
    type: str
    service_description: str

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any], log_id: str) -> "ServiceLog":
        """Build a log from camelCase form fields. Unknown keys are ignored."""
        kwargs = {attr: fields.get(key) for key, attr in FIELDS.items()}
        return cls(id=log_id, **kwargs)

    def to_fields(self) -> Dict[str, Any]:
        """camelCase field mapping without the id."""
        return {key: getattr(self, attr) for key, attr in FIELDS.items()}

    def replace_fields(self, changes: Mapping[str, Any]) -> "ServiceLog":
        """Copy of this log with camelCase `changes` applied, same id."""
        merged = self.to_fields()
        merged.update({k: v for k, v in changes.items() if k in FIELDS})
        return ServiceLog.from_fields(merged, self.id)
