"""Commit-time validation of service log fields.

Field rules are declared in schema.yaml and checked with jsonschema, one
property at a time, so that every failing field gets exactly one message.
The only cross-field rule, end date after start date, is checked here.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from jsonschema import Draft7Validator, FormatChecker

SCHEMA_PATH = Path(__file__).parent / "schema.yaml"

REQUIRED_MESSAGE = "Required"
END_BEFORE_START_MESSAGE = "End date must be after start date"

# Messages for properties without an errorMessage, by failing keyword
KEYWORD_MESSAGES = {
    "type": "Must be number",
    "minimum": "Must be zero or greater",
}


@dataclass
class ValidationResult:
    """Outcome of validating a candidate log: field name -> message."""

    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


@lru_cache(maxsize=None)
def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def _field_error(name: str, value: Any, schema: dict) -> str:
    """Message for the first rule `value` breaks, or '' when it passes."""
    prop = schema["properties"][name]
    if value is None:
        if name in schema.get("required", []):
            return prop.get("requiredMessage", REQUIRED_MESSAGE)
        return ""

    validator = Draft7Validator(prop, format_checker=FormatChecker())
    error = next(iter(validator.iter_errors(value)), None)
    if error is None:
        # NaN slips past minimum; infinities are not readings either
        if isinstance(value, float) and not math.isfinite(value):
            return KEYWORD_MESSAGES["type"]
        return ""
    if "errorMessage" in prop:
        return prop["errorMessage"]
    return KEYWORD_MESSAGES.get(error.validator, error.message)


def validate(candidate: Mapping[str, Any]) -> ValidationResult:
    """
    Check a candidate log (camelCase fields) against the commit rules.

    Never raises. Keys that are not log fields (such as an id) are ignored.
    """
    schema = load_schema()
    result = ValidationResult()

    for name in schema["properties"]:
        message = _field_error(name, candidate.get(name), schema)
        if message:
            result.errors[name] = message

    # Cross-field: only meaningful when both dates parsed
    if "startDate" not in result.errors and "endDate" not in result.errors:
        start = date.fromisoformat(candidate["startDate"])
        end = date.fromisoformat(candidate["endDate"])
        if end <= start:
            result.errors["endDate"] = END_BEFORE_START_MESSAGE

    return result
