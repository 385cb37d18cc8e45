import re
from typing import Any, Dict, Iterable

# Legacy spellings seen in older clients
_STATUS_ALIASES = {
    "pending": "not_started",
}


def normalize_status(value: Any) -> Any:
    """'Completed', 'In Progress', 'in-progress' -> 'completed', 'in_progress'."""
    if not isinstance(value, str):
        return value
    key = re.sub(r"[\s\-]+", "_", value.strip()).lower()
    return _STATUS_ALIASES.get(key, key)


def reject_nulls(values: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    if isinstance(values, dict):
        for field in fields:
            if field in values and values[field] is None:
                raise ValueError(f"{field} cannot be null")
    return values
