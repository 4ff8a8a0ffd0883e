"""Rule condition evaluation.

``evaluate_condition`` is total: malformed comparands, unparseable
numbers, bad dates and unknown operators all evaluate to ``False`` so a
single broken rule can never abort a scoring pass.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from leadscore.core.clock import ensure_aware, utc_now

# Leading-number parse: "1001+" -> 1001, "12.5 crore" -> 12.5, "abc" -> nan
_LEADING_NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

_SECONDS_PER_DAY = 86_400


def parse_number(value: Any) -> float:
    """Parse the numeric prefix of *value*; ``nan`` when there is none."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER_RE.match(str(value))
    if match is None:
        return math.nan
    return float(match.group(0))


def _split_list(comparand: str) -> List[str]:
    return [part.strip() for part in comparand.split(",") if part.strip()]


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return ensure_aware(datetime(value.year, value.month, value.day))
    if isinstance(value, str) and value.strip():
        text = value.strip()
        # fromisoformat only accepts "Z" from Python 3.11
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        try:
            return ensure_aware(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def _equals(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    return value == comparand


def _not_equals(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    return value != comparand


def _contains(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    return any(part in value for part in _split_list(comparand))


def _in(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    return value in _split_list(comparand)


def _not_in(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    return value not in _split_list(comparand)


def _greater_than(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    # NaN on either side compares False
    return parse_number(raw) > parse_number(comparand)


def _less_than(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    return parse_number(raw) < parse_number(comparand)


def _between(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    bounds = comparand.split(",")
    if len(bounds) != 2:
        return False
    low, high = parse_number(bounds[0]), parse_number(bounds[1])
    number = parse_number(raw)
    return low <= number <= high


def _days_since(value: str, comparand: str, raw: Any, now: datetime) -> bool:
    when = _to_datetime(raw)
    threshold = parse_number(comparand)
    if when is None or math.isnan(threshold):
        return False
    elapsed_days = math.floor((now - when).total_seconds() / _SECONDS_PER_DAY)
    return elapsed_days >= threshold


_OPERATORS: Dict[str, Callable[[str, str, Any, datetime], bool]] = {
    "equals": _equals,
    "not_equals": _not_equals,
    "contains": _contains,
    "in": _in,
    "not_in": _not_in,
    "greater_than": _greater_than,
    "less_than": _less_than,
    "between": _between,
    "in_range": _between,
    "days_since": _days_since,
}


def evaluate_condition(
    value: Any,
    operator: Optional[str],
    comparand: Any,
    now: Optional[datetime] = None,
) -> bool:
    """Return ``True`` when *value* satisfies ``operator comparand``.

    String operators compare case-insensitively.  ``None`` values and
    ``None`` comparands never match.
    """
    if value is None or comparand is None:
        return False
    handler = _OPERATORS.get((operator or "").lower())
    if handler is None:
        return False
    return handler(
        str(value).lower(),
        str(comparand).lower(),
        value,
        ensure_aware(now) if now is not None else utc_now(),
    )
