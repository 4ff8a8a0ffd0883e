import re
from typing import Any, Callable, Dict

from leadscore.core.constants import EMPLOYEE_COUNT_BUCKETS
from leadscore.schemas.scoring import LeadSnapshot

_FIRST_INT_RE = re.compile(r"\d+")
_FIRST_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def _bool_flag(value: Any) -> str:
    return "true" if value else "false"


def _employee_count(lead: LeadSnapshot) -> Any:
    raw = lead.employee_count if lead.employee_count is not None else lead.company_size
    if raw is None or isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if text in EMPLOYEE_COUNT_BUCKETS:
        return EMPLOYEE_COUNT_BUCKETS[text]
    # "50-249" -> 50
    match = _FIRST_INT_RE.search(text)
    return int(match.group(0)) if match else text


def _revenue(lead: LeadSnapshot) -> Any:
    raw = lead.revenue_inr_crore
    if raw is None or isinstance(raw, (int, float)):
        return raw
    match = _FIRST_NUMBER_RE.search(str(raw))
    return float(match.group(0)) if match else raw


FIELD_EXTRACTORS: Dict[str, Callable[[LeadSnapshot], Any]] = {
    "employee_count": _employee_count,
    "revenue_inr_crore": _revenue,
    "industry": lambda lead: lead.industry,
    "job_title": lambda lead: lead.job_title or lead.seniority_level,
    "seniority_level": lambda lead: lead.seniority_level or lead.job_title,
    "has_budget_authority": lambda lead: _bool_flag(lead.has_budget_authority),
    "has_technical_authority": lambda lead: _bool_flag(lead.has_technical_authority),
    "location_city": lambda lead: lead.location_city,
    "email": lambda lead: lead.email,
    "email_status": lambda lead: lead.email_status or "valid",
    "last_activity_date": lambda lead: lead.last_activity_date or lead.created_at,
}


def resolve_field(lead: LeadSnapshot, field_name: str) -> Any:
    """Return the value a rule on *field_name* should be evaluated against.

    Known fields go through ``FIELD_EXTRACTORS``; anything else falls back
    to a plain snapshot attribute and then to ``lead.extra``.  Unknown
    names resolve to ``None``, which never matches.
    """
    extractor = FIELD_EXTRACTORS.get(field_name)
    if extractor is not None:
        return extractor(lead)
    if field_name in LeadSnapshot.model_fields and field_name != "extra":
        return getattr(lead, field_name)
    return lead.extra.get(field_name)
