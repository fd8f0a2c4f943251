"""FilterCriteria ⇄ URL query string.

Parameter names follow the gallery's browse URLs, e.g.
``?portfolioWorthy=true&minQuality=8&emotions=triumph,focus``.
Only the literal value "true" enables a flag; list values are comma-joined.
"""
import logging
from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode

from models.filters import FilterCriteria

logger = logging.getLogger(__name__)

_FLAG_PARAMS = (
    ("portfolioWorthy", "portfolio_worthy"),
    ("printReady", "print_ready"),
    ("socialMediaOptimized", "social_media_optimized"),
)
_LIST_PARAMS = (
    ("emotions", "emotions"),
    ("compositions", "compositions"),
    ("timeOfDay", "time_of_day"),
    ("playTypes", "play_types"),
    ("actionIntensities", "action_intensities"),
    ("useCases", "use_cases"),
)
_MIN_QUALITY_PARAM = "minQuality"


def criteria_from_params(params: Mapping[str, str]) -> FilterCriteria:
    fields: dict[str, object] = {}

    for param, field in _FLAG_PARAMS:
        if params.get(param) == "true":
            fields[field] = True

    min_quality = params.get(_MIN_QUALITY_PARAM)
    if min_quality:
        try:
            fields["min_quality_score"] = float(min_quality)
        except ValueError:
            logger.warning("Ignoring unparseable %s=%r", _MIN_QUALITY_PARAM, min_quality)

    for param, field in _LIST_PARAMS:
        value = params.get(param)
        if value:
            fields[field] = value.split(",")

    return FilterCriteria(**fields)


def criteria_from_query_string(query_string: str) -> FilterCriteria:
    """Parse a query string, with or without the leading '?'.

    Repeated parameters resolve to the first occurrence.
    """
    params: dict[str, str] = {}
    for key, value in parse_qsl(query_string.lstrip("?")):
        params.setdefault(key, value)
    return criteria_from_params(params)


def criteria_to_params(criteria: FilterCriteria) -> dict[str, str]:
    params: dict[str, str] = {}

    for param, field in _FLAG_PARAMS:
        if getattr(criteria, field):
            params[param] = "true"

    if criteria.min_quality_score:
        params[_MIN_QUALITY_PARAM] = _format_number(criteria.min_quality_score)

    for param, field in _LIST_PARAMS:
        values = getattr(criteria, field)
        if values:
            params[param] = ",".join(values)

    return params


def criteria_to_query_string(criteria: FilterCriteria) -> str:
    """Encode without the leading '?'; empty criteria give an empty string."""
    return urlencode(criteria_to_params(criteria))


def _format_number(value: float) -> str:
    # 8.0 → "8", 7.5 → "7.5"
    return str(int(value)) if float(value).is_integer() else repr(float(value))
