"""Validation and normalisation of raw lead mappings into :class:`LeadRecord`."""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import LeadRecord, WebsiteAnalysis

LOGGER = logging.getLogger(__name__)

MIN_RATING = 0.0
MAX_RATING = 5.0

_FIELD_SYNONYMS: Mapping[str, Sequence[str]] = {
    "id": ("id", "lead_id", "place_id"),
    "name": ("name", "business_name", "title"),
    "phone": ("phone", "phone_number"),
    "email": ("email", "email_address"),
    "website": ("website", "url"),
    "address": ("address", "formatted_address"),
    "rating": ("rating",),
    "website_analysis": ("website_analysis", "websiteAnalysis"),
    "best_time_to_call": ("best_time_to_call", "bestTimeToCall"),
    "ready_to_call": ("ready_to_call", "readyToCall"),
}

_ANALYSIS_SYNONYMS: Mapping[str, Sequence[str]] = {
    "has_website": ("has_website", "hasWebsite"),
    "platform": ("platform",),
    "needs_upgrade": ("needs_upgrade", "needsUpgrade"),
    "issues": ("issues",),
    "mobile_score": ("mobile_score", "mobileScore"),
}

_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}


class ValidationError(ValueError):
    """Raised when a raw lead cannot be turned into a :class:`LeadRecord`."""

    def __init__(self, message: str, raw: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.raw = raw


def normalize(raw: Mapping[str, Any]) -> LeadRecord:
    """Validate ``raw`` and return the canonical lead record.

    Missing ``id`` or ``name`` (or a name that is blank once trimmed) is a
    hard failure. An out-of-range rating is clamped to ``[0, 5]`` and the
    clamp is recorded in :attr:`LeadRecord.warnings`. Optional fields that are
    not provided stay ``None`` so that "no phone" can be told apart from an
    empty phone string.
    """

    if not isinstance(raw, Mapping):
        raise ValidationError(f"Lead must be a mapping, got {type(raw).__name__}")

    lead_id = _pick(raw, "id")
    if lead_id is None or not str(lead_id).strip():
        raise ValidationError("Lead is missing required field 'id'", raw)

    name = _pick(raw, "name")
    if name is None or not str(name).strip():
        raise ValidationError(f"Lead '{lead_id}' is missing a non-empty 'name'", raw)

    warnings: List[str] = []
    rating = _normalize_rating(_pick(raw, "rating"), warnings)
    analysis_raw = _pick(raw, "website_analysis")
    analysis = _normalize_analysis(analysis_raw) if isinstance(analysis_raw, Mapping) else None

    lead = LeadRecord(
        id=str(lead_id).strip(),
        name=str(name).strip(),
        phone=_optional_text(_pick(raw, "phone")),
        email=_optional_text(_pick(raw, "email")),
        website=_optional_text(_pick(raw, "website")),
        address=_optional_text(_pick(raw, "address")),
        rating=rating,
        website_analysis=analysis,
        best_time_to_call=_optional_text(_pick(raw, "best_time_to_call")),
        ready_to_call=_as_bool(_pick(raw, "ready_to_call")),
        warnings=tuple(warnings),
    )
    for warning in warnings:
        LOGGER.warning("Lead %s: %s", lead.display_name(), warning)
    return lead


def normalize_batch(
    raws: Iterable[Mapping[str, Any]],
) -> Tuple[List[LeadRecord], List[ValidationError]]:
    """Normalise every raw lead, skipping (and collecting) the invalid ones."""

    leads: List[LeadRecord] = []
    errors: List[ValidationError] = []
    for index, raw in enumerate(raws):
        try:
            leads.append(normalize(raw))
        except ValidationError as exc:
            LOGGER.warning("Skipping lead at position %s: %s", index, exc)
            errors.append(exc)
    return leads, errors


def _pick(raw: Mapping[str, Any], field: str, synonyms: Mapping[str, Sequence[str]] = _FIELD_SYNONYMS) -> Any:
    for key in synonyms.get(field, (field,)):
        if key in raw:
            value = raw[key]
            if _is_missing(value):
                return None
            return value
    return None


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _as_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_optional_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return _as_bool(value)


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _normalize_rating(value: Any, warnings: List[str]) -> Optional[float]:
    if value is None:
        return None
    rating = _as_number(value)
    if rating is None:
        warnings.append(f"Ignoring non-numeric rating {value!r}")
        return None
    if rating < MIN_RATING or rating > MAX_RATING:
        clamped = min(MAX_RATING, max(MIN_RATING, rating))
        warnings.append(f"Rating {rating:g} clamped to {clamped:g}")
        return clamped
    return rating


def _normalize_issues(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    issues: List[str] = []
    for item in value:
        text = _optional_text(item)
        if text:
            issues.append(text)
    return tuple(issues)


def _normalize_analysis(raw: Mapping[str, Any]) -> WebsiteAnalysis:
    platform = _optional_text(_pick(raw, "platform", _ANALYSIS_SYNONYMS))
    return WebsiteAnalysis(
        has_website=_as_optional_bool(_pick(raw, "has_website", _ANALYSIS_SYNONYMS)),
        platform=platform or None,
        needs_upgrade=_as_bool(_pick(raw, "needs_upgrade", _ANALYSIS_SYNONYMS)),
        issues=_normalize_issues(_pick(raw, "issues", _ANALYSIS_SYNONYMS)),
        mobile_score=_as_number(_pick(raw, "mobile_score", _ANALYSIS_SYNONYMS)),
    )


__all__ = ["ValidationError", "normalize", "normalize_batch"]
