"""Rule-based lead scoring and hot/warm/cold tier assignment."""
from __future__ import annotations

from typing import List, Optional

from .models import TIER_COLD, TIER_HOT, TIER_WARM, ClassifiedLead, LeadRecord, ScoreResult

BASE_SCORE = 50
HOT_THRESHOLD = 80
WARM_THRESHOLD = 55

HIGH_RATING = 4.5
LEGACY_PLATFORMS = ("joomla", "drupal", "weebly", "godaddy")


def score_lead(lead: LeadRecord) -> ScoreResult:
    """Score a lead by applying every rule additively, in a fixed order."""

    score = BASE_SCORE
    reasons: List[str] = []
    analysis = lead.website_analysis

    if not lead.website or (analysis is not None and analysis.has_website is False):
        score += 40
        reasons.append("No website - needs your services!")

    if analysis is not None and analysis.needs_upgrade:
        score += 30
        reasons.append("Website needs upgrade")

    issue_count = len(analysis.issues) if analysis is not None else 0
    if issue_count >= 3:
        score += 25
        reasons.append(f"{issue_count} website issues detected")
    elif issue_count > 0:
        score += 10
        reasons.append(f"{issue_count} minor issues")

    mobile_score = analysis.mobile_score if analysis is not None else None
    if mobile_score is not None:
        if mobile_score < 50:
            score += 20
            reasons.append(f"Poor mobile score ({_format_number(mobile_score)})")
        elif mobile_score < 70:
            score += 10
            reasons.append(f"Mediocre mobile score ({_format_number(mobile_score)})")

    if lead.phone:
        score += 5
        reasons.append("Phone number available")

    if lead.rating is not None and lead.rating >= HIGH_RATING:
        score += 10
        reasons.append(f"High rating ({_format_number(lead.rating)}) - established business")

    platform = _legacy_platform(analysis.platform if analysis is not None else None)
    if platform:
        score += 20
        reasons.append(f"Legacy platform ({platform})")

    return ScoreResult(score=score, reasons=tuple(reasons))


def tier_for_score(score: int) -> str:
    """Map a score onto its tier; lower bounds are inclusive."""

    if score >= HOT_THRESHOLD:
        return TIER_HOT
    if score >= WARM_THRESHOLD:
        return TIER_WARM
    return TIER_COLD


def classify_lead(lead: LeadRecord) -> ClassifiedLead:
    result = score_lead(lead)
    return ClassifiedLead(
        lead=lead,
        score=result.score,
        tier=tier_for_score(result.score),
        reasons=result.reasons,
    )


def _legacy_platform(platform: Optional[str]) -> Optional[str]:
    if not platform:
        return None
    lowered = platform.lower()
    if any(name in lowered for name in LEGACY_PLATFORMS):
        return platform
    return None


def _format_number(value: float) -> str:
    # 4.7 -> "4.7", 5.0 -> "5"
    return f"{value:g}"


__all__ = ["BASE_SCORE", "LEGACY_PLATFORMS", "classify_lead", "score_lead", "tier_for_score"]
