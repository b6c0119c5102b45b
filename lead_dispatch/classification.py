"""Helpers for classifying lead collections and partitioning them into groups."""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .models import TIER_COLD, TIER_HOT, TIER_WARM, ClassifiedLead, LeadGroups, LeadRecord
from .scoring import classify_lead

LOGGER = logging.getLogger(__name__)


def classify(leads: Iterable[LeadRecord]) -> List[ClassifiedLead]:
    """Score every lead, keeping the input order."""

    classified = [classify_lead(lead) for lead in leads]
    LOGGER.debug("Classified %s leads", len(classified))
    return classified


def group_leads(classified: Sequence[ClassifiedLead]) -> LeadGroups:
    """Partition classified leads into tiers plus the derived groups.

    Every group references the same :class:`ClassifiedLead` objects as
    ``classified``; nothing is copied or mutated.
    """

    groups = LeadGroups(all=list(classified))
    by_tier = {TIER_HOT: groups.hot, TIER_WARM: groups.warm, TIER_COLD: groups.cold}
    for item in classified:
        by_tier[item.tier].append(item)
        if item.lead.ready_to_call:
            groups.ready_to_call.append(item)
        analysis = item.lead.website_analysis
        if analysis is None or not analysis.has_website:
            groups.no_website.append(item)
    return groups


def sort_by_score(classified: Iterable[ClassifiedLead]) -> List[ClassifiedLead]:
    """Return the leads ordered by score, highest first; ties keep their order."""

    return sorted(classified, key=lambda item: item.score, reverse=True)


def phone_numbers(leads: Iterable[ClassifiedLead]) -> List[str]:
    """Collect the non-empty phone numbers of ``leads`` in order."""

    return [item.lead.phone for item in leads if item.lead.phone]


__all__ = ["classify", "group_leads", "phone_numbers", "sort_by_score"]
