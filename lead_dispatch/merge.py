"""Utility helpers for merging streamed lead batches into one universe."""
from __future__ import annotations

from typing import Dict, Iterable, List

from .models import LeadRecord


def merge_lead_batches(existing: Iterable[LeadRecord], incoming: Iterable[LeadRecord]) -> List[LeadRecord]:
    """Append ``incoming`` to ``existing``, deduplicating by lead id.

    A lead that arrives again replaces the earlier record in place, so the
    list order stays the order in which ids were first seen.
    """

    merged: Dict[str, LeadRecord] = {}
    for lead in existing:
        merged[lead.id] = lead
    for lead in incoming:
        # dict assignment keeps the first insertion position
        merged[lead.id] = lead
    return list(merged.values())
