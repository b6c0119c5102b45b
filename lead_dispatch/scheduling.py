"""Send-time recommendations for scheduled email campaigns."""
from __future__ import annotations

import re
from typing import Iterable, List, NamedTuple, Optional

from .channels.base import LeadLike, as_lead_record
from .models import TimeSlot

MAX_SLOT_SCORE = 99
MATCH_BONUS = 5
MATCH_WINDOW_HOURS = 1


class _Candidate(NamedTuple):
    hour: int
    label: str
    base_score: int
    reason: str


CANDIDATE_SLOTS = (
    _Candidate(9, "9:00 AM", 92, "Peak open rates for B2B. Decision-makers checking emails after morning meetings."),
    _Candidate(11, "11:00 AM", 88, "Pre-lunch window. High engagement before midday break."),
    _Candidate(14, "2:00 PM", 85, "Afternoon productivity peak. Good for follow-up messages."),
    _Candidate(16, "4:00 PM", 78, "End-of-day review window. Suitable for warm/cold leads."),
)

_HOUR_PATTERN = re.compile(r"^\s*(\d{1,2})(?:[:.]\d{2})?\s*([ap])?\.?\s*(?:m\.?)?", re.IGNORECASE)
# end of a range such as "1 - 2 PM" or "11 to 1pm"
_RANGE_END_PATTERN = re.compile(r"\s*(?:-|–|to)\s*(\d{1,2})(?:[:.]\d{2})?\s*([ap])\.?\s*m?\.?", re.IGNORECASE)


def parse_hour(text: Optional[str]) -> Optional[int]:
    """Return the 24-hour clock hour a free-text time starts with, if any.

    When only the end of a range carries am/pm ("1 - 2 PM"), the start
    takes the same half of the day unless that would put it after the end
    ("11 - 1 PM" starts at 11:00).
    """

    if not text:
        return None
    match = _HOUR_PATTERN.match(text)
    if not match:
        return None
    hour = int(match.group(1))
    meridiem = (match.group(2) or "").lower()
    if not meridiem:
        range_end = _RANGE_END_PATTERN.match(text, match.end())
        if range_end:
            end_hour = int(range_end.group(1)) % 12
            meridiem = range_end.group(2).lower()
            if meridiem == "p" and hour % 12 > end_hour:
                meridiem = "a"
    if meridiem == "p" and hour < 12:
        hour += 12
    elif meridiem == "a" and hour == 12:
        hour = 0
    if hour > 23:
        return None
    return hour


def recommend(selected_leads: Iterable[LeadLike]) -> List[TimeSlot]:
    """Rank the candidate send times against the leads' preferred call hours."""

    hours = [parse_hour(as_lead_record(lead).best_time_to_call) for lead in selected_leads]
    known_hours = [hour for hour in hours if hour is not None]

    slots: List[TimeSlot] = []
    for candidate in CANDIDATE_SLOTS:
        matched = sum(1 for hour in known_hours if abs(hour - candidate.hour) <= MATCH_WINDOW_HOURS)
        bonus = MATCH_BONUS if matched > 0 else 0
        slots.append(
            TimeSlot(
                hour=candidate.hour,
                label=candidate.label,
                base_score=candidate.base_score,
                matched_lead_count=matched,
                final_score=min(MAX_SLOT_SCORE, candidate.base_score + bonus),
                reason=candidate.reason,
            )
        )
    # sorted() is stable, so equal scores keep the candidate order
    return sorted(slots, key=lambda slot: slot.final_score, reverse=True)


__all__ = ["CANDIDATE_SLOTS", "parse_hour", "recommend"]
