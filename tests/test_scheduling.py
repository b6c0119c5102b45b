import pytest

from lead_dispatch.models import LeadRecord
from lead_dispatch.scheduling import parse_hour, recommend


def _leads_with_times(*times):
    return [LeadRecord(id=str(index), name=f"Lead {index}", best_time_to_call=value) for index, value in enumerate(times)]


def test_preferred_hours_boost_matching_slots() -> None:
    slots = recommend(_leads_with_times("9:00", "9:30", "10:00", "14:00", "16:00"))

    summary = [(slot.hour, slot.matched_lead_count, slot.final_score) for slot in slots]
    assert summary == [(9, 3, 97), (11, 1, 93), (14, 1, 90), (16, 1, 83)]


def test_without_preferences_slots_keep_base_scores() -> None:
    slots = recommend(_leads_with_times(None, "whenever"))

    assert [(slot.hour, slot.final_score) for slot in slots] == [(9, 92), (11, 88), (14, 85), (16, 78)]
    assert all(slot.matched_lead_count == 0 for slot in slots)
    assert slots[0].label == "9:00 AM"


def test_boost_can_reorder_slots() -> None:
    # 12:00 is within an hour of 11:00 only
    slots = recommend(_leads_with_times("12"))

    assert [(slot.hour, slot.final_score) for slot in slots] == [(11, 93), (9, 92), (14, 85), (16, 78)]

    afternoon = recommend(_leads_with_times("8", "15"))
    assert [(slot.hour, slot.final_score) for slot in afternoon] == [(9, 97), (14, 90), (11, 88), (16, 83)]


def test_final_score_is_capped() -> None:
    slots = recommend(_leads_with_times("9"))

    assert max(slot.final_score for slot in slots) <= 99


def test_empty_selection_returns_base_ranking() -> None:
    assert [slot.hour for slot in recommend([])] == [9, 11, 14, 16]


@pytest.mark.parametrize(
    "text, hour",
    [
        ("9", 9),
        ("09:30", 9),
        ("14:00", 14),
        ("2:00 PM", 14),
        ("2pm", 14),
        ("12 a.m.", 0),
        ("12:15 PM", 12),
        ("11 am", 11),
        ("morning", None),
        ("", None),
        (None, None),
        ("25:00", None),
        ("1 - 2 PM", 13),
        ("11 - 1 PM", 11),
        ("9:00 AM - 10:00 AM", 9),
        ("3 to 5pm", 15),
        ("10-12", 10),
    ],
)
def test_parse_hour(text, hour) -> None:
    assert parse_hour(text) == hour
