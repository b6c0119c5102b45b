import pytest

from lead_dispatch.models import LeadRecord, WebsiteAnalysis
from lead_dispatch.scoring import BASE_SCORE, classify_lead, score_lead, tier_for_score


def _healthy_site(**overrides) -> WebsiteAnalysis:
    values = dict(has_website=True, platform="WordPress", needs_upgrade=False, issues=(), mobile_score=85)
    values.update(overrides)
    return WebsiteAnalysis(**values)


def test_no_website_lead_with_phone_and_rating_is_hot() -> None:
    lead = LeadRecord(id="1", name="Joe's Plumbing", phone="555-1234", rating=4.7)

    classified = classify_lead(lead)

    assert classified.score == 105
    assert classified.tier == "hot"
    assert classified.reasons == (
        "No website - needs your services!",
        "Phone number available",
        "High rating (4.7) - established business",
    )


def test_healthy_website_scores_base_and_is_cold() -> None:
    lead = LeadRecord(id="2", name="Modern Co", website="x.com", website_analysis=_healthy_site(platform=None))

    classified = classify_lead(lead)

    assert classified.score == BASE_SCORE == 50
    assert classified.tier == "cold"
    assert classified.reasons == ()


def test_all_rules_fire_in_rule_order() -> None:
    lead = LeadRecord(
        id="3",
        name="Legacy Shop",
        website="legacy.example",
        phone="555-0000",
        rating=5.0,
        website_analysis=WebsiteAnalysis(
            has_website=False,
            platform="GoDaddy Builder",
            needs_upgrade=True,
            issues=("a", "b", "c"),
            mobile_score=30,
        ),
    )

    result = score_lead(lead)

    assert result.score == 50 + 40 + 30 + 25 + 20 + 5 + 10 + 20
    assert result.reasons == (
        "No website - needs your services!",
        "Website needs upgrade",
        "3 website issues detected",
        "Poor mobile score (30)",
        "Phone number available",
        "High rating (5) - established business",
        "Legacy platform (GoDaddy Builder)",
    )


@pytest.mark.parametrize(
    "issues, bonus, reason",
    [
        ((), 0, None),
        (("slow",), 10, "1 minor issues"),
        (("slow", "ssl"), 10, "2 minor issues"),
        (("slow", "ssl", "seo", "alt"), 25, "4 website issues detected"),
    ],
)
def test_issue_rules_are_mutually_exclusive(issues, bonus, reason) -> None:
    lead = LeadRecord(id="4", name="Issues", website="x.com", website_analysis=_healthy_site(issues=issues))

    result = score_lead(lead)

    assert result.score == BASE_SCORE + bonus
    assert result.reasons == ((reason,) if reason else ())


@pytest.mark.parametrize(
    "mobile_score, bonus, reason",
    [
        (None, 0, None),
        (49, 20, "Poor mobile score (49)"),
        (50, 10, "Mediocre mobile score (50)"),
        (69.5, 10, "Mediocre mobile score (69.5)"),
        (70, 0, None),
    ],
)
def test_mobile_score_bands(mobile_score, bonus, reason) -> None:
    lead = LeadRecord(id="5", name="Mobile", website="x.com", website_analysis=_healthy_site(mobile_score=mobile_score))

    result = score_lead(lead)

    assert result.score == BASE_SCORE + bonus
    assert result.reasons == ((reason,) if reason else ())


def test_empty_phone_and_low_rating_do_not_fire() -> None:
    lead = LeadRecord(id="6", name="Quiet", website="x.com", phone="", rating=4.4, website_analysis=_healthy_site())

    assert score_lead(lead).score == BASE_SCORE


def test_legacy_platform_match_is_case_insensitive_substring() -> None:
    lead = LeadRecord(id="7", name="Drupal", website="x.com", website_analysis=_healthy_site(platform="DRUPAL 7"))

    result = score_lead(lead)

    assert result.score == BASE_SCORE + 20
    assert result.reasons == ("Legacy platform (DRUPAL 7)",)


def test_unknown_has_website_with_a_website_does_not_count_as_missing() -> None:
    lead = LeadRecord(id="8", name="Unknown", website="x.com", website_analysis=WebsiteAnalysis())

    assert score_lead(lead).score == BASE_SCORE


@pytest.mark.parametrize(
    "score, tier",
    [(-10, "cold"), (50, "cold"), (54, "cold"), (55, "warm"), (79, "warm"), (80, "hot"), (250, "hot")],
)
def test_tier_boundaries_are_inclusive_low(score, tier) -> None:
    assert tier_for_score(score) == tier


def test_every_integer_score_has_exactly_one_tier() -> None:
    for score in range(-50, 300):
        tier = tier_for_score(score)
        matches = [score >= 80, 55 <= score < 80, score < 55]
        assert matches.count(True) == 1
        assert tier == ("hot", "warm", "cold")[matches.index(True)]


def test_scoring_is_deterministic() -> None:
    lead = LeadRecord(
        id="9",
        name="Repeat",
        website="x.com",
        phone="1",
        website_analysis=_healthy_site(issues=("a",), mobile_score=60, platform="Weebly"),
    )

    assert score_lead(lead) == score_lead(lead)
    assert classify_lead(lead) == classify_lead(lead)


def test_removing_website_never_lowers_score() -> None:
    variants = [
        dict(),
        dict(phone="555"),
        dict(rating=4.9),
        dict(website_analysis=_healthy_site(issues=("a",), mobile_score=40)),
        dict(website_analysis=_healthy_site(platform="joomla", needs_upgrade=True)),
    ]
    for extra in variants:
        with_site = LeadRecord(id="10", name="Mono", website="x.com", **extra)
        without_site = LeadRecord(id="10", name="Mono", **extra)

        assert score_lead(without_site).score >= score_lead(with_site).score


def test_classification_does_not_mutate_the_lead() -> None:
    lead = LeadRecord(id="11", name="Frozen", phone="555")
    snapshot = repr(lead)

    classified = classify_lead(lead)

    assert classified.lead is lead
    assert repr(lead) == snapshot
