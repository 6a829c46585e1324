import random
from datetime import date
from decimal import Decimal

import pytest

from wayfinder.exceptions import InvalidInput, InvalidWeightConfig
from wayfinder.schemas.trip import Candidate, Coordinates, DateRange, TripParams
from wayfinder.services.recommendation.budget_tracker import BudgetState
from wayfinder.services.recommendation.config import ScoringConfig, ScoringWeights
from wayfinder.services.recommendation.scoring_engine import (
    ScoringEngine,
    budget_fit,
    daily_allowance,
    preference_match,
    proximity,
)
from wayfinder.services.routing.geo import haversine_meters

ANCHOR = (44.4268, 26.1025)


def _build_params(total_budget="1000", days=5, tags=("museum", "food")) -> TripParams:
    return TripParams(
        total_budget=Decimal(total_budget),
        group_size=2,
        days=days,
        date_range=DateRange(start=date(2026, 6, 1), end=date(2026, 6, 6)),
        preference_tags=set(tags),
        anchor=Coordinates(lat=ANCHOR[0], lng=ANCHOR[1]),
    )


def _candidate(cid="c1", cost="100", tags=(), rating=4.0, lat=ANCHOR[0], lng=ANCHOR[1]) -> Candidate:
    return Candidate(
        id=cid,
        category="hotel",
        coords=Coordinates(lat=lat, lng=lng),
        estimated_cost=Decimal(cost),
        tags=set(tags),
        popularity_rating=rating,
    )


def test_budget_fit_is_full_within_allowance_and_linear_to_twice_it():
    allowance = Decimal("200")
    assert budget_fit(Decimal("150"), allowance) == 1.0
    assert budget_fit(Decimal("200"), allowance) == 1.0
    assert budget_fit(Decimal("300"), allowance) == pytest.approx(0.5)
    assert budget_fit(Decimal("400"), allowance) == 0.0
    assert budget_fit(Decimal("1000"), allowance) == 0.0


def test_budget_fit_with_zero_allowance_only_favors_free_venues():
    assert budget_fit(Decimal("0"), Decimal("0")) == 1.0
    assert budget_fit(Decimal("10"), Decimal("0")) == 0.0


def test_daily_allowance_rounds_down():
    state = BudgetState(total_budget=Decimal("1000"), committed_spend=Decimal("0"))
    assert daily_allowance(state, 3) == Decimal("333")
    spent = BudgetState(total_budget=Decimal("1000"), committed_spend=Decimal("400"))
    assert daily_allowance(spent, 5) == Decimal("120")


def test_preference_match_counts_shared_tags_over_preferences():
    prefs = frozenset({"museum", "food", "nightlife", "parks"})
    assert preference_match(frozenset({"museum", "food", "spa"}), prefs) == 0.5
    assert preference_match(frozenset(), prefs) == 0.0
    # No preferences at all: nothing can match
    assert preference_match(frozenset({"museum"}), frozenset()) == 0.0


def test_proximity_is_linear_and_zero_beyond_radius():
    assert proximity(0.0, 15000) == 1.0
    assert proximity(7500.0, 15000) == pytest.approx(0.5)
    assert proximity(15000.0, 15000) == 0.0
    assert proximity(40000.0, 15000) == 0.0


def test_score_records_breakdown_in_evaluation_order():
    ranked = ScoringEngine(ScoringConfig()).score(_candidate(tags={"museum"}), _build_params())

    assert list(ranked.score_breakdown) == ["budget_fit", "preference_match", "proximity", "popularity"]
    breakdown = ranked.score_breakdown
    assert breakdown["budget_fit"].raw == 1.0
    assert breakdown["preference_match"].raw == 0.5
    assert breakdown["proximity"].raw == 1.0
    assert breakdown["popularity"].raw == pytest.approx(0.8)
    assert breakdown["budget_fit"].weighted == pytest.approx(0.35)
    assert ranked.rank == 0


def test_tags_compare_case_insensitively():
    params = _build_params(tags=("Museum", " FOOD "))
    ranked = ScoringEngine().score(_candidate(tags={"museum", "food"}), params)
    assert ranked.score_breakdown["preference_match"].raw == 1.0


def test_proximity_factor_uses_haversine_from_anchor():
    lat = ANCHOR[0] + 0.05
    ranked = ScoringEngine().score(_candidate(lat=lat), _build_params())
    expected = 1 - haversine_meters(ANCHOR[0], ANCHOR[1], lat, ANCHOR[1]) / 15000
    assert ranked.score_breakdown["proximity"].raw == pytest.approx(expected)
    assert ranked.distance_meters == pytest.approx(5559.5, rel=1e-3)


def test_cheaper_hotel_scores_higher_on_budget_fit():
    params = _build_params(total_budget="1000", days=5)
    engine = ScoringEngine()
    cheap = engine.score(_candidate("cheap", cost="150"), params)
    pricey = engine.score(_candidate("pricey", cost="300"), params)

    assert cheap.score_breakdown["budget_fit"].raw == 1.0
    assert pricey.score_breakdown["budget_fit"].raw == pytest.approx(0.5)
    assert cheap.score > pricey.score


def test_scores_are_bounded_and_contributions_sum_to_total():
    rng = random.Random(7)
    engine = ScoringEngine()
    tag_pool = ["museum", "food", "spa", "parks", "nightlife", "history"]
    params = _build_params(tags=rng.sample(tag_pool, 3))

    for i in range(200):
        candidate = _candidate(
            cid=f"c{i}",
            cost=str(rng.randint(0, 600)),
            tags=rng.sample(tag_pool, rng.randint(0, 4)),
            rating=round(rng.uniform(0, 5), 1),
            lat=ANCHOR[0] + rng.uniform(-0.3, 0.3),
            lng=ANCHOR[1] + rng.uniform(-0.3, 0.3),
        )
        ranked = engine.score(candidate, params, current_spend=Decimal(rng.randint(0, 1000)))
        assert 0.0 <= ranked.score <= 1.0
        assert sum(f.weighted for f in ranked.score_breakdown.values()) == pytest.approx(ranked.score)


def test_identical_inputs_give_identical_scores():
    engine = ScoringEngine()
    params = _build_params()
    candidate = _candidate(tags={"food"}, lat=ANCHOR[0] + 0.01)
    assert engine.score(candidate, params).to_dict() == engine.score(candidate, params).to_dict()


def test_custom_weights_change_the_composite():
    weights = ScoringWeights(budget_fit=0.0, preference_match=0.0, proximity=0.0, popularity=1.0)
    ranked = ScoringEngine(ScoringConfig(weights=weights)).score(_candidate(rating=3.0), _build_params())
    assert ranked.score == pytest.approx(0.6)


def test_current_spend_above_budget_is_invalid():
    with pytest.raises(InvalidInput):
        ScoringEngine().score(_candidate(), _build_params(total_budget="100"), current_spend=Decimal("150"))


def test_weights_must_sum_to_one():
    with pytest.raises(InvalidWeightConfig):
        ScoringWeights(budget_fit=0.5, preference_match=0.5, proximity=0.5, popularity=0.0)


def test_weights_must_be_non_negative():
    with pytest.raises(InvalidWeightConfig):
        ScoringWeights(budget_fit=1.2, preference_match=-0.2, proximity=0.0, popularity=0.0)


def test_weights_from_mapping_requires_every_factor():
    with pytest.raises(InvalidWeightConfig):
        ScoringWeights.from_mapping({"budget_fit": 1.0})
    with pytest.raises(InvalidWeightConfig):
        ScoringWeights.from_mapping({
            "budget_fit": "lots", "preference_match": 0, "proximity": 0, "popularity": 0,
        })
    weights = ScoringWeights.from_mapping({
        "budget_fit": 0.25, "preference_match": 0.25, "proximity": 0.25, "popularity": 0.25,
    })
    assert weights.popularity == 0.25


def test_max_radius_must_be_positive():
    with pytest.raises(InvalidInput):
        ScoringConfig(max_radius_meters=0)
