#!/usr/bin/env python3
"""Test script to verify the surf suitability scorer works correctly.

Run from project root:
    python scripts/test_scoring.py
"""

import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from surfcheck.core.conditions import ConditionReading, Swell, Wind
from surfcheck.core.location import LocationProfile, Range
from surfcheck.core.scorer import (
    SuitabilityScorer,
    UNKNOWN_DISPLAY,
    describe,
    evaluate,
    explain,
)


def make_location(**overrides) -> LocationProfile:
    """SE wind, 1-2m, 180-200 degrees, 8-14s, unsheltered."""
    location = LocationProfile(
        id="test-beach",
        name="Test Beach",
        region="Test Region",
        country="Testland",
        continent="Africa",
        optimal_wind_directions=("SE",),
        optimal_swell_directions=Range(180, 200),
        swell_size=Range(1, 2),
        ideal_swell_period=Range(8, 14),
        sheltered=False,
    )
    return replace(location, **overrides)


def make_reading(
    wind_direction="SE",
    wind_speed=10,
    height=1.5,
    period=11,
    swell_direction=190,
) -> ConditionReading:
    return ConditionReading(
        wind=Wind(direction=wind_direction, speed=wind_speed),
        swell=Swell(height=height, period=period, direction=swell_direction),
    )


def print_result(name: str, result):
    """Pretty print a scoring result."""
    print(f"\n{'='*60}")
    print(f"TEST: {name}")
    print(f"{'='*60}")
    print(f"  Score: {result.score}/5 ({describe(result.score).description})")
    print(f"  Suitable: {result.suitable}")
    for check in result.conditions:
        print(f"    {'✓' if check.is_met else '✗'} {check.text}")


def test_perfect_conditions():
    """All five criteria met keeps the running score at 10."""
    result = SuitabilityScorer().evaluate(make_location(), make_reading())
    print_result("Perfect Conditions", result)

    assert result.score == 5, f"Expected 5, got {result.score}"
    assert result.suitable is True
    assert [c.is_met for c in result.conditions] == [True] * 5


def test_strong_wind_penalty():
    """40 km/h onto an unsheltered beach: 10 - 4 = 6 -> 3, not suitable."""
    result = SuitabilityScorer().evaluate(make_location(), make_reading(wind_speed=40))
    print_result("Strong Wind (40 km/h)", result)

    assert result.score == 3, f"Expected 3, got {result.score}"
    assert result.suitable is False


def test_wind_speed_bands():
    """Only the highest matching wind band applies."""
    scorer = SuitabilityScorer()
    location = make_location()

    cases = [
        (15, 0),   # At the threshold, no penalty
        (16, 2),
        (25, 2),
        (26, 3),
        (35, 3),
        (36, 4),
        (80, 4),
    ]
    for speed, expected in cases:
        penalty = scorer.penalty_wind_speed(location, make_reading(wind_speed=speed))
        assert penalty == expected, f"speed={speed}: expected -{expected}, got -{penalty}"

    # 26 km/h: running 7 -> 3.5 rounds up to 4, still suitable
    result = scorer.evaluate(location, make_reading(wind_speed=26))
    assert result.score == 4
    assert result.suitable is True


def test_sheltered_ignores_wind_speed():
    """Sheltered locations never take a wind speed penalty."""
    location = make_location(sheltered=True)
    result = SuitabilityScorer().evaluate(location, make_reading(wind_speed=60))

    assert result.score == 5
    assert result.conditions[1].is_met is True


def test_wrong_wind_direction():
    """Wrong wind direction: 10 - 4 = 6 -> 3."""
    result = SuitabilityScorer().evaluate(make_location(), make_reading(wind_direction="NW"))

    assert result.score == 3
    assert result.suitable is False
    assert result.conditions[0].is_met is False


def test_swell_height_bands():
    """Height penalty graduated by distance to the nearer bound."""
    scorer = SuitabilityScorer()
    location = make_location()

    cases = [
        (1.0, 0, 5),    # On the lower bound
        (2.0, 0, 5),    # On the upper bound
        (2.5, 4, 3),    # 0.5m over
        (0.5, 4, 3),    # 0.5m under
        (3.0, 6, 2),    # 1.0m over
        (3.5, 8, 1),    # Further out
    ]
    for height, penalty, score in cases:
        reading = make_reading(height=height)
        assert scorer.penalty_swell_height(location, reading) == penalty, f"height={height}"
        assert scorer.evaluate(location, reading).score == score, f"height={height}"


def test_swell_direction_bands():
    """Direction penalty graduated by degrees outside the arc."""
    scorer = SuitabilityScorer()
    location = make_location()

    cases = [
        (205, 2, 4),
        (170, 2, 4),
        (215, 4, 3),
        (225, 6, 2),
        (250, 8, 1),
        (90, 8, 1),
    ]
    for direction, penalty, score in cases:
        reading = make_reading(swell_direction=direction)
        assert scorer.penalty_swell_direction(location, reading) == penalty, f"dir={direction}"
        assert scorer.evaluate(location, reading).score == score, f"dir={direction}"


def test_swell_direction_no_wraparound():
    """An arc ending at 360 does not treat 5 degrees as adjacent."""
    scorer = SuitabilityScorer()
    location = make_location(optimal_swell_directions=Range(350, 360))

    penalty = scorer.penalty_swell_direction(location, make_reading(swell_direction=5))
    assert penalty == 8, f"Expected -8 (distance 345), got -{penalty}"


def test_swell_period_bands():
    """Period penalty graduated by seconds outside the band."""
    scorer = SuitabilityScorer()
    location = make_location()

    cases = [
        (15, 2, 4),
        (6, 2, 4),
        (18, 4, 3),
        (20, 6, 2),
        (3, 6, 2),
    ]
    for period, penalty, score in cases:
        reading = make_reading(period=period)
        assert scorer.penalty_swell_period(location, reading) == penalty, f"period={period}"
        assert scorer.evaluate(location, reading).score == score, f"period={period}"


def test_running_score_floors_at_zero():
    """Everything wrong bottoms out at 0 instead of going negative."""
    reading = make_reading(
        wind_direction="N",
        wind_speed=50,
        height=6,
        period=30,
        swell_direction=10,
    )
    result = SuitabilityScorer().evaluate(make_location(), reading)

    assert result.score == 0
    assert result.suitable is False


def test_half_scores_round_up():
    """Running score 5 (wind -3, period -2) maps to 2.5 and rounds to 3."""
    result = SuitabilityScorer().evaluate(
        make_location(),
        make_reading(wind_speed=30, period=15),
    )
    assert result.score == 3, f"Expected 3, got {result.score}"


def test_normalize_range():
    """Normalized scores are always integers within 0-5."""
    scorer = SuitabilityScorer()
    for running in [-5, -0.1, 0, 0.9, 1, 3, 5, 6.9, 7, 9, 10, 12]:
        score = scorer.normalize(running)
        assert isinstance(score, int)
        assert 0 <= score <= 5, f"running={running} -> {score}"

    assert scorer.normalize(10) == 5
    assert scorer.normalize(8) == 4
    assert scorer.normalize(7) == 4
    assert scorer.normalize(6) == 3
    assert scorer.normalize(1) == 1


def test_incomplete_reading():
    """Missing directions score 0 regardless of everything else."""
    scorer = SuitabilityScorer()
    location = make_location()

    for reading in [
        make_reading(swell_direction=None),
        make_reading(wind_direction=None),
        make_reading(wind_direction=None, swell_direction=None),
        None,
    ]:
        result = scorer.evaluate(location, reading)
        assert result.score == 0
        assert result.suitable is False
        assert [c.is_met for c in result.conditions] == [False] * 5


def test_suitability_threshold():
    """Suitable exactly when the score is 4 or 5."""
    scorer = SuitabilityScorer()
    location = make_location()
    readings = [
        make_reading(),
        make_reading(wind_speed=20),
        make_reading(wind_speed=40),
        make_reading(height=3.0),
        make_reading(height=3.5),
        make_reading(wind_direction="W", height=5),
    ]
    seen = set()
    for reading in readings:
        result = scorer.evaluate(location, reading)
        seen.add(result.score)
        assert result.suitable == (result.score >= 4), f"score={result.score}"

    assert seen == {5, 4, 3, 2, 1, 0}, f"Expected every score, saw {sorted(seen)}"


def test_determinism():
    """Repeated evaluation gives identical results."""
    scorer = SuitabilityScorer()
    location = make_location()
    reading = make_reading(wind_speed=22, height=2.3, swell_direction=212, period=16)

    first = scorer.evaluate(location, reading)
    for _ in range(10):
        again = scorer.evaluate(location, reading)
        assert again.score == first.score
        assert again.suitable == first.suitable


def test_out_of_domain_values():
    """Negative or absurd numbers flow through without raising."""
    scorer = SuitabilityScorer()
    result = scorer.evaluate(
        make_location(),
        make_reading(wind_speed=-20, height=-1, period=0, swell_direction=-400),
    )
    assert 0 <= result.score <= 5


def test_explain_good_reasons():
    """good_reasons_only lists each met criterion."""
    explanation = explain(make_location(), make_reading(), good_reasons_only=True)

    assert explanation.reasons == [
        "Perfect wind direction (SE)",
        "Light winds (10km/h)",
        "Great swell direction (190°)",
        "Perfect wave height (1.5m)",
        "Ideal swell period (11s)",
    ]
    assert [c.text for c in explanation.optimal_conditions] == [
        "Optimal Wind: SE",
        "Wind Speed: 0-15km/h",
        "Optimal Swell Direction: 180° - 200°",
        "Optimal Wave Size: 1m - 2m",
        "Optimal Swell Period: 8s - 14s",
    ]


def test_explain_bad_reasons():
    """By default only unmet criteria are listed."""
    reading = make_reading(wind_direction="NW", wind_speed=30, height=2.8, period=6)
    explanation = explain(make_location(), reading)

    assert explanation.reasons == [
        "Wind direction (NW) not optimal",
        "Wind too strong (30km/h)",
        "Wave height (2.8m) too big",
        "Swell period (6s) too short",
    ]
    assert [c.is_met for c in explanation.optimal_conditions] == [False, False, True, False, False]
    assert explanation.optimal_conditions[1].text.endswith("(Current winds too strong)")

    assert explain(make_location(), make_reading(height=0.4)).reasons == [
        "Wave height (0.4m) too small",
    ]


def test_explain_incomplete_reading():
    """No live data: targets shown, nothing met, no reasons."""
    explanation = explain(make_location(), make_reading(swell_direction=None))

    assert explanation.reasons == []
    assert len(explanation.optimal_conditions) == 5
    assert not any(c.is_met for c in explanation.optimal_conditions)
    assert explanation.optimal_conditions[3].text == "Optimal Wave Size: 1m - 2m"


def test_explain_agrees_with_penalties():
    """Each check is met exactly when its penalty is zero."""
    scorer = SuitabilityScorer()
    penalties = [
        scorer.penalty_wind_direction,
        scorer.penalty_wind_speed,
        scorer.penalty_swell_direction,
        scorer.penalty_swell_height,
        scorer.penalty_swell_period,
    ]

    for sheltered in (False, True):
        location = make_location(sheltered=sheltered)
        for wind_direction in ("SE", "NW"):
            for wind_speed in (0, 15, 15.5, 30):
                for height in (0.4, 1, 2, 2.6):
                    for swell_direction in (175, 180, 200, 231):
                        for period in (7.9, 8, 14, 19):
                            reading = make_reading(
                                wind_direction, wind_speed, height, period, swell_direction
                            )
                            checks = scorer.explain(location, reading).optimal_conditions
                            for check, penalty in zip(checks, penalties):
                                assert check.is_met == (penalty(location, reading) == 0), (
                                    f"{check.text} disagrees for {reading}"
                                )


def test_describe():
    """Fixed labels per score, floored, unknown outside 0-5."""
    assert describe(5).description == "Firing!"
    assert describe(4).description == "Surfs up?!"
    assert describe(0).description == "Horse kak"
    assert describe(4).stars == "★★★★☆"

    assert describe(3.5) == describe(3), "3.5 must show as a 3"
    assert describe(4.99) == describe(4)

    for bad in (6, -1, -0.5, None, float("nan")):
        assert describe(bad) == UNKNOWN_DISPLAY, f"{bad!r} should be unknown"


def test_module_level_evaluate():
    """Convenience function matches the scorer."""
    result = evaluate(make_location(), make_reading(wind_speed=40))
    assert result.score == 3


def run_all_tests():
    """Run all tests and report results."""
    print("\n" + "#"*60)
    print("# SURF SCORER TEST SUITE")
    print("#"*60)

    tests = [
        ("Perfect Conditions", test_perfect_conditions),
        ("Strong Wind Penalty", test_strong_wind_penalty),
        ("Wind Speed Bands", test_wind_speed_bands),
        ("Sheltered Location", test_sheltered_ignores_wind_speed),
        ("Wrong Wind Direction", test_wrong_wind_direction),
        ("Swell Height Bands", test_swell_height_bands),
        ("Swell Direction Bands", test_swell_direction_bands),
        ("Swell Direction Without Wraparound", test_swell_direction_no_wraparound),
        ("Swell Period Bands", test_swell_period_bands),
        ("Floor At Zero", test_running_score_floors_at_zero),
        ("Half Scores Round Up", test_half_scores_round_up),
        ("Normalize Range", test_normalize_range),
        ("Incomplete Reading", test_incomplete_reading),
        ("Suitability Threshold", test_suitability_threshold),
        ("Determinism", test_determinism),
        ("Out-of-domain Values", test_out_of_domain_values),
        ("Explain: Good Reasons", test_explain_good_reasons),
        ("Explain: Bad Reasons", test_explain_bad_reasons),
        ("Explain: Incomplete Reading", test_explain_incomplete_reading),
        ("Explain Agrees With Penalties", test_explain_agrees_with_penalties),
        ("Describe", test_describe),
        ("Module-level Evaluate", test_module_level_evaluate),
    ]

    passed = 0
    failed = 0

    for name, test_func in tests:
        try:
            test_func()
            passed += 1
        except AssertionError as e:
            failed += 1
            print(f"\n  ✗ FAILED: {name}")
            print(f"    Error: {e}")
        except Exception as e:
            failed += 1
            print(f"\n  ✗ ERROR: {name}")
            print(f"    Exception: {e}")

    print("\n" + "="*60)
    print("TEST RESULTS")
    print("="*60)
    print(f"  Passed: {passed}")
    print(f"  Failed: {failed}")
    print(f"  Total:  {len(tests)}")
    print("="*60)

    return failed == 0


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
