"""Surf suitability scoring using a penalty-accumulation model.

Scoring approach:
- Every reading starts from a perfect internal score of 10
- Each criterion that misses the location's ideal band deducts points
- The running score is floored at 0 after every deduction
- The result is normalized onto a 0-5 scale (5 = best)

Criteria (in evaluation order):
- Wind direction: -4 when not one of the location's favored directions
- Wind speed: -2 / -3 / -4 above 15 / 25 / 35 km/h (ignored when sheltered)
- Swell height: -4 / -6 / -8 at up to 0.5m / 1.0m / further outside the band
- Swell direction: -2 / -4 / -6 / -8 at up to 10 / 20 / 30 / further degrees out
- Swell period: -2 / -4 / -6 at up to 2s / 4s / further outside the band

A location is suitable when the normalized score is 4 or 5.

Incomplete readings (no wind or swell direction) score 0 without
evaluating anything else.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from surfcheck.core.conditions import ConditionReading
from surfcheck.core.location import LocationProfile, Range


@dataclass
class ConditionCheck:
    """Whether one criterion is met, with text describing the target."""
    text: str
    is_met: bool


@dataclass
class Explanation:
    """Human-readable breakdown of a reading against a location."""
    reasons: list[str]
    optimal_conditions: list[ConditionCheck]


@dataclass
class SuitabilityResult:
    """Score for one location under one reading."""
    score: int  # 0-5
    suitable: bool
    conditions: list[ConditionCheck] = field(default_factory=list)


@dataclass(frozen=True)
class ScoreDisplay:
    """Display label for a 0-5 score."""
    description: str
    emoji: str
    stars: str


SCORE_DISPLAYS = {
    5: ScoreDisplay("Firing!", "🔥", "★★★★★"),
    4: ScoreDisplay("Surfs up?!", "🏄‍♂️", "★★★★☆"),
    3: ScoreDisplay("Hmmmmmm, maybe?", "🏄‍♂️", "★★★☆☆"),
    2: ScoreDisplay("Probably dog kak", "🐶💩", "★★☆☆☆"),
    1: ScoreDisplay("Dog kak", "💩", "★☆☆☆☆"),
    0: ScoreDisplay("Horse kak", "🐎💩", "☆☆☆☆☆"),
}

UNKNOWN_DISPLAY = ScoreDisplay("Unknown", "❓", "")


class SuitabilityScorer:
    """Scores how well a condition reading suits a surf location.

    Stateless: one instance can be shared across threads.
    """

    MAX_SCORE = 10  # Internal running score
    DISPLAY_MAX = 5
    SUITABLE_THRESHOLD = 4

    WIND_DIRECTION_PENALTY = 4

    # (threshold km/h, penalty), highest threshold first; speed must exceed it
    WIND_SPEED_BANDS = [(35, 4), (25, 3), (15, 2)]
    LIGHT_WIND_KMH = 15

    # (max distance outside band, penalty); anything further gets the fallback
    SWELL_HEIGHT_BANDS = [(0.5, 4), (1.0, 6)]
    SWELL_HEIGHT_MAX_PENALTY = 8

    SWELL_DIRECTION_BANDS = [(10, 2), (20, 4), (30, 6)]
    SWELL_DIRECTION_MAX_PENALTY = 8

    SWELL_PERIOD_BANDS = [(2, 2), (4, 4)]
    SWELL_PERIOD_MAX_PENALTY = 6

    def penalty_wind_direction(
        self,
        location: LocationProfile,
        reading: ConditionReading,
    ) -> int:
        """Penalty when the wind is not one of the location's favored directions."""
        if location.prefers_wind(reading.wind.direction):
            return 0
        return self.WIND_DIRECTION_PENALTY

    def penalty_wind_speed(
        self,
        location: LocationProfile,
        reading: ConditionReading,
    ) -> int:
        """Penalty for strong wind; only the highest matching band applies.

        Sheltered locations never take a wind speed penalty.
        """
        if location.sheltered:
            return 0

        for threshold, penalty in self.WIND_SPEED_BANDS:
            if reading.wind.speed > threshold:
                return penalty
        return 0

    def penalty_swell_height(
        self,
        location: LocationProfile,
        reading: ConditionReading,
    ) -> int:
        """Penalty graduated by how far the swell height is outside the band."""
        return self._banded_penalty(
            location.swell_size,
            reading.swell.height,
            self.SWELL_HEIGHT_BANDS,
            self.SWELL_HEIGHT_MAX_PENALTY,
        )

    def penalty_swell_direction(
        self,
        location: LocationProfile,
        reading: ConditionReading,
    ) -> int:
        """Penalty graduated by how far the swell direction is outside the arc.

        Distances are plain numeric differences to either bound, so an arc
        near 0/360 degrees is not treated as circular.
        """
        return self._banded_penalty(
            location.optimal_swell_directions,
            reading.swell.direction,
            self.SWELL_DIRECTION_BANDS,
            self.SWELL_DIRECTION_MAX_PENALTY,
        )

    def penalty_swell_period(
        self,
        location: LocationProfile,
        reading: ConditionReading,
    ) -> int:
        """Penalty graduated by how far the swell period is outside the band."""
        return self._banded_penalty(
            location.ideal_swell_period,
            reading.swell.period,
            self.SWELL_PERIOD_BANDS,
            self.SWELL_PERIOD_MAX_PENALTY,
        )

    def _banded_penalty(
        self,
        band: Range,
        value: float,
        steps: list[tuple[float, int]],
        max_penalty: int,
    ) -> int:
        if band.contains(value):
            return 0

        distance = band.distance_to(value)
        for max_distance, penalty in steps:
            if distance <= max_distance:
                return penalty
        return max_penalty

    def normalize(self, running_score: float) -> int:
        """Map the internal 0-10 score onto the 0-5 display scale.

        Halves round up (a running score of 5 becomes 3, not 2).
        """
        scaled = (max(0.0, running_score) / self.MAX_SCORE) * self.DISPLAY_MAX
        rounded = int(math.floor(scaled + 0.5))
        return max(0, min(self.DISPLAY_MAX, rounded))

    def evaluate(
        self,
        location: LocationProfile,
        reading: Optional[ConditionReading],
    ) -> SuitabilityResult:
        """Score a reading against a location.

        Args:
            location: The surf location
            reading: Wind and swell conditions

        Returns:
            SuitabilityResult with a 0-5 score and per-criterion checks
        """
        explanation = self.explain(location, reading)

        if reading is None or not reading.is_complete:
            return SuitabilityResult(
                score=0,
                suitable=False,
                conditions=explanation.optimal_conditions,
            )

        running = float(self.MAX_SCORE)
        for penalty in (
            self.penalty_wind_direction,
            self.penalty_wind_speed,
            self.penalty_swell_height,
            self.penalty_swell_direction,
            self.penalty_swell_period,
        ):
            running = max(0.0, running - penalty(location, reading))

        score = self.normalize(running)

        return SuitabilityResult(
            score=score,
            suitable=score >= self.SUITABLE_THRESHOLD,
            conditions=explanation.optimal_conditions,
        )

    def explain(
        self,
        location: LocationProfile,
        reading: Optional[ConditionReading],
        good_reasons_only: bool = False,
    ) -> Explanation:
        """Describe each criterion for display.

        The five checks are derived directly from the location's bands, not
        from the penalty math, and agree with it: a check is met exactly
        when its penalty is zero.

        Args:
            location: The surf location
            reading: Wind and swell conditions, or None when unavailable
            good_reasons_only: List reasons for met criteria instead of unmet ones

        Returns:
            Explanation with reasons and the ordered optimal-condition checks
        """
        wind_text = f"Optimal Wind: {', '.join(location.optimal_wind_directions)}"
        speed_text = f"Wind Speed: 0-{self.LIGHT_WIND_KMH}km/h"
        direction_text = (
            f"Optimal Swell Direction: {_fmt(location.optimal_swell_directions.min)}° - "
            f"{_fmt(location.optimal_swell_directions.max)}°"
        )
        height_text = (
            f"Optimal Wave Size: {_fmt(location.swell_size.min)}m - "
            f"{_fmt(location.swell_size.max)}m"
        )
        period_text = (
            f"Optimal Swell Period: {_fmt(location.ideal_swell_period.min)}s - "
            f"{_fmt(location.ideal_swell_period.max)}s"
        )

        if reading is None or not reading.is_complete:
            return Explanation(
                reasons=[],
                optimal_conditions=[
                    ConditionCheck(wind_text, False),
                    ConditionCheck(speed_text, False),
                    ConditionCheck(direction_text, False),
                    ConditionCheck(height_text, False),
                    ConditionCheck(period_text, False),
                ],
            )

        wind = reading.wind
        swell = reading.swell

        good_wind = location.prefers_wind(wind.direction)
        light_wind = location.sheltered or wind.speed <= self.LIGHT_WIND_KMH
        good_direction = location.optimal_swell_directions.contains(swell.direction)
        good_height = location.swell_size.contains(swell.height)
        good_period = location.ideal_swell_period.contains(swell.period)

        if not light_wind:
            speed_text += " (Current winds too strong)"

        if good_reasons_only:
            candidates = [
                (good_wind, f"Perfect wind direction ({wind.direction})"),
                (light_wind, (
                    "Sheltered from the wind" if location.sheltered
                    else f"Light winds ({_fmt(wind.speed)}km/h)"
                )),
                (good_direction, f"Great swell direction ({_fmt(swell.direction)}°)"),
                (good_height, f"Perfect wave height ({_fmt(swell.height)}m)"),
                (good_period, f"Ideal swell period ({_fmt(swell.period)}s)"),
            ]
            reasons = [text for met, text in candidates if met]
        else:
            size_issue = "too small" if swell.height < location.swell_size.min else "too big"
            period_issue = (
                "too short" if swell.period < location.ideal_swell_period.min else "too long"
            )
            candidates = [
                (good_wind, f"Wind direction ({wind.direction}) not optimal"),
                (light_wind, f"Wind too strong ({_fmt(wind.speed)}km/h)"),
                (good_direction, f"Swell direction ({_fmt(swell.direction)}°) outside optimal range"),
                (good_height, f"Wave height ({_fmt(swell.height)}m) {size_issue}"),
                (good_period, f"Swell period ({_fmt(swell.period)}s) {period_issue}"),
            ]
            reasons = [text for met, text in candidates if not met]

        return Explanation(
            reasons=reasons,
            optimal_conditions=[
                ConditionCheck(wind_text, good_wind),
                ConditionCheck(speed_text, light_wind),
                ConditionCheck(direction_text, good_direction),
                ConditionCheck(height_text, good_height),
                ConditionCheck(period_text, good_period),
            ],
        )


def _fmt(value: float) -> str:
    """Format a number without a trailing .0 (1.5 -> "1.5", 2.0 -> "2")."""
    return f"{value:g}"


def describe(score: Optional[float]) -> ScoreDisplay:
    """Get the display label for a score.

    Non-integer scores are floored first, so 3.5 shows as a 3.

    Args:
        score: Score on the 0-5 scale

    Returns:
        ScoreDisplay, or the "Unknown" label for missing or out-of-range scores
    """
    if score is None:
        return UNKNOWN_DISPLAY
    try:
        key = math.floor(score)
    except (TypeError, ValueError, OverflowError):
        return UNKNOWN_DISPLAY
    return SCORE_DISPLAYS.get(key, UNKNOWN_DISPLAY)


def evaluate(location: LocationProfile, reading: Optional[ConditionReading]) -> SuitabilityResult:
    """Score a reading with a default scorer.

    Convenience function for one-off scoring.
    """
    return SuitabilityScorer().evaluate(location, reading)


def explain(
    location: LocationProfile,
    reading: Optional[ConditionReading],
    good_reasons_only: bool = False,
) -> Explanation:
    """Explain a reading with a default scorer."""
    return SuitabilityScorer().explain(location, reading, good_reasons_only)
