"""Core surf suitability scoring and rating aggregation engine."""

from surfcheck.core.conditions import (
    ConditionReading,
    ReadingError,
    Swell,
    Wind,
    cardinal_to_degrees,
    degrees_to_cardinal,
    parse_reading,
)
from surfcheck.core.location import (
    CatalogError,
    Coordinates,
    LocationCatalog,
    LocationProfile,
    Range,
    Region,
)
from surfcheck.core.scorer import (
    ConditionCheck,
    Explanation,
    ScoreDisplay,
    SuitabilityResult,
    SuitabilityScorer,
    describe,
    evaluate,
    explain,
)
from surfcheck.core.aggregator import (
    RatingAggregator,
    ScoredLocation,
)

__all__ = [
    # Conditions
    "ConditionReading",
    "ReadingError",
    "Swell",
    "Wind",
    "cardinal_to_degrees",
    "degrees_to_cardinal",
    "parse_reading",
    # Location
    "CatalogError",
    "Coordinates",
    "LocationCatalog",
    "LocationProfile",
    "Range",
    "Region",
    # Scorer
    "ConditionCheck",
    "Explanation",
    "ScoreDisplay",
    "SuitabilityResult",
    "SuitabilityScorer",
    "describe",
    "evaluate",
    "explain",
    # Aggregator
    "RatingAggregator",
    "ScoredLocation",
]
