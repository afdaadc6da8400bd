"""Region rating aggregation.

Connects the pieces that answer "how many locations are good today":
- Location catalog (location.py)
- Suitability scorer (scorer.py)
- Rating store (storage/rating_store.py)

Writes go to the store; reads prefer the store and fall back to scoring
the catalog live when nothing has been stored yet for a region and date.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from surfcheck.core.conditions import ConditionReading
from surfcheck.core.location import LocationCatalog, LocationProfile
from surfcheck.core.scorer import SuitabilityResult, SuitabilityScorer
from surfcheck.storage.rating_store import RatingStore, StoredRating, as_date


logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


@dataclass
class ScoredLocation:
    """A location with its score under a reading."""
    location: LocationProfile
    result: SuitabilityResult
    rank: int = 0

    @property
    def is_suitable(self) -> bool:
        return self.result.suitable

    @property
    def score(self) -> int:
        return self.result.score


class RatingAggregator:
    """Stores and counts suitable locations per region and date."""

    def __init__(
        self,
        catalog: LocationCatalog,
        store: RatingStore,
        scorer: Optional[SuitabilityScorer] = None,
    ):
        """Initialize the aggregator.

        Args:
            catalog: Location catalog to score from.
            store: Store for good ratings.
            scorer: Suitability scorer. Defaults to a new SuitabilityScorer.
        """
        self.catalog = catalog
        self.store = store
        self.scorer = scorer or SuitabilityScorer()

    def _score_region(
        self,
        region: str,
        reading: Optional[ConditionReading],
        suitable_only: bool = True,
    ) -> list[ScoredLocation]:
        """Score every catalog location in a region.

        Shared by the write path and the live fallback of the read paths.
        """
        scored = [
            ScoredLocation(location=location, result=self.scorer.evaluate(location, reading))
            for location in self.catalog.get_locations_by_region(region)
        ]
        if suitable_only:
            scored = [s for s in scored if s.is_suitable]
        return scored

    def store_good_ratings(
        self,
        reading: ConditionReading,
        region: str,
        rating_date: DateLike,
    ) -> int:
        """Persist one rating per suitable location in a region.

        Repeated calls for the same region and date write nothing new.

        Args:
            reading: Conditions for the region
            region: Region name
            rating_date: Day the ratings apply to

        Returns:
            Number of newly stored ratings

        Raises:
            RatingStoreError: If the store cannot be written
        """
        day = as_date(rating_date)
        logger.info(f"Rating storage started for {region} on {day.isoformat()}")

        if not self.catalog.get_locations_by_region(region):
            logger.warning(f"No locations found for region: {region}")
            return 0

        suitable = self._score_region(region, reading)
        logger.info(f"Found {len(suitable)} suitable locations in {region}")

        if not suitable:
            return 0

        snapshot = reading.to_dict()
        inserted = self.store.insert_ratings(
            StoredRating(
                rating_date=day,
                location_id=s.location.id,
                region=s.location.region,
                score=s.score,
                conditions=snapshot,
            )
            for s in suitable
        )

        logger.info(f"Stored {inserted} ratings for {region}")
        return inserted

    def ensure_good_ratings(
        self,
        reading: ConditionReading,
        region: str,
        rating_date: DateLike,
    ) -> int:
        """Store ratings for a region and date only if none exist yet.

        Returns:
            Number of newly stored ratings (0 when the store was already populated)
        """
        existing = self.store.count_ratings(region, rating_date)
        if existing > 0:
            logger.debug(f"{existing} ratings already stored for {region}")
            return 0

        logger.info(f"No ratings found for {region} on {as_date(rating_date)}, regenerating")
        return self.store_good_ratings(reading, region, rating_date)

    def get_good_beach_count(
        self,
        region: str,
        rating_date: DateLike,
        reading: Optional[ConditionReading] = None,
    ) -> int:
        """Count suitable locations in a region on a date.

        Stored ratings win once present. Otherwise the catalog is scored live
        against the reading (nothing is persisted). Without either, 0.

        Args:
            region: Region name
            rating_date: Day to count
            reading: Live conditions to fall back on

        Returns:
            Number of suitable locations
        """
        stored = self.store.count_ratings(region, rating_date)
        if stored > 0:
            return stored

        if reading is None:
            return 0

        return len(self._score_region(region, reading))

    def get_region_scores(
        self,
        rating_date: DateLike,
        region: str,
        reading: Optional[ConditionReading] = None,
        include_rollups: bool = False,
    ) -> dict[str, int]:
        """Count suitable locations keyed by region.

        Same store-first policy as get_good_beach_count.

        Args:
            rating_date: Day to count
            region: Region name
            reading: Live conditions to fall back on
            include_rollups: Also count each location under its country and continent

        Returns:
            Mapping of group name to count; empty when nothing is suitable
        """
        stored = self.store.get_ratings(region, rating_date)
        if stored:
            locations = []
            for rating in stored:
                location = self.catalog.get_location(rating.location_id)
                if location is None:
                    logger.warning(f"Stored rating for unknown location {rating.location_id}")
                locations.append((rating.region, location))
        elif reading is not None:
            locations = [
                (s.location.region, s.location)
                for s in self._score_region(region, reading)
            ]
        else:
            return {}

        scores: dict[str, int] = {}
        for region_name, location in locations:
            scores[region_name] = scores.get(region_name, 0) + 1
            if include_rollups and location is not None:
                for key in (location.country, location.continent):
                    if key:
                        scores[key] = scores.get(key, 0) + 1

        return scores

    def rank_region(
        self,
        reading: Optional[ConditionReading],
        region: str,
        top_n: Optional[int] = None,
    ) -> list[ScoredLocation]:
        """Score every location in a region live, best first.

        Args:
            reading: Conditions for the region
            region: Region name
            top_n: Return only the top N locations. Defaults to all.

        Returns:
            List of ScoredLocation sorted by score (highest first)
        """
        ranked = self._score_region(region, reading, suitable_only=False)

        # Stable sort keeps catalog order among equal scores
        ranked.sort(key=lambda s: s.score, reverse=True)

        for i, scored in enumerate(ranked, 1):
            scored.rank = i

        if top_n:
            ranked = ranked[:top_n]

        return ranked
