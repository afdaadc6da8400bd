"""Location model and catalog loader.

Loads surf location profiles from locations.yaml and provides a clean
interface for looking up locations by id and filtering them by region.
The catalog is read once and never mutated.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


class CatalogError(Exception):
    """Exception raised when the location catalog is missing or malformed."""

    pass


@dataclass(frozen=True)
class Range:
    """Inclusive numeric band (degrees, meters or seconds)."""
    min: float
    max: float

    def contains(self, value: float) -> bool:
        """Check if a value falls within the band (inclusive)."""
        return self.min <= value <= self.max

    def distance_to(self, value: float) -> float:
        """Absolute distance from a value to the nearer bound.

        Plain numeric distance: a direction arc crossing 0/360 degrees is
        not treated as circular.
        """
        return min(abs(value - self.min), abs(value - self.max))


@dataclass(frozen=True)
class Coordinates:
    """Geographic coordinates."""
    lat: float
    lon: float


@dataclass(frozen=True)
class Region:
    """Geographic grouping that condition readings are issued for."""
    name: str
    country: str = ""
    continent: str = ""
    coordinates: Optional[Coordinates] = None


@dataclass(frozen=True)
class LocationProfile:
    """A surf location and the bands of conditions it works best in."""
    id: str
    name: str
    region: str
    country: str
    continent: str
    optimal_wind_directions: tuple[str, ...]
    optimal_swell_directions: Range  # degrees
    swell_size: Range  # meters
    ideal_swell_period: Range  # seconds
    sheltered: bool = False
    coordinates: Optional[Coordinates] = None
    difficulty: str = "All Levels"
    wave_type: str = "Beach Break"
    description: str = ""

    def prefers_wind(self, direction: Optional[str]) -> bool:
        """Check if a cardinal wind direction is favorable here."""
        if direction is None:
            return False
        return direction.upper() in self.optimal_wind_directions


class LocationCatalog:
    """Catalog of surf locations loaded from YAML."""

    def __init__(
        self,
        locations: list[LocationProfile],
        regions: Optional[dict[str, Region]] = None,
    ):
        """Initialize the catalog from already-parsed records.

        Args:
            locations: Location profiles. Ids must be unique.
            regions: Region metadata keyed by region name.
        """
        self._locations: dict[str, LocationProfile] = {}
        self._by_region: dict[str, list[LocationProfile]] = {}
        self._regions: dict[str, Region] = dict(regions or {})

        for location in locations:
            if location.id in self._locations:
                raise CatalogError(f"Duplicate location id: {location.id}")
            self._locations[location.id] = location
            self._by_region.setdefault(location.region, []).append(location)

    @classmethod
    def from_yaml(cls, catalog_path: Optional[Path] = None) -> "LocationCatalog":
        """Load a catalog from a YAML file.

        Args:
            catalog_path: Path to locations.yaml. Defaults to config/locations.yaml.

        Returns:
            LocationCatalog
        """
        if catalog_path is None:
            # Find config relative to this file or cwd
            possible_paths = [
                Path(__file__).parent.parent.parent / "config" / "locations.yaml",
                Path.cwd() / "config" / "locations.yaml",
            ]
            for path in possible_paths:
                if path.exists():
                    catalog_path = path
                    break

        if catalog_path is None or not Path(catalog_path).exists():
            raise CatalogError("Could not find locations.yaml")

        with open(catalog_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "LocationCatalog":
        """Build a catalog from the parsed YAML structure."""
        regions = {
            name: _parse_region(name, region_data or {})
            for name, region_data in (data.get("regions") or {}).items()
        }
        locations = [
            _parse_location(location_data, regions)
            for location_data in data.get("locations") or []
        ]
        return cls(locations, regions)

    def get_location(self, location_id: str) -> Optional[LocationProfile]:
        """Get a location by ID.

        Args:
            location_id: Location identifier (e.g., "muizenberg")

        Returns:
            LocationProfile or None if not found
        """
        return self._locations.get(location_id)

    def get_all_locations(self) -> list[LocationProfile]:
        """Get all locations."""
        return list(self._locations.values())

    def get_locations_by_region(self, region: str) -> list[LocationProfile]:
        """Get all locations in a region (exact match on the region name)."""
        return list(self._by_region.get(region, []))

    def get_region(self, name: str) -> Optional[Region]:
        """Get region metadata by name."""
        return self._regions.get(name)

    @property
    def regions(self) -> list[str]:
        """Names of every region with metadata or at least one location."""
        names = list(self._regions)
        names.extend(r for r in self._by_region if r not in self._regions)
        return names

    @property
    def location_count(self) -> int:
        """Get total number of locations."""
        return len(self._locations)


def _parse_range(data: Optional[dict], label: str, location_id: str) -> Range:
    """Parse a {min, max} mapping, enforcing min <= max."""
    data = data or {}
    try:
        low = float(data["min"])
        high = float(data["max"])
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"{location_id}: invalid {label} range {data!r}") from e

    if low > high:
        raise CatalogError(f"{location_id}: {label} min {low} exceeds max {high}")
    return Range(min=low, max=high)


def _parse_coordinates(data: Optional[dict]) -> Optional[Coordinates]:
    if not data:
        return None
    return Coordinates(lat=float(data.get("lat", 0)), lon=float(data.get("lon", 0)))


def _parse_region(name: str, data: dict) -> Region:
    return Region(
        name=name,
        country=data.get("country", ""),
        continent=data.get("continent", ""),
        coordinates=_parse_coordinates(data.get("coordinates")),
    )


def _parse_location(data: dict, regions: dict[str, Region]) -> LocationProfile:
    """Parse a location dictionary into a LocationProfile object."""
    location_id = data.get("id")
    if not location_id:
        raise CatalogError(f"Location without id: {data.get('name', data)!r}")

    region_name = data.get("region", "")
    region = regions.get(region_name)

    return LocationProfile(
        id=location_id,
        name=data.get("name", location_id),
        region=region_name,
        # Locations inherit their grouping from the region unless overridden
        country=data.get("country") or (region.country if region else ""),
        continent=data.get("continent") or (region.continent if region else ""),
        optimal_wind_directions=tuple(
            d.upper() for d in data.get("optimal_wind_directions") or []
        ),
        optimal_swell_directions=_parse_range(
            data.get("optimal_swell_directions"), "optimal_swell_directions", location_id
        ),
        swell_size=_parse_range(data.get("swell_size"), "swell_size", location_id),
        ideal_swell_period=_parse_range(
            data.get("ideal_swell_period"), "ideal_swell_period", location_id
        ),
        sheltered=bool(data.get("sheltered", False)),
        coordinates=_parse_coordinates(data.get("coordinates")),
        difficulty=data.get("difficulty", "All Levels"),
        wave_type=data.get("wave_type", "Beach Break"),
        description=data.get("description", ""),
    )
