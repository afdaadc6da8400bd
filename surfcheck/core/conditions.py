"""Condition readings and the parsing boundary for forecast payloads.

Forecast sources hand over loosely shaped JSON. Everything is converted
into a typed ConditionReading here, before it reaches the scorer.
"""

import math
import numbers
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Optional


CARDINAL_DIRECTIONS = [
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
]


class ReadingError(ValueError):
    """Exception raised when a forecast payload cannot become a ConditionReading."""

    pass


@dataclass
class Wind:
    """Wind observation."""
    direction: Optional[str]  # Cardinal (e.g. "SE"), None if unknown
    speed: float  # km/h


@dataclass
class Swell:
    """Swell observation."""
    height: float  # meters
    period: float  # seconds
    direction: Optional[float]  # degrees, None if unknown


@dataclass
class ConditionReading:
    """A wind + swell observation or forecast for a region."""
    wind: Wind
    swell: Swell
    region: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        """A reading without wind or swell direction cannot be scored."""
        return self.wind.direction is not None and self.swell.direction is not None

    def to_dict(self) -> dict:
        """JSON-safe snapshot, as persisted alongside stored ratings."""
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat() if self.timestamp else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ConditionReading":
        """Rebuild a reading from a to_dict() snapshot."""
        return parse_reading(data)


def degrees_to_cardinal(degrees: float) -> str:
    """Convert a bearing in degrees to a 16-point compass direction.

    Args:
        degrees: Bearing (any real number, wrapped into 0-360)

    Returns:
        Cardinal direction such as "SSW"
    """
    index = int(math.floor((degrees % 360) / 22.5 + 0.5))
    return CARDINAL_DIRECTIONS[index % 16]


def cardinal_to_degrees(direction: str) -> Optional[float]:
    """Convert a 16-point compass direction to degrees, None if unrecognized."""
    try:
        return CARDINAL_DIRECTIONS.index(direction.strip().upper()) * 22.5
    except ValueError:
        return None


def _to_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or value is None:
        raise ReadingError(f"Missing or invalid {field_name}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ReadingError(f"Missing or invalid {field_name}: {value!r}") from e
    if math.isnan(number):
        raise ReadingError(f"Missing or invalid {field_name}: {value!r}")
    return number


def _is_number(value: Any) -> bool:
    # numbers.Real covers numpy scalars pulled out of DataFrame rows
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _bearing(number: float, value: Any, field_name: str) -> float:
    if not math.isfinite(number):
        raise ReadingError(f"Unrecognized {field_name}: {value!r}")
    return number


def _parse_wind_direction(value: Any) -> Optional[str]:
    """Wind direction as a cardinal string; numeric bearings are converted."""
    if value is None or value == "" or value == "N/A":
        return None
    if isinstance(value, str):
        text = value.strip().upper()
        if text in CARDINAL_DIRECTIONS:
            return text
        try:
            number = float(text)
        except ValueError as e:
            raise ReadingError(f"Unrecognized wind direction: {value!r}") from e
        return degrees_to_cardinal(_bearing(number, value, "wind direction"))
    if _is_number(value):
        number = float(value)
        if math.isnan(number):
            return None
        return degrees_to_cardinal(_bearing(number, value, "wind direction"))
    raise ReadingError(f"Unrecognized wind direction: {value!r}")


def _parse_swell_direction(value: Any) -> Optional[float]:
    """Swell direction in degrees; cardinal strings are converted."""
    if value is None or value == "" or value == "N/A":
        return None
    if isinstance(value, str):
        degrees = cardinal_to_degrees(value)
        if degrees is not None:
            return degrees
        try:
            number = float(value.strip().rstrip("°"))
        except ValueError as e:
            raise ReadingError(f"Unrecognized swell direction: {value!r}") from e
        return _bearing(number, value, "swell direction")
    if _is_number(value):
        number = float(value)
        if math.isnan(number):
            return None
        return _bearing(number, value, "swell direction")
    raise ReadingError(f"Unrecognized swell direction: {value!r}")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError as e:
            raise ReadingError(f"Invalid timestamp: {value!r}") from e
    raise ReadingError(f"Invalid timestamp: {value!r}")


def parse_reading(payload: dict, region: Optional[str] = None) -> ConditionReading:
    """Convert a forecast payload into a ConditionReading.

    Accepts either the nested shape::

        {"wind": {"direction": "SE", "speed": 12},
         "swell": {"height": 1.5, "period": 11, "direction": 190}}

    or the flat scraper shape with windDirection, windSpeed, swellHeight,
    swellPeriod and swellDirection keys.

    Missing directions are kept as None so the reading is scored as
    incomplete. Missing or non-numeric speed, height or period raise.

    Args:
        payload: Raw forecast data
        region: Region to tag the reading with when the payload has none

    Returns:
        ConditionReading

    Raises:
        ReadingError: If the payload is malformed
    """
    if not isinstance(payload, dict):
        raise ReadingError(f"Expected a mapping, got {type(payload).__name__}")

    if "wind" in payload or "swell" in payload:
        wind = payload.get("wind") or {}
        swell = payload.get("swell") or {}
        if not isinstance(wind, dict) or not isinstance(swell, dict):
            raise ReadingError("wind and swell must be mappings")
        raw = {
            "wind_direction": wind.get("direction"),
            "wind_speed": wind.get("speed"),
            "swell_height": swell.get("height"),
            "swell_period": swell.get("period"),
            "swell_direction": swell.get("direction"),
        }
    else:
        raw = {
            "wind_direction": payload.get("windDirection"),
            "wind_speed": payload.get("windSpeed"),
            "swell_height": payload.get("swellHeight"),
            "swell_period": payload.get("swellPeriod"),
            "swell_direction": payload.get("swellDirection"),
        }

    return ConditionReading(
        wind=Wind(
            direction=_parse_wind_direction(raw["wind_direction"]),
            speed=_to_float(raw["wind_speed"], "wind speed"),
        ),
        swell=Swell(
            height=_to_float(raw["swell_height"], "swell height"),
            period=_to_float(raw["swell_period"], "swell period"),
            direction=_parse_swell_direction(raw["swell_direction"]),
        ),
        region=payload.get("region") or region,
        timestamp=_parse_timestamp(payload.get("timestamp")),
    )
