"""Open-Meteo client for hourly wind and swell forecasts.

Combines the weather forecast API (10m wind) with the marine API (swell)
into one hourly frame, and turns a single hour into a ConditionReading.
No API key required.
"""

import hashlib
import json
import logging
import os
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pandas as pd
import requests

from surfcheck.core.conditions import ConditionReading, ReadingError, parse_reading


logger = logging.getLogger(__name__)

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
CACHE_TTL_SECONDS = 3600  # 1 hour
REQUEST_TIMEOUT = 15
FORECAST_DAYS = 3
USER_AGENT = "SurfCheck/1.0 (surf-suitability)"

COLUMNS = [
    "time",
    "wind_speed_kmh",
    "wind_direction_deg",
    "swell_height_m",
    "swell_period_s",
    "swell_direction_deg",
]


class OpenMeteoError(Exception):
    """Exception raised for Open-Meteo client errors."""

    pass


class OpenMeteoClient:
    """Client for fetching surf conditions from Open-Meteo."""

    def __init__(
        self,
        cache_path: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the Open-Meteo client.

        Args:
            cache_path: Path to SQLite cache file. Defaults to
                $SURFCHECK_CACHE_DIR/open_meteo.db or ~/.cache/surfcheck/open_meteo.db
            session: HTTP session to use. Defaults to a new requests.Session.
        """
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

        if cache_path is None:
            cache_dir = Path(
                os.environ.get("SURFCHECK_CACHE_DIR", Path.home() / ".cache" / "surfcheck")
            )
            cache_dir.mkdir(parents=True, exist_ok=True)
            cache_path = cache_dir / "open_meteo.db"

        self.cache_path = cache_path
        self._init_cache()

    def _init_cache(self) -> None:
        """Initialize the SQLite cache table."""
        with sqlite3.connect(self.cache_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS open_meteo_cache (
                    cache_key TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()

    def _make_cache_key(self, url: str, params: dict) -> str:
        """Generate a cache key for the request."""
        key_data = f"{url}:{json.dumps(params, sort_keys=True)}"
        return hashlib.sha256(key_data.encode()).hexdigest()[:32]

    def _get_cached(self, cache_key: str) -> Optional[dict]:
        """Retrieve data from cache if valid."""
        with sqlite3.connect(self.cache_path) as conn:
            cursor = conn.execute(
                "SELECT data, created_at FROM open_meteo_cache WHERE cache_key = ?",
                (cache_key,),
            )
            row = cursor.fetchone()

            if row is None:
                return None

            data_json, created_at_str = row
            created_at = datetime.fromisoformat(created_at_str)

            if datetime.now(timezone.utc) - created_at > timedelta(seconds=CACHE_TTL_SECONDS):
                conn.execute("DELETE FROM open_meteo_cache WHERE cache_key = ?", (cache_key,))
                conn.commit()
                return None

            return json.loads(data_json)

    def _set_cached(self, cache_key: str, data: dict) -> None:
        """Store data in cache."""
        with sqlite3.connect(self.cache_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO open_meteo_cache (cache_key, data, created_at)
                VALUES (?, ?, ?)
                """,
                (cache_key, json.dumps(data), datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()

    def _fetch_hourly(self, url: str, params: dict, use_cache: bool) -> dict:
        """GET an Open-Meteo endpoint and return its "hourly" block."""
        cache_key = self._make_cache_key(url, params)

        if use_cache:
            cached = self._get_cached(cache_key)
            if cached is not None:
                return cached

        try:
            response = self.session.get(url, params=params, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise OpenMeteoError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise OpenMeteoError(f"Invalid JSON from {url}: {e}") from e

        hourly = data.get("hourly")
        if not isinstance(hourly, dict) or "time" not in hourly:
            raise OpenMeteoError(f"No hourly data in response from {url}")

        if use_cache:
            self._set_cached(cache_key, hourly)

        return hourly

    def get_hourly_conditions(
        self,
        lat: float,
        lon: float,
        use_cache: bool = True,
    ) -> pd.DataFrame:
        """Get hourly wind and swell forecast for a location.

        Args:
            lat: Latitude
            lon: Longitude
            use_cache: Whether to use cached data

        Returns:
            DataFrame with columns: time, wind_speed_kmh, wind_direction_deg,
                                   swell_height_m, swell_period_s, swell_direction_deg
        """
        base_params = {
            "latitude": round(lat, 4),
            "longitude": round(lon, 4),
            "timezone": "UTC",
            "forecast_days": FORECAST_DAYS,
        }

        wind = self._fetch_hourly(
            FORECAST_URL,
            {
                **base_params,
                "hourly": "wind_speed_10m,wind_direction_10m",
                "wind_speed_unit": "kmh",
            },
            use_cache,
        )
        marine = self._fetch_hourly(
            MARINE_URL,
            {
                **base_params,
                "hourly": "swell_wave_height,swell_wave_period,swell_wave_direction",
            },
            use_cache,
        )

        wind_df = pd.DataFrame({
            "time": wind.get("time", []),
            "wind_speed_kmh": wind.get("wind_speed_10m", []),
            "wind_direction_deg": wind.get("wind_direction_10m", []),
        })
        marine_df = pd.DataFrame({
            "time": marine.get("time", []),
            "swell_height_m": marine.get("swell_wave_height", []),
            "swell_period_s": marine.get("swell_wave_period", []),
            "swell_direction_deg": marine.get("swell_wave_direction", []),
        })

        if wind_df.empty or marine_df.empty:
            return pd.DataFrame(columns=COLUMNS)

        df = wind_df.merge(marine_df, on="time", how="inner")
        df["time"] = pd.to_datetime(df["time"], utc=True)
        return df[COLUMNS].sort_values("time").reset_index(drop=True)

    def get_reading(
        self,
        lat: float,
        lon: float,
        when: Optional[datetime] = None,
        region: Optional[str] = None,
    ) -> ConditionReading:
        """Get the forecast hour nearest a time as a ConditionReading.

        Args:
            lat: Latitude
            lon: Longitude
            when: Time of interest. Defaults to now.
            region: Region name to tag the reading with

        Returns:
            ConditionReading (directions may be None if the model has gaps)

        Raises:
            OpenMeteoError: If no usable forecast hour is available
        """
        df = self.get_hourly_conditions(lat, lon)
        if df.empty:
            raise OpenMeteoError(f"No forecast hours for {lat}, {lon}")

        target = pd.Timestamp(when or datetime.now(timezone.utc))
        if target.tzinfo is None:
            target = target.tz_localize("UTC")

        nearest = (df["time"] - target).abs().idxmin()
        row = df.loc[nearest]

        payload = {
            "wind": {
                "direction": row["wind_direction_deg"],
                "speed": row["wind_speed_kmh"],
            },
            "swell": {
                "height": row["swell_height_m"],
                "period": row["swell_period_s"],
                "direction": row["swell_direction_deg"],
            },
            "timestamp": row["time"].to_pydatetime(),
        }

        try:
            return parse_reading(payload, region=region)
        except ReadingError as e:
            raise OpenMeteoError(f"Unusable forecast hour {row['time']}: {e}") from e
