"""Wall-clock time at curated cities in their real timezones, with day/night status."""

import json
import logging
from collections.abc import Iterable
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from pytz import UnknownTimeZoneError, timezone, utc
from timezonefinder import TimezoneFinder

from grayline.models import City, CityTime
from grayline.solar import SolarOracle, as_utc, default_oracle
from grayline.timezones import format_time

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

USER_CITIES_FILE = "cities.json"
MAX_USER_CITIES = 10


class TimezoneLookupError(Exception):
    """No IANA timezone could be resolved for a place."""


DEFAULT_CITIES: tuple[City, ...] = (
    City("london", "London", "United Kingdom", -0.1278, 51.5074, "Europe/London"),
    City("paris", "Paris", "France", 2.3522, 48.8566, "Europe/Paris"),
    City("new-york", "New York", "United States", -74.0060, 40.7128, "America/New_York"),
    City("seattle", "Seattle", "United States", -122.3321, 47.6062, "America/Los_Angeles"),
    City("dubai", "Dubai", "UAE", 55.2708, 25.2048, "Asia/Dubai"),
    City("shanghai", "Shanghai", "China", 121.4737, 31.2304, "Asia/Shanghai"),
)

POPULAR_CITIES: tuple[City, ...] = (
    City("tokyo", "Tokyo", "Japan", 139.6917, 35.6895, "Asia/Tokyo"),
    City("sydney", "Sydney", "Australia", 151.2093, -33.8688, "Australia/Sydney"),
    City("singapore", "Singapore", "Singapore", 103.8198, 1.3521, "Asia/Singapore"),
    City("hong-kong", "Hong Kong", "China", 114.1694, 22.3193, "Asia/Hong_Kong"),
    City("mumbai", "Mumbai", "India", 72.8777, 19.0760, "Asia/Kolkata"),
    City("sao-paulo", "São Paulo", "Brazil", -46.6333, -23.5505, "America/Sao_Paulo"),
    City("mexico-city", "Mexico City", "Mexico", -99.1332, 19.4326, "America/Mexico_City"),
    City("los-angeles", "Los Angeles", "United States", -118.2437, 34.0522, "America/Los_Angeles"),
    City("chicago", "Chicago", "United States", -87.6298, 41.8781, "America/Chicago"),
    City("toronto", "Toronto", "Canada", -79.3832, 43.6532, "America/Toronto"),
    City("berlin", "Berlin", "Germany", 13.4050, 52.5200, "Europe/Berlin"),
    City("madrid", "Madrid", "Spain", -3.7038, 40.4168, "Europe/Madrid"),
    City("rome", "Rome", "Italy", 12.4964, 41.9028, "Europe/Rome"),
    City("amsterdam", "Amsterdam", "Netherlands", 4.9041, 52.3676, "Europe/Amsterdam"),
    City("stockholm", "Stockholm", "Sweden", 18.0686, 59.3293, "Europe/Stockholm"),
)


def find_city(city_id: str) -> City | None:
    """Look up a curated city by its slug."""
    for city in DEFAULT_CITIES + POPULAR_CITIES:
        if city.id == city_id:
            return city
    return None


def resolve_timezone(latitude: float, longitude: float) -> str:
    """IANA timezone name for a coordinate.

    Raises:
        TimezoneLookupError: When the coordinate falls outside every known zone.
    """
    tz_str = _tf.timezone_at(lat=latitude, lng=longitude)
    if tz_str is None:
        raise TimezoneLookupError(f"Timezone not found: lat={latitude}, lng={longitude}")
    return tz_str


def make_city(
    city_id: str, name: str, country: str, longitude: float, latitude: float
) -> City:
    """Build a City whose timezone is looked up from its coordinates."""
    return City(
        id=city_id,
        name=name,
        country=country,
        longitude=longitude,
        latitude=latitude,
        timezone=resolve_timezone(latitude, longitude),
    )


def get_city_local_time(timezone_name: str, when: datetime) -> str:
    """Wall-clock "HH:MM" in an IANA timezone, daylight saving included.

    An unknown zone name falls back to the UTC clock.
    """
    try:
        tz = timezone(timezone_name)
    except UnknownTimeZoneError:
        logger.warning("Unknown timezone %r, showing UTC", timezone_name)
        return format_time(as_utc(when))
    return format_time(as_utc(when).astimezone(tz))


def _city_from_record(record: object) -> City | None:
    if not isinstance(record, dict):
        return None
    try:
        city = City(
            id=str(record["id"]),
            name=str(record["name"]),
            country=str(record.get("country", "")),
            longitude=float(record["longitude"]),
            latitude=float(record["latitude"]),
            timezone=str(record["timezone"]),
        )
    except (KeyError, TypeError, ValueError):
        return None
    if not city.id or not city.name:
        return None
    return city


def load_user_cities(path: Path) -> tuple[City, ...]:
    """Read the saved city list. Missing or malformed files give DEFAULT_CITIES."""
    if not path.exists():
        return DEFAULT_CITIES
    try:
        with path.open(encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load cities from %s: %s", path, exc)
        return DEFAULT_CITIES
    if not isinstance(records, list):
        logger.warning("Ignoring %s: expected a list of cities", path)
        return DEFAULT_CITIES

    cities = [_city_from_record(r) for r in records]
    if any(c is None for c in cities):
        logger.warning("Ignoring %s: malformed city entry", path)
        return DEFAULT_CITIES
    return tuple(cities)


def save_user_cities(cities: Iterable[City], path: Path) -> Path:
    """Write the city list as JSON, creating the parent directory if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump([asdict(c) for c in cities], f, indent=2, ensure_ascii=False)
    return path


def add_city(cities: tuple[City, ...], city: City) -> tuple[City, ...]:
    """Append ``city`` unless it is already listed or the list is full."""
    if any(c.id == city.id for c in cities):
        logger.info("City already listed: %s", city.id)
        return cities
    if len(cities) >= MAX_USER_CITIES:
        raise ValueError(f"Maximum {MAX_USER_CITIES} cities allowed")
    return cities + (city,)


def remove_city(cities: tuple[City, ...], city_id: str) -> tuple[City, ...]:
    return tuple(c for c in cities if c.id != city_id)


def city_times(
    cities: Iterable[City] = DEFAULT_CITIES,
    when: datetime | None = None,
    oracle: SolarOracle | None = None,
) -> tuple[CityTime, ...]:
    """Local time and day/night status for each city, in input order."""
    if when is None:
        when = datetime.now(utc)
    if oracle is None:
        oracle = default_oracle()
    return tuple(
        CityTime(
            city=city,
            display_time=get_city_local_time(city.timezone, when),
            is_daylight=oracle.position(when, city.latitude, city.longitude).altitude > 0,
        )
        for city in cities
    )
