import logging
import os
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .constants import DEFAULT_CITIES, DECIMALS
from .errors import ConfigurationError
from .models import City
from .utils.calculations import haversine_km, round_half_up

logger = logging.getLogger(__name__)

CITY_COLUMN = "City"
LAT_COLUMN = "Latitude"
LON_COLUMN = "Longitude"


class CityRegistry:
    """
    Fixed city -> coordinates mapping, loaded once and read-only afterwards.
    Lookups are exact string matches (case and accents as given).
    """

    def __init__(self, cities: Iterable[City], decimals: int = DECIMALS):
        table: Dict[str, City] = {}
        for city in cities:
            if city.name in table:
                raise ConfigurationError(f"Duplicate city in registry: {city.name!r}")
            table[city.name] = city
        self._cities = MappingProxyType(table)
        self._decimals = decimals

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Tuple[float, float]], decimals: int = DECIMALS) -> "CityRegistry":
        return cls((City(name, lat, lon) for name, (lat, lon) in mapping.items()), decimals=decimals)

    @classmethod
    def default(cls, decimals: int = DECIMALS) -> "CityRegistry":
        """Registry with the built-in Brazilian capitals and SP-state cities."""
        return cls.from_mapping(DEFAULT_CITIES, decimals=decimals)

    def __contains__(self, name) -> bool:
        return name in self._cities

    def __len__(self) -> int:
        return len(self._cities)

    def get(self, name: str) -> Optional[City]:
        return self._cities.get(name)

    def list_cities(self) -> List[str]:
        """City names in alphabetical order, for autocomplete."""
        return sorted(self._cities)

    def distance_between(self, origin: str, destination: str) -> Optional[float]:
        """
        Great-circle distance (km, rounded) between two registered cities.
        Returns None when either name is unknown so the caller can ask for
        a manual distance instead.
        """
        a = self._cities.get(origin)
        b = self._cities.get(destination)
        if a is None or b is None:
            logger.debug(f"No route for {origin!r} -> {destination!r}")
            return None
        return round_half_up(haversine_km(a, b), self._decimals)


def load_city_table(path: str, decimals: int = DECIMALS) -> CityRegistry:
    """
    Load a registry from a CSV or Excel table.
    Expected columns: City, Latitude, Longitude
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"City table not found at {path}")

    try:
        if path.lower().endswith((".xlsx", ".xls")):
            df = pd.read_excel(path)
        else:
            df = pd.read_csv(path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read city table {path}: {e}")

    missing = [c for c in (CITY_COLUMN, LAT_COLUMN, LON_COLUMN) if c not in df.columns]
    if missing:
        raise ConfigurationError(f"City table {path} missing columns: {', '.join(missing)}")

    df = df.dropna(subset=[CITY_COLUMN])
    cities = []
    for _, row in df.iterrows():
        name = str(row[CITY_COLUMN]).strip()
        try:
            lat = float(row[LAT_COLUMN])
            lon = float(row[LON_COLUMN])
        except (TypeError, ValueError):
            raise ConfigurationError(f"Non-numeric coordinates for {name!r} in {path}")
        cities.append(City(name, lat, lon))

    registry = CityRegistry(cities, decimals=decimals)
    logger.info(f"Loaded {len(registry)} cities from {path}")
    return registry
