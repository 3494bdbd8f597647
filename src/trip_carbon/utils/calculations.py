from math import sin, cos, sqrt, atan2, floor, isfinite, pi
from numbers import Real

from ..constants import DECIMALS, EARTH_RADIUS_KM
from ..errors import InvalidInputError


def round_half_up(x: float, decimals: int = DECIMALS) -> float:
    """
    Round to a fixed number of decimals, halves going up (towards +inf).
    Not the same as built-in round(), which sends halves to the even digit.
    Values too large to carry any fractional digit are returned unchanged.
    """
    factor = 10 ** decimals
    scaled = x * factor
    if not isfinite(scaled) or abs(x) >= 2 ** 52 / factor:
        return x
    return floor(scaled + 0.5) / factor


def require_number(value, name: str) -> float:
    """
    Coerce a caller-supplied quantity to a finite float.
    Booleans, strings, None, NaN and infinities are rejected.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return value


def require_non_negative(value, name: str) -> float:
    value = require_number(value, name)
    if value < 0:
        raise InvalidInputError(f"{name} must be >= 0, got {value}")
    return value


def haversine_km(a, b, radius_km: float = EARTH_RADIUS_KM) -> float:
    """
    Great-circle distance in km between two points exposing .lat/.lon in degrees.
    Unrounded; callers round for presentation.
    """
    d_lat = (b.lat - a.lat) * pi / 180
    d_lon = (b.lon - a.lon) * pi / 180
    h = (
        sin(d_lat / 2) * sin(d_lat / 2)
        + cos(a.lat * pi / 180) * cos(b.lat * pi / 180)
        * sin(d_lon / 2) * sin(d_lon / 2)
    )
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return radius_km * c
