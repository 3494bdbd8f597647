class TripCarbonError(Exception):
    """Base class for all calculator errors."""


class ConfigurationError(TripCarbonError):
    """
    Static configuration is unusable (missing emission factor, malformed credit
    policy, bad city table). Raised while loading, never at call time.
    """


class InvalidInputError(TripCarbonError, ValueError):
    """
    Caller supplied an input outside the documented preconditions
    (negative or non-numeric distance, unknown mode key, empty city name).
    """
