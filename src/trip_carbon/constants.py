from enum import Enum
from typing import Dict, NamedTuple, Tuple

from .errors import InvalidInputError

# ============================================================================
# TRANSPORT MODES
# ============================================================================

class TransportMode(str, Enum):
    """
    Closed set of transport modes known to the calculator.
    Declaration order is also the tie-break order when ranking modes.
    """
    BICYCLE = "bicycle"
    CAR = "car"
    BUS = "bus"
    TRUCK = "truck"

    @classmethod
    def parse(cls, value) -> "TransportMode":
        """
        Validate an external mode key ('car', 'Bus', TransportMode.CAR, ...).
        Raises InvalidInputError for anything outside the enumeration.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for mode in cls:
                if mode.value == key:
                    return mode
        valid = ", ".join(m.value for m in cls)
        raise InvalidInputError(f"Unknown transport mode {value!r} (expected one of: {valid})")

    def __str__(self) -> str:
        return self.value


# ============================================================================
# DEFAULTS (overridable through the parameter sheet)
# ============================================================================

# kg CO2 per km
DEFAULT_EMISSION_FACTORS: Dict[TransportMode, float] = {
    TransportMode.BICYCLE: 0.0,
    TransportMode.CAR: 0.12,
    TransportMode.BUS: 0.089,
    TransportMode.TRUCK: 0.96,
}

# Carbon credits
KG_PER_CREDIT = 1000.0      # 1 credit = 1000 kg CO2
PRICE_MIN = 50.0
PRICE_MAX = 150.0
CURRENCY = "BRL"

BASELINE_MODE = TransportMode.CAR
DECIMALS = 2
MAX_DECIMALS = 10

# Geometry
EARTH_RADIUS_KM = 6371.0

# Impact equivalences shown next to the credit estimate
KG_CO2_PER_TREE_YEAR = 12.0
MWH_PER_KG_CO2 = 0.25 / 1000.0
KG_CO2_PER_CAR_KM = 0.2

# ============================================================================
# DISPLAY METADATA (presentation only)
# ============================================================================

class ModeInfo(NamedTuple):
    label: str
    icon: str
    color: str


TRANSPORT_MODE_INFO: Dict[TransportMode, ModeInfo] = {
    TransportMode.BICYCLE: ModeInfo("Bicicleta", "🚴", "#27ae60"),
    TransportMode.CAR: ModeInfo("Carro", "🚗", "#3498db"),
    TransportMode.BUS: ModeInfo("Ônibus", "🚌", "#9b59b6"),
    TransportMode.TRUCK: ModeInfo("Caminhão", "🛻", "#7f8c8d"),
}

# ============================================================================
# BUILT-IN CITY TABLE
# ============================================================================

# name -> (lat, lon) in degrees
DEFAULT_CITIES: Dict[str, Tuple[float, float]] = {
    "São Paulo": (-23.5505, -46.6333),
    "Rio de Janeiro": (-22.9068, -43.1729),
    "Belo Horizonte": (-19.9167, -43.9345),
    "Salvador": (-12.9714, -38.5014),
    "Brasília": (-15.8267, -47.8711),
    "Curitiba": (-25.4284, -49.2733),
    "Manaus": (-3.1190, -60.0217),
    "Belém": (-1.4554, -48.5039),
    "Recife": (-8.0476, -34.8770),
    "Fortaleza": (-3.7319, -38.5267),
    "Porto Alegre": (-30.0346, -51.2177),
    "Goiânia": (-15.7942, -48.0766),
    "Campinas": (-22.9068, -47.0616),
    "Santos": (-23.9608, -46.3338),
    "Sorocaba": (-23.5015, -47.4584),
}
