import os
import logging
from numbers import Integral
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from .constants import (
    TransportMode, DEFAULT_EMISSION_FACTORS, KG_PER_CREDIT, PRICE_MIN, PRICE_MAX,
    CURRENCY, BASELINE_MODE, DECIMALS
)
from .errors import ConfigurationError
from .models import CalculatorConfig, CarbonCreditPolicy, EmissionFactorTable

logger = logging.getLogger(__name__)

# Parameter sheet lives under <project root>/data/parameters_config/
# This file is <project root>/src/trip_carbon/config.py, three levels down.
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "data", "parameters_config", "project_parameters.xlsx")

CONFIG_PATH_ENV = "TRIP_CARBON_CONFIG"
CITIES_PATH_ENV = "TRIP_CARBON_CITIES"

FACTOR_KEY_PREFIX = "EMISSION_FACTOR_"

# Every key understood by build_config, with its default and documentation.
PARAMETERS: List[Dict[str, Any]] = [
    # --- SECTION: EMISSION FACTORS ---
    *[
        {
            "Key": f"{FACTOR_KEY_PREFIX}{mode.value.upper()}",
            "Value": factor,
            "Unit": "kgCO2/km",
            "Section": "1. Emission Factors",
            "Description": f"CO2 emitted per km travelled by {mode.value}.",
        }
        for mode, factor in DEFAULT_EMISSION_FACTORS.items()
    ],
    {
        "Key": "BASELINE_MODE",
        "Value": BASELINE_MODE.value,
        "Unit": "Text",
        "Section": "1. Emission Factors",
        "Description": "Reference mode for percentages and savings.",
    },

    # --- SECTION: CARBON CREDITS ---
    {
        "Key": "KG_PER_CREDIT",
        "Value": KG_PER_CREDIT,
        "Unit": "kgCO2",
        "Section": "2. Carbon Credits",
        "Description": "Mass of CO2 offset by one carbon credit.",
    },
    {
        "Key": "PRICE_MIN",
        "Value": PRICE_MIN,
        "Unit": "Currency/credit",
        "Section": "2. Carbon Credits",
        "Description": "Lowest market price of one credit.",
    },
    {
        "Key": "PRICE_MAX",
        "Value": PRICE_MAX,
        "Unit": "Currency/credit",
        "Section": "2. Carbon Credits",
        "Description": "Highest market price of one credit.",
    },
    {
        "Key": "CURRENCY",
        "Value": CURRENCY,
        "Unit": "Text",
        "Section": "2. Carbon Credits",
        "Description": "Currency label shown next to prices (display only).",
    },

    # --- SECTION: GLOBAL ---
    {
        "Key": "DECIMALS",
        "Value": DECIMALS,
        "Unit": "Integer",
        "Section": "3. Global Settings",
        "Description": "Decimal places kept in every computed result (0 to 10).",
    },
]

KNOWN_KEYS = {p["Key"] for p in PARAMETERS}


def load_excel_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from Excel file.
    Expected columns: Key, Value (Section, Unit, Description are ignored)
    Returns a dictionary of Key -> Value
    """
    config: Dict[str, Any] = {}
    if not os.path.exists(path):
        logger.warning(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        df = pd.read_excel(path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to load config from {path}: {e}")

    if "Key" not in df.columns or "Value" not in df.columns:
        raise ConfigurationError(f"Excel file {path} missing 'Key' or 'Value' columns.")

    for _, row in df.iterrows():
        if pd.isna(row["Key"]):
            continue
        key = str(row["Key"]).strip()
        if key in config:
            raise ConfigurationError(f"Duplicate parameter {key!r} in {path}")
        config[key] = row["Value"]
    logger.info(f"Loaded {len(config)} parameters from {path}")
    return config


def _as_int(value, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ConfigurationError(f"{key} must be an integer, got {value!r}")


def build_config(overrides: Optional[Mapping[str, Any]] = None) -> CalculatorConfig:
    """
    Merge parameter overrides onto the documented defaults and validate.
    Raises ConfigurationError for unknown keys or malformed values.
    """
    overrides = dict(overrides or {})
    unknown = sorted(k for k in overrides if k not in KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = {p["Key"]: p["Value"] for p in PARAMETERS}
    values.update(overrides)

    factors = {
        mode: values[f"{FACTOR_KEY_PREFIX}{mode.value.upper()}"]
        for mode in TransportMode
    }
    policy = CarbonCreditPolicy(
        kg_per_credit=values["KG_PER_CREDIT"],
        price_min=values["PRICE_MIN"],
        price_max=values["PRICE_MAX"],
        currency=str(values["CURRENCY"]).strip(),
    )
    config = CalculatorConfig(
        emission_factors=EmissionFactorTable(factors),
        credit_policy=policy,
        baseline_mode=str(values["BASELINE_MODE"]),
        decimals=_as_int(values["DECIMALS"], "DECIMALS"),
    )

    for key in sorted(overrides):
        logger.debug(f"Parameter override: {key} = {overrides[key]}")
    return config


def load_calculator_config(path: Optional[str] = None) -> CalculatorConfig:
    """
    Build the calculator configuration from the parameter sheet.
    Path resolution: explicit argument, then $TRIP_CARBON_CONFIG, then the
    project default. A missing sheet means defaults.
    """
    if path is None:
        path = os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
    return build_config(load_excel_config(path))


def export_parameter_template(path: str = DEFAULT_CONFIG_PATH) -> str:
    """
    Write the default parameters as a formatted workbook that users can edit.
    Returns the path written.
    """
    df = pd.DataFrame(PARAMETERS)
    df = df[["Section", "Key", "Value", "Unit", "Description"]]

    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)

    with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name="Parameters")

        workbook = writer.book
        worksheet = writer.sheets["Parameters"]

        header_fmt = workbook.add_format({
            "bold": True,
            "text_wrap": True,
            "valign": "top",
            "fg_color": "#4F81BD",
            "font_color": "#FFFFFF",
            "border": 1,
        })
        section_fmt = workbook.add_format({"bold": True, "bg_color": "#DCE6F1", "border": 1})
        key_fmt = workbook.add_format({"bold": True, "font_color": "#333333", "bg_color": "#F2F2F2", "border": 1})
        value_fmt = workbook.add_format({"bg_color": "#FFFFCC", "border": 1})  # editable
        text_fmt = workbook.add_format({"text_wrap": True, "valign": "top", "border": 1})

        worksheet.set_column("A:A", 22)
        worksheet.set_column("B:B", 28)
        worksheet.set_column("C:C", 12, value_fmt)
        worksheet.set_column("D:D", 16)
        worksheet.set_column("E:E", 55, text_fmt)

        for col_num, value in enumerate(df.columns.values):
            worksheet.write(0, col_num, value, header_fmt)

        for row_num, row in enumerate(PARAMETERS, start=1):
            worksheet.write(row_num, 0, row["Section"], section_fmt)
            worksheet.write(row_num, 1, row["Key"], key_fmt)

    logger.info(f"Parameter template written to {path}")
    return path
