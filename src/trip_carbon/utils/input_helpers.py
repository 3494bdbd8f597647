import logging
from difflib import get_close_matches
from typing import List, Optional, Sequence, Tuple

import pandas as pd
from colorama import Fore, Style, Back

from ..constants import BASELINE_MODE, TransportMode, TRANSPORT_MODE_INFO
from ..errors import InvalidInputError
from ..models import ModeComparisonEntry, TripReport

logger = logging.getLogger(__name__)

# Style Constants (blanked by use_color(False))
C_HEADER = Fore.CYAN + Style.BRIGHT
C_PROMPT = Fore.YELLOW
C_CHOICE = Fore.MAGENTA
C_SUCCESS = Fore.GREEN
C_BRIGHT = Style.BRIGHT
C_BANNER = Back.BLACK
C_RESET = Style.RESET_ALL

CURRENCY_SYMBOLS = {"BRL": "R$"}

COMPARISON_COLUMNS = ["Mode", "Label", "Emission (kgCO2)", "vs Baseline (%)", "Selected"]


def use_color(enabled: bool):
    """Switch the console palette on or off (off for pipes, files and NO_COLOR)."""
    global C_HEADER, C_PROMPT, C_CHOICE, C_SUCCESS, C_BRIGHT, C_BANNER, C_RESET
    if enabled:
        C_HEADER = Fore.CYAN + Style.BRIGHT
        C_PROMPT = Fore.YELLOW
        C_CHOICE = Fore.MAGENTA
        C_SUCCESS = Fore.GREEN
        C_BRIGHT = Style.BRIGHT
        C_BANNER = Back.BLACK
        C_RESET = Style.RESET_ALL
    else:
        C_HEADER = C_PROMPT = C_CHOICE = C_SUCCESS = C_BRIGHT = C_BANNER = C_RESET = ""


def style_prompt(prompt_text: str) -> str:
    """Helper to wrap input prompt in color."""
    return f"{C_PROMPT}{prompt_text}{C_RESET}"


def print_header(text: str):
    """Print a styled header."""
    print(f"\n{C_HEADER}{'='*60}")
    print(f"{text.center(60)}")
    print(f"{'='*60}{C_RESET}")


# ============================================================================
# NUMBER FORMATTING (pt-BR)
# ============================================================================

def format_number(value: float, decimals: int = 2) -> str:
    """
    Format with '.' as thousands separator and ',' as decimal separator.
    1234.5 -> '1.234,50'
    """
    text = f"{value:,.{decimals}f}"
    return text.translate(str.maketrans({",": ".", ".": ","}))


def format_currency(value: float, currency: str = "BRL") -> str:
    """1234.56 -> 'R$ 1.234,56'"""
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol} {format_number(value, 2)}"


def mode_label(mode: TransportMode, with_icon: bool = True) -> str:
    info = TRANSPORT_MODE_INFO[mode]
    return f"{info.icon} {info.label}" if with_icon else info.label


# ============================================================================
# PROMPTS
# ============================================================================

def prompt_choice(label: str, options: List[str], default: str) -> str:
    """
    Prompt user to pick one value from a list of options; returns the chosen option.
    Supports selecting by index (1-based) or typing the name.
    """
    display_parts = []
    for idx, opt in enumerate(options, 1):
        display_parts.append(f"[{C_SUCCESS}{idx}{C_PROMPT}] {C_CHOICE}{opt}{C_PROMPT}")
    opts_str = " / ".join(display_parts)

    while True:
        print(f"\n{C_PROMPT}{label} options:{C_RESET} {opts_str}")
        s = input(style_prompt(f"Select option (name or number) [default={default}]: ")).strip().lower()

        if not s:
            return default

        if s.isdigit():
            idx = int(s)
            if 1 <= idx <= len(options):
                return options[idx - 1]

        for opt in options:
            if s == opt.lower():
                return opt

        logger.warning(f"Invalid choice '{s}'. Please enter a number 1-{len(options)} or the option name.")


def prompt_city(label: str, known_cities: Sequence[str]) -> str:
    """
    Ask for a city name. Unknown names are accepted (the distance is then
    asked for manually) but close matches from the registry are suggested.
    """
    while True:
        s = input(style_prompt(f"{label} city: ")).strip()
        if not s:
            logger.warning(f"{label} city must not be empty.")
            continue
        if s in known_cities:
            return s
        suggestions = get_close_matches(s, known_cities, n=3)
        if suggestions:
            logger.warning(f"'{s}' is not a known city. Did you mean: {', '.join(suggestions)}?")
            keep = input(style_prompt(f"Keep '{s}' anyway? [y/n] (default=n): ")).strip().lower()
            if keep not in ("y", "yes"):
                continue
        else:
            logger.info(f"'{s}' is not in the city list; you will be asked for the distance.")
        return s


def parse_distance(text: str) -> float:
    """
    Parse a user-typed distance (accepts '357,6' as well as '357.6').
    Raises InvalidInputError unless the result is a number > 0.
    """
    cleaned = text.strip().replace(" ", "")
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        value = float(cleaned)
    except ValueError:
        raise InvalidInputError(f"'{text}' is not a number")
    if not value > 0 or value == float("inf"):
        raise InvalidInputError("Distance must be greater than 0")
    return value


def prompt_distance(label: str = "Distance (km)") -> float:
    """Prompt until a strictly positive distance is entered."""
    while True:
        s = input(style_prompt(f"{label}: "))
        try:
            return parse_distance(s)
        except InvalidInputError as e:
            logger.warning(f"{e}. Try again.")


def prompt_trip(
    cities: Sequence[str],
    find_distance,
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    distance_km: Optional[float] = None,
    mode: Optional[str] = None,
) -> Tuple[str, str, float, TransportMode, bool]:
    """
    Collect whatever trip inputs are still missing.
    Returns (origin, destination, distance_km, mode, distance_from_registry).
    """
    print_header("Trip details")
    if origin is None:
        origin = prompt_city("Origin", cities)
    if destination is None:
        destination = prompt_city("Destination", cities)

    from_registry = False
    if distance_km is None:
        distance_km = find_distance(origin, destination)
        if distance_km is not None:
            from_registry = True
            print(f"{C_SUCCESS}✓ Route found automatically: {format_number(distance_km)} km{C_RESET}")
        else:
            print(f"{C_PROMPT}ℹ Route not found. Enter the distance manually.{C_RESET}")
            distance_km = prompt_distance()

    if mode is None:
        mode = prompt_choice("Transport mode", [m.value for m in TransportMode], default=TransportMode.CAR.value)

    return origin, destination, distance_km, TransportMode.parse(mode), from_registry


# ============================================================================
# REPORTING
# ============================================================================

def comparison_dataframe(entries: List[ModeComparisonEntry], selected: Optional[TransportMode] = None) -> pd.DataFrame:
    """
    Tabular view of the mode ranking, lowest emission first.
    Undefined percentages (zero baseline) are left empty (NaN).
    """
    rows = []
    for e in entries:
        rows.append({
            "Mode": e.mode.value,
            "Label": mode_label(e.mode, with_icon=False),
            "Emission (kgCO2)": e.emission,
            "vs Baseline (%)": e.percentage_vs_car if e.percentage_defined else float("nan"),
            "Selected": e.mode == selected,
        })
    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)


def print_comparison(
    entries: List[ModeComparisonEntry],
    selected: Optional[TransportMode] = None,
    baseline: TransportMode = BASELINE_MODE,
):
    df = comparison_dataframe(entries, selected)
    vs_header = f"vs {mode_label(baseline, with_icon=False)}"
    print(f"\n{C_HEADER}Comparison of transport modes:{C_RESET}")
    print(f"  {'Mode':<14} | {'Emission (kg)':>14} | {vs_header:>11}")
    print(f"  {'-'*46}")
    for _, row in df.iterrows():
        share = row["vs Baseline (%)"]
        pct = "n/a" if pd.isna(share) else f"{format_number(share, 1)}%"
        marker = f"  {C_SUCCESS}✨ selected{C_RESET}" if row["Selected"] else ""
        print(f"  {row['Label']:<14} | {format_number(row['Emission (kgCO2)']):>14} | {pct:>11}{marker}")


def print_trip_overview(report: TripReport, currency: str = "BRL"):
    """
    Common console reporting for a trip analysis.
    """
    print(f"\n{C_BANNER}{C_HEADER}{'='*60}")
    print(f"   RESULT: {report.origin.upper()} -> {report.destination.upper()}")
    print(f"{'='*60}{C_RESET}")

    source = "city registry" if report.distance_from_registry else "manual entry"
    print(f"\n{C_HEADER}Trip:{C_RESET}")
    print(f"  Distance:        {format_number(report.distance_km)} km ({source})")
    print(f"  Transport mode:  {mode_label(report.mode)}")
    print(f"  {C_BRIGHT}Emission:        {C_SUCCESS}{format_number(report.emission_kg)}{C_RESET} {C_BRIGHT}kg CO2{C_RESET}")

    if report.savings is not None:
        s = report.savings
        base = mode_label(report.baseline_mode, with_icon=False)
        if s.saved_kg >= 0:
            line = f"  {f'Saved vs {base}:':<16} {format_number(s.saved_kg)} kg CO2"
        else:
            line = f"  {f'Extra vs {base}:':<16} {format_number(-s.saved_kg)} kg CO2"
        if s.percentage_defined:
            line += f" ({format_number(abs(s.percentage))}%)"
        print(line)

    print_comparison(report.comparison, report.mode, report.baseline_mode)

    c = report.credits
    eq = report.equivalences
    print(f"\n{C_HEADER}Carbon credits:{C_RESET}")
    print(f"  Credits needed:  {format_number(c.credits)}")
    print(f"  Estimated price: {format_currency(c.price_average, currency)}"
          f" ({format_currency(c.price_min, currency)} - {format_currency(c.price_max, currency)})")
    print(f"\n{C_HEADER}Understand the impact:{C_RESET}")
    print(f"  {format_number(eq.trees_per_year, 1)} trees planted per year")
    print(f"  {format_number(eq.electricity_mwh, 2)} MWh of electricity")
    print(f"  {format_number(eq.car_km, 0)} km driven by car")
    print(f"{'='*60}\n")
