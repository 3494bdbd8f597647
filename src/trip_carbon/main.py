import argparse
import logging
import os
import sys
from typing import List, Optional

from .calculator import TripCalculator
from .config import CITIES_PATH_ENV, DEFAULT_CONFIG_PATH, export_parameter_template, load_calculator_config
from .constants import TransportMode
from .errors import TripCarbonError
from .logging_conf import setup_logging
from .registry import CityRegistry, load_city_table
from .utils.input_helpers import (
    parse_distance, print_header, print_trip_overview, prompt_trip, use_color
)
from .visualization import Visualizer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trip-carbon",
        description="Estimate the CO2 of a trip, compare transport modes and price carbon credits.",
    )
    parser.add_argument("--origin", help="Origin city (prompted if omitted)")
    parser.add_argument("--destination", help="Destination city (prompted if omitted)")
    parser.add_argument("--distance", type=parse_distance,
                        help="Distance in km; overrides the city registry")
    parser.add_argument("--mode", choices=[m.value for m in TransportMode],
                        help="Transport mode (prompted if omitted)")
    parser.add_argument("--config", help="Parameter workbook (.xlsx)")
    parser.add_argument("--cities", help="City table (.csv or .xlsx with City, Latitude, Longitude)")
    parser.add_argument("--plot", action="store_true", help="Save a comparison chart")
    parser.add_argument("--reports-dir", help="Folder for charts (default: <project>/reports)")
    parser.add_argument("--log-file", help="Write a detailed log to this file")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug messages")
    parser.add_argument("--list-cities", action="store_true", help="Print the known cities and exit")
    parser.add_argument("--export-config", nargs="?", const=DEFAULT_CONFIG_PATH, metavar="PATH",
                        help="Write the default parameter workbook and exit")
    return parser


def build_calculator(config_path: Optional[str] = None, cities_path: Optional[str] = None) -> TripCalculator:
    """Load configuration and city registry once, at start-up."""
    config = load_calculator_config(config_path)
    cities_path = cities_path or os.environ.get(CITIES_PATH_ENV)
    if cities_path:
        registry = load_city_table(cities_path, decimals=config.decimals)
    else:
        registry = CityRegistry.default(config.decimals)
    return TripCalculator(config, registry)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. LOGGING SETUP
    setup_logging(
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        file_path=args.log_file,
        no_color=args.no_color,
    )
    is_tty = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
    use_color(is_tty and not args.no_color and not os.environ.get("NO_COLOR"))

    try:
        if args.export_config:
            export_parameter_template(args.export_config)
            return 0

        calculator = build_calculator(args.config, args.cities)

        if args.list_cities:
            for name in calculator.list_cities():
                print(name)
            return 0

        # 2. INPUTS
        print_header("Trip carbon calculator")
        origin, destination, distance_km, mode, from_registry = prompt_trip(
            calculator.list_cities(),
            calculator.find_distance,
            origin=args.origin,
            destination=args.destination,
            distance_km=args.distance,
            mode=args.mode,
        )

        # 3. CALCULATION
        report = calculator.analyze_trip(
            origin, destination, mode,
            distance_km=None if from_registry else distance_km,
        )

        # 4. REPORTING
        print_trip_overview(report, calculator.config.credit_policy.currency)

        if args.plot:
            vis = Visualizer(args.reports_dir)
            vis.plot_mode_comparison(report.comparison, report.mode, report.baseline_mode,
                                     title=f"{report.origin} -> {report.destination}")
    except TripCarbonError as e:
        logger.error(f"Error: {e}")
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
