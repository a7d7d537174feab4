"""
grayline CLI - terminator, timezone ruler and debug output as JSON.

Usage:
    grayline terminator [--time ISO] [--resolution N] [--west LNG] [--east LNG]
    grayline ruler --west LNG --east LNG [--time ISO]
    grayline cities [--add ID] [--add-place NAME LAT LNG] [--remove ID] [--reset]
    grayline debug [--time ISO]
"""

import argparse
import json
import logging
import sys
from datetime import datetime

from dotenv import load_dotenv
from pytz import utc

from grayline.cities import (
    DEFAULT_CITIES,
    USER_CITIES_FILE,
    TimezoneLookupError,
    add_city,
    city_times,
    find_city,
    load_user_cities,
    make_city,
    remove_city,
    save_user_cities,
)
from grayline.config import Settings, load_settings
from grayline.diagnostics import debug_terminator
from grayline.layers import build_timezone_ruler
from grayline.models import City
from grayline.solar import EphemerisError, default_oracle
from grayline.terminator import generate_terminator, validate_terminator


def _parse_time(value: str | None) -> datetime:
    if value is None:
        return datetime.now(utc)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO time: {value}")


def _slug(name: str) -> str:
    return "-".join(name.lower().split())


def _update_cities(args: argparse.Namespace, settings: Settings) -> tuple[City, ...]:
    """Apply --reset/--add/--add-place/--remove to the saved list and return it."""
    path = settings.data_dir / USER_CITIES_FILE
    cities = DEFAULT_CITIES if args.reset else load_user_cities(path)
    changed = args.reset

    if args.add:
        city = find_city(args.add)
        if city is None:
            raise ValueError(f"Unknown city id: {args.add}")
        cities = add_city(cities, city)
        changed = True
    if args.add_place:
        name, lat, lng = args.add_place
        city = make_city(_slug(name), name, args.country, float(lng), float(lat))
        cities = add_city(cities, city)
        changed = True
    if args.remove:
        cities = remove_city(cities, args.remove)
        changed = True

    if changed:
        save_user_cities(cities, path)
    return cities


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grayline",
        description="Day/night terminator and timezone ruler data for map layers",
    )
    parser.add_argument("--time", default=None, help="UTC instant, ISO-8601 (default: now)")
    sub = parser.add_subparsers(dest="command", required=True)

    term = sub.add_parser("terminator", help="Day/night boundary points")
    term.add_argument("--resolution", type=int, default=None)
    term.add_argument("--west", type=float, default=-180.0)
    term.add_argument("--east", type=float, default=180.0)

    ruler = sub.add_parser("ruler", help="Local solar time every 15 degrees")
    ruler.add_argument("--west", type=float, required=True)
    ruler.add_argument("--east", type=float, required=True)

    cities = sub.add_parser("cities", help="Local time and daylight at saved cities")
    cities.add_argument("--add", metavar="ID", help="Add a curated city by id")
    cities.add_argument(
        "--add-place",
        nargs=3,
        metavar=("NAME", "LAT", "LNG"),
        help="Add any place; its timezone is looked up",
    )
    cities.add_argument("--country", default="", help="Country for --add-place")
    cities.add_argument("--remove", metavar="ID", help="Remove a city by id")
    cities.add_argument("--reset", action="store_true", help="Restore the default cities")
    sub.add_parser("debug", help="Landmark readings and terminator sanity check")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"❌ Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        when = _parse_time(args.time)
    except argparse.ArgumentTypeError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "terminator":
            curve = generate_terminator(
                when,
                resolution=(
                    settings.style.resolution if args.resolution is None else args.resolution
                ),
                oracle=default_oracle(settings),
                west=args.west,
                east=args.east,
                tolerance=settings.tolerance,
                max_iterations=settings.max_iterations,
                bracket_check=settings.bracket_check,
            )
            output = {
                "time": when.isoformat(),
                "valid": validate_terminator(curve),
                "points": [list(p.as_pair()) for p in curve],
            }
        elif args.command == "ruler":
            output = build_timezone_ruler(args.west, args.east, when)
        elif args.command == "cities":
            output = [
                {
                    "id": ct.city.id,
                    "name": ct.city.name,
                    "time": ct.display_time,
                    "daylight": ct.is_daylight,
                }
                for ct in city_times(_update_cities(args, settings), when, default_oracle(settings))
            ]
        else:
            output = debug_terminator(when, default_oracle(settings), settings)
    except (EphemerisError, TimezoneLookupError, OSError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
