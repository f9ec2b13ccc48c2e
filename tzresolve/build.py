#!/usr/bin/env python3
"""
build.py - Compile the tzresolve database from the IANA tz database

Zone behaviour comes from the system zoneinfo database; which IANA source file
(europe, backward, ...) declares each name comes from a tzdata source
directory and decides whether the zone is STANDARD or LEGACY. One compact file
per zone is written under the compiled database root. Rebuild when the tz
database updates.

Usage:
    tzresolve-build --source ~/src/tzdata-2025a

    # Only some zones, into a custom directory
    tzresolve-build --source ~/src/tzdata-2025a -o compiled Europe/Warsaw US/Pacific

Requirements:
    - Python 3.9+ (for zoneinfo module)
    - System tzdata package, or the tzdata wheel

MIT License - Copyright (c) 2025 Matthew S. Smith
"""

import argparse
import logging
import shutil
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import tzfile
from .classes import classify
from .config import default_compiled_dir
from .zones import FixedTimeZone, Transition, VariableTimeZone

logger = logging.getLogger(__name__)

# IANA source files compiled into the database
REGIONS = (
    'africa', 'antarctica', 'asia', 'australasia', 'europe',
    'northamerica', 'southamerica', 'etcetera', 'backward',
)

DEFAULT_START_YEAR = 1900
DEFAULT_END_YEAR = 2038

# Offsets are sampled once per step; changes in between are located by bisection
_SCAN_STEP = timedelta(days=1)

_UTC_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_SECOND = timedelta(seconds=1)


def load_sources(source_dir: Path) -> Dict[str, List[str]]:
    """
    Map each zone and link name to the source files declaring it.

    Understands both the long form ("Zone", "Link") and the compact form
    ("Z", "L") used by tzdata.zi.
    """
    declared: Dict[str, List[str]] = {}
    for region in REGIONS:
        path = source_dir / region
        if not path.is_file():
            logger.debug("Source file %s not found, skipping", path)
            continue

        for line in path.read_text(encoding='utf-8').splitlines():
            fields = line.split('#', 1)[0].split()
            if len(fields) >= 2 and fields[0] in ('Zone', 'Z'):
                name = fields[1]
            elif len(fields) >= 3 and fields[0] in ('Link', 'L'):
                name = fields[2]
            else:
                continue
            sources = declared.setdefault(name, [])
            if region not in sources:
                sources.append(region)
    return declared


def _state(tz: ZoneInfo, utc: datetime) -> tuple:
    local = utc.astimezone(tz)
    offset = int(local.utcoffset().total_seconds())
    dst = int(local.dst().total_seconds()) if local.dst() is not None else 0
    return offset - dst, dst, local.tzname()


def find_transitions(tz: ZoneInfo, start_year: int, end_year: int) -> List[tuple]:
    """
    Find every change of offset or abbreviation between the two years.

    Returns (utc_datetime, utc_offset, dst_offset, abbreviation) tuples; the
    first one describes the state at the start of start_year.
    """
    start = datetime(start_year, 1, 1, tzinfo=timezone.utc)
    end = datetime(end_year, 1, 1, tzinfo=timezone.utc)

    state = _state(tz, start)
    transitions = [(start.replace(tzinfo=None),) + state]
    probe = start

    while probe < end:
        next_probe = min(probe + _SCAN_STEP, end)
        next_state = _state(tz, next_probe)
        if next_state == state:
            probe = next_probe
            continue

        # Narrow down to the first second in the new state
        low = (probe - _UTC_EPOCH) // _SECOND
        high = (next_probe - _UTC_EPOCH) // _SECOND
        while low + 1 < high:
            mid = (low + high) // 2
            if _state(tz, _UTC_EPOCH + mid * _SECOND) == state:
                low = mid
            else:
                high = mid

        probe = _UTC_EPOCH + high * _SECOND
        state = _state(tz, probe)
        transitions.append((probe.replace(tzinfo=None),) + state)

    return transitions


def compile_zone(zone_name: str, start_year: int = DEFAULT_START_YEAR,
                 end_year: int = DEFAULT_END_YEAR):
    """
    Build a zone from the system zoneinfo data.

    Zones that never change within the scanned years become FixedTimeZone.
    """
    try:
        tz = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {zone_name}")

    found = find_transitions(tz, start_year, end_year)
    if len(found) == 1:
        _, utc_offset, dst_offset, _ = found[0]
        return FixedTimeZone(zone_name, utc_offset, dst_offset)

    return VariableTimeZone(zone_name, [
        Transition(utc, FixedTimeZone(abbrev, utc_offset, dst_offset))
        for utc, utc_offset, dst_offset, abbrev in found
    ])


def _prepare_output(output: Path):
    """
    Empty output for a fresh build and mark it as a compiled database.

    Only a missing or empty directory, or one holding an earlier build, is
    replaced. Anything else raises ValueError.
    """
    if output.exists():
        if not output.is_dir():
            raise ValueError(f"Output is not a directory: {output}")
        if (next(output.iterdir(), None) is not None and
                not (output / tzfile.DATABASE_MARKER).is_file()):
            raise ValueError(
                f"Refusing to replace {output}: it is not empty and holds no "
                f"{tzfile.DATABASE_MARKER} marker from an earlier build"
            )
        shutil.rmtree(output)

    output.mkdir(parents=True)
    (output / tzfile.DATABASE_MARKER).touch()


def build(output: Path, declared: Dict[str, List[str]],
          zones: Optional[List[str]] = None,
          start_year: int = DEFAULT_START_YEAR,
          end_year: int = DEFAULT_END_YEAR) -> List[str]:
    """
    Write the compiled database under output, replacing its contents.

    Returns the names that were compiled. Names missing from the source files
    or from the system zoneinfo are reported and skipped. Raises ValueError if
    output exists and is not a database written by an earlier build.
    """
    _prepare_output(output)

    names = sorted(declared) if zones is None else sorted(set(zones))
    compiled = []
    for zone_name in names:
        sources = declared.get(zone_name)
        if not sources:
            print(f"  Warning: {zone_name} is not declared in any source file",
                  file=sys.stderr)
            continue
        try:
            zone = compile_zone(zone_name, start_year, end_year)
        except ValueError as e:
            print(f"  Warning: {e}", file=sys.stderr)
            continue

        tzfile.write(output.joinpath(*zone_name.split('/')), zone, sources)
        logger.debug("Compiled %s as %r", zone_name, classify(zone, sources))
        compiled.append(zone_name)

    return compiled


def list_available_zones(declared: Dict[str, List[str]]):
    """Print the declared names grouped by source file."""
    print(f"Available timezones ({len(declared)} total):\n")

    regions: Dict[str, List[str]] = {}
    for name, sources in declared.items():
        for region in sources:
            regions.setdefault(region, []).append(name)

    for region in REGIONS:
        if region not in regions:
            continue
        print(f"{region}:")
        for name in sorted(regions[region]):
            print(f"  {name}")
        print()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Compile the tzresolve time zone database from the IANA tz database'
    )
    parser.add_argument(
        'zones',
        nargs='*',
        help='Only compile these zones (default: every declared zone)'
    )
    parser.add_argument(
        '-s', '--source',
        type=Path,
        required=True,
        help='Directory holding the IANA tzdata source files (europe, backward, ...)'
    )
    parser.add_argument(
        '-o', '--output',
        type=Path,
        default=None,
        help='Compiled database root, replaced if empty or an earlier build '
             '(default: $TZRESOLVE_COMPILED_DIR '
             'or ~/.cache/tzresolve/compiled)'
    )
    parser.add_argument(
        '--start-year',
        type=int,
        default=DEFAULT_START_YEAR,
        help=f'First year scanned for transitions (default: {DEFAULT_START_YEAR})'
    )
    parser.add_argument(
        '--end-year',
        type=int,
        default=DEFAULT_END_YEAR,
        help=f'Year at which scanning stops (default: {DEFAULT_END_YEAR})'
    )
    parser.add_argument(
        '-l', '--list',
        action='store_true',
        help='List the zones declared by the source files'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log every compiled zone'
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    if not args.source.is_dir():
        print(f"Error: Source directory not found: {args.source}", file=sys.stderr)
        return 1
    if args.start_year >= args.end_year:
        print("Error: --start-year must be before --end-year", file=sys.stderr)
        return 1

    declared = load_sources(args.source)
    if not declared:
        print(f"Error: No zones declared in {args.source}", file=sys.stderr)
        return 1

    if args.list:
        list_available_zones(declared)
        return 0

    output = args.output or default_compiled_dir()
    print(f"Processing {len(args.zones) or len(declared)} timezone(s)...")

    try:
        compiled = build(
            output, declared, args.zones or None, args.start_year, args.end_year
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if not compiled:
        print("\nError: No timezones compiled", file=sys.stderr)
        return 1

    print(f"\nCompiled {len(compiled)} timezone(s) into {output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
