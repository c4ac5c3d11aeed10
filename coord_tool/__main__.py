"""Convert a WGS84 (GPS) position into a national grid reference, or back.

    $ python -m coord_tool 52.65757 1.7179216 24.7
    TG 51539 13138 (Altitude: -20.0m)
"""
import argparse
import logging
import sys

from .config import LOG_LEVEL
from .grid import format_grid_ref
from .tool import Tool

logger = logging.getLogger(__name__)


def main(argv=None):
    args = parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level)

    if args.irish:
        tool, grid_name = Tool.irish_national_grid(), 'Irish National Grid'
    else:
        tool, grid_name = Tool.national_grid(), 'National Grid'

    try:
        if args.reverse is not None:
            position = tool.get_lat_long_from_grid_ref(args.reverse)
            print("%.6f %.6f" % (position.lat, position.lon))
            return 0

        grid_ref = tool.get_grid_ref_from_lat_long(*args.position)
        if not grid_ref.is_valid:
            print("Coordinate not covered by %s" % grid_name, file=sys.stderr)
            return 1
        print("%s (Altitude: %0.1fm)" % (format_grid_ref(grid_ref, args.digits), grid_ref.h))
    except ValueError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(e, file=sys.stderr)
        return 1

    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='coord_tool', description='Convert GPS coordinates to Ordnance Survey grid references')
    parser.add_argument('position', help='WGS84 latitude and longitude (degrees) and optional ellipsoidal height (m)', nargs='*', type=float, metavar='LAT LON [HEIGHT]')
    parser.add_argument('--reverse', help='convert the given grid reference back to WGS84 latitude and longitude', metavar='GRID_REF', default=None)
    parser.add_argument('--irish', help='use the Irish National Grid', action="store_true", default=False)
    parser.add_argument('--digits', help='digits of eastings and northings to print (1-5)', type=int, choices=range(1, 6), default=5)
    parser.add_argument('-v', '--verbose', help='log debugging output', action="store_true", default=False)

    args = parser.parse_args(argv)
    if args.reverse is None and len(args.position) not in (2, 3):
        parser.error('expected a latitude, a longitude and an optional height')
    return args


if __name__ == '__main__':
    sys.exit(main())
