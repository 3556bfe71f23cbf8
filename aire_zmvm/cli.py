"""
Command line front-end.

Usage:
    aire-zmvm imeca O3 70 95 130
    aire-zmvm idw360 --stations stations.csv --grid grid.csv --longlat
"""

import argparse
import logging
import sys

import pandas as pd

from .exceptions import InvalidArgument
from .idw360 import DEFAULT_IDP, idw360
from .imeca import convert_imeca

logger = logging.getLogger(__name__)


def _run_imeca(args) -> int:
    results = convert_imeca(args.pollutant, args.values, strict=args.strict, pm10_norm=args.pm10_norm)
    for value, index in zip(args.values, results):
        logger.debug("%s %s -> %s", args.pollutant, value, index)
        print('NA' if index is None else index)
    return 0


def _run_idw360(args) -> int:
    try:
        stations = pd.read_csv(args.stations)
        grid = pd.read_csv(args.grid)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        print(f"Error: could not read input CSV: {e}", file=sys.stderr)
        return 2

    if args.value_column not in stations.columns:
        print(f"Error: column '{args.value_column}' not found in {args.stations}", file=sys.stderr)
        return 2

    coords = stations.drop(columns=[args.value_column])
    logger.info("Interpolating %d stations onto %d grid points", len(stations), len(grid))
    res = idw360(stations[args.value_column], coords, grid, idp=args.idp, longlat=args.longlat)
    pd.concat([grid, res], axis=1).to_csv(sys.stdout, index=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aire-zmvm',
        description="IMECA conversion and directional IDW for Mexico City air quality data",
    )
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging")
    sub = parser.add_subparsers(dest='command', required=True)

    p_imeca = sub.add_parser('imeca', help="Convert concentrations to IMECA")
    p_imeca.add_argument('pollutant', help="O3, PM10, PM2, NO2, SO2 or CO")
    p_imeca.add_argument('values', nargs='+', type=float, help="Raw concentrations")
    p_imeca.add_argument('--pm10-norm', type=int, choices=[2006, 2014], default=2014)
    p_imeca.add_argument('--strict', action='store_true', help="Fail on unknown pollutant")
    p_imeca.set_defaults(func=_run_imeca)

    p_idw = sub.add_parser('idw360', help="Interpolate wind direction onto a grid")
    p_idw.add_argument('--stations', required=True,
                       help="CSV: x/lon column, y/lat column and a value column")
    p_idw.add_argument('--grid', required=True, help="CSV: x/lon column, y/lat column")
    p_idw.add_argument('--value-column', default='value')
    p_idw.add_argument('--idp', type=float, default=DEFAULT_IDP, help="Inverse distance power")
    p_idw.add_argument('--longlat', action='store_true', help="Great-circle distances (km)")
    p_idw.set_defaults(func=_run_idw360)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        return args.func(args)
    except InvalidArgument as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
