"""Unit commands: list units, convert values and correct precision noise.

Usage:
    motordef-tools units                       List every supported unit
    motordef-tools units --domain torque       List torque units only
    motordef-tools convert 10 Nm lbf-in        Convert a value
    motordef-tools correct 50.1300000000034    Remove floating-point noise
"""

from __future__ import annotations

import argparse
import json
import sys

from rich.console import Console
from rich.table import Table

from motordef_tools.conversion import UnitConversionService
from motordef_tools.exceptions import InvalidArgumentError, MotorDefToolsError
from motordef_tools.precision import DEFAULT_THRESHOLD, correct_precision_error
from motordef_tools.units import (
    HORSEPOWER,
    HP_TO_WATTS,
    UNIT_DEFINITIONS,
    UnitConverter,
    UnitDomain,
)

from .utils import print_error


def units_main(argv: list[str] | None = None) -> int:
    """Entry point for the units command."""
    parser = argparse.ArgumentParser(
        prog="motordef-tools units",
        description="List supported unit labels",
    )
    parser.add_argument(
        "--domain",
        "-d",
        help="Only list units of one domain (e.g. torque, speed, response_time)",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    args = parser.parse_args(argv)

    domain = None
    if args.domain:
        domain = UnitDomain.from_string(args.domain)
        if domain is None:
            names = ", ".join(d.value for d in UnitDomain)
            print(f"Error: Unknown domain '{args.domain}'. Choose from: {names}", file=sys.stderr)
            return 1

    units = [unit for unit in UNIT_DEFINITIONS if domain is None or unit.domain is domain]

    if args.format == "json":
        output = [
            {"label": unit.label, "domain": unit.domain.value, "factor": unit.factor}
            for unit in units
        ]
        print(json.dumps(output, indent=2))
        return 0

    table = Table(title="Supported Units")
    table.add_column("Domain", style="cyan")
    table.add_column("Unit", style="bold")
    table.add_column("To base unit", justify="right", style="dim")

    for unit in units:
        if unit.label == HORSEPOWER:
            factor = f"{HP_TO_WATTS} W"
        elif unit.factor is None:
            factor = "affine"
        else:
            factor = f"{unit.factor:.10g}"
        table.add_row(unit.domain.value, unit.label, factor)

    Console().print(table)
    return 0


def convert_main(argv: list[str] | None = None) -> int:
    """Entry point for the convert command."""
    parser = argparse.ArgumentParser(
        prog="motordef-tools convert",
        description="Convert a value between two unit labels",
    )
    parser.add_argument("value", type=float, help="Value to convert")
    parser.add_argument("from_unit", metavar="FROM", help="Source unit label (e.g. Nm)")
    parser.add_argument("to_unit", metavar="TO", help="Target unit label (e.g. lbf-in)")
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the converted value without precision correction",
    )
    parser.add_argument(
        "--decimals",
        type=int,
        help="Format the result with this many decimal places and the unit label",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Precision correction threshold (default: {DEFAULT_THRESHOLD})",
    )
    args = parser.parse_args(argv)

    try:
        if args.raw:
            result = UnitConverter().convert(args.value, args.from_unit, args.to_unit)
        else:
            service = UnitConversionService(precision_threshold=args.threshold)
            result = service.convert(args.value, args.from_unit, args.to_unit)

        if args.decimals is not None:
            if args.decimals < 0:
                raise InvalidArgumentError(
                    "Decimal places cannot be negative.", argument="--decimals"
                )
            print(UnitConverter().format(result, args.to_unit, args.decimals))
        else:
            print(repr(result))
    except MotorDefToolsError as e:
        print_error(e)
        return 1

    return 0


def correct_main(argv: list[str] | None = None) -> int:
    """Entry point for the correct command."""
    parser = argparse.ArgumentParser(
        prog="motordef-tools correct",
        description="Snap a value with floating-point noise to its short decimal form",
    )
    parser.add_argument("value", type=float, help="Value to correct")
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Largest difference treated as noise (default: {DEFAULT_THRESHOLD})",
    )
    args = parser.parse_args(argv)

    print(repr(correct_precision_error(args.value, args.threshold)))
    return 0
