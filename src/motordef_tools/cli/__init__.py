"""
Command-line interface tools for motordef-tools.

Provides CLI commands via the `motordef-tools` or `mdt` command:

    motordef-tools units                   - List supported unit labels
    motordef-tools convert <v> <from> <to> - Convert a value between units
    motordef-tools correct <value>         - Remove floating-point noise
    motordef-tools checksum <file>         - Checksums of a motor definition
    motordef-tools verify <file>           - Verify stored signatures
    motordef-tools sign <file> --by <who>  - Sign a motor definition
    motordef-tools config                  - Show or create configuration

Examples:
    mdt units --domain torque
    mdt convert 10 Nm lbf-in --decimals 2
    mdt convert 1 hp W
    mdt correct 50.1300000000034
    mdt checksum motor.json --format json
    mdt sign motor.json --by qa@example.com
    mdt verify motor.json
    mdt config --show
"""

import argparse
from typing import List, Optional

from motordef_tools import __version__
from motordef_tools.log import enable_verbose

__all__ = ["main"]


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for motordef-tools CLI."""
    parser = argparse.ArgumentParser(
        prog="motordef-tools",
        description="Unit conversion and data integrity for servo motor definitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"motordef-tools {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Units subcommand
    units_parser = subparsers.add_parser("units", help="List supported unit labels")
    units_parser.add_argument("--domain", "-d", help="Only list units of one domain")
    units_parser.add_argument("--format", choices=["table", "json"], default="table")

    # Convert subcommand
    convert_parser = subparsers.add_parser("convert", help="Convert a value between units")
    convert_parser.add_argument("value", help="Value to convert")
    convert_parser.add_argument("from_unit", metavar="FROM", help="Source unit label")
    convert_parser.add_argument("to_unit", metavar="TO", help="Target unit label")
    convert_parser.add_argument("--raw", action="store_true", help="Skip precision correction")
    convert_parser.add_argument("--decimals", type=int, help="Format with N decimal places")
    convert_parser.add_argument("--threshold", type=float, help="Precision correction threshold")

    # Correct subcommand
    correct_parser = subparsers.add_parser("correct", help="Remove floating-point noise")
    correct_parser.add_argument("value", help="Value to correct")
    correct_parser.add_argument("--threshold", type=float, help="Noise threshold")

    # Checksum subcommand
    checksum_parser = subparsers.add_parser("checksum", help="Checksums of a motor definition")
    checksum_parser.add_argument("file", help="Motor definition JSON file")
    checksum_parser.add_argument("--format", choices=["table", "json"], default="table")

    # Verify subcommand
    verify_parser = subparsers.add_parser("verify", help="Verify stored signatures")
    verify_parser.add_argument("file", help="Motor definition JSON file")
    verify_parser.add_argument("--format", choices=["table", "json"], default="table")

    # Sign subcommand
    sign_parser = subparsers.add_parser("sign", help="Sign a motor definition")
    sign_parser.add_argument("file", help="Motor definition JSON file")
    sign_parser.add_argument("--by", dest="verified_by", required=True, help="Verifier")
    sign_parser.add_argument("--only", choices=["motor", "drive", "curve"])
    sign_parser.add_argument("-o", "--output", help="Output file (default: overwrite input)")

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="View and manage configuration")
    config_parser.add_argument("--show", action="store_true", help="Show effective config")
    config_parser.add_argument("--init", action="store_true", help="Create template config")
    config_parser.add_argument("--paths", action="store_true", help="Show config file paths")
    config_parser.add_argument("--user", action="store_true", help="Use user config for --init")
    config_parser.add_argument("config_action", nargs="?", choices=["get"], help="Action")
    config_parser.add_argument("config_key", nargs="?", help="Config key (section.key)")

    args = parser.parse_args(argv)

    if args.verbose:
        enable_verbose("DEBUG")

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "units":
        from .units_cmd import units_main

        sub_argv = []
        if args.domain:
            sub_argv.extend(["--domain", args.domain])
        if args.format != "table":
            sub_argv.extend(["--format", args.format])
        return units_main(sub_argv)

    elif args.command == "convert":
        from .units_cmd import convert_main

        sub_argv = []
        if args.raw:
            sub_argv.append("--raw")
        if args.decimals is not None:
            sub_argv.extend(["--decimals", str(args.decimals)])
        if args.threshold is not None:
            sub_argv.extend(["--threshold", str(args.threshold)])
        # "--" keeps negative values such as -40 positional
        sub_argv.extend(["--", args.value, args.from_unit, args.to_unit])
        return convert_main(sub_argv)

    elif args.command == "correct":
        from .units_cmd import correct_main

        sub_argv = []
        if args.threshold is not None:
            sub_argv.extend(["--threshold", str(args.threshold)])
        sub_argv.extend(["--", args.value])
        return correct_main(sub_argv)

    elif args.command == "checksum":
        from .integrity_cmd import checksum_main

        sub_argv = [args.file]
        if args.format != "table":
            sub_argv.extend(["--format", args.format])
        return checksum_main(sub_argv)

    elif args.command == "verify":
        from .integrity_cmd import verify_main

        sub_argv = [args.file]
        if args.format != "table":
            sub_argv.extend(["--format", args.format])
        return verify_main(sub_argv)

    elif args.command == "sign":
        from .integrity_cmd import sign_main

        sub_argv = [args.file, "--by", args.verified_by]
        if args.only:
            sub_argv.extend(["--only", args.only])
        if args.output:
            sub_argv.extend(["--output", args.output])
        return sign_main(sub_argv)

    elif args.command == "config":
        return _run_config_command(args)

    return 0


def _run_config_command(args) -> int:
    """Handle config command."""
    from .config_cmd import main as config_main

    sub_argv = []
    if args.show:
        sub_argv.append("--show")
    if args.init:
        sub_argv.append("--init")
    if args.paths:
        sub_argv.append("--paths")
    if args.user:
        sub_argv.append("--user")
    if args.config_action:
        sub_argv.append(args.config_action)
    if args.config_key:
        sub_argv.append(args.config_key)
    return config_main(sub_argv) or 0
