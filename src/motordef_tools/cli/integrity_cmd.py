"""Integrity commands for motor definition files.

Usage:
    motordef-tools checksum motor.json                 Checksums of motor, drives, curves
    motordef-tools checksum motor.json --format json
    motordef-tools verify motor.json                   Check stored signatures
    motordef-tools sign motor.json --by qa@example.com Sign and save in place

``verify`` exits with status 1 when any stored signature no longer
matches the data it covers.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from motordef_tools.exceptions import MotorDefToolsError
from motordef_tools.integrity import DataIntegrityService, IntegrityReport, iter_signable

from .utils import load_motor_file, print_error


def checksum_main(argv: list[str] | None = None) -> int:
    """Entry point for the checksum command."""
    parser = argparse.ArgumentParser(
        prog="motordef-tools checksum",
        description="Compute SHA-256 checksums of a motor definition",
    )
    parser.add_argument("file", help="Motor definition JSON file")
    parser.add_argument(
        "--format",
        "-f",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    args = parser.parse_args(argv)

    try:
        motor = load_motor_file(args.file)
        service = DataIntegrityService()
        rows = [
            {
                "path": path,
                "kind": kind,
                "name": name,
                "checksum": service.compute_checksum(entity),
            }
            for path, kind, name, entity in iter_signable(motor)
        ]
    except MotorDefToolsError as e:
        print_error(e)
        return 1

    if args.format == "json":
        print(json.dumps({"file": str(args.file), "checksums": rows}, indent=2))
        return 0

    table = Table(title=f"Checksums: {Path(args.file).name}")
    table.add_column("Path", style="cyan")
    table.add_column("Kind", style="dim")
    table.add_column("Name")
    table.add_column("SHA-256")

    for row in rows:
        table.add_row(row["path"], row["kind"], row["name"], row["checksum"])

    Console().print(table)
    return 0


def verify_main(argv: list[str] | None = None) -> int:
    """Entry point for the verify command."""
    parser = argparse.ArgumentParser(
        prog="motordef-tools verify",
        description="Verify the signatures stored in a motor definition",
    )
    parser.add_argument("file", help="Motor definition JSON file")
    parser.add_argument(
        "--format",
        "-f",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    args = parser.parse_args(argv)

    try:
        motor = load_motor_file(args.file)
        report = DataIntegrityService().audit(motor)
    except MotorDefToolsError as e:
        print_error(e)
        return 1

    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        _output_report(report, Path(args.file).name)

    return 0 if report.all_verified else 1


def _output_report(report: IntegrityReport, filename: str) -> None:
    """Output an integrity report as a table."""
    console = Console()

    table = Table(title=f"Signatures: {filename}")
    table.add_column("Path", style="cyan")
    table.add_column("Kind", style="dim")
    table.add_column("Name")
    table.add_column("Status")

    for entry in report.entries:
        if not entry.signed:
            status = "[dim]unsigned[/dim]"
        elif entry.verified:
            status = "[green]verified[/green]"
        else:
            status = "[red]stale[/red]"
        table.add_row(entry.path, entry.kind, entry.name, status)

    console.print(table)

    stale = len(report.stale)
    if stale:
        console.print(f"[red]{stale} signature(s) no longer match their data[/red]")
    else:
        console.print(f"[green]{len(report.signed)} signature(s) verified[/green]")


def sign_main(argv: list[str] | None = None) -> int:
    """Entry point for the sign command."""
    parser = argparse.ArgumentParser(
        prog="motordef-tools sign",
        description="Sign a motor definition and store the signatures in the file",
    )
    parser.add_argument("file", help="Motor definition JSON file")
    parser.add_argument("--by", dest="verified_by", required=True, help="Verifier email or name")
    parser.add_argument(
        "--only",
        choices=["motor", "drive", "curve"],
        help="Only sign entities of this kind (default: all)",
    )
    parser.add_argument("-o", "--output", help="Output file (default: overwrite input)")
    args = parser.parse_args(argv)

    try:
        motor = load_motor_file(args.file)
        service = DataIntegrityService()
        signed = 0
        for _, kind, _, entity in iter_signable(motor):
            if args.only and kind != args.only:
                continue
            service.sign(entity, args.verified_by, attach=True)
            signed += 1
    except MotorDefToolsError as e:
        print_error(e)
        return 1

    output = Path(args.output) if args.output else Path(args.file)
    motor.save(output)
    print(f"Signed {signed} entit{'y' if signed == 1 else 'ies'} in {output}")
    return 0
