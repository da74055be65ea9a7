"""
motordef-tools: unit conversion and data integrity for servo motor definitions.

This package converts motor definition documents between unit systems and
signs their contents with SHA-256 checksums so later edits can be detected.

Modules:
    units: Unit table and scalar conversion between unit labels
    precision: Removal of floating-point noise after conversions
    schema: Data models for motors, drives, curves and signatures
    conversion: Unit preference changes applied to whole documents
    integrity: Canonical hashing, signing and verification
    config: TOML configuration loading

Quick Start::

    from motordef_tools import DataIntegrityService, ServoMotor, UnitConversionService

    motor = ServoMotor.load("motor.json")

    # Sign, then convert the stored data to imperial torque
    integrity = DataIntegrityService()
    integrity.sign(motor, "qa@example.com", attach=True)

    UnitConversionService().change_unit(motor, "torque", "lbf-in")

    # The motor signature no longer matches
    report = integrity.audit(motor)
    print([entry.path for entry in report.stale])
"""

__version__ = "0.1.0"

from motordef_tools.exceptions import (
    ConversionAbortedError,
    InvalidArgumentError,
    MotorDefToolsError,
    UnsupportedConversionError,
    UnsupportedUnitError,
)
from motordef_tools.units import UnitConverter, UnitDomain, domain_of, supported_units
from motordef_tools.precision import PrecisionCorrector, correct_precision_error

# Schema models
from motordef_tools.schema import (
    Curve,
    DataPoint,
    Drive,
    MotorMetadata,
    ServoMotor,
    UnitSettings,
    ValidationSignature,
    Voltage,
)

from motordef_tools.integrity import DataIntegrityService, IntegrityHasher, SignatureService
from motordef_tools.conversion import ConversionReport, UnitConversionService

__all__ = [
    # Version
    "__version__",
    # Errors
    "MotorDefToolsError",
    "UnsupportedUnitError",
    "UnsupportedConversionError",
    "InvalidArgumentError",
    "ConversionAbortedError",
    # Units
    "UnitConverter",
    "UnitDomain",
    "domain_of",
    "supported_units",
    "PrecisionCorrector",
    "correct_precision_error",
    # Schema
    "UnitSettings",
    "DataPoint",
    "Curve",
    "Voltage",
    "Drive",
    "MotorMetadata",
    "ServoMotor",
    "ValidationSignature",
    # Integrity
    "IntegrityHasher",
    "DataIntegrityService",
    "SignatureService",
    # Conversion
    "UnitConversionService",
    "ConversionReport",
]
