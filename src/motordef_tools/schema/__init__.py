"""Data models for motor definition documents and validation signatures."""

from .motor import (
    CURRENT_SCHEMA_VERSION,
    UNIT_SETTING_FIELDS,
    Curve,
    DataPoint,
    Drive,
    MotorMetadata,
    ServoMotor,
    UnitSettings,
    Voltage,
    check_document,
)
from .signature import SIGNATURE_ALGORITHM, ValidationSignature

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "UNIT_SETTING_FIELDS",
    "SIGNATURE_ALGORITHM",
    "Curve",
    "DataPoint",
    "Drive",
    "MotorMetadata",
    "ServoMotor",
    "UnitSettings",
    "ValidationSignature",
    "Voltage",
    "check_document",
]
