"""
Canonical projection and hashing of signable data.

The checksum of an entity is the lowercase hex SHA-256 of a compact JSON
text built from a fixed, ordered subset of its fields. Field order and
names are part of the persisted format: changing either invalidates every
existing signature.

Coverage:
- Motor: motor-level ratings and unit preferences (no drives, no metadata)
- Drive: drive identity and every voltage's ratings (no curves)
- Curve: name, locked flag, notes and every data point

Numbers are written without exponent and without trailing zeros, so
``2304.0`` and ``2304`` hash identically.
"""

from __future__ import annotations

import hashlib
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from motordef_tools.exceptions import InvalidArgumentError
from motordef_tools.schema.motor import (
    UNIT_SETTING_FIELDS,
    Curve,
    Drive,
    ServoMotor,
    UnitSettings,
)

__all__ = [
    "CanonicalRecord",
    "IntegrityHasher",
    "canonical_json",
    "encode_number",
    "encode_string",
]

_SHORT_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}

_HTML_SENSITIVE = frozenset("\"&'+<>`")


@dataclass(frozen=True)
class CanonicalRecord:
    """Ordered ``(name, value)`` pairs serialized as one JSON object."""

    fields: tuple[tuple[str, Any], ...]


def encode_number(value: int | float | Decimal) -> str:
    """Render a number as a plain JSON number token.

    Examples:
        >>> encode_number(2304.0)
        '2304'
        >>> encode_number(1e-05)
        '0.00001'
    """
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidArgumentError(f"Cannot hash non-finite value {value!r}", argument="value")
    if value == 0:
        return "0"

    number = value if isinstance(value, Decimal) else Decimal(repr(value))
    return format(number.normalize(), "f")


def encode_string(value: str) -> str:
    """Render a string as a JSON string token.

    Printable ASCII is written as-is except the HTML-sensitive characters
    ``" & ' + < > ` ``. Those, control characters and every non-ASCII code
    point are written as ``\\uXXXX`` with uppercase hex, using UTF-16
    surrogate pairs above U+FFFF. Existing signatures depend on this exact
    output.

    Examples:
        >>> encode_string("Smith & Co")
        '"Smith \\\\u0026 Co"'
    """
    out = ['"']
    for char in value:
        if char in _SHORT_ESCAPES:
            out.append(_SHORT_ESCAPES[char])
            continue
        code = ord(char)
        if 0x20 <= code < 0x7F and char not in _HTML_SENSITIVE:
            out.append(char)
        elif code > 0xFFFF:
            code -= 0x10000
            out.append(f"\\u{0xD800 + (code >> 10):04X}\\u{0xDC00 + (code & 0x3FF):04X}")
        else:
            out.append(f"\\u{code:04X}")
    out.append('"')
    return "".join(out)


def _encode(value: Any) -> str:
    if isinstance(value, CanonicalRecord):
        members = (f"{encode_string(name)}:{_encode(item)}" for name, item in value.fields)
        return "{" + ",".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return encode_number(value)
    if isinstance(value, str):
        return encode_string(value)
    raise InvalidArgumentError(
        f"Cannot hash value of type {type(value).__name__}", argument="value"
    )


def canonical_json(record: CanonicalRecord) -> str:
    """Serialize a record as compact JSON with fields in declared order."""
    return _encode(record)


class IntegrityHasher:
    """Builds canonical records for motors, drives and curves and hashes them."""

    def motor_record(self, motor: ServoMotor) -> CanonicalRecord:
        return CanonicalRecord(
            (
                ("schemaVersion", motor.schema_version),
                ("motorName", motor.motor_name),
                ("manufacturer", motor.manufacturer),
                ("partNumber", motor.part_number),
                ("power", motor.power),
                ("maxSpeed", motor.max_speed),
                ("ratedSpeed", motor.rated_speed),
                ("ratedContinuousTorque", motor.rated_continuous_torque),
                ("ratedPeakTorque", motor.rated_peak_torque),
                ("weight", motor.weight),
                ("rotorInertia", motor.rotor_inertia),
                ("feedbackPpr", motor.feedback_ppr),
                ("hasBrake", motor.has_brake),
                ("brakeTorque", motor.brake_torque),
                ("brakeAmperage", motor.brake_amperage),
                ("brakeVoltage", motor.brake_voltage),
                ("brakeReleaseTime", motor.brake_release_time),
                ("brakeEngageTimeDiode", motor.brake_engage_time_diode),
                ("brakeEngageTimeMov", motor.brake_engage_time_mov),
                ("brakeBacklash", motor.brake_backlash),
                ("units", self.units_record(motor.units)),
            )
        )

    def units_record(self, units: UnitSettings | None) -> CanonicalRecord | None:
        if units is None:
            return None
        return CanonicalRecord(
            tuple((key, getattr(units, attr)) for attr, key, _ in UNIT_SETTING_FIELDS)
        )

    def drive_record(self, drive: Drive) -> CanonicalRecord:
        # Curves are signed on their own so drive edits leave them valid.
        voltages = [
            CanonicalRecord(
                (
                    ("value", voltage.value),
                    ("power", voltage.power),
                    ("maxSpeed", voltage.max_speed),
                    ("ratedSpeed", voltage.rated_speed),
                    ("ratedContinuousTorque", voltage.rated_continuous_torque),
                    ("ratedPeakTorque", voltage.rated_peak_torque),
                    ("continuousAmperage", voltage.continuous_amperage),
                    ("peakAmperage", voltage.peak_amperage),
                )
            )
            for voltage in drive.voltages
        ]
        return CanonicalRecord(
            (
                ("name", drive.name),
                ("manufacturer", drive.manufacturer),
                ("partNumber", drive.part_number),
                ("voltages", voltages),
            )
        )

    def curve_record(self, curve: Curve) -> CanonicalRecord:
        points = [
            CanonicalRecord(
                (("percent", point.percent), ("rpm", point.rpm), ("torque", point.torque))
            )
            for point in curve.data
        ]
        return CanonicalRecord(
            (
                ("name", curve.name),
                ("locked", curve.locked),
                ("notes", curve.notes),
                ("data", points),
            )
        )

    def record_for(self, entity: ServoMotor | Drive | Curve) -> CanonicalRecord:
        """Dispatch to the record builder for the entity's type."""
        if isinstance(entity, ServoMotor):
            return self.motor_record(entity)
        if isinstance(entity, Drive):
            return self.drive_record(entity)
        if isinstance(entity, Curve):
            return self.curve_record(entity)
        raise InvalidArgumentError(
            f"Cannot compute a checksum for {type(entity).__name__}",
            argument="entity",
            suggestions=["Pass a ServoMotor, Drive or Curve"],
        )

    def checksum(self, record: CanonicalRecord) -> str:
        """Lowercase hex SHA-256 of the record's canonical UTF-8 JSON."""
        payload = canonical_json(record).encode("utf-8")
        return hashlib.sha256(payload).hexdigest()
