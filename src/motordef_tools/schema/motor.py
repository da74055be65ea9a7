"""
Data models for motor definition documents.

A motor definition holds scalar ratings for a servo motor plus, per drive
and supply voltage, the speed/torque curves measured for that combination::

    ServoMotor
    ├── units: UnitSettings
    ├── metadata: MotorMetadata
    └── drives: [Drive]
        └── voltages: [Voltage]
            └── curves: [Curve]
                └── data: [DataPoint]

Motors, drives and curves may each carry a ValidationSignature. The
dictionary form uses the camelCase names of the persisted document.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from motordef_tools.exceptions import InvalidArgumentError
from motordef_tools.units import UnitDomain

from .signature import ValidationSignature

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "UNIT_SETTING_FIELDS",
    "UnitSettings",
    "DataPoint",
    "Curve",
    "Voltage",
    "Drive",
    "MotorMetadata",
    "ServoMotor",
    "check_document",
]

CURRENT_SCHEMA_VERSION = "1.0.0"

# (attribute, document key, domain) in canonical order
UNIT_SETTING_FIELDS: tuple[tuple[str, str, UnitDomain], ...] = (
    ("torque", "torque", UnitDomain.TORQUE),
    ("speed", "speed", UnitDomain.SPEED),
    ("power", "power", UnitDomain.POWER),
    ("weight", "weight", UnitDomain.MASS),
    ("voltage", "voltage", UnitDomain.VOLTAGE),
    ("current", "current", UnitDomain.CURRENT),
    ("inertia", "inertia", UnitDomain.INERTIA),
    ("torque_constant", "torqueConstant", UnitDomain.TORQUE_CONSTANT),
    ("backlash", "backlash", UnitDomain.BACKLASH),
    ("response_time", "responseTime", UnitDomain.TIME),
    ("percentage", "percentage", UnitDomain.PERCENTAGE),
    ("temperature", "temperature", UnitDomain.TEMPERATURE),
)


def _signature_to_dict(signature: ValidationSignature | None) -> dict[str, Any] | None:
    return signature.to_dict() if signature is not None else None


def _signature_from_dict(data: dict[str, Any] | None) -> ValidationSignature | None:
    return ValidationSignature.from_dict(data) if data else None


@dataclass
class UnitSettings:
    """Unit label used by a document for each quantity it stores."""

    torque: str = "Nm"
    speed: str = "rpm"
    power: str = "W"
    weight: str = "kg"
    voltage: str = "V"
    current: str = "A"
    inertia: str = "kg-m^2"
    torque_constant: str = "Nm/A"
    backlash: str = "arcmin"
    response_time: str = "ms"
    percentage: str = "%"
    temperature: str = "C"

    @staticmethod
    def domain_for(name: str) -> UnitDomain:
        """Get the unit domain of a preference field.

        Raises:
            InvalidArgumentError: If ``name`` is not a preference field
        """
        for attr, _, domain in UNIT_SETTING_FIELDS:
            if attr == name:
                return domain
        raise InvalidArgumentError(f"Unknown unit preference field: {name}", argument="field")

    def copy(self) -> UnitSettings:
        return copy.copy(self)

    def with_unit(self, name: str, label: str) -> UnitSettings:
        """Return a copy with one preference field replaced."""
        self.domain_for(name)
        updated = self.copy()
        setattr(updated, name, label)
        return updated

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, attr) for attr, key, _ in UNIT_SETTING_FIELDS}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UnitSettings:
        settings = cls()
        for attr, key, _ in UNIT_SETTING_FIELDS:
            if key in data:
                setattr(settings, attr, data[key])
        return settings


@dataclass
class DataPoint:
    """One point of a curve: percent of max speed, speed and torque."""

    percent: int = 0
    rpm: float = 0.0
    torque: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"percent": self.percent, "rpm": self.rpm, "torque": self.torque}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataPoint:
        return cls(
            percent=int(data.get("percent", 0)),
            rpm=float(data.get("rpm", 0.0)),
            torque=float(data.get("torque", 0.0)),
        )


@dataclass
class Curve:
    """Named torque curve (e.g. "Peak", "Continuous") for one voltage."""

    name: str = ""
    locked: bool = False
    notes: str = ""
    data: list[DataPoint] = field(default_factory=list)
    curve_signature: ValidationSignature | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "locked": self.locked,
            "notes": self.notes,
            "data": [point.to_dict() for point in self.data],
            "curveSignature": _signature_to_dict(self.curve_signature),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Curve:
        return cls(
            name=data.get("name", ""),
            locked=bool(data.get("locked", False)),
            notes=data.get("notes", ""),
            data=[DataPoint.from_dict(point) for point in data.get("data", [])],
            curve_signature=_signature_from_dict(data.get("curveSignature")),
        )


@dataclass
class Voltage:
    """Ratings of a motor/drive combination at one supply voltage."""

    value: float = 0.0
    power: float = 0.0
    max_speed: float = 0.0
    rated_speed: float = 0.0
    rated_continuous_torque: float = 0.0
    rated_peak_torque: float = 0.0
    continuous_amperage: float = 0.0
    peak_amperage: float = 0.0
    curves: list[Curve] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "power": self.power,
            "maxSpeed": self.max_speed,
            "ratedSpeed": self.rated_speed,
            "ratedContinuousTorque": self.rated_continuous_torque,
            "ratedPeakTorque": self.rated_peak_torque,
            "continuousAmperage": self.continuous_amperage,
            "peakAmperage": self.peak_amperage,
            "curves": [curve.to_dict() for curve in self.curves],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Voltage:
        return cls(
            value=float(data.get("value", 0.0)),
            power=float(data.get("power", 0.0)),
            max_speed=float(data.get("maxSpeed", 0.0)),
            rated_speed=float(data.get("ratedSpeed", 0.0)),
            rated_continuous_torque=float(data.get("ratedContinuousTorque", 0.0)),
            rated_peak_torque=float(data.get("ratedPeakTorque", 0.0)),
            continuous_amperage=float(data.get("continuousAmperage", 0.0)),
            peak_amperage=float(data.get("peakAmperage", 0.0)),
            curves=[Curve.from_dict(curve) for curve in data.get("curves", [])],
        )


@dataclass
class Drive:
    """Servo drive paired with the motor, with its supported voltages."""

    name: str = ""
    manufacturer: str = ""
    part_number: str = ""
    voltages: list[Voltage] = field(default_factory=list)
    drive_signature: ValidationSignature | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "manufacturer": self.manufacturer,
            "partNumber": self.part_number,
            "voltages": [voltage.to_dict() for voltage in self.voltages],
            "driveSignature": _signature_to_dict(self.drive_signature),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Drive:
        return cls(
            name=data.get("name", ""),
            manufacturer=data.get("manufacturer", ""),
            part_number=data.get("partNumber", ""),
            voltages=[Voltage.from_dict(voltage) for voltage in data.get("voltages", [])],
            drive_signature=_signature_from_dict(data.get("driveSignature")),
        )


@dataclass
class MotorMetadata:
    """Free-form bookkeeping. Never part of any signature."""

    created: str | None = None
    modified: str | None = None
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"created": self.created, "modified": self.modified, "notes": self.notes}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MotorMetadata:
        return cls(
            created=data.get("created"),
            modified=data.get("modified"),
            notes=data.get("notes", ""),
        )


# ServoMotor scalar attributes and their document keys, in document order
_MOTOR_SCALARS: tuple[tuple[str, str], ...] = (
    ("schema_version", "schemaVersion"),
    ("motor_name", "motorName"),
    ("manufacturer", "manufacturer"),
    ("part_number", "partNumber"),
    ("power", "power"),
    ("max_speed", "maxSpeed"),
    ("rated_speed", "ratedSpeed"),
    ("rated_continuous_torque", "ratedContinuousTorque"),
    ("rated_peak_torque", "ratedPeakTorque"),
    ("weight", "weight"),
    ("rotor_inertia", "rotorInertia"),
    ("feedback_ppr", "feedbackPpr"),
    ("has_brake", "hasBrake"),
    ("brake_torque", "brakeTorque"),
    ("brake_amperage", "brakeAmperage"),
    ("brake_voltage", "brakeVoltage"),
    ("brake_release_time", "brakeReleaseTime"),
    ("brake_engage_time_diode", "brakeEngageTimeDiode"),
    ("brake_engage_time_mov", "brakeEngageTimeMov"),
    ("brake_backlash", "brakeBacklash"),
)


@dataclass
class ServoMotor:
    """Root of a motor definition document."""

    schema_version: str = CURRENT_SCHEMA_VERSION
    motor_name: str = ""
    manufacturer: str = ""
    part_number: str = ""
    power: float = 0.0
    max_speed: float = 0.0
    rated_speed: float = 0.0
    rated_continuous_torque: float = 0.0
    rated_peak_torque: float = 0.0
    weight: float = 0.0
    rotor_inertia: float = 0.0
    feedback_ppr: int = 0
    has_brake: bool = False
    brake_torque: float = 0.0
    brake_amperage: float = 0.0
    brake_voltage: float = 0.0
    brake_release_time: float = 0.0
    brake_engage_time_diode: float = 0.0
    brake_engage_time_mov: float = 0.0
    brake_backlash: float = 0.0
    units: UnitSettings = field(default_factory=UnitSettings)
    drives: list[Drive] = field(default_factory=list)
    metadata: MotorMetadata = field(default_factory=MotorMetadata)
    motor_signature: ValidationSignature | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {key: getattr(self, attr) for attr, key in _MOTOR_SCALARS}
        data["units"] = self.units.to_dict()
        data["drives"] = [drive.to_dict() for drive in self.drives]
        data["metadata"] = self.metadata.to_dict()
        data["motorSignature"] = _signature_to_dict(self.motor_signature)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServoMotor:
        motor = cls()
        types = {f.name: f.type for f in fields(cls)}
        for attr, key in _MOTOR_SCALARS:
            if key not in data:
                continue
            value = data[key]
            if types[attr] == "float":
                value = float(value)
            elif types[attr] == "int":
                value = int(value)
            elif types[attr] == "bool":
                value = bool(value)
            setattr(motor, attr, value)
        motor.units = UnitSettings.from_dict(data.get("units", {}))
        motor.drives = [Drive.from_dict(drive) for drive in data.get("drives", [])]
        motor.metadata = MotorMetadata.from_dict(data.get("metadata", {}))
        motor.motor_signature = _signature_from_dict(data.get("motorSignature"))
        return motor

    @classmethod
    def load(cls, path: str | Path) -> ServoMotor:
        """Load a motor definition from a JSON file.

        The file must use exactly the keys written by :meth:`save`, so that
        saving it again loses nothing.

        Raises:
            InvalidArgumentError: On unknown keys or missing required keys
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        check_document(data)
        return cls.from_dict(data)

    def save(self, path: str | Path) -> None:
        """Write the motor definition as indented JSON."""
        Path(path).write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")


# Keys written by to_dict for each object, and the ones a file must provide
_SIGNATURE_KEYS = frozenset({"checksum", "timestamp", "verifiedBy", "algorithm"})
_POINT_KEYS = frozenset({"percent", "rpm", "torque"})
_CURVE_KEYS = frozenset({"name", "locked", "notes", "data", "curveSignature"})
_VOLTAGE_KEYS = frozenset(
    {
        "value",
        "power",
        "maxSpeed",
        "ratedSpeed",
        "ratedContinuousTorque",
        "ratedPeakTorque",
        "continuousAmperage",
        "peakAmperage",
        "curves",
    }
)
_DRIVE_KEYS = frozenset({"name", "manufacturer", "partNumber", "voltages", "driveSignature"})
_METADATA_KEYS = frozenset({"created", "modified", "notes"})
_UNIT_KEYS = frozenset(key for _, key, _ in UNIT_SETTING_FIELDS)
_MOTOR_KEYS = frozenset(key for _, key in _MOTOR_SCALARS) | {
    "units",
    "drives",
    "metadata",
    "motorSignature",
}


def check_document(data: Any) -> None:
    """Check that a parsed JSON document has the shape of a motor definition.

    Every object must use only known keys, and motors, drives, voltages,
    curves and data points must carry their identifying keys.

    Raises:
        InvalidArgumentError: Naming the path of the first offending object
    """
    _check_object(data, "motor", _MOTOR_KEYS, {"motorName"})
    if data.get("units") is not None:
        _check_object(data["units"], "units", _UNIT_KEYS)
    if data.get("metadata") is not None:
        _check_object(data["metadata"], "metadata", _METADATA_KEYS)
    _check_signature(data.get("motorSignature"), "motorSignature")

    for d, drive in enumerate(_check_list(data, "drives", "motor")):
        drive_path = f"drives[{d}]"
        _check_object(drive, drive_path, _DRIVE_KEYS, {"name"})
        _check_signature(drive.get("driveSignature"), f"{drive_path}.driveSignature")

        for v, voltage in enumerate(_check_list(drive, "voltages", drive_path)):
            voltage_path = f"{drive_path}.voltages[{v}]"
            _check_object(voltage, voltage_path, _VOLTAGE_KEYS, {"value"})

            for c, curve in enumerate(_check_list(voltage, "curves", voltage_path)):
                curve_path = f"{voltage_path}.curves[{c}]"
                _check_object(curve, curve_path, _CURVE_KEYS, {"name", "data"})
                _check_signature(curve.get("curveSignature"), f"{curve_path}.curveSignature")

                for p, point in enumerate(_check_list(curve, "data", curve_path)):
                    _check_object(point, f"{curve_path}.data[{p}]", _POINT_KEYS, _POINT_KEYS)


def _check_object(
    data: Any, path: str, known: frozenset[str], required: frozenset[str] | set[str] = frozenset()
) -> None:
    if not isinstance(data, dict):
        raise InvalidArgumentError(
            f"Expected an object at {path}", argument="document", context={"path": path}
        )

    unknown = sorted(key for key in data if key not in known)
    if unknown:
        raise InvalidArgumentError(
            f"Unknown keys at {path}: {', '.join(unknown)}",
            argument="document",
            context={"path": path, "known": sorted(known)},
            suggestions=["Only files written by motordef-tools can be loaded"],
        )

    missing = sorted(key for key in required if key not in data)
    if missing:
        raise InvalidArgumentError(
            f"Missing keys at {path}: {', '.join(missing)}",
            argument="document",
            context={"path": path},
        )


def _check_list(data: dict[str, Any], key: str, path: str) -> list[Any]:
    items = data.get(key, [])
    if not isinstance(items, list):
        raise InvalidArgumentError(
            f"Expected a list at {path}.{key}", argument="document", context={"path": path}
        )
    return items


def _check_signature(data: Any, path: str) -> None:
    if data is not None:
        _check_object(data, path, _SIGNATURE_KEYS)
