"""
Unit conversion policy for motor definition documents.

Two modes are supported:

- Stored mode (``convert_stored_data=True``, the default): changing a unit
  preference rewrites every affected number in the document (motor,
  voltages, curve points) in the new unit. Each converted value passes
  through precision correction before it is written.
- Display mode (``convert_stored_data=False``): stored numbers are never
  touched; values are converted on the way to the screen with
  :meth:`UnitConversionService.get_display_value` and back with
  :meth:`UnitConversionService.get_stored_value`.

Bulk conversions are all-or-nothing. Every new value is computed first and
only written once all of them succeeded, so a failure leaves the document
exactly as it was.

Stored-mode conversions change signed fields. Check signatures with
:meth:`motordef_tools.integrity.DataIntegrityService.audit` afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple

from .exceptions import (
    ConversionAbortedError,
    InvalidArgumentError,
    MotorDefToolsError,
    UnsupportedConversionError,
    UnsupportedUnitError,
)
from .precision import DEFAULT_THRESHOLD, correct_precision_error
from .schema.motor import UNIT_SETTING_FIELDS, Curve, ServoMotor, UnitSettings
from .units import UnitConverter, UnitDomain, domain_of

if TYPE_CHECKING:
    from .config import Config

__all__ = ["ConversionReport", "UnitConversionService", "CONVERTED_FIELDS"]

logger = logging.getLogger(__name__)

# Preference field -> (motor attributes, voltage attributes, curve point attribute)
CONVERTED_FIELDS: dict[str, tuple[tuple[str, ...], tuple[str, ...], str | None]] = {
    "torque": (
        ("rated_continuous_torque", "rated_peak_torque", "brake_torque"),
        ("rated_continuous_torque", "rated_peak_torque"),
        "torque",
    ),
    "speed": (("max_speed", "rated_speed"), ("max_speed", "rated_speed"), "rpm"),
    "power": (("power",), ("power",), None),
    "weight": (("weight",), (), None),
    "inertia": (("rotor_inertia",), (), None),
    "current": (("brake_amperage",), ("continuous_amperage", "peak_amperage"), None),
    "response_time": (
        ("brake_release_time", "brake_engage_time_diode", "brake_engage_time_mov"),
        (),
        None,
    ),
    "backlash": (("brake_backlash",), (), None),
}


class _PendingWrite(NamedTuple):
    target: Any
    attr: str
    value: float


@dataclass
class ConversionReport:
    """Outcome of one unit-preference change."""

    fields: list[str] = field(default_factory=list)
    values_converted: int = 0
    stored: bool = True

    @property
    def changed(self) -> bool:
        return self.values_converted > 0


class UnitConversionService:
    """
    Applies unit preference changes to motor documents.

    Args:
        convert_stored_data: Rewrite stored values (True) or convert only
            for display (False)
        display_decimal_places: Decimal places used by :meth:`format_value`
        precision_threshold: Threshold passed to precision correction
        converter: Unit converter to use (default: a new UnitConverter)
    """

    def __init__(
        self,
        convert_stored_data: bool = True,
        display_decimal_places: int = 2,
        precision_threshold: float = DEFAULT_THRESHOLD,
        converter: UnitConverter | None = None,
    ):
        self.convert_stored_data = convert_stored_data
        self.display_decimal_places = display_decimal_places
        self.precision_threshold = precision_threshold
        self._converter = converter or UnitConverter()

    @classmethod
    def from_config(cls, config: Config) -> UnitConversionService:
        """Build a service from the [conversion] and [display] settings."""
        return cls(
            convert_stored_data=config.conversion.convert_stored_data,
            display_decimal_places=config.display.decimal_places,
            precision_threshold=config.conversion.precision_threshold,
        )

    @property
    def display_decimal_places(self) -> int:
        return self._display_decimal_places

    @display_decimal_places.setter
    def display_decimal_places(self, value: int) -> None:
        if value < 0:
            raise InvalidArgumentError(
                "Decimal places must be non-negative.", argument="display_decimal_places"
            )
        self._display_decimal_places = value

    # Single values

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        """Convert a value and remove conversion noise from the result."""
        converted = self._converter.convert(value, from_unit, to_unit)
        if from_unit == to_unit:
            return converted
        return correct_precision_error(converted, self.precision_threshold)

    def convert_torque(self, value: float, from_unit: str, to_unit: str) -> float:
        return self._convert_in(UnitDomain.TORQUE, value, from_unit, to_unit)

    def convert_speed(self, value: float, from_unit: str, to_unit: str) -> float:
        return self._convert_in(UnitDomain.SPEED, value, from_unit, to_unit)

    def convert_power(self, value: float, from_unit: str, to_unit: str) -> float:
        return self._convert_in(UnitDomain.POWER, value, from_unit, to_unit)

    def convert_mass(self, value: float, from_unit: str, to_unit: str) -> float:
        return self._convert_in(UnitDomain.MASS, value, from_unit, to_unit)

    def _convert_in(self, domain: UnitDomain, value: float, from_unit: str, to_unit: str) -> float:
        for unit in (from_unit, to_unit):
            if self._converter.is_supported(unit) and domain_of(unit) is not domain:
                raise UnsupportedConversionError(
                    from_unit, to_unit, context={"expected_domain": domain.value}
                )
        return self.convert(value, from_unit, to_unit)

    def get_display_value(self, stored_value: float, stored_unit: str, display_unit: str) -> float:
        """Value to show for a stored number.

        In stored mode the document is already in the display unit and the
        value is returned unchanged.
        """
        if self.convert_stored_data or stored_unit == display_unit:
            return stored_value
        return self.convert(stored_value, stored_unit, display_unit)

    def get_stored_value(self, display_value: float, display_unit: str, stored_unit: str) -> float:
        """Value to store for a number entered in the display unit."""
        if self.convert_stored_data or display_unit == stored_unit:
            return display_value
        return self.convert(display_value, display_unit, stored_unit)

    def format_value(self, value: float, unit: str, decimal_places: int | None = None) -> str:
        """Format as "{value} {unit}" using the display decimal places."""
        if decimal_places is None:
            decimal_places = self.display_decimal_places
        return self._converter.format(value, unit, decimal_places)

    def is_unit_supported(self, unit: str) -> bool:
        return self._converter.is_supported(unit)

    # Bulk conversion

    def convert_curve_torque(self, curve: Curve, from_unit: str, to_unit: str) -> int:
        """Convert every point's torque in place (stored mode only).

        Returns:
            Number of values written

        Raises:
            ConversionAbortedError: If any point fails; no point is changed
        """
        return self._convert_curve(curve, "torque", from_unit, to_unit)

    def convert_curve_speed(self, curve: Curve, from_unit: str, to_unit: str) -> int:
        """Convert every point's speed in place (stored mode only)."""
        return self._convert_curve(curve, "rpm", from_unit, to_unit)

    def _convert_curve(self, curve: Curve, attr: str, from_unit: str, to_unit: str) -> int:
        if curve is None:
            raise InvalidArgumentError("curve must not be None", argument="curve")
        if from_unit == to_unit or not self.convert_stored_data:
            return 0

        pending: list[_PendingWrite] = []
        try:
            for point in curve.data:
                self._plan(pending, point, attr, from_unit, to_unit)
        except MotorDefToolsError as e:
            raise self._aborted(f"curve '{curve.name}'", attr, from_unit, to_unit, e) from e

        return self._commit(pending)

    def changed_fields(self, old_units: UnitSettings, new_units: UnitSettings) -> list[str]:
        """Preference fields whose labels differ, in canonical order."""
        return [
            attr
            for attr, _, _ in UNIT_SETTING_FIELDS
            if getattr(old_units, attr) != getattr(new_units, attr)
        ]

    def convert_motor_units(
        self, motor: ServoMotor, old_units: UnitSettings, new_units: UnitSettings
    ) -> ConversionReport:
        """Convert a whole document from ``old_units`` to ``new_units``.

        Motor scalars, every voltage of every drive and every curve point
        are converted for each preference field that changed. Nothing is
        written unless every conversion succeeds. In display mode nothing
        is written at all.

        Raises:
            InvalidArgumentError: If an argument is None
            ConversionAbortedError: If any value could not be converted
        """
        for name, value in (("motor", motor), ("old_units", old_units), ("new_units", new_units)):
            if value is None:
                raise InvalidArgumentError(f"{name} must not be None", argument=name)

        changed = self.changed_fields(old_units, new_units)
        report = ConversionReport(fields=changed, stored=self.convert_stored_data)
        if not self.convert_stored_data:
            logger.debug(f"Display mode: stored values left unchanged for {changed}")
            return report

        pending: list[_PendingWrite] = []
        for name in changed:
            if name not in CONVERTED_FIELDS:
                continue
            from_unit = getattr(old_units, name)
            to_unit = getattr(new_units, name)
            try:
                self._plan_motor_field(pending, motor, name, from_unit, to_unit)
            except MotorDefToolsError as e:
                subject = f"motor '{motor.motor_name}'"
                raise self._aborted(subject, name, from_unit, to_unit, e) from e

        report.values_converted = self._commit(pending)
        logger.info(
            f"Converted {report.values_converted} value(s) in motor '{motor.motor_name}' "
            f"for {', '.join(changed) or 'no fields'}"
        )
        return report

    def change_unit(self, motor: ServoMotor, name: str, new_unit: str) -> ConversionReport:
        """Change one unit preference of a document and convert its data.

        The preference is only updated when the conversion succeeds.

        Args:
            motor: Document to update
            name: Preference field (e.g. "torque", "response_time")
            new_unit: New unit label for that field

        Raises:
            InvalidArgumentError: If ``name`` is not a preference field or
                the motor has no unit preferences
            UnsupportedUnitError: If ``new_unit`` is not a known label
            UnsupportedConversionError: If ``new_unit`` belongs to another domain
            ConversionAbortedError: If converting the stored data failed
        """
        if motor is None:
            raise InvalidArgumentError("motor must not be None", argument="motor")
        if motor.units is None:
            raise InvalidArgumentError(
                "motor has no unit preferences to change",
                argument="motor",
                suggestions=["Assign motor.units = UnitSettings() first"],
            )
        domain = UnitSettings.domain_for(name)
        old_unit = getattr(motor.units, name)
        if not self._converter.is_supported(new_unit):
            raise UnsupportedUnitError(new_unit, context={"field": name})
        if domain_of(new_unit) is not domain:
            raise UnsupportedConversionError(old_unit, new_unit, context={"field": name})

        if old_unit == new_unit:
            return ConversionReport(stored=self.convert_stored_data)

        logger.info(f"Unit changed: {name} {old_unit} -> {new_unit}")
        old_units = motor.units.copy()
        new_units = motor.units.with_unit(name, new_unit)
        report = self.convert_motor_units(motor, old_units, new_units)
        setattr(motor.units, name, new_unit)
        return report

    def _plan_motor_field(
        self,
        pending: list[_PendingWrite],
        motor: ServoMotor,
        name: str,
        from_unit: str,
        to_unit: str,
    ) -> None:
        motor_attrs, voltage_attrs, point_attr = CONVERTED_FIELDS[name]

        for attr in motor_attrs:
            self._plan(pending, motor, attr, from_unit, to_unit)

        for drive in motor.drives:
            for voltage in drive.voltages:
                for attr in voltage_attrs:
                    self._plan(pending, voltage, attr, from_unit, to_unit)
                if point_attr is None:
                    continue
                for curve in voltage.curves:
                    for point in curve.data:
                        self._plan(pending, point, point_attr, from_unit, to_unit)

    def _plan(
        self, pending: list[_PendingWrite], target: Any, attr: str, from_unit: str, to_unit: str
    ) -> None:
        value = self.convert(getattr(target, attr), from_unit, to_unit)
        pending.append(_PendingWrite(target, attr, value))

    @staticmethod
    def _commit(pending: list[_PendingWrite]) -> int:
        for write in pending:
            setattr(write.target, write.attr, write.value)
        return len(pending)

    @staticmethod
    def _aborted(
        subject: str, name: str, from_unit: str, to_unit: str, error: MotorDefToolsError
    ) -> ConversionAbortedError:
        logger.warning(f"Conversion of {subject} aborted: {name} {from_unit} -> {to_unit}")
        return ConversionAbortedError(
            f"Unit conversion of {subject} aborted; no values were changed",
            context={"field": name, "from": from_unit, "to": to_unit, "reason": error.message},
            cause=error,
        )
