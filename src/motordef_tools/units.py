"""
Unit conversion engine for motordef-tools.

Converts scalar values between the fixed set of unit labels used by motor
definition documents. Each label belongs to exactly one domain (torque,
speed, power, ...) and units never convert across domains.

Most domains are linear: a value is scaled into the domain's base unit and
back out again. Two cases are handled explicitly:

- Horsepower is kept out of the linear power table and only converts
  to/from W and kW through :data:`HP_TO_WATTS`.
- Temperature is affine (offsets as well as scale) and uses a 3x3 table.

Examples:
    >>> converter = UnitConverter()
    >>> round(converter.convert(10, "Nm", "lbf-in"), 4)
    88.5075
    >>> converter.convert(1, "hp", "W")
    745.699872
    >>> converter.format(88.50745, "lbf-in", 2)
    '88.51 lbf-in'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .exceptions import InvalidArgumentError, UnsupportedConversionError, UnsupportedUnitError

__all__ = [
    "UnitDomain",
    "UnitDefinition",
    "UnitConverter",
    "HP_TO_WATTS",
    "UNIT_DEFINITIONS",
    "domain_of",
    "supported_units",
]

# Mechanical horsepower in watts
HP_TO_WATTS = 745.699872

HORSEPOWER = "hp"

# Newtons per pound-force and metres per foot/inch
_N_PER_LBF = 4.4482216152605
_M_PER_FT = 0.3048
_M_PER_IN = 0.0254


class UnitDomain(str, Enum):
    """Physical quantity category whose units are mutually convertible."""

    TORQUE = "torque"
    SPEED = "speed"
    POWER = "power"
    MASS = "mass"
    VOLTAGE = "voltage"
    CURRENT = "current"
    INERTIA = "inertia"
    TORQUE_CONSTANT = "torque_constant"
    BACKLASH = "backlash"
    TIME = "time"
    PERCENTAGE = "percentage"
    TEMPERATURE = "temperature"

    @classmethod
    def from_string(cls, value: str | None) -> UnitDomain | None:
        """Parse a domain name such as "torque" or "Torque-Constant".

        Returns:
            UnitDomain or None if value is None or not a domain name
        """
        if value is None:
            return None
        key = value.lower().strip().replace("-", "_").replace(" ", "_")
        if key in ("weight",):
            return cls.MASS
        if key in ("response_time",):
            return cls.TIME
        for domain in cls:
            if domain.value == key:
                return domain
        return None


@dataclass(frozen=True)
class UnitDefinition:
    """One supported unit label.

    ``factor`` scales a value in this unit into the domain base unit. It is
    None for units converted by explicit rules (horsepower, temperature).
    """

    label: str
    domain: UnitDomain
    factor: float | None


# The first unit listed for each domain is its base unit.
UNIT_DEFINITIONS: tuple[UnitDefinition, ...] = (
    UnitDefinition("Nm", UnitDomain.TORQUE, 1.0),
    UnitDefinition("lbf-ft", UnitDomain.TORQUE, _N_PER_LBF * _M_PER_FT),
    UnitDefinition("lbf-in", UnitDomain.TORQUE, _N_PER_LBF * _M_PER_IN),
    UnitDefinition("oz-in", UnitDomain.TORQUE, _N_PER_LBF / 16.0 * _M_PER_IN),
    UnitDefinition("rpm", UnitDomain.SPEED, 1.0),
    UnitDefinition("W", UnitDomain.POWER, 1.0),
    UnitDefinition("kW", UnitDomain.POWER, 1000.0),
    UnitDefinition(HORSEPOWER, UnitDomain.POWER, None),
    UnitDefinition("kg", UnitDomain.MASS, 1.0),
    UnitDefinition("g", UnitDomain.MASS, 0.001),
    UnitDefinition("lbs", UnitDomain.MASS, 0.45359237),
    UnitDefinition("oz", UnitDomain.MASS, 0.45359237 / 16.0),
    UnitDefinition("V", UnitDomain.VOLTAGE, 1.0),
    UnitDefinition("kV", UnitDomain.VOLTAGE, 1000.0),
    UnitDefinition("A", UnitDomain.CURRENT, 1.0),
    UnitDefinition("mA", UnitDomain.CURRENT, 0.001),
    UnitDefinition("kg-m^2", UnitDomain.INERTIA, 1.0),
    UnitDefinition("g-cm^2", UnitDomain.INERTIA, 1e-7),
    UnitDefinition("Nm/A", UnitDomain.TORQUE_CONSTANT, 1.0),
    UnitDefinition("arcmin", UnitDomain.BACKLASH, 1.0),
    UnitDefinition("arcsec", UnitDomain.BACKLASH, 1.0 / 60.0),
    UnitDefinition("ms", UnitDomain.TIME, 1.0),
    UnitDefinition("s", UnitDomain.TIME, 1000.0),
    UnitDefinition("%", UnitDomain.PERCENTAGE, 1.0),
    UnitDefinition("C", UnitDomain.TEMPERATURE, None),
    UnitDefinition("F", UnitDomain.TEMPERATURE, None),
    UnitDefinition("K", UnitDomain.TEMPERATURE, None),
)

_UNITS_BY_LABEL: dict[str, UnitDefinition] = {unit.label: unit for unit in UNIT_DEFINITIONS}

# (from, to) -> affine conversion
_TEMPERATURE_TABLE: dict[tuple[str, str], Callable[[float], float]] = {
    ("C", "F"): lambda c: c * 9.0 / 5.0 + 32.0,
    ("C", "K"): lambda c: c + 273.15,
    ("F", "C"): lambda f: (f - 32.0) * 5.0 / 9.0,
    ("F", "K"): lambda f: (f - 32.0) * 5.0 / 9.0 + 273.15,
    ("K", "C"): lambda k: k - 273.15,
    ("K", "F"): lambda k: (k - 273.15) * 9.0 / 5.0 + 32.0,
}


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def _lookup(unit: str) -> UnitDefinition:
    try:
        return _UNITS_BY_LABEL[unit]
    except KeyError:
        raise UnsupportedUnitError(unit) from None


def domain_of(unit: str) -> UnitDomain:
    """Get the domain a unit label belongs to.

    Raises:
        UnsupportedUnitError: If the label is not in the unit table
    """
    return _lookup(unit).domain


def supported_units(domain: UnitDomain | None = None) -> tuple[str, ...]:
    """List supported unit labels, optionally restricted to one domain.

    Labels are returned in table order, base unit first.
    """
    return tuple(
        unit.label for unit in UNIT_DEFINITIONS if domain is None or unit.domain is domain
    )


class UnitConverter:
    """Stateless converter between supported unit labels.

    Examples:
        >>> UnitConverter().convert(100, "C", "F")
        212.0
        >>> UnitConverter().try_convert(1, "hp", "Nm")
        (False, 1)
    """

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        """Convert a value from one unit to another.

        Args:
            value: Value expressed in ``from_unit``
            from_unit: Source unit label (e.g. "Nm")
            to_unit: Target unit label (e.g. "lbf-in")

        Returns:
            The value expressed in ``to_unit``. Identical labels return
            ``value`` itself.

        Raises:
            InvalidArgumentError: If a unit label is blank
            UnsupportedUnitError: If a unit label is not recognized
            UnsupportedConversionError: If the units are in different domains
                or form an unsupported horsepower pairing
        """
        if _is_blank(from_unit):
            raise InvalidArgumentError("from_unit must not be blank", argument="from_unit")
        if _is_blank(to_unit):
            raise InvalidArgumentError("to_unit must not be blank", argument="to_unit")

        if from_unit == to_unit:
            return value

        source = _lookup(from_unit)
        target = _lookup(to_unit)

        if from_unit == HORSEPOWER or to_unit == HORSEPOWER:
            return self._convert_horsepower(value, from_unit, to_unit)

        if source.domain is not target.domain:
            raise UnsupportedConversionError(
                from_unit,
                to_unit,
                context={"from_domain": source.domain.value, "to_domain": target.domain.value},
            )

        if source.domain is UnitDomain.TEMPERATURE:
            return _TEMPERATURE_TABLE[(from_unit, to_unit)](value)

        value_in_base = value * source.factor
        return value_in_base / target.factor

    def try_convert(self, value: float, from_unit: str, to_unit: str) -> tuple[bool, float]:
        """Convert without raising.

        Returns:
            ``(True, converted)`` on success, ``(False, value)`` otherwise
        """
        if _is_blank(from_unit) or _is_blank(to_unit):
            return False, value
        if from_unit == to_unit:
            return True, value

        try:
            return True, self.convert(value, from_unit, to_unit)
        except (UnsupportedUnitError, UnsupportedConversionError):
            return False, value

    def is_supported(self, unit: str) -> bool:
        """Check whether a unit label is supported. Never raises."""
        if _is_blank(unit):
            return False
        return unit in _UNITS_BY_LABEL

    def format(self, value: float, unit: str, decimal_places: int = 2) -> str:
        """Format a value with its unit for display.

        Args:
            value: Numeric value
            unit: Unit label appended after a single space
            decimal_places: Fixed number of decimal places to show

        Returns:
            String like "88.51 lbf-in"

        Raises:
            InvalidArgumentError: If unit is blank or decimal_places is negative
        """
        if _is_blank(unit):
            raise InvalidArgumentError("unit must not be blank", argument="unit")
        if decimal_places < 0:
            raise InvalidArgumentError(
                "Decimal places cannot be negative.", argument="decimal_places"
            )

        rounded = round(value, decimal_places)
        return f"{rounded:.{decimal_places}f} {unit}"

    @staticmethod
    def _convert_horsepower(value: float, from_unit: str, to_unit: str) -> float:
        """Convert through watts for the hp <-> W/kW pairings only."""
        if from_unit == HORSEPOWER:
            watts = value * HP_TO_WATTS
            if to_unit == "W":
                return watts
            if to_unit == "kW":
                return watts / 1000.0
            raise UnsupportedConversionError(from_unit, to_unit)

        if from_unit == "W":
            watts = value
        elif from_unit == "kW":
            watts = value * 1000.0
        else:
            raise UnsupportedConversionError(from_unit, to_unit)
        return watts / HP_TO_WATTS
