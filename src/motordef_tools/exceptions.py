"""
Custom exception hierarchy for motordef-tools.

Provides consistent error handling with context, suggestions, and actionable guidance.
All exceptions include:
- Context information (unit labels, entity names, field paths)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from motordef_tools.exceptions import UnsupportedUnitError, ConversionAbortedError

    # Unknown label passed to the converter
    raise UnsupportedUnitError("N-m")

    # Bulk conversion that failed part way through
    raise ConversionAbortedError(
        "Torque conversion aborted",
        context={"from": "Nm", "to": "hp"},
    )
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class MotorDefToolsError(Exception):
    """
    Base exception for all motordef-tools errors.

    Provides consistent formatting with context and suggestions.

    Attributes:
        context: Dictionary of contextual information (unit, field, entity, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class UnsupportedUnitError(MotorDefToolsError, ValueError):
    """
    Unit label is not recognized by any unit domain.

    Example::

        raise UnsupportedUnitError("N-m")

    Attributes:
        unit: The offending unit label
    """

    def __init__(
        self,
        unit: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.unit = unit
        ctx = context or {}
        ctx.setdefault("unit", unit)
        super().__init__(
            f"Unsupported unit: {unit}",
            ctx,
            suggestions or ["Run 'motordef-tools units' to list supported unit labels"],
        )


class UnsupportedConversionError(MotorDefToolsError, ValueError):
    """
    Both units are known but cannot be converted into each other.

    Raised for units of different domains and for horsepower pairings
    other than hp, W and kW.

    Example::

        raise UnsupportedConversionError("hp", "Nm")
    """

    def __init__(
        self,
        from_unit: str,
        to_unit: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.from_unit = from_unit
        self.to_unit = to_unit
        ctx = context or {}
        ctx.setdefault("from", from_unit)
        ctx.setdefault("to", to_unit)
        super().__init__(f"Cannot convert from {from_unit} to {to_unit}", ctx, suggestions)


class InvalidArgumentError(MotorDefToolsError, ValueError):
    """
    A required argument is missing, blank, or out of range.

    Example::

        raise InvalidArgumentError("verified_by must not be blank", argument="verified_by")
    """

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.argument = argument
        ctx = context or {}
        if argument and "argument" not in ctx:
            ctx["argument"] = argument
        super().__init__(message, ctx, suggestions)


class ConversionAbortedError(MotorDefToolsError):
    """
    A bulk unit conversion failed and nothing was written.

    The failing sub-conversion is available as ``cause`` and is also
    chained as ``__cause__``.

    Example::

        raise ConversionAbortedError(
            "Motor unit conversion aborted",
            context={"field": "power", "from": "hp", "to": "Nm"},
            cause=err,
        ) from err
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.cause = cause
        super().__init__(
            message,
            context,
            suggestions or ["The document was left unchanged; check both unit labels"],
        )


class ConfigurationError(MotorDefToolsError):
    """
    Configuration or settings error.

    Raised when configuration values are present but invalid, such as an
    unknown unit label for a domain or a negative decimal place count.

    Example::

        raise ConfigurationError(
            "Invalid default unit",
            context={"units.torque": "N-m", "available": ["Nm", "lbf-ft"]},
            suggestions=["Use one of the available torque units"]
        )
    """

    pass


__all__ = [
    "MotorDefToolsError",
    "UnsupportedUnitError",
    "UnsupportedConversionError",
    "InvalidArgumentError",
    "ConversionAbortedError",
    "ConfigurationError",
]
