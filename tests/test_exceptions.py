"""Tests for motordef_tools.exceptions module."""

import pytest

from motordef_tools.exceptions import (
    ConfigurationError,
    ConversionAbortedError,
    InvalidArgumentError,
    MotorDefToolsError,
    UnsupportedConversionError,
    UnsupportedUnitError,
)


class TestMotorDefToolsError:
    """Tests for the base exception class."""

    def test_basic_message(self):
        """Test basic error message."""
        err = MotorDefToolsError("Something went wrong")
        assert str(err) == "Something went wrong"
        assert err.message == "Something went wrong"
        assert err.context == {}
        assert err.suggestions == []

    def test_with_context(self):
        """Test error with context dictionary."""
        err = MotorDefToolsError(
            "Conversion failed",
            context={"field": "torque", "from": "Nm"},
        )
        msg = str(err)
        assert "Conversion failed" in msg
        assert "Context:" in msg
        assert "field: torque" in msg
        assert "from: Nm" in msg

    def test_with_suggestions(self):
        """Test error with suggestions list."""
        err = MotorDefToolsError(
            "Invalid unit",
            suggestions=["Check the label spelling", "List units with 'mdt units'"],
        )
        msg = str(err)
        assert "Suggestions:" in msg
        assert "  - Check the label spelling" in msg
        assert "List units with 'mdt units'" in msg


class TestUnsupportedUnitError:
    """Tests for UnsupportedUnitError."""

    def test_names_unit(self):
        """The offending label is in the message and context."""
        err = UnsupportedUnitError("N-m")
        assert err.unit == "N-m"
        assert err.message == "Unsupported unit: N-m"
        assert err.context["unit"] == "N-m"

    def test_default_suggestion(self):
        """A suggestion points at the units command."""
        err = UnsupportedUnitError("N-m")
        assert any("units" in suggestion for suggestion in err.suggestions)

    def test_is_value_error(self):
        """Can be caught as ValueError."""
        assert isinstance(UnsupportedUnitError("x"), ValueError)
        assert isinstance(UnsupportedUnitError("x"), MotorDefToolsError)


class TestUnsupportedConversionError:
    """Tests for UnsupportedConversionError."""

    def test_names_both_units(self):
        """Both labels are kept."""
        err = UnsupportedConversionError("hp", "Nm")
        assert err.from_unit == "hp"
        assert err.to_unit == "Nm"
        assert err.message == "Cannot convert from hp to Nm"
        assert err.context == {"from": "hp", "to": "Nm"}

    def test_extra_context(self):
        """Extra context is merged with the units."""
        err = UnsupportedConversionError("W", "Nm", context={"field": "power"})
        assert err.context["field"] == "power"
        assert err.context["from"] == "W"

    def test_is_value_error(self):
        """Can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise UnsupportedConversionError("hp", "Nm")


class TestInvalidArgumentError:
    """Tests for InvalidArgumentError."""

    def test_argument_in_context(self):
        """The argument name is recorded."""
        err = InvalidArgumentError("verified_by must not be blank", argument="verified_by")
        assert err.argument == "verified_by"
        assert "argument: verified_by" in str(err)

    def test_without_argument(self):
        """The argument name is optional."""
        err = InvalidArgumentError("bad")
        assert err.argument is None
        assert str(err) == "bad"


class TestConversionAbortedError:
    """Tests for ConversionAbortedError."""

    def test_keeps_cause(self):
        """The failing sub-conversion is available."""
        cause = UnsupportedConversionError("W", "Nm")
        err = ConversionAbortedError("aborted", context={"field": "power"}, cause=cause)
        assert err.cause is cause
        assert "field: power" in str(err)

    def test_default_suggestion(self):
        """The message says the document is unchanged."""
        err = ConversionAbortedError("aborted")
        assert "unchanged" in str(err)


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_is_base_error(self):
        """ConfigurationError is part of the hierarchy."""
        err = ConfigurationError("Invalid default unit", context={"units.torque": "N-m"})
        assert isinstance(err, MotorDefToolsError)
        assert "units.torque: N-m" in str(err)
