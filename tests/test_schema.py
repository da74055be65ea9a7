"""Tests for motor definition models and validation signatures."""

import datetime
import json

import pytest

from motordef_tools.exceptions import InvalidArgumentError
from motordef_tools.schema import (
    CURRENT_SCHEMA_VERSION,
    SIGNATURE_ALGORITHM,
    Curve,
    DataPoint,
    Drive,
    ServoMotor,
    UnitSettings,
    ValidationSignature,
    check_document,
)
from motordef_tools.units import UnitDomain


class TestValidationSignature:
    """Test the pydantic signature record."""

    def test_defaults(self):
        """A new signature is unsigned SHA256 stamped now."""
        before = datetime.datetime.now(datetime.timezone.utc)
        signature = ValidationSignature()
        assert signature.checksum == ""
        assert signature.verified_by == ""
        assert signature.algorithm == SIGNATURE_ALGORITHM == "SHA256"
        assert signature.timestamp.tzinfo is not None
        assert signature.timestamp >= before

    def test_is_valid_requires_checksum_and_verifier(self):
        """Both checksum and verifier must be non-blank."""
        assert ValidationSignature(checksum="ab", verified_by="qa").is_valid() is True
        assert ValidationSignature(checksum="", verified_by="qa").is_valid() is False
        assert ValidationSignature(checksum="ab", verified_by="  ").is_valid() is False
        assert ValidationSignature().is_valid() is False

    def test_to_dict_uses_persisted_names(self):
        """Serialized keys are camelCase and the timestamp ends in Z."""
        signature = ValidationSignature(
            checksum="abc123",
            verified_by="qa@example.com",
            timestamp=datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc),
        )
        assert signature.to_dict() == {
            "checksum": "abc123",
            "timestamp": "2024-01-15T10:30:00Z",
            "verifiedBy": "qa@example.com",
            "algorithm": "SHA256",
        }

    def test_from_dict(self):
        """The persisted form loads back into a signature."""
        signature = ValidationSignature.from_dict(
            {
                "checksum": "abc123",
                "timestamp": "2024-01-15T10:30:00Z",
                "verifiedBy": "qa@example.com",
                "algorithm": "SHA256",
            }
        )
        assert signature.verified_by == "qa@example.com"
        assert signature.timestamp == datetime.datetime(
            2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc
        )

    def test_naive_timestamp_is_utc(self):
        """Naive datetimes are taken as UTC."""
        signature = ValidationSignature(timestamp=datetime.datetime(2024, 1, 15, 10, 30))
        assert signature.timestamp.utcoffset() == datetime.timedelta(0)
        assert signature.to_dict()["timestamp"] == "2024-01-15T10:30:00Z"

    def test_offset_timestamp_normalized(self):
        """Aware datetimes in other zones are converted to UTC."""
        zone = datetime.timezone(datetime.timedelta(hours=2))
        timestamp = datetime.datetime(2024, 1, 15, 12, 30, tzinfo=zone)
        signature = ValidationSignature(timestamp=timestamp)
        assert signature.to_dict()["timestamp"] == "2024-01-15T10:30:00Z"


class TestUnitSettings:
    """Test the unit preference record."""

    def test_defaults(self):
        """Defaults are SI-style labels."""
        units = UnitSettings()
        assert units.torque == "Nm"
        assert units.speed == "rpm"
        assert units.power == "W"
        assert units.weight == "kg"
        assert units.inertia == "kg-m^2"
        assert units.response_time == "ms"
        assert units.temperature == "C"

    def test_to_dict_order(self):
        """Dictionary keys follow the canonical order."""
        keys = list(UnitSettings().to_dict())
        assert keys == [
            "torque",
            "speed",
            "power",
            "weight",
            "voltage",
            "current",
            "inertia",
            "torqueConstant",
            "backlash",
            "responseTime",
            "percentage",
            "temperature",
        ]

    def test_from_dict_partial(self):
        """Missing keys keep their defaults."""
        units = UnitSettings.from_dict({"torque": "lbf-in", "responseTime": "s"})
        assert units.torque == "lbf-in"
        assert units.response_time == "s"
        assert units.speed == "rpm"

    def test_with_unit_copies(self):
        """with_unit leaves the original untouched."""
        units = UnitSettings()
        updated = units.with_unit("power", "hp")
        assert updated.power == "hp"
        assert units.power == "W"

    def test_with_unit_unknown_field(self):
        """Unknown preference fields are rejected."""
        with pytest.raises(InvalidArgumentError):
            UnitSettings().with_unit("colour", "red")

    def test_domain_for(self):
        """Preference fields map to unit domains."""
        assert UnitSettings.domain_for("weight") is UnitDomain.MASS
        assert UnitSettings.domain_for("response_time") is UnitDomain.TIME


class TestMotorModel:
    """Test motor document models."""

    def test_schema_version_default(self):
        """New motors carry the current schema version."""
        assert ServoMotor().schema_version == CURRENT_SCHEMA_VERSION == "1.0.0"

    def test_round_trip(self, motor):
        """to_dict and from_dict preserve every field."""
        motor.motor_signature = ValidationSignature(checksum="ab", verified_by="qa")
        loaded = ServoMotor.from_dict(motor.to_dict())
        assert loaded.to_dict() == motor.to_dict()
        assert loaded.feedback_ppr == 131072
        assert loaded.has_brake is True
        assert loaded.drives[0].voltages[0].curves[1].name == "Continuous"

    def test_to_dict_keys(self, motor):
        """Document keys are camelCase."""
        data = motor.to_dict()
        assert data["motorName"] == "Test Motor"
        assert data["ratedContinuousTorque"] == 2.39
        assert data["units"]["torque"] == "Nm"
        assert data["drives"][0]["partNumber"] == "DRV-100"
        assert data["motorSignature"] is None

    def test_from_dict_coerces_numbers(self):
        """Integral JSON numbers become floats for float fields."""
        motor = ServoMotor.from_dict({"motorName": "M", "power": 750, "feedbackPpr": 1024.0})
        assert isinstance(motor.power, float)
        assert isinstance(motor.feedback_ppr, int)

    def test_save_and_load(self, tmp_path, motor):
        """A saved motor loads back identically."""
        path = tmp_path / "motor.json"
        motor.save(path)
        assert ServoMotor.load(path).to_dict() == motor.to_dict()

    def test_load_rejects_editor_file_keys(self, tmp_path):
        """Files using other key names are rejected instead of zero-filled."""
        path = tmp_path / "editor.json"
        path.write_text(json.dumps({"motorName": "M", "brakeEngageTimeMOV": 12.5}))

        with pytest.raises(InvalidArgumentError) as exc_info:
            ServoMotor.load(path)
        assert "brakeEngageTimeMOV" in str(exc_info.value)

    def test_load_rejects_series_voltage(self, tmp_path, motor):
        """Voltages keyed by "voltage" with series data are rejected."""
        data = motor.to_dict()
        data["drives"][0]["voltages"] = [
            {"voltage": 230, "percent": [0, 50], "rpm": [0, 1500], "series": {"Peak": {}}}
        ]
        path = tmp_path / "editor.json"
        path.write_text(json.dumps(data))

        with pytest.raises(InvalidArgumentError) as exc_info:
            ServoMotor.load(path)
        message = str(exc_info.value)
        assert "drives[0].voltages[0]" in message
        assert "series" in message

    def test_load_requires_identifying_keys(self, tmp_path, motor):
        """Data points must carry percent, rpm and torque."""
        data = motor.to_dict()
        del data["drives"][0]["voltages"][0]["curves"][0]["data"][1]["torque"]
        path = tmp_path / "motor.json"
        path.write_text(json.dumps(data))

        with pytest.raises(InvalidArgumentError, match="Missing keys"):
            ServoMotor.load(path)

    def test_check_document_accepts_saved_form(self, motor):
        """Everything to_dict writes passes the document check."""
        motor.motor_signature = ValidationSignature(checksum="ab", verified_by="qa")
        check_document(motor.to_dict())

    def test_check_document_rejects_non_object(self):
        """A JSON list is not a motor definition."""
        with pytest.raises(InvalidArgumentError, match="Expected an object"):
            check_document([])

    def test_curve_signature_round_trip(self):
        """Curve signatures survive serialization."""
        curve = Curve(
            name="Peak",
            data=[DataPoint(0, 0.0, 5.0)],
            curve_signature=ValidationSignature(checksum="ab", verified_by="qa"),
        )
        loaded = Curve.from_dict(curve.to_dict())
        assert loaded.curve_signature.checksum == "ab"
        assert loaded.curve_signature.verified_by == "qa"

    def test_drive_defaults(self):
        """Drives start without voltages or signature."""
        drive = Drive(name="D")
        assert drive.voltages == []
        assert drive.drive_signature is None
