"""Pytest fixtures for motordef-tools tests."""

import json

import pytest

from motordef_tools.schema.motor import (
    Curve,
    DataPoint,
    Drive,
    MotorMetadata,
    ServoMotor,
    UnitSettings,
    Voltage,
)


def make_curve(name: str = "Peak", points: int = 3) -> Curve:
    """Curve with evenly spaced points from 0 to 3000 rpm."""
    data = [
        DataPoint(percent=i * 50, rpm=i * 1500.0, torque=10.0 - i * 2.5) for i in range(points)
    ]
    return Curve(name=name, data=data)


def make_motor() -> ServoMotor:
    """Small but complete motor definition in SI units."""
    voltage = Voltage(
        value=208.0,
        power=750.0,
        max_speed=5000.0,
        rated_speed=3000.0,
        rated_continuous_torque=2.39,
        rated_peak_torque=7.16,
        continuous_amperage=4.2,
        peak_amperage=12.6,
        curves=[make_curve("Peak"), make_curve("Continuous")],
    )
    drive = Drive(
        name="Drive A",
        manufacturer="Acme",
        part_number="DRV-100",
        voltages=[voltage],
    )
    return ServoMotor(
        motor_name="Test Motor",
        manufacturer="Acme",
        part_number="M-750",
        power=750.0,
        max_speed=5000.0,
        rated_speed=3000.0,
        rated_continuous_torque=2.39,
        rated_peak_torque=7.16,
        weight=2.5,
        rotor_inertia=0.00012,
        feedback_ppr=131072,
        has_brake=True,
        brake_torque=3.2,
        brake_amperage=0.5,
        brake_voltage=24.0,
        brake_release_time=25.0,
        brake_engage_time_diode=50.0,
        brake_engage_time_mov=15.0,
        brake_backlash=1.0,
        units=UnitSettings(),
        drives=[drive],
        metadata=MotorMetadata(created="2026-01-05", notes="fixture"),
    )


@pytest.fixture
def curve():
    """A three-point curve named "Peak"."""
    return make_curve()


@pytest.fixture
def motor():
    """A motor with one drive, one voltage and two curves."""
    return make_motor()


@pytest.fixture
def drive(motor):
    """The motor's only drive."""
    return motor.drives[0]


@pytest.fixture
def motor_file(tmp_path, motor):
    """The fixture motor saved as JSON."""
    path = tmp_path / "motor.json"
    path.write_text(json.dumps(motor.to_dict(), indent=2))
    return path
