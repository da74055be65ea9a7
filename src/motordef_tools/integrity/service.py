"""
Signing and verification of motors, drives and curves.

Example:
    >>> service = DataIntegrityService()
    >>> motor.motor_signature = service.sign_motor_properties(motor, "qa@example.com")
    >>> service.verify_motor_properties(motor)
    True
    >>> motor.power = 900.0
    >>> service.verify_motor_properties(motor)
    False

Verification always recomputes the checksum from current data; results are
never cached. Any edit to a signed field, including a stored-mode unit
conversion, therefore makes the signature stale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from motordef_tools.exceptions import InvalidArgumentError
from motordef_tools.schema.motor import Curve, Drive, ServoMotor
from motordef_tools.schema.signature import ValidationSignature

from .canonical import IntegrityHasher

__all__ = [
    "DataIntegrityService",
    "IntegrityReport",
    "IntegrityStatus",
    "SignableEntity",
    "SignatureService",
    "iter_signable",
]

logger = logging.getLogger(__name__)

SignableEntity = Union[ServoMotor, Drive, Curve]


@dataclass
class IntegrityStatus:
    """Verification state of one signable entity within a document."""

    path: str
    kind: str
    name: str
    signed: bool
    verified: bool

    @property
    def stale(self) -> bool:
        """Signed, but the data no longer matches the signature."""
        return self.signed and not self.verified

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "kind": self.kind,
            "name": self.name,
            "signed": self.signed,
            "verified": self.verified,
        }


@dataclass
class IntegrityReport:
    """Verification state of every signable entity in a motor document."""

    entries: list[IntegrityStatus] = field(default_factory=list)

    @property
    def stale(self) -> list[IntegrityStatus]:
        return [entry for entry in self.entries if entry.stale]

    @property
    def signed(self) -> list[IntegrityStatus]:
        return [entry for entry in self.entries if entry.signed]

    @property
    def all_verified(self) -> bool:
        """True when no present signature is stale."""
        return not self.stale

    def get(self, path: str) -> IntegrityStatus | None:
        for entry in self.entries:
            if entry.path == path:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "all_verified": self.all_verified,
            "entries": [entry.to_dict() for entry in self.entries],
        }


def _require_entity(entity: Any, name: str) -> None:
    if entity is None:
        raise InvalidArgumentError(f"{name} must not be None", argument=name)


def _require_verifier(verified_by: Any) -> None:
    if not isinstance(verified_by, str) or not verified_by.strip():
        raise InvalidArgumentError(
            "verified_by must not be blank",
            argument="verified_by",
            suggestions=["Pass the email address or user name of the verifier"],
        )


class DataIntegrityService:
    """
    SHA-256 based signing and verification.

    Motor checksums cover motor-level properties only; drive checksums
    cover drive identity and voltage ratings but not curves; curve
    checksums cover the curve's name, locked flag, notes and data points.
    """

    def __init__(self, hasher: IntegrityHasher | None = None):
        self._hasher = hasher or IntegrityHasher()

    # Checksums

    def compute_motor_checksum(self, motor: ServoMotor) -> str:
        _require_entity(motor, "motor")
        checksum = self._hasher.checksum(self._hasher.motor_record(motor))
        logger.debug(f"Motor '{motor.motor_name}' checksum: {checksum}")
        return checksum

    def compute_drive_checksum(self, drive: Drive) -> str:
        _require_entity(drive, "drive")
        checksum = self._hasher.checksum(self._hasher.drive_record(drive))
        logger.debug(f"Drive '{drive.name}' checksum: {checksum}")
        return checksum

    def compute_curve_checksum(self, curve: Curve) -> str:
        _require_entity(curve, "curve")
        checksum = self._hasher.checksum(self._hasher.curve_record(curve))
        logger.debug(f"Curve '{curve.name}' checksum: {checksum}")
        return checksum

    def compute_checksum(self, entity: SignableEntity) -> str:
        """Checksum of a motor, drive or curve."""
        _require_entity(entity, "entity")
        return self._hasher.checksum(self._hasher.record_for(entity))

    # Signing

    def sign_motor_properties(self, motor: ServoMotor, verified_by: str) -> ValidationSignature:
        _require_entity(motor, "motor")
        _require_verifier(verified_by)
        return self._new_signature(self.compute_motor_checksum(motor), verified_by, motor)

    def sign_drive(self, drive: Drive, verified_by: str) -> ValidationSignature:
        _require_entity(drive, "drive")
        _require_verifier(verified_by)
        return self._new_signature(self.compute_drive_checksum(drive), verified_by, drive)

    def sign_curve(self, curve: Curve, verified_by: str) -> ValidationSignature:
        _require_entity(curve, "curve")
        _require_verifier(verified_by)
        return self._new_signature(self.compute_curve_checksum(curve), verified_by, curve)

    def sign(
        self, entity: SignableEntity, verified_by: str, attach: bool = False
    ) -> ValidationSignature:
        """Sign a motor, drive or curve.

        Args:
            entity: Entity to sign
            verified_by: Email or user name of the verifier
            attach: Also store the signature on the entity

        Returns:
            The new signature record

        Raises:
            InvalidArgumentError: If entity is None, of an unsignable type,
                or verified_by is blank
        """
        _require_entity(entity, "entity")
        _require_verifier(verified_by)
        checksum = self.compute_checksum(entity)
        signature = self._new_signature(checksum, verified_by, entity)
        if attach:
            _set_signature(entity, signature)
        return signature

    # Verification

    def verify_motor_properties(self, motor: ServoMotor) -> bool:
        _require_entity(motor, "motor")
        return self._matches(motor, motor.motor_signature)

    def verify_drive(self, drive: Drive) -> bool:
        _require_entity(drive, "drive")
        return self._matches(drive, drive.drive_signature)

    def verify_curve(self, curve: Curve) -> bool:
        _require_entity(curve, "curve")
        return self._matches(curve, curve.curve_signature)

    def verify(self, entity: SignableEntity) -> bool:
        """Check an entity's stored signature against its current data.

        Returns False, without raising, when the entity has no signature or
        the signature lacks a checksum or verifier.
        """
        _require_entity(entity, "entity")
        if not isinstance(entity, (ServoMotor, Drive, Curve)):
            raise InvalidArgumentError(
                f"Cannot verify {type(entity).__name__}", argument="entity"
            )
        return self._matches(entity, _get_signature(entity))

    def audit(self, motor: ServoMotor) -> IntegrityReport:
        """Verification status of the motor, each drive and each curve."""
        _require_entity(motor, "motor")
        report = IntegrityReport()
        for path, kind, name, entity in iter_signable(motor):
            report.entries.append(self._status(path, kind, name, entity))
        return report

    def _status(self, path: str, kind: str, name: str, entity: SignableEntity) -> IntegrityStatus:
        signature = _get_signature(entity)
        return IntegrityStatus(
            path=path,
            kind=kind,
            name=name,
            signed=signature is not None,
            verified=self._matches(entity, signature),
        )

    def _matches(self, entity: SignableEntity, signature: ValidationSignature | None) -> bool:
        if signature is None or not signature.is_valid():
            logger.debug(f"{type(entity).__name__} has no valid signature")
            return False

        current = self.compute_checksum(entity)
        if current.lower() != signature.checksum.lower():
            logger.debug(
                f"{type(entity).__name__} checksum mismatch: "
                f"stored {signature.checksum}, current {current}"
            )
            return False
        return True

    @staticmethod
    def _new_signature(
        checksum: str, verified_by: str, entity: SignableEntity
    ) -> ValidationSignature:
        logger.info(f"Signed {type(entity).__name__} as verified by {verified_by}")
        return ValidationSignature(checksum=checksum, verified_by=verified_by)


def iter_signable(motor: ServoMotor) -> Iterator[tuple[str, str, str, SignableEntity]]:
    """Yield ``(path, kind, name, entity)`` for the motor, each drive and each curve."""
    yield "motor", "motor", motor.motor_name, motor
    for d, drive in enumerate(motor.drives):
        drive_path = f"drives[{d}]"
        yield drive_path, "drive", drive.name, drive
        for v, voltage in enumerate(drive.voltages):
            for c, curve in enumerate(voltage.curves):
                yield f"{drive_path}.voltages[{v}].curves[{c}]", "curve", curve.name, curve


def _get_signature(entity: SignableEntity) -> ValidationSignature | None:
    if isinstance(entity, ServoMotor):
        return entity.motor_signature
    if isinstance(entity, Drive):
        return entity.drive_signature
    return entity.curve_signature


def _set_signature(entity: SignableEntity, signature: ValidationSignature) -> None:
    if isinstance(entity, ServoMotor):
        entity.motor_signature = signature
    elif isinstance(entity, Drive):
        entity.drive_signature = signature
    else:
        entity.curve_signature = signature


# Name used by callers that think in terms of sign/verify
SignatureService = DataIntegrityService
