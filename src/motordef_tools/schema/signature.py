"""
Pydantic model for validation signatures.

A signature records that a person verified a motor, drive or curve at a
point in time, together with the checksum of the data they saw. It is
persisted as::

    {"checksum": "...", "timestamp": "2024-01-15T10:30:00Z",
     "verifiedBy": "qa@example.com", "algorithm": "SHA256"}
"""

from __future__ import annotations

import datetime
from typing import Any

try:
    from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
except ImportError as e:
    raise ImportError(
        "pydantic is required for validation signatures. Install it with: pip install pydantic"
    ) from e

__all__ = ["SIGNATURE_ALGORITHM", "ValidationSignature", "utc_now"]

SIGNATURE_ALGORITHM = "SHA256"


def utc_now() -> datetime.datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


class ValidationSignature(BaseModel):
    """Checksum, verifier and time of a signing."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    checksum: str = Field(default="", description="Lowercase hex SHA-256 of the signed data")
    timestamp: datetime.datetime = Field(
        default_factory=utc_now, description="UTC instant the data was signed"
    )
    verified_by: str = Field(
        default="", alias="verifiedBy", description="Email or user name of the verifier"
    )
    algorithm: str = Field(default=SIGNATURE_ALGORITHM, description="Hash algorithm name")

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, v: datetime.datetime) -> datetime.datetime:
        """Treat naive datetimes as UTC and normalize aware ones to UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=datetime.timezone.utc)
        return v.astimezone(datetime.timezone.utc)

    @field_serializer("timestamp")
    def serialize_timestamp(self, v: datetime.datetime) -> str:
        return v.isoformat().replace("+00:00", "Z")

    def is_valid(self) -> bool:
        """True when both checksum and verifier are present.

        This is a structural check only; whether the checksum matches the
        current data is decided by the integrity service.
        """
        return bool(self.checksum.strip()) and bool(self.verified_by.strip())

    def to_dict(self) -> dict[str, Any]:
        """Serialize with persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationSignature:
        """Load from the persisted representation."""
        return cls.model_validate(data)
