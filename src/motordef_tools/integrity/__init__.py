"""
Data integrity for motor definitions.

Computes canonical SHA-256 checksums of motors, drives and curves and uses
them to sign data and detect later changes.
"""

from .canonical import (
    CanonicalRecord,
    IntegrityHasher,
    canonical_json,
    encode_number,
    encode_string,
)
from .service import (
    DataIntegrityService,
    IntegrityReport,
    IntegrityStatus,
    SignableEntity,
    SignatureService,
    iter_signable,
)

__all__ = [
    "CanonicalRecord",
    "DataIntegrityService",
    "IntegrityHasher",
    "IntegrityReport",
    "IntegrityStatus",
    "SignableEntity",
    "SignatureService",
    "canonical_json",
    "encode_number",
    "encode_string",
    "iter_signable",
]
