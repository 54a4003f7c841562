from .level_key import LevelKey, Variant
from .verifier_record import VerifierRecord, ResolveOutcome, ResolveStatus

__all__ = [
    "LevelKey",
    "Variant",
    "VerifierRecord",
    "ResolveOutcome",
    "ResolveStatus",
]
