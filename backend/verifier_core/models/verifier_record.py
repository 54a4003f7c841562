"""
Verification record for one level, plus the outcome handed to resolve() observers.
"""
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Hashable, Optional, Tuple

# Only the first two distinct names make up the composite label.
CREDITED_NAME_LIMIT = 2
NAME_JOINER = " & "


@dataclass(frozen=True)
class VerifierRecord:
    """
    names: distinct credited names in first-seen order. Empty means "not found"
    (a negative entry); only negative entries expire.
    fetched_at: whole seconds since the epoch, the same resolution the cache file keeps.
    """
    key: Hashable
    names: Tuple[str, ...] = ()
    proof_url: str = ""
    legacy: bool = False
    fetched_at: int = field(default_factory=lambda: int(time.time()))

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "fetched_at", int(self.fetched_at))

    @property
    def is_negative(self) -> bool:
        return not self.names

    @property
    def credited_names(self) -> Tuple[str, ...]:
        return self.names[:CREDITED_NAME_LIMIT]

    @property
    def display_name(self) -> str:
        return NAME_JOINER.join(self.credited_names)

    @classmethod
    def negative(cls, key: Hashable, fetched_at: Optional[float] = None) -> "VerifierRecord":
        return cls(key=key, fetched_at=time.time() if fetched_at is None else fetched_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "names": list(self.names),
            "proof_url": self.proof_url,
            "legacy": self.legacy,
            "fetched_at": self.fetched_at,
        }


class ResolveStatus(str, Enum):
    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(frozen=True)
class ResolveOutcome:
    status: ResolveStatus
    record: Optional[VerifierRecord] = None

    @classmethod
    def from_record(cls, record: VerifierRecord) -> "ResolveOutcome":
        status = ResolveStatus.NOT_FOUND if record.is_negative else ResolveStatus.FOUND
        return cls(status, record)

    @classmethod
    def unavailable(cls) -> "ResolveOutcome":
        return cls(ResolveStatus.UNAVAILABLE, None)
