"""
Compound lookup key: level id plus variant.
Formatted to the "1000" / "1000_2p" wire form only at the network and file boundary.
"""
from dataclasses import dataclass
from enum import Enum


class Variant(str, Enum):
    STANDARD = ""
    TWO_PLAYER = "2p"


_SUFFIX_SEPARATOR = "_"


@dataclass(frozen=True)
class LevelKey:
    level_id: int
    variant: Variant = Variant.STANDARD

    def __post_init__(self) -> None:
        if isinstance(self.level_id, bool) or not isinstance(self.level_id, int):
            raise ValueError(f"level_id must be an int, got {self.level_id!r}")
        if self.level_id <= 0:
            raise ValueError(f"Invalid level id: {self.level_id}")
        # Accept plain strings ("2p") as well as Variant members.
        object.__setattr__(self, "variant", Variant(self.variant))

    @property
    def wire_path(self) -> str:
        if self.variant is Variant.STANDARD:
            return str(self.level_id)
        return f"{self.level_id}{_SUFFIX_SEPARATOR}{self.variant.value}"

    def __str__(self) -> str:
        return self.wire_path

    @classmethod
    def parse(cls, text: str) -> "LevelKey":
        """Inverse of wire_path. Raises ValueError for anything else."""
        raw = (text or "").strip()
        base, sep, suffix = raw.partition(_SUFFIX_SEPARATOR)
        if not base.isdigit():
            raise ValueError(f"Malformed level key: {text!r}")
        if sep and not suffix:
            raise ValueError(f"Malformed level key: {text!r}")
        try:
            variant = Variant(suffix) if sep else Variant.STANDARD
        except ValueError:
            raise ValueError(f"Unknown level variant in key: {text!r}") from None
        if sep and variant is Variant.STANDARD:
            raise ValueError(f"Malformed level key: {text!r}")
        return cls(int(base), variant)
