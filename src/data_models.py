"""
Shared data structures for the pity roll tool.

Configuration and RollState are the two persisted records, keyed 1:1 by name.
RollReport and DiceReport are what the engines hand back to the command
surface for printing.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


MAX_CHANCE = 100


# =============================================================================
# EXCEPTIONS
# =============================================================================


class RollError(Exception):
    """Base class for every error the command surface reports."""
    pass


class ValidationError(RollError):
    """Raised when create arguments are out of range or malformed."""
    pass


class NotFoundError(RollError):
    """Raised when a named configuration or its state does not exist."""

    def __init__(self, name: str, what: str = "configuration"):
        self.name = name
        self.what = what
        super().__init__(f"No {what} named '{name}'")


class InvalidDiceType(RollError):
    """Raised for a dice string or side count outside the supported set."""
    pass


class PersistenceError(RollError):
    """Raised when a store cannot open, read, write or commit."""
    pass


# =============================================================================
# PERSISTED RECORDS
# =============================================================================


def validate_name(name: str) -> str:
    """
    Check that a configuration name is usable as a file stem.

    Returns the name unchanged so it can be used inline.
    """
    if not name or not name.strip():
        raise ValidationError("Name must not be empty")
    if "/" in name or "\\" in name or name.startswith("."):
        raise ValidationError(f"Invalid name '{name}': must not contain path separators or start with '.'")
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError(f"Invalid name {name!r}: not valid UTF-8") from e
    return name


@dataclass(frozen=True)
class Configuration:
    """Static parameters of one named decision."""

    name: str
    chance: int
    grace: int
    pity: int
    variance: int

    def validate(self) -> "Configuration":
        """
        Enforce the range invariants.

        Raises:
            ValidationError: If any field is out of range
        """
        validate_name(self.name)
        for field_name in ("chance", "grace", "pity", "variance"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{field_name.capitalize()} must be an integer, got {value!r}")
        if self.chance < 0 or self.chance > MAX_CHANCE:
            raise ValidationError(f"Chance must be between 0 and {MAX_CHANCE}")
        if self.grace < 0:
            raise ValidationError("Grace must be non-negative")
        if self.pity < 0:
            raise ValidationError("Pity must be non-negative")
        if self.variance < 0:
            raise ValidationError("Variance must be non-negative")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize in file field order."""
        return {
            "name": self.name,
            "chance": self.chance,
            "grace": self.grace,
            "pity": self.pity,
            "variance": self.variance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Configuration":
        """Deserialize from dictionary."""
        return cls(
            name=data["name"],
            chance=data["chance"],
            grace=data["grace"],
            pity=data["pity"],
            variance=data["variance"],
        )


@dataclass(frozen=True)
class RollState:
    """Running history of one named decision."""

    pity_counter: int = 0
    last_roll: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "pity_counter": self.pity_counter,
            "last_roll": self.last_roll,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RollState":
        return cls(
            pity_counter=int(data.get("pity_counter", 0)),
            last_roll=int(data.get("last_roll", 0)),
        )


# =============================================================================
# REPORTS
# =============================================================================


@dataclass
class RollReport:
    """Everything the roll command prints about one decision roll."""

    base_chance: int
    pity_counter: int  # before the roll
    grace_bonus: int
    effective_chance: int
    roll: int
    success: bool
    variance_triggered: bool = False

    def __str__(self) -> str:
        outcome = "SUCCESS" if self.success else "FAILED"
        return f"{self.roll} vs {self.effective_chance}%: {outcome}"


@dataclass
class DiceReport:
    """Result of a single die roll with its optional shift."""

    sides: int
    roll: int
    shift: int = 0
    label: str = ""
    shifted_result: Optional[int] = field(default=None)

    def __post_init__(self):
        if not self.label:
            self.label = f"d{self.sides}"
        if self.shift != 0 and self.shifted_result is None:
            self.shifted_result = self.roll + self.shift

    @property
    def range_low(self) -> int:
        return 1 + self.shift

    @property
    def range_high(self) -> int:
        return self.sides + self.shift

    def __str__(self) -> str:
        if self.shift:
            return f"{self.label}: {self.roll} {'+' if self.shift > 0 else '-'} {abs(self.shift)} = {self.shifted_result}"
        return f"{self.label}: {self.roll}"
