# reelpay/domain/machine/entities/symbol.py
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional, Union


class WinMode(Enum):
    """Selects the single evaluation pass a symbol takes part in."""
    LINE_MATCH = "line_match"
    SINGLE_ON_REEL = "single_on_reel"
    TOTAL_COUNT = "total_count"

    @classmethod
    def parse(cls, value: Union[str, "WinMode"]) -> "WinMode":
        return _parse_enum(cls, value)


class PayScaling(Enum):
    """How a base value grows with the number of matching symbols."""
    DEPTH_SQUARED = "depth_squared"
    PER_SYMBOL = "per_symbol"

    @classmethod
    def parse(cls, value: Union[str, "PayScaling"]) -> "PayScaling":
        return _parse_enum(cls, value)


def _parse_enum(enum_cls, value):
    """
    Accept enum members or config strings such as "line_match", "LineMatch" or "LINE_MATCH".
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid {enum_cls.__name__} value: {value!r}")

    # CamelCase -> snake_case
    value = value.strip()
    normalized = ""
    for i, ch in enumerate(value):
        if ch.isupper() and i > 0 and value[i - 1].islower():
            normalized += "_"
        normalized += ch.lower()

    for member in enum_cls:
        if member.value == normalized:
            return member
    raise ValueError(f"Invalid {enum_cls.__name__} value: {value!r}")


def min_depth_from_pay_steps(pay_steps: Optional[List[int]]) -> int:
    """
    Derive the minimum win depth from a per-depth multiplier list.

    Args:
        pay_steps: Multipliers indexed by match depth - 1

    Returns:
        1-based position of the first positive step, or -1 if no step pays
    """
    for i, step in enumerate(pay_steps or []):
        if step > 0:
            return i + 1
    return -1


@dataclass(frozen=True)
class SymbolEntry:
    """
    Immutable catalog entry describing one authored symbol.

    A landed grid cell simply references one of these entries; nothing about a
    cell outlives the spin that produced it.
    """
    name: str
    base_value: int = 0
    min_win_depth: int = -1
    weight: float = 1.0
    is_wild: bool = False
    allow_wild_match: bool = True
    win_mode: WinMode = WinMode.LINE_MATCH
    pay_scaling: PayScaling = PayScaling.DEPTH_SQUARED
    match_group_id: int = -1
    total_count_trigger: int = -1
    max_per_reel: int = -1

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise ValueError(f"Symbol name must be a string, got {self.name!r}")
        if self.weight < 0:
            raise ValueError(f"Symbol '{self.name}' has negative weight: {self.weight}")

    @property
    def can_trigger_line(self) -> bool:
        """True when this symbol may start a line evaluation on its own."""
        return self.win_mode == WinMode.LINE_MATCH and self.min_win_depth >= 0

    @property
    def is_paying_line_trigger(self) -> bool:
        return self.can_trigger_line and self.base_value > 0

    @property
    def is_grouped(self) -> bool:
        return self.match_group_id > 0

    @property
    def group_key(self) -> Union[int, str]:
        """Key used for per-reel caps: the match group when grouped, else the name."""
        return self.match_group_id if self.is_grouped else self.name

    def matches(self, other: Optional["SymbolEntry"]) -> bool:
        """
        Check whether two landed symbols count as the same for line matching.

        Args:
            other: Symbol to compare against (usually the line trigger)

        Returns:
            True if the symbols match
        """
        if other is None:
            return False
        if self.is_wild and other.is_wild:
            return True
        if self.is_grouped and self.match_group_id == other.match_group_id:
            return True
        if self.is_wild and other.allow_wild_match:
            return True
        if other.is_wild and self.allow_wild_match:
            return True
        if self.name and self.name == other.name:
            return True
        return False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SymbolEntry":
        """
        Build an entry from a configuration dictionary.

        Either ``min_win_depth`` or ``pay_steps`` may define the minimum depth;
        an explicit ``min_win_depth`` wins when both are present.

        Args:
            data: Symbol configuration

        Returns:
            New SymbolEntry
        """
        if "name" not in data:
            raise ValueError(f"Symbol entry missing 'name': {data}")

        if "min_win_depth" in data:
            min_win_depth = int(data["min_win_depth"])
        else:
            min_win_depth = min_depth_from_pay_steps(data.get("pay_steps"))

        return cls(
            name=data["name"],
            base_value=int(data.get("base_value", 0)),
            min_win_depth=min_win_depth,
            weight=float(data.get("weight", 1.0)),
            is_wild=bool(data.get("is_wild", False)),
            allow_wild_match=bool(data.get("allow_wild_match", True)),
            win_mode=WinMode.parse(data.get("win_mode", WinMode.LINE_MATCH)),
            pay_scaling=PayScaling.parse(data.get("pay_scaling", PayScaling.DEPTH_SQUARED)),
            match_group_id=int(data.get("match_group_id", -1)),
            total_count_trigger=int(data.get("total_count_trigger", -1)),
            max_per_reel=int(data.get("max_per_reel", -1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "base_value": self.base_value,
            "min_win_depth": self.min_win_depth,
            "weight": self.weight,
            "is_wild": self.is_wild,
            "allow_wild_match": self.allow_wild_match,
            "win_mode": self.win_mode.value,
            "pay_scaling": self.pay_scaling.value,
            "match_group_id": self.match_group_id,
            "total_count_trigger": self.total_count_trigger,
            "max_per_reel": self.max_per_reel,
        }
