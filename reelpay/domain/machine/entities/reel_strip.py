# reelpay/domain/machine/entities/reel_strip.py
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .symbol import SymbolEntry
from ..exceptions import StripConfigurationError


class ReelStrip:
    """
    Per-reel weighted symbol catalog.

    Some entries may reserve a fixed number of instances that must land within
    ``strip_size`` draws; a reservation either depletes as it is drawn or is
    re-offered on every draw.
    """
    def __init__(self, entries: Sequence[SymbolEntry], strip_size: int,
                 fixed_counts: Optional[Sequence[int]] = None,
                 depletable: Optional[Sequence[bool]] = None,
                 reel_id: str = "", visible_rows: Optional[int] = None):
        """
        Initialize a reel strip.

        Args:
            entries: Ordered catalog entries available on this reel
            strip_size: Number of consumed draws the reservations must fit in
            fixed_counts: Optional reserved instance count per entry (0 = none)
            depletable: Optional per-entry flag; reservations deplete by default
            reel_id: Identifier used in logs and errors
            visible_rows: Rows shown on this reel per spin (defaults to strip_size)

        Raises:
            StripConfigurationError: If the catalog cannot produce a symbol
        """
        self.id = reel_id
        self.entries: Tuple[SymbolEntry, ...] = tuple(entries or ())
        self.strip_size = int(strip_size)
        self.visible_rows = self.strip_size if visible_rows is None else int(visible_rows)

        count = len(self.entries)
        if fixed_counts is None:
            self.fixed_counts: Tuple[int, ...] = (0,) * count
        else:
            if len(fixed_counts) != count:
                raise StripConfigurationError(
                    reel_id, f"{len(fixed_counts)} fixed counts for {count} entries"
                )
            self.fixed_counts = tuple(max(int(c), 0) for c in fixed_counts)

        if depletable is None:
            self.depletable: Tuple[bool, ...] = (True,) * count
        else:
            if len(depletable) != count:
                raise StripConfigurationError(
                    reel_id, f"{len(depletable)} depletable flags for {count} entries"
                )
            self.depletable = tuple(bool(d) for d in depletable)

        self._validate()

    def _validate(self):
        if not self.entries:
            raise StripConfigurationError(self.id, "catalog has no entries")
        if self.strip_size < 0:
            raise StripConfigurationError(self.id, f"negative strip size {self.strip_size}")
        if self.visible_rows < 0:
            raise StripConfigurationError(self.id, f"negative visible rows {self.visible_rows}")

        total_weight = sum(entry.weight for entry in self.entries)
        if total_weight <= 0 and not any(c > 0 for c in self.fixed_counts):
            raise StripConfigurationError(self.id, "catalog has zero total weight and no reserved counts")

    def new_draw_state(self) -> "ReelDrawState":
        """Create a fresh draw state for one spin of this reel."""
        state = ReelDrawState()
        state.reset(self)
        return state

    def index_of(self, name: str) -> int:
        for i, entry in enumerate(self.entries):
            if entry.name == name:
                return i
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"ReelStrip(id={self.id}, entries={len(self.entries)}, strip_size={self.strip_size})"


@dataclass
class ReelDrawState:
    """
    Mutable counters for one reel during one spin.

    Owned by the caller and reset at the start of every spin; never shared
    between reels.
    """
    remaining_counts: List[int] = field(default_factory=list)
    draws_used: int = 0
    drawn: List[SymbolEntry] = field(default_factory=list)

    def reset(self, strip: ReelStrip) -> None:
        self.remaining_counts = list(strip.fixed_counts)
        self.draws_used = 0
        self.drawn = []

    def remaining_for(self, strip: ReelStrip, name: str) -> int:
        return self.remaining_counts[strip.index_of(name)]
