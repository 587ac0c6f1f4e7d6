# reelpay/domain/machine/services/strip_selection.py
import logging
from collections import Counter
from typing import List, Tuple

from ..entities.reel_strip import ReelStrip, ReelDrawState
from ..entities.symbol import SymbolEntry
from ..exceptions import StripConfigurationError


class StripSelector:
    """
    Draws symbols for a reel, honouring reservations and per-reel caps.

    The random source is injected so that draws are reproducible from a seed.
    """
    def __init__(self, rng):
        """
        Initialize the selector.

        Args:
            rng: RNG strategy providing get_random_float(min_val, max_val)
        """
        self.rng = rng
        self.logger = logging.getLogger("domain.machine.strip_selector")

    def draw_symbol(self, strip: ReelStrip, state: ReelDrawState, consume: bool = True) -> SymbolEntry:
        """
        Draw one symbol for a reel.

        Args:
            strip: The reel's catalog and reservations
            state: The reel's draw state for the current spin
            consume: False for filler draws that must leave the counters untouched

        Returns:
            The drawn catalog entry

        Raises:
            StripConfigurationError: If the strip has no entries to draw from
        """
        if not strip.entries:
            raise StripConfigurationError(strip.id, "cannot draw from an empty catalog")
        if len(state.remaining_counts) != len(strip.entries):
            self.logger.warning(f"Draw state does not match {strip}, resetting it")
            state.reset(strip)

        candidates = self._build_candidates(strip, state)
        if not candidates:
            self.logger.debug(f"No eligible candidates on {strip}, falling back to full catalog")
            candidates = [(i, max(entry.weight, 1.0)) for i, entry in enumerate(strip.entries)]

        picked = self._weighted_pick(candidates)
        entry = strip.entries[picked]

        if consume:
            if strip.depletable[picked] and state.remaining_counts[picked] > 0:
                state.remaining_counts[picked] -= 1
            state.draws_used += 1
            state.drawn.append(entry)

        self.logger.debug(
            f"Drew {entry.name} on {strip.id or 'reel'} (consume={consume}, draws_used={state.draws_used})"
        )
        return entry

    def _is_reserved_active(self, strip: ReelStrip, state: ReelDrawState, i: int) -> bool:
        if strip.fixed_counts[i] <= 0:
            return False
        if strip.depletable[i]:
            return state.remaining_counts[i] > 0
        return True

    def _reserved_slots(self, strip: ReelStrip, state: ReelDrawState, i: int) -> int:
        """Slots an entry still holds: remaining if depleting, else its full fixed count."""
        if strip.depletable[i]:
            return max(state.remaining_counts[i], 0)
        return strip.fixed_counts[i]

    def _build_candidates(self, strip: ReelStrip, state: ReelDrawState) -> List[Tuple[int, float]]:
        remaining_draws = max(strip.strip_size - state.draws_used, 0)

        reserved_remaining = sum(
            self._reserved_slots(strip, state, i)
            for i in range(len(strip.entries)) if strip.fixed_counts[i] > 0
        )
        reserved_remaining = min(reserved_remaining, remaining_draws)
        random_pool_size = max(remaining_draws - reserved_remaining, 0)

        reserved_active = [self._is_reserved_active(strip, state, i) for i in range(len(strip.entries))]
        total_random_weight = sum(
            entry.weight for i, entry in enumerate(strip.entries) if not reserved_active[i]
        )

        usage = Counter(symbol.group_key for symbol in state.drawn)

        candidates = []
        for i, entry in enumerate(strip.entries):
            if entry.max_per_reel >= 0 and usage[entry.group_key] >= entry.max_per_reel:
                continue

            if reserved_active[i]:
                # Reserved entries are weighted by the slots they hold, not by authored weight
                weight = float(min(self._reserved_slots(strip, state, i), remaining_draws))
            else:
                if random_pool_size <= 0 or total_random_weight <= 0:
                    continue
                weight = (entry.weight / total_random_weight) * random_pool_size
                if weight <= 0:
                    continue

            candidates.append((i, weight))

        return candidates

    def _weighted_pick(self, candidates: List[Tuple[int, float]]) -> int:
        total = sum(weight for _, weight in candidates)
        if total <= 0:
            return candidates[0][0]

        r = self.rng.get_random_float(0.0, total)
        for index, weight in candidates:
            r -= weight
            if r <= 0:
                return index

        return candidates[-1][0]


def draw_symbol(strip: ReelStrip, state: ReelDrawState, rng, consume: bool = True) -> SymbolEntry:
    """Module-level shortcut for StripSelector(rng).draw_symbol(...)."""
    return StripSelector(rng).draw_symbol(strip, state, consume)
