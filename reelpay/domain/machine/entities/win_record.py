# reelpay/domain/machine/entities/win_record.py
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, Tuple


# Values saturate here instead of growing without bound
MAX_WIN_VALUE = 2 ** 31 - 1


class WinSource(Enum):
    LINE = "line"
    SYMBOL_GROUP = "symbol_group"


def saturate(value: int) -> int:
    """Clamp a computed payout into [0, MAX_WIN_VALUE]."""
    return max(0, min(int(value), MAX_WIN_VALUE))


@dataclass(frozen=True)
class WinRecord:
    """
    One satisfied win rule for a spin.
    """
    source: WinSource
    value: int
    cells: Tuple[int, ...]
    line_index: Optional[int] = None
    symbol_name: str = ""

    @property
    def is_line_win(self) -> bool:
        return self.source == WinSource.LINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source.value,
            "line_index": self.line_index,
            "value": self.value,
            "cells": list(self.cells),
            "symbol": self.symbol_name,
        }
