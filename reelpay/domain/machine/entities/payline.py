# reelpay/domain/machine/entities/payline.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Sequence, Tuple, Union

from ..exceptions import PatternConfigurationError


@dataclass(frozen=True)
class PaylinePattern:
    """
    Concrete payline: ordered flat grid indices plus a win multiplier.
    """
    indices: Tuple[int, ...]
    win_multiplier: int = 1
    name: str = ""

    def __post_init__(self):
        # Accept any sequence but store a tuple so patterns stay hashable
        object.__setattr__(self, "indices", tuple(int(i) for i in self.indices))

    def validate(self, column_count: int, rows_per_column: Sequence[int]) -> None:
        """
        Check that this pattern fits a grid shape.

        Indices that land in a truncated part of a column are allowed (the match
        walk stops there); indices outside the grid altogether are not.

        Args:
            column_count: Number of columns in the grid
            rows_per_column: Row count per column

        Raises:
            PatternConfigurationError: If the pattern cannot be evaluated correctly
        """
        if not self.indices:
            raise PatternConfigurationError(self.indices, "pattern is empty")
        if column_count <= 0:
            raise PatternConfigurationError(self.indices, "grid has no columns")
        if self.win_multiplier < 0:
            raise PatternConfigurationError(self.indices, f"negative win multiplier {self.win_multiplier}")

        max_rows = max(rows_per_column) if rows_per_column else 0
        cell_count = max_rows * column_count

        previous_column = 0
        for position, index in enumerate(self.indices):
            if index < 0 or index >= cell_count:
                raise PatternConfigurationError(
                    self.indices, f"index {index} at position {position} is outside a grid of {cell_count} cells"
                )
            column = index % column_count
            if position == 0 and column != 0:
                raise PatternConfigurationError(self.indices, f"starts in column {column}, expected column 0")
            if column < previous_column:
                raise PatternConfigurationError(
                    self.indices, f"column decreases from {previous_column} to {column} at position {position}"
                )
            previous_column = column

    def __len__(self) -> int:
        return len(self.indices)


class PatternType(Enum):
    STRAIGHT = "straight"
    DIAGONAL_DOWN = "diagonal_down"
    DIAGONAL_UP = "diagonal_up"
    CUSTOM = "custom"
    INDICES = "indices"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass
class PaylineDefinition:
    """
    Authored payline shape that is turned into a concrete PaylinePattern for a grid.
    """
    pattern_type: PatternType = PatternType.STRAIGHT
    win_multiplier: int = 1
    row_index: int = 0
    row_offset: int = 0
    custom_rows: List[int] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaylineDefinition":
        """
        Build a definition from config.

        A bare ``indices`` list implies the ``indices`` pattern type.

        Args:
            data: Payline configuration dictionary

        Returns:
            New PaylineDefinition
        """
        if "pattern" in data:
            pattern_type = PatternType(str(data["pattern"]).lower())
        elif "indices" in data:
            pattern_type = PatternType.INDICES
        else:
            pattern_type = PatternType.STRAIGHT

        return cls(
            pattern_type=pattern_type,
            win_multiplier=int(data.get("win_multiplier", 1)),
            row_index=int(data.get("row_index", 0)),
            row_offset=int(data.get("row_offset", 0)),
            custom_rows=list(data.get("rows", [])),
            indices=list(data.get("indices", [])),
            name=str(data.get("name", "")),
        )

    def generate(self, column_count: int, rows_per_column: Sequence[int]) -> PaylinePattern:
        """
        Generate the concrete pattern for a grid shape.

        Rows are clamped into the tallest column's range; shorter columns are left
        to truncate the match walk during evaluation.

        Args:
            column_count: Number of columns
            rows_per_column: Row count per column

        Returns:
            PaylinePattern for this grid shape
        """
        rows = max(rows_per_column) if rows_per_column else 0
        if column_count <= 0 or rows <= 0:
            return PaylinePattern((), self.win_multiplier, self.name)

        if self.pattern_type == PatternType.INDICES:
            indices = list(self.indices)

        elif self.pattern_type == PatternType.STRAIGHT:
            r = _clamp(self.row_index, 0, rows - 1)
            indices = [r * column_count + c for c in range(column_count)]

        elif self.pattern_type == PatternType.DIAGONAL_DOWN:
            indices = [
                _clamp((rows - 1 - self.row_offset) - c, 0, rows - 1) * column_count + c
                for c in range(column_count)
            ]

        elif self.pattern_type == PatternType.DIAGONAL_UP:
            indices = [
                _clamp(self.row_offset + c, 0, rows - 1) * column_count + c
                for c in range(column_count)
            ]

        else:
            if len(self.custom_rows) == column_count:
                indices = [
                    _clamp(int(row), 0, rows - 1) * column_count + c
                    for c, row in enumerate(self.custom_rows)
                ]
            else:
                # Middle row when the authored rows don't fit this grid
                mid = rows // 2
                indices = [mid * column_count + c for c in range(column_count)]

        return PaylinePattern(tuple(indices), self.win_multiplier, self.name)


def generate_patterns(definitions: Sequence[Union[PaylineDefinition, PaylinePattern]], column_count: int,
                      rows_per_column: Sequence[int], validate: bool = True) -> List[PaylinePattern]:
    """
    Generate and optionally validate concrete patterns for every definition.

    Ready-made PaylinePatterns pass through unchanged.

    Raises:
        PatternConfigurationError: If validation is on and a pattern does not fit
    """
    patterns = []
    for definition in definitions:
        if isinstance(definition, PaylinePattern):
            pattern = definition
        else:
            pattern = definition.generate(column_count, rows_per_column)
        if validate:
            pattern.validate(column_count, rows_per_column)
        patterns.append(pattern)
    return patterns
