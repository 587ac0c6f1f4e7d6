# reelpay/__init__.py
"""
Reelpay Package

Slot machine payout core:
- Symbol catalog entries and their match rules
- Reel strip selection with reserved and capped symbols
- Win evaluation over jagged grids (paylines and symbol groups)
"""

from .domain.machine.entities.symbol import SymbolEntry, WinMode, PayScaling
from .domain.machine.entities.grid import SymbolGrid
from .domain.machine.entities.payline import PaylinePattern, PaylineDefinition, PatternType
from .domain.machine.entities.win_record import WinRecord, WinSource, MAX_WIN_VALUE
from .domain.machine.entities.reel_strip import ReelStrip, ReelDrawState
from .domain.machine.entities.slot_machine import SlotMachine, SpinOutcome
from .domain.machine.services.win_evaluation import WinEvaluator, evaluate_wins
from .domain.machine.services.strip_selection import StripSelector, draw_symbol
from .domain.machine.factories.machine_factory import MachineFactory
from .domain.machine.exceptions import (
    MachineConfigurationError,
    StripConfigurationError,
    PatternConfigurationError,
)

__all__ = [
    'SymbolEntry', 'WinMode', 'PayScaling',
    'SymbolGrid',
    'PaylinePattern', 'PaylineDefinition', 'PatternType',
    'WinRecord', 'WinSource', 'MAX_WIN_VALUE',
    'ReelStrip', 'ReelDrawState',
    'SlotMachine', 'SpinOutcome',
    'WinEvaluator', 'evaluate_wins',
    'StripSelector', 'draw_symbol',
    'MachineFactory',
    'MachineConfigurationError', 'StripConfigurationError', 'PatternConfigurationError',
]

# Package metadata
__version__ = "0.3.0"
__description__ = "Slot machine reel selection and win evaluation"
