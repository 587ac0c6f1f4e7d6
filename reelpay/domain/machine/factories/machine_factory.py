# reelpay/domain/machine/factories/machine_factory.py
import os
import logging
from typing import Dict, Any, List, Optional

from ..entities.payline import PaylineDefinition
from ..entities.reel_strip import ReelStrip
from ..entities.slot_machine import SlotMachine
from ..entities.symbol import SymbolEntry
from ..exceptions import MachineConfigurationError, StripConfigurationError


# Packaged schema for machine YAML files
DEFAULT_SCHEMA_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))),
    "infrastructure", "config", "schemas", "machine_schema.json"
)


def machine_id_for(config: Dict[str, Any], file_path: str) -> str:
    """Machine ID from config, falling back to the file name without extension."""
    return config.get("machine_id") or os.path.splitext(os.path.basename(file_path))[0]


class MachineFactory:
    """
    Factory for creating SlotMachine instances from configuration.
    """
    def __init__(self, rng_provider=None):
        """
        Initialize the machine factory.

        Args:
            rng_provider: Optional RNG provider for creating RNG strategies
        """
        self.logger = logging.getLogger("domain.machine.factory")
        self.rng_provider = rng_provider

    def create_machine(self, machine_id: str, config: Dict[str, Any],
                       rng_strategy_name: Optional[str] = None,
                       seed: Optional[int] = None) -> SlotMachine:
        """
        Create a new slot machine instance.

        Args:
            machine_id: Unique identifier for the machine
            config: Machine configuration dictionary
            rng_strategy_name: RNG strategy; overrides the config's rng.strategy
            seed: RNG seed; overrides the config's rng.seed

        Returns:
            Initialized SlotMachine instance

        Raises:
            MachineConfigurationError: If symbols or bet levels are invalid
            StripConfigurationError: If a reel cannot produce symbols
            PatternConfigurationError: If a payline does not fit the reels
        """
        self.logger.info(f"Creating slot machine: {machine_id}")

        catalog = self._build_catalog(config.get("symbols", []))
        strips = [
            self._build_strip(f"reel{i + 1}", reel_config, catalog)
            for i, reel_config in enumerate(config.get("reels", []))
        ]
        paylines = [PaylineDefinition.from_dict(entry) for entry in config.get("paylines", [])]
        if not paylines:
            self.logger.warning(f"Machine {machine_id} has no paylines; only symbol-group wins can pay")

        bet_levels = self._build_bet_levels(config.get("bet_levels", []))

        rng_strategy = None
        if self.rng_provider:
            rng_config = dict(config.get("rng", {}))
            if rng_strategy_name is not None:
                rng_config["strategy"] = rng_strategy_name
            if seed is not None:
                rng_config["seed"] = seed
            rng_strategy = self.rng_provider.create_from_config(rng_config)
            self.logger.debug(f"Using RNG strategy: {rng_config.get('strategy', 'mersenne')}, "
                              f"seed: {rng_config.get('seed')}")
        else:
            self.logger.warning("No RNG provider available, machine will need RNG set later")

        return SlotMachine(
            machine_id,
            strips,
            paylines,
            rng_strategy,
            filler_rows=config.get("filler_rows", 0),
            bet_levels=bet_levels,
            config=config,
        )

    def create_machine_from_file(self, config_loader, file_path: str,
                                 machine_id: Optional[str] = None,
                                 schema_path: Optional[str] = DEFAULT_SCHEMA_PATH,
                                 **kwargs) -> SlotMachine:
        """
        Create a machine from a YAML configuration file.

        Args:
            config_loader: Configuration loader instance
            file_path: Path to configuration file
            machine_id: Optional explicit machine ID (overrides ID in config)
            schema_path: JSON schema to validate against (None to skip)
            **kwargs: Passed through to create_machine

        Returns:
            Initialized SlotMachine instance
        """
        self.logger.info(f"Creating machine from file: {file_path}")

        config = config_loader.load_file(file_path, schema_path)

        if machine_id is None:
            machine_id = machine_id_for(config, file_path)

        return self.create_machine(machine_id, config, **kwargs)

    def _build_catalog(self, symbols_config: List[Dict[str, Any]]) -> Dict[str, SymbolEntry]:
        catalog: Dict[str, SymbolEntry] = {}
        for entry in symbols_config:
            try:
                symbol = SymbolEntry.from_dict(entry)
            except (TypeError, ValueError) as e:
                raise MachineConfigurationError(f"Invalid symbol entry {entry}: {e}") from e
            if symbol.name in catalog:
                raise MachineConfigurationError(f"Duplicate symbol name: {symbol.name}")
            catalog[symbol.name] = symbol

        if not catalog:
            raise MachineConfigurationError("Machine defines no symbols")
        return catalog

    def _build_strip(self, reel_id: str, reel_config: Dict[str, Any],
                     catalog: Dict[str, SymbolEntry]) -> ReelStrip:
        """
        Build one reel strip.

        A reel without a ``symbols`` list offers the whole catalog with no
        reservations.
        """
        visible_rows = int(reel_config.get("visible_rows", 3))
        strip_size = int(reel_config.get("strip_size", visible_rows))

        reel_symbols = reel_config.get("symbols")
        if reel_symbols is None:
            entries = list(catalog.values())
            fixed_counts = None
            depletable = None
        else:
            entries, fixed_counts, depletable = [], [], []
            for item in reel_symbols:
                name = item.get("symbol") if isinstance(item, dict) else item
                if name not in catalog:
                    raise StripConfigurationError(reel_id, f"unknown symbol '{name}'")
                entries.append(catalog[name])
                fixed_counts.append(int(item.get("fixed_count", 0)) if isinstance(item, dict) else 0)
                depletable.append(bool(item.get("depletable", True)) if isinstance(item, dict) else True)

        strip = ReelStrip(entries, strip_size, fixed_counts, depletable,
                          reel_id=reel_id, visible_rows=visible_rows)
        self.logger.debug(f"Built {strip} with {visible_rows} visible rows")
        return strip

    def _build_bet_levels(self, bet_config: List[Dict[str, Any]]) -> Dict[str, int]:
        bet_levels: Dict[str, int] = {}
        for i, entry in enumerate(bet_config):
            name = str(entry.get("name", f"level{i + 1}"))
            credit_cost = int(entry.get("credit_cost", 1))
            if credit_cost < 0:
                raise MachineConfigurationError(f"Bet level {name} has negative credit cost {credit_cost}")
            bet_levels[name] = credit_cost

        if not bet_levels:
            self.logger.warning("No bet levels configured, using a single level costing 1 credit")
            bet_levels = {"default": 1}
        return bet_levels
