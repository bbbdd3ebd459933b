# reelgrid/domain/machine/entities/engine_config.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple, Union

from ..errors import EngineConfigError


logger = logging.getLogger("domain.machine.config")

Category = Union[int, str]


class GenerationMode(Enum):
    """How the symbol grid of a round is produced."""
    UNIFORM = "uniform"
    TIERED = "tiered"


class TierShape(Enum):
    """Symbol pattern a tier synthesizes on a 3-reel line."""
    ALL_SAME = "all_same"
    TWO_MATCH = "two_match"
    ALL_DIFFERENT = "all_different"


@dataclass(frozen=True)
class Tier:
    name: str
    weight: float
    shape: TierShape


@dataclass(frozen=True)
class OutcomeThresholds:
    """Multiplier cutoffs for WIN (big) and WIN_JACKPOT (jackpot)."""
    big: Fraction
    jackpot: Fraction


def to_multiplier(value: Any) -> Fraction:
    """
    Parse a multiplier from YAML. Floats go through their decimal text so
    that 0.3 becomes exactly 3/10.
    """
    if isinstance(value, bool):
        raise EngineConfigError([f"Multiplier must be a number, got {value!r}"])
    if isinstance(value, Fraction):
        return value
    try:
        multiplier = Fraction(str(value).strip())
    except (ValueError, ZeroDivisionError) as e:
        raise EngineConfigError([f"Invalid multiplier {value!r}: {e}"]) from e
    if multiplier < 0:
        raise EngineConfigError([f"Multiplier must not be negative, got {value!r}"])
    return multiplier


def _normalize_category(key: Any) -> Category:
    # YAML may hand us "3" for a quoted run length
    if isinstance(key, str) and key.strip().isdigit():
        return int(key)
    return key


class PayoutTable:
    """
    Read-only mapping from a win category to its multiplier. Categories are
    run lengths in uniform mode and tier names in tiered mode. Unmapped
    categories pay nothing.
    """
    def __init__(self, entries: Mapping[Any, Any]):
        self._entries = MappingProxyType({
            _normalize_category(key): to_multiplier(value) for key, value in entries.items()
        })

    def multiplier_for(self, category: Category) -> Fraction:
        return self._entries.get(category, Fraction(0))

    def items(self):
        return self._entries.items()

    def __contains__(self, category) -> bool:
        return category in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PayoutTable):
            return NotImplemented
        return dict(self._entries) == dict(other._entries)

    def __hash__(self):
        return hash(frozenset(self._entries.items()))

    def __repr__(self) -> str:
        entries = ", ".join(f"{k!r}: {v}" for k, v in self._entries.items())
        return f"PayoutTable({{{entries}}})"

    def to_dict(self) -> Dict[Category, str]:
        return {key: str(value) for key, value in self._entries.items()}


DEFAULT_GRID_PAYOUTS = {
    3: "0.3", 4: "0.8", 5: "1.5", 6: 3, 7: 6, 8: 12,
    9: 25, 10: 50, 11: 75, 12: 150,
}

# Gross multipliers: a jackpot returns the bet plus 12x, a big win plus 2x,
# a small win plus 1x. Expected return is 0.96 per unit bet.
DEFAULT_TIER_PAYOUTS = {
    "jackpot": 13,
    "big_win": 3,
    "small_win": 2,
}

DEFAULT_TIERS = (
    Tier("jackpot", 2, TierShape.ALL_SAME),
    Tier("big_win", 10, TierShape.TWO_MATCH),
    Tier("small_win", 20, TierShape.TWO_MATCH),
    Tier("lose", 68, TierShape.ALL_DIFFERENT),
)

_MODE_DEFAULTS = {
    GenerationMode.UNIFORM: {
        "rows": 8,
        "cols": 12,
        "min_run_length": 3,
        "payout_table": DEFAULT_GRID_PAYOUTS,
        "thresholds": {"big": 4, "jackpot": 20},
    },
    GenerationMode.TIERED: {
        "rows": 1,
        "cols": 3,
        "min_run_length": 2,
        "payout_table": DEFAULT_TIER_PAYOUTS,
        "thresholds": {"big": 3, "jackpot": 13},
    },
}


@dataclass(frozen=True)
class EngineConfig:
    """
    Immutable payout engine configuration. Build it with ``from_dict`` to get
    per-mode defaults and validation.
    """
    engine_id: str = "default"
    mode: GenerationMode = GenerationMode.UNIFORM
    symbol_count: int = 3
    rows: int = 8
    cols: int = 12
    min_run_length: int = 3
    payout_table: PayoutTable = field(default_factory=lambda: PayoutTable(DEFAULT_GRID_PAYOUTS))
    thresholds: OutcomeThresholds = field(
        default_factory=lambda: OutcomeThresholds(Fraction(4), Fraction(20))
    )
    tiers: Tuple[Tier, ...] = ()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "EngineConfig":
        """
        Build a configuration from a plain dict (usually parsed YAML).

        Raises:
            EngineConfigError: If the values are inconsistent
        """
        config = config or {}
        try:
            mode = GenerationMode(str(config.get("mode", "uniform")).lower())
        except ValueError as e:
            raise EngineConfigError([f"Unknown generation mode: {config.get('mode')!r}"]) from e

        defaults = _MODE_DEFAULTS[mode]

        thresholds_config = dict(defaults["thresholds"])
        thresholds_config.update(config.get("thresholds") or {})

        tiers = ()
        if mode is GenerationMode.TIERED:
            tiers = cls._load_tiers(config.get("tiers"))
        elif config.get("tiers"):
            logger.warning("Ignoring 'tiers' in uniform mode")

        engine_config = cls(
            engine_id=str(config.get("engine_id", config.get("machine_id", "default"))),
            mode=mode,
            symbol_count=config.get("symbol_count", 3),
            rows=config.get("rows", defaults["rows"]),
            cols=config.get("cols", defaults["cols"]),
            min_run_length=config.get("min_run_length", defaults["min_run_length"]),
            payout_table=PayoutTable(config.get("payout_table") or defaults["payout_table"]),
            thresholds=OutcomeThresholds(
                big=to_multiplier(thresholds_config.get("big")),
                jackpot=to_multiplier(thresholds_config.get("jackpot")),
            ),
            tiers=tiers,
        )

        errors = engine_config.validate()
        if errors:
            for error in errors:
                logger.error(f"Engine config '{engine_config.engine_id}': {error}")
            raise EngineConfigError(errors)

        engine_config._warn_unpaid_categories()
        return engine_config

    @staticmethod
    def _load_tiers(tiers_config) -> Tuple[Tier, ...]:
        if not tiers_config:
            return DEFAULT_TIERS

        tiers = []
        for i, entry in enumerate(tiers_config):
            if not isinstance(entry, dict) or "name" not in entry or "shape" not in entry:
                raise EngineConfigError([f"Tier entry {i} needs 'name' and 'shape': {entry!r}"])
            try:
                shape = TierShape(entry["shape"])
            except ValueError as e:
                raise EngineConfigError([f"Tier '{entry['name']}' has unknown shape {entry['shape']!r}"]) from e
            tiers.append(Tier(str(entry["name"]), entry.get("weight", 0), shape))
        return tuple(tiers)

    def validate(self) -> List[str]:
        """Return a list of problems, empty when the configuration is usable."""
        errors = []

        for name in ("symbol_count", "rows", "cols", "min_run_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                errors.append(f"{name} must be a positive integer, got {value!r}")
        if errors:
            return errors

        if self.thresholds.big <= 0:
            errors.append("thresholds.big must be greater than 0")
        if self.thresholds.big > self.thresholds.jackpot:
            errors.append("thresholds.big must not exceed thresholds.jackpot")

        if self.mode is GenerationMode.TIERED:
            errors.extend(self._validate_tiers())

        return errors

    def _validate_tiers(self) -> List[str]:
        errors = []
        if self.rows != 1 or self.cols != 3:
            errors.append(f"Tiered mode needs a 1x3 grid, got {self.rows}x{self.cols}")
        if not self.tiers:
            errors.append("Tiered mode needs at least one tier")

        names = [tier.name for tier in self.tiers]
        if len(set(names)) != len(names):
            errors.append(f"Tier names must be unique: {names}")

        for tier in self.tiers:
            if isinstance(tier.weight, bool) or not isinstance(tier.weight, (int, float)) or tier.weight <= 0:
                errors.append(f"Tier '{tier.name}' needs a positive weight, got {tier.weight!r}")
            if tier.shape is TierShape.TWO_MATCH and self.symbol_count < 2:
                errors.append(f"Tier '{tier.name}' needs at least 2 symbols")
            if tier.shape is TierShape.ALL_DIFFERENT and self.symbol_count < 3:
                errors.append(f"Tier '{tier.name}' needs at least 3 symbols")
        return errors

    def _warn_unpaid_categories(self):
        if self.mode is GenerationMode.UNIFORM:
            for length in range(self.min_run_length, self.cols + 1):
                if length not in self.payout_table:
                    logger.warning(f"Engine '{self.engine_id}': runs of length {length} pay nothing")
        else:
            for tier in self.tiers:
                if tier.shape is not TierShape.ALL_DIFFERENT and tier.name not in self.payout_table:
                    logger.warning(f"Engine '{self.engine_id}': winning tier '{tier.name}' pays nothing")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "engine_id": self.engine_id,
            "mode": self.mode.value,
            "symbol_count": self.symbol_count,
            "rows": self.rows,
            "cols": self.cols,
            "min_run_length": self.min_run_length,
            "payout_table": self.payout_table.to_dict(),
            "thresholds": {"big": str(self.thresholds.big), "jackpot": str(self.thresholds.jackpot)},
            "tiers": [
                {"name": t.name, "weight": t.weight, "shape": t.shape.value} for t in self.tiers
            ],
        }
