"""
CONFIG ENGINE
Load, validate, and expose MoneyWave tunables

RESPONSIBILITIES:
- Load YAML configuration file
- Validate configuration integrity
- Expose a read-only MoneyWaveConfig

RULES:
❌ No module-level tunables in the engines
✅ Fail fast on invalid config
✅ Deterministic output
"""

import logging
import yaml
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from moneywave.domain.models import GameType, WaveType

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "money_wave.yml"

Tier = Tuple[Decimal, Decimal]  # (threshold, multiplier)


def _default_wave_ratios() -> Dict[WaveType, Decimal]:
    return {
        WaveType.WAVE1: Decimal('0.60'),
        WaveType.WAVE2: Decimal('0.30'),
        WaveType.WAVE3: Decimal('0.10'),
    }


def _default_type_multipliers() -> Dict[GameType, Decimal]:
    return {
        GameType.BINARY: Decimal('1.0'),
        GameType.WDL: Decimal('1.2'),
        GameType.RANKING: Decimal('1.5'),
    }


@dataclass(frozen=True)
class MoneyWaveConfig:
    """
    Immutable MoneyWave tunables.

    Tier tables are evaluated first-match:
    - stake_range_tiers: range > threshold (largest threshold first)
    - participant_tiers: max_participants >= threshold (largest first)
    - duration_tiers: duration_days <= threshold (smallest first)
    """
    algorithm_version: str = "v1_fixed_ratio"
    timezone: str = "Asia/Seoul"
    days_per_year: int = 365
    hours_per_day: int = 24
    tax_rate: Decimal = Decimal('0')
    interest_rate: Decimal = Decimal('0')
    wave_ratios: Dict[WaveType, Decimal] = field(default_factory=_default_wave_ratios)

    base_importance: Decimal = Decimal('1.0')
    type_multipliers: Dict[GameType, Decimal] = field(default_factory=_default_type_multipliers)
    stake_range_tiers: Tuple[Tier, ...] = (
        (Decimal('5000'), Decimal('1.3')),
        (Decimal('1000'), Decimal('1.1')),
    )
    participant_tiers: Tuple[Tier, ...] = (
        (Decimal('1000'), Decimal('1.4')),
        (Decimal('100'), Decimal('1.2')),
    )
    duration_tiers: Tuple[Tier, ...] = (
        (Decimal('1'), Decimal('1.3')),
        (Decimal('7'), Decimal('1.1')),
    )
    min_importance: Decimal = Decimal('1.0')
    max_importance: Decimal = Decimal('5.0')

    time_decay_floor: Decimal = Decimal('0.3')
    decay_window_hours: Decimal = Decimal('24')
    max_games_per_day: int = 10

    category_weights: Dict[str, Decimal] = field(default_factory=dict)
    default_category_weight: Decimal = Decimal('1')
    pool_quantum: Decimal = Decimal('0.000001')

    def __post_init__(self):
        if self.days_per_year <= 0 or self.hours_per_day <= 0:
            raise ValueError("days_per_year and hours_per_day must be positive")
        if not Decimal('0') <= self.tax_rate + self.interest_rate <= Decimal('1'):
            raise ValueError("tax_rate + interest_rate must be between 0 and 1")

        if set(self.wave_ratios) != set(WaveType):
            raise ValueError(f"wave_ratios must define {[w.value for w in WaveType]}")
        if any(r < Decimal('0') for r in self.wave_ratios.values()):
            raise ValueError("wave ratios cannot be negative")
        total = sum(self.wave_ratios.values())
        if abs(total - Decimal('1')) > Decimal('0.000001'):
            raise ValueError(f"wave ratios must sum to 1, got {total}")

        missing = set(GameType) - set(self.type_multipliers)
        if missing:
            raise ValueError(f"type_multipliers missing: {sorted(t.value for t in missing)}")

        self._check_tiers("stake_range_tiers", self.stake_range_tiers, descending=True)
        self._check_tiers("participant_tiers", self.participant_tiers, descending=True)
        self._check_tiers("duration_tiers", self.duration_tiers, descending=False)

        if not Decimal('0') < self.min_importance <= self.max_importance:
            raise ValueError("importance bounds must satisfy 0 < min <= max")
        if not Decimal('0') <= self.time_decay_floor <= Decimal('1'):
            raise ValueError("time_decay_floor must be between 0 and 1")
        if self.decay_window_hours <= Decimal('0'):
            raise ValueError("decay_window_hours must be positive")
        if self.max_games_per_day <= 0:
            raise ValueError("max_games_per_day must be positive")
        if self.default_category_weight < Decimal('0'):
            raise ValueError("default_category_weight cannot be negative")
        for category, weight in self.category_weights.items():
            if weight < Decimal('0'):
                raise ValueError(f"category weight for {category} cannot be negative")
        if self.pool_quantum <= Decimal('0'):
            raise ValueError("pool_quantum must be positive")

    @staticmethod
    def _check_tiers(name: str, tiers: Tuple[Tier, ...], descending: bool) -> None:
        thresholds = [t for t, _ in tiers]
        if thresholds != sorted(thresholds, reverse=descending):
            order = "descending" if descending else "ascending"
            raise ValueError(f"{name} thresholds must be {order}")
        if any(m <= Decimal('0') for _, m in tiers):
            raise ValueError(f"{name} multipliers must be positive")

    @classmethod
    def default(cls) -> "MoneyWaveConfig":
        return cls()

    def category_weight(self, category: str) -> Decimal:
        return self.category_weights.get(category, self.default_category_weight)


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for MoneyWave configuration
    """

    def __init__(self, config_dir: Path):
        """Initialize with config directory"""
        self.config_dir = Path(config_dir)
        self._config: Optional[MoneyWaveConfig] = None

    def load_all(self) -> None:
        """Load and validate money_wave.yml"""
        config_file = self.config_dir / CONFIG_FILE_NAME
        if not config_file.exists():
            raise FileNotFoundError(f"MoneyWave config not found: {config_file}")

        with open(config_file, 'r') as f:
            data = yaml.safe_load(f) or {}

        self._config = self.parse(data)
        logger.info(
            "Loaded MoneyWave config %s (algorithm=%s, max_games_per_day=%s)",
            config_file,
            self._config.algorithm_version,
            self._config.max_games_per_day,
        )

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> MoneyWaveConfig:
        """Build a MoneyWaveConfig from a parsed YAML mapping"""
        for section in ('pool', 'waves', 'importance', 'allocation'):
            if section not in data:
                raise ValueError(f"Missing config section: {section}")

        pool = data['pool']
        waves = data['waves']
        importance = data['importance']
        allocation = data['allocation']
        categories = data.get('categories') or {}

        try:
            wave_ratios = {WaveType(k): _dec(v) for k, v in waves.items()}
            type_multipliers = {GameType(k): _dec(v) for k, v in importance['type_multipliers'].items()}
        except ValueError as e:
            raise ValueError(f"Invalid config key: {e}")

        return MoneyWaveConfig(
            algorithm_version=str(pool.get('algorithm_version', 'v1_fixed_ratio')),
            timezone=str(pool.get('timezone', 'Asia/Seoul')),
            days_per_year=int(pool['days_per_year']),
            hours_per_day=int(pool['hours_per_day']),
            tax_rate=_dec(pool.get('tax_rate', 0)),
            interest_rate=_dec(pool.get('interest_rate', 0)),
            wave_ratios=wave_ratios,
            base_importance=_dec(importance['base']),
            type_multipliers=type_multipliers,
            stake_range_tiers=_tiers(importance['stake_range_tiers']),
            participant_tiers=_tiers(importance['participant_tiers']),
            duration_tiers=_tiers(importance['duration_tiers']),
            min_importance=_dec(importance['min']),
            max_importance=_dec(importance['max']),
            time_decay_floor=_dec(allocation['time_decay_floor']),
            decay_window_hours=_dec(allocation['decay_window_hours']),
            max_games_per_day=int(allocation['max_games_per_day']),
            category_weights={str(k): _dec(v) for k, v in (categories.get('weights') or {}).items()},
            default_category_weight=_dec(categories.get('default_weight', 1)),
            pool_quantum=_dec(allocation.get('pool_quantum', '0.000001')),
        )

    @property
    def config(self) -> MoneyWaveConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded. Call load_all() first.")
        return self._config


def _dec(value: Any) -> Decimal:
    return Decimal(str(value))


def _tiers(rows: Any) -> Tuple[Tier, ...]:
    return tuple((_dec(row['threshold']), _dec(row['multiplier'])) for row in rows)
