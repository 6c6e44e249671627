"""
Domain Models - Entities
Pure value objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Tuple

from moneywave.domain.errors import InvalidInputError


def as_decimal(value: Any, field_name: str) -> Decimal:
    """Convert a numeric input to a finite Decimal or raise InvalidInputError"""
    if isinstance(value, bool):
        raise InvalidInputError(f"{field_name} must be numeric, got {value!r}", field_name, value)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidInputError(f"{field_name} must be numeric, got {value!r}", field_name, value)
    if not result.is_finite():
        raise InvalidInputError(f"{field_name} must be finite, got {value!r}", field_name, value)
    return result


def as_count(value: Any, field_name: str) -> int:
    """Convert a non-negative integer input or raise InvalidInputError"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{field_name} must be an integer, got {value!r}", field_name, value)
    if value < 0:
        raise InvalidInputError(f"{field_name} cannot be negative", field_name, value)
    return value


class GameType(str, Enum):
    """Prediction game type"""
    BINARY = "binary"
    WDL = "wdl"
    RANKING = "ranking"

    @classmethod
    def parse(cls, value: Any) -> "GameType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInputError(f"Unknown game type: {value!r}", "game_type", value)


class WaveType(str, Enum):
    """MoneyWave tier"""
    WAVE1 = "wave1"  # EBIT-based daily prize pool
    WAVE2 = "wave2"  # unused PMC redistribution
    WAVE3 = "wave3"  # entrepreneur-funded games


class SnapshotStatus(str, Enum):
    """Outcome of a snapshot refresh"""
    CREATED = "created"
    UPDATED = "updated"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class ProfitPool:
    """Annual profit figure and the pools derived from it - Immutable"""
    annual_ebit: Decimal
    tax_rate: Decimal = Decimal('0')
    interest_rate: Decimal = Decimal('0')
    days_per_year: int = 365
    hours_per_day: int = 24

    def __post_init__(self):
        if self.annual_ebit < Decimal('0'):
            raise InvalidInputError("Annual EBIT cannot be negative", "annual_ebit", self.annual_ebit)
        if not Decimal('0') <= self.tax_rate + self.interest_rate <= Decimal('1'):
            raise InvalidInputError("Tax + interest rate must be between 0 and 1", "tax_rate", self.tax_rate)

    @property
    def net_annual_ebit(self) -> Decimal:
        """EBIT after tax and interest"""
        if self.tax_rate == 0 and self.interest_rate == 0:
            return self.annual_ebit
        return self.annual_ebit * (Decimal('1') - self.tax_rate - self.interest_rate)

    @property
    def daily_pool(self) -> Decimal:
        return self.net_annual_ebit / Decimal(self.days_per_year)


@dataclass(frozen=True)
class WaveAllocation:
    """Daily pool split into the three waves - Immutable"""
    wave1: Decimal
    wave2: Decimal
    wave3: Decimal
    hours_per_day: int = 24

    @property
    def daily_pool(self) -> Decimal:
        return self.wave1 + self.wave2 + self.wave3

    @property
    def hourly_pool(self) -> Decimal:
        return self.daily_pool / Decimal(self.hours_per_day)


@dataclass(frozen=True)
class WaveSignals:
    """Platform activity counts used for signal-weighted wave splits"""
    active_games: int
    dormant_accounts: int
    active_ventures: int

    def __post_init__(self):
        as_count(self.active_games, "active_games")
        as_count(self.dormant_accounts, "dormant_accounts")
        as_count(self.active_ventures, "active_ventures")

    @property
    def total(self) -> int:
        return self.active_games + self.dormant_accounts + self.active_ventures


@dataclass(frozen=True)
class GameDescriptor:
    """
    Active prediction game as seen by the allocator - Immutable

    Numeric fields are coerced to Decimal on construction and
    validated; any violation raises InvalidInputError.
    """
    game_type: GameType
    min_stake: Decimal
    max_stake: Decimal
    max_participants: int
    duration_days: Decimal
    hours_remaining: Decimal = Decimal('24')
    game_id: str = ""
    category: str = "general"

    def __post_init__(self):
        object.__setattr__(self, "game_type", GameType.parse(self.game_type))
        for name in ("min_stake", "max_stake", "duration_days", "hours_remaining"):
            value = as_decimal(getattr(self, name), name)
            if value < Decimal('0'):
                raise InvalidInputError(f"{name} cannot be negative", name, value)
            object.__setattr__(self, name, value)
        as_count(self.max_participants, "max_participants")
        if self.max_stake < self.min_stake:
            raise InvalidInputError(
                f"max_stake {self.max_stake} is below min_stake {self.min_stake}",
                "max_stake",
                self.max_stake,
            )
        if not self.category:
            raise InvalidInputError("category cannot be empty", "category", self.category)

    @property
    def stake_range(self) -> Decimal:
        return self.max_stake - self.min_stake


@dataclass(frozen=True)
class GameAllocation:
    """Reward budget proposed for one game - Immutable"""
    game_id: str
    allocated_amount: Decimal
    importance: Decimal
    category: str = "general"

    def __post_init__(self):
        if self.allocated_amount < Decimal('0'):
            raise ValueError("Allocated amount cannot be negative")


@dataclass(frozen=True)
class CategoryPool:
    """Hourly pool assigned to one game category"""
    category: str
    weight: Decimal
    pool_amount: Decimal
    game_count: int


@dataclass(frozen=True)
class GamePool:
    """Hourly pool assigned to one game inside its category"""
    game_id: str
    category: str
    importance: Decimal
    pool_amount: Decimal


@dataclass(frozen=True)
class HourlyDistribution:
    """Category and game pools for one hour - Immutable"""
    hour_start: Optional[datetime]
    hourly_pool: Decimal
    categories: Tuple[CategoryPool, ...] = ()
    games: Tuple[GamePool, ...] = ()

    @property
    def category_total(self) -> Decimal:
        return sum((c.pool_amount for c in self.categories), Decimal('0'))

    @property
    def game_total(self) -> Decimal:
        return sum((g.pool_amount for g in self.games), Decimal('0'))

    def games_in(self, category: str) -> Tuple[GamePool, ...]:
        return tuple(g for g in self.games if g.category == category)


@dataclass(frozen=True)
class MoneyWaveSnapshot:
    """Daily pool sizing record - Immutable"""
    snapshot_date: date
    timezone: str
    algorithm_version: str
    computed_at: datetime
    annual_ebit: Decimal
    tax_rate: Decimal
    interest_rate: Decimal
    waves: WaveAllocation
    signals: Optional[WaveSignals] = None
    metadata: dict = field(default_factory=dict)

    @property
    def daily_pool_total(self) -> Decimal:
        return self.waves.daily_pool

    @property
    def hourly_pool_total(self) -> Decimal:
        return self.waves.hourly_pool
