"""
MONEYWAVE ALLOCATOR
Convert annual EBIT + active games -> wave pools and per-game budgets

RESPONSIBILITIES:
- Size the daily pool and split it into Wave1/2/3
- Score each game's importance (1.0 - 5.0)
- Allocate a time-decayed share of the daily pool to a game

RULES:
❌ No persistence, no clocks, no randomness
❌ No pool-exhaustion capping (callers own that)
✅ Decimal arithmetic only
✅ Fail fast with InvalidInputError
✅ Deterministic output
"""

import logging
from decimal import Decimal, ROUND_FLOOR
from typing import Any, List, Optional, Sequence, Tuple

from moneywave.domain.errors import InvalidInputError
from moneywave.domain.models import (
    GameAllocation,
    GameDescriptor,
    ProfitPool,
    WaveAllocation,
    WaveSignals,
    WaveType,
    as_decimal,
)
from moneywave.domain.services.config_engine import MoneyWaveConfig

logger = logging.getLogger(__name__)


class MoneyWaveAllocator:
    """
    MoneyWave Allocator
    Stateless; safe to share across threads and requests
    """

    def __init__(self, config: Optional[MoneyWaveConfig] = None):
        """
        Initialize allocator

        Args:
            config: MoneyWave tunables (defaults to the standard 60/30/10 setup)
        """
        self.config = config or MoneyWaveConfig.default()

    # ------------------------------------------------------------------
    # Pools
    # ------------------------------------------------------------------

    def profit_pool(self, annual_ebit: Any) -> ProfitPool:
        """Build the ProfitPool for an annual EBIT figure"""
        return ProfitPool(
            annual_ebit=as_decimal(annual_ebit, "annual_ebit"),
            tax_rate=self.config.tax_rate,
            interest_rate=self.config.interest_rate,
            days_per_year=self.config.days_per_year,
            hours_per_day=self.config.hours_per_day,
        )

    def compute_pool_sizes(self, annual_ebit: Any) -> WaveAllocation:
        """
        Split the daily pool into the three waves by fixed ratios

        Args:
            annual_ebit: Annual EBIT (>= 0)

        Returns:
            WaveAllocation whose waves sum to the daily pool

        Raises:
            InvalidInputError: If annual_ebit is negative or not numeric
        """
        daily_pool = self.profit_pool(annual_ebit).daily_pool
        ratios = self.config.wave_ratios

        waves = WaveAllocation(
            wave1=daily_pool * ratios[WaveType.WAVE1],
            wave2=daily_pool * ratios[WaveType.WAVE2],
            wave3=daily_pool * ratios[WaveType.WAVE3],
            hours_per_day=self.config.hours_per_day,
        )
        logger.debug("Pool sizes for EBIT %s: daily=%s waves=%s", annual_ebit, daily_pool, waves)
        return waves

    def compute_signal_weighted_pools(self, annual_ebit: Any, signals: WaveSignals) -> WaveAllocation:
        """
        Split the daily pool in proportion to platform activity

        Wave1 is weighted by active games, Wave2 by dormant accounts and
        Wave3 by active ventures. With no activity at all, the whole
        daily pool goes to Wave1.
        """
        daily_pool = self.profit_pool(annual_ebit).daily_pool
        total = signals.total

        if total == 0:
            return WaveAllocation(
                wave1=daily_pool,
                wave2=Decimal('0'),
                wave3=Decimal('0'),
                hours_per_day=self.config.hours_per_day,
            )

        weight = Decimal(total)
        return WaveAllocation(
            wave1=daily_pool * Decimal(signals.active_games) / weight,
            wave2=daily_pool * Decimal(signals.dormant_accounts) / weight,
            wave3=daily_pool * Decimal(signals.active_ventures) / weight,
            hours_per_day=self.config.hours_per_day,
        )

    # ------------------------------------------------------------------
    # Importance
    # ------------------------------------------------------------------

    def compute_importance(self, game: GameDescriptor) -> Decimal:
        """
        Score a game between min_importance and max_importance

        Multiplies the base importance by the type, stake range,
        participant cap and duration multipliers, then clamps.

        Raises:
            InvalidInputError: If the descriptor is not a GameDescriptor
        """
        if not isinstance(game, GameDescriptor):
            raise InvalidInputError(f"Expected GameDescriptor, got {type(game).__name__}", "game", game)

        cfg = self.config
        importance = cfg.base_importance
        importance *= cfg.type_multipliers[game.game_type]
        importance *= self._first_tier(cfg.stake_range_tiers, lambda t: game.stake_range > t)
        importance *= self._first_tier(cfg.participant_tiers, lambda t: game.max_participants >= t)
        importance *= self._first_tier(cfg.duration_tiers, lambda t: game.duration_days <= t)

        return max(cfg.min_importance, min(cfg.max_importance, importance))

    @staticmethod
    def _first_tier(tiers, matches) -> Decimal:
        for threshold, multiplier in tiers:
            if matches(threshold):
                return multiplier
        return Decimal('1')

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def time_remaining_ratio(self, hours_remaining: Decimal) -> Decimal:
        """hours_remaining / decay window, clamped to [0, 1]"""
        ratio = hours_remaining / self.config.decay_window_hours
        return max(Decimal('0'), min(Decimal('1'), ratio))

    def compute_allocation(
        self,
        daily_pool: Any,
        game: GameDescriptor,
        importance: Any,
        max_games_per_day: Optional[int] = None,
    ) -> Decimal:
        """
        Allocate a share of the daily pool to one game

        base_ratio = importance / max_games_per_day, damped by
        (floor + (1 - floor) * time_remaining_ratio). The result is
        truncated to a whole currency unit, never rounded.

        Args:
            daily_pool: Daily pool (>= 0)
            game: Game descriptor (uses hours_remaining)
            importance: Importance score within the configured bounds
            max_games_per_day: Expected games per day (defaults to config)

        Returns:
            Allocated amount (integral, >= 0, not capped by the pool)

        Raises:
            InvalidInputError: On negative pool, non-positive game count
                or out-of-range importance
        """
        cfg = self.config
        pool = self._daily_pool(daily_pool)

        score = as_decimal(importance, "importance")
        if not cfg.min_importance <= score <= cfg.max_importance:
            raise InvalidInputError(
                f"Importance {score} outside [{cfg.min_importance}, {cfg.max_importance}]",
                "importance",
                score,
            )

        games_per_day = self._games_per_day(max_games_per_day)

        if not isinstance(game, GameDescriptor):
            raise InvalidInputError(f"Expected GameDescriptor, got {type(game).__name__}", "game", game)

        decay = cfg.time_decay_floor + (Decimal('1') - cfg.time_decay_floor) * self.time_remaining_ratio(
            game.hours_remaining
        )
        # pool * (1 / n) * importance * decay, divided last to keep 1/n exact
        amount = pool * score * decay / Decimal(games_per_day)
        allocated = amount.to_integral_value(rounding=ROUND_FLOOR)

        logger.debug(
            "Allocation game=%s importance=%s decay=%s -> %s",
            game.game_id or "<unnamed>",
            score,
            decay,
            allocated,
        )
        return allocated

    def allocate_roster(
        self,
        daily_pool: Any,
        games: Sequence[GameDescriptor],
        max_games_per_day: Optional[int] = None,
    ) -> Tuple[List[GameAllocation], List[str]]:
        """
        Score and allocate every game in a roster

        Allocations are proposals: if they exceed the daily pool a
        warning is returned, but nothing is capped.

        Returns:
            Tuple of (allocations list, warnings list)

        Raises:
            InvalidInputError: On negative pool or non-positive game count,
                even for an empty roster
        """
        pool = self._daily_pool(daily_pool)
        games_per_day = self._games_per_day(max_games_per_day)

        allocations = []
        warnings = []

        for game in games:
            importance = self.compute_importance(game)
            amount = self.compute_allocation(pool, game, importance, games_per_day)
            allocations.append(GameAllocation(
                game_id=game.game_id,
                allocated_amount=amount,
                importance=importance,
                category=game.category,
            ))

        if len(allocations) > games_per_day:
            warnings.append(
                f"{len(allocations)} games exceed max_games_per_day {games_per_day}"
            )

        total_allocated = sum((a.allocated_amount for a in allocations), Decimal('0'))
        if total_allocated > pool:
            warnings.append(
                f"Allocations {total_allocated} exceed daily pool {pool} by {total_allocated - pool}"
            )

        for warning in warnings:
            logger.warning(warning)

        return allocations, warnings

    @staticmethod
    def _daily_pool(daily_pool: Any) -> Decimal:
        pool = as_decimal(daily_pool, "daily_pool")
        if pool < Decimal('0'):
            raise InvalidInputError("Daily pool cannot be negative", "daily_pool", pool)
        return pool

    def _games_per_day(self, max_games_per_day: Any) -> int:
        games_per_day = self.config.max_games_per_day if max_games_per_day is None else max_games_per_day
        if isinstance(games_per_day, bool) or not isinstance(games_per_day, int) or games_per_day <= 0:
            raise InvalidInputError("max_games_per_day must be a positive integer", "max_games_per_day", games_per_day)
        return games_per_day
