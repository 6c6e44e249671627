"""
HOURLY POOL DISTRIBUTOR
Split an hourly pool into category pools, then into game pools

Amounts are truncated to the configured quantum (micro-PMC by default)
and the truncation residue is handed to the heaviest share, so that
sum(game pools) == sum(category pools) == quantized hourly pool,
and the same holds inside every category.
"""

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal, ROUND_DOWN
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from moneywave.domain.errors import InvalidInputError
from moneywave.domain.models import (
    CategoryPool,
    GameDescriptor,
    GamePool,
    HourlyDistribution,
    as_decimal,
)
from moneywave.domain.services.config_engine import MoneyWaveConfig
from moneywave.domain.services.money_wave_allocator import MoneyWaveAllocator

logger = logging.getLogger(__name__)


class HourlyPoolDistributor:

    def __init__(
        self,
        config: Optional[MoneyWaveConfig] = None,
        allocator: Optional[MoneyWaveAllocator] = None,
    ):
        self.config = config or MoneyWaveConfig.default()
        self.allocator = allocator or MoneyWaveAllocator(self.config)

    def distribute(
        self,
        hourly_pool: Any,
        games: Sequence[GameDescriptor],
        importances: Optional[Mapping[str, Decimal]] = None,
        hour_start: Optional[datetime] = None,
    ) -> HourlyDistribution:
        """
        Distribute one hour's pool across categories and games

        Args:
            hourly_pool: Pool for the hour (>= 0)
            games: Active games; game_id must be unique and non-empty
            importances: Optional precomputed importance per game_id
            hour_start: Start of the hour being distributed

        Returns:
            HourlyDistribution with conserved totals
        """
        pool = as_decimal(hourly_pool, "hourly_pool")
        if pool < Decimal('0'):
            raise InvalidInputError("Hourly pool cannot be negative", "hourly_pool", pool)

        self._check_game_ids(games)
        total = pool.quantize(self.config.pool_quantum, rounding=ROUND_DOWN)

        if not games:
            logger.info("No active games for hour %s; nothing distributed", hour_start)
            return HourlyDistribution(hour_start=hour_start, hourly_pool=total)

        by_category: Dict[str, List[GameDescriptor]] = defaultdict(list)
        for game in games:
            by_category[game.category].append(game)

        weights = [(c, self.config.category_weight(c)) for c in sorted(by_category)]
        category_amounts = self._split(total, weights)

        categories = []
        game_pools = []
        for category, weight in weights:
            members = sorted(by_category[category], key=lambda g: g.game_id)
            scores = [
                (g.game_id, self._importance(g, importances))
                for g in members
            ]
            game_amounts = self._split(category_amounts[category], scores)

            categories.append(CategoryPool(
                category=category,
                weight=weight,
                pool_amount=category_amounts[category],
                game_count=len(members),
            ))
            for game_id, score in scores:
                game_pools.append(GamePool(
                    game_id=game_id,
                    category=category,
                    importance=score,
                    pool_amount=game_amounts[game_id],
                ))

        distribution = HourlyDistribution(
            hour_start=hour_start,
            hourly_pool=total,
            categories=tuple(categories),
            games=tuple(game_pools),
        )
        logger.debug(
            "Hourly distribution %s: %d categories, %d games, total=%s",
            hour_start,
            len(categories),
            len(game_pools),
            distribution.game_total,
        )
        return distribution

    def _importance(self, game: GameDescriptor, importances: Optional[Mapping[str, Decimal]]) -> Decimal:
        if importances and game.game_id in importances:
            score = as_decimal(importances[game.game_id], "importance")
            if score < Decimal('0'):
                raise InvalidInputError("Importance cannot be negative", "importance", score)
            return score
        return self.allocator.compute_importance(game)

    def _split(self, total: Decimal, weights: List[Tuple[str, Decimal]]) -> Dict[str, Decimal]:
        """
        Truncate each weighted share to the quantum and give the
        residue to the largest weight (first key on ties)
        """
        quantum = self.config.pool_quantum
        weight_sum = sum((w for _, w in weights), Decimal('0'))
        if weight_sum == Decimal('0'):
            # every share has zero weight: split evenly
            weights = [(k, Decimal('1')) for k, _ in weights]
            weight_sum = Decimal(len(weights))

        shares = {
            key: (total * weight / weight_sum).quantize(quantum, rounding=ROUND_DOWN)
            for key, weight in weights
        }
        residue = total - sum(shares.values(), Decimal('0'))
        if residue:
            heaviest = max(weights, key=lambda kw: kw[1])[0]
            shares[heaviest] += residue
        return shares

    @staticmethod
    def _check_game_ids(games: Sequence[GameDescriptor]) -> None:
        seen = set()
        for game in games:
            if not game.game_id:
                raise InvalidInputError("game_id is required for hourly distribution", "game_id", game.game_id)
            if game.game_id in seen:
                raise InvalidInputError(f"Duplicate game_id: {game.game_id}", "game_id", game.game_id)
            seen.add(game.game_id)
