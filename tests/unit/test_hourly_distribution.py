"""
Unit Tests for HourlyPoolDistributor
Category and game pools must add back up to the hourly pool exactly
"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

import pytest

from moneywave.domain.errors import InvalidInputError
from moneywave.domain.models import GameDescriptor, GameType
from moneywave.domain.services.config_engine import MoneyWaveConfig
from moneywave.domain.services.hourly_distribution import HourlyPoolDistributor
from moneywave.utils.time import KST


def _game(game_id: str, category: str, game_type: GameType = GameType.BINARY, **overrides) -> GameDescriptor:
    fields = dict(
        game_id=game_id,
        game_type=game_type,
        min_stake=Decimal("100"),
        max_stake=Decimal("1000"),
        max_participants=100,
        duration_days=Decimal("7"),
        category=category,
    )
    fields.update(overrides)
    return GameDescriptor(**fields)


@pytest.fixture
def distributor() -> HourlyPoolDistributor:
    config = replace(
        MoneyWaveConfig.default(),
        category_weights={"sports": Decimal("1.5"), "politics": Decimal("1.0")},
    )
    return HourlyPoolDistributor(config)


@pytest.fixture
def games():
    return [
        _game("s-rank", "sports", GameType.RANKING, min_stake=Decimal("500"), max_stake=Decimal("10000"),
              max_participants=1000, duration_days=Decimal("1")),
        _game("s-bin", "sports"),
        _game("p-wdl", "politics", GameType.WDL),
    ]


def test_category_pools_follow_weights(distributor, games):
    result = distributor.distribute(Decimal("200000000"), games)

    pools = {c.category: c.pool_amount for c in result.categories}
    assert pools == {"politics": Decimal("80000000"), "sports": Decimal("120000000")}
    assert [c.category for c in result.categories] == ["politics", "sports"]
    assert {c.category: c.game_count for c in result.categories} == {"politics": 1, "sports": 2}


def test_totals_are_conserved(distributor, games):
    result = distributor.distribute(Decimal("200000000"), games)

    assert result.category_total == Decimal("200000000")
    assert result.game_total == Decimal("200000000")
    for category in result.categories:
        in_category = sum(g.pool_amount for g in result.games_in(category.category))
        assert in_category == category.pool_amount


def test_games_split_by_importance(distributor, games):
    result = distributor.distribute(Decimal("200000000"), games)
    by_id = {g.game_id: g for g in result.games}

    assert by_id["s-rank"].importance == Decimal("3.549")
    assert by_id["s-bin"].importance == Decimal("1.32")
    assert by_id["s-rank"].pool_amount > by_id["s-bin"].pool_amount
    assert by_id["p-wdl"].pool_amount == Decimal("80000000")


def test_residue_goes_to_heaviest_share():
    distributor = HourlyPoolDistributor(MoneyWaveConfig.default())
    games = [_game("a1", "a"), _game("b1", "b"), _game("c1", "c")]

    result = distributor.distribute(Decimal("1"), games)

    pools = {c.category: c.pool_amount for c in result.categories}
    # equal weights: the first category takes the rounding residue
    assert pools == {"a": Decimal("0.333334"), "b": Decimal("0.333333"), "c": Decimal("0.333333")}
    assert result.game_total == Decimal("1")


def test_hourly_pool_truncated_to_quantum(distributor, games):
    result = distributor.distribute(Decimal("10.1234567"), games)

    assert result.hourly_pool == Decimal("10.123456")
    assert result.game_total == Decimal("10.123456")


def test_precomputed_importances(distributor):
    games = [_game("x", "sports"), _game("y", "sports")]

    result = distributor.distribute(Decimal("300"), games, importances={"x": Decimal("2"), "y": Decimal("1")})

    by_id = {g.game_id: g.pool_amount for g in result.games}
    assert by_id == {"x": Decimal("200"), "y": Decimal("100")}


def test_all_zero_weights_fall_back_to_equal_split():
    config = replace(MoneyWaveConfig.default(), default_category_weight=Decimal("0"))
    distributor = HourlyPoolDistributor(config)

    result = distributor.distribute(Decimal("100"), [_game("a1", "a"), _game("b1", "b")])

    assert {c.category: c.pool_amount for c in result.categories} == {"a": Decimal("50"), "b": Decimal("50")}
    # configured weights are reported as-is
    assert [c.weight for c in result.categories] == [Decimal("0"), Decimal("0")]


def test_no_games(distributor):
    hour = datetime(2026, 10, 19, 13, 0, tzinfo=KST)

    result = distributor.distribute(Decimal("100"), [], hour_start=hour)

    assert result.hour_start == hour
    assert result.categories == ()
    assert result.games == ()
    assert result.game_total == Decimal("0")


def test_duplicate_game_ids_rejected(distributor):
    with pytest.raises(InvalidInputError, match="Duplicate game_id"):
        distributor.distribute(Decimal("100"), [_game("a", "sports"), _game("a", "politics")])


def test_missing_game_id_rejected(distributor):
    with pytest.raises(InvalidInputError, match="game_id is required"):
        distributor.distribute(Decimal("100"), [_game("", "sports")])


def test_negative_pool_rejected(distributor, games):
    with pytest.raises(InvalidInputError, match="Hourly pool"):
        distributor.distribute(Decimal("-1"), games)
