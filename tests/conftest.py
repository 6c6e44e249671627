from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from moneywave.api.routes import health, money_wave
from moneywave.domain.models import GameDescriptor, GameType
from moneywave.domain.services.config_engine import ConfigEngine, MoneyWaveConfig
from moneywave.domain.services.hourly_distribution import HourlyPoolDistributor
from moneywave.domain.services.money_wave_allocator import MoneyWaveAllocator
from moneywave.domain.services.snapshot_service import SnapshotService
import moneywave.main as app_main

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

# Reference figure used across the scenarios: 4.8 billion KRW per day
REFERENCE_ANNUAL_EBIT = Decimal("1752000000000")


@pytest.fixture
def config() -> MoneyWaveConfig:
    return MoneyWaveConfig.default()


@pytest.fixture
def allocator(config) -> MoneyWaveAllocator:
    return MoneyWaveAllocator(config)


@pytest.fixture
def binary_weekly_game() -> GameDescriptor:
    return GameDescriptor(
        game_id="binary-weekly",
        game_type=GameType.BINARY,
        min_stake=Decimal("100"),
        max_stake=Decimal("1000"),
        max_participants=100,
        duration_days=Decimal("7"),
        category="politics",
    )


@pytest.fixture
def ranking_daily_game() -> GameDescriptor:
    return GameDescriptor(
        game_id="ranking-daily",
        game_type=GameType.RANKING,
        min_stake=Decimal("500"),
        max_stake=Decimal("10000"),
        max_participants=1000,
        duration_days=Decimal("1"),
        category="sports",
    )


@pytest.fixture()
async def app() -> FastAPI:
    app = FastAPI()
    app.include_router(health.router, tags=["Health"])
    app.include_router(money_wave.router, prefix="/api/v1/money-wave", tags=["MoneyWave"])

    config_engine = ConfigEngine(CONFIG_DIR)
    config_engine.load_all()
    allocator = MoneyWaveAllocator(config_engine.config)

    app_main.config_engine = config_engine
    app_main.allocator = allocator
    app_main.hourly_distributor = HourlyPoolDistributor(config_engine.config, allocator)
    app_main.snapshot_service = SnapshotService(allocator)

    yield app

    app_main.config_engine = None
    app_main.allocator = None
    app_main.hourly_distributor = None
    app_main.snapshot_service = None


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
