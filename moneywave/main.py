"""
FastAPI Main Application with Scheduler
Wires the MoneyWave engines and exposes them over HTTP
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI

from moneywave.api.routes import health, money_wave
from moneywave.config import settings
from moneywave.core.logging import get_logger, setup_logging
from moneywave.domain.services.config_engine import ConfigEngine
from moneywave.domain.services.hourly_distribution import HourlyPoolDistributor
from moneywave.domain.services.money_wave_allocator import MoneyWaveAllocator
from moneywave.domain.services.snapshot_service import SnapshotService
from moneywave.scheduler.scheduler import shutdown_scheduler, start_scheduler

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


# Global instances
config_engine: ConfigEngine | None = None
allocator: MoneyWaveAllocator | None = None
hourly_distributor: HourlyPoolDistributor | None = None
snapshot_service: SnapshotService | None = None


def resolve_config_dir() -> Path:
    config_dir = Path(settings.CONFIG_DIR)
    if not config_dir.is_absolute():
        config_dir = Path(__file__).resolve().parent.parent / config_dir
    return config_dir


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of all services
    """
    global config_engine, allocator, hourly_distributor, snapshot_service

    # ===================
    # STARTUP
    # ===================
    logger.info("🚀 Starting MoneyWave service")

    config_engine = ConfigEngine(resolve_config_dir())
    config_engine.load_all()

    allocator = MoneyWaveAllocator(config_engine.config)
    hourly_distributor = HourlyPoolDistributor(config_engine.config, allocator)
    snapshot_service = SnapshotService(allocator)
    logger.info("✅ Engines initialized (algorithm=%s)", config_engine.config.algorithm_version)

    if settings.SCHEDULER_ENABLED:
        start_scheduler(
            snapshot_service,
            settings.ANNUAL_EBIT,
            timezone_name=settings.TIMEZONE,
            hour=settings.SNAPSHOT_HOUR,
            minute=settings.SNAPSHOT_MINUTE,
        )
    else:
        logger.info("⏰ Scheduler disabled")

    yield

    # ===================
    # SHUTDOWN
    # ===================
    if settings.SCHEDULER_ENABLED:
        shutdown_scheduler()
    logger.info("👋 MoneyWave service shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="PosMul MoneyWave",
    description="Daily prize pool sizing and per-game reward allocation",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["Health"])
app.include_router(money_wave.router, prefix="/api/v1/money-wave", tags=["MoneyWave"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "moneywave.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
