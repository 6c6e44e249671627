"""
MoneyWave API Routes
Pool sizing, importance scoring and per-game allocation

All amounts are returned as decimal strings.
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, HTTPException

from moneywave.domain.errors import InvalidInputError
from moneywave.domain.schemas.money_wave import (
    AllocationRequest,
    AllocationResponse,
    HourlyDistributionRequest,
    HourlyDistributionResponse,
    ImportanceRequest,
    ImportanceResponse,
    PoolsRequest,
    RosterRequest,
    RosterResponse,
    SignalPoolsRequest,
    SnapshotOut,
    SnapshotRequest,
    SnapshotResponse,
    WaveAllocationResponse,
)
from moneywave.utils.time import kst_hour_start

router = APIRouter()
logger = logging.getLogger(__name__)


def _allocator():
    from moneywave.main import allocator

    if allocator is None:
        raise HTTPException(status_code=500, detail="Allocator not initialized")
    return allocator


def _bad_request(exc: InvalidInputError) -> HTTPException:
    logger.info("Rejected MoneyWave request: %s", exc)
    return HTTPException(status_code=400, detail=str(exc))


@router.post("/pools", response_model=WaveAllocationResponse)
async def compute_pools(request: PoolsRequest):
    """
    Split the daily pool derived from annual EBIT into Wave1/2/3
    """
    try:
        waves = _allocator().compute_pool_sizes(request.annual_ebit)
    except InvalidInputError as e:
        raise _bad_request(e)
    return WaveAllocationResponse.from_domain(waves)


@router.post("/pools/signals", response_model=WaveAllocationResponse)
async def compute_signal_pools(request: SignalPoolsRequest):
    """
    Split the daily pool by platform activity signals
    """
    try:
        waves = _allocator().compute_signal_weighted_pools(
            request.annual_ebit,
            request.signals.to_domain(),
        )
    except InvalidInputError as e:
        raise _bad_request(e)
    return WaveAllocationResponse.from_domain(waves)


@router.post("/importance", response_model=ImportanceResponse)
async def compute_importance(request: ImportanceRequest):
    try:
        game = request.game.to_domain()
        importance = _allocator().compute_importance(game)
    except InvalidInputError as e:
        raise _bad_request(e)
    return ImportanceResponse(game_id=game.game_id, importance=importance)


@router.post("/allocation", response_model=AllocationResponse)
async def compute_allocation(request: AllocationRequest):
    """
    Allocate a share of the daily pool to a single game

    Importance is computed from the game when not supplied.
    """
    allocator = _allocator()
    try:
        game = request.game.to_domain()
        importance = request.importance
        if importance is None:
            importance = allocator.compute_importance(game)
        amount = allocator.compute_allocation(
            request.daily_pool,
            game,
            importance,
            request.max_games_per_day,
        )
    except InvalidInputError as e:
        raise _bad_request(e)

    return AllocationResponse(
        game_id=game.game_id,
        category=game.category,
        importance=importance,
        allocated_amount=amount,
    )


@router.post("/allocations", response_model=RosterResponse)
async def allocate_roster(request: RosterRequest):
    """
    Allocate the daily pool across a roster of active games
    """
    try:
        games = [g.to_domain() for g in request.games]
        allocations, warnings = _allocator().allocate_roster(
            request.daily_pool,
            games,
            request.max_games_per_day,
        )
    except InvalidInputError as e:
        raise _bad_request(e)

    return RosterResponse(
        allocations=[AllocationResponse.from_domain(a) for a in allocations],
        total_allocated=sum((a.allocated_amount for a in allocations), Decimal("0")),
        warnings=warnings,
    )


@router.post("/hourly-distribution", response_model=HourlyDistributionResponse)
async def hourly_distribution(request: HourlyDistributionRequest):
    from moneywave.main import hourly_distributor

    if hourly_distributor is None:
        raise HTTPException(status_code=500, detail="Distributor not initialized")

    try:
        games = [g.to_domain() for g in request.games]
        distribution = hourly_distributor.distribute(
            request.hourly_pool,
            games,
            hour_start=request.hour_start or kst_hour_start(),
        )
    except InvalidInputError as e:
        raise _bad_request(e)
    return HourlyDistributionResponse.from_domain(distribution)


@router.post("/snapshot", response_model=SnapshotResponse)
async def refresh_snapshot(request: SnapshotRequest):
    """
    Compute today's pool snapshot (idempotent per algorithm version)
    """
    from moneywave.config import settings
    from moneywave.main import snapshot_service

    if snapshot_service is None:
        raise HTTPException(status_code=500, detail="Snapshot service not initialized")

    annual_ebit = request.annual_ebit if request.annual_ebit is not None else settings.ANNUAL_EBIT
    try:
        signals = request.signals.to_domain() if request.signals else None
        status, snapshot = snapshot_service.refresh(annual_ebit, signals=signals, force=request.force)
    except InvalidInputError as e:
        raise _bad_request(e)

    return SnapshotResponse(status=status.value, snapshot=SnapshotOut.from_domain(snapshot))


@router.get("/snapshot/latest", response_model=SnapshotOut)
async def latest_snapshot():
    from moneywave.main import snapshot_service

    if snapshot_service is None:
        raise HTTPException(status_code=500, detail="Snapshot service not initialized")

    snapshot = snapshot_service.latest()
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No snapshot computed yet")
    return SnapshotOut.from_domain(snapshot)
