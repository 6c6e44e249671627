from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from moneywave.domain.models import (
    GameAllocation,
    GameDescriptor,
    HourlyDistribution,
    MoneyWaveSnapshot,
    WaveAllocation,
    WaveSignals,
)


class GameDescriptorIn(BaseModel):
    """Active game as submitted by the game-creation workflow"""
    game_id: str = ""
    game_type: str = Field(..., description="binary | wdl | ranking")
    min_stake: Decimal
    max_stake: Decimal
    max_participants: int
    duration_days: Decimal
    hours_remaining: Decimal = Decimal("24")
    category: str = "general"

    def to_domain(self) -> GameDescriptor:
        return GameDescriptor(
            game_id=self.game_id,
            game_type=self.game_type,
            min_stake=self.min_stake,
            max_stake=self.max_stake,
            max_participants=self.max_participants,
            duration_days=self.duration_days,
            hours_remaining=self.hours_remaining,
            category=self.category,
        )


class SignalsIn(BaseModel):
    active_games: int
    dormant_accounts: int
    active_ventures: int

    def to_domain(self) -> WaveSignals:
        return WaveSignals(
            active_games=self.active_games,
            dormant_accounts=self.dormant_accounts,
            active_ventures=self.active_ventures,
        )


class PoolsRequest(BaseModel):
    annual_ebit: Decimal


class SignalPoolsRequest(BaseModel):
    annual_ebit: Decimal
    signals: SignalsIn


class WaveAllocationResponse(BaseModel):
    wave1: Decimal
    wave2: Decimal
    wave3: Decimal
    daily_pool: Decimal
    hourly_pool: Decimal

    @classmethod
    def from_domain(cls, waves: WaveAllocation) -> "WaveAllocationResponse":
        return cls(
            wave1=waves.wave1,
            wave2=waves.wave2,
            wave3=waves.wave3,
            daily_pool=waves.daily_pool,
            hourly_pool=waves.hourly_pool,
        )


class ImportanceRequest(BaseModel):
    game: GameDescriptorIn


class ImportanceResponse(BaseModel):
    game_id: str
    importance: Decimal


class AllocationRequest(BaseModel):
    daily_pool: Decimal
    game: GameDescriptorIn
    importance: Optional[Decimal] = Field(None, description="Computed from the game when omitted")
    max_games_per_day: Optional[int] = None


class AllocationResponse(BaseModel):
    game_id: str
    category: str
    importance: Decimal
    allocated_amount: Decimal

    @classmethod
    def from_domain(cls, allocation: GameAllocation) -> "AllocationResponse":
        return cls(
            game_id=allocation.game_id,
            category=allocation.category,
            importance=allocation.importance,
            allocated_amount=allocation.allocated_amount,
        )


class RosterRequest(BaseModel):
    daily_pool: Decimal
    games: List[GameDescriptorIn]
    max_games_per_day: Optional[int] = None


class RosterResponse(BaseModel):
    allocations: List[AllocationResponse]
    total_allocated: Decimal
    warnings: List[str]


class HourlyDistributionRequest(BaseModel):
    hourly_pool: Decimal
    games: List[GameDescriptorIn]
    hour_start: Optional[datetime] = None


class CategoryPoolOut(BaseModel):
    category: str
    weight: Decimal
    pool_amount: Decimal
    game_count: int


class GamePoolOut(BaseModel):
    game_id: str
    category: str
    importance: Decimal
    pool_amount: Decimal


class HourlyDistributionResponse(BaseModel):
    hour_start: Optional[datetime]
    hourly_pool: Decimal
    categories: List[CategoryPoolOut]
    games: List[GamePoolOut]

    @classmethod
    def from_domain(cls, distribution: HourlyDistribution) -> "HourlyDistributionResponse":
        return cls(
            hour_start=distribution.hour_start,
            hourly_pool=distribution.hourly_pool,
            categories=[
                CategoryPoolOut(
                    category=c.category,
                    weight=c.weight,
                    pool_amount=c.pool_amount,
                    game_count=c.game_count,
                )
                for c in distribution.categories
            ],
            games=[
                GamePoolOut(
                    game_id=g.game_id,
                    category=g.category,
                    importance=g.importance,
                    pool_amount=g.pool_amount,
                )
                for g in distribution.games
            ],
        )


class SnapshotRequest(BaseModel):
    annual_ebit: Optional[Decimal] = Field(None, description="Defaults to ANNUAL_EBIT setting")
    signals: Optional[SignalsIn] = None
    force: bool = False


class SnapshotOut(BaseModel):
    snapshot_date: date
    timezone: str
    algorithm_version: str
    computed_at: datetime
    annual_ebit: Decimal
    tax_rate: Decimal
    interest_rate: Decimal
    daily_pool_wave1: Decimal
    daily_pool_wave2: Decimal
    daily_pool_wave3: Decimal
    daily_pool_total: Decimal
    hourly_pool_total: Decimal
    metadata: Dict

    @classmethod
    def from_domain(cls, snapshot: MoneyWaveSnapshot) -> "SnapshotOut":
        return cls(
            snapshot_date=snapshot.snapshot_date,
            timezone=snapshot.timezone,
            algorithm_version=snapshot.algorithm_version,
            computed_at=snapshot.computed_at,
            annual_ebit=snapshot.annual_ebit,
            tax_rate=snapshot.tax_rate,
            interest_rate=snapshot.interest_rate,
            daily_pool_wave1=snapshot.waves.wave1,
            daily_pool_wave2=snapshot.waves.wave2,
            daily_pool_wave3=snapshot.waves.wave3,
            daily_pool_total=snapshot.daily_pool_total,
            hourly_pool_total=snapshot.hourly_pool_total,
            metadata=snapshot.metadata,
        )


class SnapshotResponse(BaseModel):
    status: str
    snapshot: SnapshotOut
