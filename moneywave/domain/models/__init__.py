"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    GameType,
    SnapshotStatus,
    WaveType,

    # Entities
    CategoryPool,
    GameAllocation,
    GameDescriptor,
    GamePool,
    HourlyDistribution,
    MoneyWaveSnapshot,
    ProfitPool,
    WaveAllocation,
    WaveSignals,

    # Helpers
    as_count,
    as_decimal,
)

__all__ = [
    # Enums
    "GameType",
    "SnapshotStatus",
    "WaveType",

    # Entities
    "CategoryPool",
    "GameAllocation",
    "GameDescriptor",
    "GamePool",
    "HourlyDistribution",
    "MoneyWaveSnapshot",
    "ProfitPool",
    "WaveAllocation",
    "WaveSignals",

    # Helpers
    "as_count",
    "as_decimal",
]
