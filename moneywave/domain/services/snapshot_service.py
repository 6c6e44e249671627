"""
SNAPSHOT SERVICE
Daily MoneyWave pool sizing, idempotent per KST date and algorithm version

A refresh for a date that already has a snapshot with the same
algorithm version returns the stored snapshot unless forced.
Snapshots are kept in memory only.
"""

import logging
import threading
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Tuple

from moneywave.domain.models import (
    MoneyWaveSnapshot,
    SnapshotStatus,
    WaveSignals,
)
from moneywave.domain.services.money_wave_allocator import MoneyWaveAllocator
from moneywave.utils.time import kst_date, now_kst

logger = logging.getLogger(__name__)

SIGNALS_ALGORITHM_VERSION = "v2_signals_based"


class SnapshotStore:
    """Thread-safe in-memory snapshot store keyed by snapshot date"""

    def __init__(self):
        self._snapshots: Dict[date, MoneyWaveSnapshot] = {}
        self._lock = threading.Lock()

    def get(self, snapshot_date: date) -> Optional[MoneyWaveSnapshot]:
        with self._lock:
            return self._snapshots.get(snapshot_date)

    def put(self, snapshot: MoneyWaveSnapshot) -> None:
        with self._lock:
            self._snapshots[snapshot.snapshot_date] = snapshot

    def latest(self) -> Optional[MoneyWaveSnapshot]:
        with self._lock:
            if not self._snapshots:
                return None
            return self._snapshots[max(self._snapshots)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)


class SnapshotService:

    def __init__(
        self,
        allocator: MoneyWaveAllocator,
        store: Optional[SnapshotStore] = None,
        clock: Callable[[], datetime] = now_kst,
    ):
        self.allocator = allocator
        self.store = store if store is not None else SnapshotStore()
        self.clock = clock
        self._refresh_lock = threading.Lock()

    def refresh(
        self,
        annual_ebit: Any,
        signals: Optional[WaveSignals] = None,
        force: bool = False,
    ) -> Tuple[SnapshotStatus, MoneyWaveSnapshot]:
        """
        Compute today's snapshot unless an equivalent one exists

        Args:
            annual_ebit: Annual EBIT (>= 0)
            signals: Activity counts; switches to signal-weighted waves
            force: Recompute even when today's snapshot is current

        Returns:
            Tuple of (status, snapshot)
        """
        config = self.allocator.config
        version = SIGNALS_ALGORITHM_VERSION if signals is not None else config.algorithm_version

        with self._refresh_lock:
            now = self.clock()
            snapshot_date = kst_date(now)
            existing = self.store.get(snapshot_date)

            if existing is not None and not force and existing.algorithm_version == version:
                logger.info("Snapshot for %s already exists (%s)", snapshot_date, version)
                return SnapshotStatus.ALREADY_EXISTS, existing

            if signals is not None:
                waves = self.allocator.compute_signal_weighted_pools(annual_ebit, signals)
            else:
                waves = self.allocator.compute_pool_sizes(annual_ebit)

            metadata = {}
            if signals is not None:
                metadata["signals"] = {
                    "active_games": signals.active_games,
                    "dormant_accounts": signals.dormant_accounts,
                    "active_ventures": signals.active_ventures,
                }
            if existing is not None:
                metadata["previous"] = {
                    "algorithm_version": existing.algorithm_version,
                    "computed_at": existing.computed_at.isoformat(),
                }

            snapshot = MoneyWaveSnapshot(
                snapshot_date=snapshot_date,
                timezone=config.timezone,
                algorithm_version=version,
                computed_at=now,
                annual_ebit=self.allocator.profit_pool(annual_ebit).annual_ebit,
                tax_rate=config.tax_rate,
                interest_rate=config.interest_rate,
                waves=waves,
                signals=signals,
                metadata=metadata,
            )
            self.store.put(snapshot)

        status = SnapshotStatus.UPDATED if existing is not None else SnapshotStatus.CREATED
        logger.info(
            "Snapshot %s for %s: daily=%s hourly=%s",
            status.value,
            snapshot_date,
            snapshot.daily_pool_total,
            snapshot.hourly_pool_total,
        )
        return status, snapshot

    def latest(self) -> Optional[MoneyWaveSnapshot]:
        return self.store.latest()
