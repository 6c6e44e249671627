"""
SCHEDULER JOB DEFINITIONS

Jobs are thin wrappers that:
- Log execution
- Call existing services
- Enforce idempotency by service design

NO business logic is allowed here.
"""

from decimal import Decimal
from typing import Optional

from moneywave.core.logging import get_logger
from moneywave.domain.errors import InvalidInputError
from moneywave.domain.models import MoneyWaveSnapshot
from moneywave.domain.services.snapshot_service import SnapshotService

_logger = get_logger(__name__)


# -------------------------------------------------------------------
# DAILY SNAPSHOT JOB (00:00 KST)
# -------------------------------------------------------------------

def refresh_daily_snapshot_job(
    snapshot_service: SnapshotService,
    annual_ebit: Decimal,
) -> Optional[MoneyWaveSnapshot]:
    """
    Refresh today's MoneyWave pool snapshot.
    A snapshot that is already current is left untouched.
    """
    _logger.info("📅 Running daily MoneyWave snapshot job")

    try:
        status, snapshot = snapshot_service.refresh(annual_ebit)
    except InvalidInputError as exc:
        _logger.warning(f"Daily snapshot job skipped: {exc}")
        return None

    _logger.info(
        f"✅ Snapshot {status.value} for {snapshot.snapshot_date}: "
        f"daily={snapshot.daily_pool_total} hourly={snapshot.hourly_pool_total}"
    )
    return snapshot
