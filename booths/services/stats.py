"""Daily rollup of closed operations."""

from datetime import datetime, timezone as dt_timezone
from decimal import ROUND_HALF_UP, Decimal

from booths.domain import BoothOperation, DailyStat, ParticipantTally
from booths.domain.models import DailyStatIncrement
from booths.stores.interfaces import BoothStore

_HUNDREDTHS = Decimal("0.01")


class StatsAggregator:
    """Folds each closed operation into its booth's per-day record.

    Rows are keyed by the UTC date the operation started on and only ever
    grow; nothing here overwrites an existing total.
    """

    def __init__(self, store: BoothStore) -> None:
        self._store = store

    def record_close(self, operation: BoothOperation, tally: ParticipantTally) -> DailyStat:
        if operation.ended_at is None:
            raise ValueError("Operation has not ended")
        minutes = operation.duration(operation.ended_at).total_minutes
        hours = (Decimal(minutes) / Decimal(60)).quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP)
        increment = DailyStatIncrement(participants=tally, operator_count=1, operation_hours=hours)
        return self._store.add_to_daily_stat(
            operation.booth_id, stat_date_for(operation.started_at), increment
        )


def stat_date_for(moment: datetime):
    """UTC calendar date of a timestamp."""
    return moment.astimezone(dt_timezone.utc).date()
