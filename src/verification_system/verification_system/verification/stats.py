from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import start_of_day
from ..core.constants import STATS_WEEK_DAYS
from ..core.enums import VerificationStatus
from .model import VerificationRecord


@dataclass(frozen=True)
class VerificationStats:
    pending: int = 0
    approved_today: int = 0
    approved_this_week: int = 0
    rejected_today: int = 0
    rejected_this_week: int = 0
    awaiting_response: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class StatsWindow:
    """Lower bounds of the dashboard windows.

    "today" starts at local midnight; "this week" is the rolling window of
    the last seven days. Both are open-ended so a timestamp slightly ahead of
    the app clock still counts.
    """

    today_start: datetime
    week_start: datetime


def stats_window(now: datetime) -> StatsWindow:
    return StatsWindow(today_start=start_of_day(now), week_start=now - timedelta(days=STATS_WEEK_DAYS))


def _since(value: Optional[datetime], start: datetime) -> bool:
    return value is not None and value >= start


def tally(records: Iterable[VerificationRecord], window: StatsWindow) -> VerificationStats:
    """Count in memory what the repository counts in SQL.

    Approvals are dated by verified_at, rejections by updated_at.
    """
    counts = dict.fromkeys(VerificationStats.__dataclass_fields__, 0)
    for r in records:
        if r.status == VerificationStatus.SUBMITTED:
            counts["pending"] += 1
        elif r.status == VerificationStatus.INFO_REQUESTED:
            counts["awaiting_response"] += 1
        elif r.status == VerificationStatus.VERIFIED:
            counts["approved_today"] += _since(r.verified_at, window.today_start)
            counts["approved_this_week"] += _since(r.verified_at, window.week_start)
        elif r.status == VerificationStatus.REJECTED:
            counts["rejected_today"] += _since(r.updated_at, window.today_start)
            counts["rejected_this_week"] += _since(r.updated_at, window.week_start)
    return VerificationStats(**counts)


def compute_stats(records: Iterable[VerificationRecord], now: datetime) -> VerificationStats:
    return tally(records, stats_window(now))
