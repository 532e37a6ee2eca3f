from __future__ import annotations

from datetime import datetime, timedelta

from src.verification_system.verification_system.core.enums import VerificationStatus
from src.verification_system.verification_system.verification.model import VerificationRecord
from src.verification_system.verification_system.verification.stats import compute_stats

NOW = datetime(2026, 3, 5, 10, 0, 0)


def rec(status, *, verified_at=None, updated_at=NOW):
    return VerificationRecord(
        verification_id=1,
        user_id=1,
        status=status,
        created_at=NOW - timedelta(days=30),
        updated_at=updated_at,
        verified_at=verified_at,
    )


def test_empty():
    stats = compute_stats([], NOW)
    assert stats.to_dict() == {
        "pending": 0,
        "approved_today": 0,
        "approved_this_week": 0,
        "rejected_today": 0,
        "rejected_this_week": 0,
        "awaiting_response": 0,
    }


def test_today_starts_at_midnight():
    records = [
        rec(VerificationStatus.VERIFIED, verified_at=datetime(2026, 3, 5, 0, 0, 0)),
        rec(VerificationStatus.VERIFIED, verified_at=datetime(2026, 3, 4, 23, 59, 59)),
    ]
    stats = compute_stats(records, NOW)
    assert stats.approved_today == 1
    assert stats.approved_this_week == 2


def test_week_is_rolling_seven_days():
    records = [
        rec(VerificationStatus.REJECTED, updated_at=NOW - timedelta(days=6, hours=23)),
        rec(VerificationStatus.REJECTED, updated_at=NOW - timedelta(days=7, seconds=1)),
    ]
    stats = compute_stats(records, NOW)
    assert stats.rejected_this_week == 1
    assert stats.rejected_today == 0


def test_approval_without_timestamp_is_not_counted():
    stats = compute_stats([rec(VerificationStatus.VERIFIED, verified_at=None)], NOW)
    assert stats.approved_this_week == 0


def test_pending_and_awaiting_response():
    records = [
        rec(VerificationStatus.SUBMITTED),
        rec(VerificationStatus.SUBMITTED),
        rec(VerificationStatus.INFO_REQUESTED),
        rec(VerificationStatus.DRAFT),
    ]
    stats = compute_stats(records, NOW)
    assert stats.pending == 2
    assert stats.awaiting_response == 1


def test_timestamps_ahead_of_the_clock_still_count():
    records = [
        rec(VerificationStatus.REJECTED, updated_at=NOW + timedelta(seconds=5)),
        rec(VerificationStatus.VERIFIED, verified_at=NOW + timedelta(seconds=5)),
    ]
    stats = compute_stats(records, NOW)
    assert stats.rejected_today == 1
    assert stats.rejected_this_week == 1
    assert stats.approved_today == 1
    assert stats.approved_this_week == 1


def test_week_never_counts_less_than_today():
    records = [
        rec(VerificationStatus.VERIFIED, verified_at=NOW - timedelta(hours=h))
        for h in (0, 1, 9, 11, 30, 200)
    ]
    stats = compute_stats(records, NOW)
    assert stats.approved_today == 3
    assert stats.approved_this_week == 5
    assert stats.approved_this_week >= stats.approved_today
