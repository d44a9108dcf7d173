"""Periodic earnings accrual for active investments."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

from yieldfarm.core.errors import InvalidPeriod
from yieldfarm.models import Account, EarningRecord, Investment, PublicAccount

DAILY = 1 / 365
WEEKLY = 1 / 52

PERIODS = {
    "daily": DAILY,
    "weekly": WEEKLY,
}


def validate_period(period_fraction_of_year: float) -> float:
    if (
        isinstance(period_fraction_of_year, bool)
        or not isinstance(period_fraction_of_year, (int, float))
        or not math.isfinite(period_fraction_of_year)
        or period_fraction_of_year <= 0
    ):
        raise InvalidPeriod()
    return period_fraction_of_year


def period_earnings(investment: Investment, period_fraction_of_year: float) -> float:
    """Simple pro-rated share of the investment's fixed annual rate."""
    return investment.amount * investment.apy * period_fraction_of_year


def accrue_period(
    account: Account,
    investment: Investment,
    period_fraction_of_year: float,
    now: Optional[datetime] = None,
) -> float:
    """
    Advance one investment by a single period and credit its owner.

    Closed investments are skipped and earn 0. Nothing here guards against a
    second call within the same period; that is the scheduler's job.
    """
    validate_period(period_fraction_of_year)
    if investment.status != "active":
        return 0.0

    earned = period_earnings(investment, period_fraction_of_year)

    investment.totalEarned += earned
    investment.earningsHistory.append(
        EarningRecord(
            periodIndex=len(investment.earningsHistory),
            earned=earned,
            timestamp=now or datetime.now(timezone.utc),
        )
    )
    account.balance += earned
    account.totalEarnings += earned
    return earned


def accrue_account(
    account: Account,
    period_fraction_of_year: float,
    now: Optional[datetime] = None,
) -> float:
    now = now or datetime.now(timezone.utc)
    return sum(
        accrue_period(account, investment, period_fraction_of_year, now)
        for investment in account.investments
    )


def weekly_gains(account: PublicAccount) -> float:
    """What the next weekly tick would credit across the account's active investments."""
    return sum(
        period_earnings(investment, WEEKLY)
        for investment in account.investments
        if investment.status == "active"
    )
