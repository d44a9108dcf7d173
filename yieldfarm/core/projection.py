from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel

from yieldfarm.core.apy import apy
from yieldfarm.core.errors import InvalidAmount, InvalidMode, InvalidTerm

CompoundType = Literal["monthly", "simple"]
COMPOUND_TYPES = ("monthly", "simple")

MIN_AMOUNT = 500
MAX_AMOUNT = 1_000_000


class Projection(BaseModel):
    final_amount: float
    interest: float


class Quote(BaseModel):
    """Preview shown by the investment calculator."""

    apy: float
    final_amount: float
    interest: float
    term_months: int


def validate_amount(principal: float) -> float:
    if isinstance(principal, bool) or not isinstance(principal, (int, float)):
        raise InvalidAmount()
    if not math.isfinite(principal) or not MIN_AMOUNT <= principal <= MAX_AMOUNT:
        raise InvalidAmount()
    return float(principal)


def validate_term(term_months: int) -> int:
    # range is the curve's concern; only non-positive / non-integer terms fail here
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months <= 0:
        raise InvalidTerm()
    return term_months


def validate_mode(mode: str) -> str:
    if mode not in COMPOUND_TYPES:
        raise InvalidMode()
    return mode


def project(principal: float, term_months: int, apy_rate: float, mode: CompoundType) -> Projection:
    """
    Final payout after ``term_months``.

      monthly: A = P * (1 + r)^n   -- the annual rate is applied once per month as-is
      simple:  A = P * (1 + r * n / 12)

    The monthly formula is intentionally not converted to an effective monthly rate.
    """
    principal = validate_amount(principal)
    term_months = validate_term(term_months)
    mode = validate_mode(mode)

    try:
        if mode == "monthly":
            final_amount = principal * (1.0 + apy_rate) ** term_months
        else:
            final_amount = principal * (1.0 + apy_rate * term_months / 12)
    except OverflowError:
        raise InvalidTerm("Projection exceeds representable range") from None
    if not math.isfinite(final_amount):
        raise InvalidTerm("Projection exceeds representable range")

    return Projection(final_amount=final_amount, interest=final_amount - principal)


def quote(principal: float, term_months: int, mode: CompoundType = "monthly") -> Quote:
    rate = apy(validate_term(term_months))
    projection = project(principal, term_months, rate, mode)
    return Quote(
        apy=rate,
        final_amount=projection.final_amount,
        interest=projection.interest,
        term_months=term_months,
    )
