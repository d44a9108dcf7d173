"""APY curve: lock term (months) -> annual yield as a fraction."""

MIN_TERM_MONTHS = 3
MAX_TERM_MONTHS = 24
MIN_APY = 0.30  # 30%
MAX_APY = 2.00  # 200%


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def apy(term_months: float) -> float:
    """Linear interpolation between MIN_APY at 3 months and MAX_APY at 24.

    Terms outside [3, 24] are clamped, not rejected.
    """
    t = (clamp(term_months, MIN_TERM_MONTHS, MAX_TERM_MONTHS) - MIN_TERM_MONTHS) / (
        MAX_TERM_MONTHS - MIN_TERM_MONTHS
    )
    return MIN_APY + t * (MAX_APY - MIN_APY)
