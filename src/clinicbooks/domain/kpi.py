"""Trend classification and derived financial KPIs."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from clinicbooks.domain.entities import KPI, PeriodWindow, Trend, TrendDirection

Number = Union[Decimal, int]

BREAK_EVEN_DAYS = 30
NEUTRAL_BAND_PERCENT = Decimal("1")


def _safe_div(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator == 0:
        return Decimal("0")
    return numerator / denominator


def trend(current: Number, previous: Number) -> Trend:
    """Classify the change from ``previous`` to ``current``.

    Changes under one percent are neutral. The percentage is a positive
    whole number; the direction carries the sign.
    """
    current = Decimal(current)
    previous = Decimal(previous)
    if previous == 0:
        if current > 0:
            return Trend(TrendDirection.UP, None, "increase")
        return Trend(TrendDirection.NEUTRAL, None, "no change")

    change = (current - previous) / abs(previous) * 100
    if abs(change) < NEUTRAL_BAND_PERCENT:
        return Trend(TrendDirection.NEUTRAL, None, "no change")
    magnitude = int(abs(change).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if change > 0:
        return Trend(TrendDirection.UP, magnitude, f"{magnitude}% increase")
    return Trend(TrendDirection.DOWN, magnitude, f"{magnitude}% decrease")


def net_profit_margin(window: PeriodWindow) -> Decimal:
    """Profit as a percentage of income; 0 when there is no income."""
    if window.total_inflow <= 0:
        return Decimal("0")
    return window.net / window.total_inflow * 100


def average_revenue_per_invoice(window: PeriodWindow) -> Decimal:
    return _safe_div(window.total_inflow, Decimal(len(window.invoices_in_range)))


def daily_break_even(window: PeriodWindow) -> Decimal:
    """Income needed per day to cover the window's expenses."""
    return window.total_outflow / BREAK_EVEN_DAYS


def make_kpi(
    title: str, value: Decimal, previous_value: Decimal, higher_is_better: bool = True
) -> KPI:
    return KPI(
        title=title,
        value=value,
        previous_value=previous_value,
        trend=trend(value, previous_value),
        higher_is_better=higher_is_better,
    )


def financial_health(current: PeriodWindow, previous: PeriodWindow) -> list[KPI]:
    """Headline KPIs of ``current`` compared with ``previous``."""
    return [
        make_kpi(
            "Net profit margin",
            net_profit_margin(current),
            net_profit_margin(previous),
        ),
        make_kpi(
            "Average revenue per invoice",
            average_revenue_per_invoice(current),
            average_revenue_per_invoice(previous),
        ),
        make_kpi(
            "Total expenses",
            current.total_outflow,
            previous.total_outflow,
            higher_is_better=False,
        ),
        make_kpi(
            "Daily break-even",
            daily_break_even(current),
            daily_break_even(previous),
            higher_is_better=False,
        ),
    ]
