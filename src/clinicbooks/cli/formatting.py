"""Display helpers shared by commands."""

from decimal import Decimal

from clinicbooks.domain.entities import Trend, TrendDirection

TREND_ARROWS = {
    TrendDirection.UP: "▲",
    TrendDirection.DOWN: "▼",
    TrendDirection.NEUTRAL: "-",
}


def format_amount(amount: Decimal) -> str:
    """Amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"


def format_trend(trend: Trend) -> str:
    return f"{TREND_ARROWS[trend.direction]} {trend.text}"
