"""Tests for trend classification and KPIs."""

import pytest
from decimal import Decimal

from clinicbooks.domain.entities import (
    Invoice,
    InvoiceStatus,
    PeriodWindow,
    TrendDirection,
)
from clinicbooks.domain.kpi import (
    average_revenue_per_invoice,
    daily_break_even,
    financial_health,
    net_profit_margin,
    trend,
)


def window(inflow, outflow, invoice_count=0):
    invoices = tuple(
        Invoice(str(i), "1403/06/01", InvoiceStatus.PAID, "x", Decimal("1"), Decimal("1"))
        for i in range(invoice_count)
    )
    return PeriodWindow(
        label="",
        start="1403/06/01",
        end="1403/06/30",
        start_key=14030601,
        end_key=14030630,
        total_inflow=Decimal(inflow),
        total_outflow=Decimal(outflow),
        invoices_in_range=invoices,
    )


def test_trend_up():
    result = trend(110, 100)
    assert result.direction == TrendDirection.UP
    assert result.percent == 10
    assert result.text == "10% increase"


def test_trend_down():
    result = trend(75, 100)
    assert result.direction == TrendDirection.DOWN
    assert result.percent == 25
    assert result.text == "25% decrease"


def test_trend_equal_is_neutral():
    result = trend(100, 100)
    assert result.direction == TrendDirection.NEUTRAL
    assert result.percent is None


def test_trend_from_zero_is_up_without_percent():
    result = trend(100, 0)
    assert result.direction == TrendDirection.UP
    assert result.percent is None
    assert result.text == "increase"


def test_trend_zero_to_zero_is_neutral():
    assert trend(0, 0).direction == TrendDirection.NEUTRAL


def test_trend_small_change_is_neutral():
    assert trend(Decimal("100.5"), 100).direction == TrendDirection.NEUTRAL


def test_trend_negative_previous_uses_magnitude():
    result = trend(-50, -100)
    assert result.direction == TrendDirection.UP
    assert result.percent == 50


@pytest.mark.parametrize(
    "current,expected",
    [(Decimal("12.5"), 13), (Decimal("11.4"), 11)],
)
def test_trend_percent_rounds_half_up(current, expected):
    assert trend(100 + current, 100).percent == expected


def test_net_profit_margin_is_percent():
    assert net_profit_margin(window("1000", "250")) == Decimal("75")


def test_net_profit_margin_without_income_is_zero():
    assert net_profit_margin(window("0", "250")) == Decimal("0")


def test_average_revenue_per_invoice_guarded():
    assert average_revenue_per_invoice(window("900", "0", invoice_count=3)) == Decimal("300")
    assert average_revenue_per_invoice(window("900", "0")) == Decimal("0")


def test_daily_break_even():
    assert daily_break_even(window("0", "3000")) == Decimal("100")


def test_financial_health_kpis():
    current = window("2000", "1000", invoice_count=2)
    previous = window("1000", "1000", invoice_count=2)

    kpis = {item.title: item for item in financial_health(current, previous)}

    assert set(kpis) == {
        "Net profit margin",
        "Average revenue per invoice",
        "Total expenses",
        "Daily break-even",
    }
    margin = kpis["Net profit margin"]
    assert margin.value == Decimal("50")
    assert margin.previous_value == Decimal("0")
    assert margin.trend.direction == TrendDirection.UP
    assert margin.favorable is True
    assert kpis["Average revenue per invoice"].trend.percent == 100
    assert kpis["Total expenses"].favorable is None
    assert kpis["Total expenses"].higher_is_better is False


def test_rising_expenses_are_unfavorable():
    kpis = financial_health(window("0", "2000"), window("0", "1000"))
    expenses = next(item for item in kpis if item.title == "Total expenses")

    assert expenses.trend.direction == TrendDirection.UP
    assert expenses.favorable is False
