"""Financial calculators."""

import math
from typing import Any, Dict

from application.models import FieldSpec, FieldType, PureCompute, Tier, ToolDescriptor


def roi_rating(annual_roi: float) -> str:
    """Qualitative rating for an annualized ROI percentage."""
    if annual_roi < 0:
        return "poor"
    if annual_roi < 5:
        return "below_average"
    if annual_roi < 10:
        return "average"
    if annual_roi < 15:
        return "good"
    if annual_roi < 25:
        return "excellent"
    return "exceptional"


def calculate_roi(inputs: Dict[str, Any]) -> Dict[str, Any]:
    investment = float(inputs["investment"])
    final_value = float(inputs["final_value"])
    time_period = int(inputs["time_period"])

    profit = final_value - investment
    roi_percent = (profit / investment) * 100
    years = time_period / 12
    roi_annual = roi_percent / years
    monthly_return = profit / time_period

    return {
        "roi_percent": round(roi_percent, 2),
        "profit": round(profit, 2),
        "roi_annual": round(roi_annual, 2),
        "monthly_return": round(monthly_return, 2),
        "investment": investment,
        "final_value": final_value,
        "time_period": time_period,
        "is_profitable": profit > 0,
        "roi_rating": roi_rating(roi_annual),
    }


def calculate_profit_margin(inputs: Dict[str, Any]) -> Dict[str, Any]:
    revenue = float(inputs["revenue"])
    cost = float(inputs["cost"])

    gross_profit = revenue - cost
    margin_percent = gross_profit / revenue * 100
    markup_percent = gross_profit / cost * 100 if cost else None

    return {
        "gross_profit": round(gross_profit, 2),
        "margin_percent": round(margin_percent, 2),
        "markup_percent": round(markup_percent, 2) if markup_percent is not None else None,
        "revenue": revenue,
        "cost": cost,
    }


def calculate_break_even(inputs: Dict[str, Any]) -> Dict[str, Any]:
    fixed_costs = float(inputs["fixed_costs"])
    price = float(inputs["price_per_unit"])
    variable_cost = float(inputs["variable_cost_per_unit"])

    contribution_margin = price - variable_cost
    if contribution_margin <= 0:
        raise ValueError("Price per unit must exceed variable cost per unit")

    units = math.ceil(fixed_costs / contribution_margin)
    return {
        "break_even_units": units,
        "break_even_revenue": round(units * price, 2),
        "contribution_margin": round(contribution_margin, 2),
        "contribution_margin_ratio": round(contribution_margin / price * 100, 2),
    }


ROI_CALCULATOR = ToolDescriptor(
    slug="roi-calculator",
    name="ROI Calculator",
    description="Calculate your return on investment with detailed analysis",
    category="financial",
    required_tier=Tier.FREE,
    icon="dashicons-chart-line",
    color="#10b981",
    behavior=PureCompute(calculate_roi),
    fields=(
        FieldSpec(
            name="investment",
            label="Initial Investment ($)",
            placeholder="10000",
            min=0.01,
            help="Amount of money invested initially",
        ),
        FieldSpec(
            name="final_value",
            label="Final Value ($)",
            placeholder="15000",
            min=0,
            help="Current or final value of investment",
        ),
        FieldSpec(
            name="time_period",
            label="Time Period (months)",
            type=FieldType.INTEGER,
            placeholder="12",
            min=1,
            max=600,
            help="Duration of investment in months",
        ),
    ),
)

PROFIT_MARGIN_CALCULATOR = ToolDescriptor(
    slug="profit-margin-calculator",
    name="Profit Margin Calculator",
    description="Work out gross profit, margin and markup from revenue and cost",
    category="financial",
    required_tier=Tier.FREE,
    icon="dashicons-chart-pie",
    color="#10b981",
    behavior=PureCompute(calculate_profit_margin),
    fields=(
        FieldSpec(name="revenue", label="Revenue ($)", min=0.01),
        FieldSpec(name="cost", label="Cost ($)", min=0),
    ),
)

BREAK_EVEN_CALCULATOR = ToolDescriptor(
    slug="break-even-calculator",
    name="Break-Even Calculator",
    description="Find how many units you need to sell to cover your costs",
    category="financial",
    required_tier=Tier.STARTER,
    icon="dashicons-chart-area",
    color="#10b981",
    behavior=PureCompute(calculate_break_even),
    fields=(
        FieldSpec(name="fixed_costs", label="Fixed Costs ($)", min=0),
        FieldSpec(name="price_per_unit", label="Price per Unit ($)", min=0.01),
        FieldSpec(name="variable_cost_per_unit", label="Variable Cost per Unit ($)", min=0),
    ),
)

FINANCIAL_TOOLS = (ROI_CALCULATOR, PROFIT_MARGIN_CALCULATOR, BREAK_EVEN_CALCULATOR)
