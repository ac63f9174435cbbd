"""Tests for the built-in calculators and generators."""

import pytest

from backend.services.input_validator import validate_inputs
from backend.tools.content import build_product_description_prompt, parse_outline
from backend.tools.financial import (
    ROI_CALCULATOR,
    calculate_break_even,
    calculate_profit_margin,
    calculate_roi,
    roi_rating,
)


class TestROICalculator:
    @pytest.mark.unit
    def test_roi_example(self):
        result = calculate_roi({"investment": 10000, "final_value": 15000, "time_period": 12})
        assert result["profit"] == 5000
        assert result["roi_percent"] == 50.0
        assert result["roi_annual"] == 50.0
        assert result["monthly_return"] == 416.67
        assert result["is_profitable"] is True
        assert result["roi_rating"] == "exceptional"

    @pytest.mark.unit
    def test_roi_is_annualized(self):
        result = calculate_roi({"investment": 1000, "final_value": 1200, "time_period": 24})
        assert result["roi_percent"] == 20.0
        assert result["roi_annual"] == 10.0
        assert result["roi_rating"] == "good"

    @pytest.mark.unit
    def test_zero_investment_is_rejected_by_validation(self):
        _, errors = validate_inputs(
            ROI_CALCULATOR.fields, {"investment": 0, "final_value": 100, "time_period": 12}
        )
        assert errors == {"investment": "Must be at least 0.01"}

    @pytest.mark.unit
    def test_loss(self):
        result = calculate_roi({"investment": 1000, "final_value": 900, "time_period": 6})
        assert result["profit"] == -100
        assert result["is_profitable"] is False
        assert result["roi_rating"] == "poor"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "annual,rating",
        [(-1, "poor"), (0, "below_average"), (5, "average"), (10, "good"), (15, "excellent"), (25, "exceptional")],
    )
    def test_rating_thresholds(self, annual, rating):
        assert roi_rating(annual) == rating


class TestProfitMargin:
    @pytest.mark.unit
    def test_margin_and_markup(self):
        result = calculate_profit_margin({"revenue": 200, "cost": 150})
        assert result["gross_profit"] == 50
        assert result["margin_percent"] == 25.0
        assert result["markup_percent"] == 33.33

    @pytest.mark.unit
    def test_zero_cost_has_no_markup(self):
        assert calculate_profit_margin({"revenue": 100, "cost": 0})["markup_percent"] is None


class TestBreakEven:
    @pytest.mark.unit
    def test_units_round_up(self):
        result = calculate_break_even({"fixed_costs": 1000, "price_per_unit": 25, "variable_cost_per_unit": 10})
        assert result["break_even_units"] == 67
        assert result["break_even_revenue"] == 1675.0
        assert result["contribution_margin"] == 15.0
        assert result["contribution_margin_ratio"] == 60.0

    @pytest.mark.unit
    def test_price_below_variable_cost(self):
        with pytest.raises(ValueError):
            calculate_break_even({"fixed_costs": 1000, "price_per_unit": 5, "variable_cost_per_unit": 5})


class TestContentTools:
    @pytest.mark.unit
    def test_product_prompt_includes_optional_audience(self):
        prompt = build_product_description_prompt(
            {"product_name": "Desk Lamp", "features": "LED", "tone": "friendly", "audience": "students"}
        )
        assert '"Desk Lamp"' in prompt
        assert "Tone: friendly." in prompt
        assert "Target audience: students" in prompt

    @pytest.mark.unit
    def test_parse_outline_strips_list_markers_only(self):
        content = "1. 10 ways to save\n\n* Budget basics\n## Wrap-up\n2) 2024 goals"
        assert parse_outline(content) == {
            "headings": ["10 ways to save", "Budget basics", "Wrap-up", "2024 goals"]
        }
