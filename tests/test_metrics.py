"""Tests for chart payloads and headline figures."""

import pytest

from ecosystem.filters import ChartFilters, normalize_filters
from ecosystem.metrics_barometer import BALANCE_NOTE, compute_barometer, parse_quarter
from ecosystem.metrics_debug import compute_debug
from ecosystem.metrics_economic import (
    compute_employees,
    compute_firms,
    compute_rdi,
    compute_revenue,
    format_column_name,
)
from ecosystem.metrics_summary import calculate_growth, compute_summary, format_value, round_half_up
from ecosystem.metrics_unicorns import compute_unicorns, normalize_unicorns
from ecosystem.metrics_workforce import compute_gender, compute_immigration
from ecosystem.registry import CHARTS, compute_chart, list_charts


def _periods(payload):
    return [p["period"] for p in payload["points"]]


class TestRevenue:
    """Tests for the revenue chart."""

    def test_total(self, data_ctx):
        payload = compute_revenue(ChartFilters(), data_ctx)
        assert payload["chart_id"] == "economic-impact-revenue"
        assert payload["column"] == "Revenue"
        assert payload["label"] == "Total Revenue"
        assert payload["unit"] == "billions"
        assert _periods(payload) == ["2020", "2021", "2022"]
        assert payload["points"][-1]["value"] == pytest.approx(9.5)
        assert payload["points"][-1]["original_value"] == 9_500_000_000
        assert "$schema" in payload["chart"]

    def test_segments(self, data_ctx):
        options = [o["value"] for o in compute_revenue(ChartFilters(), data_ctx)["filter_options"]]
        assert options == ["all", "early-stage", "later-stage"]

        later = compute_revenue(normalize_filters({"revenue_filter": "later-stage"}), data_ctx)
        assert later["column"] == "Scaleup Revenue"
        assert later["label"] == "Later-Stage Revenue"

        early = compute_revenue(normalize_filters({"revenue_filter": "early-stage"}), data_ctx)
        assert early["column"] == "RevenueEarlyStage"
        assert early["label"] == "Early Stage Revenue"

    def test_missing_segment_falls_back_to_total(self):
        ctx = {"main": [{"Year": 2020, "Revenue": 5.0}]}
        payload = compute_revenue(normalize_filters({"revenue_filter": "early-stage"}), ctx)
        assert payload["column"] == "Revenue"
        assert [o["value"] for o in payload["filter_options"]] == ["all"]

    def test_unavailable(self):
        assert compute_revenue(ChartFilters(), {"main": []}) is None
        assert compute_revenue(ChartFilters(), {"main": [{"Year": 2020, "Revenue": -1.0}]}) is None


class TestEmployees:
    """Tests for the employees chart."""

    def test_finland(self, data_ctx):
        payload = compute_employees(normalize_filters({"employees_filter": "finland"}), data_ctx)
        assert payload["column"] == "EmployeesInFinland"
        assert payload["label"] == "Employees in Finland"
        assert [p["value"] for p in payload["points"]] == [38000, 41000, 45000]

    def test_finland_falls_back_to_total(self):
        ctx = {"main": [{"Year": 2020, "Employees": 10}]}
        payload = compute_employees(normalize_filters({"employees_filter": "finland"}), ctx)
        assert payload["column"] == "Employees"
        assert payload["label"] == "Total Employees"


class TestFirms:
    """Tests for the firms chart."""

    def test_total_and_options(self, data_ctx):
        payload = compute_firms(ChartFilters(), data_ctx)
        assert payload["column"] == "Firms"
        assert [o["value"] for o in payload["filter_options"]] == ["all", "early-stage", "later-stage"]

    def test_unresolved_finland_falls_back_to_total(self, data_ctx):
        payload = compute_firms(normalize_filters({"firms_filter": "finland"}), data_ctx)
        assert payload["column"] == "Firms"
        assert payload["label"] == "Active firms"

    def test_early_stage_count(self, data_ctx):
        payload = compute_firms(normalize_filters({"firms_filter": "startups"}), data_ctx)
        assert payload["column"] == "Number Startups"
        assert payload["label"] == "Number of Startups"

    def test_total_falls_back_to_startup_count(self):
        ctx = {"main": [{"Year": 2020, "Number Startups": 3300}, {"Year": 2021, "Number Startups": 3450}]}
        payload = compute_firms(ChartFilters(), ctx)
        assert payload["column"] == "Number Startups"
        assert payload["label"] == "Active firms"

    def test_no_firms_like_column(self):
        """Test that the firms-in-Finland chart is omitted without any firms column."""
        ctx = {"main": [{"Year": 2020, "Revenue": 1.0, "Employees": 10}]}
        assert compute_firms(normalize_filters({"firms_filter": "finland"}), ctx) is None


class TestRdi:
    """Tests for the R&D chart."""

    def test_investment_in_billions(self, data_ctx):
        payload = compute_rdi(ChartFilters(), data_ctx)
        assert payload["label"] == "R&D Investments"
        assert payload["unit"] == "billions"
        assert _periods(payload) == ["2021", "2022"]
        assert payload["points"][0]["value"] == pytest.approx(1.1)

    def test_format_column_name(self):
        assert format_column_name("r&d-investments") == "R&D Investments"
        assert format_column_name("total_rdi") == "Total Rdi"

    def test_no_rdi_data(self):
        assert compute_rdi(ChartFilters(), {"rdi": []}) is None


class TestWorkforce:
    """Tests for gender and immigration charts."""

    def test_gender_counts(self, data_ctx):
        payload = compute_gender(ChartFilters(), data_ctx)
        assert payload["kind"] == "bar"
        assert payload["columns"] == {"Male": "Male", "Female": "Female"}
        assert _periods(payload) == ["2020", "2021", "2022"]
        assert payload["points"][0] == {"period": "2020", "Male": 30000.0, "Female": 12000.0, "Total": 42000.0}

    def test_hidden_series(self, data_ctx):
        payload = compute_gender(normalize_filters({"show_female": False}), data_ctx)
        assert "Female" not in payload["points"][0]
        toggles = {t["label"]: t["active"] for t in payload["toggle_buttons"]}
        assert toggles == {"Male": True, "Female": False}

    def test_female_share_column(self, data_ctx):
        payload = compute_gender(normalize_filters({"gender_share_view": "female-share"}), data_ctx)
        assert payload["kind"] == "area"
        assert payload["column"] == "ShareOfFemales"
        assert payload["points"][0]["value"] == pytest.approx(28.57)

    def test_male_share_from_counts(self, data_ctx):
        payload = compute_gender(normalize_filters({"gender_share_view": "male-share"}), data_ctx)
        assert payload["kind"] == "area"
        assert payload["column"] is None
        assert payload["points"][0]["value"] == pytest.approx(30000 / 42000 * 100)

    def test_share_buttons(self, data_ctx):
        payload = compute_gender(ChartFilters(), data_ctx)
        assert [b["value"] for b in payload["view_buttons"]] == ["male-share", "female-share"]
        assert not any(b["active"] for b in payload["view_buttons"])

    def test_immigration(self, data_ctx):
        payload = compute_immigration(normalize_filters({"immigration_share_view": "foreign-share"}), data_ctx)
        assert payload["chart_id"] == "workforce-immigration"
        assert payload["points"][0]["value"] == pytest.approx(7000 / 42000 * 100)
        assert "Finnish and foreign" in payload["context"]

    def test_no_workforce_data(self):
        assert compute_gender(ChartFilters(), {"employees_gender": []}) is None
        assert compute_immigration(ChartFilters(), {}) is None


class TestBarometer:
    """Tests for the barometer chart."""

    def test_quarters_sorted(self, data_ctx):
        payload = compute_barometer(ChartFilters(), data_ctx)
        assert payload["chart_id"] == "barometer-financial"
        assert _periods(payload) == ["Q3/2022", "Q4/2022", "Q1/2023"]
        assert payload["title_note"] == BALANCE_NOTE

    def test_zero_balance_kept(self, data_ctx):
        payload = compute_barometer(ChartFilters(), data_ctx)
        assert payload["points"][0]["past"] == 0.0
        assert payload["points"][1]["past"] == -3.5

    def test_tab(self, data_ctx):
        payload = compute_barometer(ChartFilters(), data_ctx, tab="employees")
        assert payload["chart_id"] == "barometer-employees"
        assert payload["columns"]["next"] == "Number of employees, next 3 months"

    def test_missing_tab_columns(self, data_ctx):
        assert compute_barometer(ChartFilters(), data_ctx, tab="economy") is None

    def test_parse_quarter(self):
        assert parse_quarter("Q2/2022") == (2022, 2)
        assert parse_quarter("2022") is None


class TestUnicorns:
    """Tests for the unicorn chart."""

    def test_normalize(self, unicorn_rows):
        unicorns = normalize_unicorns(unicorn_rows)
        assert [u["firm"] for u in unicorns] == ["Supercell", "Wolt", "Oura"]

    def test_filters(self, data_ctx):
        assert len(compute_unicorns(ChartFilters(), data_ctx)["points"]) == 3
        finnish = compute_unicorns(normalize_filters({"unicorn_filter": "finnish"}), data_ctx)
        assert [u["firm"] for u in finnish["points"]] == ["Supercell", "Wolt"]
        background = compute_unicorns(normalize_filters({"unicorn_filter": "finnish-background"}), data_ctx)
        assert len(background["points"]) == 3

    def test_no_unicorns(self):
        assert compute_unicorns(ChartFilters(), {"unicorns": []}) is None


class TestSummary:
    """Tests for headline figures."""

    @pytest.mark.parametrize(
        "value,kwargs,expected",
        [
            (9_500_000_000, {"is_revenue": True}, "€9.50B"),
            (2_500_000, {"is_revenue": True}, "€2.5M"),
            (12.5, {"is_revenue": True}, "€12.50B"),
            (4321, {"show_absolute": True}, "4,321"),
            (61_250, {"round_to_hundreds": True}, "61,300"),
            (1_234_567_890, {"round_to_millions": True}, "€1235M"),
            (45_000, {}, "45K"),
            (1_500_000, {}, "1.5M"),
            (999, {}, "999"),
        ],
    )
    def test_format_value(self, value, kwargs, expected):
        assert format_value(value, **kwargs) == expected

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3.0
        assert round_half_up(0.125, 2) == 0.13

    def test_growth(self):
        assert calculate_growth(110, 100) == pytest.approx(10.0)
        assert calculate_growth(5, 0) == 0.0

    def test_summary(self, data_ctx):
        summary = compute_summary(data_ctx)
        assert summary["firms"]["formatted_value"] == "4,200"
        assert summary["firms"]["year"] == "2022"
        assert summary["firms"]["growth"] == pytest.approx(5.0)
        assert summary["revenue"]["formatted_value"] == "€9.50B"
        assert summary["revenue"]["growth"] == pytest.approx(18.75)
        assert summary["employees"]["formatted_value"] == "61,300"
        assert summary["employees_in_finland"]["formatted_value"] == "45K"
        assert summary["rdi"]["formatted_value"] == "€1235M"
        assert summary["unicorns"]["value"] == 3

    def test_missing_optional_metrics(self, main_rows):
        summary = compute_summary({"main": main_rows})
        assert summary["rdi"] == {"value": 0, "growth": 0, "year": "N/A", "formatted_value": "€0"}
        assert summary["unicorns"]["formatted_value"] == "0"

    def test_no_main_data(self):
        assert compute_summary({"main": []}) is None


class TestRegistry:
    """Tests for the chart registry."""

    def test_list(self):
        ids = [c["chart_id"] for c in list_charts()]
        assert len(ids) == len(CHARTS) == 10
        assert "economic-impact-revenue" in ids
        assert "barometer-economy" in ids

    def test_compute_chart(self, data_ctx):
        assert compute_chart("barometer-employees", ChartFilters(), data_ctx)["chart_id"] == "barometer-employees"
        assert compute_chart("workforce-gender", ChartFilters(), {}) is None

    def test_unknown_chart(self, data_ctx):
        with pytest.raises(KeyError):
            compute_chart("nope", ChartFilters(), data_ctx)

    def test_every_chart_renders(self, data_ctx):
        """Test that each chart except the economy barometer has data in the fixtures."""
        for chart_id in CHARTS:
            payload = compute_chart(chart_id, ChartFilters(), data_ctx)
            if chart_id == "barometer-economy":
                assert payload is None
            else:
                assert payload["chart_id"] == chart_id
                assert isinstance(payload["chart"], dict)


class TestDebug:
    """Tests for the column debug view."""

    def test_resolved_columns(self, data_ctx):
        debug = compute_debug(data_ctx)
        assert debug["datasets"]["main"]["rows"] == 3
        assert debug["datasets"]["main"]["resolved"]["Revenue"] == "Revenue"
        assert debug["datasets"]["main"]["resolved"]["FirmsInCountry"] is None
        assert debug["datasets"]["employees_gender"]["resolved"]["GenderFemaleShare"] == "ShareOfFemales"
        assert debug["datasets"]["barometer"]["resolved"] == {}
