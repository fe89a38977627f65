"""Tests for lib_staffing/engine/capacity.py."""

from datetime import date

import pytest

from lib_staffing.employee_models import EmployeeRecord
from lib_staffing.engine.capacity import (
    analyze_skill_gaps,
    build_dashboard_metrics,
    determine_skill_priority,
    generate_capacity_forecast,
)


def _staff() -> list[EmployeeRecord]:
    return [
        EmployeeRecord(id=1, name="A"),
        EmployeeRecord(id=2, name="B", is_on_project=True, project_end_date=date(2025, 2, 10)),
        EmployeeRecord(id=3, name="C", is_on_project=True, project_end_date=date(2025, 4, 30)),
        EmployeeRecord(id=4, name="D", is_on_project=True),
    ]


class TestCapacityForecast:
    def test_single_month_range(self):
        forecast = generate_capacity_forecast(_staff(), date(2025, 1, 1), date(2025, 1, 1))
        assert len(forecast.forecast_data) == 1
        assert forecast.forecast_data[0].sample_date == date(2025, 1, 1)

    def test_monthly_samples(self):
        forecast = generate_capacity_forecast(_staff(), date(2025, 1, 15), date(2025, 4, 15))
        assert forecast.total_employees == 4
        assert [s.available_employees for s in forecast.forecast_data] == [1, 2, 2, 2]
        assert [s.becoming_available for s in forecast.forecast_data] == [0, 1, 0, 1]
        assert [s.utilization_rate for s in forecast.forecast_data] == [75.0, 50.0, 50.0, 50.0]

    def test_month_end_start_does_not_drift(self):
        forecast = generate_capacity_forecast([], date(2025, 1, 31), date(2025, 4, 30))
        assert [s.sample_date for s in forecast.forecast_data] == [
            date(2025, 1, 31),
            date(2025, 2, 28),
            date(2025, 3, 31),
            date(2025, 4, 30),
        ]

    def test_no_employees_has_zero_utilization(self):
        forecast = generate_capacity_forecast([], date(2025, 1, 1), date(2025, 2, 1))
        assert all(s.utilization_rate == 0.0 for s in forecast.forecast_data)

    def test_end_before_start_raises(self):
        with pytest.raises(ValueError):
            generate_capacity_forecast(_staff(), date(2025, 2, 1), date(2025, 1, 1))


class TestSkillPriority:
    @pytest.mark.parametrize("skill,coverage,expected", [
        ("React", 14.9, "Critical"),
        ("React", 15.0, "Medium"),
        ("Python", 0.0, "High"),
        ("Python", 10.0, "Medium"),
        ("Python", 20.0, "Low"),
    ])
    def test_thresholds(self, skill, coverage, expected):
        assert determine_skill_priority(skill, coverage) == expected


class TestSkillGaps:
    def _org(self, size: int, python_holders: int) -> list[EmployeeRecord]:
        return [
            EmployeeRecord(id=i, name=f"E{i}", skills="Python" if i < python_holders else "Cooking")
            for i in range(size)
        ]

    def test_single_holder_in_ten_is_gap(self):
        gaps = {g.skill_name: g for g in analyze_skill_gaps(self._org(10, 1))}
        python = gaps["Python"]
        assert python.current_count == 1
        assert python.coverage_percentage == 10.0
        assert python.is_gap
        assert python.recommended_count == 2

    def test_sorted_by_priority_then_coverage(self):
        gaps = analyze_skill_gaps(self._org(10, 1))
        assert [g.skill_name for g in gaps[:5]] == ["JavaScript", "React", "Node.js", "SQL Server", "Azure"]
        assert all(g.priority == "Critical" for g in gaps[:5])
        assert gaps[-1].skill_name == "Python"
        assert gaps[-1].priority == "Medium"

    def test_exact_token_match(self):
        staff = [
            EmployeeRecord(id=1, name="A", skills="python, Python 3"),
            EmployeeRecord(id=2, name="B", skills=" Python , Python"),
        ]
        gaps = {g.skill_name: g for g in analyze_skill_gaps(staff)}
        assert gaps["Python"].current_count == 1

    def test_twenty_percent_is_not_a_gap(self):
        staff = [EmployeeRecord(id=i, name=f"E{i}", skills="React" if i == 0 else "") for i in range(5)]
        react = next(g for g in analyze_skill_gaps(staff) if g.skill_name == "React")
        assert not react.is_gap
        assert react.priority == "Low"

    def test_no_employees(self):
        gaps = analyze_skill_gaps([])
        assert len(gaps) == 17
        assert all(g.coverage_percentage == 0 and g.recommended_count == 0 for g in gaps)


class TestDashboardMetrics:
    def test_summary(self):
        metrics = build_dashboard_metrics(_staff(), today=date(2025, 1, 15))
        assert metrics.total_employees == 4
        assert metrics.on_project_employees == 3
        assert metrics.available_employees == 1
        assert metrics.utilization_rate == 75.0
        assert len(metrics.capacity_forecast.forecast_data) == 7
        assert len(metrics.top_skill_gaps) == 10
