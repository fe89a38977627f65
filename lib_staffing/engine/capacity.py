"""Capacity forecasting and organisation-wide skill gap analysis."""

from __future__ import annotations

from collections import Counter
from datetime import date
import logging
import math
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from lib_staffing.employee_models import EmployeeRecord, add_months
from lib_staffing.skill_taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy


logger = logging.getLogger(__name__)

SkillPriority = Literal["Low", "Medium", "High", "Critical"]

PRIORITY_RANK: dict[str, int] = {"Low": 0, "Medium": 1, "High": 2, "Critical": 3}

GAP_COVERAGE_THRESHOLD = 20.0
CRITICAL_COVERAGE_THRESHOLD = 15.0
HIGH_COVERAGE_THRESHOLD = 10.0


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class CapacitySample(BaseModel):
    """Availability at one monthly sample date."""

    sample_date: date
    available_employees: int = Field(ge=0)
    becoming_available: int = Field(ge=0)
    utilization_rate: float = Field(ge=0, le=100)


class CapacityForecast(BaseModel):
    start_date: date
    end_date: date
    total_employees: int = Field(ge=0)
    forecast_data: list[CapacitySample] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_range(self) -> CapacityForecast:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class SkillGapAnalysis(BaseModel):
    """Coverage of one tracked skill across the organisation."""

    skill_name: str
    current_count: int = Field(ge=0)
    recommended_count: int = Field(ge=0)
    coverage_percentage: float = Field(ge=0, le=100)
    is_gap: bool
    priority: SkillPriority

    @model_validator(mode="after")
    def validate_recommended(self) -> SkillGapAnalysis:
        if self.recommended_count < self.current_count:
            raise ValueError("recommended_count must be at least current_count")
        return self


# ---------------------------------------------------------------------------
# Capacity
# ---------------------------------------------------------------------------
def _is_available_on(employee: EmployeeRecord, day: date) -> bool:
    if not employee.is_on_project:
        return True
    return employee.project_end_date is not None and employee.project_end_date <= day


def _becomes_available_in(employee: EmployeeRecord, day: date) -> bool:
    end = employee.project_end_date
    return (
        employee.is_on_project
        and end is not None
        and end.year == day.year
        and end.month == day.month
    )


def generate_capacity_forecast(
    employees: list[EmployeeRecord],
    start: date,
    end: date,
) -> CapacityForecast:
    """One sample per month from *start* through *end* inclusive.

    Sample dates keep the day of *start* (clamped to short months) and are
    always offset from *start*, so a 31st never drifts to the 28th.

    Raises:
        ValueError: If *end* is before *start*.
    """
    if end < start:
        raise ValueError(f"Forecast end {end} is before start {start}")

    total = len(employees)
    samples: list[CapacitySample] = []
    offset = 0
    current = start
    while current <= end:
        available = sum(1 for e in employees if _is_available_on(e, current))
        becoming = sum(1 for e in employees if _becomes_available_in(e, current))
        utilization = (total - available) / total * 100 if total else 0.0
        samples.append(
            CapacitySample(
                sample_date=current,
                available_employees=available,
                becoming_available=becoming,
                utilization_rate=utilization,
            )
        )
        offset += 1
        current = add_months(start, offset)

    logger.info("Capacity forecast %s..%s: %d samples for %d employees", start, end, len(samples), total)
    return CapacityForecast(start_date=start, end_date=end, total_employees=total, forecast_data=samples)


# ---------------------------------------------------------------------------
# Skill gaps
# ---------------------------------------------------------------------------
def determine_skill_priority(skill: str, coverage: float, taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY) -> SkillPriority:
    if skill in taxonomy.high_priority_skills and coverage < CRITICAL_COVERAGE_THRESHOLD:
        return "Critical"
    if coverage < HIGH_COVERAGE_THRESHOLD:
        return "High"
    if coverage < GAP_COVERAGE_THRESHOLD:
        return "Medium"
    return "Low"


def analyze_skill_gaps(
    employees: list[EmployeeRecord],
    taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
) -> list[SkillGapAnalysis]:
    """Coverage of every critical skill, most urgent first.

    Holders are counted by exact (trimmed, case-sensitive) skill token; an
    employee listing a skill twice still counts once. Sorted by priority
    descending, then coverage ascending; ties keep critical-skill order.
    """
    total = len(employees)
    holders: Counter[str] = Counter()
    for employee in employees:
        holders.update(set(employee.skill_list))

    target = math.ceil(total * GAP_COVERAGE_THRESHOLD / 100)
    gaps: list[SkillGapAnalysis] = []
    for skill in taxonomy.critical_skills:
        count = holders.get(skill, 0)
        coverage = count / total * 100 if total else 0.0
        gaps.append(
            SkillGapAnalysis(
                skill_name=skill,
                current_count=count,
                recommended_count=max(count, target),
                coverage_percentage=coverage,
                is_gap=coverage < GAP_COVERAGE_THRESHOLD,
                priority=determine_skill_priority(skill, coverage, taxonomy),
            )
        )

    gaps.sort(key=lambda g: (-PRIORITY_RANK[g.priority], g.coverage_percentage))
    logger.info(
        "Skill gap analysis over %d employees: %d of %d critical skills below target",
        total,
        sum(1 for g in gaps if g.is_gap),
        len(gaps),
    )
    return gaps


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
class DashboardMetrics(BaseModel):
    """Headline numbers plus a short forecast and the most urgent gaps."""

    total_employees: int = 0
    available_employees: int = 0
    on_project_employees: int = 0
    utilization_rate: float = 0.0
    capacity_forecast: CapacityForecast
    top_skill_gaps: list[SkillGapAnalysis] = Field(default_factory=list)


def build_dashboard_metrics(
    employees: list[EmployeeRecord],
    today: date | None = None,
    taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
    forecast_months: int = 6,
    top_gaps: int = 10,
) -> DashboardMetrics:
    today = today or date.today()
    total = len(employees)
    on_project = sum(1 for e in employees if e.is_on_project)

    return DashboardMetrics(
        total_employees=total,
        available_employees=total - on_project,
        on_project_employees=on_project,
        utilization_rate=on_project / total * 100 if total else 0.0,
        capacity_forecast=generate_capacity_forecast(employees, today, add_months(today, forecast_months)),
        top_skill_gaps=analyze_skill_gaps(employees, taxonomy)[:top_gaps],
    )
