"""Employee records and the member summaries derived from them."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


AvailabilityStatus = Literal["Available", "AvailableSoon", "OnProject"]

# An on-project employee whose project ends within this many months counts as
# "AvailableSoon".
AVAILABLE_SOON_MONTHS = 2


def add_months(day: date, months: int) -> date:
    """Shift *day* by *months*, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def split_csv(value: str | None) -> list[str]:
    """Split a comma-delimited field into trimmed, non-empty tokens."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class EmployeeRecord(BaseModel):
    """A single employee as handed over by the employee store."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(..., min_length=1)
    role: str = ""
    skills: str = ""
    technologies: str = ""
    department: str = "General"
    experience_years: int = Field(default=0, ge=0)
    rating: float | None = Field(default=None, ge=1, le=5)
    email: str | None = None
    is_on_project: bool = False
    current_project_name: str | None = None
    project_end_date: date | None = None
    avatar_url: str | None = None

    @property
    def skill_list(self) -> list[str]:
        return split_csv(self.skills)

    @property
    def technology_list(self) -> list[str]:
        return split_csv(self.technologies)

    def availability_status(self, today: date | None = None) -> AvailabilityStatus:
        """Derive availability relative to *today* (defaults to the current date)."""
        if not self.is_on_project:
            return "Available"
        today = today or date.today()
        if self.project_end_date is not None and self.project_end_date <= add_months(today, AVAILABLE_SOON_MONTHS):
            return "AvailableSoon"
        return "OnProject"


class MemberSummary(BaseModel):
    """Compact view of a team member used by the effectiveness calculator."""

    employee_id: int
    name: str
    role: str = ""
    skills: list[str] = Field(default_factory=list)
    experience_years: int = Field(default=0, ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)

    @classmethod
    def from_employee(cls, employee: EmployeeRecord) -> MemberSummary:
        """Build a summary; unrated employees get a rating of 0."""
        return cls(
            employee_id=employee.id,
            name=employee.name,
            role=employee.role,
            skills=employee.skill_list,
            experience_years=employee.experience_years,
            rating=employee.rating or 0.0,
        )
