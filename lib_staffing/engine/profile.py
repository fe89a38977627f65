"""Team profile aggregation: reduce employee records to a TeamProfile.

All functions are *pure*.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
import math

from pydantic import BaseModel, Field

from lib_staffing.employee_models import EmployeeRecord
from lib_staffing.engine.matching import MatchCandidate
from lib_staffing.skill_taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------
class TeamProfile(BaseModel):
    """Aggregate summary of a set of employees, used as analysis input.

    Values are not range-checked here; ``validate_team_profile`` decides
    whether a profile can be analysed.
    """

    total_members: int = 0
    available_members: int = 0
    skills_breakdown: dict[str, float] = Field(default_factory=dict)  # category → %
    avg_experience: float = 0.0
    departments: dict[str, int] = Field(default_factory=dict)
    avg_match_score: float = 0.0  # 0..100

    @property
    def availability_ratio(self) -> float:
        if self.total_members <= 0:
            return 0.0
        return self.available_members / self.total_members

    @property
    def dominant_skill(self) -> tuple[str, float]:
        """(category, percentage) with the highest share, or ("General", 0)."""
        if not self.skills_breakdown:
            return ("General", 0.0)
        # max() keeps the first entry on ties.
        return max(self.skills_breakdown.items(), key=lambda kv: kv[1])

    @property
    def skill_diversity(self) -> int:
        return len(self.skills_breakdown)


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def skills_breakdown(
    employees: list[EmployeeRecord],
    taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
) -> dict[str, float]:
    """Percentage of all skill tokens falling in each category.

    Categories without any token are left out. Percentages are rounded half up to
    whole numbers and need not sum to 100.
    """
    counts: Counter[str] = Counter({category: 0 for category in taxonomy.categories})
    for employee in employees:
        for skill in employee.skill_list:
            counts[taxonomy.categorize(skill)] += 1

    total = sum(counts.values())
    if total == 0:
        return {}
    return {
        category: _round_half_up(count / total * 100)
        for category, count in counts.items()
        if count > 0
    }


def aggregate_team_profile(
    employees: list[EmployeeRecord],
    matches: list[MatchCandidate] | None = None,
    taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
    today: date | None = None,
) -> TeamProfile:
    """Summarise *employees* into a TeamProfile.

    Args:
        employees: Team members in store order.
        matches: Optional outcome of a prior match pass. Members without a
            match count as 0.
        taxonomy: Keyword tables used to categorise skills.
        today: Reference date for availability (defaults to the current date).

    Returns:
        TeamProfile; an empty input yields an all-zero profile.
    """
    total = len(employees)
    if total == 0:
        return TeamProfile()

    available = sum(1 for e in employees if e.availability_status(today) == "Available")

    departments: dict[str, int] = dict(Counter(e.department or "Unknown" for e in employees))

    avg_experience = sum(e.experience_years for e in employees) / total

    scores = {m.employee.id: m.match_score for m in matches or []}
    avg_match = sum(scores.get(e.id, 0.0) for e in employees) / total * 100

    return TeamProfile(
        total_members=total,
        available_members=available,
        skills_breakdown=skills_breakdown(employees, taxonomy),
        avg_experience=_round_half_up(avg_experience, 1),
        departments=departments,
        avg_match_score=_round_half_up(min(100.0, max(0.0, avg_match)), 1),
    )
