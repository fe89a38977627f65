"""Team effectiveness: skills coverage, experience balance and synergy.

Scores are heuristics on a 0–100 scale. An empty member list yields an
all-zero report instead of dividing by zero.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
import logging
import uuid

import numpy as np
from pydantic import BaseModel, Field

from lib_staffing.employee_models import MemberSummary
from lib_staffing.skill_taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy


logger = logging.getLogger(__name__)

LOW_RATING_THRESHOLD = 3.5


class TeamEffectivenessReport(BaseModel):
    """Effectiveness scores and narrative for an explicit member list."""

    team_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    analysis_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    team_members: list[MemberSummary] = Field(default_factory=list)
    skills_coverage: float = Field(default=0.0, ge=0, le=100)
    experience_balance: float = Field(default=0.0, ge=0, le=100)
    team_synergy: float = Field(default=0.0, ge=0)
    overall_effectiveness: float = Field(default=0.0, ge=0)
    insights: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------
def _covers(team_skill: str, required: str) -> bool:
    a, b = team_skill.lower(), required.lower()
    return b in a or a in b


def missing_skills(members: list[MemberSummary], required: list[str]) -> list[str]:
    """Required skills no member's skill contains (or is contained in)."""
    team_skills = {s for m in members for s in m.skills if s}
    return [r for r in required if not any(_covers(s, r) for s in team_skills)]


def skills_coverage(members: list[MemberSummary], required: list[str]) -> float:
    """Percent of *required* held by the team; 100 when nothing is required."""
    if not required:
        return 100.0
    covered = len(required) - len(missing_skills(members, required))
    return covered / len(required) * 100


def experience_balance(members: list[MemberSummary]) -> float:
    """Mean of a low-spread score and a seniority score."""
    if not members:
        return 0.0
    years = np.array([m.experience_years for m in members], dtype=float)
    balance_score = max(0.0, 100 - float(np.std(years)) * 10)
    experience_score = min(100.0, float(np.mean(years)) * 10)
    return (balance_score + experience_score) / 2


def team_synergy(members: list[MemberSummary]) -> float:
    """Role diversity, mean rating and rating consistency, averaged."""
    if not members:
        return 0.0
    ratings = np.array([m.rating for m in members], dtype=float)
    unique_roles = len({m.role for m in members})

    diversity_score = min(100.0, unique_roles * 25.0)
    quality_score = float(np.mean(ratings)) * 20
    consistency_score = max(0.0, 100 - float(np.var(ratings)) * 50)
    return (diversity_score + quality_score + consistency_score) / 3


# ---------------------------------------------------------------------------
# Narrative
# ---------------------------------------------------------------------------
def _insights(report: TeamEffectivenessReport) -> list[str]:
    insights: list[str] = []

    if report.skills_coverage >= 90:
        insights.append("🎯 Excellent skills coverage - all critical requirements are met")
    elif report.skills_coverage >= 70:
        insights.append("⚠️ Good skills coverage with minor gaps to address")
    else:
        insights.append("🚨 Significant skill gaps identified - consider additional team members")

    if report.experience_balance >= 80:
        insights.append("👥 Well-balanced team with good mix of experience levels")
    elif report.experience_balance >= 60:
        insights.append("📊 Moderate experience balance - some adjustment may be beneficial")
    else:
        insights.append("⚖️ Experience imbalance - consider rebalancing senior/junior ratio")

    if report.team_synergy >= 85:
        insights.append("✨ High team synergy expected - complementary skills and roles")
    elif report.team_synergy >= 65:
        insights.append("🤝 Good team compatibility with room for optimization")
    else:
        insights.append("🔄 Team composition may benefit from restructuring")

    return insights


def _risks(members: list[MemberSummary]) -> list[str]:
    risks: list[str] = []
    if not members:
        return risks

    skill_counts = Counter(s for m in members for s in m.skills)
    single_holders = [skill for skill, count in skill_counts.items() if count == 1]
    if single_holders:
        risks.append(f"🎯 Single points of failure in: {', '.join(single_holders[:3])}")

    years = [m.experience_years for m in members]
    if max(years) - min(years) > 8:
        risks.append("📈 Large experience gap may affect team dynamics")

    role_counts = Counter(m.role for m in members)
    crowded = [role for role, count in role_counts.items() if count > 2]
    if crowded:
        risks.append(f"👥 Potential role overlap in: {', '.join(crowded)}")

    return risks


def _recommendations(members: list[MemberSummary], required: list[str]) -> list[str]:
    recs: list[str] = []

    missing = missing_skills(members, required)
    if missing:
        recs.append(f"🔍 Consider adding team member(s) with: {', '.join(missing[:3])}")

    if members:
        avg_experience = sum(m.experience_years for m in members) / len(members)
        if avg_experience < 3:
            recs.append("🎓 Consider adding a senior team member for mentorship and guidance")
        elif avg_experience > 10:
            recs.append("🌱 Consider adding junior members to balance cost and bring fresh perspectives")

    if any(m.rating < LOW_RATING_THRESHOLD for m in members):
        recs.append("⚡ Consider additional support or training for team members with lower ratings")

    return recs


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def evaluate_team_effectiveness(
    members: list[MemberSummary],
    requirements_text: str,
    taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
) -> TeamEffectivenessReport:
    """Score *members* against free-text project requirements.

    Args:
        members: The selected team.
        requirements_text: Free text; known skills are picked out using the
            taxonomy's requirement vocabulary.
        taxonomy: Keyword tables.

    Returns:
        TeamEffectivenessReport. With no members every score is 0 and only
        the threshold insights and missing-skill recommendation are filled.
    """
    required = taxonomy.extract_requirements(requirements_text or "")

    if members:
        coverage = skills_coverage(members, required)
        balance = experience_balance(members)
        synergy = team_synergy(members)
        overall = (coverage + balance + synergy) / 3
    else:
        coverage = balance = synergy = overall = 0.0

    report = TeamEffectivenessReport(
        team_members=list(members),
        skills_coverage=coverage,
        experience_balance=balance,
        team_synergy=synergy,
        overall_effectiveness=overall,
    )
    report.insights = _insights(report)
    report.risks = _risks(report.team_members)
    report.recommendations = _recommendations(report.team_members, required)

    logger.info(
        "Team effectiveness for %d members: %.1f (coverage=%.1f balance=%.1f synergy=%.1f)",
        len(members),
        overall,
        coverage,
        balance,
        synergy,
    )
    return report
