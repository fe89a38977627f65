"""Rule-based team analysis: strengths, risks, gaps and delivery risk.

``analyze_team`` applies ``ANALYSIS_RULES`` in order to a fresh report; the
order is part of the output contract since every rule appends text.
All functions are *pure* apart from mutating the report they are handed.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
import logging
from typing import Literal

from pydantic import BaseModel, Field

from lib_staffing.engine.profile import TeamProfile
from lib_staffing.skill_taxonomy import DEFAULT_TAXONOMY, OTHER_CATEGORY, SkillTaxonomy


logger = logging.getLogger(__name__)

RiskLevel = Literal["LOW", "MEDIUM", "HIGH"]

RULE_CONFIDENCE = 85
FALLBACK_CONFIDENCE = 60


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
class DeliveryRisk(BaseModel):
    """Delivery risk level plus its explanation."""

    level: RiskLevel
    explanation: str = Field(..., min_length=1)

    def __str__(self) -> str:
        return f"{self.level} - {self.explanation}"

    @classmethod
    def parse(cls, text: str) -> DeliveryRisk:
        """Read ``"<LEVEL> - <explanation>"``; unknown prefixes count as MEDIUM."""
        head, _, tail = text.partition(" - ")
        upper = text.strip().upper()
        level: RiskLevel = "MEDIUM"
        if upper.startswith("LOW"):
            level = "LOW"
        elif upper.startswith("HIGH"):
            level = "HIGH"
        if tail:
            explanation = tail.strip()
        else:
            # No separator: drop a bare leading level word such as "HIGH" or "HIGH:".
            words = head.strip().split(maxsplit=1)
            if words and words[0].rstrip("-:").upper() in ("LOW", "MEDIUM", "HIGH"):
                words = words[1:]
            explanation = " ".join(words).lstrip(" -:")
        return cls(level=level, explanation=explanation or "Assessment in progress")


class AITeamAnalysis(BaseModel):
    """Full analysis report for one team."""

    team_strengths: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    skill_gaps: list[str] = Field(default_factory=list)
    key_insights: list[str] = Field(default_factory=list)
    project_suitability: str = ""
    team_dynamics: str = ""
    delivery_risk: DeliveryRisk | None = None
    confidence_score: int = Field(default=RULE_CONFIDENCE, ge=0, le=100)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def risk_level(self) -> RiskLevel:
        return self.delivery_risk.level if self.delivery_risk else "MEDIUM"

    @property
    def is_complete(self) -> bool:
        return (
            bool(self.team_strengths)
            and bool(self.project_suitability)
            and bool(self.team_dynamics)
            and self.delivery_risk is not None
        )


AnalysisRule = Callable[[TeamProfile, AITeamAnalysis], None]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
def validate_team_profile(profile: TeamProfile | None) -> bool:
    """True if *profile* can be analysed. Invalid profiles are rejected, not clamped."""
    return (
        profile is not None
        and profile.total_members > 0
        and 0 <= profile.available_members <= profile.total_members
        and profile.avg_experience >= 0
        and 0 <= profile.avg_match_score <= 100
    )


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
def _rule_team_size(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    """<4 → breadth risk, >12 → coordination risk, else a size strength."""
    if profile.total_members < 4:
        analysis.risk_factors.append(
            "Small team size may limit capability breadth and create single points of failure"
        )
        analysis.recommendations.append(
            "Consider expanding team or partnering with other teams for complex projects"
        )
        analysis.recommendations.append("Implement cross-training to reduce dependency risks")
    elif profile.total_members > 12:
        analysis.risk_factors.append(
            "Large team size requires strong coordination and may slow decision-making"
        )
        analysis.recommendations.append(
            "Implement clear team structure with defined roles and communication protocols"
        )
        analysis.recommendations.append("Consider breaking into smaller sub-teams for complex projects")
    else:
        analysis.team_strengths.append(
            f"Optimal team size of {profile.total_members} members enables effective "
            "collaboration without coordination overhead"
        )


def _rule_availability(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    """Sets the delivery risk: <0.3 HIGH, >0.7 LOW, otherwise MEDIUM."""
    ratio = profile.availability_ratio
    counts = f"{profile.available_members}/{profile.total_members}"

    if ratio < 0.3:
        analysis.risk_factors.append(f"Low availability ({counts}) creates significant resource constraints")
        analysis.delivery_risk = DeliveryRisk(
            level="HIGH",
            explanation="Limited resource availability threatens project timelines and may require external support",
        )
        analysis.recommendations.append("Prioritize project backlog and consider timeline extensions")
        analysis.recommendations.append("Explore contractor or temporary resource options")
    elif ratio > 0.7:
        analysis.team_strengths.append(
            f"Excellent availability ({counts}) enables immediate project deployment and rapid iteration"
        )
        analysis.delivery_risk = DeliveryRisk(
            level="LOW",
            explanation="Strong resource availability supports reliable delivery with minimal scheduling risks",
        )
    else:
        analysis.delivery_risk = DeliveryRisk(
            level="MEDIUM",
            explanation="Moderate availability requires careful resource planning and sprint capacity management",
        )
        analysis.recommendations.append("Implement capacity planning tools and regular availability forecasting")


def _rule_skills(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    """Dominant-skill concentration, diversity, then per-category gaps."""
    name, share = profile.dominant_skill
    diversity = profile.skill_diversity

    if share > 60:
        analysis.team_strengths.append(
            f"Strong {name} expertise ({share:.1f}%) provides deep technical capability and specialization"
        )
        analysis.project_suitability = (
            f"Exceptional fit for {name.lower()}-focused projects requiring deep technical "
            "expertise and specialized knowledge"
        )
        analysis.risk_factors.append(
            f"Heavy concentration in {name} may create dependency risks in other technical areas"
        )
    else:
        analysis.team_strengths.append(
            "Well-balanced skill distribution supports versatile full-stack development capabilities"
        )
        analysis.project_suitability = (
            "Versatile team suitable for diverse project types and full-stack development initiatives"
        )

    if diversity < 3:
        analysis.risk_factors.append(
            "Limited skill diversity may create bottlenecks and single points of failure in complex projects"
        )
        analysis.skill_gaps.append("Cross-training in complementary technologies and methodologies")
        analysis.recommendations.append("Implement skill development program to broaden technical capabilities")
    elif diversity > 6:
        analysis.team_strengths.append(
            f"Exceptional skill diversity across {diversity} areas enables comprehensive solution delivery"
        )
    else:
        analysis.team_strengths.append(
            f"Good skill diversity across {diversity} technical areas supports varied project requirements"
        )

    _category_gaps(profile, analysis)


# (category, minimum %, gap text)
_CATEGORY_THRESHOLDS: list[tuple[str, float, str]] = [
    ("Backend", 20, "Backend Architecture and API Design expertise for scalable system development"),
    ("Frontend", 20, "Modern Frontend Frameworks and UI/UX Design for engaging user experiences"),
    ("Cloud", 15, "Cloud Infrastructure and DevOps Automation for scalable deployment"),
    ("Database", 15, "Database Design and Optimization for efficient data management"),
]

_STANDING_GAPS: list[str] = [
    "Advanced Security and Compliance frameworks",
    "Performance Optimization and Scalability Planning",
]


def _category_gaps(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    for category, minimum, gap in _CATEGORY_THRESHOLDS:
        if profile.skills_breakdown.get(category, 0.0) < minimum:
            analysis.skill_gaps.append(gap)
    analysis.skill_gaps.extend(_STANDING_GAPS)


def _rule_experience(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    avg = profile.avg_experience
    if avg < 2:
        analysis.risk_factors.append(
            "Junior-heavy team composition requires additional mentorship and may extend delivery timelines"
        )
        analysis.recommendations.append(
            "Assign experienced technical lead or implement comprehensive pair programming practices"
        )
        analysis.recommendations.append(
            "Establish structured code review processes and knowledge transfer protocols"
        )
    elif avg > 8:
        analysis.team_strengths.append(
            f"High experience level ({avg:.1f} years avg) enables complex architectural decisions "
            "and advanced problem-solving"
        )
        analysis.risk_factors.append(
            "Senior-heavy team may have higher costs and potential for over-engineering solutions"
        )
        analysis.recommendations.append("Balance technical excellence with pragmatic delivery timelines")
    else:
        analysis.team_strengths.append(
            f"Balanced experience level ({avg:.1f} years avg) combines innovation potential with proven stability"
        )


def _rule_match_score(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    """>85 exceptional, >70 strong, <60 mismatch; 60–70 adds nothing."""
    score = profile.avg_match_score
    if score > 85:
        analysis.team_strengths.append(
            f"Exceptional project alignment ({score:.1f}%) indicates optimal team selection for current requirements"
        )
    elif score > 70:
        analysis.team_strengths.append(
            f"Strong project alignment ({score:.1f}%) suggests good team-requirement matching"
        )
    elif score < 60:
        analysis.risk_factors.append(
            f"Low project alignment ({score:.1f}%) suggests significant skill-requirement mismatch"
        )
        analysis.skill_gaps.append("Training in project-specific technologies and domain knowledge")
        analysis.recommendations.append("Consider team augmentation or skill development before project start")


def _rule_team_dynamics(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    if profile.avg_match_score > 80:
        alignment = "excellent"
    elif profile.avg_match_score > 60:
        alignment = "good"
    else:
        alignment = "moderate"

    availability = (
        "high availability supports intensive collaboration and rapid iteration cycles"
        if profile.availability_ratio > 0.6
        else "moderate availability requires structured communication and efficient coordination protocols"
    )
    experience = (
        "senior expertise enables mentorship and technical leadership"
        if profile.avg_experience > 5
        else "balanced experience promotes knowledge sharing and collaborative learning"
    )

    analysis.team_dynamics = (
        f"Team demonstrates {alignment} project alignment with strong collaborative potential. "
        f"With {experience}, the team is well-positioned for effective knowledge transfer. "
        f"Current {availability}."
    )


def _rule_key_insights(profile: TeamProfile, analysis: AITeamAnalysis) -> None:
    name, share = profile.dominant_skill
    tier = "high-complexity architectural" if profile.avg_experience > 5 else "standard development"

    analysis.key_insights.append(
        f"Skill concentration in {name} ({share:.1f}%) creates both competitive advantage "
        "and potential dependency risk"
    )
    analysis.key_insights.append(
        f"Current availability of {profile.availability_ratio:.0%} directly impacts sprint capacity "
        "and delivery predictability"
    )
    analysis.key_insights.append(
        f"Team experience profile of {profile.avg_experience:.1f} years suggests {tier} project suitability"
    )
    if profile.skill_diversity > 5:
        analysis.key_insights.append(
            f"Exceptional skill diversity ({profile.skill_diversity} areas) enables full-stack ownership "
            "and reduces external dependencies"
        )


ANALYSIS_RULES: tuple[AnalysisRule, ...] = (
    _rule_team_size,
    _rule_availability,
    _rule_skills,
    _rule_experience,
    _rule_match_score,
    _rule_team_dynamics,
    _rule_key_insights,
)


def _rule_project_context(
    profile: TeamProfile,
    analysis: AITeamAnalysis,
    context: str,
    taxonomy: SkillTaxonomy,
) -> None:
    """Flag skill categories the project context asks for but the team lacks."""
    required = taxonomy.extract_requirements(context)
    if not required:
        return

    by_category: dict[str, list[str]] = {}
    for skill in required:
        category = taxonomy.categorize(skill)
        if category != OTHER_CATEGORY:
            by_category.setdefault(category, []).append(skill)

    missing = [c for c in by_category if profile.skills_breakdown.get(c, 0.0) <= 0]
    for category in missing:
        analysis.skill_gaps.append(
            f"{category} capability required by the project ({', '.join(by_category[category])}) "
            "is not covered by the team"
        )
    covered = len(by_category) - len(missing)
    analysis.key_insights.append(
        f"Project context calls for {len(required)} tracked skills across {len(by_category)} areas; "
        f"team covers {covered} of those areas"
    )


def _ensure_completeness(analysis: AITeamAnalysis) -> None:
    if not analysis.recommendations:
        analysis.recommendations.extend([
            "Monitor team utilization metrics and implement regular capacity planning",
            "Establish knowledge sharing sessions to reduce single points of failure",
            "Consider strategic skill development in emerging technologies",
        ])
    if not analysis.project_suitability:
        analysis.project_suitability = (
            "Team is well-suited for standard software development projects with balanced technical requirements"
        )
    if analysis.delivery_risk is None:
        analysis.delivery_risk = DeliveryRisk(
            level="MEDIUM",
            explanation="Standard project risks apply, careful planning recommended",
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def analyze_team(
    profile: TeamProfile,
    context: str | None = None,
    taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
) -> AITeamAnalysis:
    """Run the full rule battery over *profile*.

    Callers must check ``validate_team_profile`` first; the result for an
    invalid profile is unspecified.
    """
    analysis = AITeamAnalysis(confidence_score=RULE_CONFIDENCE)

    for rule in ANALYSIS_RULES:
        rule(profile, analysis)
    if context and context.strip():
        _rule_project_context(profile, analysis, context, taxonomy)
    _ensure_completeness(analysis)

    logger.info(
        "Generated team analysis with %d strengths and %d risks",
        len(analysis.team_strengths),
        len(analysis.risk_factors),
    )
    return analysis


def fallback_analysis(profile: TeamProfile) -> AITeamAnalysis:
    """Reduced-detail report used when the full rule pass is unavailable."""
    analysis = AITeamAnalysis(confidence_score=FALLBACK_CONFIDENCE)

    analysis.team_strengths.append(
        f"Team of {profile.total_members} members with {profile.avg_experience:.1f} years average experience"
    )
    analysis.team_strengths.append(
        f"{profile.available_members} members available for immediate project assignment"
    )

    if profile.skills_breakdown:
        name, _ = profile.dominant_skill
        analysis.team_strengths.append(f"Strong {name} capabilities")
        analysis.project_suitability = f"Suitable for {name.lower()}-focused development projects"
    else:
        analysis.project_suitability = "Suitable for general software development projects"

    if profile.availability_ratio > 0.5:
        analysis.delivery_risk = DeliveryRisk(level="MEDIUM", explanation="Standard delivery risks")
    else:
        analysis.delivery_risk = DeliveryRisk(level="HIGH", explanation="Resource constraints present")

    analysis.team_dynamics = "Team shows standard collaboration potential with balanced skill distribution"

    analysis.recommendations.append("Continue monitoring team capacity and skill development")
    analysis.recommendations.append("Implement regular team assessment and planning cycles")

    analysis.key_insights.append("Fallback analysis - limited AI insights available")
    return analysis
