"""Team analysis service: validation, soft-fail fallback and team comparison.

Single-team analysis never hard-fails on a processing error: the fallback
report is returned with ``success=False`` and a warning. Team comparison has
no such contract and lets errors propagate.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
import logging
import time

from pydantic import BaseModel, Field

from lib_staffing import __version__
from lib_staffing.engine.profile import TeamProfile
from lib_staffing.engine.team_analysis import (
    AITeamAnalysis,
    RiskLevel,
    analyze_team,
    fallback_analysis,
    validate_team_profile,
)
from lib_staffing.errors import ProfileValidationError


logger = logging.getLogger(__name__)

ANALYSIS_WARNING_HEADER = "X-Analysis-Warning"
RULE_ENGINE_SOURCE = "AI Analytics Engine"
FALLBACK_SOURCE = "Fallback Analysis Engine"

MIN_COMPARE_TEAMS = 2
MAX_COMPARE_TEAMS = 5

# (profile, context) -> report
TeamAnalyzerFn = Callable[[TeamProfile, str | None], AITeamAnalysis]


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------
class TeamAnalysisRequest(BaseModel):
    team_profile: TeamProfile
    project_context: str | None = None
    use_fallback: bool = False
    include_detailed_insights: bool = True


class TeamAnalysisResponse(BaseModel):
    analysis: AITeamAnalysis
    success: bool = True
    error_message: str | None = None
    processing_time_ms: int = Field(default=0, ge=0)
    data_source: str = RULE_ENGINE_SOURCE

    @property
    def warning(self) -> str | None:
        """Out-of-band warning for the consumer (e.g. an ``X-Analysis-Warning`` header)."""
        if self.success:
            return None
        return self.error_message or "Using fallback analysis"


class TeamComparisonEntry(BaseModel):
    team_index: int
    risk_level: RiskLevel
    strengths_count: int
    risks_count: int
    recommendations_count: int
    confidence_score: int
    suitability: str


class TeamComparison(BaseModel):
    team_count: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    overall_insights: list[str] = Field(default_factory=list)
    teams: list[TeamComparisonEntry] = Field(default_factory=list)
    responses: list[TeamAnalysisResponse] = Field(default_factory=list)


class ServiceHealthStatus(BaseModel):
    is_healthy: bool
    status: str
    last_checked: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    available_features: list[str] = Field(default_factory=list)
    version: str = __version__


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------
class TeamAnalysisService:
    """Runs team analyses with the degrade-not-fail policy.

    Args:
        analyzer: Rich analysis path. Any exception it raises is replaced by
            ``fallback_analysis``.
        max_workers: Thread pool size for ``compare_teams``.
    """

    def __init__(
        self,
        analyzer: TeamAnalyzerFn | None = None,
        max_workers: int = MAX_COMPARE_TEAMS,
    ) -> None:
        self._analyzer = analyzer or analyze_team
        self.max_workers = max_workers

    def analyze(self, request: TeamAnalysisRequest) -> TeamAnalysisResponse:
        """Analyse one team.

        Raises:
            ProfileValidationError: If the profile cannot be analysed. This is
                reported separately from processing failures, which fall back.
        """
        profile = request.team_profile
        if not validate_team_profile(profile):
            raise ProfileValidationError(
                "Invalid team profile: total_members must be positive, available_members within "
                "0..total_members, avg_experience non-negative and avg_match_score within 0..100"
            )

        started = time.perf_counter()
        success = True
        error_message: str | None = None

        if request.use_fallback:
            analysis = fallback_analysis(profile)
            source = FALLBACK_SOURCE
        else:
            try:
                analysis = self._analyzer(profile, request.project_context)
                source = RULE_ENGINE_SOURCE
            except Exception as exc:
                logger.exception("Team analysis failed, using fallback analysis")
                analysis = fallback_analysis(profile)
                source = FALLBACK_SOURCE
                success = False
                error_message = f"AI analysis unavailable, using fallback analysis: {exc}"

        if not request.include_detailed_insights:
            analysis = analysis.model_copy(update={"key_insights": []})

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Team analysis completed in %d ms (source=%s, confidence=%d)",
            elapsed_ms,
            source,
            analysis.confidence_score,
        )
        return TeamAnalysisResponse(
            analysis=analysis,
            success=success,
            error_message=error_message,
            processing_time_ms=elapsed_ms,
            data_source=source,
        )

    def compare_teams(self, requests: list[TeamAnalysisRequest]) -> TeamComparison:
        """Analyse 2–5 teams concurrently and summarise them side by side.

        Raises:
            ValueError: If fewer than 2 or more than 5 teams are given.
            ProfileValidationError: If any profile is invalid. No partial
                comparison is returned.
        """
        if not MIN_COMPARE_TEAMS <= len(requests) <= MAX_COMPARE_TEAMS:
            raise ValueError(
                f"Team comparison requires {MIN_COMPARE_TEAMS} to {MAX_COMPARE_TEAMS} teams, got {len(requests)}"
            )

        with ThreadPoolExecutor(max_workers=min(len(requests), self.max_workers)) as pool:
            responses = list(pool.map(self.analyze, requests))

        entries = [
            TeamComparisonEntry(
                team_index=i,
                risk_level=r.analysis.risk_level,
                strengths_count=len(r.analysis.team_strengths),
                risks_count=len(r.analysis.risk_factors),
                recommendations_count=len(r.analysis.recommendations),
                confidence_score=r.analysis.confidence_score,
                suitability=r.analysis.project_suitability,
            )
            for i, r in enumerate(responses)
        ]

        risk_counts = Counter(e.risk_level for e in entries)
        avg_confidence = sum(e.confidence_score for e in entries) / len(entries)
        insights = [
            f"Analyzed {len(entries)} teams",
            f"High risk teams: {risk_counts['HIGH']}",
            f"Medium risk teams: {risk_counts['MEDIUM']}",
            f"Low risk teams: {risk_counts['LOW']}",
            f"Average confidence: {avg_confidence:.1f}%",
        ]

        return TeamComparison(
            team_count=len(entries),
            overall_insights=insights,
            teams=entries,
            responses=responses,
        )

    def health(self) -> ServiceHealthStatus:
        return ServiceHealthStatus(
            is_healthy=True,
            status="Operational",
            available_features=[
                "Team Analysis",
                "Fallback Analysis",
                "Team Comparison",
                "Project Context Analysis",
            ],
        )
