"""Store-backed analytics: effectiveness, capacity, skill gaps and dashboard."""

from __future__ import annotations

from datetime import date
import logging

from lib_staffing.employee_models import EmployeeRecord, MemberSummary, add_months
from lib_staffing.employee_repository import EmployeeRepository, EmployeeStore
from lib_staffing.engine.capacity import (
    CapacityForecast,
    DashboardMetrics,
    SkillGapAnalysis,
    analyze_skill_gaps,
    build_dashboard_metrics,
    generate_capacity_forecast,
)
from lib_staffing.engine.effectiveness import TeamEffectivenessReport, evaluate_team_effectiveness
from lib_staffing.engine.matching import (
    BackendErrorPolicy,
    CrewLLMScoringBackend,
    MatchCandidate,
    MatchRequest,
    MatchScorer,
    match_employees,
)
from lib_staffing.engine.profile import TeamProfile, aggregate_team_profile
from lib_staffing.llm_config import get_available_llms
from lib_staffing.settings import AnalyticsSettings, load_settings
from lib_staffing.skill_taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy, load_taxonomy


logger = logging.getLogger(__name__)

DEFAULT_FORECAST_MONTHS = 12
DEFAULT_EMPLOYEES_PATH = "employees.json"


def create_match_scorer(
    settings: AnalyticsSettings | None = None,
    on_backend_error: BackendErrorPolicy = "raise",
) -> MatchScorer:
    """Build a scorer backed by the first configured LLM.

    Falls back to keyword-overlap scoring when no LLM is configured.
    """
    llms = get_available_llms(settings)
    if not llms:
        logger.warning("No LLM configured; matching uses keyword overlap scoring")
        return MatchScorer(on_backend_error=on_backend_error)
    label, llm = llms[0]
    logger.info("Matching uses the %s LLM", label)
    return MatchScorer(CrewLLMScoringBackend(llm), on_backend_error=on_backend_error)


class StaffingAnalytics:
    """Runs the analytics over a fresh snapshot of the employee store per call."""

    def __init__(
        self,
        store: EmployeeStore,
        taxonomy: SkillTaxonomy = DEFAULT_TAXONOMY,
        scorer: MatchScorer | None = None,
    ) -> None:
        self.store = store
        self.taxonomy = taxonomy
        self.scorer = scorer or MatchScorer()

    @classmethod
    def from_settings(
        cls,
        settings: AnalyticsSettings | None = None,
        on_backend_error: BackendErrorPolicy = "raise",
    ) -> StaffingAnalytics:
        """Wire the JSON employee store, taxonomy file and LLM scorer from settings.

        ``None`` reads the settings from the environment.
        """
        settings = settings or load_settings()
        store = EmployeeRepository(settings.employees_path or DEFAULT_EMPLOYEES_PATH)
        taxonomy = load_taxonomy(settings.taxonomy_path)
        scorer = create_match_scorer(settings, on_backend_error)
        return cls(store, taxonomy, scorer)

    def match(self, request: MatchRequest) -> list[MatchCandidate]:
        return match_employees(request, self.store, self.scorer)

    def _select(self, employee_ids: list[int]) -> list[EmployeeRecord]:
        wanted = set(employee_ids)
        return [e for e in self.store.list_employees() if e.id in wanted]

    def team_profile(
        self,
        employee_ids: list[int],
        matches: list[MatchCandidate] | None = None,
        today: date | None = None,
    ) -> TeamProfile:
        return aggregate_team_profile(self._select(employee_ids), matches, self.taxonomy, today)

    def team_effectiveness(self, employee_ids: list[int], requirements: str) -> TeamEffectivenessReport:
        """Effectiveness of the given employees, in store order.

        Raises:
            ValueError: If any id is not in the store.
        """
        members = self._select(employee_ids)
        unknown = sorted(set(employee_ids) - {e.id for e in members})
        if unknown:
            raise ValueError(f"Unknown employee ids: {', '.join(str(i) for i in unknown)}")
        return evaluate_team_effectiveness(
            [MemberSummary.from_employee(e) for e in members],
            requirements,
            self.taxonomy,
        )

    def capacity_forecast(self, start: date | None = None, end: date | None = None) -> CapacityForecast:
        """Monthly capacity; defaults to today through twelve months ahead."""
        start = start or date.today()
        end = end or add_months(start, DEFAULT_FORECAST_MONTHS)
        return generate_capacity_forecast(self.store.list_employees(), start, end)

    def skill_gaps(self) -> list[SkillGapAnalysis]:
        return analyze_skill_gaps(self.store.list_employees(), self.taxonomy)

    def dashboard_metrics(self, today: date | None = None) -> DashboardMetrics:
        employees = self.store.list_employees()
        logger.info("Building dashboard metrics for %d employees", len(employees))
        return build_dashboard_metrics(employees, today=today, taxonomy=self.taxonomy)
