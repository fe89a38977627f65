"""Match scoring: rank candidates against required skills and technologies.

The primary strategy asks a remote model for scores; the response is parsed
best-effort and never raises. Remote *call* failures propagate unless the
scorer is built with ``on_backend_error="fallback"``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import json
import logging
import math
from typing import Literal

from crewai import LLM
from pydantic import BaseModel, Field

from lib_staffing.employee_models import EmployeeRecord
from lib_staffing.employee_repository import EmployeeStore
from lib_staffing.errors import UpstreamScoringError


logger = logging.getLogger(__name__)

# (system_prompt, user_prompt) -> raw response text
ScoringBackend = Callable[[str, str], str]
BackendErrorPolicy = Literal["raise", "fallback"]


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class MatchCandidate(BaseModel):
    """An employee together with their fit against the requirements."""

    employee: EmployeeRecord
    match_score: float = Field(ge=0.0, le=1.0)


class MatchRequest(BaseModel):
    """Required skills and technologies for a staffing search."""

    skills: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)


class ParsedScores(BaseModel):
    """Scores extracted from a model response (employee id → score)."""

    scores: dict[int, float] = Field(default_factory=dict)


class ParseFailure(BaseModel):
    """A model response that held no usable score array."""

    reason: str
    excerpt: str = ""


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------
SYSTEM_PROMPT = (
    "You are an expert project staffing assistant. Given project requirements and a list of "
    "employees, return a JSON array of objects with employee IDs and their match scores."
)

MATCH_PROMPT = """I need to match employees for a project with the following requirements:

**Required Skills:** {skills}
**Required Technologies:** {technologies}

**Available Employees:**
{employee_list}

IMPORTANT: You must respond with ONLY a valid JSON array in this exact format:
[
  {{"employeeId": 1, "matchScore": 0.85}},
  {{"employeeId": 2, "matchScore": 0.72}}
]

Match scoring criteria:
- Calculate match score as a decimal between 0.0 and 1.0
- Consider both skills and technologies alignment with the requirements
- Higher scores (0.7-1.0) for strong alignment, medium (0.4-0.6) for some relevant skills, lower (0.1-0.3) for minimal alignment
- Include ALL employees with scores, even low ones
- Use the field names employeeId and matchScore exactly

Respond with ONLY the JSON array, no explanations or additional text."""


def build_match_prompt(
    required_skills: list[str],
    required_technologies: list[str],
    candidates: list[EmployeeRecord],
) -> str:
    """Render the user prompt with a compact candidate listing."""
    employee_list = "\n".join(
        f"ID: {e.id}, Name: {e.name}, Skills: {e.skills or 'None'}, Technologies: {e.technologies or 'None'}"
        for e in candidates
    )
    return MATCH_PROMPT.format(
        skills=", ".join(required_skills) or "None",
        technologies=", ".join(required_technologies) or "None",
        employee_list=employee_list,
    )


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------
def parse_match_scores(raw_text: str | None) -> ParsedScores | ParseFailure:
    """Extract ``[{employeeId, matchScore}, ...]`` from free text.

    Takes the substring between the first ``[`` and the last ``]``. Any
    malformed entry invalidates the whole response. Scores are clamped to
    [0, 1]. Never raises.
    """
    if not raw_text:
        return ParseFailure(reason="empty response")

    start = raw_text.find("[")
    end = raw_text.rfind("]")
    if start < 0 or end <= start:
        return _failure("no JSON array found", raw_text)

    try:
        data = json.loads(raw_text[start : end + 1])
    except json.JSONDecodeError as exc:
        return _failure(f"invalid JSON: {exc.msg}", raw_text)

    scores: dict[int, float] = {}
    for entry in data:
        if not isinstance(entry, dict):
            return _failure("array entry is not an object", raw_text)
        emp_id = entry.get("employeeId")
        score = entry.get("matchScore")
        if isinstance(emp_id, bool) or not isinstance(emp_id, int):
            return _failure("employeeId missing or not an integer", raw_text)
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return _failure("matchScore missing or not a number", raw_text)
        if isinstance(score, float) and not math.isfinite(score):
            return _failure("matchScore is not a finite number", raw_text)
        if emp_id in scores:
            return _failure(f"duplicate employeeId {emp_id}", raw_text)
        scores[emp_id] = float(max(0.0, min(1.0, score)))

    return ParsedScores(scores=scores)


def _failure(reason: str, raw_text: str) -> ParseFailure:
    logger.warning("Failed to parse match scores (%s): %s...", reason, raw_text[:200])
    return ParseFailure(reason=reason, excerpt=raw_text[:200])


# ---------------------------------------------------------------------------
# Scoring strategies
# ---------------------------------------------------------------------------
class CrewLLMScoringBackend:
    """Scoring backend that sends the prompt to a crewai LLM."""

    def __init__(self, llm: LLM) -> None:
        self.llm = llm

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        try:
            response = self.llm.call(messages)
        except Exception as exc:
            raise UpstreamScoringError(f"Match scoring request failed: {exc}") from exc
        return str(response or "")


def keyword_overlap_scores(
    required_skills: list[str],
    required_technologies: list[str],
    candidates: list[EmployeeRecord],
) -> dict[int, float]:
    """Deterministic score: share of requirements found in a candidate's skills.

    A requirement is met when it and one of the candidate's skill or
    technology tokens contain each other (case-insensitive).
    """
    required = _dedupe([*required_skills, *required_technologies])
    if not required:
        return {}
    wanted = [r.lower() for r in required]

    scores: dict[int, float] = {}
    for candidate in candidates:
        tokens = [t.lower() for t in (*candidate.skill_list, *candidate.technology_list)]
        hits = sum(1 for req in wanted if any(req in tok or tok in req for tok in tokens))
        scores[candidate.id] = round(hits / len(wanted), 2)
    return scores


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        token = value.strip()
        if token and token.lower() not in seen:
            seen.add(token.lower())
            result.append(token)
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
class MatchScorer:
    """Score a candidate pool against requirements.

    Args:
        backend: Remote scoring strategy. ``None`` uses ``keyword_overlap_scores``.
        on_backend_error: ``"raise"`` lets backend failures propagate;
            ``"fallback"`` logs them and scores with ``keyword_overlap_scores``.
    """

    def __init__(
        self,
        backend: ScoringBackend | None = None,
        on_backend_error: BackendErrorPolicy = "raise",
    ) -> None:
        self.backend = backend
        self.on_backend_error = on_backend_error

    def score(
        self,
        required_skills: Iterable[str],
        required_technologies: Iterable[str],
        candidates: list[EmployeeRecord],
    ) -> list[MatchCandidate]:
        """Return scored candidates, best first; ties keep pool order.

        Candidates the scorer returned no score for are left out.
        """
        skills = _dedupe(required_skills)
        technologies = _dedupe(required_technologies)

        if not skills and not technologies:
            logger.info("No skills or technologies requested, returning no matches")
            return []
        if not candidates:
            logger.info("Empty candidate pool, returning no matches")
            return []

        scores = self._score_map(skills, technologies, candidates)

        results = [
            MatchCandidate(employee=c, match_score=scores[c.id])
            for c in candidates
            if c.id in scores
        ]
        results = sorted(results, key=lambda r: r.match_score, reverse=True)
        logger.info("Matched %d of %d candidates", len(results), len(candidates))
        return results

    def _score_map(
        self,
        skills: list[str],
        technologies: list[str],
        candidates: list[EmployeeRecord],
    ) -> dict[int, float]:
        if self.backend is None:
            return keyword_overlap_scores(skills, technologies, candidates)

        prompt = build_match_prompt(skills, technologies, candidates)
        try:
            raw = self.backend(SYSTEM_PROMPT, prompt)
        except Exception:
            if self.on_backend_error != "fallback":
                raise
            logger.warning("Remote match scoring failed, using keyword overlap", exc_info=True)
            return keyword_overlap_scores(skills, technologies, candidates)

        parsed = parse_match_scores(raw)
        if isinstance(parsed, ParseFailure):
            return {}
        return parsed.scores


def match_employees(
    request: MatchRequest,
    store: EmployeeStore,
    scorer: MatchScorer | None = None,
) -> list[MatchCandidate]:
    """Score the whole employee population for *request*."""
    scorer = scorer or MatchScorer()
    if not request.skills and not request.technologies:
        return []
    return scorer.score(request.skills, request.technologies, store.list_employees())
