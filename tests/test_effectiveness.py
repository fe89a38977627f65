"""Tests for lib_staffing/engine/effectiveness.py."""

import pytest

from lib_staffing.employee_models import MemberSummary
from lib_staffing.engine.effectiveness import (
    evaluate_team_effectiveness,
    experience_balance,
    skills_coverage,
    team_synergy,
)


def _member(i: int, role: str, skills: list[str], years: int, rating: float) -> MemberSummary:
    return MemberSummary(employee_id=i, name=f"M{i}", role=role, skills=skills, experience_years=years, rating=rating)


class TestScores:
    def test_coverage_no_requirements_is_full(self):
        assert skills_coverage([_member(1, "Dev", ["React"], 3, 4)], []) == 100.0

    def test_coverage_either_direction(self):
        members = [_member(1, "Dev", ["React Native", "SQL"], 3, 4)]
        # "React" is inside "React Native"; "SQL" is inside required "SQL Server".
        assert skills_coverage(members, ["React", "SQL Server", "Azure"]) == pytest.approx(200 / 3)

    def test_experience_balance_uniform(self):
        members = [_member(i, "Dev", [], 5, 4) for i in range(3)]
        # std 0 → 100, mean 5 → 50
        assert experience_balance(members) == 75.0

    def test_experience_balance_population_std(self):
        members = [_member(1, "Dev", [], 2, 4), _member(2, "Dev", [], 8, 4)]
        # std 3 → 70, mean 5 → 50
        assert experience_balance(members) == pytest.approx(60.0)

    def test_synergy(self):
        members = [
            _member(1, "Dev", [], 3, 4),
            _member(2, "QA", [], 3, 5),
        ]
        # roles 2 → 50, mean rating 4.5 → 90, variance 0.25 → 87.5
        assert team_synergy(members) == pytest.approx((50 + 90 + 87.5) / 3)


class TestEvaluateTeamEffectiveness:
    def test_empty_team_is_zero_baseline(self):
        report = evaluate_team_effectiveness([], "React and Azure")
        assert report.overall_effectiveness == 0
        assert report.skills_coverage == 0
        assert report.risks == []
        assert report.recommendations == ["🔍 Consider adding team member(s) with: React, Azure"]

    def test_overall_is_mean_of_scores(self):
        members = [_member(1, "Dev", ["React"], 5, 4), _member(2, "QA", ["Testing"], 5, 4)]
        report = evaluate_team_effectiveness(members, "React")
        expected = (report.skills_coverage + report.experience_balance + report.team_synergy) / 3
        assert report.overall_effectiveness == pytest.approx(expected)
        assert report.team_id
        assert report.analysis_date.tzinfo is not None

    def test_insights_thresholds(self):
        members = [_member(1, "Dev", ["React"], 5, 5), _member(2, "QA", ["Azure"], 5, 5)]
        report = evaluate_team_effectiveness(members, "React, Azure")
        # coverage 100, balance 75, synergy (50 + 100 + 100) / 3
        assert report.insights == [
            "🎯 Excellent skills coverage - all critical requirements are met",
            "📊 Moderate experience balance - some adjustment may be beneficial",
            "🤝 Good team compatibility with room for optimization",
        ]

    def test_risks(self):
        members = [
            _member(1, "Dev", ["React", "SQL"], 1, 4),
            _member(2, "Dev", ["React", "Azure"], 10, 4),
            _member(3, "Dev", ["React", "Go", "Rust"], 4, 4),
        ]
        report = evaluate_team_effectiveness(members, "")
        assert report.risks == [
            "🎯 Single points of failure in: SQL, Azure, Go",
            "📈 Large experience gap may affect team dynamics",
            "👥 Potential role overlap in: Dev",
        ]

    def test_recommendations(self):
        members = [_member(1, "Dev", ["Figma"], 1, 3), _member(2, "QA", ["Excel"], 2, 4)]
        report = evaluate_team_effectiveness(members, "Python, Java, Docker, Kubernetes")
        assert report.recommendations == [
            "🔍 Consider adding team member(s) with: Python, Java, Docker",
            "🎓 Consider adding a senior team member for mentorship and guidance",
            "⚡ Consider additional support or training for team members with lower ratings",
        ]

    def test_senior_team_recommends_juniors(self):
        members = [_member(1, "Dev", ["React"], 12, 4), _member(2, "QA", ["React"], 11, 4)]
        report = evaluate_team_effectiveness(members, "React")
        assert report.recommendations == [
            "🌱 Consider adding junior members to balance cost and bring fresh perspectives",
        ]
