"""Tests for lib_staffing/engine/profile.py."""

from datetime import date

from lib_staffing.employee_models import EmployeeRecord
from lib_staffing.engine.matching import MatchCandidate
from lib_staffing.engine.profile import TeamProfile, aggregate_team_profile, skills_breakdown


TODAY = date(2025, 3, 1)


def _team() -> list[EmployeeRecord]:
    return [
        EmployeeRecord(id=1, name="Ana", skills="React, Node.js", department="Web", experience_years=3),
        EmployeeRecord(
            id=2,
            name="Bo",
            skills="SQL Server, Azure",
            department="Data",
            experience_years=6,
            is_on_project=True,
            project_end_date=date(2025, 12, 31),
        ),
        EmployeeRecord(id=3, name="Cy", skills="", department="", experience_years=2),
    ]


class TestTeamProfileDerived:
    def test_availability_ratio(self):
        assert TeamProfile(total_members=4, available_members=1).availability_ratio == 0.25

    def test_availability_ratio_empty_team(self):
        assert TeamProfile().availability_ratio == 0.0

    def test_dominant_skill(self):
        p = TeamProfile(skills_breakdown={"Backend": 65, "Frontend": 35})
        assert p.dominant_skill == ("Backend", 65)

    def test_dominant_skill_first_on_tie(self):
        p = TeamProfile(skills_breakdown={"Cloud": 50, "Data": 50})
        assert p.dominant_skill[0] == "Cloud"

    def test_dominant_skill_sentinel(self):
        assert TeamProfile().dominant_skill == ("General", 0.0)

    def test_skill_diversity(self):
        assert TeamProfile(skills_breakdown={"A": 1, "B": 2}).skill_diversity == 2


class TestSkillsBreakdown:
    def test_percentages_by_category(self):
        assert skills_breakdown(_team()) == {
            "Frontend": 25.0,
            "Backend": 25.0,
            "Database": 25.0,
            "Cloud": 25.0,
        }

    def test_unmatched_go_to_other(self):
        team = [EmployeeRecord(id=1, name="Ana", skills="React, Pottery")]
        assert skills_breakdown(team) == {"Frontend": 50.0, "Other": 50.0}

    def test_no_skills(self):
        assert skills_breakdown([EmployeeRecord(id=1, name="Ana")]) == {}

    def test_halves_round_up(self):
        team = [
            EmployeeRecord(
                id=1,
                name="Ana",
                skills="React, JavaScript, TypeScript, Vue.js, Angular, HTML, CSS, Azure",
            )
        ]
        assert skills_breakdown(team) == {"Frontend": 88.0, "Cloud": 13.0}


class TestAggregateTeamProfile:
    def test_empty_input(self):
        assert aggregate_team_profile([]) == TeamProfile()

    def test_counts_and_averages(self):
        profile = aggregate_team_profile(_team(), today=TODAY)
        assert profile.total_members == 3
        assert profile.available_members == 2
        assert profile.avg_experience == 3.7
        assert profile.departments == {"Web": 1, "Data": 1, "Unknown": 1}
        assert profile.avg_match_score == 0.0

    def test_available_soon_is_not_available(self):
        team = [
            EmployeeRecord(
                id=1, name="Ana", is_on_project=True, project_end_date=date(2025, 3, 20),
            ),
        ]
        assert aggregate_team_profile(team, today=TODAY).available_members == 0

    def test_match_scores_scaled_to_percent(self):
        team = _team()
        matches = [
            MatchCandidate(employee=team[0], match_score=0.8),
            MatchCandidate(employee=team[1], match_score=0.7),
        ]
        profile = aggregate_team_profile(team, matches, today=TODAY)
        assert profile.avg_match_score == 50.0

    def test_deterministic(self):
        assert aggregate_team_profile(_team(), today=TODAY) == aggregate_team_profile(_team(), today=TODAY)
