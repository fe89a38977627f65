"""Keyword tables used to categorise skills and track critical skills.

The tables are plain data so they can be swapped out per organisation:
``load_taxonomy`` reads the same structure from a JSON file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)

OTHER_CATEGORY = "Other"


class SkillTaxonomy(BaseModel):
    """Skill categories, requirement vocabulary and critical-skill lists."""

    # Category order matters: a skill token goes to the first category that matches.
    categories: dict[str, list[str]]
    requirement_vocabulary: list[str] = Field(default_factory=list)
    critical_skills: list[str] = Field(default_factory=list)
    high_priority_skills: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_high_priority_subset(self) -> SkillTaxonomy:
        unknown = [s for s in self.high_priority_skills if s not in self.critical_skills]
        if unknown:
            raise ValueError(f"High-priority skills must also be critical skills: {', '.join(unknown)}")
        return self

    def categorize(self, skill: str) -> str:
        """Return the category of *skill* by case-insensitive substring match."""
        token = skill.strip().lower()
        if not token:
            return OTHER_CATEGORY
        for category, keywords in self.categories.items():
            if category == OTHER_CATEGORY:
                continue
            for keyword in keywords:
                kw = keyword.lower()
                if kw in token or token in kw:
                    return category
        return OTHER_CATEGORY

    def extract_requirements(self, text: str) -> list[str]:
        """Vocabulary entries mentioned in free-text requirements, in vocabulary order."""
        lowered = text.lower()
        return [skill for skill in self.requirement_vocabulary if skill.lower() in lowered]


# ---------------------------------------------------------------------------
# Built-in defaults
# ---------------------------------------------------------------------------
DEFAULT_TAXONOMY = SkillTaxonomy(
    categories={
        "Frontend": ["React", "JavaScript", "TypeScript", "Vue.js", "Angular", "HTML", "CSS", "Redux", "Next.js"],
        "Backend": ["Node.js", "C#", "Python", "Java", ".NET", "Express.js", "Spring", "Django", "Flask"],
        "Database": ["SQL Server", "MongoDB", "PostgreSQL", "MySQL", "Redis", "Database Design", "SQL"],
        "Cloud": ["Azure", "AWS", "Docker", "Kubernetes", "DevOps", "CI/CD", "Terraform"],
        "Mobile": ["React Native", "iOS", "Android", "Flutter", "Swift", "Kotlin", "Xamarin"],
        "Design": ["UI/UX Design", "Figma", "Sketch", "Adobe", "Prototyping", "Design Systems"],
        "Data": ["Data Science", "Machine Learning", "Power BI", "Excel", "Analytics"],
        "Management": ["Project Management", "Agile", "Scrum", "Leadership", "Team Management"],
        OTHER_CATEGORY: [],
    },
    requirement_vocabulary=[
        "JavaScript", "TypeScript", "React", "Node.js", "Python", "Java", "C#",
        "SQL", "Azure", "AWS", "Docker", "Kubernetes", "Git", "Figma", "Design",
        "Project Management", "Agile", "Scrum", "Testing", "DevOps",
    ],
    critical_skills=[
        "JavaScript", "TypeScript", "React", "Node.js", "Python", "Java", "C#",
        "SQL Server", "Azure", "AWS", "DevOps", "Docker", "Kubernetes",
        "Project Management", "Agile", "UI/UX Design", "Data Analysis",
    ],
    high_priority_skills=["JavaScript", "React", "Node.js", "SQL Server", "Azure"],
)


def load_taxonomy(path: str | Path | None = None) -> SkillTaxonomy:
    """Load a taxonomy from JSON, or return the defaults when *path* is None."""
    if path is None:
        return DEFAULT_TAXONOMY
    file_path = Path(path)
    try:
        with open(file_path, encoding="utf-8") as fh:
            data = json.load(fh)
        taxonomy = SkillTaxonomy(**data)
    except Exception as exc:
        raise ValueError(f"Failed to load skill taxonomy from {file_path}: {exc}") from exc
    logger.info("Loaded skill taxonomy from %s (%d categories)", file_path, len(taxonomy.categories))
    return taxonomy
