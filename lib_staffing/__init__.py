"""Staffing analytics: matching, team analysis and capacity planning."""

__version__ = "1.0.0"

from .employee_models import EmployeeRecord, MemberSummary
from .employee_repository import EmployeeRepository, InMemoryEmployeeStore
from .skill_taxonomy import DEFAULT_TAXONOMY, SkillTaxonomy, load_taxonomy

__all__ = [
    "DEFAULT_TAXONOMY",
    "EmployeeRecord",
    "EmployeeRepository",
    "InMemoryEmployeeStore",
    "MemberSummary",
    "SkillTaxonomy",
    "load_taxonomy",
]
