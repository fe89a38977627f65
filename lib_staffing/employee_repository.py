"""Read-only employee stores (JSON file and in-memory)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import threading
from typing import Protocol

from lib_staffing.employee_models import EmployeeRecord


logger = logging.getLogger(__name__)

_DEFAULT_PATH = "employees.json"


class EmployeeStore(Protocol):
    """What the analytics core needs from the employee store. It never writes."""

    def list_employees(self) -> list[EmployeeRecord]: ...

    def get_employee(self, employee_id: int) -> EmployeeRecord | None: ...


class InMemoryEmployeeStore:
    """Employee store over an already-loaded list."""

    def __init__(self, employees: list[EmployeeRecord] | None = None) -> None:
        self._employees = list(employees or [])

    def list_employees(self) -> list[EmployeeRecord]:
        return list(self._employees)

    def get_employee(self, employee_id: int) -> EmployeeRecord | None:
        return next((e for e in self._employees if e.id == employee_id), None)


class EmployeeRepository:
    """Thread-safe, read-only employee store backed by a JSON file.

    The file holds either a list of employee objects or ``{"employees": [...]}``.
    """

    def __init__(self, data_path: str = _DEFAULT_PATH) -> None:
        self._path = Path(data_path)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def list_employees(self) -> list[EmployeeRecord]:
        """Load all employees in file order. A missing file means no employees."""
        with self._lock:
            if not self._path.exists():
                logger.warning("Employee data file not found: %s", self._path)
                return []
            try:
                with open(self._path, encoding="utf-8") as fh:
                    data = json.load(fh)
                rows = data.get("employees", []) if isinstance(data, dict) else data
                return [EmployeeRecord(**row) for row in rows]
            except Exception as exc:
                raise ValueError(f"Failed to load employees: {exc}") from exc

    def get_employee(self, employee_id: int) -> EmployeeRecord | None:
        """Return the employee with *employee_id*, or ``None``."""
        return next((e for e in self.list_employees() if e.id == employee_id), None)
