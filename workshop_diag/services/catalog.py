"""Read-only access to the catalog of active common problems.

Every reader returns only active problems, ordered by severity (most
severe first) and then by name, so callers can rely on that order as a
tie-break.
"""

from typing import Any, Dict, Iterable, List, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from sqlalchemy import case
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from workshop_diag.db.models import CommonProblem
from workshop_diag.db.mongo import PROBLEMS_COLLECTION
from workshop_diag.schemas import SEVERITY_RANK, Problem, ProblemCategory


class CatalogReader(Protocol):
    async def find_active_problems(self, category: Optional[ProblemCategory] = None) -> List[Problem]:
        ...


def order_catalog(problems: Iterable[Problem]) -> List[Problem]:
    by_name = sorted(problems, key=lambda p: p.name)
    return sorted(by_name, key=lambda p: p.severity.rank, reverse=True)


def _problem_from_row(row: CommonProblem) -> Problem:
    return Problem(
        id=row.id,
        name=row.name,
        category=row.category,
        severity=row.severity,
        symptoms=row.symptoms or [],
        description=row.description,
        solutions=row.solutions or [],
        estimated_cost=row.estimated_cost,
        is_active=row.is_active,
    )


def _problem_from_doc(doc: Dict[str, Any]) -> Problem:
    return Problem(
        id=str(doc.get("id") or doc.get("_id")),
        name=doc["name"],
        category=doc["category"],
        severity=doc["severity"],
        symptoms=doc.get("symptoms") or [],
        description=doc.get("description"),
        solutions=doc.get("solutions") or [],
        estimated_cost=doc.get("estimated_cost"),
        is_active=doc.get("is_active", True),
    )


class SqlCatalogReader:
    def __init__(self, db: Session):
        self._db = db

    def _query(self, category: Optional[ProblemCategory]) -> List[Problem]:
        severity_rank = case(
            {severity.value: rank for severity, rank in SEVERITY_RANK.items()},
            value=CommonProblem.severity,
            else_=-1,
        )
        q = self._db.query(CommonProblem).filter(CommonProblem.is_active.is_(True))
        if category is not None:
            q = q.filter(CommonProblem.category == category.value)
        rows = q.order_by(severity_rank.desc(), CommonProblem.name.asc()).all()
        return [_problem_from_row(r) for r in rows]

    async def find_active_problems(self, category: Optional[ProblemCategory] = None) -> List[Problem]:
        # Session I/O is blocking; keep it off the event loop
        return await run_in_threadpool(self._query, category)


class MongoCatalogReader:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db

    async def find_active_problems(self, category: Optional[ProblemCategory] = None) -> List[Problem]:
        query: Dict[str, Any] = {"is_active": True}
        if category is not None:
            query["category"] = category.value
        cursor = self._db[PROBLEMS_COLLECTION].find(query).sort("name", 1)
        docs = await cursor.to_list(length=None)
        # severity is stored as text, so rank it here rather than in the query
        return order_catalog(_problem_from_doc(d) for d in docs)


class InMemoryCatalogReader:
    """Serves a fixed snapshot of problems, e.g. one loaded at startup."""

    def __init__(self, problems: Iterable[Problem]):
        self._problems = list(problems)

    async def find_active_problems(self, category: Optional[ProblemCategory] = None) -> List[Problem]:
        selected = [
            p for p in self._problems
            if p.is_active and (category is None or p.category == category)
        ]
        return order_catalog(selected)
