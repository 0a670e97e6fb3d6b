import os
import types
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure DB init is skipped in tests
os.environ.setdefault("SKIP_INIT_DB", "true")

from workshop_diag.api.diagnostic import get_catalog  # noqa: E402
from workshop_diag.db.models import init_db  # noqa: E402
from workshop_diag.db.seed import seed_mongo  # noqa: E402
from workshop_diag.main import app  # noqa: E402
from workshop_diag.schemas import Problem, ProblemCategory, ProblemSeverity  # noqa: E402
from workshop_diag.services.catalog import MongoCatalogReader  # noqa: E402


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(doc.get(k) == v for k, v in query.items())


class AsyncFakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, key: str, direction: int = 1):
        self._docs = sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    async def to_list(self, length: Optional[int] = None):
        return [dict(d) for d in self._docs[:length]]


class AsyncFakeCollection:
    def __init__(self, backing: list):
        self._backing = backing

    def find(self, query: Dict[str, Any]):
        return AsyncFakeCursor([d for d in self._backing if _matches(d, query)])

    async def insert_one(self, doc: Dict[str, Any]):
        self._backing.append(dict(doc))
        return types.SimpleNamespace(inserted_id=len(self._backing))

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool = False):
        setvals = update.get("$set", update)
        for idx, doc in enumerate(self._backing):
            if _matches(doc, query):
                new_doc = dict(doc)
                new_doc.update(setvals)
                self._backing[idx] = new_doc
                return types.SimpleNamespace(matched_count=1, modified_count=1)
        if upsert:
            new_doc = dict(query)
            new_doc.update(setvals)
            self._backing.append(new_doc)
            return types.SimpleNamespace(upserted_id=len(self._backing))
        return types.SimpleNamespace(matched_count=0, modified_count=0)

    async def create_index(self, *args, **kwargs):
        return "ok"


class AsyncFakeDB:
    def __init__(self):
        self._stores: Dict[str, list] = {}

    def __getitem__(self, name: str) -> AsyncFakeCollection:
        return AsyncFakeCollection(self._stores.setdefault(name, []))


class SpyCatalog:
    """Catalog double recording every read."""

    def __init__(self, problems: Optional[List[Problem]] = None, error: Optional[Exception] = None):
        self.problems = list(problems or [])
        self.error = error
        self.calls: List[Optional[ProblemCategory]] = []

    async def find_active_problems(self, category=None):
        self.calls.append(category)
        if self.error is not None:
            raise self.error
        return [p for p in self.problems if category is None or p.category == category]


def make_problem(name: str, **overrides) -> Problem:
    fields = dict(
        id=name.lower().replace(" ", "-"),
        name=name,
        category=ProblemCategory.ENGINE,
        severity=ProblemSeverity.MEDIUM,
        symptoms=[],
        description=None,
        solutions=[],
    )
    fields.update(overrides)
    return Problem(**fields)


@pytest.fixture()
def sql_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
async def fake_db():
    db = AsyncFakeDB()
    await seed_mongo(db)
    return db


@pytest.fixture()
async def test_app(fake_db):
    async def _override_get_catalog():
        yield MongoCatalogReader(fake_db)

    app.dependency_overrides[get_catalog] = _override_get_catalog
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def problem_factory():
    return make_problem


@pytest.fixture()
def spy_catalog_factory():
    return SpyCatalog
