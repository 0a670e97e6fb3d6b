import os
from typing import AsyncGenerator, List

from fastapi import APIRouter, Depends, Query

from workshop_diag.db.models import get_session
from workshop_diag.db.mongo import get_db
from workshop_diag.schemas import ProblemCategory, Suggestion, SuggestRequest
from workshop_diag.services.catalog import CatalogReader, MongoCatalogReader, SqlCatalogReader
from workshop_diag.services.diagnostic import DiagnosticService

router = APIRouter(prefix="/diagnostic", tags=["diagnostic"])


async def get_catalog() -> AsyncGenerator[CatalogReader, None]:
    backend = os.getenv("CATALOG_BACKEND", "sql").strip().lower()
    if backend == "mongo":
        async for db in get_db():
            yield MongoCatalogReader(db)
        return
    sessions = get_session()
    try:
        yield SqlCatalogReader(next(sessions))
    finally:
        sessions.close()


def get_diagnostic_service(catalog: CatalogReader = Depends(get_catalog)) -> DiagnosticService:
    return DiagnosticService(catalog)


@router.post(
    "/suggest",
    response_model=List[Suggestion],
    response_model_exclude_none=True,
)
async def suggest_problems(
    body: SuggestRequest,
    service: DiagnosticService = Depends(get_diagnostic_service),
):
    return await service.suggest_problems(body.symptoms, body.category)


@router.get(
    "/problems",
    response_model=List[Suggestion],
    response_model_exclude_none=True,
)
async def list_problems_by_category(
    category: ProblemCategory = Query(...),
    service: DiagnosticService = Depends(get_diagnostic_service),
):
    return await service.get_problems_by_category(category)
