import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError

from workshop_diag.api.diagnostic import router as diagnostic_router
from workshop_diag.db import models, mongo
from workshop_diag.logging_config import setup_logging

load_dotenv()

setup_logging(
    level=os.getenv("LOG_LEVEL", "INFO"),
    json_output=os.getenv("LOG_JSON", "false").lower() == "true",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Workshop Diagnostic Suggestions API")

app.include_router(diagnostic_router)


async def _catalog_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Problem catalog unavailable on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Problem catalog unavailable"},
    )


app.add_exception_handler(SQLAlchemyError, _catalog_unavailable)
app.add_exception_handler(PyMongoError, _catalog_unavailable)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.on_event("startup")
async def on_startup():
    if os.getenv("SKIP_INIT_DB", "false").lower() == "true":
        return
    if os.getenv("CATALOG_BACKEND", "sql").strip().lower() == "mongo":
        await mongo.init_db()
    else:
        models.init_db()
