from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from hospital.api.api import api_router
from hospital.core.config import settings
from hospital.core.exceptions import (
    CascadeFailure,
    ImmutableFieldError,
    InvalidQuery,
    NotFound,
    RecordStoreError,
    ReferenceViolation,
    RequiredFieldMissing,
    UniquenessViolation,
)
from hospital.db import base, session

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Hospital Records API",
    description="CRUD API over the hospital patient records store",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")

# Most specific first; RecordStoreError catches anything left over.
ERROR_STATUS = [
    (NotFound, 404),
    (UniquenessViolation, 409),
    (ReferenceViolation, 409),
    (ImmutableFieldError, 409),
    (RequiredFieldMissing, 422),
    (InvalidQuery, 400),
    (CascadeFailure, 500),
    (RecordStoreError, 500),
]


def status_for(exc: RecordStoreError) -> int:
    return next(status for error_class, status in ERROR_STATUS if isinstance(exc, error_class))


@app.exception_handler(RecordStoreError)
async def record_store_exception_handler(request: Request, exc: RecordStoreError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.on_event("startup")
async def startup_event():
    logger.info("Hospital Records API starting up...")
    if settings.AUTO_CREATE_TABLES:
        base.Base.metadata.create_all(bind=session.engine)
        logger.info("Database tables are in place.")


@app.get("/", tags=["Root"])
async def read_root():
    return {"message": "Welcome to the Hospital Records API. We are live."}
