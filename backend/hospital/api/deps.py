from typing import Generator, Optional
from fastapi import Query
from sqlalchemy.orm import Session

from hospital.core.config import settings
from hospital.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """One session per request, always closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class PageParams:
    """Common listing parameters; the page size ceiling is a deployment setting."""

    def __init__(
        self,
        page: int = Query(0, ge=0),
        size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
        sort: Optional[str] = Query(None, description="Field name, prefix with '-' for descending"),
    ):
        self.page = page
        self.size = size
        self.sort = sort
