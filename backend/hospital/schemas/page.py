from pydantic import BaseModel
from typing import Generic, List, TypeVar

T = TypeVar("T")

class Page(BaseModel, Generic[T]):
    """One page of records plus the metadata needed to navigate the rest."""
    items: List[T]
    total: int
    page: int
    size: int
    total_pages: int

    class Config:
        from_attributes = True
