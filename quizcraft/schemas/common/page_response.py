from pydantic import BaseModel
from typing import List, Generic, Sequence, TypeVar

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    page: int
    size: int
    total: int
    has_next: bool
    has_prev: bool
    items: List[T]

    @classmethod
    def build(cls, items: Sequence[T], total: int, page: int, size: int) -> "PageResponse[T]":
        """Wrap one page of items; ``page`` is 1-based."""
        return cls(
            page=page,
            size=size,
            total=total,
            has_next=(page * size) < total,
            has_prev=page > 1,
            items=list(items),
        )

    @staticmethod
    def offset(page: int, size: int) -> int:
        return (page - 1) * size
