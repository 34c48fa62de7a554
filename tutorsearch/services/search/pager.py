# tutorsearch/services/search/pager.py
from __future__ import annotations

from dataclasses import dataclass
import math


def total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def for_request(cls, request: PageRequest, total: int) -> "Pagination":
        return cls(
            page=request.page,
            limit=request.limit,
            total=total,
            pages=total_pages(total, request.limit),
        )
