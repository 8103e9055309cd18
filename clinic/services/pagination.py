"""
0-indexed page envelopes shared by every paged listing.

Clients send ``page`` (from 0), ``size``, ``sortBy`` (camelCase field
name) and ``sortDir``.  Each listing declares which ``sortBy`` values it
accepts and the model field they map to.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable

from ..exceptions import InvalidArgument

DEFAULT_SIZE = 10
MAX_SIZE = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = DEFAULT_SIZE
    sort_by: str = 'id'
    sort_dir: str = 'asc'

    def ordering(self, sort_fields: dict[str, str]) -> str:
        field = sort_fields.get(self.sort_by)
        if field is None:
            allowed = ', '.join(sorted(sort_fields))
            raise InvalidArgument(f'Invalid sort field: {self.sort_by}. Valid values are: {allowed}')
        return f'-{field}' if self.sort_dir == 'desc' else field


def paginate(qs, req: PageRequest, sort_fields: dict[str, str], to_json: Callable[[Iterable], list]) -> dict:
    ordering = req.ordering(sort_fields)
    # Stable order inside equal sort keys
    qs = qs.order_by(ordering, 'id') if ordering.lstrip('-') != 'id' else qs.order_by(ordering)
    total = qs.count()
    start = req.page * req.size
    rows = list(qs[start:start + req.size])
    total_pages = math.ceil(total / req.size) if req.size else 0
    return {
        'content': to_json(rows),
        'totalElements': total,
        'totalPages': total_pages,
        'number': req.page,
        'size': req.size,
        'numberOfElements': len(rows),
        'first': req.page == 0,
        'last': req.page >= total_pages - 1,
    }
