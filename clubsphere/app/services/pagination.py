"""
services/pagination.py — Offset pagination for list endpoints.

Every paginated endpoint returns the same envelope:
    {"items": [...], "totalPages": n, "currentPage": p, "total": t}
"""

from __future__ import annotations

import math
from typing import Callable

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


def paginate(
        stmt: Select,
        page: int,
        limit: int,
        serialize: Callable,
        session: Session,
) -> dict:
    """
    Runs `stmt` for one page and counts the full result set.

    `stmt` must already carry its ORDER BY; the count query strips it.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = session.execute(count_stmt).scalar_one()

    rows = session.execute(
        stmt.limit(limit).offset((page - 1) * limit)
    ).scalars().all()

    return {
        "items": [serialize(row) for row in rows],
        "totalPages": math.ceil(total / limit),
        "currentPage": page,
        "total": total,
    }
