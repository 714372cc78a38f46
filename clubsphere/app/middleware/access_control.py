"""
middleware/access_control.py — Role gates for routes.

@require_role(Role.ADMIN, ...) must be stacked BELOW @require_auth so that
g.identity is set by the time it runs:

    @clubs_bp.route("/admin/all")
    @require_auth
    @require_role(Role.ADMIN)
    def admin_list(): ...

Only the coarse role check lives here (403 FORBIDDEN). Ownership of a club,
event or payment is checked inside the service that loads the row.
"""

from __future__ import annotations

import functools
from typing import Callable

from flask import g

from clubsphere.app.errors import forbidden
from clubsphere.app.models.enums import Role


def check_role(role: Role, allowed: tuple[Role, ...]) -> None:
    if role not in allowed:
        readable = ", ".join(r.value for r in allowed)
        raise forbidden(f"This action requires one of the roles: {readable}.")


def require_role(*allowed: Role) -> Callable:
    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            check_role(g.identity.role, allowed)
            return f(*args, **kwargs)

        return decorated

    return decorator
