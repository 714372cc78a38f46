"""
identity.py — The authenticated caller, as seen by the service layer.

The auth middleware builds an Identity from the verified token and the
users table and stores it on flask.g.identity. Routes pass it to services
as a plain argument; services never read flask.g themselves.
"""

from __future__ import annotations

from dataclasses import dataclass

from clubsphere.app.models.enums import Role


@dataclass(frozen=True)
class Identity:
    user_id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def owns(self, manager_email: str) -> bool:
        """Ownership is an exact match against the stored manager email."""
        return self.email == manager_email
