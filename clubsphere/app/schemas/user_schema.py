"""
schemas/user_schema.py — Admin user management payloads.
"""

from __future__ import annotations

from marshmallow import Schema, fields

from clubsphere.app.errors import ErrorCode
from clubsphere.app.models.enums import Role


class UpdateRoleSchema(Schema):
    """
    PATCH /users/:id/role

    An unknown role value is reported as INVALID_ROLE (400).
    """

    role = fields.Enum(
        Role,
        required=True,
        by_value=True,
        error_messages={"unknown": ErrorCode.INVALID_ROLE},
    )
