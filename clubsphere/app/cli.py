"""
cli.py — Flask CLI commands.

    flask --app clubsphere.wsgi seed [--password Secret123]

Creates the demo accounts (admin, clubManager, member) and sample clubs if
they do not exist yet. Safe to run repeatedly.
"""

from __future__ import annotations

import os
from decimal import Decimal

import click
from flask import Flask
from sqlalchemy import select

from clubsphere.app.extensions import db
from clubsphere.app.models.club import Club
from clubsphere.app.models.enums import ClubCategory, ClubStatus, Role
from clubsphere.app.models.user import User
from clubsphere.app.services.auth_service import hash_password

DEMO_PHOTO = "https://via.placeholder.com/150"
MANAGER_EMAIL = "manager@clubsphere.com"

DEMO_USERS = (
    ("Admin User", "admin@clubsphere.com", Role.ADMIN),
    ("Club Manager", MANAGER_EMAIL, Role.CLUB_MANAGER),
    ("Member User", "member@clubsphere.com", Role.MEMBER),
)

SAMPLE_CLUBS = (
    {
        "club_name": "Photography Enthusiasts",
        "description": (
            "A community for photography lovers to share techniques, organize "
            "photo walks, and improve their skills together."
        ),
        "category": ClubCategory.PHOTOGRAPHY,
        "location": "New York, NY",
        "banner_image": "https://images.unsplash.com/photo-1606983340126-99ab4feaa64a?w=800&h=400&fit=crop",
        "membership_fee": Decimal("15.00"),
        "status": ClubStatus.APPROVED,
        "member_count": 0,
    },
    {
        "club_name": "Tech Innovators",
        "description": (
            "Join fellow tech enthusiasts to discuss latest trends, share "
            "projects, and network with like-minded individuals."
        ),
        "category": ClubCategory.TECH,
        "location": "San Francisco, CA",
        "banner_image": "https://images.unsplash.com/photo-1518709268805-4e9042af2176?w=800&h=400&fit=crop",
        "membership_fee": Decimal("0.00"),
        "status": ClubStatus.APPROVED,
        "member_count": 0,
    },
    {
        "club_name": "Hiking Adventures",
        "description": (
            "Explore beautiful trails and mountains with our hiking community. "
            "All skill levels welcome!"
        ),
        "category": ClubCategory.SPORTS,
        "location": "Denver, CO",
        "banner_image": "https://images.unsplash.com/photo-1551632811-561732d1e306?w=800&h=400&fit=crop",
        "membership_fee": Decimal("10.00"),
        "status": ClubStatus.APPROVED,
        "member_count": 0,
    },
    {
        "club_name": "Book Lovers Society",
        "description": (
            "Monthly book discussions, author meetups, and literary events for "
            "passionate readers."
        ),
        "category": ClubCategory.BOOKS,
        "location": "Boston, MA",
        "banner_image": "https://images.unsplash.com/photo-1481627834876-b7833e8f5570?w=800&h=400&fit=crop",
        "membership_fee": Decimal("5.00"),
        "status": ClubStatus.PENDING,
        "member_count": 0,
    },
)


def seed_demo_data(password: str) -> tuple[int, int]:
    """Inserts missing demo users and clubs. Returns (users_created, clubs_created)."""
    users_created = 0
    for name, email, role in DEMO_USERS:
        exists = db.session.execute(
            select(User.id).where(User.email == email)
        ).scalar_one_or_none()
        if exists is None:
            db.session.add(User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                photo_url=DEMO_PHOTO,
                role=role,
            ))
            users_created += 1

    clubs_created = 0
    for fields in SAMPLE_CLUBS:
        exists = db.session.execute(
            select(Club.id).where(Club.club_name == fields["club_name"])
        ).scalar_one_or_none()
        if exists is None:
            db.session.add(Club(manager_email=MANAGER_EMAIL, **fields))
            clubs_created += 1

    db.session.commit()
    return users_created, clubs_created


def register_commands(app: Flask) -> None:

    @app.cli.command("seed")
    @click.option(
        "--password",
        default=lambda: os.getenv("SEED_PASSWORD", "ClubSphere1"),
        show_default="$SEED_PASSWORD or ClubSphere1",
        help="Password given to every demo account.",
    )
    def seed(password: str) -> None:
        """Create demo users and sample clubs."""
        users_created, clubs_created = seed_demo_data(password)
        click.echo(f"Created {users_created} user(s) and {clubs_created} club(s).")
        for _, email, role in DEMO_USERS:
            click.echo(f"  {email} (role: {role.value})")
