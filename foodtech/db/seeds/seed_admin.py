"""Seed the first admin profile from env vars."""

from datetime import datetime, timezone

from sqlalchemy.orm import Session
from foodtech.models.profile import Profile
from foodtech.core.roles import UserRole
from foodtech.core.security import hash_password
from foodtech.core.config import settings


def seed_admin(db: Session) -> bool:
    """Create the admin profile if not already present. Returns True when created."""
    existing = db.query(Profile).filter(Profile.email == settings.ADMIN_EMAIL).first()
    if existing:
        print(f"ℹ️  Admin '{settings.ADMIN_EMAIL}' already exists, skipping.")
        return False

    admin = Profile(
        email=settings.ADMIN_EMAIL,
        name="Administrator",
        role=UserRole.admin,
        hashed_password=hash_password(settings.ADMIN_PASSWORD),
        is_active=True,
        email_confirmed_at=datetime.now(timezone.utc).replace(tzinfo=None),
    )
    db.add(admin)
    db.commit()
    print(f"✅ Created admin: {settings.ADMIN_EMAIL}")
    return True
