"""User administration: provisioning, batch import, password-reset links, role changes."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from foodtech.core.exceptions import (
    FoodTechError, ResourceConflictError, ResourceNotFoundError,
    UpstreamError, ValidationError,
)
from foodtech.core.roles import DEFAULT_IMPORT_ROLE, UserRole, parse_role, role_names
from foodtech.core.security import build_action_link
from foodtech.models.profile import Profile
from foodtech.services.email_service import email_service

logger = logging.getLogger("foodtech")

USER_EXISTS_MESSAGE = "User already exists"


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _action_link(profile: Profile) -> str:
    return build_action_link(profile.id, profile.email, profile.hashed_password)


def _require_role(value) -> UserRole:
    role = parse_role(value)
    if role is None:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(role_names())}")
    return role


class UserAdminService:
    """Operations behind the admin handlers. Each commits its own work."""

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.email == email).first()

    @staticmethod
    def get_profile(db: Session, profile_id: int) -> Profile:
        profile = db.get(Profile, profile_id)
        if profile is None:
            raise ResourceNotFoundError(f"User {profile_id} not found")
        return profile

    def _provision(self, db: Session, email: str, name: str, role: UserRole) -> Profile:
        if self.find_by_email(db, email) is not None:
            raise ResourceConflictError(USER_EXISTS_MESSAGE)
        profile = Profile(
            email=email,
            name=name,
            role=role,
            is_active=True,
            email_confirmed_at=_now(),
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    def create_user(self, db: Session, email: str, name: str, role: Any) -> Profile:
        """Create a confirmed identity with its role and send the set-password invite."""
        if not email or not name or not role:
            raise ValidationError("Missing required fields: email, name or role")
        parsed = _require_role(role)
        logger.info("Creating user %s with role %s", email, parsed.value)

        profile = self._provision(db, email, name, parsed)
        email_service.send_invite(profile.email, profile.name, _action_link(profile))
        return profile

    def import_users(
        self, db: Session, users: Iterable[Dict[str, Any]], send_invites: bool = True,
    ) -> List[Dict[str, Any]]:
        """Provision each record independently and report one result per record."""
        results: List[Dict[str, Any]] = []
        for record in users:
            email = (record.get("email") or "").strip()
            try:
                if not email:
                    raise ValidationError("Email is required")
                name = record.get("name") or email.split("@")[0]
                role = _require_role(record.get("role") or DEFAULT_IMPORT_ROLE)

                profile = self._provision(db, email, name, role)
                if send_invites:
                    try:
                        email_service.send_invite(profile.email, profile.name, _action_link(profile))
                    except UpstreamError as e:
                        logger.warning("Invite to %s not delivered: %s", email, e.message)
                results.append({"email": email, "success": True})
                logger.info("User %s imported", email)
            except FoodTechError as e:
                logger.info("User %s skipped: %s", email, e.message)
                results.append({"email": email, "success": False, "error": e.message})
            except SQLAlchemyError as e:
                db.rollback()
                logger.error("User %s import failed: %s", email, e)
                results.append({"email": email, "success": False, "error": "Database error"})

        imported = sum(1 for r in results if r["success"])
        logger.info("Import complete: %s successful, %s failed", imported, len(results) - imported)
        return results

    def reset_password(self, db: Session, user_id: int) -> None:
        """Email a fresh set-password link to an existing user."""
        profile = self.get_profile(db, user_id)
        email_service.send_password_reset(profile.email, _action_link(profile))
        logger.info("Password reset link sent to user %s", user_id)

    def update_role(self, db: Session, requester_id: int, user_id: int, new_role: Any) -> Profile:
        if not user_id or not new_role:
            raise ValidationError("user_id and new_role are required")
        parsed = _require_role(new_role)
        if user_id == requester_id:
            raise ValidationError("You cannot change your own role")

        profile = self.get_profile(db, user_id)
        profile.role = parsed
        db.commit()
        db.refresh(profile)
        logger.info("Role of user %s set to %s by %s", user_id, parsed.value, requester_id)
        return profile

    @staticmethod
    def list_auth_info(db: Session) -> List[Dict[str, Any]]:
        profiles = db.query(Profile).order_by(Profile.created_at.asc(), Profile.id.asc()).all()
        return [
            {
                "id": p.id,
                "email": p.email,
                "confirmed_at": p.email_confirmed_at,
                "last_sign_in_at": p.last_sign_in_at,
                "has_logged_in": p.last_sign_in_at is not None,
                "created_at": p.created_at,
            }
            for p in profiles
        ]


user_admin_service = UserAdminService()
