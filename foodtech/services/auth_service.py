"""Auth service: password login and magic-link password setup."""

from datetime import datetime, timezone
from typing import Dict, Any

from sqlalchemy.orm import Session

from foodtech.models.profile import Profile
from foodtech.core.security import (
    ACTION_TOKEN_TYPE, hash_password, verify_password, password_fingerprint,
    create_access_token, decode_token,
)
from foodtech.core.exceptions import AuthenticationError, ResourceNotFoundError, ValidationError

MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Handles authentication and the current session's profile."""

    @staticmethod
    def token_for(profile: Profile) -> str:
        return create_access_token({
            "sub": str(profile.id),
            "email": profile.email,
            "role": profile.role.value,
        })

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> Dict[str, Any]:
        """Authenticate a user and return an access token.

        Raises:
            AuthenticationError: If credentials are invalid.
        """
        profile = db.query(Profile).filter(Profile.email == email).first()
        if not profile or not profile.hashed_password or not verify_password(password, profile.hashed_password):
            raise AuthenticationError("Invalid email or password")

        if not profile.is_active:
            raise AuthenticationError("Account is deactivated")

        profile.last_sign_in_at = datetime.now(timezone.utc).replace(tzinfo=None)
        db.commit()

        return {
            "access_token": AuthService.token_for(profile),
            "token_type": "bearer",
            "user": {
                "id": profile.id,
                "email": profile.email,
                "name": profile.display_name,
                "role": profile.role.value,
            },
        }

    @staticmethod
    def set_password(db: Session, token: str, password: str) -> Profile:
        """Consume an invite/reset link token and set the account password."""
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        payload = decode_token(token)
        if payload.get("type") != ACTION_TOKEN_TYPE:
            raise AuthenticationError("Invalid link")

        profile = db.get(Profile, int(payload["sub"]))
        if not profile or profile.email != payload.get("email"):
            raise AuthenticationError("Invalid link")
        if payload.get("pwd", "") != password_fingerprint(profile.hashed_password):
            raise AuthenticationError("This link has already been used")

        profile.hashed_password = hash_password(password)
        if profile.email_confirmed_at is None:
            profile.email_confirmed_at = datetime.now(timezone.utc).replace(tzinfo=None)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def get_profile(db: Session, profile_id: int) -> Profile:
        profile = db.get(Profile, profile_id)
        if not profile:
            raise ResourceNotFoundError(f"User {profile_id} not found")
        return profile


auth_service = AuthService()
