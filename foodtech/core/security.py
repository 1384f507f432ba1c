"""JWT authentication and role-gate helpers."""

import bcrypt
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from foodtech.core.config import settings
from foodtech.core.exceptions import AuthorizationError
from foodtech.core.roles import KB_INGEST_ROLES, NOTIFICATION_ROLES, RD_MODULE_ROLES, UserRole

# JWT bearer scheme
security_scheme = HTTPBearer(auto_error=False)

ACTION_TOKEN_TYPE = "magiclink"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pwd_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def password_fingerprint(hashed_password: Optional[str]) -> str:
    """Short digest of the stored hash; changes whenever the password is set."""
    if not hashed_password:
        return ""
    return hashlib.sha256(hashed_password.encode("utf-8")).hexdigest()[:16]


def create_action_token(profile_id: int, email: str, hashed_password: Optional[str] = None) -> str:
    """Create a one-time token embedded in invite and password-reset links.

    The ``pwd`` claim pins the token to the password the account had when the
    link was issued, so setting a password spends it.
    """
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.ACTION_LINK_EXPIRY_HOURS)
    to_encode = {
        "sub": str(profile_id),
        "email": email,
        "exp": expire,
        "type": ACTION_TOKEN_TYPE,
        "pwd": password_fingerprint(hashed_password),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def build_action_link(profile_id: int, email: str, hashed_password: Optional[str] = None) -> str:
    """Return the set-password URL for a profile."""
    token = create_action_token(profile_id, email, hashed_password)
    return f"{settings.FRONTEND_URL.rstrip('/')}/set-password?token={token}"


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> dict:
    """Decode the bearer token of the current request."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_token(credentials.credentials)
    if payload.get("type") != "access" or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )
    return payload


async def get_current_user_id(payload: dict = Depends(get_token_payload)) -> int:
    """Extract the profile id from the JWT Bearer token."""
    return int(payload["sub"])


class RequireRole:
    """Dependency that checks the role claim against an allowed set."""

    def __init__(self, *roles: UserRole):
        self.roles = frozenset(roles)

    async def __call__(self, payload: dict = Depends(get_token_payload)) -> dict:
        user_role = payload.get("role")
        if user_role not in {r.value for r in self.roles}:
            allowed = ", ".join(sorted(r.value for r in self.roles))
            raise AuthorizationError(f"Role '{user_role}' is not allowed. Requires one of: {allowed}.")
        return payload


# Convenience dependency factories
require_admin = RequireRole(UserRole.admin)
require_kb_ingest = RequireRole(*KB_INGEST_ROLES)
require_notifier = RequireRole(*NOTIFICATION_ROLES)
require_rd = RequireRole(*RD_MODULE_ROLES)
