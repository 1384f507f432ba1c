"""Profile model: identity, display name and role of a user."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, func
from foodtech.db.base import Base
from foodtech.core.roles import UserRole


class Profile(Base):
    """Signed-in user's identity with a single enumerated role."""
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.sales_manager)
    hashed_password = Column(String(255), nullable=True)  # set through the magic link
    is_active = Column(Boolean, default=True, nullable=False)
    email_confirmed_at = Column(DateTime, nullable=True)
    last_sign_in_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def display_name(self) -> str:
        return self.name or self.email
