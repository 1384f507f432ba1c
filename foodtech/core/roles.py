"""Role enumeration shared by navigation, handlers and models."""

import enum
from typing import Optional


class UserRole(str, enum.Enum):
    admin = "admin"
    sales_manager = "sales_manager"
    rd_dev = "rd_dev"
    rd_manager = "rd_manager"
    procurement_manager = "procurement_manager"
    coo = "coo"
    ceo = "ceo"
    treasurer = "treasurer"
    chief_accountant = "chief_accountant"
    accountant = "accountant"
    quality_manager = "quality_manager"
    admin_director = "admin_director"
    chief_engineer = "chief_engineer"
    production_deputy = "production_deputy"
    warehouse_manager = "warehouse_manager"
    lawyer = "lawyer"
    office_manager = "office_manager"
    foreign_trade_manager = "foreign_trade_manager"
    finance_deputy = "finance_deputy"
    financial_analyst = "financial_analyst"
    economist = "economist"


# Roles that work the approval queue rather than their own request list
PURCHASE_QUEUE_ROLES = frozenset({
    UserRole.procurement_manager,
    UserRole.coo,
    UserRole.ceo,
    UserRole.treasurer,
    UserRole.admin,
})

RD_MODULE_ROLES = frozenset({
    UserRole.sales_manager,
    UserRole.rd_dev,
    UserRole.rd_manager,
    UserRole.admin,
})

KB_INGEST_ROLES = frozenset({UserRole.coo, UserRole.admin})

NOTIFICATION_ROLES = frozenset({UserRole.coo, UserRole.admin})

DEFAULT_IMPORT_ROLE = UserRole.sales_manager


def parse_role(value) -> Optional[UserRole]:
    """Return the matching role, or None for unknown values."""
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(value)
    except ValueError:
        return None


def role_names() -> list[str]:
    return [r.value for r in UserRole]
