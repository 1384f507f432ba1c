"""Role-based navigation: which modules a role sees, where they lead, which one is active."""

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Tuple, Union

from foodtech.core.roles import (
    UserRole, PURCHASE_QUEUE_ROLES, RD_MODULE_ROLES, parse_role,
)

ALL_ROLES = "all"


@dataclass(frozen=True)
class NavModule:
    """Static descriptor of one navigation entry."""
    id: str
    label: str
    icon: str
    roles: Union[FrozenSet[UserRole], str]
    resolve_path: Callable[[UserRole], str]
    prefixes: Tuple[str, ...] = ()
    exact: Tuple[str, ...] = ()

    def visible_to(self, role: UserRole) -> bool:
        return self.roles == ALL_ROLES or role in self.roles

    def matches(self, path: str) -> bool:
        return path in self.exact or any(path.startswith(p) for p in self.prefixes)


@dataclass
class NavEntry:
    id: str
    label: str
    icon: str
    path: str
    active: bool


@dataclass
class Navigation:
    entries: List[NavEntry] = field(default_factory=list)
    active_id: Optional[str] = None


def _rd_path(role: UserRole) -> str:
    return "/requests/my" if role == UserRole.sales_manager else "/rd/board"


def _purchase_path(role: UserRole) -> str:
    return "/purchase/queue" if role in PURCHASE_QUEUE_ROLES else "/purchase/requests"


# Declaration order is display order
MODULES: Tuple[NavModule, ...] = (
    NavModule(
        id="rd",
        label="R&D requests",
        icon="file-text",
        roles=RD_MODULE_ROLES,
        resolve_path=_rd_path,
        prefixes=("/rd", "/requests"),
        exact=("/analytics",),
    ),
    NavModule(
        id="purchase",
        label="Procurement",
        icon="shopping-cart",
        roles=ALL_ROLES,
        resolve_path=_purchase_path,
        prefixes=("/purchase",),
    ),
    NavModule(
        id="kb",
        label="Knowledge base",
        icon="book-open",
        roles=ALL_ROLES,
        resolve_path=lambda role: "/kb",
        prefixes=("/kb",),
    ),
    NavModule(
        id="admin",
        label="Administration",
        icon="user-cog",
        roles=frozenset({UserRole.admin}),
        resolve_path=lambda role: "/admin",
        exact=("/admin",),
    ),
)


def visible_modules(role, modules: Tuple[NavModule, ...] = MODULES) -> List[NavModule]:
    parsed = parse_role(role)
    if parsed is None:
        return []
    return [m for m in modules if m.visible_to(parsed)]


def compose_navigation(
    role,
    current_path: str,
    modules: Tuple[NavModule, ...] = MODULES,
) -> Navigation:
    """Build the ordered navigation for a role; unknown or missing roles get none."""
    parsed = parse_role(role)
    if parsed is None:
        return Navigation()

    nav = Navigation()
    for module in modules:
        if not module.visible_to(parsed):
            continue
        active = module.matches(current_path or "")
        if active and nav.active_id is None:
            nav.active_id = module.id
        nav.entries.append(NavEntry(
            id=module.id,
            label=module.label,
            icon=module.icon,
            path=module.resolve_path(parsed),
            active=active,
        ))
    return nav
