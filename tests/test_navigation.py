"""Navigation composition by role and current path."""

import pytest

from foodtech.core.roles import PURCHASE_QUEUE_ROLES, RD_MODULE_ROLES, UserRole
from foodtech.services.navigation import MODULES, compose_navigation, visible_modules


def _ids(nav):
    return [e.id for e in nav.entries]


class TestComposeNavigation:

    def test_sales_manager_sees_own_requests_and_common_modules(self):
        nav = compose_navigation(UserRole.sales_manager, "/")
        assert _ids(nav) == ["rd", "purchase", "kb"]
        paths = {e.id: e.path for e in nav.entries}
        assert paths["rd"] == "/requests/my"
        assert paths["purchase"] == "/purchase/requests"

    def test_rd_roles_go_to_board(self):
        nav = compose_navigation(UserRole.rd_manager, "/")
        assert nav.entries[0].path == "/rd/board"

    def test_admin_sees_every_module_in_declaration_order(self):
        nav = compose_navigation(UserRole.admin, "/")
        assert _ids(nav) == ["rd", "purchase", "kb", "admin"]

    def test_queue_roles_resolve_to_purchase_queue(self):
        for role in (UserRole.coo, UserRole.ceo, UserRole.treasurer, UserRole.procurement_manager):
            paths = {e.id: e.path for e in compose_navigation(role, "/").entries}
            assert paths["purchase"] == "/purchase/queue"

    def test_non_rd_role_has_no_rd_entry(self):
        assert _ids(compose_navigation(UserRole.accountant, "/")) == ["purchase", "kb"]

    def test_unknown_role_gets_nothing(self):
        nav = compose_navigation("ghost", "/purchase/queue")
        assert nav.entries == []
        assert nav.active_id is None

    def test_missing_role_gets_nothing(self):
        assert compose_navigation(None, "/").entries == []

    def test_active_by_prefix(self):
        nav = compose_navigation(UserRole.rd_dev, "/rd/requests/12")
        assert nav.active_id == "rd"
        assert [e.active for e in nav.entries] == [True, False, False]

    def test_analytics_activates_rd_exactly(self):
        assert compose_navigation(UserRole.admin, "/analytics").active_id == "rd"
        assert compose_navigation(UserRole.admin, "/analytics/users").active_id is None

    def test_admin_path_is_exact(self):
        assert compose_navigation(UserRole.admin, "/admin").active_id == "admin"
        assert compose_navigation(UserRole.admin, "/administrator").active_id is None

    def test_at_most_one_active(self):
        for path in ("/", "/kb", "/purchase/invoices/3", "/requests/my", "/admin"):
            nav = compose_navigation(UserRole.admin, path)
            assert sum(1 for e in nav.entries if e.active) <= 1

    def test_role_accepts_string_value(self):
        assert _ids(compose_navigation("sales_manager", "/")) == ["rd", "purchase", "kb"]


def test_visible_modules_unknown_role():
    assert visible_modules("nobody") == []


class TestNavigationAPI:

    def test_requires_token(self, client):
        response = client.get("/api/navigation")
        assert response.status_code == 401
        assert response.json() == {"error": "Missing authorization header"}

    def test_uses_stored_role(self, client, make_profile, auth_headers):
        profile = make_profile("sm@foodtech.test", role=UserRole.sales_manager)
        response = client.get("/api/navigation", params={"path": "/kb"}, headers=auth_headers(profile))
        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["entries"]] == ["rd", "purchase", "kb"]
        assert data["active_id"] == "kb"

    def test_deleted_profile_gets_empty_navigation(self, client, db, make_profile, auth_headers):
        profile = make_profile("gone@foodtech.test")
        headers = auth_headers(profile)
        db.delete(profile)
        db.commit()
        response = client.get("/api/navigation", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"entries": [], "active_id": None}


@pytest.mark.parametrize("role", list(UserRole), ids=lambda r: r.value)
def test_every_role_against_every_module(role):
    expected = []
    if role in RD_MODULE_ROLES:
        expected.append("rd")
    expected += ["purchase", "kb"]
    if role == UserRole.admin:
        expected.append("admin")

    nav = compose_navigation(role, "/")
    assert _ids(nav) == expected
    assert [m.id for m in visible_modules(role.value)] == expected
    assert {m.id for m in MODULES} >= set(expected)

    paths = {e.id: e.path for e in nav.entries}
    queue = role in PURCHASE_QUEUE_ROLES
    assert paths["purchase"] == ("/purchase/queue" if queue else "/purchase/requests")
    assert paths["kb"] == "/kb"
    if "rd" in paths:
        assert paths["rd"] == ("/requests/my" if role == UserRole.sales_manager else "/rd/board")
    if "admin" in paths:
        assert paths["admin"] == "/admin"
