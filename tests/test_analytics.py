"""Activity analytics folds and endpoints."""

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from foodtech.core.roles import UserRole
from foodtech.models.purchase import PurchaseInvoice, PurchaseLog, PurchaseRequest
from foodtech.models.rd import RdRequest, RequestEvent
from foodtech.services.analytics_service import (
    analytics_service, build_summary, build_timeline, build_user_stats,
)

NOW = datetime(2026, 3, 15, 12, 0, 0)


def _profile(id, email, name=None, role="sales_manager"):
    return SimpleNamespace(id=id, email=email, name=name, role=role)


class TestBuildUserStats:

    def test_three_rd_events_no_purchases(self):
        stats = build_user_stats(
            [_profile(1, "a@x.com", "Anna")],
            rd_events=[("a@x.com", NOW)] * 3,
            purchase_requests=[],
            purchase_invoices=[],
        )
        entry = stats[0]
        assert entry.rd_events_count == 3
        assert entry.purchase_requests_count == 0
        assert entry.purchase_invoices_count == 0
        assert build_summary(stats)["total_events_count"] == 3

    def test_name_defaults_to_email(self):
        stats = build_user_stats([_profile(1, "a@x.com")], [], [], [])
        assert stats[0].name == "a@x.com"

    def test_unmatched_rows_are_ignored(self):
        stats = build_user_stats(
            [_profile(1, "a@x.com")],
            rd_events=[("stranger@x.com", NOW)],
            purchase_requests=[(42, NOW)],
            purchase_invoices=[(42, NOW)],
        )
        assert stats[0].events_count == 0
        assert stats[0].last_activity_at is None

    def test_duplicate_email_credits_first_profile(self):
        stats = build_user_stats(
            [_profile(1, "same@x.com", "First"), _profile(2, "same@x.com", "Second")],
            rd_events=[("same@x.com", NOW)],
            purchase_requests=[],
            purchase_invoices=[],
        )
        by_id = {s.user_id: s for s in stats}
        assert by_id[1].rd_events_count == 1
        assert by_id[2].rd_events_count == 0

    def test_logs_only_move_last_activity(self):
        later = NOW + timedelta(hours=3)
        stats = build_user_stats(
            [_profile(1, "a@x.com")],
            rd_events=[],
            purchase_requests=[(1, NOW)],
            purchase_invoices=[],
            purchase_logs=[(1, later)],
        )
        assert stats[0].events_count == 1
        assert stats[0].last_activity_at == later.isoformat()

    def test_order_descending_and_stable(self):
        profiles = [_profile(1, "a@x.com"), _profile(2, "b@x.com"), _profile(3, "c@x.com")]
        stats = build_user_stats(
            profiles,
            rd_events=[("c@x.com", NOW)] * 2,
            purchase_requests=[],
            purchase_invoices=[],
        )
        assert [s.user_id for s in stats] == [3, 1, 2]

    def test_enum_role_is_rendered_as_value(self):
        stats = build_user_stats([_profile(1, "a@x.com", role=UserRole.coo)], [], [], [])
        assert stats[0].role == "coo"


class TestBuildTimeline:

    def test_dense_buckets_in_order(self):
        points = build_timeline(7, [], [], today=date(2026, 3, 15))
        assert len(points) == 8
        assert points[0].date == "2026-03-08"
        assert points[-1].date == "2026-03-15"
        assert all(p.total == 0 for p in points)

    def test_sum_of_totals_counts_only_rows_inside_window(self):
        rd = [datetime(2026, 3, 14, 9), datetime(2026, 3, 14, 23, 59), datetime(2026, 1, 1)]
        purchase = [datetime(2026, 3, 15, 0, 1), "2026-03-10T08:00:00"]
        points = build_timeline(7, rd, purchase, today=date(2026, 3, 15))
        assert sum(p.total for p in points) == 4
        by_date = {p.date: p for p in points}
        assert by_date["2026-03-14"].rd_events == 2
        assert by_date["2026-03-10"].purchase_events == 1

    def test_to_dict(self):
        point = build_timeline(0, [NOW], [NOW], today=NOW.date())[0]
        assert point.to_dict() == {"date": "2026-03-15", "rd_events": 1, "purchase_events": 1, "total": 2}


class TestBuildSummary:

    def test_empty(self):
        assert build_summary([]) == {
            "active_users_count": 0,
            "total_users_count": 0,
            "total_events_count": 0,
            "most_active_user": None,
        }

    def test_no_activity_has_no_most_active_user(self):
        stats = build_user_stats([_profile(1, "a@x.com")], [], [], [])
        assert build_summary(stats)["most_active_user"] is None

    def test_most_active_user(self):
        stats = build_user_stats(
            [_profile(1, "a@x.com", "Anna"), _profile(2, "b@x.com", "Boris")],
            rd_events=[("b@x.com", NOW)],
            purchase_requests=[(2, NOW)],
            purchase_invoices=[(1, NOW)],
        )
        summary = build_summary(stats)
        assert summary["active_users_count"] == 2
        assert summary["total_users_count"] == 2
        assert summary["total_events_count"] == 3
        assert summary["most_active_user"] == {"name": "Boris", "events_count": 2}


@pytest.fixture()
def activity(db, make_profile):
    """Two users with activity inside and outside a 30-day window ending at NOW."""
    anna = make_profile("anna@foodtech.test", name="Anna")
    boris = make_profile("boris@foodtech.test", role=UserRole.procurement_manager, name="Boris")

    rd = RdRequest(title="Ham", author_id=anna.id)
    db.add(rd)
    db.commit()

    recent = NOW - timedelta(days=2)
    old = NOW - timedelta(days=90)
    db.add_all([
        RequestEvent(request_id=rd.id, event_type="created", actor_email=anna.email, created_at=recent),
        RequestEvent(request_id=rd.id, event_type="comment", actor_email=anna.email, created_at=recent),
        RequestEvent(request_id=rd.id, event_type="comment", actor_email=anna.email, created_at=old),
        PurchaseRequest(title="Spices", created_by=boris.id, created_at=recent),
        PurchaseInvoice(number="INV-1", created_by=boris.id, created_at=recent),
        PurchaseLog(entity_type="request", entity_id=1, action="approve", user_id=boris.id,
                    created_at=NOW - timedelta(days=1)),
    ])
    db.commit()
    return anna, boris


class TestAnalyticsService:

    def test_user_stats_respects_window(self, db, activity):
        anna, boris = activity
        stats = {s.user_id: s for s in analytics_service.user_stats(db, days=30, now=NOW)}
        assert stats[anna.id].rd_events_count == 2
        assert stats[boris.id].purchase_requests_count == 1
        assert stats[boris.id].purchase_invoices_count == 1
        assert stats[boris.id].last_activity_at == (NOW - timedelta(days=1)).isoformat()

    def test_timeline_counts_rd_events_and_logs(self, db, activity):
        points = analytics_service.timeline(db, days=30, now=NOW)
        assert len(points) == 31
        assert sum(p.rd_events for p in points) == 2
        assert sum(p.purchase_events for p in points) == 1

    def test_summary(self, db, activity):
        summary = analytics_service.summary(db, days=30, now=NOW)
        assert summary["total_events_count"] == 4
        assert summary["active_users_count"] == 2


class TestAnalyticsAPI:

    def test_admin_only(self, client, make_profile, auth_headers):
        user = make_profile("sm@foodtech.test")
        response = client.get("/api/analytics/summary", headers=auth_headers(user))
        assert response.status_code == 403

    def test_days_bounds(self, client, admin, auth_headers):
        assert client.get("/api/analytics/users", params={"days": 0}, headers=auth_headers(admin)).status_code == 400
        assert client.get("/api/analytics/users", params={"days": 366}, headers=auth_headers(admin)).status_code == 400

    def test_users_endpoint(self, client, admin, auth_headers):
        response = client.get("/api/analytics/users", headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()[0]["email"] == "admin@foodtech.test"

    def test_timeline_endpoint_is_dense(self, client, admin, auth_headers):
        response = client.get("/api/analytics/timeline", params={"days": 7}, headers=auth_headers(admin))
        assert len(response.json()) == 8
