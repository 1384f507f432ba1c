"""Activity analytics: per-user counts, a daily timeline and a summary over a trailing window.

Nothing here is persisted; every call refetches its sources. The fold
functions are pure and operate on plain rows so they can be reused on any
source of events.
"""

from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from foodtech.models.profile import Profile
from foodtech.models.purchase import PurchaseRequest, PurchaseInvoice, PurchaseLog
from foodtech.models.rd import RequestEvent

DEFAULT_WINDOW_DAYS = 30


@dataclass
class UserActivityStats:
    user_id: int
    email: str
    name: str
    role: str
    rd_events_count: int = 0
    purchase_requests_count: int = 0
    purchase_invoices_count: int = 0
    last_activity_at: Optional[str] = None

    @property
    def events_count(self) -> int:
        return self.rd_events_count + self.purchase_requests_count + self.purchase_invoices_count

    def touch(self, timestamp: str) -> None:
        # ISO-8601 strings order the same way as the instants they encode
        if self.last_activity_at is None or timestamp > self.last_activity_at:
            self.last_activity_at = timestamp


@dataclass
class TimelinePoint:
    date: str
    rd_events: int = 0
    purchase_events: int = 0

    @property
    def total(self) -> int:
        return self.rd_events + self.purchase_events

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "rd_events": self.rd_events,
            "purchase_events": self.purchase_events,
            "total": self.total,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _role_value(role) -> str:
    return role.value if hasattr(role, "value") else str(role)


def build_user_stats(
    profiles: Iterable[Any],
    rd_events: Iterable[Tuple[Optional[str], Any]],
    purchase_requests: Iterable[Tuple[int, Any]],
    purchase_invoices: Iterable[Tuple[int, Any]],
    purchase_logs: Iterable[Tuple[Optional[int], Any]] = (),
) -> List[UserActivityStats]:
    """Fold event rows into one accumulator per profile.

    R&D events carry only the actor's email, so they are matched to profiles
    by email; the first profile with a given email wins. Purchase logs only
    move ``last_activity_at``. The result is ordered by descending event
    count; ties keep profile order.
    """
    stats: Dict[int, UserActivityStats] = {}
    by_email: Dict[str, int] = {}
    for p in profiles:
        stats[p.id] = UserActivityStats(
            user_id=p.id,
            email=p.email,
            name=p.name or p.email,
            role=_role_value(p.role),
        )
        by_email.setdefault(p.email, p.id)

    for actor_email, created_at in rd_events:
        profile_id = by_email.get(actor_email)
        if profile_id is None:
            continue
        entry = stats[profile_id]
        entry.rd_events_count += 1
        entry.touch(_iso(created_at))

    for created_by, created_at in purchase_requests:
        entry = stats.get(created_by)
        if entry is None:
            continue
        entry.purchase_requests_count += 1
        entry.touch(_iso(created_at))

    for created_by, created_at in purchase_invoices:
        entry = stats.get(created_by)
        if entry is None:
            continue
        entry.purchase_invoices_count += 1
        entry.touch(_iso(created_at))

    for user_id, created_at in purchase_logs:
        entry = stats.get(user_id)
        if entry is not None:
            entry.touch(_iso(created_at))

    # sorted() is stable
    return sorted(stats.values(), key=lambda s: s.events_count, reverse=True)


def build_timeline(
    days: int,
    rd_timestamps: Iterable[Any],
    purchase_timestamps: Iterable[Any],
    today: Optional[date] = None,
) -> List[TimelinePoint]:
    """Dense per-day series for ``[today - days, today]``, oldest first."""
    today = today or _utcnow().date()
    buckets: Dict[str, TimelinePoint] = {}
    for i in range(days + 1):
        key = (today - timedelta(days=i)).isoformat()
        buckets[key] = TimelinePoint(date=key)

    for ts in rd_timestamps:
        point = buckets.get(_iso(ts)[:10])
        if point is not None:
            point.rd_events += 1

    for ts in purchase_timestamps:
        point = buckets.get(_iso(ts)[:10])
        if point is not None:
            point.purchase_events += 1

    return sorted(buckets.values(), key=lambda p: p.date)


def build_summary(stats: Sequence[UserActivityStats]) -> Dict[str, Any]:
    """Summary figures derived from already-ordered user stats."""
    active = [s for s in stats if s.events_count > 0]
    most_active = None
    if stats and stats[0].events_count > 0:
        most_active = {"name": stats[0].name, "events_count": stats[0].events_count}
    return {
        "active_users_count": len(active),
        "total_users_count": len(stats),
        "total_events_count": sum(s.events_count for s in stats),
        "most_active_user": most_active,
    }


class AnalyticsService:
    """Reads the event-bearing tables and applies the folds above."""

    @staticmethod
    def window_start(days: int, now: Optional[datetime] = None) -> datetime:
        return (now or _utcnow()) - timedelta(days=days)

    @staticmethod
    def user_stats(
        db: Session, days: int = DEFAULT_WINDOW_DAYS, now: Optional[datetime] = None,
    ) -> List[UserActivityStats]:
        since = AnalyticsService.window_start(days, now)

        profiles = db.query(Profile.id, Profile.email, Profile.name, Profile.role).order_by(Profile.id).all()
        rd_events = (
            db.query(RequestEvent.actor_email, RequestEvent.created_at)
            .filter(RequestEvent.created_at >= since)
            .all()
        )
        purchase_requests = (
            db.query(PurchaseRequest.created_by, PurchaseRequest.created_at)
            .filter(PurchaseRequest.created_at >= since)
            .all()
        )
        purchase_invoices = (
            db.query(PurchaseInvoice.created_by, PurchaseInvoice.created_at)
            .filter(PurchaseInvoice.created_at >= since)
            .all()
        )
        purchase_logs = (
            db.query(PurchaseLog.user_id, PurchaseLog.created_at)
            .filter(PurchaseLog.created_at >= since)
            .all()
        )
        return build_user_stats(profiles, rd_events, purchase_requests, purchase_invoices, purchase_logs)

    @staticmethod
    def timeline(
        db: Session, days: int = DEFAULT_WINDOW_DAYS, now: Optional[datetime] = None,
    ) -> List[TimelinePoint]:
        now = now or _utcnow()
        since = AnalyticsService.window_start(days, now)
        rd_timestamps = [
            row.created_at
            for row in db.query(RequestEvent.created_at).filter(RequestEvent.created_at >= since)
        ]
        purchase_timestamps = [
            row.created_at
            for row in db.query(PurchaseLog.created_at).filter(PurchaseLog.created_at >= since)
        ]
        return build_timeline(days, rd_timestamps, purchase_timestamps, today=now.date())

    @staticmethod
    def summary(
        db: Session, days: int = DEFAULT_WINDOW_DAYS, now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        return build_summary(AnalyticsService.user_stats(db, days, now))

    @staticmethod
    def stats_to_dict(stats: UserActivityStats) -> Dict[str, Any]:
        data = asdict(stats)
        data["events_count"] = stats.events_count
        return data


analytics_service = AnalyticsService()
