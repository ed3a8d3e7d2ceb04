from datetime import date, datetime, timedelta
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from modules.auth.schemas.auth_schemas import Principal
from modules.dashboard.schemas.stats_schemas import DashboardStats, MaintenanceStats, ProjectStats
from modules.events.models.event import Event
from modules.logs.models.log import Log
from modules.maintenance.models.maintenance_issue import MaintenanceIssue
from modules.notifications.repositories.notification_repository import NotificationRepository
from modules.projects.models.project_item import ProjectItem
from modules.users.models.user import User

LOG_WINDOW_DAYS = 7

def _month_bounds(today: date):
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end

def _count_by_status(session: Session, model, actor: Principal) -> Dict[str, int]:
    query = session.query(model.status, func.count(model.id))
    if not actor.is_it:
        query = query.filter(model.user_id == actor.id)
    return {status.value: count for status, count in query.group_by(model.status).all()}

class StatsService:

    @staticmethod
    def get_stats(session: Session, actor: Principal, now: Optional[datetime] = None) -> DashboardStats:
        """Read-only counters for the dashboard; record counts are scoped to the caller unless IT"""
        now = now or datetime.utcnow()

        maintenance = _count_by_status(session, MaintenanceIssue, actor)
        projects = _count_by_status(session, ProjectItem, actor)

        month_start, next_month = _month_bounds(now.date())
        events = session.query(Event).filter(Event.date >= month_start, Event.date < next_month).count()

        notifications = NotificationRepository(session).count_unread(actor.id)

        logs = users = 0
        if actor.is_it:
            logs = session.query(Log).filter(Log.timestamp >= now - timedelta(days=LOG_WINDOW_DAYS)).count()
            users = session.query(User).count()

        return DashboardStats(
            maintenance=MaintenanceStats(
                total=sum(maintenance.values()),
                pending=maintenance.get("PENDING", 0),
                in_progress=maintenance.get("IN_PROGRESS", 0),
                resolved=maintenance.get("RESOLVED", 0),
                rejected=maintenance.get("REJECTED", 0),
            ),
            projects=ProjectStats(
                total=sum(projects.values()),
                pending=projects.get("PENDING", 0),
                in_progress=projects.get("IN_PROGRESS", 0),
                completed=projects.get("COMPLETED", 0),
                rejected=projects.get("REJECTED", 0),
            ),
            events=events,
            notifications=notifications,
            logs=logs,
            users=users,
        )
