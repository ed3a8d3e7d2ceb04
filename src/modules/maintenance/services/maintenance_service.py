from typing import List, Tuple

import structlog
from sqlalchemy.orm import Session, joinedload

from modules.auth.schemas.auth_schemas import Principal
from modules.auth.services.permission import Action, can_mutate
from modules.common.errors import Forbidden, NotFound, ValidationFailed
from modules.events.models.event import EventType
from modules.events.services.event_service import EventService
from modules.logs.services.log_service import CREATE, LogService
from modules.maintenance.models.maintenance_issue import MaintenanceIssue, OTHER_CATEGORY
from modules.maintenance.schemas.maintenance_schemas import MaintenanceCreate, MaintenanceUpdate
from modules.notifications.repositories.notification_repository import NotificationRepository
from modules.notifications.services.notification_service import NotificationService
from modules.uploads.models.file_upload import FileUpload
from modules.uploads.services.entity_ref import MaintenanceRef
from modules.uploads.services.upload_service import UploadService

logger = structlog.get_logger(__name__)

REQUIRED_TEXT_FIELDS = ('kategori', 'jenis_masalah', 'deskripsi')

class MaintenanceService:

    @staticmethod
    def list_issues(session: Session, actor: Principal) -> List[MaintenanceIssue]:
        """IT sees every issue, staff only their own"""
        query = session.query(MaintenanceIssue).options(joinedload(MaintenanceIssue.user))
        if not actor.is_it:
            query = query.filter(MaintenanceIssue.user_id == actor.id)
        return query.order_by(MaintenanceIssue.created_at.desc(), MaintenanceIssue.id.desc()).all()

    @staticmethod
    def get_issue(session: Session, actor: Principal, issue_id: int) -> Tuple[MaintenanceIssue, List[FileUpload]]:
        issue = MaintenanceService._load(session, issue_id)
        if not can_mutate(actor, issue, Action.VIEW):
            raise Forbidden("Forbidden")
        return issue, UploadService.list_files(session, MaintenanceRef(issue.id))

    @staticmethod
    def create_issue(session: Session, actor: Principal, data: MaintenanceCreate, ip: str = "system") -> MaintenanceIssue:
        if not all((getattr(data, field) or "").strip() for field in REQUIRED_TEXT_FIELDS):
            raise ValidationFailed("Kategori, jenis masalah, dan deskripsi wajib diisi")

        kategori = data.kategori.strip()
        issue = MaintenanceIssue(
            kategori=kategori,
            other_kategori=data.other_kategori if kategori == OTHER_CATEGORY else None,
            jenis_masalah=data.jenis_masalah.strip(),
            deskripsi=data.deskripsi,
            deadline=data.deadline,
            user_id=actor.id,
        )
        session.add(issue)
        session.commit()
        session.refresh(issue)

        # Side effects run as separate commits after the issue itself
        if issue.deadline:
            EventService.create_deadline_event(
                session, EventType.DEADLINE_MAINTENANCE, issue.id, actor.id, issue.jenis_masalah, issue.deadline
            )
        LogService.record(session, actor.id, CREATE, f"Created maintenance issue: {issue.jenis_masalah}", ip=ip)

        logger.info("maintenance_created", issue_id=issue.id, user_id=actor.id)
        return issue

    @staticmethod
    def update_issue(
        session: Session, actor: Principal, issue_id: int, data: MaintenanceUpdate, ip: str = "system"
    ) -> MaintenanceIssue:
        issue = MaintenanceService._load(session, issue_id)
        is_owner = can_mutate(actor, issue, Action.EDIT)
        if not is_owner and not actor.is_it:
            raise Forbidden("Forbidden")

        changes = data.model_dump(exclude_unset=True)
        new_status = changes.pop("status", None)
        if new_status is not None and not can_mutate(actor, issue, Action.SET_STATUS):
            raise Forbidden("Only IT can change the status")

        edited = False
        sync_deadline = False
        if is_owner and changes:
            sync_deadline = "deadline" in changes or "jenis_masalah" in changes
            MaintenanceService._apply_owner_edits(issue, changes)
            edited = True
        elif changes:
            logger.info("maintenance_admin_field_edit_ignored", issue_id=issue.id, fields=sorted(changes))

        previous_status = issue.status
        if new_status is not None:
            issue.status = new_status

        if not edited and new_status is None:
            raise ValidationFailed("No data to update")

        session.commit()
        session.refresh(issue)

        if sync_deadline:
            EventService.sync_deadline_event(
                session, EventType.DEADLINE_MAINTENANCE, issue.id, issue.user_id, issue.jenis_masalah, issue.deadline
            )

        # Reported even when the status is unchanged
        if new_status is not None and issue.user_id != actor.id:
            notifications = NotificationService(NotificationRepository(session))
            notifications.notify_maintenance_status(issue.user_id, issue.id, issue.jenis_masalah, new_status.value)

        if new_status is not None and not is_owner:
            LogService.record(
                session, actor.id, "maintenance_status_update",
                f'Admin updated maintenance "{issue.jenis_masalah}" status to "{new_status.value}"', ip=ip,
            )
        else:
            LogService.record(
                session, actor.id, "maintenance_edit",
                f'User edited maintenance "{issue.jenis_masalah}"', ip=ip,
            )

        logger.info("maintenance_updated", issue_id=issue.id, user_id=actor.id,
                    status_from=previous_status.value, status_to=issue.status.value)
        return issue

    @staticmethod
    def delete_issue(session: Session, actor: Principal, issue_id: int, ip: str = "system") -> None:
        """Removes the issue together with its deadline events and attachments"""
        issue = MaintenanceService._load(session, issue_id)
        if not can_mutate(actor, issue, Action.DELETE):
            raise Forbidden("Forbidden")

        by_admin = actor.is_it and issue.user_id != actor.id
        title = issue.jenis_masalah

        EventService.delete_deadline_events(session, EventType.DEADLINE_MAINTENANCE, issue.id)
        UploadService.delete_for_entity(session, MaintenanceRef(issue.id))
        session.delete(issue)
        session.commit()

        LogService.record(
            session, actor.id, "maintenance_delete",
            f'{"Admin" if by_admin else "User"} deleted maintenance "{title}"', ip=ip,
        )
        logger.info("maintenance_deleted", issue_id=issue_id, user_id=actor.id, by_admin=by_admin)

    @staticmethod
    def _load(session: Session, issue_id: int) -> MaintenanceIssue:
        issue = session.get(MaintenanceIssue, issue_id)
        if not issue:
            raise NotFound("Issue not found")
        return issue

    @staticmethod
    def _apply_owner_edits(issue: MaintenanceIssue, changes: dict) -> None:
        for field in REQUIRED_TEXT_FIELDS:
            if field in changes and not (changes[field] or "").strip():
                raise ValidationFailed(f"Field {field} wajib diisi")

        if "kategori" in changes:
            issue.kategori = changes["kategori"].strip()
            issue.other_kategori = changes.get("other_kategori") if issue.kategori == OTHER_CATEGORY else None
        elif "other_kategori" in changes and issue.kategori == OTHER_CATEGORY:
            issue.other_kategori = changes["other_kategori"]

        if "jenis_masalah" in changes:
            issue.jenis_masalah = changes["jenis_masalah"].strip()
        if "deskripsi" in changes:
            issue.deskripsi = changes["deskripsi"]
        if "deadline" in changes:
            issue.deadline = changes["deadline"]
