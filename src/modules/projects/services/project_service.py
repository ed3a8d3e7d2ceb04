import posixpath
from typing import List, Tuple

import structlog
from sqlalchemy.orm import Session, joinedload

from modules.auth.schemas.auth_schemas import Principal
from modules.auth.services.permission import Action, can_mutate
from modules.common.errors import Forbidden, NotFound, ValidationFailed
from modules.events.models.event import EventType
from modules.events.services.event_service import EventService
from modules.logs.services.log_service import CREATE, LogService
from modules.notifications.repositories.notification_repository import NotificationRepository
from modules.notifications.services.notification_service import NotificationService
from modules.projects.models.project_item import ProjectItem, ProjectStatus, ResultType
from modules.projects.schemas.project_schemas import ProjectCreate, ProjectUpdate
from modules.uploads.models.file_upload import FileUpload
from modules.uploads.services.entity_ref import ProjectRef, ProjectResultRef
from modules.uploads.services.upload_service import UploadService

logger = structlog.get_logger(__name__)

REQUIRED_TEXT_FIELDS = ('title', 'description')

class ProjectService:

    @staticmethod
    def list_projects(session: Session, actor: Principal) -> List[ProjectItem]:
        query = session.query(ProjectItem).options(joinedload(ProjectItem.user))
        if not actor.is_it:
            query = query.filter(ProjectItem.user_id == actor.id)
        return query.order_by(ProjectItem.created_at.desc(), ProjectItem.id.desc()).all()

    @staticmethod
    def get_project(session: Session, actor: Principal, project_id: int) -> Tuple[ProjectItem, List[FileUpload]]:
        project = ProjectService._load(session, project_id)
        if not can_mutate(actor, project, Action.VIEW):
            raise Forbidden("Forbidden")
        return project, UploadService.list_files(session, ProjectRef(project.id))

    @staticmethod
    def create_project(session: Session, actor: Principal, data: ProjectCreate, ip: str = "system") -> ProjectItem:
        if not all((getattr(data, field) or "").strip() for field in REQUIRED_TEXT_FIELDS):
            raise ValidationFailed("Title dan deskripsi wajib diisi")

        project = ProjectItem(
            title=data.title.strip(),
            description=data.description,
            file_or_link=data.file_or_link or None,
            deadline=data.deadline,
            user_id=actor.id,
        )
        session.add(project)
        session.commit()
        session.refresh(project)

        if project.deadline:
            EventService.create_deadline_event(
                session, EventType.DEADLINE_PROJECT, project.id, actor.id, project.title, project.deadline
            )
        LogService.record(session, actor.id, CREATE, f"Created project: {project.title}", ip=ip)

        logger.info("project_created", project_id=project.id, user_id=actor.id)
        return project

    @staticmethod
    def update_project(
        session: Session, actor: Principal, project_id: int, data: ProjectUpdate, ip: str = "system"
    ) -> ProjectItem:
        project = ProjectService._load(session, project_id)
        is_owner = can_mutate(actor, project, Action.EDIT)
        if not is_owner and not actor.is_it:
            raise Forbidden("Forbidden")

        changes = data.model_dump(exclude_unset=True)
        new_status = changes.pop("status", None)
        result = {key: changes.pop(key, None) for key in ("result_type", "result_value", "result_name")}
        if new_status is not None and not can_mutate(actor, project, Action.SET_STATUS):
            raise Forbidden("Only IT can change the status")

        edited = False
        sync_deadline = False
        if is_owner and changes:
            sync_deadline = "deadline" in changes or "title" in changes
            ProjectService._apply_owner_edits(project, changes)
            edited = True
        elif changes:
            logger.info("project_admin_field_edit_ignored", project_id=project.id, fields=sorted(changes))

        if not edited and new_status is None:
            raise ValidationFailed("No data to update")

        previous_status = project.status
        if new_status == ProjectStatus.COMPLETED:
            ProjectService._apply_result(project, **result)
        if new_status is not None:
            project.status = new_status

        session.commit()
        session.refresh(project)

        if sync_deadline:
            EventService.sync_deadline_event(
                session, EventType.DEADLINE_PROJECT, project.id, project.user_id, project.title, project.deadline
            )

        # Reported even when the status is unchanged
        if new_status is not None and project.user_id != actor.id:
            notifications = NotificationService(NotificationRepository(session))
            notifications.notify_project_status(project.user_id, project.id, project.title, new_status.value)

        if new_status is not None and not is_owner:
            LogService.record(
                session, actor.id, "project_status_update",
                f'Admin updated project "{project.title}" status to "{new_status.value}"', ip=ip,
            )
        else:
            LogService.record(
                session, actor.id, "project_edit",
                f'User edited project "{project.title}"', ip=ip,
            )

        logger.info("project_updated", project_id=project.id, user_id=actor.id,
                    status_from=previous_status.value, status_to=project.status.value)
        return project

    @staticmethod
    def delete_project(session: Session, actor: Principal, project_id: int, ip: str = "system") -> None:
        """Removes the project with its deadline events, attachments and result files"""
        project = ProjectService._load(session, project_id)
        if not can_mutate(actor, project, Action.DELETE):
            raise Forbidden("Forbidden")

        by_admin = actor.is_it and project.user_id != actor.id
        title = project.title

        EventService.delete_deadline_events(session, EventType.DEADLINE_PROJECT, project.id)
        UploadService.delete_for_entity(session, ProjectRef(project.id))
        UploadService.delete_for_entity(session, ProjectResultRef(project.id))
        session.delete(project)
        session.commit()

        LogService.record(
            session, actor.id, "project_delete",
            f'{"Admin" if by_admin else "User"} deleted project "{title}"', ip=ip,
        )
        logger.info("project_deleted", project_id=project_id, user_id=actor.id, by_admin=by_admin)

    @staticmethod
    def _load(session: Session, project_id: int) -> ProjectItem:
        project = session.get(ProjectItem, project_id)
        if not project:
            raise NotFound("Project not found")
        return project

    @staticmethod
    def _apply_owner_edits(project: ProjectItem, changes: dict) -> None:
        for field in REQUIRED_TEXT_FIELDS:
            if field in changes and not (changes[field] or "").strip():
                raise ValidationFailed(f"Field {field} wajib diisi")

        if "title" in changes:
            project.title = changes["title"].strip()
        if "description" in changes:
            project.description = changes["description"]
        if "file_or_link" in changes:
            project.file_or_link = changes["file_or_link"] or None
        if "deadline" in changes:
            project.deadline = changes["deadline"]

    @staticmethod
    def _apply_result(project: ProjectItem, result_type=None, result_value=None, result_name=None) -> None:
        """A completed project always carries exactly one result; completing again overwrites it"""
        value = (result_value or "").strip()
        if result_type is None or not value:
            raise ValidationFailed("Hasil project (link atau file) wajib diisi untuk menyelesaikan project")

        if result_type == ResultType.LINK:
            if not value.startswith("http"):
                value = f"https://{value}"
            name = result_name or value
        else:
            name = result_name or posixpath.basename(value)

        project.result_type = result_type
        project.result_value = value
        project.result_name = name
