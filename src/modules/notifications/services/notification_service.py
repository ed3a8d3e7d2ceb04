# modules/notifications/services/notification_service.py
from typing import List

from modules.auth.services.permission import Action, Principal, can_mutate
from modules.common.errors import Forbidden, NotFound
from modules.notifications.models.notification import Notification
from modules.notifications.repositories.notification_repository import NotificationRepository

DEFAULT_FEED_SIZE = 20
CHAT_PREVIEW_LENGTH = 50

class NotificationTemplate:
    def __init__(self, user_id: int, notification_type: str, title: str, message: str, reference_id: int = None):
        self.user_id = user_id
        self.notification_type = notification_type
        self.title = title
        self.message = message
        self.reference_id = reference_id

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'type': self.notification_type,
            'title': self.title,
            'message': self.message,
            'reference_id': self.reference_id,
        }

class MaintenanceStatusNotification(NotificationTemplate):
    def __init__(self, user_id: int, issue_id: int, issue_title: str, new_status: str):
        title = "Status Maintenance Diperbarui"
        message = f'Laporan "{issue_title}" Anda sekarang berstatus: {new_status}'
        super().__init__(user_id, 'maintenance_status', title, message, issue_id)

class ProjectStatusNotification(NotificationTemplate):
    def __init__(self, user_id: int, project_id: int, project_title: str, new_status: str):
        title = "Status Project Diperbarui"
        message = f'Request project "{project_title}" Anda sekarang berstatus: {new_status}'
        super().__init__(user_id, 'project_status', title, message, project_id)

class ChatMessageNotification(NotificationTemplate):
    def __init__(self, user_id: int, message_id: int, sender_name: str, content: str):
        preview = content[:CHAT_PREVIEW_LENGTH]
        if len(content) > CHAT_PREVIEW_LENGTH:
            preview += "..."
        title = "Pesan Baru"
        message = f'{sender_name} mengirim pesan: "{preview}"'
        super().__init__(user_id, 'chat', title, message, message_id)

class NotificationService:
    def __init__(self, repository: NotificationRepository):
        self.notification_repository = repository

    def create(self, template: NotificationTemplate) -> Notification:
        notif = Notification(**template.to_dict())
        return self.notification_repository.save(notif)

    def notify_maintenance_status(self, user_id: int, issue_id: int, issue_title: str, new_status: str) -> Notification:
        return self.create(MaintenanceStatusNotification(user_id, issue_id, issue_title, new_status))

    def notify_project_status(self, user_id: int, project_id: int, project_title: str, new_status: str) -> Notification:
        return self.create(ProjectStatusNotification(user_id, project_id, project_title, new_status))

    def notify_chat_message(self, user_id: int, message_id: int, sender_name: str, content: str) -> Notification:
        return self.create(ChatMessageNotification(user_id, message_id, sender_name, content))

    def get_notifications(self, user_id: int, limit: int = DEFAULT_FEED_SIZE) -> List[Notification]:
        return self.notification_repository.find_by_user_id(user_id, limit)

    def count_unread(self, user_id: int) -> int:
        return self.notification_repository.count_unread(user_id)

    def mark_as_read(self, actor: Principal, notification_id: int) -> Notification:
        notif = self.notification_repository.get(notification_id)
        if not notif:
            raise NotFound("Notification not found")
        if not can_mutate(actor, notif, Action.MARK_READ):
            raise Forbidden("Forbidden")
        return self.notification_repository.mark_read(notif)

    def mark_all_as_read(self, actor: Principal) -> int:
        return self.notification_repository.mark_all_read(actor.id)
