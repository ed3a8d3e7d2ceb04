from datetime import datetime
from typing import Dict, List, Optional, Tuple

import structlog
from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.orm import Session, joinedload

from modules.auth.schemas.auth_schemas import Principal
from modules.chat.models.message import Message, SubjectType
from modules.chat.schemas.chat_schemas import ConversationResponse, SendMessageRequest, ThreadMessageResponse
from modules.common.errors import NotFound, ValidationFailed
from modules.maintenance.models.maintenance_issue import MaintenanceIssue
from modules.notifications.repositories.notification_repository import NotificationRepository
from modules.notifications.services.notification_service import NotificationService
from modules.projects.models.project_item import ProjectItem
from modules.users.models.user import User, UserRole

logger = structlog.get_logger(__name__)

class ChatService:

    @staticmethod
    def list_conversations(session: Session, actor: Principal) -> List[ConversationResponse]:
        """
        One entry per other user with the latest message and unread count.
        IT contacts come first, then the most recent conversation; contacts
        without messages go last.
        """
        contacts = session.query(User).filter(User.id != actor.id).all()

        # Latest message per counterpart only
        other_party = case((Message.sender_id == actor.id, Message.receiver_id), else_=Message.sender_id)
        latest_ids = (
            select(func.max(Message.id))
            .where(or_(Message.sender_id == actor.id, Message.receiver_id == actor.id))
            .group_by(other_party)
        )
        last_messages: Dict[int, Message] = {}
        for msg in session.query(Message).filter(Message.id.in_(latest_ids)).all():
            other_id = msg.receiver_id if msg.sender_id == actor.id else msg.sender_id
            last_messages[other_id] = msg

        unread_counts = dict(
            session.query(Message.sender_id, func.count(Message.id))
            .filter(Message.receiver_id == actor.id, Message.is_read.is_(False))
            .group_by(Message.sender_id)
            .all()
        )

        conversations = []
        for contact in contacts:
            last = last_messages.get(contact.id)
            conversations.append(ConversationResponse(
                id=contact.id,
                nama_lengkap=contact.nama_lengkap,
                email=contact.email,
                divisi=contact.divisi,
                role=contact.role,
                profile_picture=contact.profile_picture,
                last_message=last.content if last else None,
                last_message_time=last.created_at if last else None,
                unread_count=unread_counts.get(contact.id, 0),
            ))

        conversations.sort(key=lambda c: c.last_message_time or datetime.min, reverse=True)
        conversations.sort(key=lambda c: (c.role != UserRole.IT, c.last_message_time is None))
        return conversations

    @staticmethod
    def get_thread(session: Session, actor: Principal, contact_id: int) -> List[ThreadMessageResponse]:
        """Two-way thread with a contact; reading it marks the contact's messages to the caller as read"""
        if session.get(User, contact_id) is None:
            raise NotFound("Contact not found")

        marked = (
            session.query(Message)
            .filter(
                Message.sender_id == contact_id,
                Message.receiver_id == actor.id,
                Message.is_read.is_(False),
            )
            .update({Message.is_read: True}, synchronize_session=False)
        )
        session.commit()
        if marked:
            logger.info("chat_messages_read", user_id=actor.id, contact_id=contact_id, count=marked)

        messages = (
            session.query(Message)
            .options(joinedload(Message.sender))
            .filter(or_(
                and_(Message.sender_id == actor.id, Message.receiver_id == contact_id),
                and_(Message.sender_id == contact_id, Message.receiver_id == actor.id),
            ))
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

        titles = ChatService._subject_titles(session, messages)
        thread = []
        for msg in messages:
            item = ThreadMessageResponse.model_validate(msg)
            item.subject_title = titles.get((msg.subject_type, msg.subject_id))
            thread.append(item)
        return thread

    @staticmethod
    def send_message(session: Session, actor: Principal, data: SendMessageRequest) -> Message:
        if not data.receiver_id or not data.content or not data.content.strip():
            raise ValidationFailed("Penerima dan pesan wajib diisi")
        if data.receiver_id == actor.id:
            raise ValidationFailed("Tidak dapat mengirim pesan ke diri sendiri")
        if session.get(User, data.receiver_id) is None:
            raise NotFound("Receiver not found")

        # The subject is only resolved when the thread is displayed
        message = Message(
            sender_id=actor.id,
            receiver_id=data.receiver_id,
            content=data.content,
            subject_type=data.subject_type if data.subject_id else None,
            subject_id=data.subject_id if data.subject_type else None,
        )
        session.add(message)
        session.commit()
        session.refresh(message)

        notifications = NotificationService(NotificationRepository(session))
        notifications.notify_chat_message(data.receiver_id, message.id, actor.name, data.content)

        logger.info("chat_message_sent", message_id=message.id, sender_id=actor.id, receiver_id=data.receiver_id)
        return message

    @staticmethod
    def _subject_titles(session: Session, messages: List[Message]) -> Dict[Tuple[SubjectType, int], Optional[str]]:
        issue_ids = {m.subject_id for m in messages if m.subject_type == SubjectType.MAINTENANCE and m.subject_id}
        project_ids = {m.subject_id for m in messages if m.subject_type == SubjectType.PROJECT and m.subject_id}

        titles = {}
        if issue_ids:
            rows = session.query(MaintenanceIssue.id, MaintenanceIssue.jenis_masalah).filter(
                MaintenanceIssue.id.in_(issue_ids)
            )
            titles.update({(SubjectType.MAINTENANCE, row_id): title for row_id, title in rows})
        if project_ids:
            rows = session.query(ProjectItem.id, ProjectItem.title).filter(ProjectItem.id.in_(project_ids))
            titles.update({(SubjectType.PROJECT, row_id): title for row_id, title in rows})
        return titles
