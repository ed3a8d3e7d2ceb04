from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from modules.chat.models.message import SubjectType
from modules.users.models.user import UserRole

class SendMessageRequest(BaseModel):
    receiver_id: Optional[int] = None
    content: Optional[str] = None
    subject_type: Optional[SubjectType] = None
    subject_id: Optional[int] = None

class MessageSender(BaseModel):
    id: int
    nama_lengkap: str
    profile_picture: Optional[str] = None

    model_config = {"from_attributes": True}

class MessageResponse(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    subject_type: Optional[SubjectType] = None
    subject_id: Optional[int] = None
    is_read: bool
    created_at: datetime
    sender: Optional[MessageSender] = None

    model_config = {"from_attributes": True}

class ThreadMessageResponse(MessageResponse):
    # Title of the referenced issue/project, None when it no longer exists
    subject_title: Optional[str] = None

class ConversationResponse(BaseModel):
    id: int
    nama_lengkap: str
    email: str
    divisi: str
    role: UserRole
    profile_picture: Optional[str] = None
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0
