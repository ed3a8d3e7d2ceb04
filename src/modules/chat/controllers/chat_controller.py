from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from modules.auth.dependencies import get_current_principal
from modules.auth.schemas.auth_schemas import Principal
from modules.chat.schemas.chat_schemas import (
    ConversationResponse, MessageResponse, SendMessageRequest, ThreadMessageResponse
)
from modules.chat.services.chat_service import ChatService

router = APIRouter(prefix="/api/chat", tags=["chat"])

@router.get("", response_model=Union[List[ThreadMessageResponse], List[ConversationResponse]])
def get_chat(
    contact_id: Optional[int] = Query(None, description="Fetch the thread with this contact"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Conversation list, or the thread with `contact_id` (marks it read)"""
    if contact_id is not None:
        return ChatService.get_thread(db, principal, contact_id)
    return ChatService.list_conversations(db, principal)

@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: SendMessageRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return ChatService.send_message(db, principal, payload)
