from typing import Optional
from pydantic import BaseModel
from datetime import datetime

class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    reference_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    user_id: int
    is_read: bool = False

    model_config = {"from_attributes": True}

class MarkAllReadResponse(BaseModel):
    success: bool = True
    updated: int
