from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from modules.logs.models.log import LogStatus

class LogActor(BaseModel):
    nama_lengkap: str
    email: str

    model_config = {"from_attributes": True}

class LogResponse(BaseModel):
    id: int
    user_id: int
    type: str
    description: str
    status: LogStatus
    ip: str
    timestamp: datetime
    user: Optional[LogActor] = None

    model_config = {"from_attributes": True}
