from datetime import datetime
from pydantic import BaseModel

from modules.uploads.models.file_upload import EntityType

class FileUploadResponse(BaseModel):
    id: int
    entity_type: EntityType
    entity_id: int
    file_name: str
    file_type: str
    file_size: int
    file_path: str
    uploaded_by_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
