import os
import re
import time
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from modules.auth.schemas.auth_schemas import Principal
from modules.auth.services.permission import can_mutate
from modules.common.errors import Forbidden, NotFound, ValidationFailed
from modules.uploads.models.file_upload import FileUpload
from modules.uploads.services.entity_ref import EntityRef

logger = structlog.get_logger(__name__)

PUBLIC_PREFIX = "/uploads"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB

class UploadService:

    @staticmethod
    def upload_file(
        session: Session,
        actor: Principal,
        ref: EntityRef,
        file_contents: bytes,
        filename: str,
        content_type: Optional[str],
        upload_dir: str,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> FileUpload:
        """
        Stores an attachment for a maintenance issue, project or project result:
        - checks the owning record exists and the caller may attach to it
        - validates the file
        - writes the bytes under <upload_dir>/<entity type>/
        - records the metadata row
        """
        # 1) Owning record and permission
        owner = session.get(ref.owner_model, ref.entity_id)
        if owner is None:
            raise NotFound(f"{ref.entity_type.value} {ref.entity_id} not found")
        if not can_mutate(actor, owner, ref.attach_action):
            raise Forbidden("Forbidden")

        # 2) Validations
        UploadService._validate_file(file_contents, filename, max_file_size)

        # 3) Unique stored name
        stored_name = UploadService.build_stored_name(ref.entity_id, filename)

        # 4) Write bytes
        target_dir = os.path.join(upload_dir, ref.entity_type.value)
        os.makedirs(target_dir, exist_ok=True)
        with open(os.path.join(target_dir, stored_name), "wb") as f:
            f.write(file_contents)

        # 5) Metadata row
        record = FileUpload(
            entity_type=ref.entity_type,
            entity_id=ref.entity_id,
            file_name=filename,
            file_type=content_type or "application/octet-stream",
            file_size=len(file_contents),
            file_path=f"{PUBLIC_PREFIX}/{ref.entity_type.value}/{stored_name}",
            uploaded_by_id=actor.id,
        )
        session.add(record)
        session.commit()
        session.refresh(record)

        logger.info("file_uploaded", entity_type=ref.entity_type.value,
                    entity_id=ref.entity_id, file_id=record.id, size=record.file_size)
        return record

    @staticmethod
    def _validate_file(file_contents: bytes, filename: str, max_file_size: int):
        if not filename:
            raise ValidationFailed("No file provided")
        if not file_contents:
            raise ValidationFailed("File is empty")
        if len(file_contents) > max_file_size:
            raise ValidationFailed(f"Maximum file size is {max_file_size // (1024 * 1024)} MB")

    @staticmethod
    def build_stored_name(entity_id: int, original_name: str, timestamp_ms: Optional[int] = None) -> str:
        """<entity id>_<epoch millis>_<base name with non-alphanumerics replaced by _><ext>"""
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        base, ext = os.path.splitext(os.path.basename(original_name))
        safe_base = re.sub(r"[^a-zA-Z0-9]", "_", base)
        return f"{entity_id}_{timestamp_ms}_{safe_base}{ext}"

    @staticmethod
    def list_files(session: Session, ref: EntityRef) -> List[FileUpload]:
        return (
            session.query(FileUpload)
            .filter(FileUpload.entity_type == ref.entity_type, FileUpload.entity_id == ref.entity_id)
            .order_by(FileUpload.created_at.desc(), FileUpload.id.desc())
            .all()
        )

    @staticmethod
    def delete_for_entity(session: Session, ref: EntityRef) -> int:
        """Drops the metadata rows; stored bytes are reclaimed by the storage sweep"""
        deleted = (
            session.query(FileUpload)
            .filter(FileUpload.entity_type == ref.entity_type, FileUpload.entity_id == ref.entity_id)
            .delete(synchronize_session=False)
        )
        session.commit()
        return deleted
