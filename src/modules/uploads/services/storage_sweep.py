import os
import time

import structlog
from sqlalchemy.orm import Session

from modules.uploads.models.file_upload import FileUpload
from modules.uploads.services.upload_service import PUBLIC_PREFIX

logger = structlog.get_logger(__name__)

def delete_orphaned_files(session: Session, upload_dir: str, grace_minutes: int = 60) -> int:
    """Removes stored files no FileUpload row points at, once they are older than the grace period"""
    if not os.path.isdir(upload_dir):
        return 0

    referenced = {path for (path,) in session.query(FileUpload.file_path).all()}
    cutoff = time.time() - grace_minutes * 60
    removed = 0

    for root, _dirs, files in os.walk(upload_dir):
        for name in files:
            full_path = os.path.join(root, name)
            relative = os.path.relpath(full_path, upload_dir).replace(os.sep, "/")
            if f"{PUBLIC_PREFIX}/{relative}" in referenced:
                continue
            try:
                if os.path.getmtime(full_path) > cutoff:
                    continue
                os.remove(full_path)
                removed += 1
            except OSError as e:
                logger.warning("orphan_delete_failed", path=full_path, error=str(e))

    logger.info("storage_sweep_finished", removed=removed)
    return removed
