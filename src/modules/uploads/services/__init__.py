from .entity_ref import EntityRef, MaintenanceRef, ProjectRef, ProjectResultRef
from .upload_service import UploadService
from .storage_sweep import delete_orphaned_files

__all__ = [
    'EntityRef', 'MaintenanceRef', 'ProjectRef', 'ProjectResultRef',
    'UploadService', 'delete_orphaned_files'
]
