from .file_upload import FileUpload, EntityType

__all__ = ['FileUpload', 'EntityType']
