from .log_service import LogService

__all__ = ['LogService']
