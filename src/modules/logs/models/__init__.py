from .log import Log, LogStatus

__all__ = ['Log', 'LogStatus']
