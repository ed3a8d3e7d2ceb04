from .user import User, UserRole
from .organization import Division, Branch

__all__ = ['User', 'UserRole', 'Division', 'Branch']
