from .message import Message, SubjectType

__all__ = ['Message', 'SubjectType']
