from fastapi import status


class ServiceError(Exception):
    """Base class for errors raised by the resource services"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
