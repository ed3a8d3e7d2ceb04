from fastapi import Request

from modules.auth.schemas.auth_schemas import Principal
from modules.auth.session import resolve_session
from modules.common.errors import Unauthenticated
from modules.common.request_utils import client_ip


def get_current_principal(request: Request) -> Principal:
    """Principal attached by the request guard, or resolved here for public paths"""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        resolved = resolve_session(request)
        if resolved is None:
            raise Unauthenticated("Unauthorized")
        principal = resolved[0]
    return principal


def get_client_ip(request: Request) -> str:
    return client_ip(request)
