from typing import Optional, Tuple

from starlette.requests import HTTPConnection
from starlette.responses import Response

from config import settings
from modules.auth.schemas.auth_schemas import Principal
from modules.auth.services.auth_service import AuthService

BEARER_PREFIX = "bearer "


def extract_token(conn: HTTPConnection) -> Optional[str]:
    """Session token from the Authorization header, falling back to the session cookie"""
    header = conn.headers.get("authorization", "")
    if header.lower().startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        if token:
            return token
    return conn.cookies.get(settings.session_cookie_name) or None


def resolve_session(conn: HTTPConnection) -> Optional[Tuple[Principal, int]]:
    token = extract_token(conn)
    if not token:
        return None
    return AuthService.verify_token(token)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name, path="/")
