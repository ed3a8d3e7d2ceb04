from urllib.parse import urlencode

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse

from modules.auth.services.auth_service import AuthService
from modules.auth.session import resolve_session, set_session_cookie

logger = structlog.get_logger(__name__)

PUBLIC_PATHS = [
    '/',
    '/auth/login',
    '/auth/register',
    '/api/auth',
    '/docs',
    '/redoc',
    '/openapi.json',
]

IT_ONLY_PATHS = ['/dashboard/logs', '/api/logs']

LOGIN_PAGE = '/auth/login'
DASHBOARD_ROOT = '/dashboard'


def _matches(path: str, prefixes) -> bool:
    for prefix in prefixes:
        if path == prefix:
            return True
        # "/" only matches itself
        if prefix != "/" and path.startswith(f"{prefix}/"):
            return True
    return False


def is_public_path(path: str) -> bool:
    return _matches(path, PUBLIC_PATHS)


def is_it_only_path(path: str) -> bool:
    return _matches(path, IT_ONLY_PATHS)


def is_api_path(path: str) -> bool:
    return path == '/api' or path.startswith('/api/')


class RequestGuardMiddleware(BaseHTTPMiddleware):
    """
    Rejects unauthenticated access to everything outside the public allowlist.

    API requests get a JSON 401/403; page requests are redirected to the login
    page (with the requested path as callbackUrl) or back to the dashboard.
    Sessions are sliding: a token older than the update age is re-issued.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if request.method == "OPTIONS" or is_public_path(path):
            return await call_next(request)

        resolved = resolve_session(request)
        if resolved is None:
            if is_api_path(path):
                return JSONResponse({"error": "Unauthorized"}, status_code=401)
            query = urlencode({"callbackUrl": path})
            return RedirectResponse(f"{LOGIN_PAGE}?{query}", status_code=307)

        principal, issued_at = resolved
        if is_it_only_path(path) and not principal.is_it:
            logger.info("it_only_path_denied", path=path, user_id=principal.id)
            if is_api_path(path):
                return JSONResponse({"error": "Forbidden"}, status_code=403)
            return RedirectResponse(DASHBOARD_ROOT, status_code=307)

        request.state.principal = principal
        response = await call_next(request)

        if AuthService.needs_refresh(issued_at):
            set_session_cookie(response, AuthService.create_session_token(principal))
        return response
