"""Redirect GET requests with a trailing slash to the canonical path."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse


class TrailingSlashRedirectMiddleware(BaseHTTPMiddleware):
    """``GET /api/notes/foo/`` answers 301 to ``/api/notes/foo``.

    Paths in ``exempt`` are served as they are.
    """

    def __init__(self, app, exempt: tuple = ()):
        super().__init__(app)
        self.exempt = set(exempt)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if request.method == "GET" and len(path) > 1 and path.endswith("/") and path not in self.exempt:
            target = request.url.replace(path=path.rstrip("/") or "/")
            return RedirectResponse(url=str(target), status_code=301)
        return await call_next(request)
