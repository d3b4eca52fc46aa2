"""
Admin Panel Middleware.

Runs the panel lifecycle around every request of the host application:

1. Resolve the backend user and initialize the modules (request enrichment)
2. Call the downstream application inside the request's simulation scope
3. Capture module data into the request cache
4. Splice the rendered panel in front of ``</body>`` of HTML responses

A broken module configuration disables the panel for the request but never
fails the request itself.
"""

from typing import Awaitable, Callable, Optional, Union
import inspect
import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from adminpanel.config import AdminPanelSettings
from adminpanel.context import simulation_scope
from adminpanel.controller import MainController
from adminpanel.exceptions import AdminPanelError
from adminpanel.request import (
    ATTR_FRONTEND_CONFIG,
    ATTR_NO_CACHE,
    ATTR_PAGE_ID,
    ATTR_SIMULATION,
    PanelRequest,
)
from adminpanel.state import is_activated_for_user, is_activated_in_frontend, is_hidden_for_user
from adminpanel.user import BackendUser

logger = logging.getLogger(__name__)

# Attributes describing the rendered response, available to data providers
ATTR_PARSE_TIME = "adminpanel.parse_time_ms"
ATTR_DOCUMENT_SIZE = "adminpanel.document_size"

UserResolver = Callable[[Request], Union[Optional[BackendUser], Awaitable[Optional[BackendUser]]]]

_CHARSET_PATTERN = re.compile(r"charset=([\w\-]+)", re.IGNORECASE)


def inject_before_body_end(content: str, markup: str) -> str:
    """Insert ``markup`` before the last ``</body>`` (case-insensitive); unchanged if absent."""
    position = content.lower().rfind("</body>")
    if position == -1:
        return content
    return content[:position] + markup + content[position:]


class AdminPanelMiddleware(BaseHTTPMiddleware):
    """
    Request lifecycle middleware of the admin panel.

    Features:
    - One request id per request, correlating capture and render
    - Fail-soft on invalid module configuration
    - Simulated time/visibility scoped to the downstream call
    - Content-Length fixed after injection
    """

    def __init__(
        self,
        app,
        controller: MainController,
        settings: AdminPanelSettings,
        user_resolver: UserResolver,
    ):
        super().__init__(app)
        self.controller = controller
        self.settings = settings
        self._user_resolver = user_resolver

    async def _resolve_user(self, request: Request) -> Optional[BackendUser]:
        user = self._user_resolver(request)
        if inspect.isawaitable(user):
            user = await user
        return user

    def _is_panel_route(self, path: str) -> bool:
        prefixes = (self.settings.route_prefix, self.settings.static_url)
        return any(path.startswith(prefix.rstrip("/") + "/") for prefix in prefixes)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through the admin panel lifecycle."""
        if not self.settings.enabled or self._is_panel_route(request.url.path):
            return await call_next(request)

        user = await self._resolve_user(request)
        panel_request = PanelRequest.from_starlette(request, uuid.uuid4().hex, user)

        try:
            panel_request = self.controller.initialize(panel_request)
        except AdminPanelError as e:
            logger.error(f"Admin panel unavailable for this request (code {e.code}): {e}")
            return await call_next(request)

        request.state.admin_panel = panel_request
        no_cache = bool(panel_request.get_attribute(ATTR_NO_CACHE, False))
        request.state.no_cache = no_cache

        started = time.perf_counter()
        with simulation_scope(panel_request.get_attribute(ATTR_SIMULATION)):
            response = await call_next(request)
        panel_request = panel_request.with_attribute(
            ATTR_PARSE_TIME, round((time.perf_counter() - started) * 1000, 2)
        )
        panel_request = self._refresh_page_context(request, panel_request)

        render = (
            is_activated_for_user(user)
            and is_activated_in_frontend(panel_request, self.settings)
            and not is_hidden_for_user(user)
            and response.headers.get("content-type", "").startswith("text/html")
        )

        if not render:
            self.controller.store_data(panel_request)
            if no_cache:
                response.headers["Cache-Control"] = "no-store"
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        charset = self._get_charset(response)
        content = body.decode(charset, errors="replace")
        panel_request = panel_request.with_attribute(ATTR_DOCUMENT_SIZE, len(content))

        self.controller.store_data(panel_request)
        markup = self.controller.render(panel_request, nonce=getattr(request.state, "csp_nonce", None))
        new_body = inject_before_body_end(content, markup).encode(charset, errors="replace")

        new_response = Response(
            content=new_body,
            status_code=response.status_code,
            background=response.background,
        )
        new_response.raw_headers = [
            (name, value) for name, value in response.raw_headers if name.lower() != b"content-length"
        ] + [(b"content-length", str(len(new_body)).encode("latin-1"))]
        if no_cache:
            new_response.headers["Cache-Control"] = "no-store"
        return new_response

    @staticmethod
    def _refresh_page_context(request: Request, panel_request: PanelRequest) -> PanelRequest:
        """Pick up page context the downstream handler attached to ``request.state``."""
        page_id = getattr(request.state, "page_id", None)
        if page_id is not None:
            panel_request = panel_request.with_attribute(ATTR_PAGE_ID, page_id)
        frontend_config = getattr(request.state, "frontend_config", None)
        if frontend_config is not None:
            panel_request = panel_request.with_attribute(ATTR_FRONTEND_CONFIG, frontend_config)
        return panel_request

    @staticmethod
    def _get_charset(response: Response) -> str:
        match = _CHARSET_PATTERN.search(response.headers.get("content-type", ""))
        return match.group(1) if match else "utf-8"
