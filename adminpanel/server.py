"""
FastAPI Application Factory.

Creates the admin panel host application or installs the panel into an
existing one: middleware, ajax routes and static assets.
"""

from pathlib import Path
from typing import Any, Mapping, Optional
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from adminpanel.api import create_router
from adminpanel.config import AdminPanelSettings, get_admin_panel_settings
from adminpanel.controller import MainController
from adminpanel.middleware import AdminPanelMiddleware, UserResolver
from adminpanel.providers import get_main_controller
from adminpanel.user import InMemoryUserRepository, UserRepository

_logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def install_admin_panel(
    app: FastAPI,
    user_resolver: UserResolver,
    settings: Optional[AdminPanelSettings] = None,
    controller: Optional[MainController] = None,
    user_repository: Optional[UserRepository] = None,
) -> MainController:
    """
    Install the admin panel into ``app``.

    Args:
        app: Host FastAPI application.
        user_resolver: Callable returning the backend user of a request (or None).
        settings: Panel settings (default: environment).
        controller: Main controller (default: process-wide singleton).
        user_repository: Persists user settings changed through the ajax routes.

    Returns:
        The controller driving the panel.
    """
    settings = settings or get_admin_panel_settings()
    controller = controller or get_main_controller(settings)

    # Store references in app state for access in route handlers
    app.state.admin_panel_controller = controller
    app.state.admin_panel_user_resolver = user_resolver
    app.state.admin_panel_user_repository = user_repository or InMemoryUserRepository()

    app.add_middleware(
        AdminPanelMiddleware,
        controller=controller,
        settings=settings,
        user_resolver=user_resolver,
    )
    app.include_router(create_router(settings.route_prefix))

    if STATIC_DIR.exists():
        app.mount(settings.static_url, StaticFiles(directory=str(STATIC_DIR)), name="adminpanel-static")

    _logger.info(f"Admin panel installed (routes under {settings.route_prefix})")
    return controller


def create_app(
    user_resolver: UserResolver,
    settings: Optional[AdminPanelSettings] = None,
    module_configuration: Optional[Mapping[str, Any]] = None,
    user_repository: Optional[UserRepository] = None,
    title: str = "Admin Panel",
    version: str = "1.0.0",
) -> FastAPI:
    """
    Create a FastAPI application with the admin panel installed.

    Args:
        user_resolver: Callable returning the backend user of a request (or None).
        settings: Panel settings (default: environment).
        module_configuration: Module configuration (default: shipped modules).
            Only used when the process-wide controller is created.
        user_repository: Persists user settings changed through the ajax routes.
        title: API title for OpenAPI documentation.
        version: API version string.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_admin_panel_settings()
    app = FastAPI(title=title, version=version)

    controller = get_main_controller(settings, module_configuration)
    install_admin_panel(
        app,
        user_resolver,
        settings=settings,
        controller=controller,
        user_repository=user_repository,
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "Admin Panel"}

    return app
