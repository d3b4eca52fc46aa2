"""
Admin Panel - Demo Entry Point.

A small host application with one HTML page and the admin panel installed.
Send ``X-Backend-User: 1`` to be treated as the demo backend user.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000 --reload

Or run directly:
    python main.py
"""

from typing import Optional
import logging

import uvicorn
from fastapi import Request
from fastapi.responses import HTMLResponse

from adminpanel.config import get_admin_panel_settings
from adminpanel.context import get_exec_time
from adminpanel.logging_config import setup_logging
from adminpanel.server import create_app
from adminpanel.user import AdminPanelUserConfig, BackendUser, InMemoryUserRepository, UserSettings

DEMO_PAGE = """<!DOCTYPE html>
<html>
<head><title>Demo page {page_id}</title></head>
<body>
<h1>Demo page {page_id}</h1>
<p>Rendered at {exec_time}.</p>
</body>
</html>
"""


def create_user_repository() -> InMemoryUserRepository:
    """Repository holding the demo backend user with every module enabled."""
    repository = InMemoryUserRepository()
    repository.save(
        BackendUser(
            uid=1,
            username="admin",
            language="en",
            ts_config=AdminPanelUserConfig(enable={"all": True}),
            uc=UserSettings(admin_panel={"display_top": True}),
        )
    )
    return repository


# -----------------------------------------------------------------------------
# Module-level Application Instance
# -----------------------------------------------------------------------------

settings = get_admin_panel_settings()

# Setup logging first
setup_logging(settings.log_level, settings.log_dir)

_repository = create_user_repository()


def resolve_backend_user(request: Request) -> Optional[BackendUser]:
    """Look up the backend user named by the ``X-Backend-User`` header."""
    uid = request.headers.get("x-backend-user", "")
    if not uid.isdigit():
        return None
    return _repository.get(int(uid))


app = create_app(resolve_backend_user, settings=settings, user_repository=_repository)


@app.get("/", response_class=HTMLResponse)
@app.get("/page/{page_id}", response_class=HTMLResponse)
async def demo_page(request: Request, page_id: int = 1) -> str:
    """Frontend page the panel is rendered into."""
    request.state.page_id = page_id
    return DEMO_PAGE.format(page_id=page_id, exec_time=get_exec_time().isoformat())


# -----------------------------------------------------------------------------
# Direct Execution
# -----------------------------------------------------------------------------


def main() -> None:
    """Run the application directly with uvicorn."""
    uvicorn_config = {
        "host": settings.host,
        "port": settings.port,
        "reload": settings.debug,
        "log_level": "warning",  # Suppress uvicorn info logs
        "access_log": False,     # Disable uvicorn access logs
    }

    # If reload is enabled, exclude logs and cache directories
    if settings.debug:
        uvicorn_config["reload_excludes"] = [
            "logs/*",
            "**/__pycache__/*",
            "**/*.pyc",
            ".venv/*",
            "*.log",
        ]

    logging.getLogger(__name__).info(f"Starting admin panel demo on {settings.host}:{settings.port}")
    uvicorn.run("main:app", **uvicorn_config)


if __name__ == "__main__":
    main()
