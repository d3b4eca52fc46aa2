"""
Admin Panel API Router.

Ajax endpoints used by the panel's JavaScript:
- POST {prefix}/toggle  open/close the panel for the current user
- POST {prefix}/save    store the settings form and notify submit actors
"""

from typing import Any, Sequence
import inspect
import logging
import uuid

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from adminpanel.controller import MainController
from adminpanel.exceptions import AdminPanelError
from adminpanel.interface import IOnSubmitActor, IPanelModule, ISubmoduleProvider
from adminpanel.request import PanelRequest
from adminpanel.schemas import ErrorResponse, SaveSettingsRequest, SaveSettingsResponse, ToggleResponse
from adminpanel.user import BackendUser, UserRepository

logger = logging.getLogger(__name__)


async def _require_user(request: Request) -> BackendUser:
    resolver = request.app.state.admin_panel_user_resolver
    user = resolver(request)
    if inspect.isawaitable(user):
        user = await user
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Backend user required",
        )
    return user


def _get_repository(request: Request) -> UserRepository:
    return request.app.state.admin_panel_user_repository


def _trigger_on_submit_actors(
    modules: Sequence[IPanelModule],
    configuration: dict[str, Any],
    request: PanelRequest,
) -> None:
    for module in modules:
        if isinstance(module, IOnSubmitActor):
            module.on_submit(configuration, request)
        if isinstance(module, ISubmoduleProvider):
            _trigger_on_submit_actors(module.get_sub_modules(), configuration, request)


def create_router(prefix: str = "/adminpanel") -> APIRouter:
    """Create the ajax router mounted under ``prefix``."""
    router = APIRouter(prefix=prefix.rstrip("/"), tags=["Admin Panel"])

    @router.post("/toggle", response_model=ToggleResponse)
    async def toggle_active_state(request: Request) -> ToggleResponse:
        """Flip the open state of the panel for the current backend user."""
        user = await _require_user(request)
        is_open = not bool(user.uc.admin_panel.get("display_top", False))
        user.uc.admin_panel["display_top"] = is_open
        _get_repository(request).save(user)
        logger.info(f"Admin panel {'opened' if is_open else 'closed'} by user {user.uid}")
        return ToggleResponse(success=True, open=is_open)

    @router.post(
        "/save",
        response_model=SaveSettingsResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def save_settings(request: Request, payload: SaveSettingsRequest) -> Any:
        """Merge submitted module options into the user settings and notify modules."""
        user = await _require_user(request)
        controller: MainController = request.app.state.admin_panel_controller

        configuration = {key: value for key, value in payload.settings.items() if key != "action"}
        user.uc.admin_config.update(configuration)
        _get_repository(request).save(user)

        panel_request = PanelRequest.from_starlette(request, uuid.uuid4().hex, user)
        try:
            modules = controller.load_modules(panel_request)
        except AdminPanelError as e:
            logger.error(f"Cannot notify admin panel modules (code {e.code}): {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=ErrorResponse(
                    error=type(e).__name__,
                    message=str(e),
                    code=e.code,
                ).model_dump(),
            )

        _trigger_on_submit_actors(modules, configuration, panel_request)
        return SaveSettingsResponse(success=True)

    return router
