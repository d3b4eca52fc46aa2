"""
Service Providers - process-wide admin panel components.

The request cache and the main controller are long-lived and shared by all
requests; everything request-specific is passed through their methods.
Each getter lazily creates its singleton; ``reset_providers()`` drops them
(useful for testing).
"""

from typing import Any, Mapping, Optional
import logging

from adminpanel.cache import RequestCache
from adminpanel.config import DEFAULT_MODULE_CONFIGURATION, AdminPanelSettings, get_admin_panel_settings
from adminpanel.controller import MainController
from adminpanel.loader import ModuleLoader

logger = logging.getLogger(__name__)


# Singleton instances
_request_cache: Optional[RequestCache] = None
_main_controller: Optional[MainController] = None


def get_request_cache(settings: Optional[AdminPanelSettings] = None) -> RequestCache:
    """
    Get the singleton RequestCache instance.

    Returns:
        RequestCache: The request cache
    """
    global _request_cache
    if _request_cache is None:
        settings = settings or get_admin_panel_settings()
        _request_cache = RequestCache(default_lifetime=settings.request_cache_lifetime)
    return _request_cache


def get_main_controller(
    settings: Optional[AdminPanelSettings] = None,
    module_configuration: Optional[Mapping[str, Any]] = None,
) -> MainController:
    """
    Get the singleton MainController instance.

    Arguments are only used when the controller is created.

    Returns:
        MainController: The main controller
    """
    global _main_controller
    if _main_controller is None:
        settings = settings or get_admin_panel_settings()
        _main_controller = MainController(
            loader=ModuleLoader(),
            cache=get_request_cache(settings),
            settings=settings,
            module_configuration=(
                DEFAULT_MODULE_CONFIGURATION if module_configuration is None else module_configuration
            ),
        )
        logger.debug("Admin panel main controller created")
    return _main_controller


def reset_providers() -> None:
    """Drop all singletons and the cached settings."""
    global _request_cache, _main_controller
    _request_cache = None
    _main_controller = None
    get_admin_panel_settings.cache_clear()
