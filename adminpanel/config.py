"""
Admin Panel Configuration.

Manages environment variables of the admin panel.
Uses prefix ADMIN_PANEL_ to avoid conflicts with the host application.
"""

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdminPanelSettings(BaseSettings):
    """
    Admin panel settings loaded from environment variables (and .env).

    All variables use the ADMIN_PANEL_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_PANEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Master switch: when off the middleware passes requests through untouched
    enabled: bool = True

    # Render the panel into frontend pages unless a request says otherwise
    frontend_enabled: bool = True

    # Request cache
    request_cache_lifetime: Annotated[
        int,
        Field(default=600, ge=1, description="Lifetime of captured request data in seconds"),
    ] = 600

    # URLs
    static_url: str = Field(default="/_adminpanel/static", description="Public URL of panel assets")
    backend_url: str = Field(default="/typo3", description="Base URL of the backend")
    route_prefix: str = Field(default="/adminpanel", description="Prefix of the panel ajax routes")

    # Demo server (main.py)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    log_dir: str = Field(default="logs")


@lru_cache
def get_admin_panel_settings() -> AdminPanelSettings:
    """
    Get cached admin panel settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        AdminPanelSettings: Settings instance.
    """
    return AdminPanelSettings()


# Modules shipped with the panel. Hosts may pass their own mapping of the same
# shape to create_app() / MainController.
DEFAULT_MODULE_CONFIGURATION: dict[str, dict[str, Any]] = {
    "preview": {
        "module": "panel_modules.preview:PreviewModule",
    },
    "cache": {
        "module": "panel_modules.cache:CacheModule",
        "after": ["preview"],
    },
    "info": {
        "module": "panel_modules.info:InfoModule",
        "after": ["cache"],
        "submodules": {
            "general": {
                "module": "panel_modules.info:GeneralInformation",
            },
            "request": {
                "module": "panel_modules.info:RequestInformation",
                "after": ["general"],
            },
        },
    },
}
