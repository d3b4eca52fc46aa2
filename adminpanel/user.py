"""
Backend User Schemas.

Pydantic models describing the parts of the host's backend user that the
admin panel reads. The host resolves the user (session, auth) and hands an
instance to the middleware; the panel only performs lookups on it.
"""

from typing import Any, Optional, Protocol
import threading

from pydantic import BaseModel, ConfigDict, Field


def as_bool(value: Any) -> bool:
    """Interpret configuration values the way the user configuration is written ("0" is off)."""
    if isinstance(value, str):
        return value.strip() not in ("", "0", "false", "False")
    return bool(value)


class AdminPanelUserConfig(BaseModel):
    """
    Per-user admin panel configuration (user TSconfig ``admPanel``).

    - ``enable``: ``{"all": True}`` or ``{"<identifier>": True}``
    - ``hide``: keep the panel functional but do not render it
    - ``override``: ``{"<identifier>": True}`` forces a module on;
      ``{"<identifier>": {"<option>": value}}`` pins an option value
    """

    model_config = ConfigDict(extra="ignore")

    enable: dict[str, Any] = Field(default_factory=dict)
    hide: bool = False
    override: dict[str, Any] = Field(default_factory=dict)


class UserSettings(BaseModel):
    """
    Per-user session settings (the user's ``uc`` array).

    - ``admin_panel``: panel state, e.g. ``{"display_top": True}``
    - ``admin_config``: module state, e.g. ``{"display_preview": True,
      "preview_simulate_date": "2024-01-01"}``
    """

    model_config = ConfigDict(extra="ignore")

    admin_panel: dict[str, Any] = Field(default_factory=dict)
    admin_config: dict[str, Any] = Field(default_factory=dict)


class BackendUser(BaseModel):
    """Backend user as seen by the admin panel."""

    uid: int = Field(..., description="Backend user id")
    username: str = Field(default="", description="Login name")
    language: Optional[str] = Field(default=None, description="Preferred UI language")
    ts_config: AdminPanelUserConfig = Field(default_factory=AdminPanelUserConfig)
    uc: UserSettings = Field(default_factory=UserSettings)

    def get_module_option(self, identifier: str, option: str) -> str:
        """
        Return a module option, preferring a pinned override.

        Lookup order: ``override[identifier][option]``, then
        ``uc.admin_config["<identifier>_<option>"]``, then "".
        """
        pinned = self.ts_config.override.get(identifier)
        if option and isinstance(pinned, dict) and option in pinned:
            value = pinned[option]
        else:
            value = self.uc.admin_config.get(f"{identifier}_{option}", "")
        if isinstance(value, bool):
            return "1" if value else ""
        return str(value)


class UserRepository(Protocol):
    """Protocol for persisting user session settings - implemented by the host."""

    def save(self, user: BackendUser) -> None:
        """Persist ``user.uc``."""
        ...


class InMemoryUserRepository:
    """Keeps users in a dict; used by the demo application and tests."""

    def __init__(self, users: Optional[list[BackendUser]] = None) -> None:
        self._users: dict[int, BackendUser] = {user.uid: user for user in users or []}
        self._lock = threading.Lock()

    def get(self, uid: int) -> Optional[BackendUser]:
        with self._lock:
            user = self._users.get(uid)
        return user.model_copy(deep=True) if user else None

    def save(self, user: BackendUser) -> None:
        with self._lock:
            self._users[user.uid] = user.model_copy(deep=True)
