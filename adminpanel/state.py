"""
Admin panel state predicates.

Whether the panel is active, hidden or open is derived from the backend user
alone. Each predicate is independent of the others.
"""

from typing import TYPE_CHECKING, Optional

from adminpanel.request import ATTR_FRONTEND_CONFIG
from adminpanel.user import as_bool

if TYPE_CHECKING:
    from adminpanel.config import AdminPanelSettings
    from adminpanel.request import PanelRequest
    from adminpanel.user import BackendUser


def is_activated_for_user(user: Optional["BackendUser"]) -> bool:
    """True if a backend user exists and at least one module (or 'all') is enabled."""
    if user is None:
        return False
    return any(as_bool(value) for value in user.ts_config.enable.values())


def is_hidden_for_user(user: Optional["BackendUser"]) -> bool:
    """True if the user configuration asks to hide the panel."""
    if user is None:
        return False
    return bool(user.ts_config.hide)


def is_open(user: Optional["BackendUser"]) -> bool:
    """True if the user has expanded the panel."""
    if user is None:
        return False
    return as_bool(user.uc.admin_panel.get("display_top", False))


def is_activated_in_frontend(request: "PanelRequest", settings: "AdminPanelSettings") -> bool:
    """
    True if the site allows rendering the panel for this request.

    A host may attach ``{"admPanel": bool}`` as frontend configuration of the
    request; otherwise the global setting applies.
    """
    frontend_config = request.get_attribute(ATTR_FRONTEND_CONFIG) or {}
    if "admPanel" in frontend_config:
        return as_bool(frontend_config["admPanel"])
    return settings.frontend_enabled
