"""
Base classes for admin panel modules.

Provide the enablement and option lookups every shipped module needs, backed
by the backend user the loader passes in at construction time.
"""

from typing import Optional, Sequence

from adminpanel.interface import IMainModule, IPanelModule, ISubModule, ISubmoduleProvider
from adminpanel.user import BackendUser, as_bool


class ModuleBase(IPanelModule):
    """Holds the backend user for the request the module was loaded for."""

    icon_identifier: str = ""

    def __init__(self, backend_user: Optional[BackendUser] = None) -> None:
        self._backend_user = backend_user

    @property
    def backend_user(self) -> Optional[BackendUser]:
        return self._backend_user

    def get_icon_identifier(self) -> str:
        return self.icon_identifier

    def is_open(self) -> bool:
        """Uses the user's session settings to determine if the module is expanded."""
        if self._backend_user is None:
            return False
        option = f"display_{self.get_identifier()}"
        return as_bool(self._backend_user.uc.admin_config.get(option, False))

    def get_configuration_option(self, option: str) -> str:
        """Return a module option: pinned override first, then the user's session value."""
        if self._backend_user is None:
            return ""
        return self._backend_user.get_module_option(self.get_identifier(), option)


class AbstractModule(ModuleBase, IMainModule, ISubmoduleProvider):
    """
    Base class for main modules.

    A module is enabled when the user configuration enables it (or all
    modules), or when an override forces it on. Overrides allow using a
    module's behaviour without showing the panel, e.g. to always display
    hidden records.
    """

    def __init__(self, backend_user: Optional[BackendUser] = None) -> None:
        super().__init__(backend_user)
        self._sub_modules: list[IPanelModule] = []

    def is_enabled(self) -> bool:
        result = self.is_enabled_via_user_config()
        if self._backend_user is not None:
            override = self._backend_user.ts_config.override.get(self.get_identifier())
            if as_bool(override) and not isinstance(override, dict):
                result = True
        return result

    def is_enabled_via_user_config(self) -> bool:
        if self._backend_user is None:
            return False
        enable = self._backend_user.ts_config.enable
        return as_bool(enable.get("all")) or as_bool(enable.get(self.get_identifier()))

    def is_shown(self) -> bool:
        """Modules forced on by an override act without appearing in the toolbar."""
        return self.is_enabled_via_user_config()

    def set_sub_modules(self, sub_modules: Sequence[IPanelModule]) -> None:
        self._sub_modules = list(sub_modules)

    def get_sub_modules(self) -> list[IPanelModule]:
        return list(self._sub_modules)


class AbstractSubModule(ModuleBase, ISubModule):
    """Base class for submodules."""
