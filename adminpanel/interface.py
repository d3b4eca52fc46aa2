"""
Admin panel module API - base interfaces and optional capabilities.

A module is any class implementing IPanelModule. Behaviour is opted into by
additionally implementing one or more capability interfaces below; the
controller never looks at concrete module types, only at capabilities.

Kinds:
    IMainModule - a toolbar entry, enablement is checked on load
    ISubModule  - a child of a main module implementing ISubmoduleProvider
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Sequence

if TYPE_CHECKING:
    from adminpanel.data_storage import ModuleData, ModuleDataStorageCollection
    from adminpanel.request import PanelRequest


# =============================================================================
# Base Interfaces
# =============================================================================

class IPanelModule(ABC):
    """Abstract interface shared by all main modules and submodules."""

    @abstractmethod
    def get_identifier(self) -> str:
        """
        Returns the identifier of this module, for example 'preview' or 'cache'.

        Captured data is keyed by it, so siblings should not share one.
        """
        pass

    @abstractmethod
    def get_label(self) -> str:
        """Returns the human readable module label."""
        pass

    def get_icon_identifier(self) -> str:
        """Returns the icon identifier shown in the toolbar."""
        return ""


class IConfigurable(ABC):
    """Capability: module enablement can be configured per user."""

    @abstractmethod
    def is_enabled(self) -> bool:
        pass


class IMainModule(IPanelModule, IConfigurable):
    """A top-level module shown as a toolbar entry."""

    def is_shown(self) -> bool:
        """Whether the module appears in the toolbar once loaded."""
        return True

    def show_form_submit_button(self) -> bool:
        """Whether the module's own settings get a save button."""
        return False


class ISubModule(IPanelModule):
    """A child module nested under a main module."""


# =============================================================================
# Capabilities
# =============================================================================

class IRequestEnricher(ABC):
    """Capability: alters the request before the page is rendered."""

    @abstractmethod
    def enrich(self, request: "PanelRequest") -> "PanelRequest":
        """
        Returns the (possibly identical) request to continue with.

        Called once per request during initialization.
        """
        pass


class IDataProvider(ABC):
    """Capability: reports data after rendering, cached for the render phase."""

    @abstractmethod
    def get_data_to_store(self, request: "PanelRequest") -> "ModuleData":
        pass


class IPageSettingsProvider(ABC):
    """Capability: renders a settings form shown in the page settings area."""

    @abstractmethod
    def get_page_settings(self) -> str:
        pass


class IModuleSettingsProvider(ABC):
    """Capability: renders settings shown inside the module panel."""

    @abstractmethod
    def get_settings(self) -> str:
        pass


class IShortInfoProvider(ABC):
    """Capability: exposes a short status string displayed in the toolbar."""

    @abstractmethod
    def get_short_info(self) -> str:
        pass


class IResourceProvider(ABC):
    """Capability: contributes script and style files to the panel."""

    @abstractmethod
    def get_javascript_files(self) -> list[str]:
        pass

    @abstractmethod
    def get_css_files(self) -> list[str]:
        pass


class ISubmoduleProvider(ABC):
    """Capability: owns an ordered list of child modules."""

    @abstractmethod
    def set_sub_modules(self, sub_modules: Sequence[IPanelModule]) -> None:
        pass

    @abstractmethod
    def get_sub_modules(self) -> list[IPanelModule]:
        pass

    def has_submodule_settings(self) -> bool:
        """True if any submodule renders its own settings."""
        return any(
            isinstance(module, IModuleSettingsProvider) for module in self.get_sub_modules()
        )

    def set_module_data(self, data: "ModuleDataStorageCollection") -> None:
        """Receives the captured data of the request being rendered."""
        pass


class IContentProvider(ABC):
    """Capability: renders the module body from its captured data."""

    @abstractmethod
    def get_content(self, data: "ModuleData") -> str:
        pass


class IOnSubmitActor(ABC):
    """Capability: reacts when the settings form is saved."""

    @abstractmethod
    def on_submit(self, configuration: Mapping[str, Any], request: "PanelRequest") -> None:
        pass


# =============================================================================
# Capability Set
# =============================================================================

class Capability(str, Enum):
    """Enumerated capability set a module may implement."""

    CONFIGURABLE = "configurable"
    ENRICHER = "enricher"
    DATA_PROVIDER = "data_provider"
    PAGE_SETTINGS_PROVIDER = "page_settings_provider"
    MODULE_SETTINGS_PROVIDER = "module_settings_provider"
    SHORT_INFO_PROVIDER = "short_info_provider"
    RESOURCE_PROVIDER = "resource_provider"
    SUBMODULE_PROVIDER = "submodule_provider"
    CONTENT_PROVIDER = "content_provider"
    ON_SUBMIT_ACTOR = "on_submit_actor"


_CAPABILITY_INTERFACES: dict[Capability, type] = {
    Capability.CONFIGURABLE: IConfigurable,
    Capability.ENRICHER: IRequestEnricher,
    Capability.DATA_PROVIDER: IDataProvider,
    Capability.PAGE_SETTINGS_PROVIDER: IPageSettingsProvider,
    Capability.MODULE_SETTINGS_PROVIDER: IModuleSettingsProvider,
    Capability.SHORT_INFO_PROVIDER: IShortInfoProvider,
    Capability.RESOURCE_PROVIDER: IResourceProvider,
    Capability.SUBMODULE_PROVIDER: ISubmoduleProvider,
    Capability.CONTENT_PROVIDER: IContentProvider,
    Capability.ON_SUBMIT_ACTOR: IOnSubmitActor,
}


def capabilities_of(module: object) -> frozenset[Capability]:
    """Return every capability implemented by ``module`` (instance or class)."""
    cls = module if isinstance(module, type) else type(module)
    return frozenset(
        capability
        for capability, interface in _CAPABILITY_INTERFACES.items()
        if issubclass(cls, interface)
    )


def has_capability(module: object, capability: Capability) -> bool:
    return capability in capabilities_of(module)


def is_gated_active(module: object) -> bool:
    """
    Enablement gate used for enrich and capture.

    Configurable modules act only while enabled; all others always act.
    """
    if has_capability(module, Capability.CONFIGURABLE):
        return bool(module.is_enabled())
    return True
