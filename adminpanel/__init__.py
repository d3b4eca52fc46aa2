"""Admin panel - front-end admin overlay for FastAPI/Starlette applications."""
from adminpanel.abstract_module import AbstractModule, AbstractSubModule
from adminpanel.cache import RequestCache
from adminpanel.config import DEFAULT_MODULE_CONFIGURATION, AdminPanelSettings, get_admin_panel_settings
from adminpanel.context import SimulationContext, get_exec_time, get_simulation, simulation_scope
from adminpanel.controller import MainController
from adminpanel.data_storage import ModuleData, ModuleDataStorageCollection
from adminpanel.logging_config import setup_logging
from adminpanel.loader import ModuleKind, ModuleLoader
from adminpanel.ordering import DependencyOrderingService
from adminpanel.request import PanelRequest
from adminpanel.user import BackendUser, InMemoryUserRepository, UserRepository

# Module API
from adminpanel.interface import (
    Capability,
    IConfigurable,
    IContentProvider,
    IDataProvider,
    IMainModule,
    IModuleSettingsProvider,
    IOnSubmitActor,
    IPageSettingsProvider,
    IPanelModule,
    IRequestEnricher,
    IResourceProvider,
    IShortInfoProvider,
    ISubModule,
    ISubmoduleProvider,
    capabilities_of,
    has_capability,
)

# Errors
from adminpanel.exceptions import (
    AdminPanelError,
    DependencyCycleError,
    InvalidConfigurationError,
    MissingConfigurationError,
)

# Application wiring
from adminpanel.middleware import AdminPanelMiddleware
from adminpanel.providers import get_main_controller, get_request_cache, reset_providers
from adminpanel.server import create_app, install_admin_panel

__all__ = [
    # Kernel
    "MainController", "ModuleLoader", "ModuleKind", "DependencyOrderingService",
    "RequestCache", "ModuleData", "ModuleDataStorageCollection", "PanelRequest",
    "AdminPanelSettings", "get_admin_panel_settings", "DEFAULT_MODULE_CONFIGURATION",
    "SimulationContext", "get_simulation", "get_exec_time", "simulation_scope",
    "BackendUser", "UserRepository", "InMemoryUserRepository",
    "setup_logging",
    # Module API
    "AbstractModule", "AbstractSubModule",
    "IPanelModule", "IMainModule", "ISubModule", "IConfigurable",
    "IRequestEnricher", "IDataProvider", "IPageSettingsProvider", "IModuleSettingsProvider",
    "IShortInfoProvider", "IResourceProvider", "ISubmoduleProvider", "IContentProvider",
    "IOnSubmitActor", "Capability", "capabilities_of", "has_capability",
    # Errors
    "AdminPanelError", "InvalidConfigurationError", "MissingConfigurationError",
    "DependencyCycleError",
    # Application wiring
    "AdminPanelMiddleware", "create_app", "install_admin_panel",
    "get_main_controller", "get_request_cache", "reset_providers",
]
