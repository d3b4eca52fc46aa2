"""
Main controller of the admin panel.

The controller is shared by all requests (one instance per application) and
is driven by the middleware in three phases:

    1. initialize(request) -> request   before the page is rendered
    2. store_data(request)              after the page is rendered
    3. render(request) -> str           while the response is finalized

It keeps no per-request state of its own. The module tree built in phase 1
travels inside the returned PanelRequest (attribute ``adminpanel.modules``);
data captured in phase 2 goes to the request cache under the request id and
is read back in phase 3.
"""

from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlencode
import logging

from adminpanel.cache import RequestCache
from adminpanel.config import AdminPanelSettings
from adminpanel.data_storage import ModuleDataStorageCollection
from adminpanel.interface import (
    IDataProvider,
    IPageSettingsProvider,
    IPanelModule,
    IRequestEnricher,
    IShortInfoProvider,
    ISubmoduleProvider,
    is_gated_active,
)
from adminpanel.loader import ModuleKind, ModuleLoader
from adminpanel.request import ATTR_MODULES, ATTR_PAGE_ID, PanelRequest
from adminpanel.resources import ResourceUtility
from adminpanel.state import is_activated_for_user, is_open
from adminpanel.view import PanelViewModel, render_panel


class MainController:
    """
    Drives module enrichment, data capture and panel rendering.

    Collaborators are fixed at construction; all request data is passed in.
    """

    def __init__(
        self,
        loader: ModuleLoader,
        cache: RequestCache,
        settings: AdminPanelSettings,
        module_configuration: Mapping[str, Any],
        resources: Optional[ResourceUtility] = None,
    ) -> None:
        self._loader = loader
        self._cache = cache
        self._settings = settings
        self._module_configuration = module_configuration
        self._resources = resources or ResourceUtility(settings.static_url)
        self._logger = logging.getLogger(__name__)

    @property
    def cache(self) -> RequestCache:
        return self._cache

    # =========================================================================
    # Phase 1: initialize
    # =========================================================================

    def load_modules(self, request: PanelRequest) -> list[IPanelModule]:
        """Build a fresh module tree for the user of ``request``."""
        return self._loader.validate_sort_and_initialize_modules(
            self._module_configuration,
            ModuleKind.MAIN,
            backend_user=request.backend_user,
        )

    def initialize(self, request: PanelRequest) -> PanelRequest:
        """
        Load the modules and let them enrich the request.

        Raises:
            InvalidConfigurationError: If the module configuration is invalid
        """
        modules = self.load_modules(request)
        request = request.with_attribute(ATTR_MODULES, modules)
        if is_activated_for_user(request.backend_user):
            request = self._initialize_modules(request, modules)
        return request

    def _initialize_modules(self, request: PanelRequest, modules: Sequence[IPanelModule]) -> PanelRequest:
        for module in modules:
            if isinstance(module, IRequestEnricher) and is_gated_active(module):
                request = module.enrich(request)
            if isinstance(module, ISubmoduleProvider):
                request = self._initialize_modules(request, module.get_sub_modules())
        return request

    # =========================================================================
    # Phase 2: capture
    # =========================================================================

    def store_data(self, request: PanelRequest) -> None:
        """Capture module data of an open panel and cache it under the request id."""
        if not is_open(request.backend_user):
            return

        data = self._store_data_per_module(
            request,
            self.get_modules(request),
            ModuleDataStorageCollection(),
        )
        self._cache.set(request.request_id, data.to_dict())
        self._cache.collect_garbage()
        self._logger.debug(
            f"Stored admin panel data of {len(data)} module(s) for request {request.request_id}"
        )

    def _store_data_per_module(
        self,
        request: PanelRequest,
        modules: Sequence[IPanelModule],
        data: ModuleDataStorageCollection,
    ) -> ModuleDataStorageCollection:
        for module in modules:
            if isinstance(module, IDataProvider) and is_gated_active(module):
                data.add_module_data(module, module.get_data_to_store(request))
            if isinstance(module, ISubmoduleProvider):
                self._store_data_per_module(request, module.get_sub_modules(), data)
        return data

    # =========================================================================
    # Phase 3: render
    # =========================================================================

    def get_stored_data(self, request_id: str) -> ModuleDataStorageCollection:
        """Return the data captured for ``request_id``; empty if missing or expired."""
        return ModuleDataStorageCollection(self._cache.get(request_id) or {})

    def render(self, request: PanelRequest, nonce: Optional[str] = None) -> str:
        """Render the panel markup for ``request``."""
        user = request.backend_user
        panel_open = is_open(user)
        view = PanelViewModel(
            toggle_url=self.generate_route_url("toggle"),
            resources=self._resources.get_resources(nonce),
            open=panel_open,
            language_key=user.language if user else None,
            request_id=request.request_id,
        )

        if panel_open:
            modules = self.get_modules(request)
            data = self.get_stored_data(request.request_id)
            parent_modules = [
                module
                for module in modules
                if isinstance(module, ISubmoduleProvider) and isinstance(module, IShortInfoProvider)
            ]
            for parent_module in parent_modules:
                parent_module.set_module_data(data)

            view.modules = modules
            view.settings_modules = [m for m in modules if isinstance(m, IPageSettingsProvider)]
            view.parent_modules = parent_modules
            view.module_resources = self._resources.get_additional_resources_for_modules(modules, nonce)
            view.save_url = self.generate_route_url("save")
            view.data = data
            view.backend_url = self.generate_backend_page_url(request.get_attribute(ATTR_PAGE_ID))

        return render_panel(view)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def get_modules(request: PanelRequest) -> list[IPanelModule]:
        """Module tree attached to ``request`` during initialize (empty if none)."""
        return list(request.get_attribute(ATTR_MODULES) or [])

    def generate_route_url(self, route: str) -> str:
        return f"{self._settings.route_prefix.rstrip('/')}/{route}"

    def generate_backend_page_url(self, page_id: Optional[Any]) -> str:
        """Link to the page module of the backend for ``page_id``."""
        if page_id is None:
            return ""
        query = urlencode({"id": page_id})
        return f"{self._settings.backend_url.rstrip('/')}/module/web/layout?{query}"
