"""
Pytest Configuration and Shared Fixtures.

Provides fixture modules, backend users, settings and a fresh request cache
for the admin panel tests.
"""

from types import SimpleNamespace
from typing import Any, Callable, Optional

import pytest

from adminpanel.abstract_module import AbstractModule, AbstractSubModule
from adminpanel.data_storage import ModuleData
from adminpanel.interface import (
    IConfigurable,
    IContentProvider,
    IDataProvider,
    IModuleSettingsProvider,
    IOnSubmitActor,
    IRequestEnricher,
    IShortInfoProvider,
    ISubmoduleProvider,
)


# =============================================================================
# Fixture Modules
# =============================================================================


class MainFixtureModule(AbstractModule):
    """Plain main module without capabilities."""

    def get_identifier(self) -> str:
        return "main"

    def get_label(self) -> str:
        return "Main"


class OtherMainFixtureModule(AbstractModule):
    def get_identifier(self) -> str:
        return "other"

    def get_label(self) -> str:
        return "Other"


class DisabledFixtureModule(AbstractModule):
    """Main module that is never enabled."""

    def get_identifier(self) -> str:
        return "disabled"

    def get_label(self) -> str:
        return "Disabled"

    def is_enabled(self) -> bool:
        return False


class SubFixtureModule(AbstractSubModule):
    def get_identifier(self) -> str:
        return "sub"

    def get_label(self) -> str:
        return "Sub"


class OtherSubFixtureModule(AbstractSubModule):
    def get_identifier(self) -> str:
        return "other_sub"

    def get_label(self) -> str:
        return "Other sub"


class NestedFixtureModule(AbstractSubModule, ISubmoduleProvider):
    """Submodule that owns submodules of its own."""

    def __init__(self, backend_user=None) -> None:
        super().__init__(backend_user)
        self._sub_modules = []

    def get_identifier(self) -> str:
        return "nested"

    def get_label(self) -> str:
        return "Nested"

    def set_sub_modules(self, sub_modules) -> None:
        self._sub_modules = list(sub_modules)

    def get_sub_modules(self):
        return list(self._sub_modules)


class EnricherFixtureModule(AbstractModule, IRequestEnricher):
    """Appends its identifier to the ``enriched_by`` request attribute."""

    def get_identifier(self) -> str:
        return "enricher"

    def get_label(self) -> str:
        return "Enricher"

    def enrich(self, request):
        return request.with_attribute(
            "enriched_by", list(request.get_attribute("enriched_by", [])) + [self.get_identifier()]
        )


class SubEnricherFixtureModule(AbstractSubModule, IRequestEnricher):
    """Submodule enricher; not configurable, so it always acts."""

    def get_identifier(self) -> str:
        return "sub_enricher"

    def get_label(self) -> str:
        return "Sub enricher"

    def enrich(self, request):
        return request.with_attribute(
            "enriched_by", list(request.get_attribute("enriched_by", [])) + [self.get_identifier()]
        )


class DisabledSubEnricherFixtureModule(AbstractSubModule, IConfigurable, IRequestEnricher):
    """Configurable submodule enricher that is switched off."""

    def get_identifier(self) -> str:
        return "disabled_sub_enricher"

    def get_label(self) -> str:
        return "Disabled sub enricher"

    def is_enabled(self) -> bool:
        return False

    def enrich(self, request):
        return request.with_attribute("enriched_by", ["should not run"])


class FailingEnricherFixtureModule(AbstractModule, IRequestEnricher):
    def get_identifier(self) -> str:
        return "failing"

    def get_label(self) -> str:
        return "Failing"

    def enrich(self, request):
        raise RuntimeError("enrich failed")


class DataProviderFixtureModule(AbstractModule, IDataProvider, IContentProvider):
    """Captures the request path and renders it back."""

    def get_identifier(self) -> str:
        return "data"

    def get_label(self) -> str:
        return "Data"

    def get_data_to_store(self, request):
        return ModuleData(path=request.path)

    def get_content(self, data):
        return f"<p>path={data.get('path', 'none')}</p>"


class SubDataProviderFixtureModule(AbstractSubModule, IDataProvider, IContentProvider):
    def get_identifier(self) -> str:
        return "sub_data"

    def get_label(self) -> str:
        return "Sub data"

    def get_data_to_store(self, request):
        return ModuleData(method=request.method)

    def get_content(self, data):
        return f"<p>method={data.get('method', 'none')}</p>"


class ParentFixtureModule(AbstractModule, IShortInfoProvider):
    """Display parent: short info reports the captured sub data."""

    def __init__(self, backend_user=None) -> None:
        super().__init__(backend_user)
        self.module_data = None

    def get_identifier(self) -> str:
        return "parent"

    def get_label(self) -> str:
        return "Parent"

    def set_module_data(self, data) -> None:
        self.module_data = data

    def get_short_info(self) -> str:
        if self.module_data is None:
            return ""
        return f"method {self.module_data.get_module_data('sub_data').get('method', '-')}"


class SubmitRecorderFixtureModule(AbstractModule, IOnSubmitActor):
    """Records every submitted configuration."""

    submissions: list = []

    def get_identifier(self) -> str:
        return "recorder"

    def get_label(self) -> str:
        return "Recorder"

    def on_submit(self, configuration, request) -> None:
        SubmitRecorderFixtureModule.submissions.append(dict(configuration))


class SettingsFixtureModule(AbstractModule, IModuleSettingsProvider):
    """Main module with its own settings form."""

    def get_identifier(self) -> str:
        return "settings"

    def get_label(self) -> str:
        return "Settings"

    def get_settings(self) -> str:
        return '<input type="text" name="settings_mode" />'

    def show_form_submit_button(self) -> bool:
        return True


class NotAModule:
    """Class that does not implement the module interface."""


@pytest.fixture
def fixture_modules() -> SimpleNamespace:
    """Module classes for building configurations."""
    SubmitRecorderFixtureModule.submissions = []
    return SimpleNamespace(
        Main=MainFixtureModule,
        OtherMain=OtherMainFixtureModule,
        Disabled=DisabledFixtureModule,
        Sub=SubFixtureModule,
        OtherSub=OtherSubFixtureModule,
        Nested=NestedFixtureModule,
        Enricher=EnricherFixtureModule,
        SubEnricher=SubEnricherFixtureModule,
        DisabledSubEnricher=DisabledSubEnricherFixtureModule,
        FailingEnricher=FailingEnricherFixtureModule,
        DataProvider=DataProviderFixtureModule,
        SubDataProvider=SubDataProviderFixtureModule,
        Parent=ParentFixtureModule,
        SubmitRecorder=SubmitRecorderFixtureModule,
        Settings=SettingsFixtureModule,
        NotAModule=NotAModule,
    )


# =============================================================================
# User, Settings and Cache Fixtures
# =============================================================================


@pytest.fixture
def backend_user_factory() -> Callable[..., Any]:
    """
    Factory for backend users.

    By default all modules are enabled and the panel is open.
    """
    from adminpanel.user import AdminPanelUserConfig, BackendUser, UserSettings

    def _create(
        uid: int = 1,
        enable: Optional[dict] = None,
        hide: bool = False,
        override: Optional[dict] = None,
        display_top: bool = True,
        admin_config: Optional[dict] = None,
    ) -> BackendUser:
        return BackendUser(
            uid=uid,
            username=f"user{uid}",
            language="en",
            ts_config=AdminPanelUserConfig(
                enable={"all": True} if enable is None else enable,
                hide=hide,
                override=override or {},
            ),
            uc=UserSettings(
                admin_panel={"display_top": display_top},
                admin_config=admin_config or {},
            ),
        )

    return _create


@pytest.fixture
def backend_user(backend_user_factory):
    return backend_user_factory()


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    from adminpanel.config import AdminPanelSettings

    return AdminPanelSettings(_env_file=None)


@pytest.fixture
def request_cache():
    from adminpanel.cache import RequestCache

    return RequestCache(default_lifetime=600)


@pytest.fixture
def controller_factory(settings, request_cache):
    """Factory for controllers over a given module configuration."""
    from adminpanel.controller import MainController
    from adminpanel.loader import ModuleLoader

    def _create(configuration: dict, cache=None):
        return MainController(
            loader=ModuleLoader(),
            cache=cache if cache is not None else request_cache,
            settings=settings,
            module_configuration=configuration,
        )

    return _create


@pytest.fixture(autouse=True)
def reset_admin_panel_providers():
    """Reset process-wide singletons around each test."""
    from adminpanel.providers import reset_providers

    reset_providers()
    yield
    reset_providers()
