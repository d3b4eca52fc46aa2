"""
Cache Module - control caching of the page being previewed.

Options:
    no_cache      render the page without caching
"""

from adminpanel.abstract_module import AbstractModule
from adminpanel.interface import IPageSettingsProvider, IRequestEnricher
from adminpanel.request import ATTR_NO_CACHE, PanelRequest
from adminpanel.user import as_bool


class CacheModule(AbstractModule, IRequestEnricher, IPageSettingsProvider):
    """Admin panel cache module."""

    icon_identifier = "apps-toolbar-menu-cache"

    def get_identifier(self) -> str:
        return "cache"

    def get_label(self) -> str:
        return "Cache"

    def enrich(self, request: PanelRequest) -> PanelRequest:
        if as_bool(self.get_configuration_option("no_cache")):
            request = request.with_attribute(ATTR_NO_CACHE, True)
        return request

    def get_page_settings(self) -> str:
        checked = " checked" if as_bool(self.get_configuration_option("no_cache")) else ""
        return f'<label><input type="checkbox" name="cache_no_cache" value="1"{checked} /> No caching</label>'
