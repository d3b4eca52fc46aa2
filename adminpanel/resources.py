"""
Resource helpers - script and style tags for the panel and its modules.

Resource locations use the ``EXT:adminpanel/Resources/Public/<path>`` notation
and are mapped onto the configured static URL.
"""

from html import escape
from typing import Iterable, Optional

from adminpanel.interface import IPanelModule, IResourceProvider, ISubmoduleProvider

EXT_PREFIX = "EXT:adminpanel/Resources/Public/"

PANEL_JAVASCRIPT = EXT_PREFIX + "JavaScript/admin-panel.js"
PANEL_CSS = EXT_PREFIX + "Css/adminpanel.css"


class ResourceUtility:
    """Builds HTML tags for panel resources."""

    def __init__(self, static_url: str = "/_adminpanel/static") -> None:
        self.static_url = static_url.rstrip("/")

    def get_public_path(self, location: str) -> str:
        """Map an ``EXT:`` location to a public URL; other locations are kept as-is."""
        if location.startswith(EXT_PREFIX):
            return f"{self.static_url}/{location[len(EXT_PREFIX):]}"
        return location

    def get_js_tag(self, location: str, nonce: Optional[str] = None) -> str:
        src = escape(self.get_public_path(location), quote=True)
        return f'<script src="{src}"{self._nonce_attribute(nonce)}></script>'

    def get_css_tag(self, location: str, nonce: Optional[str] = None) -> str:
        href = escape(self.get_public_path(location), quote=True)
        return f'<link rel="stylesheet" href="{href}" media="all"{self._nonce_attribute(nonce)} />'

    def get_resources(self, nonce: Optional[str] = None) -> dict[str, str]:
        """Return the tags of the panel's own script and stylesheet."""
        return {
            "css": self.get_css_tag(PANEL_CSS, nonce),
            "js": self.get_js_tag(PANEL_JAVASCRIPT, nonce),
        }

    def get_additional_resources_for_modules(
        self,
        modules: Iterable[IPanelModule],
        nonce: Optional[str] = None,
    ) -> dict[str, str]:
        """Collect the tags of all modules, recursing into submodules."""
        result = {"js": "", "css": ""}
        for module in modules:
            if isinstance(module, IResourceProvider):
                for location in module.get_javascript_files():
                    result["js"] += self.get_js_tag(location, nonce)
                for location in module.get_css_files():
                    result["css"] += self.get_css_tag(location, nonce)
            if isinstance(module, ISubmoduleProvider):
                sub_result = self.get_additional_resources_for_modules(module.get_sub_modules(), nonce)
                result["js"] += sub_result["js"]
                result["css"] += sub_result["css"]
        return result

    @staticmethod
    def _nonce_attribute(nonce: Optional[str]) -> str:
        return f' nonce="{escape(nonce, quote=True)}"' if nonce else ""
