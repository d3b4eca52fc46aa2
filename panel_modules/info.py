"""
Info Module - general and request information about the rendered page.

The main module only groups its submodules and shows the parse time in the
toolbar; the submodules capture their data after rendering and display it
from the request cache.
"""

from html import escape
from typing import Any, Mapping, Optional
import logging

from adminpanel.abstract_module import AbstractModule, AbstractSubModule
from adminpanel.data_storage import ModuleData, ModuleDataStorageCollection
from adminpanel.interface import IContentProvider, IDataProvider, IResourceProvider, IShortInfoProvider
from adminpanel.logging_config import is_sensitive_key, mask_sensitive
from adminpanel.middleware import ATTR_DOCUMENT_SIZE, ATTR_PARSE_TIME
from adminpanel.request import ATTR_NO_CACHE, ATTR_PAGE_ID, ATTR_SIMULATION, PanelRequest
from adminpanel.resources import EXT_PREFIX

logger = logging.getLogger(__name__)

# Headers whose values are never shown
MASKED_HEADERS = frozenset({"authorization", "cookie", "proxy-authorization", "set-cookie"})


def format_size(size: int) -> str:
    """Human readable size, e.g. ``1.5 KB``."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _render_table(rows: Mapping[str, Any]) -> str:
    html = ['<table class="typo3-adminPanel-table">']
    for key, value in rows.items():
        html.append(f"<tr><th>{escape(str(key))}</th><td>{escape(str(value))}</td></tr>")
    html.append("</table>")
    return "".join(html)


class InfoModule(AbstractModule, IShortInfoProvider, IResourceProvider):
    """Admin panel info module."""

    icon_identifier = "actions-document-info"

    def __init__(self, backend_user=None) -> None:
        super().__init__(backend_user)
        self._module_data: Optional[ModuleDataStorageCollection] = None

    def get_identifier(self) -> str:
        return "info"

    def get_label(self) -> str:
        return "Info"

    def set_module_data(self, data: ModuleDataStorageCollection) -> None:
        self._module_data = data

    def get_short_info(self) -> str:
        """Parse time of the rendered page, e.g. ``12.5 ms``."""
        if self._module_data is None:
            return ""
        parse_time = self._module_data.get_module_data("info_general").get("parse_time")
        if parse_time is None:
            return ""
        return f"{parse_time} ms"

    def get_javascript_files(self) -> list[str]:
        return []

    def get_css_files(self) -> list[str]:
        return [EXT_PREFIX + "Css/Modules/Info.css"]


class GeneralInformation(AbstractSubModule, IDataProvider, IContentProvider):
    """Page, caching and timing information."""

    def get_identifier(self) -> str:
        return "info_general"

    def get_label(self) -> str:
        return "General"

    def get_data_to_store(self, request: PanelRequest) -> ModuleData:
        simulation = request.get_attribute(ATTR_SIMULATION)
        user_groups = list(simulation.simulated_user_groups) if simulation is not None else []
        user = request.backend_user
        return ModuleData(
            page_id=request.get_attribute(ATTR_PAGE_ID),
            user_groups=user_groups,
            no_cache=bool(request.get_attribute(ATTR_NO_CACHE, False)),
            document_size=request.get_attribute(ATTR_DOCUMENT_SIZE, 0),
            parse_time=request.get_attribute(ATTR_PARSE_TIME),
            backend_user=user.username if user is not None else "",
        )

    def get_content(self, data: ModuleData) -> str:
        if not data:
            return "<p>No data captured for this request.</p>"
        groups = data.get("user_groups") or []
        parse_time = data.get("parse_time")
        return _render_table(
            {
                "Page id": data.get("page_id") if data.get("page_id") is not None else "-",
                "Simulated user groups": ",".join(str(group) for group in groups) or "-",
                "No cache": "yes" if data.get("no_cache") else "no",
                "Document size": format_size(int(data.get("document_size") or 0)),
                "Total parse time": f"{parse_time} ms" if parse_time is not None else "-",
                "Backend user": data.get("backend_user") or "-",
            }
        )


class RequestInformation(AbstractSubModule, IDataProvider, IContentProvider):
    """Method, path, query and headers of the request; credentials are masked."""

    def get_identifier(self) -> str:
        return "info_request"

    def get_label(self) -> str:
        return "Request"

    def get_data_to_store(self, request: PanelRequest) -> ModuleData:
        headers = {
            name: "***" if name.lower() in MASKED_HEADERS or is_sensitive_key(name) else mask_sensitive(value)
            for name, value in request.headers.items()
        }
        query = {
            key: "***" if is_sensitive_key(key) else mask_sensitive(value)
            for key, value in request.query_params.items()
        }
        return ModuleData(
            method=request.method,
            path=request.path,
            query=query,
            headers=headers,
            cookies=sorted(request.cookies.keys()),
        )

    def get_content(self, data: ModuleData) -> str:
        if not data:
            return "<p>No data captured for this request.</p>"
        html = [
            _render_table({"Method": data.get("method", ""), "Path": data.get("path", "")}),
            "<h4>Query</h4>",
            _render_table(data.get("query") or {}),
            "<h4>Headers</h4>",
            _render_table(data.get("headers") or {}),
            "<h4>Cookies</h4>",
            _render_table({name: "***" for name in data.get("cookies") or []}),
        ]
        return "".join(html)
