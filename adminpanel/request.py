"""
PanelRequest - request abstraction handed through the panel lifecycle.

Instances are immutable: enrichers return a new request via
``with_attribute()`` instead of mutating the one they receive. This keeps the
module tree and the simulated values of one request out of reach of any other
request handled by the same controller.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from starlette.requests import Request

    from adminpanel.user import BackendUser


# Well-known attribute names
ATTR_MODULES = "adminpanel.modules"
ATTR_SIMULATION = "adminpanel.simulation"
ATTR_NO_CACHE = "no_cache"
ATTR_PAGE_ID = "frontend.page.id"
ATTR_FRONTEND_CONFIG = "frontend.config"


def _freeze(values: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class PanelRequest:
    """Immutable view on one HTTP request as seen by the admin panel."""

    request_id: str
    method: str = "GET"
    path: str = "/"
    query_params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    backend_user: Optional["BackendUser"] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "query_params", _freeze(self.query_params))
        object.__setattr__(self, "headers", _freeze(self.headers))
        object.__setattr__(self, "cookies", _freeze(self.cookies))
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "PanelRequest":
        """Return a copy of this request with ``name`` set to ``value``."""
        attributes = dict(self.attributes)
        attributes[name] = value
        return replace(self, attributes=attributes)

    def without_attribute(self, name: str) -> "PanelRequest":
        attributes = dict(self.attributes)
        attributes.pop(name, None)
        return replace(self, attributes=attributes)

    @classmethod
    def from_starlette(
        cls,
        request: "Request",
        request_id: str,
        backend_user: Optional["BackendUser"] = None,
    ) -> "PanelRequest":
        """
        Build a PanelRequest from a Starlette request.

        Page context attached by the host (``request.state.page_id`` and
        ``request.state.frontend_config``) is copied into the attributes.
        """
        attributes: dict[str, Any] = {}
        page_id = getattr(request.state, "page_id", None)
        if page_id is not None:
            attributes[ATTR_PAGE_ID] = page_id
        frontend_config = getattr(request.state, "frontend_config", None)
        if frontend_config is not None:
            attributes[ATTR_FRONTEND_CONFIG] = frontend_config

        return cls(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
            headers=dict(request.headers),
            cookies=dict(request.cookies),
            backend_user=backend_user,
            attributes=attributes,
        )
