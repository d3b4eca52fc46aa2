"""
Module data captured after rendering.

ModuleData is the payload a single data provider returns; the collection maps
module identifiers to those payloads and is what gets written to the request
cache.
"""

from typing import TYPE_CHECKING, Any, Iterator, Mapping, Optional

if TYPE_CHECKING:
    from adminpanel.interface import IPanelModule


class ModuleData(dict):
    """Payload stored for one module (a plain dict with a readable repr)."""

    def __repr__(self) -> str:
        return f"ModuleData({dict.__repr__(self)})"


class ModuleDataStorageCollection:
    """Ordered mapping of module identifier -> ModuleData."""

    def __init__(self, data: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._data: dict[str, ModuleData] = {}
        for identifier, payload in (data or {}).items():
            self._data[identifier] = ModuleData(payload)

    def add_module_data(self, module: "IPanelModule", data: Mapping[str, Any]) -> None:
        """Store the payload of ``module``, replacing any earlier one."""
        self._data[module.get_identifier()] = ModuleData(data)

    def get_module_data(self, module: "IPanelModule | str") -> ModuleData:
        """Return the payload of a module (or identifier); empty if none was captured."""
        identifier = module if isinstance(module, str) else module.get_identifier()
        return self._data.get(identifier, ModuleData())

    def identifiers(self) -> list[str]:
        return list(self._data.keys())

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {identifier: dict(payload) for identifier, payload in self._data.items()}

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleDataStorageCollection):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"ModuleDataStorageCollection({self.to_dict()!r})"
