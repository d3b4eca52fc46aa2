"""
Module Loader - validates, orders and instantiates configured modules.

Configuration format (one entry per module key):

    {
        "preview": {"module": "panel_modules.preview:PreviewModule", "after": ["cache"]},
        "info": {
            "module": InfoModule,
            "submodules": {"general": {"module": GeneralInformation}},
        },
    }

The whole configuration batch is validated before any module is created; a
single bad entry fails the load and no partial module list is returned.
"""

from enum import Enum
from typing import Any, Mapping, Optional
import importlib
import inspect
import logging

from adminpanel.exceptions import InvalidConfigurationError, MissingConfigurationError
from adminpanel.interface import IMainModule, IPanelModule, ISubModule, ISubmoduleProvider
from adminpanel.ordering import DependencyOrderingService
from adminpanel.user import BackendUser


class ModuleKind(str, Enum):
    """Kind of modules a configuration batch describes."""

    MAIN = "main"
    SUB = "sub"


def resolve_module_class(reference: Any) -> Optional[type]:
    """
    Resolve a module reference to a class.

    Accepts a class, ``"package.module:ClassName"`` or
    ``"package.module.ClassName"``. Returns None if it cannot be resolved.
    """
    if isinstance(reference, type):
        return reference
    if not isinstance(reference, str) or not reference.strip():
        return None

    reference = reference.strip()
    if ":" in reference:
        module_path, _, attr_name = reference.partition(":")
    else:
        module_path, _, attr_name = reference.rpartition(".")
    if not module_path or not attr_name:
        return None

    try:
        module = importlib.import_module(module_path)
    except ImportError:
        return None

    resolved = getattr(module, attr_name, None)
    return resolved if isinstance(resolved, type) else None


class ModuleLoader:
    """
    Loads admin panel modules from configuration.

    Ordering is delegated to a DependencyOrderingService; the loader keeps the
    order it returns.
    """

    def __init__(self, ordering_service: Optional[DependencyOrderingService] = None) -> None:
        self._ordering_service = ordering_service or DependencyOrderingService()
        self._logger = logging.getLogger(__name__)

    def validate_sort_and_initialize_modules(
        self,
        configuration: Mapping[str, Any],
        kind: ModuleKind = ModuleKind.MAIN,
        backend_user: Optional[BackendUser] = None,
    ) -> list[IPanelModule]:
        """
        Validate, order and instantiate a batch of modules.

        Args:
            configuration: Module key -> configuration entry
            kind: Whether the batch holds main modules or submodules
            backend_user: User the modules are loaded for

        Returns:
            Module instances in dependency order. For main modules only the
            enabled ones are returned.

        Raises:
            MissingConfigurationError: An entry has no ``module`` reference
            InvalidConfigurationError: A reference is empty, unresolvable or of the wrong kind
        """
        if not configuration:
            return []

        kind = ModuleKind(kind)
        classes = {key: self._validate_entry(key, entry, kind) for key, entry in configuration.items()}
        ordered = self._ordering_service.order_by_dependencies(configuration)

        modules: list[IPanelModule] = []
        for key, entry in ordered.items():
            module_class = classes.get(key)
            if module_class is None:
                module_class = self._validate_entry(key, entry, kind)

            module = module_class(backend_user=backend_user)

            if kind is ModuleKind.MAIN and not module.is_enabled():
                self._logger.debug(f"Module '{key}' is disabled for this user. Skipping.")
                continue
            if isinstance(module, ISubmoduleProvider):
                sub_modules = self.validate_sort_and_initialize_sub_modules(
                    entry.get("submodules") or {},
                    backend_user=backend_user,
                )
                module.set_sub_modules(sub_modules)

            modules.append(module)

        self._logger.debug(
            f"Loaded {len(modules)} {kind.value} module(s): "
            f"{[module.get_identifier() for module in modules]}"
        )
        return modules

    def validate_sort_and_initialize_sub_modules(
        self,
        configuration: Mapping[str, Any],
        backend_user: Optional[BackendUser] = None,
    ) -> list[IPanelModule]:
        """Load submodules; no enablement filter is applied at this level."""
        return self.validate_sort_and_initialize_modules(
            configuration, ModuleKind.SUB, backend_user=backend_user
        )

    def _validate_entry(self, key: str, entry: Any, kind: ModuleKind) -> type:
        if not isinstance(entry, Mapping) or "module" not in entry:
            raise MissingConfigurationError(
                f"Missing configuration for module '{key}'.", module_key=key
            )

        reference = entry["module"]
        module_class = resolve_module_class(reference)
        if module_class is None:
            raise InvalidConfigurationError(
                f"The module '{key}' references '{reference!r}' which is not a resolvable class.",
                module_key=key,
            )
        if not issubclass(module_class, IPanelModule) or inspect.isabstract(module_class):
            raise InvalidConfigurationError(
                f"The module '{key}' class {module_class.__name__} is not a concrete admin panel module.",
                module_key=key,
            )

        if kind is ModuleKind.MAIN and not issubclass(module_class, IMainModule):
            raise InvalidConfigurationError(
                f"The module '{key}' class {module_class.__name__} is not a main module.",
                module_key=key,
            )
        if entry.get("submodules"):
            sub_configuration = entry["submodules"]
            if not isinstance(sub_configuration, Mapping):
                raise InvalidConfigurationError(
                    f"The submodules of module '{key}' must be a mapping.", module_key=key
                )
            for sub_key, sub_entry in sub_configuration.items():
                self._validate_entry(sub_key, sub_entry, ModuleKind.SUB)
        if kind is ModuleKind.SUB and (
            not issubclass(module_class, ISubModule) or issubclass(module_class, IMainModule)
        ):
            raise InvalidConfigurationError(
                f"The module '{key}' class {module_class.__name__} is not a submodule.",
                module_key=key,
            )
        return module_class
