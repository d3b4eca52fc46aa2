"""
Dependency Ordering Service.

Orders configuration entries by their ``before``/``after`` hints. The result
is a topological order of the hint graph; entries without a constraint between
them keep their configuration order.
"""

from typing import Any, Mapping, TypeVar
import logging

from adminpanel.exceptions import DependencyCycleError

V = TypeVar("V")

logger = logging.getLogger(__name__)


def _as_key_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part) for part in value]


class DependencyOrderingService:
    """Stable topological ordering of keyed configuration entries."""

    def order_by_dependencies(
        self,
        items: Mapping[str, V],
        before_key: str = "before",
        after_key: str = "after",
    ) -> dict[str, V]:
        """
        Return ``items`` re-ordered so every hint is honoured.

        ``a: {"before": ["b"]}`` places ``a`` ahead of ``b``;
        ``a: {"after": ["b"]}`` places ``b`` ahead of ``a``. Hints naming
        unknown keys are ignored.

        Raises:
            DependencyCycleError: If the hints cannot all be satisfied.
        """
        keys = list(items.keys())
        # predecessors[k] = keys that must come before k
        predecessors: dict[str, set[str]] = {key: set() for key in keys}

        for key in keys:
            entry = items[key]
            if not isinstance(entry, Mapping):
                continue
            for other in _as_key_list(entry.get(before_key)):
                if other in predecessors and other != key:
                    predecessors[other].add(key)
                elif other not in predecessors:
                    logger.debug(f"Ignoring unknown '{before_key}' reference '{other}' of '{key}'")
            for other in _as_key_list(entry.get(after_key)):
                if other in predecessors and other != key:
                    predecessors[key].add(other)
                elif other not in predecessors:
                    logger.debug(f"Ignoring unknown '{after_key}' reference '{other}' of '{key}'")

        ordered: list[str] = []
        placed: set[str] = set()
        remaining = list(keys)

        while remaining:
            for index, key in enumerate(remaining):
                if predecessors[key] <= placed:
                    ordered.append(key)
                    placed.add(key)
                    del remaining[index]
                    break
            else:
                raise DependencyCycleError(
                    f"Cyclic dependency between: {', '.join(remaining)}",
                    keys=list(remaining),
                )

        return {key: items[key] for key in ordered}
