"""
Admin panel exceptions.

Custom exception classes for module configuration and ordering errors.
Every exception carries a stable numeric code so callers can branch on it.
"""


class AdminPanelError(Exception):
    """Base exception for admin panel errors."""

    code: int = 0

    def __init__(self, message: str, code: int | None = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(message)


class InvalidConfigurationError(AdminPanelError):
    """
    Raised when a module configuration entry cannot be used.

    Examples:
        - Module reference is empty or not importable
        - Referenced class is not an admin panel module
        - Submodule class given where a main module is expected (or vice versa)
        - Two sibling modules share an identifier
    """

    code = 1519490112

    def __init__(self, message: str, module_key: str | None = None) -> None:
        self.module_key = module_key
        super().__init__(message)


class MissingConfigurationError(InvalidConfigurationError):
    """Raised when a configuration entry has no ``module`` reference at all."""

    code = 1519490105


class DependencyCycleError(AdminPanelError):
    """Raised when ``before``/``after`` hints form a cycle."""

    code = 1519490120

    def __init__(self, message: str, keys: list[str] | None = None) -> None:
        self.keys = keys or []
        super().__init__(message)
