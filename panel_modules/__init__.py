"""
Admin panel modules shipped with the panel.

Referenced by ``adminpanel.config.DEFAULT_MODULE_CONFIGURATION``.
"""

from panel_modules.cache import CacheModule
from panel_modules.info import GeneralInformation, InfoModule, RequestInformation
from panel_modules.preview import PreviewModule

__all__ = [
    "CacheModule",
    "GeneralInformation",
    "InfoModule",
    "PreviewModule",
    "RequestInformation",
]
