"""
Preview Module - simulate date, visibility and frontend user groups.

Options (``preview_<option>`` in the user's admin config, or pinned through
``override.preview.<option>``):

    show_hidden_pages    show pages that are hidden
    show_hidden_records  show records that are hidden
    simulate_date        ISO date/time or unix timestamp
    simulate_user_group  uid of the frontend user group to impersonate
    show_fluid_debug     render template debug output (disables caching)
"""

from datetime import datetime, timezone
from html import escape
from typing import Any, Optional
import logging
import re

from adminpanel.abstract_module import AbstractModule
from adminpanel.context import SimulationContext
from adminpanel.interface import IPageSettingsProvider, IRequestEnricher, IResourceProvider
from adminpanel.request import ATTR_NO_CACHE, ATTR_SIMULATION, PanelRequest
from adminpanel.resources import EXT_PREFIX
from adminpanel.user import as_bool

logger = logging.getLogger(__name__)

# Smallest accepted simulated timestamp
MIN_SIMULATED_TIMESTAMP = 60

_NUMERIC_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")


def parse_date(value: str) -> Optional[datetime]:
    """
    Parse a simulated date.

    Accepts a numeric unix timestamp or ISO 8601 text (naive values are taken
    as UTC). Timestamps below one minute are clamped to 60.

    Returns:
        An aware datetime, or None if ``value`` cannot be parsed.
    """
    value = (value or "").strip()
    if not value:
        return None

    if _NUMERIC_PATTERN.match(value):
        timestamp = max(float(value), MIN_SIMULATED_TIMESTAMP)
        try:
            return datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug(f"Ignoring out of range simulated date {value!r}")
            return None

    try:
        date = datetime.fromisoformat(value)
    except ValueError:
        logger.debug(f"Ignoring unparsable simulated date {value!r}")
        return None

    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    if date.timestamp() < MIN_SIMULATED_TIMESTAMP:
        date = datetime.fromtimestamp(MIN_SIMULATED_TIMESTAMP, tz=timezone.utc)
    return date


def _as_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class PreviewModule(AbstractModule, IRequestEnricher, IPageSettingsProvider, IResourceProvider):
    """Admin panel preview module."""

    icon_identifier = "actions-preview"

    def __init__(self, backend_user=None) -> None:
        super().__init__(backend_user)
        self._config: Optional[dict[str, Any]] = None

    def get_identifier(self) -> str:
        return "preview"

    def get_label(self) -> str:
        return "Preview"

    @property
    def config(self) -> dict[str, Any]:
        """Module options of the current user, read once."""
        if self._config is None:
            self._config = {
                "show_hidden_pages": as_bool(self.get_configuration_option("show_hidden_pages")),
                "simulate_date": self.get_configuration_option("simulate_date"),
                "show_hidden_records": as_bool(self.get_configuration_option("show_hidden_records")),
                "simulate_user_group": _as_int(self.get_configuration_option("simulate_user_group")),
                "show_fluid_debug": as_bool(self.get_configuration_option("show_fluid_debug")),
            }
        return self._config

    def enrich(self, request: PanelRequest) -> PanelRequest:
        config = self.config
        no_cache = config["show_fluid_debug"]
        if no_cache:
            request = request.with_attribute(ATTR_NO_CACHE, True)

        simulated_time = parse_date(config["simulate_date"]) if config["simulate_date"] else None
        user_group = config["simulate_user_group"]
        simulation = SimulationContext(
            preview=True,
            simulated_time=simulated_time,
            show_hidden_pages=config["show_hidden_pages"],
            show_hidden_records=config["show_hidden_records"],
            simulated_user_groups=(user_group,) if user_group else (),
            no_cache=no_cache,
        )
        if not simulation.is_simulating:
            # Nothing simulated: the page is not a preview
            simulation = SimulationContext(no_cache=no_cache)

        logger.debug(f"Preview simulation for request {request.request_id}: {simulation}")
        return request.with_attribute(ATTR_SIMULATION, simulation)

    def get_page_settings(self) -> str:
        config = self.config
        fields = [
            self._checkbox("show_hidden_pages", "Show hidden pages", config["show_hidden_pages"]),
            self._checkbox("show_hidden_records", "Show hidden records", config["show_hidden_records"]),
            (
                '<label>Simulate date <input type="text" name="preview_simulate_date"'
                f' value="{escape(config["simulate_date"])}" /></label>'
                '<button type="button" data-typo3-role="adminPanel-preview-clear-date">Clear</button>'
            ),
            (
                '<label>Simulate user group <input type="number" min="0" name="preview_simulate_user_group"'
                f' value="{config["simulate_user_group"]}" /></label>'
            ),
            self._checkbox("show_fluid_debug", "Show template debug output", config["show_fluid_debug"]),
        ]
        return "".join(fields)

    @staticmethod
    def _checkbox(option: str, label: str, checked: bool) -> str:
        state = " checked" if checked else ""
        return f'<label><input type="checkbox" name="preview_{option}" value="1"{state} /> {escape(label)}</label>'

    def get_javascript_files(self) -> list[str]:
        return [EXT_PREFIX + "JavaScript/Modules/Preview.js"]

    def get_css_files(self) -> list[str]:
        return []
