"""
Simulation Context - request-scoped preview values.

The preview module decides per request whether to simulate a date, show
hidden pages/records or impersonate frontend user groups. Those values are
consumed far downstream (page rendering, data queries), so they are exposed
through a ContextVar. ``simulation_scope()`` sets the value for the duration
of one request and restores the previous one afterwards; concurrent requests
(threads or asyncio tasks) each see only their own values.

Usage (downstream code):
    from adminpanel.context import get_exec_time, get_simulation

    if get_simulation().show_hidden_records:
        ...
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, Optional


@dataclass(frozen=True)
class SimulationContext:
    """Preview settings in effect for one request."""

    preview: bool = False
    simulated_time: Optional[datetime] = None
    show_hidden_pages: bool = False
    show_hidden_records: bool = False
    simulated_user_groups: tuple[int, ...] = ()
    no_cache: bool = False

    @property
    def is_simulating(self) -> bool:
        return bool(
            self.simulated_time
            or self.simulated_user_groups
            or self.show_hidden_pages
            or self.show_hidden_records
        )

    @property
    def simulated_access_time(self) -> Optional[datetime]:
        """Simulated time rounded down to the full minute."""
        if self.simulated_time is None:
            return None
        return self.simulated_time.replace(second=0, microsecond=0)


NO_SIMULATION = SimulationContext()

_current_simulation: ContextVar[SimulationContext] = ContextVar(
    "admin_panel_simulation", default=NO_SIMULATION
)


def get_simulation() -> SimulationContext:
    """Return the simulation in effect for the current request."""
    return _current_simulation.get()


def get_exec_time() -> datetime:
    """Return the (possibly simulated) current time for the current request."""
    simulated = _current_simulation.get().simulated_time
    return simulated if simulated is not None else datetime.now(timezone.utc)


@contextmanager
def simulation_scope(simulation: Optional[SimulationContext]) -> Iterator[SimulationContext]:
    """Set ``simulation`` for the enclosed block and restore the previous value on exit."""
    effective = simulation or NO_SIMULATION
    token = _current_simulation.set(effective)
    try:
        yield effective
    finally:
        _current_simulation.reset(token)
