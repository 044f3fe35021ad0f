"""
ProjectSession - The open project: its scopes, tabs, clock and active scope.

This module contains no Qt dependencies. A single session object is passed
to the loaders and controllers that need to look up scopes or change the
active one.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .identifiers import generate_id
from .scope import DEFAULT_SCOPE_NAME, Scope

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "Untitled"
DEFAULT_CLOCK_PERIOD = 500
MIN_CLOCK_PERIOD = 50


@dataclass
class ProjectSession:
    """
    State of the open project.

    ``tab_order`` holds scope ids in the order their tabs are shown; it
    always lists exactly the scopes in ``scopes``.
    """

    name: str = DEFAULT_PROJECT_NAME
    project_id: Optional[str] = None
    scopes: list[Scope] = field(default_factory=list)
    tab_order: list[str] = field(default_factory=list)
    active_scope: Optional[Scope] = None
    clock_time_period: int = DEFAULT_CLOCK_PERIOD
    clock_enabled: bool = True
    restricted_elements: list[str] = field(default_factory=list)

    # --- Scope list ---

    def reset_scope_list(self) -> None:
        """Drop every scope and clear the active scope."""
        self.scopes.clear()
        self.tab_order.clear()
        self.active_scope = None

    def adopt(self, other: "ProjectSession") -> None:
        """Take over the project held by ``other``, keeping this session object."""
        self.name = other.name
        self.project_id = other.project_id
        self.scopes[:] = other.scopes
        self.tab_order[:] = other.tab_order
        self.active_scope = other.active_scope
        self.clock_time_period = other.clock_time_period
        self.clock_enabled = other.clock_enabled

    def new_circuit(
        self,
        name: Optional[str] = None,
        scope_id: Optional[str] = None,
        is_verilog: bool = False,
        is_main: bool = False,
    ) -> Scope:
        """
        Create an empty scope, add its tab and make it active.

        Raises:
            ValueError: If a scope with the same id already exists.
        """
        scope_id = scope_id or generate_id()
        if self.get_scope(scope_id) is not None:
            raise ValueError(f"Circuit '{scope_id}' already exists")
        scope = Scope(
            name=name or DEFAULT_SCOPE_NAME,
            scope_id=scope_id,
            is_verilog=is_verilog,
            is_main=is_main,
        )
        self.scopes.append(scope)
        self.tab_order.append(scope_id)
        self.active_scope = scope
        logger.debug("Created circuit %s (%s)", scope.name, scope_id)
        return scope

    def get_scope(self, scope_id: str) -> Optional[Scope]:
        for scope in self.scopes:
            if scope.scope_id == scope_id:
                return scope
        return None

    def switch_circuit(self, scope_id: str) -> Scope:
        """
        Make a scope active.

        Raises:
            ValueError: If no scope has the id.
        """
        scope = self.get_scope(scope_id)
        if scope is None:
            raise ValueError(f"Circuit '{scope_id}' does not exist")
        self.active_scope = scope
        return scope

    def reorder_tabs(self, ordered_ids: Iterable[str]) -> list[str]:
        """
        Put tabs in the given order.

        Unknown and repeated ids are ignored. Scopes missing from
        ``ordered_ids`` follow the listed ones in their current order.

        Returns:
            The new tab order.
        """
        known = set(self.tab_order)
        ordered = []
        for scope_id in ordered_ids:
            if scope_id not in known:
                logger.warning("Ignoring unknown circuit id %r in tab order", scope_id)
                continue
            if scope_id not in ordered:
                ordered.append(scope_id)
        ordered.extend(scope_id for scope_id in self.tab_order if scope_id not in ordered)
        self.tab_order = ordered
        return list(ordered)

    # --- Clock ---

    def change_clock_time(self, period) -> bool:
        """
        Set the clock period.

        Returns:
            False if the period is below MIN_CLOCK_PERIOD (nothing changed).
        """
        period = int(period)
        if period < MIN_CLOCK_PERIOD:
            logger.warning("Clock period %d is below the minimum of %d; ignoring", period, MIN_CLOCK_PERIOD)
            return False
        self.clock_time_period = period
        return True

    # --- Restricted elements ---

    def update_restricted_elements_in_scope(self, scope: Optional[Scope] = None) -> list[str]:
        """
        Record which restricted element types the scope uses.

        Defaults to the active scope. Returns the tags found.
        """
        scope = scope or self.active_scope
        if scope is None:
            return []
        used = [tag for tag in self.restricted_elements if scope.elements_of(tag)]
        scope.restricted_elements_used = used
        return used

    def subcircuit_names(self, exclude: Optional[Scope] = None) -> dict[str, str]:
        """Return ``{scope_id: name}`` for every scope except ``exclude``, in tab order."""
        names = {}
        for scope_id in self.tab_order:
            scope = self.get_scope(scope_id)
            if scope is not None and scope is not exclude:
                names[scope_id] = scope.name
        return names
