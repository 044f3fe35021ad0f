"""
ProjectLoader - Restores a whole project document into a ProjectSession.

This module contains no Qt dependencies. Scopes are restored strictly in
document order; a subcircuit may only use circuits listed before it.
Views follow the load through an observer pattern.
"""

import logging
from typing import Any, Callable, Optional

from models.errors import CorruptDocumentError
from models.project import DEFAULT_CLOCK_PERIOD, DEFAULT_PROJECT_NAME, ProjectSession
from models.registry import ElementRegistry, default_registry

from .collaborators import BackupScheduler, SimulationTrigger
from .scope_loader import load_scope

logger = logging.getLogger(__name__)


class ProjectLoader:
    """
    Loads project documents into a session.

    Observer events:
        scope_loaded (Scope) - One scope was restored and made active
        project_loaded (ProjectSession) - Every scope was restored
        load_failed (str) - The document was corrupt; carries a user-facing message
    """

    def __init__(
        self,
        session: Optional[ProjectSession] = None,
        simulation: Optional[SimulationTrigger] = None,
        backup: Optional[BackupScheduler] = None,
        registry: Optional[ElementRegistry] = None,
    ):
        self.session = session or ProjectSession()
        self.simulation = simulation or SimulationTrigger()
        self.backup = backup or BackupScheduler()
        self.registry = registry or default_registry
        self._observers: list[Callable[[str, Any], None]] = []

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for load events."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Unregister a previously registered callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event: str, data: Any) -> None:
        """Notify all observers of a load event."""
        for observer in self._observers:
            try:
                observer(event, data)
            except (TypeError, AttributeError, RuntimeError) as e:
                logger.error("Error notifying observer: %s", e)

    def load(self, data: Optional[dict]) -> ProjectSession:
        """
        Replace the session's contents with a saved project.

        A missing document starts a new project: only the project name is
        set and no scope is built. Scopes are restored into a staging
        session and handed to ``self.session`` only once every scope has
        loaded, so a failed load leaves the open project untouched.

        Raises:
            CorruptDocumentError: If a scope cannot be restored. Observers
                receive ``load_failed`` before the error propagates.
        """
        session = self.session
        if not data:
            session.name = DEFAULT_PROJECT_NAME
            return session

        staged = ProjectSession(restricted_elements=list(session.restricted_elements))
        try:
            self._load_scopes(staged, data)
        except CorruptDocumentError as e:
            message = f"Could not open project '{staged.name}': {e}"
            logger.error(message)
            self._notify("load_failed", message)
            raise

        staged.change_clock_time(data.get("timePeriod") or DEFAULT_CLOCK_PERIOD)
        staged.clock_enabled = data.get("clockEnabled", True)

        if data.get("orderedTabs"):
            staged.reorder_tabs(data["orderedTabs"])

        focussed = data.get("focussedCircuit")
        if focussed:
            if staged.get_scope(focussed) is not None:
                staged.switch_circuit(focussed)
            else:
                logger.warning("Focussed circuit %r does not exist; keeping %s", focussed, staged.active_scope)

        session.adopt(staged)
        if session.active_scope is not None:
            self.simulation.update(session.active_scope, True)
        logger.info("Loaded project %s with %d circuits", session.name, len(session.scopes))
        self._notify("project_loaded", session)
        return session

    def _load_scopes(self, session: ProjectSession, data: dict) -> None:
        session.name = data.get("name") or DEFAULT_PROJECT_NAME
        session.project_id = data.get("projectId")

        for scope_data in data.get("scopes") or []:
            metadata = scope_data.get("verilogMetadata") or {}
            scope = session.new_circuit(
                scope_data.get("name") or "Untitled",
                scope_data.get("id"),
                bool(metadata.get("isVerilogCircuit", False)),
                bool(metadata.get("isMainCircuit", False)),
            )
            load_scope(scope, scope_data, session, self.registry)

            session.switch_circuit(scope.scope_id)
            self.simulation.update(scope, True)
            session.update_restricted_elements_in_scope(scope)
            self.backup.schedule(scope)
            self._notify("scope_loaded", scope)
