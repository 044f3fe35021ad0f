"""
FolderController - Folder operations on the active circuit's subcircuits.

This module contains no Qt dependencies. The FolderTree of the active scope
holds the state; this controller validates requests against the session,
schedules one backup per change and reports every outcome to observers.
Operations return a success value instead of raising so views can call
them straight from menu and drag handlers.
"""

import logging
from typing import Any, Callable, Optional

from models.folder import FolderNode, FolderOperationError, FolderTree
from models.project import ProjectSession
from models.scope import Scope

from .collaborators import BackupScheduler

logger = logging.getLogger(__name__)


class FolderController:
    """
    Controller for the subcircuit folder tree.

    Observer events:
        folder_created (str) - A folder was created (by ID)
        folder_renamed (str) - A folder was renamed (by ID)
        folder_deleted (str) - A folder was deleted (by ID)
        folder_moved (str) - A folder got a new parent (by ID)
        subcircuit_moved (tuple[str, Optional[str]]) - A subcircuit changed folder
        status_message (str) - Text to show the user
    """

    def __init__(self, session: ProjectSession, backup: Optional[BackupScheduler] = None):
        self.session = session
        self.backup = backup or BackupScheduler()
        self._observers: list[Callable[[str, Any], None]] = []

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for folder events."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Unregister a previously registered callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event: str, data: Any) -> None:
        """Notify all observers of a folder change."""
        for observer in self._observers:
            try:
                observer(event, data)
            except (TypeError, AttributeError, RuntimeError) as e:
                logger.error("Error notifying observer: %s", e)

    # --- Helpers ---

    def _scope(self) -> Scope:
        scope = self.session.active_scope
        if scope is None:
            raise FolderOperationError("No circuit is open.")
        return scope

    def _tree(self) -> FolderTree:
        return self._scope().folder_tree

    def _changed(self, event: str, data: Any, message: str) -> None:
        self.backup.schedule(self._scope())
        self._notify(event, data)
        self._notify("status_message", message)

    def _failed(self, error: FolderOperationError) -> None:
        logger.info("Folder operation rejected: %s", error)
        self._notify("status_message", str(error))

    # --- Queries ---

    def get_tree(self) -> Optional[FolderNode]:
        """Build the display tree for the active circuit's subcircuits."""
        scope = self.session.active_scope
        if scope is None:
            return None
        return scope.folder_tree.build_tree(self.session.subcircuit_names(exclude=scope))

    # --- Operations ---

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> Optional[str]:
        """Create a folder. Returns the new id, or None on failure."""
        try:
            folder_id = self._tree().create_folder(name, parent_id)
        except FolderOperationError as e:
            self._failed(e)
            return None
        self._changed("folder_created", folder_id, f"Folder '{name.strip()}' created")
        return folder_id

    def rename_folder(self, folder_id: str, new_name: str) -> bool:
        try:
            changed = self._tree().rename_folder(folder_id, new_name)
        except FolderOperationError as e:
            self._failed(e)
            return False
        if changed:
            self._changed("folder_renamed", folder_id, f"Folder renamed to '{new_name.strip()}'")
        return True

    def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder; its subcircuits move back to root."""
        try:
            tree = self._tree()
            folder = tree.get_folder(folder_id)
            tree.delete_folder(folder_id)
        except FolderOperationError as e:
            self._failed(e)
            return False
        self._changed("folder_deleted", folder_id, f"Folder '{folder.name}' deleted")
        return True

    def move_subcircuit(self, subcircuit_id: str, folder_id: Optional[str] = None) -> bool:
        """
        Move a subcircuit into a folder, or back to root when ``folder_id`` is None.

        Returns:
            True if the subcircuit changed folder; False for rejected and
            no-op moves.
        """
        try:
            scope = self._scope()
            target = self.session.get_scope(subcircuit_id)
            if target is None or target is scope:
                raise FolderOperationError(f"Circuit '{subcircuit_id}' is not a subcircuit of '{scope.name}'.")
            moved = scope.folder_tree.move_subcircuit(subcircuit_id, folder_id)
        except FolderOperationError as e:
            self._failed(e)
            return False
        if moved:
            folder = scope.folder_tree.get_folder(folder_id)
            where = folder.name if folder else "root"
            self._changed("subcircuit_moved", (subcircuit_id, folder_id), f"Moved '{target.name}' to {where}")
        return moved

    def move_folder(self, folder_id: str, parent_id: Optional[str] = None) -> bool:
        """Give a folder a new parent, or make it top-level when ``parent_id`` is None."""
        try:
            tree = self._tree()
            moved = tree.move_folder(folder_id, parent_id)
        except FolderOperationError as e:
            self._failed(e)
            return False
        if moved:
            self._changed("folder_moved", folder_id, f"Folder '{tree.get_folder(folder_id).name}' moved")
        return moved
