"""
FileController - Handles project file loading and session persistence.

File dialog interaction is the responsibility of the view layer.
Recent projects are kept in QSettings; the last open project and its
focussed circuit are kept in a small JSON session file.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from models.project import ProjectSession
from models.registry import MODULE_LIST
from PyQt6.QtCore import QSettings

from .project_loader import ProjectLoader

logger = logging.getLogger(__name__)

SESSION_FILE = "last_session.json"
MAX_RECENT_PROJECTS = 10
RECENT_PROJECTS_KEY = "projects/recent"
SETTINGS_ORG = "LogicCircuits"
SETTINGS_APP = "Logic Circuit Editor"


def validate_project_data(data) -> None:
    """
    Validate JSON structure before loading.

    Raises ValueError with a descriptive message if anything is wrong.
    Checks the document's shape only; references between records are
    checked while the project is restored.
    """
    if not isinstance(data, dict):
        raise ValueError("File does not contain a valid project object.")

    if "scopes" not in data or not isinstance(data["scopes"], list):
        raise ValueError("Missing or invalid 'scopes' list.")

    scope_ids = set()
    for i, scope in enumerate(data["scopes"]):
        if not isinstance(scope, dict):
            raise ValueError(f"Circuit #{i + 1} is not an object.")
        if "id" not in scope:
            raise ValueError(f"Circuit #{i + 1} is missing required field 'id'.")
        if scope["id"] in scope_ids:
            raise ValueError(f"Circuit id '{scope['id']}' is used more than once.")
        scope_ids.add(scope["id"])

        label = scope.get("name") or scope["id"]
        if "allNodes" not in scope or not isinstance(scope["allNodes"], list):
            raise ValueError(f"Circuit '{label}' has a missing or invalid 'allNodes' list.")
        for j, node in enumerate(scope["allNodes"]):
            if not isinstance(node, dict):
                raise ValueError(f"Node #{j} of circuit '{label}' is not an object.")
            if not isinstance(node.get("connections", []), list):
                raise ValueError(f"Node #{j} of circuit '{label}' has invalid connections.")

        for tag in MODULE_LIST:
            if tag not in scope:
                continue
            records = scope[tag]
            if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
                raise ValueError(f"Circuit '{label}' has an invalid '{tag}' list.")

    tabs = data.get("orderedTabs")
    if tabs is not None and not isinstance(tabs, list):
        raise ValueError("'orderedTabs' must be a list of circuit ids.")


@dataclass
class RecentProject:
    """An entry in the recent projects menu."""

    path: str
    name: str

    def to_dict(self) -> dict:
        return {"path": self.path, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "RecentProject":
        path = str(data["path"])
        return cls(path=path, name=data.get("name") or Path(path).stem)


class FileController:
    """
    Manages project file loading and session persistence.

    Tracks the current file path for window titles, and remembers the
    last project together with the circuit that was focussed in it.
    """

    def __init__(
        self,
        session: Optional[ProjectSession] = None,
        loader: Optional[ProjectLoader] = None,
        session_file: str = SESSION_FILE,
    ):
        self.loader = loader or ProjectLoader(session)
        self.session = self.loader.session
        self.current_file: Optional[Path] = None
        self._session_file = session_file

    def new_project(self) -> None:
        """Start an empty project and reset file state."""
        self.session.reset_scope_list()
        self.loader.load(None)
        self.session.new_circuit()
        self.current_file = None

    def load_project(self, filepath) -> ProjectSession:
        """
        Load a project from a JSON file.

        Validates JSON structure before loading. On any failure the open
        project and ``current_file`` are left as they were.

        Args:
            filepath: Path or string to load from.

        Raises:
            json.JSONDecodeError: If file is not valid JSON.
            ValueError: If file structure is invalid, or a circuit in it
                cannot be restored (CorruptDocumentError).
            OSError: If the file cannot be read.
        """
        filepath = Path(filepath)
        with open(filepath, "r") as f:
            data = json.load(f)

        validate_project_data(data)
        self.loader.load(data)

        self.current_file = filepath
        self._save_session()
        self.add_recent_project(filepath, self.session.name)
        return self.session

    def has_file(self) -> bool:
        """Return whether a current file path is set."""
        return self.current_file is not None

    def get_window_title(self, base: str = "Logic Circuit Editor") -> str:
        """Get window title based on current file."""
        if self.current_file:
            return f"{base} - {self.current_file.name}"
        return base

    # --- Session restore ---

    def _save_session(self) -> None:
        """Record the open project file and its focussed circuit for the next start."""
        record = {}
        if self.current_file:
            record["file"] = os.path.abspath(str(self.current_file))
            if self.session.active_scope is not None:
                record["circuit"] = self.session.active_scope.scope_id
        try:
            with open(self._session_file, "w") as f:
                json.dump(record, f)
        except OSError:
            logger.debug("Could not write session file %s", self._session_file)

    def _read_session(self) -> dict:
        try:
            with open(self._session_file, "r") as f:
                record = json.load(f)
        except (OSError, json.JSONDecodeError):
            return {}
        return record if isinstance(record, dict) else {}

    def load_last_session(self) -> Optional[Path]:
        """
        Return the project file open at the end of the last session.

        Returns:
            Path to the last opened file, or None if there is none or it is gone.
        """
        path_str = self._read_session().get("file")
        if isinstance(path_str, str) and path_str and Path(path_str).exists():
            return Path(path_str)
        return None

    def reopen_last_session(self) -> Optional[ProjectSession]:
        """
        Load the last session's project and focus the circuit that was active.

        Returns:
            The restored session, or None when there is nothing to reopen.

        Raises:
            Same as load_project().
        """
        record = self._read_session()
        filepath = self.load_last_session()
        if filepath is None:
            return None
        session = self.load_project(filepath)
        circuit = record.get("circuit")
        if circuit and session.get_scope(circuit) is not None:
            session.switch_circuit(circuit)
            self._save_session()
        return session

    # --- Recent projects ---

    def get_recent_projects(self) -> List[RecentProject]:
        """
        Get recently opened projects from QSettings.

        Returns:
            Entries most recent first; files that no longer exist are dropped
            from the stored list.
        """
        settings = QSettings(SETTINGS_ORG, SETTINGS_APP)
        raw = settings.value(RECENT_PROJECTS_KEY, "")
        try:
            records = json.loads(raw) if isinstance(raw, str) and raw else []
        except json.JSONDecodeError:
            records = []
        if not isinstance(records, list):
            records = []

        recent = [
            RecentProject.from_dict(r)
            for r in records
            if isinstance(r, dict) and r.get("path") and os.path.exists(str(r["path"]))
        ]
        if len(recent) != len(records):
            self._store_recent_projects(settings, recent)
        return recent

    def add_recent_project(self, filepath, name: str) -> None:
        """Move a project to the front of the recent projects list."""
        path = str(Path(filepath).absolute())
        recent = [entry for entry in self.get_recent_projects() if entry.path != path]
        recent.insert(0, RecentProject(path=path, name=name))

        settings = QSettings(SETTINGS_ORG, SETTINGS_APP)
        self._store_recent_projects(settings, recent[:MAX_RECENT_PROJECTS])

    def clear_recent_projects(self) -> None:
        """Clear the recent projects list."""
        settings = QSettings(SETTINGS_ORG, SETTINGS_APP)
        self._store_recent_projects(settings, [])

    @staticmethod
    def _store_recent_projects(settings: QSettings, recent: List[RecentProject]) -> None:
        settings.setValue(RECENT_PROJECTS_KEY, json.dumps([entry.to_dict() for entry in recent]))
