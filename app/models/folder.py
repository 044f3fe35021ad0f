"""
Folder tree - Organizes a scope's subcircuits into user-defined folders.

This module contains no Qt dependencies. FolderTree owns the folder list and
the subcircuit-to-folder map for one scope. Every mutating operation checks
its input before touching state, so a failed operation leaves the tree
exactly as it was. A subcircuit with no map entry lives in the implicit
root folder.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional

from .identifiers import generate_id

logger = logging.getLogger(__name__)

ROOT_FOLDER_NAME = "Root"


class FolderOperationError(ValueError):
    """A folder operation was rejected; the tree was not modified."""


def _clean_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise FolderOperationError("Folder name cannot be empty.")
    return name.strip()


@dataclass
class FolderData:
    """A named folder; ``parent_id`` of None means a top-level folder."""

    folder_id: str
    name: str
    parent_id: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.folder_id, "name": self.name}
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FolderData":
        return cls(
            folder_id=data["id"],
            name=data.get("name", ""),
            parent_id=data.get("parentId"),
        )


@dataclass
class SubcircuitEntry:
    """A subcircuit as shown in the folder tree."""

    subcircuit_id: str
    name: str


@dataclass
class FolderNode:
    """
    One folder of the display tree built by FolderTree.build_tree().

    The root node has ``folder_id`` None.
    """

    folder_id: Optional[str]
    name: str
    folders: list["FolderNode"] = field(default_factory=list)
    subcircuits: list[SubcircuitEntry] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.folder_id is None

    def walk(self) -> Iterator["FolderNode"]:
        """Yield this node and every descendant folder, depth first."""
        yield self
        for child in self.folders:
            yield from child.walk()

    def find(self, folder_id: Optional[str]) -> Optional["FolderNode"]:
        for node in self.walk():
            if node.folder_id == folder_id:
                return node
        return None

    def subcircuit_ids(self) -> list[str]:
        """Return the ids of every subcircuit reachable from this node."""
        return [entry.subcircuit_id for node in self.walk() for entry in node.subcircuits]


@dataclass
class FolderTree:
    """Folders and subcircuit assignments for one scope."""

    folders: list[FolderData] = field(default_factory=list)
    subcircuit_map: dict[str, str] = field(default_factory=dict)

    # --- Queries ---

    def get_folder(self, folder_id: Optional[str]) -> Optional[FolderData]:
        for folder in self.folders:
            if folder.folder_id == folder_id:
                return folder
        return None

    def has_folder(self, folder_id: Optional[str]) -> bool:
        return self.get_folder(folder_id) is not None

    def folder_of(self, subcircuit_id: str) -> Optional[str]:
        """Return the folder holding a subcircuit, or None for root."""
        return self.subcircuit_map.get(subcircuit_id)

    def children_of(self, folder_id: Optional[str]) -> list[FolderData]:
        """Return folders that declare ``folder_id`` as their parent."""
        return [folder for folder in self.folders if folder.parent_id == folder_id]

    def subcircuits_in(self, folder_id: str) -> list[str]:
        return [sub_id for sub_id, owner in self.subcircuit_map.items() if owner == folder_id]

    def _is_ancestor(self, ancestor_id: str, folder_id: Optional[str]) -> bool:
        """Check if ``ancestor_id`` appears on the parent chain starting at ``folder_id``."""
        seen = set()
        current = folder_id
        while current is not None and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            folder = self.get_folder(current)
            current = folder.parent_id if folder else None
        return False

    def _require_folder(self, folder_id: Optional[str]) -> FolderData:
        folder = self.get_folder(folder_id)
        if folder is None:
            raise FolderOperationError(f"Folder '{folder_id}' does not exist.")
        return folder

    # --- Operations ---

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> str:
        """
        Append a new folder.

        Args:
            name: Folder name; surrounding whitespace is trimmed.
            parent_id: Parent folder, or None for a top-level folder.

        Returns:
            The new folder's id.

        Raises:
            FolderOperationError: If the name is empty or the parent is missing.
        """
        clean = _clean_name(name)
        if parent_id is not None:
            self._require_folder(parent_id)
        folder_id = generate_id()
        while self.has_folder(folder_id):
            folder_id = generate_id()
        self.folders.append(FolderData(folder_id=folder_id, name=clean, parent_id=parent_id))
        return folder_id

    def rename_folder(self, folder_id: str, new_name: str) -> bool:
        """Rename a folder. Returns False if the name was already the same."""
        clean = _clean_name(new_name)
        folder = self._require_folder(folder_id)
        if folder.name == clean:
            return False
        folder.name = clean
        return True

    def delete_folder(self, folder_id: str) -> list[str]:
        """
        Delete a folder.

        Subcircuits assigned to it go back to root. Its direct child folders
        are promoted to the deleted folder's parent.

        Returns:
            Ids of the subcircuits that were returned to root.
        """
        folder = self._require_folder(folder_id)
        released = self.subcircuits_in(folder_id)
        for child in self.children_of(folder_id):
            child.parent_id = folder.parent_id
        for sub_id in released:
            del self.subcircuit_map[sub_id]
        self.folders = [f for f in self.folders if f.folder_id != folder_id]
        return released

    def move_subcircuit(self, subcircuit_id: str, folder_id: Optional[str] = None) -> bool:
        """
        Assign a subcircuit to a folder, or to root when ``folder_id`` is None.

        Returns:
            False if the subcircuit was already there (nothing changed).

        Raises:
            FolderOperationError: If the destination folder does not exist.
        """
        if not subcircuit_id:
            raise FolderOperationError("No subcircuit given.")
        if self.subcircuit_map.get(subcircuit_id) == folder_id:
            return False
        if folder_id is None:
            del self.subcircuit_map[subcircuit_id]
            return True
        self._require_folder(folder_id)
        self.subcircuit_map[subcircuit_id] = folder_id
        return True

    def move_folder(self, folder_id: str, parent_id: Optional[str] = None) -> bool:
        """
        Re-parent a folder, or make it top-level when ``parent_id`` is None.

        Raises:
            FolderOperationError: If either folder is missing or the move
                would place a folder inside its own subtree.
        """
        folder = self._require_folder(folder_id)
        if parent_id is not None:
            self._require_folder(parent_id)
            if self._is_ancestor(folder_id, parent_id):
                raise FolderOperationError(f"Cannot move folder '{folder.name}' into itself.")
        if folder.parent_id == parent_id:
            return False
        folder.parent_id = parent_id
        return True

    # --- Display ---

    def build_tree(self, subcircuits: Mapping[str, str]) -> FolderNode:
        """
        Build the display tree.

        Args:
            subcircuits: Loaded subcircuits as ``{id: name}``, in display order.
                Map entries for ids not in here are stale and not shown.

        Folders whose parent is missing, and folders caught in a parent
        cycle, are attached directly under root so every folder and every
        subcircuit stays reachable. A subcircuit assigned to a missing folder
        is shown in root.
        """
        root = FolderNode(folder_id=None, name=ROOT_FOLDER_NAME)
        nodes = {
            folder.folder_id: FolderNode(folder_id=folder.folder_id, name=folder.name)
            for folder in self.folders
        }

        for sub_id, sub_name in subcircuits.items():
            owner = self.subcircuit_map.get(sub_id)
            target = nodes.get(owner, root) if owner is not None else root
            target.subcircuits.append(SubcircuitEntry(subcircuit_id=sub_id, name=sub_name))

        children: dict[Optional[str], list[str]] = {}
        for folder in self.folders:
            parent = folder.parent_id
            if parent is not None and (parent not in nodes or parent == folder.folder_id):
                if parent != folder.folder_id:
                    logger.debug("Folder %s has missing parent %s; showing it at root", folder.folder_id, parent)
                parent = None
            children.setdefault(parent, []).append(folder.folder_id)

        attached = set()

        def attach(parent_node: FolderNode, folder_id: str) -> None:
            attached.add(folder_id)
            child = nodes[folder_id]
            parent_node.folders.append(child)
            for grandchild in children.get(folder_id, []):
                if grandchild not in attached:
                    attach(child, grandchild)

        for folder_id in children.get(None, []):
            attach(root, folder_id)
        for folder in self.folders:
            if folder.folder_id not in attached:
                logger.warning("Folder %s is part of a parent cycle; showing it at root", folder.folder_id)
                attach(root, folder.folder_id)
        return root

    # --- Serialization ---

    def to_dict(self) -> dict:
        return {
            "folders": [folder.to_dict() for folder in self.folders],
            "subcircuitMap": dict(self.subcircuit_map),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FolderTree":
        """
        Restore from a scope document's ``folders`` and ``subcircuitMap`` fields.

        Folder records without an id are skipped; map entries pointing at
        nothing (None) mean root and are dropped.
        """
        tree = cls()
        for record in data.get("folders") or []:
            if not isinstance(record, dict) or not record.get("id"):
                logger.warning("Skipping invalid folder record: %r", record)
                continue
            tree.folders.append(FolderData.from_dict(record))
        for sub_id, folder_id in (data.get("subcircuitMap") or {}).items():
            if folder_id is not None:
                tree.subcircuit_map[sub_id] = folder_id
        return tree
