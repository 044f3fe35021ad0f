"""
Controllers for the logic circuit editor.

This package contains Qt-free controller classes that restore saved
projects and manage the subcircuit folder tree, notifying views through an
observer pattern.
"""

from .collaborators import BackupScheduler, SimulationTrigger
from .folder_controller import FolderController
from .module_loader import load_module, load_subcircuit, rectify_object_type
from .node_registry import NodeRegistry
from .project_loader import ProjectLoader
from .scope_loader import load_scope

__all__ = [
    "BackupScheduler",
    "SimulationTrigger",
    "FolderController",
    "load_module",
    "load_subcircuit",
    "rectify_object_type",
    "NodeRegistry",
    "ProjectLoader",
    "load_scope",
]
