"""
Pure Python data models for the logic circuit editor.

This package contains Qt-free data classes that represent circuits, their
elements and the subcircuit folder tree. All models use only Python
standard library types (no PyQt6 dependencies).
"""

from .element import CircuitElement, ScopeRoot
from .errors import CorruptDocumentError, SubcircuitReferenceError, UnknownElementTypeError
from .folder import FolderData, FolderNode, FolderOperationError, FolderTree, SubcircuitEntry
from .node import NODE_INPUT, NODE_INTERMEDIATE, NODE_OUTPUT, Node
from .project import DEFAULT_CLOCK_PERIOD, DEFAULT_PROJECT_NAME, ProjectSession
from .registry import MODULE_LIST, ElementRegistry, default_registry
from .scope import LayoutData, Scope, TestbenchData
from .subcircuit import SubCircuit
from .wire import Wire

__all__ = [
    "CircuitElement",
    "ScopeRoot",
    "CorruptDocumentError",
    "SubcircuitReferenceError",
    "UnknownElementTypeError",
    "FolderData",
    "FolderNode",
    "FolderOperationError",
    "FolderTree",
    "SubcircuitEntry",
    "NODE_INPUT",
    "NODE_OUTPUT",
    "NODE_INTERMEDIATE",
    "Node",
    "DEFAULT_CLOCK_PERIOD",
    "DEFAULT_PROJECT_NAME",
    "ProjectSession",
    "MODULE_LIST",
    "ElementRegistry",
    "default_registry",
    "LayoutData",
    "Scope",
    "TestbenchData",
    "SubCircuit",
    "Wire",
]
