"""
Scope - Pure Python data model for one circuit definition.

This module contains no Qt dependencies. A scope owns its nodes, wires,
per-type element lists, subcircuit layout, folder tree and the root
placeholder element that parents free-standing nodes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .element import CircuitElement, ScopeRoot
from .folder import FolderTree
from .identifiers import generate_id
from .node import Node
from .wire import Wire

logger = logging.getLogger(__name__)

DEFAULT_SCOPE_NAME = "Untitled"

LAYOUT_WIDTH = 100
LAYOUT_PIN_PITCH = 20
LAYOUT_MARGIN = 20
LAYOUT_TITLE_X = 50
LAYOUT_TITLE_Y = 13


@dataclass
class LayoutData:
    """
    Geometry of the block drawn when the scope is used as a subcircuit.

    ``title_enabled`` is None for a synthesized layout until the loader
    settles it, or when a document stored the flag as null.
    """

    width: float = LAYOUT_WIDTH
    height: float = LAYOUT_PIN_PITCH + LAYOUT_MARGIN
    title_x: float = LAYOUT_TITLE_X
    title_y: float = LAYOUT_TITLE_Y
    title_enabled: Optional[bool] = True
    extra: dict = field(default_factory=dict)

    _KEYS = ("width", "height", "title_x", "title_y", "titleEnabled")

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data.update(
            {
                "width": self.width,
                "height": self.height,
                "title_x": self.title_x,
                "title_y": self.title_y,
                "titleEnabled": self.title_enabled,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LayoutData":
        """Adopt a stored layout record as-is; unknown keys are kept in ``extra``."""
        return cls(
            width=data.get("width", LAYOUT_WIDTH),
            height=data.get("height", LAYOUT_PIN_PITCH + LAYOUT_MARGIN),
            title_x=data.get("title_x", LAYOUT_TITLE_X),
            title_y=data.get("title_y", LAYOUT_TITLE_Y),
            title_enabled=data.get("titleEnabled"),
            extra={k: v for k, v in data.items() if k not in cls._KEYS},
        )


@dataclass
class TestbenchData:
    """Testbench attached to a scope: the test data and the selected case."""

    __test__ = False

    test_data: Any
    current_group: int = 0
    current_case: int = 0

    def to_dict(self) -> dict:
        return {
            "testData": self.test_data,
            "currentGroup": self.current_group,
            "currentCase": self.current_case,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TestbenchData":
        return cls(
            test_data=data.get("testData"),
            current_group=data.get("currentGroup", 0),
            current_case=data.get("currentCase", 0),
        )


@dataclass(eq=False)
class Scope:
    """
    One circuit definition.

    Attributes:
        all_nodes: Every node in the scope, in creation order.
        nodes: Intermediate nodes only.
        elements: Element lists keyed by object type tag.
        root: Placeholder element parenting intermediate and unclaimed nodes.
    """

    name: str = DEFAULT_SCOPE_NAME
    scope_id: str = field(default_factory=generate_id)
    is_verilog: bool = False
    is_main: bool = False
    all_nodes: list[Node] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)
    wires: list[Wire] = field(default_factory=list)
    elements: dict[str, list[CircuitElement]] = field(default_factory=dict)
    layout: LayoutData = field(default_factory=LayoutData)
    folder_tree: FolderTree = field(default_factory=FolderTree)
    verilog_metadata: Optional[dict] = None
    testbench_data: Optional[TestbenchData] = None
    restricted_elements_used: list[str] = field(default_factory=list)
    root: CircuitElement = field(init=False, repr=False)

    def __post_init__(self):
        self.root = ScopeRoot(0, 0, self)

    def add_element(self, element: CircuitElement) -> None:
        self.elements.setdefault(element.object_type, []).append(element)

    def elements_of(self, object_type: str) -> list[CircuitElement]:
        """Return the elements of one type, in load order."""
        return self.elements.get(object_type, [])

    def all_elements(self) -> list[CircuitElement]:
        return [element for elements in self.elements.values() for element in elements]

    def element_counts(self) -> dict[str, int]:
        """Return ``{object_type: count}`` for every non-empty element list."""
        return {tag: len(items) for tag, items in self.elements.items() if items}

    def subcircuits(self) -> list[CircuitElement]:
        return self.elements_of("SubCircuit")

    def __repr__(self) -> str:
        return f"Scope(name={self.name!r}, id={self.scope_id!r}, nodes={len(self.all_nodes)}, wires={len(self.wires)})"
