"""
Node - Pure Python data model for connection points.

This module contains no Qt dependencies. A node is owned by exactly one
parent element (the scope's root placeholder for free-standing intermediate
nodes) and keeps the list of nodes it is wired to.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .direction import rotate
from .wire import Wire

if TYPE_CHECKING:
    from .element import CircuitElement
    from .scope import Scope

NODE_INPUT = 0
NODE_OUTPUT = 1
NODE_INTERMEDIATE = 2


def _discard(items: list, item) -> None:
    """Remove ``item`` from ``items`` by identity if present."""
    for i, existing in enumerate(items):
        if existing is item:
            del items[i]
            return


@dataclass(eq=False)
class Node:
    """
    A connection point on an element or a free-standing wire bend.

    ``left_x``/``left_y`` hold the offset as drawn for a RIGHT-facing parent;
    ``x``/``y`` hold the offset after rotating by the parent's direction.
    Creating a node registers it with the parent and the parent's scope.
    """

    left_x: float
    left_y: float
    node_type: int
    parent: "CircuitElement"
    bit_width: int = 1
    label: str = ""
    connections: list["Node"] = field(default_factory=list)
    x: float = field(init=False, default=0.0)
    y: float = field(init=False, default=0.0)
    deleted: bool = field(init=False, default=False)

    def __post_init__(self):
        """Rotate into place and register with the parent and scope."""
        self.refresh_rotation()
        scope = self.scope
        scope.all_nodes.append(self)
        if self.node_type == NODE_INTERMEDIATE:
            scope.nodes.append(self)
        self.parent.node_list.append(self)

    @property
    def scope(self) -> "Scope":
        return self.parent.scope

    @property
    def is_intermediate(self) -> bool:
        return self.node_type == NODE_INTERMEDIATE

    @property
    def is_orphaned_port(self) -> bool:
        """True for an input/output node that no concrete element has claimed."""
        return not self.is_intermediate and self.parent is self.scope.root

    def refresh_rotation(self) -> None:
        """Recompute the rotated offset from the parent's direction."""
        self.x, self.y = rotate(self.left_x, self.left_y, self.parent.direction)

    def abs_x(self) -> float:
        return self.parent.x + self.x

    def abs_y(self) -> float:
        return self.parent.y + self.y

    def is_connected_to(self, other: "Node") -> bool:
        return any(node is other for node in self.connections)

    def connect(self, other: "Node") -> Optional[Wire]:
        """
        Connect this node to another with a new wire.

        Returns:
            The new Wire, or None if the nodes were already connected.
        """
        if other is self or self.is_connected_to(other):
            return None
        self.connections.append(other)
        other.connections.append(self)
        return Wire(self, other, self.scope)

    def disconnect(self, other: "Node") -> None:
        """Remove the connection (and wire) between this node and another."""
        _discard(self.connections, other)
        _discard(other.connections, self)
        for wire in list(self.scope.wires):
            if wire.joins(self, other):
                wire.delete()

    def detach_from_parent(self) -> None:
        """Remove this node from its current parent's node list."""
        _discard(self.parent.node_list, self)

    def delete(self) -> None:
        """
        Remove the node from its scope, its parent and every neighbour.

        Wires attached to the node are deleted with it.
        """
        self.deleted = True
        scope = self.scope
        _discard(scope.all_nodes, self)
        _discard(scope.nodes, self)
        self.detach_from_parent()
        for wire in list(scope.wires):
            if wire.touches(self):
                wire.delete()
        for other in list(self.connections):
            _discard(other.connections, self)
        self.connections.clear()

    def __repr__(self) -> str:
        return (
            f"Node(type={self.node_type}, at=({self.left_x}, {self.left_y}), "
            f"parent={self.parent.object_type}, connections={len(self.connections)})"
        )
