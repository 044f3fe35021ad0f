"""
Wire - Pure Python data model for a connection between two nodes.

This module contains no Qt dependencies. Endpoint coordinates are derived
from the nodes and refreshed with update_data() once every element of the
scope has been placed.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .node import Node
    from .scope import Scope


@dataclass(eq=False)
class Wire:
    """
    A straight segment joining two nodes.

    Creating a wire appends it to the scope's wire list.
    """

    node1: "Node"
    node2: "Node"
    scope: "Scope"

    x1: float = field(init=False, default=0.0)
    y1: float = field(init=False, default=0.0)
    x2: float = field(init=False, default=0.0)
    y2: float = field(init=False, default=0.0)
    orientation: str = field(init=False, default="diagonal")

    def __post_init__(self):
        self.scope.wires.append(self)
        self.update_data()

    def update_data(self, scope: Optional["Scope"] = None) -> None:
        """Recompute endpoint coordinates and orientation from the nodes."""
        if scope is not None:
            self.scope = scope
        self.x1 = self.node1.abs_x()
        self.y1 = self.node1.abs_y()
        self.x2 = self.node2.abs_x()
        self.y2 = self.node2.abs_y()
        if self.x1 == self.x2:
            self.orientation = "vertical"
        elif self.y1 == self.y2:
            self.orientation = "horizontal"
        else:
            self.orientation = "diagonal"

    def touches(self, node: "Node") -> bool:
        """Check if the node is one of this wire's endpoints."""
        return self.node1 is node or self.node2 is node

    def joins(self, a: "Node", b: "Node") -> bool:
        """Check if this wire runs between the two given nodes."""
        return (self.node1 is a and self.node2 is b) or (self.node1 is b and self.node2 is a)

    def delete(self) -> None:
        """Remove the wire from its scope and unlink its endpoints."""
        for i, wire in enumerate(self.scope.wires):
            if wire is self:
                del self.scope.wires[i]
                break
        for a, b in ((self.node1, self.node2), (self.node2, self.node1)):
            for i, node in enumerate(a.connections):
                if node is b:
                    del a.connections[i]
                    break

    def __repr__(self) -> str:
        return f"Wire(({self.x1}, {self.y1}) -> ({self.x2}, {self.y2}), {self.orientation})"
