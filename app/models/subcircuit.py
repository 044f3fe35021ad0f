"""
SubCircuit - An element that instantiates another scope as a block.

This module contains no Qt dependencies. The block's pins are the nodes
listed in the saved record; their positions come from the layout pins of
the referenced circuit's Input and Output elements.
"""

import logging
from typing import TYPE_CHECKING

from .element import CircuitElement
from .node import Node

if TYPE_CHECKING:
    from .scope import Scope

logger = logging.getLogger(__name__)


class SubCircuit(CircuitElement):
    """A block standing in for a whole child circuit."""

    object_type = "SubCircuit"
    direction_fixed = True
    node_fields = {"inputNodes": "input_nodes", "outputNodes": "output_nodes"}

    def __init__(self, x, y, scope: "Scope", child_scope: "Scope", direction="RIGHT"):
        super().__init__(x, y, scope, direction, 1)
        self.child_scope = child_scope
        self.input_nodes: list[Node] = []
        self.output_nodes: list[Node] = []

    @property
    def child_scope_id(self) -> str:
        return self.child_scope.scope_id

    def attach_pins(self, input_nodes: list[Node], output_nodes: list[Node]) -> None:
        """
        Take ownership of the pin nodes and move them onto the layout pins.

        Pins beyond the child circuit's Input/Output count keep their saved
        offsets.
        """
        self.input_nodes = list(input_nodes)
        self.output_nodes = list(output_nodes)
        self._place(self.input_nodes, self.child_scope.elements_of("Input"), "input")
        self._place(self.output_nodes, self.child_scope.elements_of("Output"), "output")

    def _place(self, nodes: list[Node], ports: list, kind: str) -> None:
        if len(nodes) != len(ports):
            logger.warning(
                "Subcircuit '%s' has %d %s pins but circuit '%s' has %d",
                self.label or self.child_scope.name,
                len(nodes),
                kind,
                self.child_scope.name,
                len(ports),
            )
        for node, port in zip(nodes, ports):
            props = port.layout_properties or {}
            node.left_x = props.get("x", node.left_x)
            node.left_y = props.get("y", node.left_y)
            node.refresh_rotation()

    def layout_size(self) -> tuple[float, float]:
        """Return the (width, height) of the block from the child circuit's layout."""
        return (self.child_scope.layout.width, self.child_scope.layout.height)
