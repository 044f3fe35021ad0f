"""
CircuitElement - Base class for every placeable circuit element.

This module contains no Qt dependencies. Each element type declares, as
class attributes, which of its attributes hold nodes (``node_fields``) and
which scalar values a saved document may override (``value_fields``). Both
map the document's field name onto the Python attribute name, and together
they form the allow-list used when restoring saved elements.
"""

from typing import TYPE_CHECKING, Optional, Union

from .direction import normalize_direction, opposite_direction
from .node import NODE_INPUT, Node

if TYPE_CHECKING:
    from .scope import Scope

DEFAULT_PROPAGATION_DELAY = 10


class CircuitElement:
    """
    Base element: a position, an orientation, a label and owned nodes.

    Constructing a tracked element registers it in its scope's per-type list.
    """

    object_type = "CircuitElement"
    tracked = True
    default_propagation_delay = DEFAULT_PROPAGATION_DELAY
    # Elements whose drawing does not rotate always face RIGHT
    direction_fixed = False
    node_fields: dict[str, str] = {}
    value_fields: dict[str, str] = {}

    def __init__(self, x: float, y: float, scope: "Scope", direction: str = "RIGHT", bit_width: int = 1):
        self.x = x
        self.y = y
        self.scope = scope
        self.direction = direction
        self.bit_width = bit_width
        self.label = ""
        self.label_direction = opposite_direction(direction)
        self.propagation_delay = self.default_propagation_delay
        self.node_list: list[Node] = []
        self.subcircuit_metadata: Optional[dict] = None
        if self.tracked:
            scope.add_element(self)

    def make_node(self, x: float, y: float, node_type: int = NODE_INPUT, bit_width: Optional[int] = None) -> Node:
        """Create a node owned by this element."""
        return Node(x, y, node_type, self, bit_width if bit_width is not None else self.bit_width)

    def fix_direction(self) -> None:
        """
        Normalize orientation after a load.

        Legacy direction tokens become canonical names, direction-fixed
        elements are forced to face RIGHT, and owned nodes are re-rotated.
        """
        self.direction = normalize_direction(self.direction)
        self.label_direction = normalize_direction(self.label_direction)
        if self.direction_fixed:
            self.direction = "RIGHT"
        for node in self.node_list:
            node.refresh_rotation()

    # --- Saved-document restore hooks ---

    def get_node_field(self, name: str) -> Union[Node, list[Node]]:
        """Return the node (or node list) stored under a document field name."""
        return getattr(self, self.node_fields[name])

    def set_node_field(self, name: str, value: Union[Node, list[Node]]) -> None:
        setattr(self, self.node_fields[name], value)

    def restore_value(self, name: str, value) -> bool:
        """
        Apply a saved value override if the field is on the allow-list.

        Returns:
            True if the value was applied, False if the field is not restorable.
        """
        attribute = self.value_fields.get(name)
        if attribute is None:
            return False
        setattr(self, attribute, value)
        return True

    def nodes(self) -> list[Node]:
        """Return a copy of the nodes owned by this element."""
        return list(self.node_list)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(x={self.x}, y={self.y}, dir={self.direction!r}, label={self.label!r})"


class ScopeRoot(CircuitElement):
    """
    Placeholder parent for intermediate nodes and not-yet-claimed nodes.

    Not tracked in the scope's element lists.
    """

    tracked = False
