"""
ElementRegistry - Closed mapping from type tags to element classes.

MODULE_LIST is the fixed order in which a scope's element records are
loaded. Inputs and outputs come first so layout pins exist before anything
refers to them, and SubCircuit comes last.
"""

import logging
from typing import Iterable, Optional

from .element import CircuitElement
from .elements import ELEMENT_CLASSES
from .errors import UnknownElementTypeError
from .subcircuit import SubCircuit

logger = logging.getLogger(__name__)

MODULE_LIST = (
    "Input",
    "Output",
    "ConstantVal",
    "Clock",
    "NotGate",
    "Buffer",
    "TriState",
    "AndGate",
    "OrGate",
    "NandGate",
    "NorGate",
    "XorGate",
    "XnorGate",
    "Multiplexer",
    "Splitter",
    "Tunnel",
    "DflipFlop",
    "TflipFlop",
    "JKflipFlop",
    "SRflipFlop",
    "Rom",
    "RAM",
    "Text",
    "SubCircuit",
)


class ElementRegistry:
    """
    Registry of constructible element types keyed by object type tag.

    Tags are enumerated in MODULE_LIST order first, then in the order any
    extra types were registered.
    """

    def __init__(self, element_classes: Optional[Iterable[type[CircuitElement]]] = None):
        self._types: dict[str, type[CircuitElement]] = {}
        if element_classes is None:
            element_classes = (*ELEMENT_CLASSES, SubCircuit)
        for cls in element_classes:
            self.register(cls)

    def register(self, cls: type[CircuitElement]) -> type[CircuitElement]:
        """Register an element class under its object_type. Usable as a decorator."""
        tag = cls.object_type
        if tag in self._types and self._types[tag] is not cls:
            logger.warning("Overwriting element type '%s'", tag)
        self._types[tag] = cls
        return cls

    def get(self, object_type: str) -> type[CircuitElement]:
        """
        Return the element class for a tag.

        Raises:
            UnknownElementTypeError: If no class is registered under the tag.
        """
        try:
            return self._types[object_type]
        except KeyError:
            raise UnknownElementTypeError(object_type) from None

    def __contains__(self, object_type: str) -> bool:
        return object_type in self._types

    @property
    def module_list(self) -> tuple[str, ...]:
        known = tuple(tag for tag in MODULE_LIST if tag in self._types)
        extra = tuple(tag for tag in self._types if tag not in MODULE_LIST)
        return known + extra


default_registry = ElementRegistry()
