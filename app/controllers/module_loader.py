"""
Element restore - Rebuilds single elements from saved element records.

This module contains no Qt dependencies. load_module() handles every
element type except SubCircuit, whose pins come from another scope and are
restored by load_subcircuit().

An element record looks like::

    {
        "objectType": "AndGate", "x": 100, "y": 40,
        "label": "", "labelDirection": "LEFT", "propagationDelay": 10,
        "customData": {
            "constructorParamaters": ["RIGHT", 2, 1],
            "values": {"inputSize": 2},
            "nodes": {"inp": [0, 1], "output1": 2},
        },
    }
"""

import logging
from typing import Optional

from models.direction import normalize_direction, opposite_direction
from models.element import CircuitElement
from models.errors import CorruptDocumentError, SubcircuitReferenceError
from models.project import ProjectSession
from models.registry import ElementRegistry, default_registry
from models.scope import Scope
from models.subcircuit import SubCircuit

from .node_registry import NodeRegistry

logger = logging.getLogger(__name__)

# Retired type tags and the types that replaced them
RECTIFY_OBJECT_TYPE = {
    "FlipFlop": "DflipFlop",
    "Ram": "Rom",
}


def rectify_object_type(object_type: str) -> str:
    """Map a retired type tag onto its current equivalent."""
    return RECTIFY_OBJECT_TYPE.get(object_type, object_type)


def _restore_delay(element: CircuitElement, delay) -> None:
    # An explicit numeric 0 is kept; any other falsy value means "use the default"
    if isinstance(delay, (int, float)) and not isinstance(delay, bool) and delay == 0:
        element.propagation_delay = 0
    elif delay:
        element.propagation_delay = delay


def _restore_common(element: CircuitElement, data: dict) -> None:
    """Restore label, label direction and delay, then normalize orientation."""
    element.label = data.get("label") or ""
    element.label_direction = data.get("labelDirection") or opposite_direction(
        normalize_direction(element.direction)
    )
    _restore_delay(element, data.get("propagationDelay"))
    element.fix_direction()


def _restore_values(element: CircuitElement, values: dict) -> None:
    for name, value in values.items():
        if not element.restore_value(name, value):
            logger.warning("Ignoring unknown value '%s' on %s", name, element.object_type)


def _restore_nodes(element: CircuitElement, node_refs: dict, nodes: NodeRegistry) -> None:
    """Swap the element's fresh nodes for the loaded ones named in the record."""
    for name, ref in node_refs.items():
        if name not in element.node_fields:
            raise CorruptDocumentError(f"{element.object_type} has no node field '{name}'.")
        current = element.get_node_field(name)
        if isinstance(ref, list):
            if not isinstance(current, list):
                raise CorruptDocumentError(f"{element.object_type}.{name} holds a single node, not a list.")
            if len(ref) > len(current):
                raise CorruptDocumentError(
                    f"{element.object_type}.{name} lists {len(ref)} nodes but the element has {len(current)}."
                )
            for i, index in enumerate(ref):
                current[i] = nodes.replace(current[i], index)
        else:
            if isinstance(current, list):
                raise CorruptDocumentError(f"{element.object_type}.{name} holds a list of nodes.")
            element.set_node_field(name, nodes.replace(current, ref))


def load_module(
    data: dict,
    scope: Scope,
    nodes: NodeRegistry,
    registry: Optional[ElementRegistry] = None,
    default_type: Optional[str] = None,
) -> CircuitElement:
    """
    Construct one element from its saved record.

    Args:
        data: The element record.
        scope: Scope the element is created in.
        nodes: Registry holding the scope's loaded nodes.
        registry: Element types to construct from. Defaults to every built-in type.
        default_type: Tag to use when the record has no ``objectType``
            (records are stored under their type's key in the scope document).

    Returns:
        The restored element.

    Raises:
        UnknownElementTypeError: If the type tag is not registered.
        CorruptDocumentError: If the record names an unknown node field or
            references a node index that was not loaded.
    """
    registry = registry or default_registry
    object_type = rectify_object_type(data.get("objectType") or default_type)
    cls = registry.get(object_type)
    custom = data.get("customData") or {}
    params = custom.get("constructorParamaters") or []

    try:
        element = cls(data.get("x", 0), data.get("y", 0), scope, *params)
    except TypeError as e:
        raise CorruptDocumentError(f"Cannot construct {object_type} from parameters {params!r}: {e}") from e

    _restore_common(element, data)
    _restore_values(element, custom.get("values") or {})
    _restore_nodes(element, custom.get("nodes") or {}, nodes)
    if data.get("subcircuitMetadata"):
        element.subcircuit_metadata = data["subcircuitMetadata"]

    logger.debug("Restored %r", element)
    return element


def load_subcircuit(data: dict, scope: Scope, nodes: NodeRegistry, session: ProjectSession) -> SubCircuit:
    """
    Construct a subcircuit block from its saved record.

    The referenced circuit must already be loaded into the session. The
    block's pins are the loaded nodes listed in ``inputNodes`` and
    ``outputNodes``.

    Raises:
        SubcircuitReferenceError: If the referenced circuit is not loaded.
        CorruptDocumentError: If a pin index was not loaded.
    """
    child_id = data.get("id")
    child = session.get_scope(child_id) if child_id else None
    if child is None or child is scope:
        raise SubcircuitReferenceError(child_id)

    element = SubCircuit(data.get("x", 0), data.get("y", 0), scope, child)
    input_nodes = [nodes.claim(index, element) for index in data.get("inputNodes", [])]
    output_nodes = [nodes.claim(index, element) for index in data.get("outputNodes", [])]
    element.attach_pins(input_nodes, output_nodes)

    _restore_common(element, data)
    if data.get("subcircuitMetadata"):
        element.subcircuit_metadata = data["subcircuitMetadata"]

    logger.debug("Restored subcircuit of %s in %s", child.name, scope.name)
    return element
