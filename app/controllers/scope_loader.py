"""
Scope restore - Rebuilds one circuit scope from its saved document.

This module contains no Qt dependencies. load_scope() runs the restore
steps in a fixed order: nodes, connections, elements (in MODULE_LIST
order), wire geometry, orphan cleanup, metadata, layout, title flag and
finally the subcircuit folder tree. Every element refers to nodes by their
index in ``allNodes``, so nodes must exist before any element is built.
"""

import logging
from typing import Optional

from models.folder import FolderTree
from models.identifiers import generate_id
from models.project import ProjectSession
from models.registry import ElementRegistry, default_registry
from models.scope import (
    LAYOUT_MARGIN,
    LAYOUT_PIN_PITCH,
    LAYOUT_TITLE_X,
    LAYOUT_TITLE_Y,
    LAYOUT_WIDTH,
    LayoutData,
    Scope,
    TestbenchData,
)

from .module_loader import load_module, load_subcircuit
from .node_registry import NodeRegistry

logger = logging.getLogger(__name__)


def pin_y(height: float, count: int, index: int) -> float:
    """Vertical position of pin ``index`` of ``count`` pins spread evenly over ``height``."""
    return height / 2 - count * 10 + 20 * index + 10


def synthesize_layout(input_count: int, output_count: int) -> LayoutData:
    """Build the default layout for a scope saved without one."""
    return LayoutData(
        width=LAYOUT_WIDTH,
        height=max(input_count, output_count) * LAYOUT_PIN_PITCH + LAYOUT_MARGIN,
        title_x=LAYOUT_TITLE_X,
        title_y=LAYOUT_TITLE_Y,
        title_enabled=None,
    )


def apply_default_layout(scope: Scope) -> LayoutData:
    """
    Give a scope the default layout and place every input and output pin on it.

    Inputs go on the left edge and outputs on the right edge; each pin gets
    a fresh layout id.
    """
    inputs = scope.elements_of("Input")
    outputs = scope.elements_of("Output")
    layout = synthesize_layout(len(inputs), len(outputs))
    scope.layout = layout
    for i, element in enumerate(inputs):
        element.layout_properties = {"x": 0, "y": pin_y(layout.height, len(inputs), i), "id": generate_id()}
    for i, element in enumerate(outputs):
        element.layout_properties = {
            "x": layout.width,
            "y": pin_y(layout.height, len(outputs), i),
            "id": generate_id(),
        }
    return layout


def load_scope(
    scope: Scope,
    data: dict,
    session: ProjectSession,
    registry: Optional[ElementRegistry] = None,
) -> Scope:
    """
    Restore a scope's contents from its saved document.

    Args:
        scope: Empty scope created for this document.
        data: The scope document.
        session: Open project, used to resolve subcircuit references.
        registry: Element types to construct from. Defaults to every built-in type.

    Returns:
        The same scope, now populated.

    Raises:
        CorruptDocumentError: If the document cannot be restored consistently.
    """
    registry = registry or default_registry
    node_docs = data.get("allNodes") or []

    # Nodes, then the connections between them
    nodes = NodeRegistry(scope)
    nodes.load_nodes(node_docs)
    nodes.construct_connections(node_docs)

    # Elements, in load order
    for object_type in registry.module_list:
        records = data.get(object_type)
        if not records:
            continue
        for record in records:
            if object_type == "SubCircuit":
                load_subcircuit(record, scope, nodes, session)
            else:
                load_module(record, scope, nodes, registry, default_type=object_type)

    for wire in scope.wires:
        wire.update_data(scope)

    removed = nodes.remove_bug_nodes()
    if removed:
        logger.warning("Removed %d orphaned nodes from scope %s", removed, scope.name)

    if data.get("verilogMetadata"):
        scope.verilog_metadata = data["verilogMetadata"]
    if data.get("testbenchData"):
        scope.testbench_data = TestbenchData.from_dict(data["testbenchData"])
    scope.restricted_elements_used = list(data.get("restrictedCircuitElementsUsed") or [])

    layout_doc = data.get("layout")
    if layout_doc is not None:
        scope.layout = LayoutData.from_dict(layout_doc)
    else:
        apply_default_layout(scope)
    # An explicit null flag is kept; only an absent one defaults to visible
    if layout_doc is None or "titleEnabled" not in layout_doc:
        scope.layout.title_enabled = True

    scope.folder_tree = FolderTree.from_dict(data)

    logger.info(
        "Loaded scope %s: %d nodes, %d wires, %d elements",
        scope.name,
        len(scope.all_nodes),
        len(scope.wires),
        sum(scope.element_counts().values()),
    )
    return scope
