"""
NodeRegistry - Restores a scope's nodes and their connections from a document.

This module contains no Qt dependencies. Saved elements refer to nodes by
their index in the scope document's ``allNodes`` array. The registry builds
one live node per record, keeps a snapshot of them in document order so
those indices stay valid while nodes are deleted from the scope, and hands
them to elements as they are restored.
"""

import logging

from models.errors import CorruptDocumentError
from models.node import NODE_INTERMEDIATE, Node
from models.scope import Scope

logger = logging.getLogger(__name__)


class NodeRegistry:
    """
    Index-addressed view of the nodes loaded into one scope.

    Usage:
        registry = NodeRegistry(scope)
        registry.load_nodes(data["allNodes"])
        registry.construct_connections(data["allNodes"])
        ...
        registry.remove_bug_nodes()
    """

    def __init__(self, scope: Scope):
        self.scope = scope
        self._loaded: list[Node] = []

    def __len__(self) -> int:
        return len(self._loaded)

    @property
    def loaded_nodes(self) -> list[Node]:
        return list(self._loaded)

    def load_node(self, data: dict) -> Node:
        """
        Create a node from one record, parented to the scope root.

        Connections are restored separately by construct_connections().
        """
        node = Node(
            data.get("x", 0),
            data.get("y", 0),
            data.get("type", NODE_INTERMEDIATE),
            self.scope.root,
            data.get("bitWidth") or 1,
            data.get("label", ""),
        )
        self._loaded.append(node)
        return node

    def load_nodes(self, node_docs: list[dict]) -> list[Node]:
        """Create one node per record, in array order."""
        for data in node_docs:
            self.load_node(data)
        logger.debug("Loaded %d nodes into scope %s", len(node_docs), self.scope.name)
        return self.loaded_nodes

    def construct_connections(self, node_docs: list[dict]) -> int:
        """
        Connect every loaded node to the nodes its record lists.

        Each pair is connected once even when both records list each other.

        Returns:
            The number of wires created.

        Raises:
            CorruptDocumentError: If a connection index is out of range.
        """
        created = 0
        for index, data in enumerate(node_docs):
            node = self.resolve(index)
            for other_index in data.get("connections", []):
                if node.connect(self.resolve(other_index)) is not None:
                    created += 1
        return created

    def resolve(self, index: int) -> Node:
        """
        Return the live node for a document index.

        Raises:
            CorruptDocumentError: If the index does not name a loaded node.
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._loaded):
            raise CorruptDocumentError(
                f"Node index {index!r} is out of range for scope '{self.scope.name}' "
                f"({len(self._loaded)} nodes)."
            )
        return self._loaded[index]

    def replace(self, node: Node, index: int) -> Node:
        """
        Swap a freshly constructed element node for the loaded node at ``index``.

        An index of -1 means the element's node was never saved, so the
        fresh node is kept. Otherwise the fresh node is deleted and the loaded
        node is adopted by the fresh node's parent.

        Returns:
            The node the element should hold.
        """
        if index == -1:
            return node
        loaded = self.resolve(index)
        if loaded is node:
            return node
        parent = node.parent
        node.delete()
        loaded.detach_from_parent()
        loaded.parent = parent
        parent.node_list.append(loaded)
        loaded.refresh_rotation()
        return loaded

    def claim(self, index: int, parent) -> Node:
        """Hand the loaded node at ``index`` to an element that builds no nodes of its own."""
        node = self.resolve(index)
        node.detach_from_parent()
        node.parent = parent
        parent.node_list.append(node)
        node.refresh_rotation()
        return node

    def remove_bug_nodes(self) -> int:
        """
        Delete input/output nodes that no element claimed.

        Such nodes are still parented to the scope root. The scan restarts
        after every deletion and ends once a full pass deletes nothing.

        Returns:
            The number of nodes deleted.
        """
        removed = 0
        found = True
        while found:
            found = False
            for node in self.scope.all_nodes:
                if node.is_orphaned_port:
                    logger.warning(
                        "Removing orphaned %s node at (%s, %s) in scope %s",
                        "output" if node.node_type else "input",
                        node.left_x,
                        node.left_y,
                        self.scope.name,
                    )
                    node.delete()
                    removed += 1
                    found = True
                    break
        return removed
