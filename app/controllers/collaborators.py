"""
Simulation and backup hooks used by the loaders and the folder controller.

This module contains no Qt dependencies. The simulation engine itself lives
elsewhere; SimulationTrigger only records which scopes were handed to it so
the loaders can request a pass without knowing how propagation works.
BackupScheduler keeps a bounded history of scope snapshots and optionally
hands each one to a persistence callback.
"""

import logging
from collections import deque
from typing import Any, Callable, Optional

from models.scope import Scope

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_DEPTH = 100


class SimulationTrigger:
    """Requests simulation passes for a scope."""

    def __init__(self, on_update: Optional[Callable[[Scope, bool], None]] = None):
        self._on_update = on_update
        self.pass_count = 0
        self.last_scope: Optional[Scope] = None

    def update(self, scope: Scope, force: bool = False) -> None:
        """Run (or schedule) one simulation pass over the scope."""
        self.pass_count += 1
        self.last_scope = scope
        logger.debug("Simulation pass %d for %s (force=%s)", self.pass_count, scope.name, force)
        if self._on_update is not None:
            self._on_update(scope, force)


def snapshot_scope(scope: Scope) -> dict[str, Any]:
    """Summarize the parts of a scope that a backup needs to restore it."""
    return {
        "id": scope.scope_id,
        "name": scope.name,
        "nodes": len(scope.all_nodes),
        "wires": len(scope.wires),
        "elements": scope.element_counts(),
        "layout": scope.layout.to_dict(),
        **scope.folder_tree.to_dict(),
    }


class BackupScheduler:
    """
    Bounded history of scope snapshots.

    Args:
        max_depth: Number of snapshots to keep; the oldest are dropped first.
        persist: Optional callback receiving each snapshot as it is taken.
    """

    def __init__(self, max_depth: int = DEFAULT_BACKUP_DEPTH, persist: Optional[Callable[[dict], None]] = None):
        self.history: deque[dict] = deque(maxlen=max_depth)
        self._persist = persist

    def __len__(self) -> int:
        return len(self.history)

    def schedule(self, scope: Scope) -> dict:
        """Take a snapshot of the scope now."""
        snapshot = snapshot_scope(scope)
        self.history.append(snapshot)
        if self._persist is not None:
            try:
                self._persist(snapshot)
            except OSError as e:
                logger.warning("Could not persist backup of %s: %s", scope.name, e)
        return snapshot

    def latest(self) -> Optional[dict]:
        return self.history[-1] if self.history else None
