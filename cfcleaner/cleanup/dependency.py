"""Dependency graph construction and deletion ordering.

Used to order identity groups so that a group is deleted only after every
fixture group it lists as a member.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable

from ..models.resource import ResourceRecord

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Dependency graph with Kahn's-algorithm deletion ordering.

    ``add_dependency(parent, child)`` means the child must be deleted before
    the parent. The graph maps each child to the set of parents waiting on it.

    Attributes:
        graph: child id -> set of parent ids
    """

    def __init__(self) -> None:
        self.graph: dict[str, set[str]] = {}

    def add_dependency(self, parent: str, child: str) -> None:
        """Record that ``child`` must be deleted before ``parent``."""
        self.graph.setdefault(child, set()).add(parent)

    def build_graph_from_groups(self, groups: Iterable[ResourceRecord]) -> None:
        """Add a membership edge for every group that contains another listed group.

        Args:
            groups: Group records whose entity carries a SCIM ``members`` list
        """
        groups = list(groups)
        group_ids = {g.resource_id for g in groups}

        for group in groups:
            for member in group.entity.get("members") or []:
                member_id = member.get("value")
                if member_id in group_ids and member_id != group.resource_id:
                    self.add_dependency(parent=group.resource_id, child=member_id)

    def compute_deletion_order(self, resources: list[str]) -> list[str]:
        """Order resources so every child precedes its parents.

        Resources without dependencies keep their relative input order. When a
        cycle blocks the sort, its earliest-listed member is released
        and sorting resumes, so resources outside the cycle stay ordered.

        Args:
            resources: Resource ids to order (duplicates are dropped)

        Returns:
            Ordered list of resource ids
        """
        resources = list(dict.fromkeys(resources))
        wanted = set(resources)
        position = {r: i for i, r in enumerate(resources)}
        # in_degree[x] = number of children that must go before x
        in_degree = {r: 0 for r in resources}
        for child, parents in self.graph.items():
            if child not in wanted:
                continue
            for parent in parents:
                if parent in wanted:
                    in_degree[parent] += 1

        queue = deque(r for r in resources if in_degree[r] == 0)
        order: list[str] = []
        emitted: set[str] = set()

        while len(order) < len(resources):
            if not queue:
                remaining = {r for r in resources if r not in emitted}
                cycle = [r for r in resources if r in remaining and self._on_cycle(r, remaining)]
                logger.warning(
                    f"Circular dependency detected among: {', '.join(cycle)}; releasing {cycle[0]} first"
                )
                queue.append(cycle[0])

            current = queue.popleft()
            order.append(current)
            emitted.add(current)
            parents = [p for p in self.graph.get(current, ()) if p in wanted and p not in emitted]
            for parent in sorted(parents, key=position.__getitem__):
                in_degree[parent] -= 1
                if in_degree[parent] == 0:
                    queue.append(parent)

        return order

    def _on_cycle(self, resource: str, remaining: set[str]) -> bool:
        """Check whether ``resource`` can reach itself through parents in ``remaining``."""
        stack = [p for p in self.graph.get(resource, ()) if p in remaining]
        seen: set[str] = set()

        while stack:
            current = stack.pop()
            if current == resource:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(p for p in self.graph.get(current, ()) if p in remaining)

        return False
