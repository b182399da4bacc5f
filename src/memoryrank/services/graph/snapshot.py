"""
Read-only graph view over a snapshot of memory records.

Edges are looked up by identifier in the snapshot index; targets missing from
the snapshot are skipped. Result lists follow snapshot order, and outgoing
edges are followed in relationship insertion order.
"""
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ...models.memory import MemoryRecord, RelationType


@dataclass(frozen=True)
class GraphStats:
    node_count: int
    relationship_count: int
    average_degree: float


class MemoryGraph:
    """Traversals over a fixed list of records."""

    def __init__(self, memories: Iterable[MemoryRecord]):
        self._nodes: dict[str, MemoryRecord] = {m.id: m for m in memories}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, memory_id: str) -> bool:
        return memory_id in self._nodes

    def get(self, memory_id: str) -> Optional[MemoryRecord]:
        return self._nodes.get(memory_id)

    def _neighbor_ids(self, memory_id: str) -> list[str]:
        node = self._nodes.get(memory_id)
        if node is None:
            return []
        # ordered, de-duplicated outgoing targets
        return list(dict.fromkeys(r.target_id for r in node.relationships))

    def related(self, memory_id: str, relation_type: Optional[RelationType] = None) -> list[MemoryRecord]:
        """Targets of the record's outgoing edges, optionally of one type."""
        node = self._nodes.get(memory_id)
        if node is None:
            return []
        relationships = node.relationships if relation_type is None else node.relationships_of_type(relation_type)
        return [self._nodes[r.target_id] for r in relationships if r.target_id in self._nodes]

    def incoming(self, memory_id: str, relation_type: Optional[RelationType] = None) -> list[MemoryRecord]:
        """Records with an edge pointing at ``memory_id``, optionally of one type."""
        return [
            node for node in self._nodes.values()
            if any(
                r.target_id == memory_id and (relation_type is None or r.type == relation_type)
                for r in node.relationships
            )
        ]

    def subgraph(self, memory_id: str, max_depth: int = 3) -> list[MemoryRecord]:
        """Breadth-first walk over outgoing edges, up to ``max_depth`` hops from the start."""
        visited: set[str] = set()
        queue = deque([(memory_id, 0)])
        result = []

        while queue:
            current_id, depth = queue.popleft()
            if depth > max_depth or current_id in visited:
                continue
            visited.add(current_id)

            node = self._nodes.get(current_id)
            if node is None:
                continue
            result.append(node)
            for neighbor_id in self._neighbor_ids(current_id):
                if neighbor_id not in visited:
                    queue.append((neighbor_id, depth + 1))

        return result

    def find_path(self, source_id: str, target_id: str) -> Optional[list[MemoryRecord]]:
        """Shortest path over outgoing edges, as records from source to target, or None."""
        if source_id not in self._nodes or target_id not in self._nodes:
            return None

        visited = {source_id}
        queue = deque([[source_id]])
        while queue:
            path = queue.popleft()
            if path[-1] == target_id:
                return [self._nodes[i] for i in path]
            for neighbor_id in self._neighbor_ids(path[-1]):
                if neighbor_id not in visited and neighbor_id in self._nodes:
                    visited.add(neighbor_id)
                    queue.append(path + [neighbor_id])
        return None

    def latest_version(self, memory_id: str) -> Optional[MemoryRecord]:
        """
        Follow the update chain forward from ``memory_id``.

        A successor is a record holding an ``updates`` edge to the current one
        that is not older than it. Latest successors are preferred, then the
        newest. The walk stops at a latest record or when no successor is found.
        """
        node = self._nodes.get(memory_id)
        if node is None:
            return None

        seen = {node.id}
        while not node.is_latest:
            successors = [
                m for m in self.incoming(node.id, RelationType.UPDATES)
                if m.id not in seen and m.timestamp >= node.timestamp
            ]
            if not successors:
                break
            node = max(successors, key=lambda m: (m.is_latest, m.timestamp))
            seen.add(node.id)
        return node

    def extensions(self, memory_id: str) -> list[MemoryRecord]:
        return self.incoming(memory_id, RelationType.EXTENDS)

    def derived(self, memory_id: str) -> list[MemoryRecord]:
        return self.incoming(memory_id, RelationType.DERIVES)

    def enriched_context(self, memory_id: str) -> list[MemoryRecord]:
        """The record, then records extending it, its related records, and records derived from it."""
        node = self._nodes.get(memory_id)
        if node is None:
            return []
        return (
            [node]
            + self.extensions(memory_id)
            + self.related(memory_id, RelationType.RELATED_TO)
            + self.derived(memory_id)
        )

    def latest(self) -> list[MemoryRecord]:
        return [m for m in self._nodes.values() if m.is_latest and not m.is_superseded]

    def by_confidence(self, min_confidence: float, current_date: Optional[datetime] = None) -> list[MemoryRecord]:
        """Records whose effective (decayed) confidence is at least ``min_confidence``."""
        return [m for m in self._nodes.values() if m.effective_confidence(current_date) >= min_confidence]

    def static(self) -> list[MemoryRecord]:
        return [m for m in self._nodes.values() if m.is_static]

    def dynamic(self) -> list[MemoryRecord]:
        return [m for m in self._nodes.values() if not m.is_static]

    def stats(self) -> GraphStats:
        node_count = len(self._nodes)
        relationship_count = sum(len(m.relationships) for m in self._nodes.values())
        average_degree = relationship_count / node_count if node_count else 0.0
        return GraphStats(node_count, relationship_count, average_degree)
