"""
Knowledge Graph - Topic dependency graph loaded from a flat edge file.

File format, one topic per line:

    topic|prereq1,prereq2,...

An edge T -> P means "T depends on P" (review P before T). Re-declaring a
topic replaces its prerequisite list. Uses networkx for cycle checks; the
review-order traversal itself is a plain postorder DFS over the stored
prerequisite lists so that their file order is preserved.
"""

from __future__ import annotations

from pathlib import Path

import networkx as nx
from loguru import logger

from ..diagnostics import ParseDiagnostic
from ..exceptions import KnowledgeGraphLoadError


class KnowledgeGraph:
    """
    Directed graph of topics with prerequisite edges.

    Assumed acyclic. Traversals terminate on cyclic input but their order
    is only meaningful for a DAG; use ``find_cycle`` to check.
    """

    def __init__(self, prerequisites: dict[str, list[str]] | None = None):
        self._prereqs: dict[str, list[str]] = {}
        self._nodes: set[str] = set()
        self.diagnostics: list[ParseDiagnostic] = []
        self.graph = nx.DiGraph()

        for topic, prereqs in (prerequisites or {}).items():
            self._declare(topic, prereqs)
        self._build_graph()

    def _declare(self, topic: str, prereqs: list[str]) -> None:
        self._nodes.add(topic)
        self._nodes.update(prereqs)
        self._prereqs[topic] = list(prereqs)

    def _build_graph(self) -> None:
        """Mirror the final prerequisite lists into the networkx graph."""
        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(sorted(self._nodes))
        for topic, prereqs in self._prereqs.items():
            for prereq in prereqs:
                self.graph.add_edge(topic, prereq)

    # ==================== Loading ====================

    @classmethod
    def from_file(cls, path: Path | str) -> KnowledgeGraph:
        """
        Load a knowledge graph file.

        Raises:
            KnowledgeGraphLoadError: If the file cannot be read
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Knowledge graph {path} unavailable, review paths disabled: {e}")
            raise KnowledgeGraphLoadError(f"Cannot read knowledge graph {path}: {e}") from e

        kg = cls.from_lines(text.splitlines(), source=str(path))
        logger.info(f"Loaded knowledge graph from {path}: {len(kg)} topics")
        return kg

    @classmethod
    def from_lines(cls, lines: list[str], source: str = "<graph>") -> KnowledgeGraph:
        """Parse edge lines, collecting diagnostics for skipped ones."""
        kg = cls()

        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue

            if "|" not in line:
                kg._diagnose(source, line_number, "missing '|' separator")
                continue

            topic, _, prereq_part = line.partition("|")
            topic = topic.strip()
            if not topic:
                kg._diagnose(source, line_number, "empty topic name")
                continue

            prereqs = [p.strip() for p in prereq_part.split(",")]
            kg._declare(topic, [p for p in prereqs if p])

        kg._build_graph()

        cycle = kg.find_cycle()
        if cycle:
            logger.warning(
                f"Knowledge graph {source} is not acyclic: {' -> '.join(cycle)}"
            )
        return kg

    def _diagnose(self, source: str, line_number: int, message: str) -> None:
        diagnostic = ParseDiagnostic(source, line_number, message)
        self.diagnostics.append(diagnostic)
        logger.warning(str(diagnostic))

    # ==================== Query Methods ====================

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, topic: object) -> bool:
        return topic in self._nodes

    @property
    def topics(self) -> list[str]:
        """All topic names, sorted."""
        return sorted(self._nodes)

    def prerequisites(self, topic: str) -> list[str]:
        """Immediate prerequisites in their declared order."""
        return list(self._prereqs.get(topic, []))

    def dependents(self, topic: str) -> list[str]:
        """Topics that list ``topic`` as a direct prerequisite."""
        if topic not in self.graph:
            return []
        return sorted(self.graph.predecessors(topic))

    def find_cycle(self, source: str | None = None) -> list[str] | None:
        """
        Find one prerequisite cycle.

        Args:
            source: Only search the part of the graph reachable from this
                topic (None searches the whole graph)

        Returns:
            Topics along the cycle with the first repeated at the end,
            or None if there is no cycle
        """
        if source is not None and source not in self.graph:
            return None
        try:
            edges = nx.find_cycle(self.graph, source=source)
        except nx.NetworkXNoCycle:
            return None
        return [u for u, _ in edges] + [edges[-1][1]]

    # ==================== Traversal ====================

    def dfs_postorder(self, target: str) -> list[str]:
        """
        Prerequisite-first order of everything reachable from ``target``.

        Each topic is emitted after all of its prerequisites, which are
        visited in declared order; ``target`` itself comes last. A topic
        with no prerequisites (or unknown to the graph) yields ``[target]``.
        Visited topics are never re-entered, so a cycle cannot loop.
        """
        path: list[str] = []
        visited = {target}
        stack = [(target, iter(self._prereqs.get(target, ())))]

        while stack:
            node, pending = stack[-1]
            for prereq in pending:
                if prereq not in visited:
                    visited.add(prereq)
                    stack.append((prereq, iter(self._prereqs.get(prereq, ()))))
                    break
            else:
                stack.pop()
                path.append(node)

        return path
