import enum
from typing import Hashable, NamedTuple

import networkx as nx


class Direction(enum.Enum):
    """
    Direction of an edge relative to the node whose adjacency holds it.
    NONE is only used as the arrival direction of a traversal's seed.
    """
    NONE = "none"
    INCOMING = "incoming"
    OUTGOING = "outgoing"

    def __str__(self):
        return self.value


class Edge(NamedTuple):
    """A single edge as seen from one of its endpoints."""
    direction: Direction
    end: Hashable

    @property
    def toward(self):
        """True if this edge points toward `end`."""
        return self.direction is Direction.OUTGOING


class UnknownNode(KeyError):
    """Raised when a node is looked up that was never added to the graph."""

    def __init__(self, node):
        super().__init__(node)
        self.node = node

    def __str__(self):
        return f"Unknown node: {self.node!r}"


class DirectedGraph:
    """
    Adjacency map from node to every edge touching it, tagged with the
    edge's direction relative to that node. Each tail -> head edge is stored
    twice: OUTGOING at the tail and INCOMING at the head.
    """

    def __init__(self, edges=None):
        self._adjacency = {}
        if edges is not None:
            for tail, head in edges:
                self.add_edge(tail, head)

    @classmethod
    def from_networkx(cls, graph: nx.DiGraph):
        """Build a graph from a networkx directed graph, isolated nodes included."""
        if not graph.is_directed():
            raise TypeError("d-separation needs a directed graph")
        dg = cls()
        for node in graph.nodes():
            dg.add_node(node)
        for tail, head in graph.edges():
            dg.add_edge(tail, head)
        return dg

    def add_node(self, node):
        self._adjacency.setdefault(node, [])

    def add_edge(self, tail, head):
        self._adjacency.setdefault(tail, []).append(Edge(Direction.OUTGOING, head))
        self._adjacency.setdefault(head, []).append(Edge(Direction.INCOMING, tail))

    def neighbors(self, node):
        """
        All edges touching `node`, in insertion order.
        Raises UnknownNode if the node was never inserted.
        """
        try:
            return tuple(self._adjacency[node])
        except KeyError:
            raise UnknownNode(node) from None

    def parents(self, node):
        return [e.end for e in self.neighbors(node) if e.direction is Direction.INCOMING]

    def children(self, node):
        return [e.end for e in self.neighbors(node) if e.direction is Direction.OUTGOING]

    def nodes(self):
        return list(self._adjacency)

    def edges(self):
        """Every inserted edge once, as (tail, head) pairs; duplicates are kept."""
        return [
            (tail, e.end)
            for tail, records in self._adjacency.items()
            for e in records
            if e.direction is Direction.OUTGOING
        ]

    def ancestors(self, nodes):
        """
        Strict ancestors of a set of nodes: every node with a directed path
        into one of them. Nodes not in the graph are ignored.
        """
        stack = [n for n in nodes if n in self._adjacency]
        seen = set()
        while stack:
            node = stack.pop()
            for parent in self.parents(node):
                if parent not in seen:
                    seen.add(parent)
                    stack.append(parent)
        return seen

    def to_networkx(self):
        G = nx.DiGraph()
        G.add_nodes_from(self._adjacency)
        G.add_edges_from(self.edges())
        return G

    def find_cycles(self):
        return list(nx.simple_cycles(self.to_networkx()))

    def __contains__(self, node):
        return node in self._adjacency

    def __iter__(self):
        return iter(self._adjacency)

    def __len__(self):
        return len(self._adjacency)

    def __repr__(self):
        return f"DirectedGraph(nodes={len(self)}, edges={len(self.edges())})"
