import logging

import networkx as nx

from dgraph import Direction, UnknownNode

logger = logging.getLogger(__name__)


def is_blocked(arrival, in_evidence, direction, descendant_in_evidence):
    """
    Bayes-ball blocking rule for a ball that reached a node via `arrival`
    and wants to leave it along an edge pointing `direction`.

    - arrived from a child (INCOMING): passes only if the node is unobserved
    - arrived from a parent, leaving to a child: chain, passes if unobserved
    - arrived from a parent, leaving to another parent: collider, passes if
      the node or one of its descendants is observed
    """
    if arrival is Direction.NONE:
        return False
    if arrival is Direction.INCOMING:
        return in_evidence
    if direction is Direction.OUTGOING:
        return in_evidence
    return not in_evidence and not descendant_in_evidence


class Traversal:
    """Work stack and visited (arrival, node) states of one query."""

    def __init__(self, start):
        self.stack = [(Direction.NONE, start)]
        self.visited = set()

    def __len__(self):
        return len(self.visited)


def walk(graph, traversal, evidence, observed_descendants, observer=None):
    """
    Yields each (arrival, node) state reachable by the ball, in visiting
    order. A state is yielded before its neighbors are expanded, so callers
    may stop early.
    """
    while traversal.stack:
        state = traversal.stack.pop()
        if state in traversal.visited:
            continue
        traversal.visited.add(state)

        arrival, node = state
        logger.debug(f"Visiting {node!r} (arrived {arrival})")
        if observer is not None:
            observer(arrival, node)
        yield state

        in_evidence = node in evidence
        descendant_in_evidence = node in observed_descendants
        for direction, neighbor in graph.neighbors(node):
            if not is_blocked(arrival, in_evidence, direction, descendant_in_evidence):
                traversal.stack.append((direction, neighbor))


def _prepare(graph, nodes, evidence):
    for node in nodes:
        if node not in graph:
            raise UnknownNode(node)
    evidence = frozenset(evidence)
    # nodes with an observed descendant keep a collider open
    return evidence, graph.ancestors(evidence)


def is_d_separated(graph, start, end, evidence=(), observer=None):
    """
    Returns True iff start ⟂ end | evidence in `graph`, using Bayes-ball
    reachability. A node is never separated from itself.

    `observer`, if given, is called as observer(arrival, node) for every
    newly visited state.
    """
    evidence, observed_descendants = _prepare(graph, (start, end), evidence)

    traversal = Traversal(start)
    for _, node in walk(graph, traversal, evidence, observed_descendants, observer):
        if node == end:
            logger.debug(f"{start!r} reaches {end!r} after {len(traversal)} states")
            return False

    logger.debug(f"{start!r} and {end!r} are d-separated ({len(traversal)} states)")
    return True


def d_connected(graph, start, evidence=(), observer=None):
    """
    Set of all nodes that are not d-separated from `start` given `evidence`,
    `start` itself included.
    """
    evidence, observed_descendants = _prepare(graph, (start,), evidence)

    traversal = Traversal(start)
    return frozenset(
        node for _, node in walk(graph, traversal, evidence, observed_descendants, observer)
    )


def is_d_separated_moral(graph, start, end, evidence=()):
    """
    Returns True iff start ⟂ end | evidence in `graph`
    using: ancestral subgraph + moralization + remove Z + undirected separation.
    Endpoints are dropped from the evidence so the answer matches
    is_d_separated.
    """
    if start not in graph:
        raise UnknownNode(start)
    if end not in graph:
        raise UnknownNode(end)
    if start == end:
        return False

    G = graph.to_networkx()
    Z = {z for z in evidence if z in G} - {start, end}

    nodes_of_interest = {start, end} | Z

    anc = set(nodes_of_interest)
    for n in nodes_of_interest:
        anc |= nx.ancestors(G, n)

    G_anc = G.subgraph(anc)

    moral = nx.Graph()
    moral.add_nodes_from(G_anc.nodes())
    moral.add_edges_from(G_anc.edges())  # skeleton

    for child in G_anc.nodes():
        parents = list(G_anc.predecessors(child))
        for i in range(len(parents)):
            for j in range(i + 1, len(parents)):
                moral.add_edge(parents[i], parents[j])

    moral.remove_nodes_from(Z)

    return not nx.has_path(moral, start, end)
