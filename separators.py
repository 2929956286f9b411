import logging
from collections import deque
from itertools import combinations

from bayes_ball import is_d_separated
from dgraph import UnknownNode
from independence import Independence

logger = logging.getLogger(__name__)


class SeparatorFinder:
    """
    Search over evidence sets of a graph, using BFS.

    States are evidence sets; a state's successors add one more node to it,
    so the first separating set found has the smallest possible size.
    """

    def __init__(self, graph, max_size=None):
        self.graph = graph
        self.max_size = max_size

    def _state_key(self, evidence):
        return tuple(sorted(evidence, key=str))

    def _successors(self, evidence, candidates):
        for node in candidates:
            if node not in evidence:
                yield evidence | {node}

    def find(self, x, y):
        """
        Find a smallest evidence set that d-separates x and y.
        Returns:
          - frozenset() if they are already separated
          - frozenset of nodes if found
          - None if no set within max_size separates them
        """
        for node in (x, y):
            if node not in self.graph:
                raise UnknownNode(node)

        if x == y or y in self.graph.parents(x) or y in self.graph.children(x):
            logger.info(f"{x!r} and {y!r} are adjacent and cannot be separated")
            return None

        max_size = self.max_size
        if max_size is None:
            max_size = len(self.graph) - 2

        candidates = [n for n in self.graph if n != x and n != y]
        start = frozenset()
        queue = deque([start])
        visited = {self._state_key(start)}

        while queue:
            cur = queue.popleft()

            if is_d_separated(self.graph, x, y, cur):
                logger.info(f"Found separating set of size {len(cur)} for {x!r} and {y!r}")
                return cur

            if len(cur) >= max_size:
                continue

            for nxt in self._successors(cur, candidates):
                k = self._state_key(nxt)
                if k in visited:
                    continue
                visited.add(k)
                queue.append(nxt)

        logger.info(f"No separating set within {max_size} nodes for {x!r} and {y!r}")
        return None

    def independencies(self, max_size=None):
        """
        All d-separation statements of the graph, for every unordered pair of
        nodes and every evidence set up to max_size nodes.
        """
        if max_size is None:
            max_size = self.max_size
        if max_size is None:
            max_size = len(self.graph)

        nodes = sorted(self.graph, key=str)
        found = []
        for x, y in combinations(nodes, 2):
            rest = [n for n in nodes if n != x and n != y]
            for size in range(min(max_size, len(rest)) + 1):
                for evidence in combinations(rest, size):
                    if is_d_separated(self.graph, x, y, evidence):
                        found.append(Independence(x, y, *evidence))

        logger.info(f"Found {len(found)} independencies with evidence sets up to {max_size} nodes")
        return found
