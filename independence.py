import re

import sympy as sp
from sympy import Symbol

from bayes_ball import is_d_separated

_STATEMENT_PATTERN = re.compile(
    r"^(?P<x>[^|,]+?)\s*(?:⟂|_\|\|_|_\|_)\s*(?P<y>[^|,]+?)\s*(?:\|(?P<given>.*))?$"
)
_NODE_PATTERN = re.compile(r"\S+")


def _symbol(node):
    if isinstance(node, Symbol):
        return node
    return Symbol(str(node))


class Independence(sp.Expr):
    """
    Represents a conditional independence statement such as X ⟂ Y | Z, W.

    The pair and the conditions are kept in a canonical order, so
    statements compare equal regardless of how they were written:
    Independence(Y, X, W, Z) == Independence(X, Y, Z, W).

    The graph nodes the statement was built from are remembered, so a
    statement over int (or other non-string) nodes can be checked against
    the graph it came from.
    """
    def __new__(cls, x, y, *given):
        originals = {}
        for node in (x, y) + given:
            originals.setdefault(_symbol(node), str(node) if isinstance(node, Symbol) else node)

        written = (originals[_symbol(x)], originals[_symbol(y)])
        x, y = sorted((_symbol(x), _symbol(y)), key=str)
        given = tuple(sorted(set(map(_symbol, given)), key=str))
        obj = sp.Expr.__new__(cls, x, y, *given)
        obj._originals = originals
        obj._written = written
        return obj

    def _node(self, symbol):
        return self._originals.get(symbol, str(symbol))

    @property
    def pair(self):
        return self.args[0], self.args[1]

    @property
    def given(self):
        return self.args[2:]

    @property
    def nodes(self):
        """The two graph nodes, in the order they were written."""
        return self._written

    @property
    def evidence(self):
        return [self._node(z) for z in self.given]

    def holds_in(self, graph, observer=None):
        """
        True iff the statement is a d-separation of `graph`. The ball starts
        from the first node as written.
        """
        start, end = self.nodes
        return is_d_separated(graph, start, end, self.evidence, observer=observer)

    def __str__(self):
        x, y = self.pair
        if not self.given:
            return f'{x} ⟂ {y}'
        return f'{x} ⟂ {y} | {", ".join(map(str, self.given))}'

    def __repr__(self):
        return self.__str__()

    def _sympystr(self, printer):
        return str(self)

    @classmethod
    def parse(cls, text):
        """
        Parse statements like 'A ⟂ G | C, B'. The independence sign may
        also be written '_||_' or '_|_'; the '| ...' part is optional.
        """
        match = _STATEMENT_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid independence statement format: {text}")

        x = match.group("x").strip()
        y = match.group("y").strip()
        given = []
        if match.group("given"):
            for cond in match.group("given").split(","):
                cond = cond.strip()
                if cond:
                    given.append(cond)

        for name in [x, y] + given:
            if not _NODE_PATTERN.fullmatch(name):
                raise ValueError(f"Invalid node name {name!r} in statement: {text}")

        return cls(x, y, *given)
