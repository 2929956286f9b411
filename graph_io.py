import logging

from dgraph import DirectedGraph

logger = logging.getLogger(__name__)

SEPARATOR = "->"


class ParseError(ValueError):
    """A line of a graph file that is not of the form `<tail> -> <head>`."""

    def __init__(self, line, field, detail=None):
        self.line = line
        self.field = field
        message = f"Line {line}: Missing {field}"
        if detail:
            message = f"Line {line}: {detail}"
        super().__init__(message)


def parse_edge(line, line_number):
    """Parse one non-blank line into a (tail, head) pair."""
    parts = line.split(SEPARATOR)
    tail = parts[0].strip()
    if not tail:
        raise ParseError(line_number, "tail")
    if len(parts) < 2 or not parts[1].strip():
        raise ParseError(line_number, "head")
    if len(parts) > 2:
        raise ParseError(line_number, "head", f"Unexpected '{SEPARATOR}' after head")
    return tail, parts[1].strip()


def parse_graph(text):
    """
    Build a DirectedGraph from text with one `tail -> head` edge per line.
    Surrounding whitespace is ignored and blank lines are skipped.
    """
    graph = DirectedGraph()
    for line_idx, line in enumerate(text.splitlines()):
        line = line.strip()
        if not line:
            continue
        tail, head = parse_edge(line, line_idx + 1)
        graph.add_edge(tail, head)
    return graph


def read_graph(path):
    with open(path, encoding="utf-8") as fh:
        graph = parse_graph(fh.read())

    logger.info(f"Read {len(graph)} nodes and {len(graph.edges())} edges from {path}")
    cycles = graph.find_cycles()
    if cycles:
        logger.warning(f"Warning: The graph contains cycles: {cycles}")
    return graph
