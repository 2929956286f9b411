"""
Command line interface for d-separation queries.

Usage:
    dsep graph.txt                       -- print the graph's adjacency
    dsep graph.txt A G C B               -- is A ⟂ G | C, B ?
    dsep graph.txt -q "A ⟂ G | C, B"     -- same, as a statement
    dsep graph.txt A G --separator       -- smallest set separating A and G
    dsep graph.txt A G C --trace         -- also print the ball's visit order,
                                            starting from START

Statements are printed with the pair in sorted order; the answer is
symmetric, but traces and separator searches follow the order given.
"""

import argparse
import logging
import sys
from typing import Optional

from dgraph import UnknownNode
from graph_io import ParseError, read_graph
from independence import Independence
from separators import SeparatorFinder

logger = logging.getLogger(__name__)


def format_adjacency(graph) -> str:
    lines = []
    for node in graph:
        edges = ", ".join(
            f"{'->' if edge.toward else '<-'} {edge.end}" for edge in graph.neighbors(node)
        )
        lines.append(f"{node}: {edges}")
    return "\n".join(lines)


def format_result(statement: Independence, separated: bool) -> str:
    return f"{statement}: {'separated' if separated else 'not separated'}"


def collect_statements(args: argparse.Namespace) -> list:
    statements = []
    if args.start is not None:
        statements.append(Independence(args.start, args.end, *args.evidence))
    for text in args.query:
        statements.append(Independence.parse(text))
    return statements


def cmd_query(graph, statements, trace=False) -> int:
    for statement in statements:
        visits = []
        observer = (lambda arrival, node: visits.append(f"{node} ({arrival})")) if trace else None
        separated = statement.holds_in(graph, observer=observer)
        if trace:
            print(f"visited: {' '.join(visits)}")
        print(format_result(statement, separated))
    return 0


def cmd_separator(graph, statements, max_size=None) -> int:
    finder = SeparatorFinder(graph, max_size=max_size)
    for statement in statements:
        x, y = statement.nodes
        found = finder.find(x, y)
        if found is None:
            print(f"{x}, {y}: none")
        else:
            print(f"{x}, {y}: {{{', '.join(sorted(map(str, found)))}}}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dsep",
        description="Decide d-separation between nodes of a directed graph.",
    )
    parser.add_argument("graph", help="graph file, one 'tail -> head' edge per line")
    parser.add_argument("start", nargs="?", help="first node")
    parser.add_argument("end", nargs="?", help="second node")
    parser.add_argument("evidence", nargs="*", help="observed nodes")
    parser.add_argument(
        "-q", "--query", action="append", default=[],
        help="independence statement such as 'A ⟂ G | C, B' (repeatable)",
    )
    parser.add_argument(
        "--separator", action="store_true",
        help="print a smallest separating set instead of a yes/no answer",
    )
    parser.add_argument(
        "--max-size", type=int, default=None,
        help="largest separating set to try with --separator",
    )
    parser.add_argument("--trace", action="store_true", help="print the visit order")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[list] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.start is not None and args.end is None:
        parser.error("END is required when START is given")

    logging.basicConfig()
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        graph = read_graph(args.graph)
        statements = collect_statements(args)
        if not statements:
            print(format_adjacency(graph))
            return 0
        if args.separator:
            return cmd_separator(graph, statements, max_size=args.max_size)
        return cmd_query(graph, statements, trace=args.trace)
    except (OSError, ParseError, UnknownNode, ValueError) as e:
        logger.debug("Query failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
