"""
cflreach.grammar_parser
=======================

Textual grammar format, parsed with a Parsimonious PEG.

Syntax::

    # comments run to the end of the line
    PT   ::= AddrBar ;
    PT   ::= CopyBar PT ;
    PV   ::= Store PT ;
    VP   ::= PTBar Load ;
    Copy ::= PV VP ;

    inverse PT PTBar ;
    inverse Copy CopyBar ;

Every name must be an :class:`~cflreach.labels.EdgeLabel` name.  A
production body holds one or two labels; ``inverse A B`` asks the solver
to insert ``B(v, u)`` whenever it derives ``A(u, v)``.

Usage::

    from cflreach.grammar_parser import parse_grammar, load_grammar

    grammar = parse_grammar(open("andersen.cflg").read())
    grammar = load_grammar("andersen.cflg")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Union

from parsimonious.exceptions import IncompleteParseError, ParseError
from parsimonious.grammar import Grammar as PEGGrammar
from parsimonious.nodes import Node, NodeVisitor

from cflreach.errors import CFLRError, GrammarError, GrammarSyntaxError
from cflreach.grammar import Grammar, Production
from cflreach.labels import EdgeLabel

logger = logging.getLogger(__name__)


CFLG_GRAMMAR = PEGGrammar(r'''
    grammar_file    = _ statement_list
    statement_list  = (statement _)*
    statement       = production / inverse_decl

    production      = label _ "::=" _ label_seq _ ";"
    label_seq       = label (_ label)*
    inverse_decl    = "inverse" ws _ label _ label _ ";"

    label           = ~r"[A-Za-z_][A-Za-z0-9_]*"

    _               = (ws / comment)*
    ws              = ~r"\s+"
    comment         = ~r"#[^\n]*"
''')


POINTS_TO_GRAMMAR_TEXT = """\
# Andersen-style points-to grammar
PT   ::= AddrBar ;
PT   ::= CopyBar PT ;
PV   ::= Store PT ;
VP   ::= PTBar Load ;
Copy ::= PV VP ;

inverse PT PTBar ;
inverse Copy CopyBar ;
"""


class GrammarBuilder(NodeVisitor):
    """Turns a Parsimonious parse tree into a :class:`Grammar`."""

    grammar = CFLG_GRAMMAR
    unwrapped_exceptions = (CFLRError,)

    def generic_visit(self, node: Node, visited_children):
        return visited_children or node

    def visit_grammar_file(self, node, visited_children):
        _, statements = visited_children
        productions: List[Production] = []
        inverses: Dict[EdgeLabel, EdgeLabel] = {}
        for stmt in statements:
            if isinstance(stmt, Production):
                productions.append(stmt)
                continue
            label, inverse = stmt
            previous = inverses.get(label)
            if previous is not None and previous is not inverse:
                raise GrammarError(
                    f"conflicting inverses for {label.value}: "
                    f"{previous.value} and {inverse.value}"
                )
            inverses[label] = inverse
        return Grammar(productions, inverses)

    def visit_statement_list(self, node, visited_children):
        if not isinstance(visited_children, list):
            return []
        return [stmt for stmt, _ in visited_children]

    def visit_statement(self, node, visited_children):
        return visited_children[0]

    def visit_production(self, node, visited_children):
        head, _, _, _, body, _, _ = visited_children
        return Production(head, tuple(body))

    def visit_label_seq(self, node, visited_children):
        first, rest = visited_children
        body = [first]
        if isinstance(rest, list):
            body.extend(label for _, label in rest)
        return body

    def visit_inverse_decl(self, node, visited_children):
        _, _, _, label, _, inverse, _, _ = visited_children
        return label, inverse

    def visit_label(self, node, visited_children):
        return EdgeLabel.parse(node.text)

    def visit__(self, node, visited_children):
        return None


def parse_grammar(text: str) -> Grammar:
    """Parse grammar *text*.

    Raises
    ------
    GrammarSyntaxError
        The text does not follow the grammar syntax.
    UnknownLabelError
        A name is not an edge label.
    GrammarError
        A production body is longer than two labels, or a label is given
        two different inverses.
    """
    try:
        tree = CFLG_GRAMMAR.parse(text)
    except IncompleteParseError as exc:
        raise GrammarSyntaxError(
            f"unexpected input {_excerpt(exc)}",
            line=exc.line(),
            column=exc.column(),
        ) from exc
    except ParseError as exc:
        raise GrammarSyntaxError(
            f"could not parse {_excerpt(exc)}",
            line=exc.line(),
            column=exc.column(),
        ) from exc
    grammar = GrammarBuilder().visit(tree)
    logger.debug(
        "Parsed grammar with %d production(s) and %d inverse pair(s)",
        len(grammar), len(grammar.inverses),
    )
    return grammar


def load_grammar(path: Union[str, Path]) -> Grammar:
    """Read and parse a grammar file."""
    path = Path(path)
    logger.debug("Loading grammar from %s", path)
    return parse_grammar(path.read_text(encoding="utf-8"))


def format_grammar(grammar: Grammar) -> str:
    """Render *grammar* in the textual syntax accepted by :func:`parse_grammar`."""
    width = max((len(p.head.value) for p in grammar), default=0)
    lines = [f"{p.head.value:<{width}} ::= {' '.join(lbl.value for lbl in p.body)} ;"
             for p in grammar]
    if grammar.inverses:
        if lines:
            lines.append("")
        lines.extend(
            f"inverse {label.value} {inverse.value} ;"
            for label, inverse in grammar.inverses.items()
        )
    return "\n".join(lines) + "\n"


def _excerpt(exc: ParseError) -> str:
    snippet = exc.text[exc.pos:exc.pos + 20].split("\n", 1)[0]
    return repr(snippet) if snippet else "end of input"
