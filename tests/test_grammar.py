# tests/test_grammar.py
"""
Tests for production tables and the textual grammar loader.
"""

import pytest

from cflreach.errors import GrammarError, GrammarSyntaxError, UnknownLabelError
from cflreach.grammar import POINTS_TO_GRAMMAR, Grammar, Production, production
from cflreach.grammar_parser import (
    POINTS_TO_GRAMMAR_TEXT,
    format_grammar,
    load_grammar,
    parse_grammar,
)
from cflreach.labels import EdgeLabel

L = EdgeLabel


class TestProduction:

    def test_unary(self):
        p = production(L.PT, L.AddrBar)
        assert p.is_unary
        assert p.left is L.AddrBar
        assert p.right is None
        assert str(p) == "PT ::= AddrBar"

    def test_binary(self):
        p = production(L.Copy, L.PV, L.VP)
        assert not p.is_unary
        assert (p.left, p.right) == (L.PV, L.VP)
        assert str(p) == "Copy ::= PV VP"

    @pytest.mark.parametrize("body", [(), (L.PV, L.VP, L.PT)])
    def test_arity_is_checked(self, body):
        with pytest.raises(GrammarError):
            Production(L.PT, body)

    def test_hashable(self):
        assert production(L.PT, L.AddrBar) == production(L.PT, L.AddrBar)
        assert len({production(L.PT, L.AddrBar), production(L.PT, L.AddrBar)}) == 1

    def test_list_body_is_stored_as_tuple(self):
        p = Production(L.PT, [L.CopyBar, L.PT])
        assert p.body == (L.CopyBar, L.PT)
        assert p == production(L.PT, L.CopyBar, L.PT)
        assert len(Grammar([p, p])) == 1


class TestPointsToGrammar:

    def test_has_five_rules(self):
        assert len(POINTS_TO_GRAMMAR) == 5

    def test_unary_index(self):
        assert POINTS_TO_GRAMMAR.unary_for(L.AddrBar) == [L.PT]
        assert POINTS_TO_GRAMMAR.unary_for(L.Addr) == []

    def test_left_index(self):
        g = POINTS_TO_GRAMMAR
        assert g.binary_by_left(L.CopyBar) == [(L.PT, L.PT)]
        assert g.binary_by_left(L.Store) == [(L.PT, L.PV)]
        assert g.binary_by_left(L.PTBar) == [(L.Load, L.VP)]
        assert g.binary_by_left(L.PV) == [(L.VP, L.Copy)]
        assert g.binary_by_left(L.PT) == []

    def test_right_index(self):
        g = POINTS_TO_GRAMMAR
        assert sorted(g.binary_by_right(L.PT), key=lambda x: x[0].value) == [
            (L.CopyBar, L.PT),
            (L.Store, L.PV),
        ]
        assert g.binary_by_right(L.Load) == [(L.PTBar, L.VP)]
        assert g.binary_by_right(L.VP) == [(L.PV, L.Copy)]
        assert g.binary_by_right(L.Copy) == []

    def test_maintained_inverses(self):
        assert POINTS_TO_GRAMMAR.inverse_of(L.PT) is L.PTBar
        assert POINTS_TO_GRAMMAR.inverse_of(L.Copy) is L.CopyBar
        assert POINTS_TO_GRAMMAR.inverse_of(L.Addr) is None

    def test_heads(self):
        assert POINTS_TO_GRAMMAR.heads == frozenset(
            {L.PT, L.PTBar, L.PV, L.VP, L.Copy, L.CopyBar}
        )

    def test_heads_of_custom_grammar(self):
        g = Grammar([production(L.Copy, L.PV, L.VP)], inverses={L.Copy: L.CopyBar, L.PT: L.PTBar})
        assert g.heads == frozenset({L.Copy, L.CopyBar})

    def test_labels(self):
        assert POINTS_TO_GRAMMAR.labels == frozenset(EdgeLabel) - {L.Addr}

    def test_duplicates_dropped(self):
        g = Grammar([production(L.PT, L.AddrBar)] * 3)
        assert len(g) == 1


class TestGrammarParser:

    def test_default_grammar_text(self):
        assert parse_grammar(POINTS_TO_GRAMMAR_TEXT) == POINTS_TO_GRAMMAR

    def test_format_then_parse(self):
        text = format_grammar(POINTS_TO_GRAMMAR)
        assert "Copy ::= PV VP ;" in text
        assert "inverse PT PTBar ;" in text
        assert parse_grammar(text) == POINTS_TO_GRAMMAR

    def test_empty_text(self):
        g = parse_grammar("  # nothing here\n")
        assert len(g) == 0
        assert g.inverses == {}

    def test_free_layout_and_comments(self):
        g = parse_grammar("PT::=AddrBar;  # unary\nPV ::=\n  Store\n  PT ;")
        assert set(g) == {production(L.PT, L.AddrBar), production(L.PV, L.Store, L.PT)}

    def test_missing_semicolon(self):
        with pytest.raises(GrammarSyntaxError) as excinfo:
            parse_grammar("PT ::= AddrBar ;\nPV ::= Store PT\n")
        err = excinfo.value
        assert err.line == 2
        assert err.column == 1
        assert "line 2" in str(err)

    def test_garbage(self):
        with pytest.raises(GrammarSyntaxError):
            parse_grammar("PT -> AddrBar ;")

    def test_unknown_label(self):
        with pytest.raises(UnknownLabelError) as excinfo:
            parse_grammar("PT ::= Deref ;")
        assert excinfo.value.name == "Deref"

    def test_body_too_long(self):
        with pytest.raises(GrammarError):
            parse_grammar("Copy ::= Store PT Load ;")

    def test_conflicting_inverses(self):
        with pytest.raises(GrammarError, match="conflicting inverses"):
            parse_grammar("inverse PT PTBar ;\ninverse PT CopyBar ;")

    def test_inverse_keyword_needs_separator(self):
        with pytest.raises(GrammarSyntaxError) as excinfo:
            parse_grammar("inversePT PTBar ;")
        assert (excinfo.value.line, excinfo.value.column) == (1, 1)

    def test_inverse_keyword_across_lines(self):
        g = parse_grammar("inverse\n  Copy CopyBar ;")
        assert g.inverses == {L.Copy: L.CopyBar}

    def test_repeated_inverse_is_accepted(self):
        g = parse_grammar("inverse PT PTBar ;\ninverse PT PTBar ;")
        assert g.inverses == {L.PT: L.PTBar}

    def test_load_grammar(self, tmp_path):
        path = tmp_path / "andersen.cflg"
        path.write_text(POINTS_TO_GRAMMAR_TEXT, encoding="utf-8")
        assert load_grammar(path) == POINTS_TO_GRAMMAR
        assert load_grammar(str(path)) == POINTS_TO_GRAMMAR
