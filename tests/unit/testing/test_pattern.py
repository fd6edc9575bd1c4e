"""Tests for the reference s-expression patterns."""

import re

import pytest

from eqrewrite.rewrite import ParseError, PatternProtocol
from eqrewrite.testing import Pattern, PatternNode, Wildcard, e


class TestParse:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("x", PatternNode("x")),
            ("?a", Wildcard("?a")),
            ("(neg ?a)", PatternNode("neg", (Wildcard("?a"),))),
            (
                "  (+ ?a\n (* 2 ?b))  ",
                PatternNode(
                    "+",
                    (Wildcard("?a"), PatternNode("*", (PatternNode("2"), Wildcard("?b")))),
                ),
            ),
            ("(TRUE)", PatternNode("TRUE")),
        ],
    )
    def test_valid(self, text, expected):
        assert Pattern.parse(text) == expected

    @pytest.mark.parametrize(
        "text, reason",
        [
            ("", "empty pattern"),
            ("   ", "empty pattern"),
            ("(+ ?a", "missing ')'"),
            (")", "unbalanced"),
            ("(+ ?a))", "unexpected ')'"),
            ("x y", "unexpected 'y'"),
            ("()", "expected an operator"),
            ("(?f x)", "cannot be an operator"),
            ("(f ?)", "wildcard needs a name"),
            ("(", "unexpected end of input"),
        ],
    )
    def test_invalid(self, text, reason):
        with pytest.raises(ParseError, match=re.escape(reason)) as exc:
            Pattern.parse(text)
        assert exc.value.text == text

    def test_str_round_trip(self):
        text = "(>> ?a (log2 ?b))"
        assert str(Pattern.parse(text)) == text

    def test_vars(self):
        assert Pattern.parse("(f ?b (g ?a ?b) c)").vars() == ["?b", "?a"]

    def test_satisfies_protocol(self):
        assert isinstance(Pattern.parse("(f ?a)"), PatternProtocol)


class TestSearch:
    def test_mappings(self, egraph):
        root = egraph.add_expr("(+ x y)")
        x = egraph.lookup(e("x"))
        y = egraph.lookup(e("y"))

        (match,) = Pattern.parse("(+ ?a ?b)").search(egraph)

        assert match.eclass == root
        assert match.mappings == ({"?a": (x,), "?b": (y,)},)

    def test_repeated_wildcard_needs_equivalent_classes(self, egraph):
        egraph.add_expr("(- x y)")
        same = egraph.add_expr("(- x x)")

        matches = Pattern.parse("(- ?a ?a)").search(egraph)
        assert [m.eclass for m in matches] == [same]

    def test_one_mapping_per_node(self, egraph):
        xy = egraph.add_expr("(+ x y)")
        yx = egraph.add_expr("(+ y x)")
        egraph.union(xy, yx)
        egraph.rebuild()

        (match,) = Pattern.parse("(+ ?a ?b)").search(egraph)
        assert len(match) == 2

    def test_wildcard_matches_every_class(self, egraph):
        egraph.add_expr("(f x)")
        assert [m.eclass for m in Pattern.parse("?a").search(egraph)] == [0, 1]


class TestInstantiate:
    def test_ground(self, egraph):
        root = egraph.add_expr("(f x)")
        assert Pattern.parse("(f x)").instantiate_and_find(egraph, {}) == root

    def test_returns_canonical_id(self, egraph):
        a = egraph.add(e("a")).id
        b = egraph.add(e("b")).id
        egraph.union(b, a)
        assert Pattern.parse("?x").instantiate_and_find(egraph, {"?x": (a,)}) == b
