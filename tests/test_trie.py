"""Trie and matcher tests."""

from __future__ import annotations

from itertools import permutations

import pytest

from tldresolve.rules import Origin, Rule, RuleKind, RuleSet
from tldresolve.trie import Matcher, MatchResult, Trie


def _exact(suffix: str, origin: Origin = Origin.ICANN) -> Rule:
    return Rule(RuleKind.EXACT, tuple(suffix.split(".")), origin)


def _wildcard(suffix: str, origin: Origin = Origin.ICANN) -> Rule:
    return Rule(RuleKind.WILDCARD, tuple(suffix.split(".")), origin)


def _exception(suffix: str, origin: Origin = Origin.ICANN) -> Rule:
    return Rule(RuleKind.EXCEPTION, tuple(suffix.split(".")), origin)


def test_nested_dict() -> None:
    """Test Trie class, built from rules in any order."""
    suffixes = ["a", "d.a", "b.a", "c.b.a", "c", "b.c", "f.d"]
    for suffixes_sequence in permutations(suffixes):
        trie = Trie.create(_exact(suffix) for suffix in suffixes_sequence)
        # Top level c
        assert "c" in trie.matches
        top_c = trie.matches["c"]
        assert len(top_c.matches) == 1
        assert "b" in top_c.matches
        assert RuleKind.EXACT in top_c.terminals
        # Top level a
        assert "a" in trie.matches
        top_a = trie.matches["a"]
        assert len(top_a.matches) == 2
        #  a -> d
        assert "d" in top_a.matches
        a_to_d = top_a.matches["d"]
        assert not a_to_d.matches
        #  a -> b
        assert "b" in top_a.matches
        a_to_b = top_a.matches["b"]
        assert RuleKind.EXACT in a_to_b.terminals
        assert len(a_to_b.matches) == 1
        #  a -> b -> c
        assert "c" in a_to_b.matches
        a_to_b_to_c = a_to_b.matches["c"]
        assert not a_to_b_to_c.matches
        assert RuleKind.EXACT in top_a.terminals
        #  d -> f
        assert "d" in trie.matches
        top_d = trie.matches["d"]
        assert not top_d.terminals
        assert "f" in top_d.matches
        d_to_f = top_d.matches["f"]
        assert d_to_f.terminals == {RuleKind.EXACT: Origin.ICANN}
        assert not d_to_f.matches


def test_terminals_share_a_node() -> None:
    """Test one path can be an exact terminal and an exception terminal."""
    trie = Trie.create([_exact("www.ck"), _exception("www.ck", Origin.PRIVATE)])

    www = trie.matches["ck"].matches["www"]
    assert www.terminals == {
        RuleKind.EXACT: Origin.ICANN,
        RuleKind.EXCEPTION: Origin.PRIVATE,
    }


def test_wildcard_edge() -> None:
    """Test a wildcard rule keeps its literal "*" edge."""
    trie = Trie.create([_wildcard("*.ck")])

    assert trie.matches["ck"].matches["*"].terminals == {
        RuleKind.WILDCARD: Origin.ICANN
    }
    assert not trie.matches["ck"].terminals


MATCHER = Matcher.build(
    RuleSet(
        [
            _exact("uk"),
            _exact("co.uk"),
            _wildcard("*.ck"),
            _exception("www.ck"),
            _exact("jp"),
            _wildcard("*.kawasaki.jp"),
            _exception("city.kawasaki.jp"),
            _exact("io"),
            _exact("github.io", Origin.PRIVATE),
            _wildcard("*.compute.amazonaws.com", Origin.PRIVATE),
            _exact("com"),
            _exact("tie.example"),
            _wildcard("*.example"),
        ]
    )
)


def test_match_deepest_exact() -> None:
    """Test a more specific exact rule beats a shorter one."""
    assert MATCHER.match(["www", "bbc", "co", "uk"]) == MatchResult(
        suffix_labels=("co", "uk"), origin=Origin.ICANN, rule_kind=RuleKind.EXACT
    )
    assert MATCHER.match(["www", "parliament", "uk"]) == MatchResult(
        suffix_labels=("uk",), origin=Origin.ICANN, rule_kind=RuleKind.EXACT
    )


def test_match_whole_hostname() -> None:
    """Test a hostname which is itself a suffix matches all of its labels."""
    assert MATCHER.match(["co", "uk"]).suffix == "co.uk"
    assert MATCHER.match(["uk"]).suffix == "uk"


def test_match_wildcard() -> None:
    """Test any single label under a wildcard is part of the suffix."""
    result = MATCHER.match(["a", "b", "ck"])
    assert result.suffix == "b.ck"
    assert result.rule_kind is RuleKind.WILDCARD
    assert result.origin is Origin.ICANN

    assert MATCHER.match(["foo", "bar", "kawasaki", "jp"]).suffix == "bar.kawasaki.jp"


def test_match_exception_beats_wildcard() -> None:
    """Test an exception overrides the wildcard it excepts, dropping its leftmost label."""
    assert MATCHER.match(["www", "ck"]) == MatchResult(
        suffix_labels=("ck",), origin=Origin.ICANN, rule_kind=RuleKind.EXCEPTION
    )
    assert MATCHER.match(["sub", "www", "ck"]).suffix == "ck"
    assert MATCHER.match(["city", "kawasaki", "jp"]).suffix == "kawasaki.jp"
    assert MATCHER.match(["www", "city", "kawasaki", "jp"]).suffix == "kawasaki.jp"


def test_match_exact_wins_tie_with_wildcard() -> None:
    """Test an exact rule wins over a wildcard rule of the same depth."""
    assert MATCHER.match(["foo", "tie", "example"]).rule_kind is RuleKind.EXACT
    assert MATCHER.match(["foo", "other", "example"]).rule_kind is RuleKind.WILDCARD


def test_match_private() -> None:
    """Test private rules report their origin."""
    assert MATCHER.match(["username", "github", "io"]) == MatchResult(
        suffix_labels=("github", "io"),
        origin=Origin.PRIVATE,
        rule_kind=RuleKind.EXACT,
    )
    assert MATCHER.match(["a", "b", "compute", "amazonaws", "com"]) == MatchResult(
        suffix_labels=("b", "compute", "amazonaws", "com"),
        origin=Origin.PRIVATE,
        rule_kind=RuleKind.WILDCARD,
    )


def test_match_falls_back_to_implicit_rule() -> None:
    """Test unlisted suffixes resolve via the implicit "*" rule."""
    assert MATCHER.match(["internal", "notlisted"]) == MatchResult(
        suffix_labels=("notlisted",),
        origin=Origin.ICANN,
        rule_kind=RuleKind.WILDCARD,
        is_implicit=True,
    )
    # "ck" alone is covered by no rule, only "*.ck"
    assert MATCHER.match(["ck"]).is_implicit
    # a partial path through the trie is not a match
    assert MATCHER.match(["foo", "amazonaws", "org"]).suffix == "org"


def test_match_empty() -> None:
    """Test matching requires at least one label."""
    with pytest.raises(ValueError):
        MATCHER.match([])
