"""Longest-match lookup of public suffix rules in a reversed-label trie."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .rules import WILDCARD_LABEL, Origin, Rule, RuleKind, RuleSet


class Trie:
    """Trie for storing suffix rules with their labels in reverse-order.

    The edge out of the root is a rule's rightmost label. A node is a
    terminal for each kind of rule whose full path ends there, e.g. the
    node reached by "uk" then "co" is the `Exact` terminal of "co.uk".
    """

    __slots__ = ("matches", "terminals")

    def __init__(
        self,
        matches: dict[str, Trie] | None = None,
        terminals: dict[RuleKind, Origin] | None = None,
    ) -> None:
        """Create a node with the given child edges and terminal markers."""
        self.matches = matches if matches else {}
        self.terminals = terminals if terminals else {}

    @staticmethod
    def create(rules: Iterable[Rule]) -> Trie:
        """Create a Trie from rules and return its root node."""
        root_node = Trie()
        for rule in rules:
            root_node.add_rule(rule)
        return root_node

    def add_rule(self, rule: Rule) -> None:
        """Append a rule's labels to this Trie node, marking its terminal."""
        node = self
        for label in reversed(rule.labels):
            if label not in node.matches:
                node.matches[label] = Trie()
            node = node.matches[label]
        node.terminals[rule.kind] = rule.origin

    def __repr__(self) -> str:
        kinds = ",".join(kind.value for kind in self.terminals)
        return f"Trie(terminals=[{kinds}], matches={sorted(self.matches)})"


@dataclass(frozen=True)
class MatchResult:
    """The prevailing rule's public suffix for a sequence of labels."""

    suffix_labels: tuple[str, ...]
    """The public suffix's labels, in the hostname's left-to-right order."""

    origin: Origin
    rule_kind: RuleKind

    is_implicit: bool = False
    """Whether no listed rule matched and the implicit "*" rule prevailed."""

    @property
    def suffix(self) -> str:
        """The public suffix as a dotted string."""
        return ".".join(self.suffix_labels)


class Matcher:
    """Resolve hostname labels against a compiled, read-only suffix trie.

    Build once with `Matcher.build`, then call `match` from any number of
    threads. Nothing mutates the trie after construction.

    >>> from tldresolve.rules import compile_rules
    >>> matcher = Matcher.build(compile_rules(
    ...     "// ===BEGIN ICANN DOMAINS===\\n"
    ...     "uk\\nco.uk\\n*.ck\\n!www.ck\\n"
    ...     "// ===END ICANN DOMAINS===\\n"
    ... ))
    >>> matcher.match(["www", "example", "co", "uk"]).suffix
    'co.uk'
    >>> matcher.match(["foo", "bar", "ck"]).suffix
    'bar.ck'
    >>> matcher.match(["www", "ck"]).suffix
    'ck'
    >>> matcher.match(["example", "notlisted"]).is_implicit
    True
    """

    def __init__(self, root: Trie) -> None:
        """Wrap an already populated trie."""
        self.root = root

    @classmethod
    def build(cls, rule_set: RuleSet) -> Matcher:
        """Compile every rule in `rule_set` into a new matcher."""
        return cls(Trie.create(rule_set))

    def match(self, labels: Sequence[str]) -> MatchResult:
        """Find the prevailing rule for already lowercased `labels`.

        Walks the trie from the hostname's rightmost label. The deepest
        terminal on the walked path prevails, an `Exact` terminal winning a
        tie with a `Wildcard` one. An `Exception` terminal prevails over
        everything, and its leftmost label is dropped from the suffix. If no
        rule matches, the implicit "*" rule makes the rightmost label the
        suffix.
        """
        if not labels:
            raise ValueError("Cannot match an empty sequence of labels")

        num_labels = len(labels)
        node = self.root
        best_depth = 0
        best_origin = Origin.ICANN
        best_kind = RuleKind.WILDCARD

        for depth, label in enumerate(reversed(labels), start=1):
            wildcard_node = node.matches.get(WILDCARD_LABEL)
            if wildcard_node is not None:
                wildcard_origin = wildcard_node.terminals.get(RuleKind.WILDCARD)
                if wildcard_origin is not None and depth > best_depth:
                    best_depth = depth
                    best_origin = wildcard_origin
                    best_kind = RuleKind.WILDCARD

            next_node = node.matches.get(label)
            if next_node is None:
                break
            node = next_node

            exception_origin = node.terminals.get(RuleKind.EXCEPTION)
            if exception_origin is not None:
                return MatchResult(
                    suffix_labels=tuple(labels[num_labels - depth + 1 :]),
                    origin=exception_origin,
                    rule_kind=RuleKind.EXCEPTION,
                )

            exact_origin = node.terminals.get(RuleKind.EXACT)
            if exact_origin is not None and depth >= best_depth:
                best_depth = depth
                best_origin = exact_origin
                best_kind = RuleKind.EXACT

        if not best_depth:
            return MatchResult(
                suffix_labels=(labels[-1],),
                origin=Origin.ICANN,
                rule_kind=RuleKind.WILDCARD,
                is_implicit=True,
            )

        return MatchResult(
            suffix_labels=tuple(labels[num_labels - best_depth :]),
            origin=best_origin,
            rule_kind=best_kind,
        )
