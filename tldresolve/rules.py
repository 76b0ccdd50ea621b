"""Compile raw Public Suffix List text into a structured set of rules.

The list is a newline-delimited text file. Comment lines start with `//`.
Each remaining line holds one rule, which is one of:

    co.uk       an exact suffix
    *.ck        a wildcard, any single label left of "ck" is also a suffix
    !www.ck     an exception to a wildcard, "www.ck" is registrable

Rules are split into ICANN and private sections by marker lines.

    >>> rules = compile_rules(
    ...     "// ===BEGIN ICANN DOMAINS===\\n"
    ...     "uk\\nco.uk\\n*.ck\\n!www.ck\\n"
    ...     "// ===END ICANN DOMAINS===\\n"
    ... )
    >>> len(rules)
    4
    >>> sorted(rules.suffixes())
    ['!www.ck', '*.ck', 'co.uk', 'uk']
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

LOG = logging.getLogger(__name__)

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)

WILDCARD_LABEL = "*"
EXCEPTION_PREFIX = "!"
COMMENT_PREFIX = "//"


class Origin(str, enum.Enum):
    """The section of the list a rule came from."""

    ICANN = "icann"
    PRIVATE = "private"


class RuleKind(str, enum.Enum):
    """How a rule matches hostname labels."""

    EXACT = "exact"
    WILDCARD = "wildcard"
    EXCEPTION = "exception"


SECTION_MARKERS = {
    "===BEGIN ICANN DOMAINS===": (Origin.ICANN, True),
    "===END ICANN DOMAINS===": (Origin.ICANN, False),
    "===BEGIN PRIVATE DOMAINS===": (Origin.PRIVATE, True),
    "===END PRIVATE DOMAINS===": (Origin.PRIVATE, False),
}


class MalformedRuleList(ValueError):
    """The raw list text is not a usable Public Suffix List.

    Not recoverable by retrying. Fix the input, or load a different list.
    """


def ascii_lower(text: str) -> str:
    """Lowercase only the ASCII letters of `text`."""
    return text.translate(_ASCII_LOWER)


@dataclass(frozen=True)
class Rule:
    """A single rule line, normalized."""

    kind: RuleKind
    labels: tuple[str, ...]
    """The rule's labels left-to-right as written, without any `!` prefix.

    Wildcard rules keep their literal "*" label.
    """

    origin: Origin

    @property
    def dotted(self) -> str:
        """The rule's labels joined with dots, e.g. "co.uk" or "*.ck"."""
        return ".".join(self.labels)

    def __str__(self) -> str:
        """Render the rule the way it is written in the list."""
        if self.kind is RuleKind.EXCEPTION:
            return EXCEPTION_PREFIX + self.dotted
        return self.dotted


def parse_rule(line: str, origin: Origin) -> Rule | None:
    """Classify one line of the list as a rule.

    Return `None` for blank lines, comment-only lines, and lines which
    leave no labels after stripping.

    >>> parse_rule("!www.ck", Origin.ICANN)
    Rule(kind=<RuleKind.EXCEPTION: 'exception'>, labels=('www', 'ck'), origin=<Origin.ICANN: 'icann'>)
    >>> parse_rule("// just a comment", Origin.ICANN) is None
    True
    """
    text = line.split(COMMENT_PREFIX, 1)[0].strip()
    if not text:
        return None
    # Anything after the first whitespace is ignored by list consumers.
    text = ascii_lower(text.split()[0])

    if text.startswith(EXCEPTION_PREFIX):
        kind = RuleKind.EXCEPTION
        text = text[len(EXCEPTION_PREFIX) :]
    elif text.startswith(WILDCARD_LABEL + "."):
        kind = RuleKind.WILDCARD
    else:
        kind = RuleKind.EXACT

    labels = tuple(label for label in text.split(".") if label)
    if not labels:
        return None
    if kind is RuleKind.EXCEPTION and len(labels) < 2:
        raise MalformedRuleList(
            f"Exception rule {line.strip()!r} must have at least 2 labels"
        )
    return Rule(kind=kind, labels=labels, origin=origin)


class RuleSet:
    """Rules partitioned by kind, each keyed by its label sequence.

    A later rule with the same kind and labels replaces an earlier one.
    Treat instances as immutable once built. Methods that add or filter
    rules return a new `RuleSet`.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        """Index `rules` by kind and labels, last seen wins."""
        self._by_kind: dict[RuleKind, dict[tuple[str, ...], Rule]] = {
            kind: {} for kind in RuleKind
        }
        for rule in rules:
            self._by_kind[rule.kind][rule.labels] = rule

    @property
    def exact(self) -> dict[tuple[str, ...], Rule]:
        """Exact rules, keyed by labels."""
        return dict(self._by_kind[RuleKind.EXACT])

    @property
    def wildcard(self) -> dict[tuple[str, ...], Rule]:
        """Wildcard rules, keyed by labels including the leading "*"."""
        return dict(self._by_kind[RuleKind.WILDCARD])

    @property
    def exception(self) -> dict[tuple[str, ...], Rule]:
        """Exception rules, keyed by labels without the "!"."""
        return dict(self._by_kind[RuleKind.EXCEPTION])

    def __iter__(self) -> Iterator[Rule]:
        for rules in self._by_kind.values():
            yield from rules.values()

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._by_kind.values())

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{kind.value}={len(rules)}" for kind, rules in self._by_kind.items()
        )
        return f"{type(self).__name__}({counts})"

    def merge(self, rules: Iterable[Rule]) -> RuleSet:
        """Return a new set with `rules` added on top of this one."""
        return RuleSet([*self, *rules])

    def icann_only(self) -> RuleSet:
        """Return a new set with only the ICANN section's rules."""
        return RuleSet(rule for rule in self if rule.origin is Origin.ICANN)

    def suffixes(self, include_private: bool = True) -> list[str]:
        """List every rule in its written form, e.g. "*.ck" or "!www.ck"."""
        return [
            str(rule)
            for rule in self
            if include_private or rule.origin is Origin.ICANN
        ]


def _section_marker(line: str) -> tuple[Origin, bool] | None:
    text = line.strip()
    if text.startswith(COMMENT_PREFIX):
        text = text[len(COMMENT_PREFIX) :].strip()
    return SECTION_MARKERS.get(text)


def compile_rules(raw_text: str) -> RuleSet:
    """Parse the raw list text into a `RuleSet`.

    Every rule must sit between a section's BEGIN and END markers, which
    decide its `Origin`. Raise `MalformedRuleList` if the markers are
    missing or unbalanced, a rule sits outside a section, or no rules are
    found at all.
    """
    lines = raw_text.splitlines()
    if not any(_section_marker(line) is not None for line in lines):
        raise MalformedRuleList(
            "No ===BEGIN ICANN DOMAINS=== or ===BEGIN PRIVATE DOMAINS=== "
            "markers found. Is this a Public Suffix List?"
        )

    rules: list[Rule] = []
    section: Origin | None = None

    for lineno, line in enumerate(lines, start=1):
        marker = _section_marker(line)
        if marker is not None:
            origin, is_begin = marker
            if is_begin and section is not None:
                raise MalformedRuleList(
                    f"line {lineno}: {origin.name} section begins inside the "
                    f"{section.name} section"
                )
            if not is_begin and section is not origin:
                raise MalformedRuleList(
                    f"line {lineno}: {origin.name} section ends without beginning"
                )
            section = origin if is_begin else None
            continue

        if section is None:
            if parse_rule(line, Origin.ICANN) is not None:
                raise MalformedRuleList(
                    f"line {lineno}: rule {line.strip()!r} is outside any "
                    "ICANN or PRIVATE section"
                )
            continue

        try:
            rule = parse_rule(line, section)
        except MalformedRuleList as exc:
            raise MalformedRuleList(f"line {lineno}: {exc}") from exc
        if rule is not None:
            rules.append(rule)

    if section is not None:
        raise MalformedRuleList(f"{section.name} section is never ended")
    if not rules:
        raise MalformedRuleList("No rules found in the suffix list")

    rule_set = RuleSet(rules)
    LOG.debug("compiled %s from %d rule lines", rule_set, len(rules))
    return rule_set
