"""Split a hostname into host, registered domain, and public suffix.

    >>> resolver = Resolver.from_text(
    ...     "// ===BEGIN ICANN DOMAINS===\\n"
    ...     "com\\nio\\nuk\\nco.uk\\n"
    ...     "// ===END ICANN DOMAINS===\\n"
    ...     "// ===BEGIN PRIVATE DOMAINS===\\n"
    ...     "github.io\\n"
    ...     "// ===END PRIVATE DOMAINS===\\n"
    ... )

    >>> resolver.resolve("www.dept1.foo.co.uk")
    ParseResult(host='www.dept1', domain='foo', tld='co.uk', tld_type=<Origin.ICANN: 'icann'>, registered_domain='foo.co.uk')

    >>> resolver.resolve("username.github.io").tld
    'github.io'
    >>> resolver.resolve("username.github.io", ignore_private=True).tld
    'io'

A hostname with nothing left of its public suffix can't be resolved.

    >>> resolver.resolve("co.uk")
    Traceback (most recent call last):
    ...
    tldresolve.resolver.IsPublicSuffix: 'co.uk' is a public suffix, with no registrable domain
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .rules import Origin, Rule, RuleSet, ascii_lower, compile_rules
from .trie import Matcher, MatchResult


class ParseError(ValueError):
    """A hostname could not be resolved. Recoverable, per query."""

    reason = "parse_error"
    message = "{hostname!r} could not be resolved"

    def __init__(self, hostname: Any) -> None:
        """Record the offending input."""
        self.hostname = hostname
        super().__init__(self.message.format(hostname=hostname))


class InvalidInput(ParseError):
    """The input was not a string, or was empty."""

    reason = "invalid_input"
    message = "{hostname!r} is not a non-empty string"


class InvalidHostname(ParseError):
    """The hostname has an empty label, from a leading, trailing, or doubled dot."""

    reason = "invalid_hostname"
    message = "{hostname!r} has an empty label"


class IsPublicSuffix(ParseError):
    """The hostname is exactly a public suffix, with no domain label left of it."""

    reason = "is_public_suffix"
    message = "{hostname!r} is a public suffix, with no registrable domain"


@dataclass(frozen=True, order=True)
class ParseResult:
    """A hostname's resolved host, domain, and public suffix.

    The non-empty parts, joined with dots, rebuild the lowercased input
    hostname.
    """

    host: str | None
    """The labels left of `domain`, or `None` if there are none."""

    domain: str
    """The single label immediately left of the public suffix."""

    tld: str
    """The public suffix, e.g. "com", "co.uk", or "github.io"."""

    tld_type: Origin
    """Whether `tld` came from the list's ICANN or private section."""

    registered_domain: str
    """`domain` and `tld` joined with a dot."""

    @property
    def subdomain(self) -> str:
        """`host`, or the empty string if there is none."""
        return self.host or ""

    @property
    def fqdn(self) -> str:
        """The lowercased hostname, rebuilt from its parts.

        >>> ParseResult("www", "bbc", "co.uk", Origin.ICANN, "bbc.co.uk").fqdn
        'www.bbc.co.uk'
        """
        if self.host:
            return f"{self.host}.{self.registered_domain}"
        return self.registered_domain

    def as_dict(self) -> dict[str, str | None]:
        """Return the fields as plain, JSON-serializable values."""
        return {
            "host": self.host,
            "domain": self.domain,
            "tld": self.tld,
            "tld_type": self.tld_type.value,
            "registered_domain": self.registered_domain,
        }


def split_labels(hostname: Any) -> list[str]:
    """Lowercase a hostname's ASCII letters and split it into labels.

    Raise `InvalidInput` for anything but a non-empty string, and
    `InvalidHostname` if any label is empty.

    >>> split_labels("WWW.Example.com")
    ['www', 'example', 'com']
    """
    if not isinstance(hostname, str) or not hostname:
        raise InvalidInput(hostname)
    labels = ascii_lower(hostname).split(".")
    if not all(labels):
        raise InvalidHostname(hostname)
    return labels


def _assemble(hostname: str, labels: list[str], match: MatchResult) -> ParseResult:
    num_rest = len(labels) - len(match.suffix_labels)
    if num_rest < 1:
        raise IsPublicSuffix(hostname)

    domain = labels[num_rest - 1]
    tld = match.suffix
    return ParseResult(
        host=".".join(labels[: num_rest - 1]) or None,
        domain=domain,
        tld=tld,
        tld_type=match.origin,
        registered_domain=f"{domain}.{tld}",
    )


class Resolver:
    """Resolve hostnames against one compiled `RuleSet`.

    Holds two matchers, one over every rule and one over only the ICANN
    rules, built once at construction. Safe to share between threads.
    """

    def __init__(self, rule_set: RuleSet) -> None:
        """Build the matchers for `rule_set`."""
        self.rule_set = rule_set
        self._matcher = Matcher.build(rule_set)
        self._icann_matcher = Matcher.build(rule_set.icann_only())

    @classmethod
    def from_text(cls, raw_text: str, extra_rules: Iterable[Rule] = ()) -> Resolver:
        """Compile raw list text, plus any extra rules, into a new resolver."""
        rule_set = compile_rules(raw_text)
        if extra_rules:
            rule_set = rule_set.merge(extra_rules)
        return cls(rule_set)

    def resolve(
        self, hostname: str, ignore_private: bool = False, **options: Any
    ) -> ParseResult:
        """Split `hostname` into its host, domain, and public suffix.

        Options other than `ignore_private` are accepted and ignored, so
        callers may pass options meant for newer versions.

        If `ignore_private` is set and the prevailing rule came from the
        list's private section, the hostname is resolved again with only
        the ICANN rules. A private suffix then becomes part of the host and
        domain, e.g. "username.github.io" resolves to host "username",
        domain "github", and tld "io".

        Raise a `ParseError` subclass if the hostname can't be resolved.
        """
        labels = split_labels(hostname)
        match = self._matcher.match(labels)
        result = _assemble(hostname, labels, match)

        if ignore_private and match.origin is Origin.PRIVATE:
            result = _assemble(hostname, labels, self._icann_matcher.match(labels))
        return result

    def registered_domain(self, hostname: str, ignore_private: bool = False) -> str:
        """Return only the registered domain of `hostname`, e.g. "bbc.co.uk"."""
        return self.resolve(hostname, ignore_private=ignore_private).registered_domain

    def public_suffix(self, hostname: str, ignore_private: bool = False) -> str:
        """Return only the public suffix of `hostname`, e.g. "co.uk"."""
        return self.resolve(hostname, ignore_private=ignore_private).tld
