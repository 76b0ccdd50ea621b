"""`tldresolve` splits a hostname into its host, registered domain, and public suffix.

It does this via the Public Suffix List (PSL).

    >>> import tldresolve

    >>> tldresolve.resolve("forums.news.cnn.com")
    ParseResult(host='forums.news', domain='cnn', tld='com', tld_type=<Origin.ICANN: 'icann'>, registered_domain='cnn.com')

    >>> tldresolve.resolve("forums.bbc.co.uk")  # United Kingdom
    ParseResult(host='forums', domain='bbc', tld='co.uk', tld_type=<Origin.ICANN: 'icann'>, registered_domain='bbc.co.uk')

Private suffixes, like GitHub Pages, are suffixes too, unless ignored.

    >>> tldresolve.public_suffix("username.github.io")
    'github.io'
    >>> tldresolve.public_suffix("username.github.io", ignore_private=True)
    'io'

Hostnames that are only a public suffix have no registered domain.

    >>> tldresolve.registered_domain("co.uk")
    Traceback (most recent call last):
    ...
    tldresolve.resolver.IsPublicSuffix: 'co.uk' is a public suffix, with no registrable domain
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Sequence
from functools import wraps
from typing import Any

import requests

from .cache import SuffixListCache, get_cache_dir
from .resolver import ParseResult, Resolver
from .rules import Origin, RuleSet, parse_rule
from .suffix_list import get_rule_set

LOG = logging.getLogger("tldresolve")

CACHE_TIMEOUT = os.environ.get("TLDRESOLVE_CACHE_TIMEOUT")

PUBLIC_SUFFIX_LIST_URLS = (
    "https://publicsuffix.org/list/public_suffix_list.dat",
    "https://raw.githubusercontent.com/publicsuffix/list/master/public_suffix_list.dat",
)


class TLDResolve:
    """A callable for resolving hostnames into host, domain, and public suffix."""

    def __init__(
        self,
        cache_dir: str | None = get_cache_dir(),
        suffix_list_urls: Sequence[str] = PUBLIC_SUFFIX_LIST_URLS,
        fallback_to_snapshot: bool = True,
        extra_suffixes: Sequence[str] = (),
        cache_fetch_timeout: str | float | None = CACHE_TIMEOUT,
    ) -> None:
        """Construct a callable for resolving hostnames.

        Nothing is fetched until the first hostname is resolved. Then the
        raw list text is looked up in `cache_dir`, which defaults to a
        per-user cache directory. Set `cache_dir` to `None` to disable the
        cache.

        If the cached text does not exist, such as on the first run, HTTP
        request the URLs in `suffix_list_urls` in order, and use the first
        successful response. Local files can be specified by using the
        `file://` protocol. To disable HTTP requests, set this to an empty
        sequence.

        If no text is found from the cache or the URLs, fall back to the
        snapshot bundled with this package. To raise `SuffixListNotFound`
        instead, set `fallback_to_snapshot` to `False`.

        Extra rules in `extra_suffixes`, written like list lines ("foo",
        "*.foo", "!bar.foo"), are merged into the list as ICANN rules.

        `cache_fetch_timeout` is passed to `requests` as the fetch timeout. It
        can also be set with the `TLDRESOLVE_CACHE_TIMEOUT` environment
        variable.
        """
        suffix_list_urls = suffix_list_urls or ()
        self.suffix_list_urls = tuple(
            url.strip() for url in suffix_list_urls if url.strip()
        )

        self.fallback_to_snapshot = fallback_to_snapshot
        if not (self.suffix_list_urls or cache_dir or self.fallback_to_snapshot):
            raise ValueError(
                "The arguments you have provided disable all ways for tldresolve "
                "to obtain data. Please provide a suffix list data, a cache_dir, "
                "or set `fallback_to_snapshot` to `True`."
            )

        self.extra_rules = [
            rule
            for rule in (parse_rule(suffix, Origin.ICANN) for suffix in extra_suffixes)
            if rule is not None
        ]
        self._resolver: Resolver | None = None
        self._lock = threading.Lock()

        self.cache_fetch_timeout = (
            float(cache_fetch_timeout)
            if isinstance(cache_fetch_timeout, str)
            else cache_fetch_timeout
        )
        self._cache = SuffixListCache(cache_dir)

    def __call__(
        self,
        hostname: str,
        ignore_private: bool = False,
        session: requests.Session | None = None,
        **options: Any,
    ) -> ParseResult:
        """Alias for `resolve`."""
        return self.resolve(
            hostname, ignore_private=ignore_private, session=session, **options
        )

    def resolve(
        self,
        hostname: str,
        ignore_private: bool = False,
        session: requests.Session | None = None,
        **options: Any,
    ) -> ParseResult:
        """Split a hostname into its host, domain, and public suffix.

        >>> resolver = TLDResolve()
        >>> resolver.resolve("a.b.c.d.example.com").host
        'a.b.c.d'

        Allows configuring the HTTP request that fetches the list via the
        optional `session` parameter, e.g. to use a HTTP proxy. It is only
        used on the first call, or the first call after `update`. Other
        options are accepted and ignored.

        Raise a `tldresolve.ParseError` subclass if the hostname can't be
        resolved.
        """
        return self._get_resolver(session).resolve(
            hostname, ignore_private=ignore_private, **options
        )

    def registered_domain(
        self,
        hostname: str,
        ignore_private: bool = False,
        session: requests.Session | None = None,
    ) -> str:
        """Return the registered domain of `hostname`, e.g. "bbc.co.uk"."""
        return self.resolve(hostname, ignore_private, session).registered_domain

    def public_suffix(
        self,
        hostname: str,
        ignore_private: bool = False,
        session: requests.Session | None = None,
    ) -> str:
        """Return the public suffix of `hostname`, e.g. "co.uk"."""
        return self.resolve(hostname, ignore_private, session).tld

    def update(
        self, fetch_now: bool = False, session: requests.Session | None = None
    ) -> None:
        """Force fetch the latest suffix list definitions."""
        with self._lock:
            self._resolver = None
            self._cache.clear()
        if fetch_now:
            self._get_resolver(session=session)

    @property
    def rules(self) -> RuleSet:
        """The compiled rules in use, including any extra suffixes."""
        return self._get_resolver().rule_set

    def _get_resolver(self, session: requests.Session | None = None) -> Resolver:
        """Get or compute this object's resolver.

        Looks up the raw list text in roughly the following order, based on
        the settings passed to __init__:

        1. Memoized on `self`
        2. Local system cache file
        3. Remote PSL, over HTTP
        4. Bundled PSL snapshot file

        A cached or fetched list that doesn't compile is skipped like a failed
        fetch, and never stays in the cache.
        """
        resolver = self._resolver
        if resolver is not None:
            return resolver

        with self._lock:
            if self._resolver is None:
                rule_set = get_rule_set(
                    cache=self._cache,
                    urls=self.suffix_list_urls,
                    cache_fetch_timeout=self.cache_fetch_timeout,
                    fallback_to_snapshot=self.fallback_to_snapshot,
                    session=session,
                )
                if self.extra_rules:
                    rule_set = rule_set.merge(self.extra_rules)
                resolver = Resolver(rule_set)
                LOG.debug("loaded %s", resolver.rule_set)
                self._resolver = resolver
            return self._resolver


TLD_RESOLVER = TLDResolve()


@wraps(TLD_RESOLVER.resolve)
def resolve(  # noqa: D103
    hostname: str,
    ignore_private: bool = False,
    session: requests.Session | None = None,
    **options: Any,
) -> ParseResult:
    return TLD_RESOLVER.resolve(
        hostname, ignore_private=ignore_private, session=session, **options
    )


@wraps(TLD_RESOLVER.registered_domain)
def registered_domain(  # noqa: D103
    hostname: str,
    ignore_private: bool = False,
    session: requests.Session | None = None,
) -> str:
    return TLD_RESOLVER.registered_domain(hostname, ignore_private, session)


@wraps(TLD_RESOLVER.public_suffix)
def public_suffix(  # noqa: D103
    hostname: str,
    ignore_private: bool = False,
    session: requests.Session | None = None,
) -> str:
    return TLD_RESOLVER.public_suffix(hostname, ignore_private, session)


@wraps(TLD_RESOLVER.update)
def update(*args, **kwargs):  # type: ignore[no-untyped-def]  # noqa: D103
    return TLD_RESOLVER.update(*args, **kwargs)
