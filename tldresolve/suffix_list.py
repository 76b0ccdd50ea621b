"""Load the Public Suffix List from a URL, the cache, or the bundled snapshot."""

import logging
import pkgutil

import requests
from requests_file import FileAdapter

from .rules import MalformedRuleList, compile_rules

LOG = logging.getLogger("tldresolve")


class SuffixListNotFound(LookupError):
    """A recoverable error while looking up a suffix list.

    Recoverable because you can specify backups, or use this library's bundled
    snapshot.
    """


def find_first_response(cache, urls, cache_fetch_timeout=None, session=None):
    """Compile the first URL whose response is a usable suffix list.

    A URL that can't be fetched, or whose text doesn't compile, is logged
    and skipped in favor of the next one.
    """
    session_created = False
    if session is None:
        session = requests.Session()
        session.mount("file://", FileAdapter())
        session_created = True

    try:
        for url in urls:
            try:
                return cache.fetch(session, url, cache_fetch_timeout, compile_rules)
            except requests.exceptions.RequestException:
                LOG.exception("Exception reading Public Suffix List url %s", url)
            except MalformedRuleList:
                LOG.exception("Public Suffix List url %s returned an unusable list", url)
    finally:
        # only close the session if we created it
        if session_created:
            session.close()

    raise SuffixListNotFound(
        "No remote Public Suffix List found. Consider using a mirror, or avoid this"
        " fetch by constructing your TLDResolve with `suffix_list_urls=()`."
    )


def get_rule_set(cache, urls, cache_fetch_timeout, fallback_to_snapshot, session=None):
    """Compile the suffix list from `urls`, falling back to the bundled snapshot."""
    try:
        return find_first_response(
            cache, urls, cache_fetch_timeout=cache_fetch_timeout, session=session
        )
    except SuffixListNotFound:
        if not fallback_to_snapshot:
            raise

    LOG.debug("using the bundled Public Suffix List snapshot")
    snapshot = pkgutil.get_data("tldresolve", ".tld_set_snapshot")
    return compile_rules(snapshot.decode("utf-8"))
