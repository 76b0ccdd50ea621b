"""On-disk cache of fetched suffix list text, one file per URL."""

import errno
import hashlib
import logging
import os
import sys

from filelock import FileLock

LOG = logging.getLogger(__name__)

_DID_LOG_UNABLE_TO_CACHE = False


def get_pkg_unique_identifier():
    """Identify this interpreter and tldresolve version, for a cache path.

    Separate virtualenvs, and separate releases of tldresolve, then never
    read each other's cached lists.
    """
    try:
        from tldresolve._version import version
    except ImportError:
        version = "dev"

    # hash the full prefix, since two environments may share a basename
    prefix_hash = hashlib.md5(
        sys.prefix.encode("utf-8"), usedforsecurity=False
    ).hexdigest()[:6]
    return "__".join(
        [
            ".".join(str(part) for part in sys.version_info[:-1]),
            os.path.basename(sys.prefix),
            prefix_hash,
            "tldresolve-" + version,
        ]
    )


def get_cache_dir():
    """Pick the default cache directory.

    `TLDRESOLVE_CACHE` wins. Otherwise follow the XDG base directory
    convention, and as a last resort use a folder inside the package.
    """
    override = os.environ.get("TLDRESOLVE_CACHE")
    if override is not None:
        return override

    xdg_cache_home = os.getenv("XDG_CACHE_HOME")
    if xdg_cache_home is None and os.getenv("HOME"):
        xdg_cache_home = os.path.join(os.environ["HOME"], ".cache")

    if xdg_cache_home is not None:
        return os.path.join(
            xdg_cache_home, "python-tldresolve", get_pkg_unique_identifier()
        )
    return os.path.join(os.path.dirname(__file__), ".suffix_cache")


class SuffixListCache:
    """Raw suffix list text stored on disk, keyed by the URL it came from.

    Text is only stored after the caller's `parse` accepts it, so a bad
    response (a captive portal's login page, say) never outlives the
    request that fetched it. A `cache_dir` of `None` disables storage.
    """

    file_ext = ".tldresolve.dat"

    def __init__(self, cache_dir, lock_timeout=20):
        self.enabled = bool(cache_dir)
        self.cache_dir = os.path.expanduser(cache_dir or "")
        self.lock_timeout = lock_timeout

    def path_for(self, url):
        """Return the file a URL's text is stored in."""
        digest = hashlib.md5(url.encode("utf-8"), usedforsecurity=False).hexdigest()
        return os.path.join(self.cache_dir, "urls", digest + self.file_ext)

    def get(self, url):
        """Return the stored text for `url`, or `None` if there is none."""
        if not self.enabled:
            return None
        path = self.path_for(url)
        try:
            with open(path, encoding="utf-8") as cache_file:
                return cache_file.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOG.error("error reading suffix list cache file %s: %s", path, exc)
            return None

    def set(self, url, text):
        """Store `text` as the contents of `url`."""
        if not self.enabled:
            return
        path = self.path_for(url)
        try:
            _make_dir(path)
            with open(path, "w", encoding="utf-8") as cache_file:
                cache_file.write(text)
        except OSError as ioe:
            _log_unable_to_cache(url, path, ioe)

    def discard(self, url):
        """Forget the stored text for `url`, if any."""
        if self.enabled:
            _unlink_quietly(self.path_for(url))

    def clear(self):
        """Forget every stored URL."""
        for root, _, files in os.walk(self.cache_dir):
            for filename in files:
                if filename.endswith((self.file_ext, self.file_ext + ".lock")):
                    _unlink_quietly(os.path.join(root, filename))

    def fetch(self, session, url, timeout, parse):
        """Return `parse(text)` for the text at `url`, fetching on a miss.

        The lookup and any fetch happen under a file lock, so concurrent
        processes sharing a cache make one request between them. A stored
        entry that `parse` rejects with a `ValueError` is discarded and
        fetched again. Freshly fetched text that `parse` rejects is not
        stored, and the error propagates.
        """
        if not self.enabled:
            return parse(_fetch_url(session, url, timeout))

        path = self.path_for(url)
        try:
            _make_dir(path)
        except OSError as ioe:
            _log_unable_to_cache(url, path, ioe)
            return parse(_fetch_url(session, url, timeout))

        with FileLock(path + ".lock", timeout=self.lock_timeout):
            text = self.get(url)
            if text is not None:
                try:
                    return parse(text)
                except ValueError as exc:
                    LOG.warning("discarding cached suffix list for %s: %s", url, exc)
                    self.discard(url)

            text = _fetch_url(session, url, timeout)
            result = parse(text)
            self.set(url, text)
            return result


def _log_unable_to_cache(url, path, ioe):
    global _DID_LOG_UNABLE_TO_CACHE
    if _DID_LOG_UNABLE_TO_CACHE:
        return
    LOG.warning(
        "unable to cache %s in %s. This could refresh the "
        "Public Suffix List over HTTP every app startup. "
        "Construct your `TLDResolve` with a writable `cache_dir` or "
        "set `cache_dir=None` to silence this warning. %s",
        url,
        path,
        ioe,
    )
    _DID_LOG_UNABLE_TO_CACHE = True


def _fetch_url(session, url, timeout):
    response = session.get(url, timeout=timeout)
    response.raise_for_status()
    text = response.text
    if not isinstance(text, str):
        text = str(text, "utf-8")
    return text


def _unlink_quietly(path):
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def _make_dir(filename):
    """Make a file's directory if it doesn't already exist."""
    dirname = os.path.dirname(filename)
    try:
        os.makedirs(dirname)
    except OSError as exc:  # race condition
        if exc.errno != errno.EEXIST:
            raise
