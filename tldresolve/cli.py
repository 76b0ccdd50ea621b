"""tldresolve CLI."""

import argparse
import json
import logging
import os.path
import pathlib
import sys

from ._version import version as __version__
from .resolver import ParseError
from .tldresolve import TLDResolve


def main():
    """Tldresolve CLI main command."""
    logging.basicConfig()

    parser = argparse.ArgumentParser(
        prog="tldresolve",
        description="Split a hostname into host, domain, and public suffix",
    )

    parser.add_argument(
        "--version", action="version", version="%(prog)s " + __version__
    )
    parser.add_argument(
        "input", metavar="hostname", type=str, nargs="*", help="hostname"
    )

    parser.add_argument(
        "-j",
        "--json",
        default=False,
        action="store_true",
        help="output in json format",
    )
    parser.add_argument(
        "-u",
        "--update",
        default=False,
        action="store_true",
        help="force fetch the latest suffix list definitions",
    )
    parser.add_argument(
        "--suffix_list_url",
        action="append",
        required=False,
        help="use an alternate URL or local file for the suffix list, can be given multiple times",
    )
    parser.add_argument(
        "-c", "--cache_dir", help="use an alternate suffix list caching folder"
    )
    parser.add_argument(
        "--no_fallback_to_snapshot",
        default=True,
        action="store_false",
        dest="fallback_to_snapshot",
        help="don't fall back to the bundled snapshot if the suffix list can't be fetched",
    )
    parser.add_argument(
        "-i",
        "--ignore_private",
        default=False,
        action="store_true",
        help="treat the list's private suffixes, like github.io, as registrable domains",
    )

    args = parser.parse_args()

    obj_kwargs = {
        "fallback_to_snapshot": args.fallback_to_snapshot,
    }

    if args.cache_dir:
        obj_kwargs["cache_dir"] = args.cache_dir

    if args.suffix_list_url is not None:
        suffix_list_urls = []
        for source in args.suffix_list_url:
            if os.path.isfile(source):
                as_path_uri = pathlib.Path(os.path.abspath(source)).as_uri()
                suffix_list_urls.append(as_path_uri)
            else:
                suffix_list_urls.append(source)

        obj_kwargs["suffix_list_urls"] = suffix_list_urls

    tld_resolve = TLDResolve(**obj_kwargs)

    if args.update:
        tld_resolve.update(True)
    elif not args.input:
        parser.print_usage()
        sys.exit(1)

    exit_code = 0
    for i in args.input:
        try:
            result = tld_resolve(i, ignore_private=args.ignore_private)
        except ParseError as exc:
            print(f"{i}: {exc.reason}", file=sys.stderr)
            exit_code = 1
            continue

        if args.json:
            print(json.dumps(result.as_dict()))
        else:
            print(f"{result.subdomain} {result.domain} {result.tld}")

    if exit_code:
        sys.exit(exit_code)
