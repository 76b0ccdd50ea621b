"""`tldresolve` splits a hostname into its host, registered domain, and public suffix,
using the Public Suffix List (PSL).

    >>> import tldresolve
    >>> tldresolve.resolve('forums.news.cnn.com')
    ParseResult(host='forums.news', domain='cnn', tld='com', tld_type=<Origin.ICANN: 'icann'>, registered_domain='cnn.com')
    >>> tldresolve.registered_domain('www.dept1.foo.co.uk')
    'foo.co.uk'

The PSL's private suffixes, like github.io, count as public suffixes by
default. Pass `ignore_private=True` to resolve against the ICANN suffixes
only.

    >>> tldresolve.resolve('username.github.io', ignore_private=True).registered_domain
    'github.io'
"""

import re
from pathlib import Path

from setuptools import setup

INSTALL_REQUIRES = ["requests>=2.1.0", "requests-file>=1.4", "filelock>=3.0.8"]

TESTS_REQUIRE = ["pytest", "pytest-mock", "responses"]

VERSION = re.search(
    r'^version = "([^"]+)"',
    Path(__file__).with_name("tldresolve").joinpath("_version.py").read_text(),
    re.MULTILINE,
).group(1)

setup(
    name="tldresolve",
    version=VERSION,
    description=(
        "Splits a hostname into its host, registered domain, and public "
        "suffix, using the Public Suffix List (PSL). Private suffixes, "
        "like github.io, can optionally be ignored."
    ),
    license="BSD License",
    keywords="tld domain subdomain hostname public suffix list publicsuffix registered domain etld",
    packages=["tldresolve"],
    package_data={"tldresolve": [".tld_set_snapshot"]},
    include_package_data=True,
    python_requires=">=3.9",
    long_description=__doc__,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Topic :: Utilities",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    entry_points={
        "console_scripts": [
            "tldresolve = tldresolve.cli:main",
        ]
    },
    install_requires=INSTALL_REQUIRES,
    extras_require={"test": TESTS_REQUIRE},
)
