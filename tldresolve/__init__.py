"""Export tldresolve's public interface."""

from . import _version
from .resolver import (
    InvalidHostname,
    InvalidInput,
    IsPublicSuffix,
    ParseError,
    ParseResult,
    Resolver,
)
from .rules import MalformedRuleList, Origin, RuleKind, RuleSet, compile_rules
from .tldresolve import (
    TLDResolve,
    public_suffix,
    registered_domain,
    resolve,
    update,
)

__version__: str = _version.version

__all__ = [
    "__version__",
    "compile_rules",
    "InvalidHostname",
    "InvalidInput",
    "IsPublicSuffix",
    "MalformedRuleList",
    "Origin",
    "ParseError",
    "ParseResult",
    "public_suffix",
    "registered_domain",
    "resolve",
    "Resolver",
    "RuleKind",
    "RuleSet",
    "TLDResolve",
    "update",
]
