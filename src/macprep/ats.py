"""App Transport Security entries from ``<access>`` and ``<allow-navigation>``.

Whitelist patterns are turned into ``NSAppTransportSecurity`` data:

    * ``*`` allows arbitrary loads,
    * ``http://host`` allows insecure loads for ``host``,
    * ``*://*.host`` or ``https://*.host`` include subdomains of ``host``,
    * ``scheme:*`` style patterns have no hostname and are skipped.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Protocol, Tuple
from urllib.parse import urlsplit

from .log import get_logger
from .models import (
    DEFAULT_TLS_VERSION,
    WILDCARD_HOST,
    AccessRule,
    ExceptionDomain,
    NavigationRule,
    TransportSecurityPolicy,
)

logger = get_logger(__name__)

SUBDOMAIN_WILDCARD = "/*."
SCHEME_AND_SUBDOMAIN_WILDCARD = "*://*."
SCHEME_WILDCARD = "*://"
INSECURE_SCHEME_WILDCARD = "*:/"

_HOST_LABEL = re.compile(r"^[+a-zA-Z0-9_-]{0,63}$")
_HOST_LABEL_START = re.compile(r"^([+a-zA-Z0-9_-]{0,63})(.*)$")
_NON_ASCII = re.compile(r"[^\x00-\x7f]")


class RuleSource(Protocol):
    def get_accesses(self) -> Iterable[AccessRule]: ...

    def get_allow_navigations(self) -> Iterable[NavigationRule]: ...


def split_hostname(hostname: str) -> Tuple[str, str]:
    """Cut ``hostname`` at the first label that is not a valid host label.

    Returns the valid prefix and the remainder as a path, so
    ``*.example.com`` becomes ``("", "/*.example.com")``.
    """
    labels = hostname.split(".")
    for index, label in enumerate(labels):
        if not label or _HOST_LABEL.match(_NON_ASCII.sub("x", label)):
            continue
        match = _HOST_LABEL_START.match(label)
        valid = labels[:index] + [match.group(1)]
        rest = [match.group(2)] + labels[index + 1 :]
        return ".".join(valid), "/" + ".".join(rest)
    return hostname, ""


def parse_pattern(pattern: str) -> Tuple[str, Optional[str], str]:
    """Return ``(scheme, hostname, path)`` for a whitelist pattern."""
    try:
        parts = urlsplit(pattern)
        hostname = parts.hostname if parts.scheme else None
    except ValueError:
        return "", None, pattern
    path = parts.path
    if not parts.scheme and parts.netloc:
        # "//host" without a scheme is a path
        path = "//" + parts.netloc + path
    if hostname and "[" not in parts.netloc:
        hostname, overflow = split_hostname(hostname)
        path = overflow + path
    return parts.scheme, hostname or None, path


def parse_whitelist_url(
    url: str,
    minimum_tls_version: Optional[str] = None,
    requires_forward_secrecy: Optional[str] = None,
) -> Optional[ExceptionDomain]:
    """Parse one whitelist pattern into an exception domain.

    Returns ``None`` when the pattern has no usable hostname and should be
    left out of the policy entirely. Fields are only set when they differ
    from the ATS defaults.
    """
    if url == WILDCARD_HOST:
        return ExceptionDomain(hostname=WILDCARD_HOST)

    scheme, hostname, path = parse_pattern(url)
    includes_subdomains = None

    if not hostname:
        if path.startswith(SUBDOMAIN_WILDCARD):
            includes_subdomains = True
            hostname = path[len(SUBDOMAIN_WILDCARD) :]
        elif path.startswith(SCHEME_AND_SUBDOMAIN_WILDCARD):
            includes_subdomains = True
            hostname = path[len(SCHEME_AND_SUBDOMAIN_WILDCARD) :]
        elif path.startswith(SCHEME_WILDCARD):
            hostname = path[len(SCHEME_WILDCARD) :]
        else:
            # "scheme:*" and friends would otherwise add a blank key
            logger.debug("Skipping whitelist entry without hostname: %s", url)
            return None

    entry = ExceptionDomain(hostname=hostname, includes_subdomains=includes_subdomains)

    if minimum_tls_version and minimum_tls_version != DEFAULT_TLS_VERSION:
        entry.minimum_tls_version = minimum_tls_version

    if requires_forward_secrecy and requires_forward_secrecy != "true":
        entry.requires_forward_secrecy = False

    if scheme == "http":
        entry.allows_insecure_http_loads = True
    elif not scheme and path.startswith(INSECURE_SCHEME_WILDCARD):
        entry.allows_insecure_http_loads = True

    return entry


def consolidate_entries(
    access_rules: Iterable[AccessRule],
    navigation_rules: Iterable[NavigationRule],
) -> dict[str, ExceptionDomain]:
    """Union all rules into one exception domain per hostname.

    Navigation rules are processed before access rules; for a repeated
    hostname each later rule overwrites only the fields it sets.
    """
    rules = list(navigation_rules) + [rule.as_navigation() for rule in access_rules]
    consolidated: dict[str, ExceptionDomain] = {}
    for rule in rules:
        entry = parse_whitelist_url(
            rule.href, rule.minimum_tls_version, rule.requires_forward_secrecy
        )
        if entry is None:
            continue
        existing = consolidated.get(entry.hostname)
        consolidated[entry.hostname] = existing.merged(entry) if existing else entry
    return consolidated


def assemble_policy(consolidated: dict[str, ExceptionDomain]) -> TransportSecurityPolicy:
    """Split the wildcard host from the per-hostname exception domains."""
    policy = TransportSecurityPolicy()
    domains: dict[str, ExceptionDomain] = {}
    for hostname, entry in consolidated.items():
        if hostname == WILDCARD_HOST:
            policy.allows_arbitrary_loads = True
            continue
        domains[hostname] = entry
    if domains:
        policy.exception_domains = domains
    return policy


def build_ats_policy(config: RuleSource) -> TransportSecurityPolicy:
    """Compile the access and navigation rules of ``config`` into an ATS policy."""
    consolidated = consolidate_entries(
        config.get_accesses(), config.get_allow_navigations()
    )
    policy = assemble_policy(consolidated)
    logger.debug(
        "ATS policy: arbitrary_loads=%s, %d exception domain(s)",
        bool(policy.allows_arbitrary_loads),
        len(policy.exception_domains or {}),
    )
    return policy
