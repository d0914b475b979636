#!/usr/bin/env python3

"""Parsing of git remote URLs and provider-specific compare URLs."""

import enum
import ipaddress
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

__all__ = [
    "ParsedRemote",
    "Provider",
    "parse_remote_url",
    "provider_for_host",
    "generate_compare_url",
]


@dataclass(frozen=True)
class ParsedRemote:
    host: str
    repo_path: str
    protocol: str


class Provider(enum.Enum):
    GITHUB = "github"
    GENERIC_MERGE_REQUEST = "generic_merge_request"


# (pattern, protocol) pairs, checked in order; first match wins
_REMOTE_PATTERNS = [
    (re.compile(r"^git@([^:]+):(.+?)(?:\.git)?$"), "https"),
    (re.compile(r"^ssh://git@([^/]+)/(.+?)(?:\.git)?$"), "https"),
    (re.compile(r"^https://([^/]+)/(.+?)(?:\.git)?$"), "https"),
    (re.compile(r"^http://([^/]+)/(.+?)(?:\.git)?$"), "http"),
]

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "!~*'()"


def _is_ip_literal(host: str) -> bool:
    """Return True if host (optionally with a port) is an IPv4/IPv6 literal."""
    candidate = host
    if candidate.startswith("["):
        candidate = candidate[1:].split("]", 1)[0]
    elif candidate.count(":") == 1:
        candidate = candidate.split(":", 1)[0]
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        return False
    return True


def parse_remote_url(remote: str) -> Optional[ParsedRemote]:
    """Parse a git remote URL into host, repository path and protocol.

    Recognizes, in order, ``git@host:path``, ``ssh://git@host/path``,
    ``https://host/path`` and ``http://host/path``, each with an optional
    ``.git`` suffix. Hosts that are IP literals always get ``http`` since
    self-hosted servers addressed by IP rarely have valid certificates.

    Returns:
        The parsed remote, or None if the URL is not in a supported form.
    """
    remote = remote.strip()
    for pattern, protocol in _REMOTE_PATTERNS:
        match = pattern.match(remote)
        if match is None:
            continue
        host, repo_path = match.group(1), match.group(2)
        if _is_ip_literal(host):
            protocol = "http"
        return ParsedRemote(host=host, repo_path=repo_path, protocol=protocol)
    return None


def provider_for_host(host: str) -> Provider:
    if "github.com" in host:
        return Provider.GITHUB
    return Provider.GENERIC_MERGE_REQUEST


def generate_compare_url(
    host: str, repo_path: str, protocol: str, source_branch: str, target_branch: str
) -> str:
    """Build the URL that opens a pull/merge request from source into target."""
    base_url = f"{protocol}://{host}/{repo_path}"
    provider = provider_for_host(host)

    if provider is Provider.GITHUB:
        return f"{base_url}/compare/{target_branch}...{source_branch}"

    encoded_source = quote(source_branch, safe=_URI_COMPONENT_SAFE)
    encoded_target = quote(target_branch, safe=_URI_COMPONENT_SAFE)
    return (
        f"{base_url}/merge_requests/new"
        f"?merge_request%5Bsource_branch%5D={encoded_source}"
        f"&merge_request%5Btarget_branch%5D={encoded_target}"
    )
