"""
URL and domain helpers for info sources.

Info sources are identified by the host names they publish under; reference
URLs are matched against those hosts.
"""
from __future__ import annotations

from typing import Iterable
from urllib.parse import urlsplit


def _add_scheme_if_missing(url: str) -> str:
    u = url.strip()
    if "://" in u:
        return u
    return f"http://{u}"


def domain_from_url(url: str) -> str:
    """Return the lower-cased host of ``url``.

    Scheme-less input such as ``www.example.com/path`` is accepted.

    Raises:
        ValueError: If the url is empty or has no host.
    """
    if not url or not url.strip():
        raise ValueError("URL must be provided")
    host = urlsplit(_add_scheme_if_missing(url)).hostname
    if not host:
        raise ValueError(f"Could not extract domain from url: {url}")
    return host.lower()


def validate_domain(domain: str) -> str:
    """Return the normalized domain or raise ValueError.

    A domain is a bare host name: no scheme, path, port or whitespace.
    """
    if not domain or not domain.strip():
        raise ValueError("Domain must be provided")
    normalized = domain.strip().lower()
    if "://" in normalized or "/" in normalized or ":" in normalized or any(ch.isspace() for ch in normalized):
        raise ValueError(f"Invalid domain: {domain}")
    if normalized.startswith(".") or normalized.endswith(".") or ".." in normalized:
        raise ValueError(f"Invalid domain: {domain}")
    return normalized


def url_matches_domains(url: str, domains: Iterable[str]) -> bool:
    """Return True when the url host equals one of ``domains`` or is a subdomain of one."""
    try:
        host = domain_from_url(url)
    except ValueError:
        return False
    for domain in domains:
        d = domain.lower()
        if host == d or host.endswith("." + d):
            return True
    return False
