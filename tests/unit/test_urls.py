import pytest

from product_ethics.utils.urls import (
    _add_scheme_if_missing,
    domain_from_url,
    url_matches_domains,
    validate_domain,
)


def test_add_scheme_if_missing():
    assert _add_scheme_if_missing("https://example.com") == "https://example.com"
    assert _add_scheme_if_missing(" example.com/x ") == "http://example.com/x"


@pytest.mark.parametrize(
    "url,domain",
    [
        ("http://www.dr.dk/nyheder/artikel", "www.dr.dk"),
        ("https://EXAMPLE.com:8443/a?b=c", "example.com"),
        ("example.org/path", "example.org"),
    ],
)
def test_domain_from_url(url, domain):
    assert domain_from_url(url) == domain


@pytest.mark.parametrize("url", ["", "   ", "http://", "http:///path"])
def test_domain_from_url_rejects_hostless(url):
    with pytest.raises(ValueError):
        domain_from_url(url)


def test_validate_domain():
    assert validate_domain(" Example.COM ") == "example.com"
    for bad in ["", "http://x.com", "x.com/a", "x.com:80", "a b.com", ".x.com", "x..com"]:
        with pytest.raises(ValueError):
            validate_domain(bad)


def test_url_matches_domains_includes_subdomains():
    domains = ["dr.dk"]
    assert url_matches_domains("http://dr.dk/a", domains)
    assert url_matches_domains("https://www.dr.dk/a", domains)
    assert not url_matches_domains("https://notdr.dk/a", domains)
    assert not url_matches_domains("", domains)
