"""Tests for URL and domain normalization helpers."""

import pytest

from resolver.utils.urls import canonicalize_url, core_form, extract_host, normalize_domain


class TestExtractHost:
    """Test suite for extract_host."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://www.Naukri.com/jobs", "naukri.com"),
            ("http://infoedge.in", "infoedge.in"),
            ("naukri.com", "naukri.com"),
            ("https://careers.example.co.uk/path?q=1#frag", "careers.example.co.uk"),
            ("HTTPS://WWW.EXAMPLE.COM", "example.com"),
        ],
    )
    def test_extracts_lowercased_host_without_www(self, url, expected):
        assert extract_host(url) == expected

    @pytest.mark.parametrize("url", [None, "", "   ", "not a url", "https://", "http://exa mple.com"])
    def test_unparseable_urls_return_none(self, url):
        assert extract_host(url) is None


class TestCanonicalizeUrl:
    """Test suite for canonicalize_url."""

    def test_strips_path_query_and_www(self):
        assert canonicalize_url("HTTPS://www.Example.com/about?x=1") == "https://example.com"

    def test_defaults_scheme_to_https(self):
        assert canonicalize_url("naukri.com/jobs") == "https://naukri.com"

    def test_keeps_http_scheme_and_port(self):
        assert canonicalize_url("http://localhost:8080/x") == "http://localhost:8080"

    def test_same_host_different_spelling_is_equal(self):
        assert canonicalize_url("https://www.naukri.com/") == canonicalize_url("https://NAUKRI.com")

    def test_invalid_url_returns_none(self):
        assert canonicalize_url("not a url") is None
        assert canonicalize_url(None) is None


class TestNormalizeDomain:
    def test_lowercases_and_strips_www(self):
        assert normalize_domain("  WWW.Naukri.com ") == "naukri.com"

    def test_empty_values(self):
        assert normalize_domain(None) == ""
        assert normalize_domain("") == ""


class TestCoreForm:
    def test_drops_non_alphanumerics(self):
        assert core_form("Naukri.com") == "naukricom"
        assert core_form("2seventy bio, Inc.") == "2seventybioinc"

    def test_empty(self):
        assert core_form(None) == ""
