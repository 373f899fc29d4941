"""Wiki identifier resolution tests."""

import pytest

from src.wiki.resolver import resolve_fandom_url, resolve_mediawiki_url


# --- Fandom ---


@pytest.mark.parametrize("name", ["naruto", "jujutsu-kaisen", "onepiece"])
def test_fandom_bare_subdomain(name):
    assert resolve_fandom_url(name) == f"https://{name}.fandom.com/api.php"


def test_fandom_trims_whitespace():
    assert resolve_fandom_url("  naruto \n") == "https://naruto.fandom.com/api.php"


def test_fandom_full_url_drops_path():
    url = "https://naruto.fandom.com/wiki/Naruto_Uzumaki"
    assert resolve_fandom_url(url) == "https://naruto.fandom.com/api.php"


def test_fandom_preserves_scheme():
    assert resolve_fandom_url("http://naruto.fandom.com/wiki/") == "http://naruto.fandom.com/api.php"


def test_fandom_host_without_scheme():
    assert resolve_fandom_url("naruto.fandom.com") == "https://naruto.fandom.com/api.php"


def test_fandom_localized_host():
    url = "https://naruto.fandom.com/de/wiki/Naruto"
    assert resolve_fandom_url(url) == "https://naruto.fandom.com/api.php"


def test_fandom_non_fandom_host_falls_back_to_subdomain():
    assert resolve_fandom_url("example.org") == "https://example.org.fandom.com/api.php"


def test_fandom_malformed_url_never_raises():
    result = resolve_fandom_url("https://[broken.fandom.com")
    assert result == "https://https://[broken.fandom.com.fandom.com/api.php"


# --- Generic MediaWiki ---


def test_mediawiki_appends_api_php():
    assert resolve_mediawiki_url("https://wiki.example.org/w") == "https://wiki.example.org/w/api.php"


def test_mediawiki_trims_trailing_slash():
    assert resolve_mediawiki_url("https://wiki.example.org/w/") == "https://wiki.example.org/w/api.php"


def test_mediawiki_keeps_existing_api_php():
    url = "https://wiki.example.org/w/api.php"
    assert resolve_mediawiki_url(url) == url


def test_mediawiki_defaults_to_https():
    assert resolve_mediawiki_url("wiki.example.org") == "https://wiki.example.org/api.php"
    assert resolve_mediawiki_url("wiki.example.org/w/") == "https://wiki.example.org/w/api.php"


def test_mediawiki_keeps_plain_http():
    assert resolve_mediawiki_url("http://localhost:8080/w") == "http://localhost:8080/w/api.php"


@pytest.mark.parametrize(
    "url",
    [
        "https://wiki.example.org",
        "https://wiki.example.org/",
        " https://wiki.example.org/w/api.php ",
        "wiki.example.org/w",
    ],
)
def test_mediawiki_is_idempotent(url):
    once = resolve_mediawiki_url(url)
    assert resolve_mediawiki_url(once) == once
