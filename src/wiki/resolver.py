"""Normalize user-supplied wiki identifiers into ``api.php`` endpoints."""

from __future__ import annotations

from urllib.parse import urlparse


def resolve_fandom_url(value: str) -> str:
    """Resolve a Fandom subdomain or URL to its API endpoint.

    ``"naruto"`` and ``"https://naruto.fandom.com/wiki/Foo"`` both resolve to
    ``https://naruto.fandom.com/api.php``. Anything that does not parse as a
    fandom.com URL is treated as a bare subdomain. Never raises.
    """
    value = (value or "").strip()
    if "." in value:
        try:
            parsed = urlparse(value if value.startswith("http") else f"https://{value}")
            hostname = parsed.hostname or ""
        except ValueError:
            hostname = ""
        if hostname.endswith("fandom.com"):
            return f"{parsed.scheme}://{hostname}/api.php"
    return f"https://{value}.fandom.com/api.php"


def resolve_mediawiki_url(value: str) -> str:
    """Resolve a MediaWiki base URL to its ``api.php`` endpoint.

    Input without a scheme is assumed to be served over HTTPS.
    """
    url = (value or "").strip()
    if url and "://" not in url:
        url = f"https://{url}"
    if url.endswith("/"):
        url = url[:-1]
    if not url.endswith("api.php"):
        return f"{url}/api.php"
    return url
