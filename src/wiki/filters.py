"""Title filters: user-supplied patterns and locale subpage detection."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

logger = logging.getLogger(__name__)

# ``/pattern/flags`` with optional delimiters.
_DELIMITED_RE = re.compile(r"(/?)(.+)\1([a-z]*)", re.IGNORECASE)
# A non-empty run of unique characters from the accepted flag alphabet.
_FLAGS_RE = re.compile(r"^(?!.*?(.).*?\1)[gmixXsuUAJ]+$")

_FLAG_MAP: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": re.UNICODE,
    "A": re.ASCII,
}

# Trailing language code such as ``/fr`` or ``/zh-hans``.
LOCALE_SUBPAGE_RE = re.compile(r"/[a-z]{2,3}(-[a-z]+)?$", re.IGNORECASE)


def _translate_flags(flags: str) -> re.RegexFlag:
    # g, X, U and J have no Python counterpart.
    compiled = re.RegexFlag(0)
    for char in flags:
        compiled |= _FLAG_MAP.get(char, re.RegexFlag(0))
    return compiled


def compile_filter(raw: str | None) -> re.Pattern[str] | None:
    """Compile a user filter string into a title matcher.

    ``/foo/i`` compiles ``foo`` with the given flags. Undelimited input, or
    input whose trailing flags are not a valid unique set, is used whole as a
    case-insensitive pattern. Returns ``None`` for empty input or a pattern
    that does not compile.
    """
    if not raw:
        return None
    match = _DELIMITED_RE.search(raw)
    if match is None:
        return None
    delimiter, pattern, flags = match.groups()
    try:
        if not delimiter or (flags and not _FLAGS_RE.match(flags)):
            return re.compile(raw, re.IGNORECASE)
        return re.compile(pattern, _translate_flags(flags))
    except (re.error, ValueError) as exc:
        logger.debug("filter does not compile, ignoring", extra={"filter": raw, "error": str(exc)})
        return None


def is_locale_subpage(title: str) -> bool:
    return LOCALE_SUBPAGE_RE.search(title) is not None


def drop_locale_subpages(titles: Iterable[str]) -> list[str]:
    """Remove translated duplicates like ``Foo/fr`` from *titles*."""
    return [t for t in titles if not is_locale_subpage(t)]


def apply_filter(titles: Iterable[str], title_filter: re.Pattern[str]) -> list[str]:
    return [t for t in titles if title_filter.search(t)]
