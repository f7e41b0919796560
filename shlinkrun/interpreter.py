"""Turn a launcher query into Shlink result rows.

Grammar (terms are whitespace separated)::

    url [shortcode] [title]

A title is only recognised when exactly three terms are given; two terms
always mean ``url shortcode``.  There is no way to give a title without a
shortcode.
"""

import re
from dataclasses import dataclass
from functools import partial
from typing import Callable, List, Optional, Sequence
from urllib.parse import urlsplit
from logging import getLogger

from .dispatcher import ShortenRequest
from .exceptions import InvalidUrl, ShlinkError
from .settings import BackendInstance, ShlinkSettings
from .types import Query, Result

logger = getLogger(__name__)

ERROR_ICON = "Images/error.png"
USAGE = "url [optional shortcode] [optional title]"

_URL_SHAPE = re.compile(r"^\S+://\S+$")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

OnSelect = Callable[[ShortenRequest, BackendInstance], bool]


@dataclass
class QueryTerms:
    url: str
    shortcode: Optional[str] = None
    title: Optional[str] = None

    @property
    def description(self) -> str:
        if self.shortcode is not None and self.title is not None:
            return f"With shortcode: {self.shortcode} and title: {self.title}"
        if self.shortcode is not None:
            return f"With shortcode: {self.shortcode}"
        return "With a randomly generated shortcode"


def looks_like_url(text: str) -> bool:
    """Cheap ``scheme://rest`` check used for global matching."""
    return bool(_URL_SHAPE.match(text))


def is_absolute_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
        parts.port  # ValueError for a malformed or out-of-range port
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME.match(parts.scheme):
        return False
    return bool(parts.netloc or parts.path)


def parse_terms(terms: Sequence[str]) -> QueryTerms:
    """Parse ``url [shortcode] [title]``.

    Raises:
        InvalidUrl: If the first term is not an absolute URL.
    """
    url = terms[0]
    if not is_absolute_url(url):
        raise InvalidUrl(url)
    shortcode = terms[1] if len(terms) >= 2 else None
    title = terms[2] if len(terms) == 3 else None
    return QueryTerms(url=url, shortcode=shortcode, title=title)


def _error_result(error: ShlinkError, query: Query) -> Result:
    return Result(
        title=error.title,
        sub_title=error.message,
        icon_path=ERROR_ICON,
        query_text_display=query.search,
    )


def interpret(
    query: Query,
    settings: ShlinkSettings,
    on_select: OnSelect,
    icon_path: Optional[str] = None,
) -> List[Result]:
    """Build the result rows for *query*.

    Args:
        query: The host query.
        settings: Current Shlink settings.
        on_select: Called with the request and instance of the selected row.
        icon_path: Icon for non-error rows.

    Returns:
        ``[]`` when a global query is not a URL, a single hint or error row,
        or one actionable row per configured instance.
    """
    captured_url = ""
    if not query.has_explicit_keyword:
        if not looks_like_url(query.search):
            return []
        captured_url = query.search

    terms = list(query.terms)
    if not terms and not captured_url:
        return [
            Result(
                title="Create a short url",
                sub_title="Enter a url (and optionally shortcode or title) to shorten",
                icon_path=icon_path,
                query_text_display=USAGE,
            )
        ]

    try:
        parsed = parse_terms(terms) if terms else QueryTerms(url=captured_url)
        instances = settings.instances()
    except ShlinkError as e:
        logger.debug(f"Rejected query {query.search!r}: {e.kind}")
        return [_error_result(e, query)]

    tags = settings.tag_list
    results = []
    for instance in instances:
        request = ShortenRequest(
            long_url=parsed.url,
            custom_slug=parsed.shortcode,
            title=parsed.title,
            tags=list(tags),
        )
        results.append(
            Result(
                title=f"Create a short url with {instance.domain}",
                sub_title=parsed.description,
                icon_path=icon_path,
                query_text_display=query.search,
                action=partial(on_select, request, instance),
                context_data=(request, instance),
            )
        )
    return results


__all__ = [
    "ERROR_ICON",
    "USAGE",
    "QueryTerms",
    "looks_like_url",
    "is_absolute_url",
    "parse_terms",
    "interpret",
]
