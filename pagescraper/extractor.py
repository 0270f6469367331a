"""Markup parsing and record field extraction."""
from __future__ import annotations

from typing import List, Tuple, Union

from bs4 import BeautifulSoup

from .models import NO_DESCRIPTION, NO_TITLE

HEADING_TAGS = ["h1", "h2", "h3"]


def parse_markup(body: Union[bytes, str]) -> BeautifulSoup:
    """Parse a response body into a queryable document.

    Uses the HTML5 tree builder, so <title> content is raw text: markup
    inside it comes back verbatim instead of being parsed into tags.
    Raises whatever the parser raises for markup it rejects.
    """
    if body is None:
        raise TypeError("response body is missing")
    return BeautifulSoup(body, "html5lib")


def extract(soup: BeautifulSoup) -> Tuple[str, str, List[str]]:
    """Pull ``(title, description, headings)`` out of a parsed document.

    Missing or empty title/description fall back to fixed strings. Heading
    text is taken as-is, in document order, empty entries included.
    """
    title = ""
    title_tag = soup.find("title")
    if title_tag is not None:
        title = title_tag.get_text()
    if not title:
        title = NO_TITLE

    description = ""
    meta_tag = soup.find("meta", attrs={"name": "description"})
    if meta_tag is not None:
        description = meta_tag.get("content") or ""
    if not description:
        description = NO_DESCRIPTION

    headings = [tag.get_text() for tag in soup.find_all(HEADING_TAGS)]
    return title, description, headings
