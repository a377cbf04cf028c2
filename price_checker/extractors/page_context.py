# price_checker/extractors/page_context.py

"""Read-only view of a product page handed to the site extractors."""

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class PageContext:
    """A parsed HTML document together with the URL it was loaded from."""

    url: str
    soup: BeautifulSoup

    @classmethod
    def from_html(cls, url: str, html: str) -> "PageContext":
        """Parse raw HTML with lxml into a page context."""
        return cls(url=url, soup=BeautifulSoup(html, "lxml"))

    @property
    def hostname(self) -> str:
        return (urlparse(self.url).hostname or "").lower()

    @property
    def path(self) -> str:
        return urlparse(self.url).path

    def query_param(self, name: str) -> str | None:
        """Return the first value of a query-string parameter, if any."""
        values = parse_qs(urlparse(self.url).query).get(name)
        return values[0] if values else None

    def select_one(self, selector: str) -> Tag | None:
        return self.soup.select_one(selector)

    def select(self, selector: str) -> list[Tag]:
        return list(self.soup.select(selector))


def load_page_from_file(url: str, path: Path) -> PageContext:
    """Build a page context from HTML saved on disk."""
    with open(path, encoding="utf-8") as f:
        return PageContext.from_html(url, f.read())
