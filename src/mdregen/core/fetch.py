"""Remote page lookups: <title> text for bare links and Open Graph data for link cards"""

import logging
from html.parser import HTMLParser
from typing import Optional, Protocol

import httpx

from mdregen.core.models import OgpData
from mdregen.core.utils.escape import escape


logger = logging.getLogger(__name__)

OGP_FIELDS = {
    "og:title": "title",
    "og:image": "image",
    "og:description": "description",
    "og:site_name": "site_name",
}


class PageFetcher(Protocol):
    """Blocking lookup capability injected into the parser. None means the lookup failed."""

    def fetch_title(self, url: str) -> Optional[str]: ...

    def fetch_ogp(self, url: str) -> Optional[OgpData]: ...


class NullPageFetcher:
    """Offline fetcher: every lookup fails, so links and cards keep empty fields."""

    def fetch_title(self, url: str) -> Optional[str]:
        return None

    def fetch_ogp(self, url: str) -> Optional[OgpData]:
        return None


class CachingPageFetcher:
    """Memoise lookups (including failures) for the lifetime of one build."""

    def __init__(self, inner: PageFetcher):
        self.inner = inner
        self._titles: dict[str, Optional[str]] = {}
        self._ogp: dict[str, Optional[OgpData]] = {}

    def fetch_title(self, url: str) -> Optional[str]:
        if url not in self._titles:
            self._titles[url] = self.inner.fetch_title(url)
        return self._titles[url]

    def fetch_ogp(self, url: str) -> Optional[OgpData]:
        if url not in self._ogp:
            self._ogp[url] = self.inner.fetch_ogp(url)
        return self._ogp[url]


class _HeadParser(HTMLParser):
    """Collect the <title> text and og:* meta properties of a page."""

    def __init__(self) -> None:
        super().__init__()
        self.title_parts: list[str] = []
        self.meta: dict[str, str] = {}
        self._in_title = False

    @property
    def title(self) -> str:
        return " ".join("".join(self.title_parts).split())

    def handle_starttag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        if tag == "title":
            self._in_title = True
        elif tag == "meta":
            attrs_d = {k: v or "" for k, v in attrs}
            key = attrs_d.get("property") or attrs_d.get("name") or ""
            if key in OGP_FIELDS and key not in self.meta:
                self.meta[key] = attrs_d.get("content", "").strip()

    def handle_endtag(self, tag: str) -> None:
        if tag == "title":
            self._in_title = False

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self.title_parts.append(data)


def _parse_head(html: str) -> _HeadParser:
    parser = _HeadParser()
    parser.feed(html)
    parser.close()
    return parser


class HttpPageFetcher:
    """PageFetcher backed by httpx. Transport errors and non-2xx responses count as failure."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "mdregen",
        client: Optional[httpx.Client] = None,
        ):
        self.client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    def __enter__(self) -> "HttpPageFetcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def _get(self, url: str) -> Optional[str]:
        logger.debug("Fetching %s", url)
        try:
            resp = self.client.get(url)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Lookup failed for %s: %s", url, e)
            return None
        return resp.text

    def fetch_title(self, url: str) -> Optional[str]:
        html = self._get(url)
        if html is None:
            return None
        return escape(_parse_head(html).title)

    def fetch_ogp(self, url: str) -> Optional[OgpData]:
        html = self._get(url)
        if html is None:
            return None
        head = _parse_head(html)
        fields = {name: escape(head.meta[key]) for key, name in OGP_FIELDS.items() if head.meta.get(key)}
        fields.setdefault("title", escape(head.title))
        return OgpData(**fields)
