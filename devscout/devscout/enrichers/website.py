import logging
from dataclasses import dataclass, field
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from .links import extract_contacts, normalize_url
from .types import ContactItem


logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
MAX_TEXT_CHARS = 15000

# Pages on a personal site that usually carry the social links
CONTACT_PATHS = ("/about", "/contact")


@dataclass
class CrawledSite:
    url: str
    links: list[str] = field(default_factory=list)
    text: str = ""


def parse_html(html: str, base_url: str) -> CrawledSite:
    """Collect absolute hrefs and visible text from a page."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    links = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if href.startswith("mailto:"):
            links.append(href)
        elif not href.startswith(("#", "javascript:")):
            links.append(urljoin(base_url, href))

    text = " ".join(soup.get_text(" ").split())[:MAX_TEXT_CHARS]
    return CrawledSite(url=base_url, links=links, text=text)


class WebsiteCrawler:
    """Fetch a personal website and pull social links out of it."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def fetch(self, url: str) -> CrawledSite | None:
        try:
            response = await self.http.get(url, headers={"User-Agent": USER_AGENT}, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Crawl failed for %s: %s", url, e)
            return None
        if "html" not in response.headers.get("content-type", "html"):
            return None
        return parse_html(response.text, str(response.url))

    async def crawl(self, url: str, source: str = "website_crawl") -> list[ContactItem]:
        """Homepage first; about/contact pages only if the homepage has no GitHub link."""
        url = normalize_url(url)
        home = await self.fetch(url)
        if home is None:
            return []

        contacts = extract_contacts(home.links, home.text, source=source)
        if any(c.contact_type == "github" for c in contacts):
            return contacts

        for path in CONTACT_PATHS:
            page = await self.fetch(urljoin(home.url, path))
            if page is None:
                continue
            known = {c.contact_type for c in contacts}
            for contact in extract_contacts(page.links, page.text, source=source):
                if contact.contact_type not in known:
                    contacts.append(contact)
            if any(c.contact_type == "github" for c in contacts):
                break

        return contacts
