import httpx

from conftest import mock_client
from devscout.enrichers.website import WebsiteCrawler, parse_html


HOME_WITH_GITHUB = """
<html><body>
  <nav><a href="#top">Top</a><a href="/about">About</a></nav>
  <a href="https://github.com/ada">code</a>
  <a href="https://x.com/ada_dev">tweets</a>
  <script>var email = "tracker@sentry.io";</script>
</body></html>
"""

HOME_WITHOUT_GITHUB = """
<html><body><p>Hi, I'm Ada.</p><a href="/about">About me</a></body></html>
"""

ABOUT = """
<html><body>
  <p>Write to ada@lovelace.dev</p>
  <a href="https://github.com/ada/analytical-engine">my engine</a>
</body></html>
"""


def test_parse_html_resolves_relative_links_and_drops_scripts():
    site = parse_html(HOME_WITH_GITHUB, "https://ada.dev/")
    assert "https://ada.dev/about" in site.links
    assert "#top" not in site.links
    assert "sentry" not in site.text


async def test_crawl_stops_at_homepage_when_github_found():
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, text=HOME_WITH_GITHUB, headers={"content-type": "text/html"})

    contacts = await WebsiteCrawler(mock_client(handler)).crawl("ada.dev")

    assert paths == ["/"]
    assert {(c.contact_type, c.contact_value) for c in contacts} == {("github", "ada"), ("twitter", "ada_dev")}


async def test_crawl_checks_about_page():
    def handler(request: httpx.Request) -> httpx.Response:
        pages = {"/": HOME_WITHOUT_GITHUB, "/about": ABOUT}
        if request.url.path in pages:
            return httpx.Response(200, text=pages[request.url.path], headers={"content-type": "text/html"})
        return httpx.Response(404)

    contacts = await WebsiteCrawler(mock_client(handler)).crawl("https://ada.dev", source="website_google")

    by_type = {c.contact_type: c for c in contacts}
    assert by_type["github"].contact_value == "ada"
    assert by_type["email"].contact_value == "ada@lovelace.dev"
    assert by_type["github"].source == "website_google"


async def test_unreachable_site_yields_nothing():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused")

    assert await WebsiteCrawler(mock_client(handler)).crawl("https://gone.dev") == []
