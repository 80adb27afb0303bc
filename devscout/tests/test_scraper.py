import json
from contextlib import asynccontextmanager

import httpx
import pytest

from conftest import mock_client
from devscout.config import BrowserbaseConfig, LinkedInConfig
from devscout.errors import AuthenticationError, ConfigError, EmptyContentError, ProviderError
from devscout.scrapers.browser import BrowserbaseClient, BrowserSession
from devscout.scrapers.linkedin_profile import LinkedInProfileScraper, is_auth_wall, parse_skills


PROFILE_TEXT = """Ada Lovelace
Senior Engineer at Acme
London, England, United Kingdom
About
Writes programs for the analytical engine and builds backend services.
Skills
Python
Python
12 endorsements
PostgreSQL
Kubernetes
Experienced across 3 experiences at Acme and Babbage & Co
Analytical Engines
Show all
Languages
English"""


def test_parse_skills_reads_only_the_skills_section():
    assert parse_skills(PROFILE_TEXT) == ["Python", "PostgreSQL", "Kubernetes", "Analytical Engines"]


def test_parse_skills_without_section():
    assert parse_skills("Ada Lovelace\nAbout\nEngineer") == []


@pytest.mark.parametrize("url,expected", [
    ("https://www.linkedin.com/authwall?trk=foo", True),
    ("https://www.linkedin.com/login", True),
    ("https://www.linkedin.com/checkpoint/challenge", True),
    ("https://www.linkedin.com/in/ada", False),
    ("", False),
])
def test_is_auth_wall(url, expected):
    assert is_auth_wall(url) == expected


class FakeBrowserbase:

    def __init__(self):
        self.released = []

    @asynccontextmanager
    async def session(self):
        session = BrowserSession(id="sess-1", connect_url="wss://connect.example/sess-1")
        try:
            yield session
        finally:
            self.released.append(session.id)


def scraper_with(render) -> tuple[LinkedInProfileScraper, FakeBrowserbase]:
    browserbase = FakeBrowserbase()
    scraper = LinkedInProfileScraper(browserbase, LinkedInConfig(session_cookie="li-at"))
    scraper._render = render
    return scraper, browserbase


def test_scraper_needs_cookie():
    with pytest.raises(ConfigError):
        LinkedInProfileScraper(FakeBrowserbase(), LinkedInConfig(session_cookie=""))


async def test_scrape_returns_text_and_releases_session():
    seen = {}

    async def render(connect_url, url):
        seen["args"] = (connect_url, url)
        return url, PROFILE_TEXT.split("\n")

    scraper, browserbase = scraper_with(render)
    page = await scraper.scrape("linkedin.com/in/ada")

    assert seen["args"] == ("wss://connect.example/sess-1", "https://linkedin.com/in/ada")
    assert page.text == PROFILE_TEXT
    assert page.url == "https://linkedin.com/in/ada"
    assert browserbase.released == ["sess-1"]


async def test_auth_wall_raises_and_releases_session():
    async def render(connect_url, url):
        return "https://www.linkedin.com/authwall?sessionRedirect=x", []

    scraper, browserbase = scraper_with(render)
    with pytest.raises(AuthenticationError):
        await scraper.scrape("https://www.linkedin.com/in/ada")
    assert browserbase.released == ["sess-1"]


async def test_render_failure_still_releases_session():
    async def render(connect_url, url):
        raise RuntimeError("CDP connection dropped")

    scraper, browserbase = scraper_with(render)
    with pytest.raises(RuntimeError):
        await scraper.scrape("https://www.linkedin.com/in/ada")
    assert browserbase.released == ["sess-1"]


async def test_short_page_is_empty_content():
    async def render(connect_url, url):
        return url, ["Ada Lovelace", "Engineer"]

    scraper, _ = scraper_with(render)
    with pytest.raises(EmptyContentError):
        await scraper.scrape("https://www.linkedin.com/in/ada")


async def test_browserbase_session_lifecycle():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        calls.append((request.url.path, body))
        if request.url.path == "/v1/sessions":
            return httpx.Response(201, json={"id": "sess-9", "connectUrl": "wss://connect.browserbase.com/sess-9"})
        return httpx.Response(200, json={})

    client = BrowserbaseClient(BrowserbaseConfig(api_key="bb", project_id="proj"), mock_client(handler))
    async with client.session() as session:
        assert session.connect_url == "wss://connect.browserbase.com/sess-9"

    assert calls[0][1]["projectId"] == "proj"
    assert calls[0][1]["proxies"][0]["geolocation"] == {"country": "US"}
    assert calls[1] == ("/v1/sessions/sess-9", {"projectId": "proj", "status": "REQUEST_RELEASE"})


async def test_browserbase_create_failure_is_provider_error():
    client = BrowserbaseClient(
        BrowserbaseConfig(api_key="bb", project_id="proj"), mock_client(lambda r: httpx.Response(429))
    )
    with pytest.raises(ProviderError):
        await client.create_session()


def test_browserbase_needs_credentials():
    with pytest.raises(ConfigError):
        BrowserbaseClient(BrowserbaseConfig(api_key="bb"), mock_client(lambda r: httpx.Response(200)))
