"""Authenticated LinkedIn profile scraper using Playwright over a remote browser."""

import asyncio
import logging
import re
from datetime import datetime, timezone

from playwright.async_api import Page, async_playwright

from ..config import LinkedInConfig
from ..enrichers.links import normalize_url
from ..enrichers.types import ScrapedPage
from ..errors import AuthenticationError, ConfigError, EmptyContentError
from .browser import BrowserbaseClient


logger = logging.getLogger(__name__)

# Where LinkedIn sends a session it does not accept
AUTH_WALL_PATTERN = re.compile(r"linkedin\.com/(?:login|authwall|checkpoint|uas/login|signup)", re.I)

MIN_TEXT_CHARS = 100
MAX_SCROLLS = 10

# Navigation and button text, filtered out of the main column
NAV_SKIP = {'Home', 'My Network', 'Jobs', 'Messaging', 'Notifications', 'Me', 'For Business',
            'Connect', 'Message', 'Follow', 'More', 'Show all', 'Contact info', 'Show credential',
            'Endorse', 'Try Premium for $0', 'Open to', 'Add profile section', 'Enhance profile',
            'Resources', 'Show more', 'See more', '…see more', 'Visit my website'}

# Headings that end the Skills section
SECTION_HEADINGS = {'About', 'Experience', 'Education', 'Licenses & certifications', 'Projects',
                    'Volunteering', 'Publications', 'Courses', 'Honors & awards', 'Languages',
                    'Organizations', 'Recommendations', 'Interests', 'Causes', 'Activity',
                    'Test scores', 'Patents', 'People also viewed', 'Featured'}


def is_auth_wall(url: str) -> bool:
    return bool(AUTH_WALL_PATTERN.search(url or ""))


def parse_skills(text: str) -> list[str]:
    """Skill names listed under the profile's Skills heading."""
    skills: list[str] = []
    in_skills = False
    for line in text.split('\n'):
        line = line.strip()
        if not line:
            continue
        if line == 'Skills':
            in_skills = True
            continue
        if not in_skills:
            continue
        if line in SECTION_HEADINGS:
            break
        # Endorsement counts and "Python at Acme" style context lines
        if re.search(r'endorse|\bat\b|experiences? (?:at|across)', line, re.I) or len(line) > 50:
            continue
        if line not in NAV_SKIP and line not in skills:
            skills.append(line)
    return skills


class LinkedInProfileScraper:
    """Scraper for LinkedIn member profiles.

    The li_at cookie is one shared credential, so callers run scrapes one at
    a time with a delay in between.
    """

    def __init__(self, browserbase: BrowserbaseClient, config: LinkedInConfig, timeout: float = 120.0):
        if not config.session_cookie:
            raise ConfigError("LINKEDIN_SESSION_COOKIE is not set")
        self.browserbase = browserbase
        self.config = config
        self.timeout = timeout

    async def _scroll_once(self, page: Page) -> bool:
        """Scroll to bottom. Returns True if page height changed."""
        prev = await page.evaluate('document.body.scrollHeight')
        await page.evaluate('window.scrollTo(0, document.body.scrollHeight)')
        await page.wait_for_timeout(1500)
        return await page.evaluate('document.body.scrollHeight') != prev

    async def _get_lines(self, page: Page) -> list[str]:
        """Get non-empty lines from main content, minus navigation."""
        main = await page.query_selector('main')
        if not main:
            return []
        lines = []
        for l in (await main.inner_text()).split('\n'):
            l = l.strip()
            # LinkedIn renders most text twice (visible + screen-reader copy)
            if l and l not in NAV_SKIP and (not lines or lines[-1] != l):
                lines.append(l)
        return lines

    async def _render(self, connect_url: str, profile_url: str) -> tuple[str, list[str]]:
        """Final URL and main-column lines of the rendered profile."""
        async with async_playwright() as p:
            browser = await p.chromium.connect_over_cdp(connect_url)
            try:
                context = browser.contexts[0] if browser.contexts else await browser.new_context()
                await context.add_cookies([{
                    'name': 'li_at',
                    'value': self.config.session_cookie,
                    'domain': '.linkedin.com',
                    'path': '/',
                    'httpOnly': True,
                    'secure': True,
                }])
                page = context.pages[0] if context.pages else await context.new_page()

                await page.goto(profile_url, wait_until='domcontentloaded', timeout=60000)
                if is_auth_wall(page.url):
                    return page.url, []

                await page.wait_for_timeout(3000)
                for _ in range(MAX_SCROLLS):
                    if not await self._scroll_once(page):
                        break
                return page.url, await self._get_lines(page)
            finally:
                await browser.close()

    async def scrape(self, profile_url: str) -> ScrapedPage:
        """Render a profile and return its visible text.

        Raises AuthenticationError when LinkedIn bounces the session to a
        login wall, EmptyContentError when almost nothing rendered.
        """
        profile_url = normalize_url(profile_url)
        logger.info("Scraping LinkedIn profile: %s", profile_url)

        async with self.browserbase.session() as session:
            final_url, lines = await asyncio.wait_for(
                self._render(session.connect_url, profile_url), timeout=self.timeout
            )

        if is_auth_wall(final_url):
            logger.error("LinkedIn redirected to %s. %s", final_url, AuthenticationError.remediation)
            raise AuthenticationError(f"LinkedIn session rejected, landed on {final_url}")

        text = '\n'.join(lines)
        if len(text) < MIN_TEXT_CHARS:
            raise EmptyContentError(f"Only {len(text)} chars rendered for {profile_url}")

        logger.info("Scraped %s: %d chars", profile_url, len(text))
        return ScrapedPage(text=text, url=final_url, scraped_at=datetime.now(timezone.utc))
