"""GitHub discovery cascade.

Resolvers are tried cheapest first and the first hit wins. Each resolver
runs under its own timeout; a timeout or exception counts as a miss so a
flaky provider never stops the later stages.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..config import DiscoveryConfig
from ..errors import BatchValidationError
from .github import GitHubClient
from .links import normalize_url
from .serp import SerperClient
from .types import ContactItem, Identity, Outcome, Source
from .website import WebsiteCrawler


logger = logging.getLogger(__name__)


class Resolver(ABC):
    """One data source in the cascade."""

    source: Source
    timeout: float = 30.0

    @abstractmethod
    async def attempt(self, identity: Identity, found: list[ContactItem]) -> Outcome:
        """found holds contacts picked up by earlier stages."""
        raise NotImplementedError


class GitHubApiResolver(Resolver):
    source = "github_api"

    def __init__(self, github: GitHubClient, timeout: float = 30.0):
        self.github = github
        self.timeout = timeout

    async def attempt(self, identity: Identity, found: list[ContactItem]) -> Outcome:
        login = await self.github.find_user(identity)
        return Outcome(kind="found", github_username=login) if login else Outcome.miss()


class SerperResolver(Resolver):
    source = "serper"

    def __init__(self, serper: SerperClient, timeout: float = 30.0):
        self.serper = serper
        self.timeout = timeout

    async def attempt(self, identity: Identity, found: list[ContactItem]) -> Outcome:
        username = await self.serper.search_github_profile(identity.name, identity.company, identity.linkedin_url)
        return Outcome(kind="found", github_username=username) if username else Outcome.miss()


def _from_crawl(contacts: list[ContactItem]) -> Outcome:
    github = next((c.contact_value for c in contacts if c.contact_type == "github"), None)
    if github:
        return Outcome(kind="found", github_username=github, contacts=contacts)
    return Outcome.miss(contacts)


class WebsiteCrawlResolver(Resolver):
    """Crawl the personal website already on file."""

    source = "website_crawl"

    def __init__(self, crawler: WebsiteCrawler, timeout: float = 60.0):
        self.crawler = crawler
        self.timeout = timeout

    async def attempt(self, identity: Identity, found: list[ContactItem]) -> Outcome:
        if not identity.website_url:
            return Outcome.miss()
        return _from_crawl(await self.crawler.crawl(identity.website_url, source=self.source))


class WebsiteSearchResolver(Resolver):
    """Search for a personal website, then crawl it."""

    source = "website_google"

    def __init__(self, serper: SerperClient, crawler: WebsiteCrawler, timeout: float = 60.0):
        self.serper = serper
        self.crawler = crawler
        self.timeout = timeout

    async def attempt(self, identity: Identity, found: list[ContactItem]) -> Outcome:
        url = await self.serper.search_personal_website(identity)
        if not url:
            return Outcome.miss()
        # Already crawled by the previous stage
        if identity.website_url and normalize_url(url).rstrip("/") == normalize_url(identity.website_url).rstrip("/"):
            return Outcome.miss()

        contacts = await self.crawler.crawl(url, source=self.source)
        contacts.append(ContactItem("website", url, self.source))
        return _from_crawl(contacts)


def default_resolvers(
    github: GitHubClient,
    serper: SerperClient,
    crawler: WebsiteCrawler,
    config: DiscoveryConfig,
) -> list[Resolver]:
    return [
        GitHubApiResolver(github, timeout=config.api_timeout_seconds),
        SerperResolver(serper, timeout=config.api_timeout_seconds),
        WebsiteCrawlResolver(crawler, timeout=config.crawl_timeout_seconds),
        WebsiteSearchResolver(serper, crawler, timeout=config.crawl_timeout_seconds),
    ]


def validate_batch(identity_ids: list[str], max_size: int) -> None:
    """Reject a batch before any work is done."""
    if not identity_ids:
        raise BatchValidationError("identity ids required")
    if len(identity_ids) > max_size:
        raise BatchValidationError(f"Maximum {max_size} per batch, got {len(identity_ids)}")


def contact_columns(contacts: list[ContactItem]) -> dict:
    """Map side-discovered contacts onto developer columns."""
    columns = {}
    for contact in contacts:
        if contact.contact_type == "email":
            columns.setdefault("personal_email", contact.contact_value)
        elif contact.contact_type == "twitter":
            columns.setdefault("twitter_url", f"https://x.com/{contact.contact_value}")
        elif contact.contact_type == "linkedin":
            columns.setdefault("linkedin_url", contact.contact_value)
        elif contact.contact_type == "website":
            columns.setdefault("website_url", contact.contact_value)
    return columns


@dataclass
class CascadeRun:
    status: str                     # found | not_found | already_has
    source: Source | None = None
    github_url: str | None = None
    contacts: list[ContactItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class DiscoveryCascade:

    def __init__(self, resolvers: list[Resolver]):
        self.resolvers = resolvers

    async def _attempt(self, resolver: Resolver, identity: Identity, found: list[ContactItem]) -> Outcome:
        try:
            return await asyncio.wait_for(resolver.attempt(identity, found), timeout=resolver.timeout)
        except asyncio.TimeoutError:
            logger.warning("%s timed out after %.0fs for %s", resolver.source, resolver.timeout, identity.name)
            return Outcome(kind="error", error=f"{resolver.source}: timed out")
        except Exception as e:
            logger.warning("%s failed for %s: %s", resolver.source, identity.name, e)
            return Outcome(kind="error", error=f"{resolver.source}: {e}")

    async def run(self, identity: Identity) -> CascadeRun:
        if identity.github_url:
            return CascadeRun(status="already_has", github_url=identity.github_url)

        found: list[ContactItem] = []
        errors: list[str] = []

        for resolver in self.resolvers:
            outcome = await self._attempt(resolver, identity, found)
            if outcome.error:
                errors.append(outcome.error)

            known = {c.contact_type for c in found}
            found += [c for c in outcome.contacts if c.contact_type not in known and c.contact_type != "github"]

            if outcome.kind == "found" and outcome.github_username:
                logger.info("Found GitHub @%s for %s via %s", outcome.github_username, identity.name, resolver.source)
                return CascadeRun(
                    status="found",
                    source=resolver.source,
                    github_url=f"https://github.com/{outcome.github_username}",
                    contacts=found,
                    errors=errors,
                )

        logger.info("No GitHub found for %s", identity.name)
        return CascadeRun(status="not_found", contacts=found, errors=errors)
