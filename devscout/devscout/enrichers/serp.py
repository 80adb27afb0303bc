import logging

import httpx

from ..config import SerperConfig
from .links import extract_github_username, host_of, linkedin_slug
from .types import Identity


logger = logging.getLogger(__name__)

# Hosts that are never someone's personal website
NON_PERSONAL_HOSTS = (
    "linkedin.com", "github.com", "twitter.com", "x.com", "facebook.com",
    "instagram.com", "youtube.com", "medium.com", "crunchbase.com",
    "zoominfo.com", "rocketreach.co", "apollo.io", "stackoverflow.com",
    "wikipedia.org", "glassdoor.com", "indeed.com", "signalhire.com",
)


class SerperClient:
    """Google search through Serper.dev."""

    def __init__(self, config: SerperConfig, http: httpx.AsyncClient):
        self.config = config
        self.http = http

    async def search_raw(self, query: str, num: int | None = None) -> list[dict]:
        """Run one query. Returns organic results, or [] on provider error."""
        logger.debug("SERP: %s", query[:80])
        try:
            response = await self.http.post(
                self.config.base_url,
                headers={"X-API-KEY": self.config.api_key, "Content-Type": "application/json"},
                json={"q": query, "num": num or self.config.results_per_query},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Serper search failed for %r: %s", query, e)
            return []
        return data.get("organic", [])

    async def search(self, identity: Identity) -> str:
        """Ranked text blob about a person, for the structured extractor."""
        queries = []
        if identity.company:
            queries.append(f'"{identity.name}" "{identity.company}"')
        else:
            queries.append(f'"{identity.name}"')
        if identity.job_title:
            queries.append(f'"{identity.name}" {identity.job_title}')
        if identity.linkedin_url:
            queries.append(f'"{identity.name}" site:linkedin.com/in')

        seen: set[str] = set()
        lines: list[str] = []
        for query in queries:
            for item in await self.search_raw(query, num=10):
                link = item.get("link", "")
                if not link or link in seen:
                    continue
                seen.add(link)
                lines.append(f"[{len(seen)}] {item.get('title', '')}\n{link}\n{item.get('snippet', '')}")
        return "\n\n".join(lines)

    async def search_github_profile(
        self,
        name: str,
        company: str | None = None,
        linkedin_url: str | None = None,
    ) -> str | None:
        """Find a GitHub username, most precise query first."""
        queries = []
        if company:
            queries.append(f'site:github.com "{name}" "{company}"')
        queries.append(f'site:github.com "{name}"')
        slug = linkedin_slug(linkedin_url)
        if slug:
            queries.append(f'site:github.com "{slug}"')
        if company:
            queries.append(f"site:github.com {name} {company}")

        for query in queries:
            results = await self.search_raw(query)
            username = extract_github_username([r.get("link", "") for r in results])
            if username:
                logger.info("SERP: GitHub @%s for %s via %r", username, name, query)
                return username
        return None

    async def search_personal_website(self, identity: Identity) -> str | None:
        """Look for the person's own site, blog or portfolio."""
        query = f'"{identity.name}" (personal website OR blog OR portfolio)'
        if identity.company:
            query += f' "{identity.company}"'

        for item in await self.search_raw(query, num=10):
            link = item.get("link", "")
            if not link:
                continue
            host = host_of(link)
            if any(host == h or host.endswith("." + h) for h in NON_PERSONAL_HOSTS):
                continue
            return link
        return None
