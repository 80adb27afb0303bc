import asyncio
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from ..config import GitHubConfig
from .links import linkedin_slug
from .types import Identity


logger = logging.getLogger(__name__)

README_MAX_CHARS = 3000


@dataclass
class GitHubProfile:
    login: str
    name: str | None = None
    email: str | None = None
    company: str | None = None
    location: str | None = None
    bio: str | None = None
    blog: str | None = None
    twitter_username: str | None = None
    linkedin_url: str | None = None
    public_repos: int = 0
    followers: int = 0
    created_at: str | None = None

    @property
    def account_years(self) -> int | None:
        if not self.created_at:
            return None
        created = datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))
        return max(1, datetime.now(timezone.utc).year - created.year)


@dataclass
class GitHubRepoData:
    languages: dict[str, int] = field(default_factory=dict)  # language -> repo count
    topics: list[str] = field(default_factory=list)
    descriptions: list[str] = field(default_factory=list)
    repo_count: int = 0
    oldest_repo_date: str | None = None

    @property
    def ranked_languages(self) -> list[str]:
        return [lang for lang, _ in sorted(self.languages.items(), key=lambda kv: -kv[1])]


def names_overlap(profile_name: str, expected_name: str) -> bool:
    """Loose name match: any part equal or a prefix of the other."""
    profile_parts = profile_name.lower().split()
    expected_parts = expected_name.lower().split()
    return any(
        pp == p or pp.startswith(p) or p.startswith(pp)
        for p in expected_parts
        for pp in profile_parts
    )


def username_from_github_url(url: str | None) -> str | None:
    if not url:
        return None
    match = re.search(r"github\.com/([^/?#]+)", url)
    return match.group(1) if match else None


class GitHubClient:
    """GitHub REST API, the free structured-data source."""

    def __init__(self, config: GitHubConfig, http: httpx.AsyncClient):
        self.config = config
        self.http = http

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    async def github_get(self, endpoint: str, params: dict | None = None) -> dict | list:
        """Make a GitHub API request."""
        logger.debug("GitHub: %s", endpoint)
        response = await self.http.get(f"{self.config.api_url}{endpoint}", headers=self._headers(), params=params)
        response.raise_for_status()
        return response.json()

    async def _search_first_login(self, query: str, per_page: int) -> str | None:
        try:
            result = await self.github_get("/search/users", params={"q": query, "per_page": per_page})
        except httpx.HTTPError as e:
            logger.warning("GitHub user search failed for %r: %s", query, e)
            return None
        items = result.get("items") or []
        return items[0]["login"] if items else None

    async def check_username(self, candidate: str, expected_name: str) -> str | None:
        """Accept a guessed username if it exists and the name loosely matches."""
        try:
            user = await self.github_get(f"/users/{candidate}")
        except httpx.HTTPError:
            return None
        # No name on the profile: the slug match alone is strong enough
        if not user.get("name"):
            return user["login"]
        return user["login"] if names_overlap(user["name"], expected_name) else None

    async def find_user(self, identity: Identity) -> str | None:
        """Search by email, then LinkedIn slug, then name+company, then name."""
        if identity.email:
            login = await self._search_first_login(f"{identity.email} in:email", per_page=1)
            if login:
                return login

        # Many developers reuse their LinkedIn handle
        slug = linkedin_slug(identity.linkedin_url)
        if slug:
            login = await self.check_username(slug, identity.name)
            if login:
                return login

        if identity.name:
            parts = [identity.name]
            if identity.company:
                parts.append(identity.company)
            login = await self._search_first_login(f"{' '.join(parts)} in:name", per_page=5)
            if login:
                return login

        if identity.name and identity.company:
            return await self._search_first_login(f"{identity.name} in:name", per_page=5)

        return None

    async def get_profile(self, username: str) -> GitHubProfile:
        user = await self.github_get(f"/users/{username}")

        blog = user.get("blog") or None
        linkedin_url = None
        if blog and "linkedin.com" in blog:
            linkedin_url = blog if blog.startswith("http") else f"https://{blog}"

        if not linkedin_url:
            try:
                accounts = await self.github_get(f"/users/{username}/social_accounts")
                for account in accounts:
                    if account.get("provider") == "linkedin" or "linkedin.com" in account.get("url", ""):
                        linkedin_url = account["url"]
                        break
            except httpx.HTTPError as e:
                logger.debug("GitHub social accounts unavailable for %s: %s", username, e)

        return GitHubProfile(
            login=user["login"],
            name=user.get("name"),
            email=user.get("email"),
            company=user.get("company"),
            location=user.get("location"),
            bio=user.get("bio"),
            blog=None if linkedin_url else blog,
            twitter_username=user.get("twitter_username"),
            linkedin_url=linkedin_url,
            public_repos=user.get("public_repos", 0),
            followers=user.get("followers", 0),
            created_at=user.get("created_at"),
        )

    async def get_repo_data(self, username: str) -> GitHubRepoData:
        repos = await self.github_get(
            f"/users/{username}/repos",
            params={"per_page": 100, "sort": "pushed", "type": "owner"},
        )

        data = GitHubRepoData()
        topics: set[str] = set()
        for repo in repos:
            if repo.get("fork"):
                continue
            data.repo_count += 1
            if repo.get("language"):
                data.languages[repo["language"]] = data.languages.get(repo["language"], 0) + 1
            if repo.get("description") and len(data.descriptions) < 20:
                data.descriptions.append(repo["description"])
            topics.update(repo.get("topics") or [])
            created = repo.get("created_at")
            if created and (data.oldest_repo_date is None or created < data.oldest_repo_date):
                data.oldest_repo_date = created

        data.topics = sorted(topics)
        return data

    async def get_readme(self, username: str) -> str | None:
        """Profile README (the repo named after the user), truncated."""
        for branch in ("main", "master"):
            url = f"{self.config.raw_url}/{username}/{username}/{branch}/README.md"
            try:
                response = await self.http.get(url)
            except httpx.HTTPError:
                return None
            if response.status_code == 200:
                return response.text[:README_MAX_CHARS]
        return None

    async def fetch_all(self, username: str) -> tuple[GitHubProfile, GitHubRepoData, str | None]:
        """Profile, repos and README in parallel."""
        profile, repos, readme = await asyncio.gather(
            self.get_profile(username),
            self.get_repo_data(username),
            self.get_readme(username),
        )
        logger.info(
            "GitHub @%s: %d repos%s", username, repos.repo_count, ", has README" if readme else ""
        )
        return profile, repos, readme
