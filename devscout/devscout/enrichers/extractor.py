"""Structured profile extraction from free text with a language model.

The model's reply is a contract, not a suggestion: it must be one JSON
object matching ExtractionPayload. Anything else (prose, a list, a field of
the wrong type) discards the whole reply and yields an all-null profile.
"""

import json
import math
import logging
import re

from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import ExtractionError
from ..llm import LLMClient
from .github import GitHubProfile, GitHubRepoData
from .normalize import normalize_location, normalize_seniority
from .prompts import build_profile_prompt
from .types import EnrichedProfile, Identity


logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```(?:json)?\s*|```")


class ExtractionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    seniority: str | None = None
    role_type: str | list[str] | None = None
    languages: str | list[str] | None = None
    frameworks: str | list[str] | None = None
    databases: str | list[str] | None = None
    cloud_platforms: str | list[str] | None = None
    paid_tools: str | list[str] | None = None
    devops_tools: str | list[str] | None = None
    cicd_tools: str | list[str] | None = None
    testing_frameworks: str | list[str] | None = None
    buying_influence: str | None = None
    industries: str | list[str] | None = None
    company_size: str | None = None
    years_experience: float | str | None = None
    city: str | None = None
    state_region: str | None = None
    country: str | None = None
    location: str | None = None
    job_title: str | None = None
    company: str | None = None
    open_source_activity: str | None = None


def _clean(value):
    if isinstance(value, str):
        value = value.strip()
        return None if value in ("", "null", "None", "N/A", "unknown") else value
    if isinstance(value, list):
        items = [v.strip() for v in value if isinstance(v, str) and v.strip()]
        return items or None
    return value


def _years(value: float | str | None) -> float | None:
    if value is None:
        return None
    try:
        years = float(str(value).strip().rstrip("+"))
    except ValueError:
        return None
    return years if math.isfinite(years) and years > 0 else None


def parse_extraction(text: str, identity: Identity) -> EnrichedProfile:
    """Turn a raw model reply into a profile. Raises ExtractionError on any shape mismatch."""
    cleaned = FENCE_PATTERN.sub("", text or "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"reply is not JSON: {e}", raw_text=text) from e
    if not isinstance(data, dict):
        raise ExtractionError("reply is not a JSON object", raw_text=text)
    try:
        payload = ExtractionPayload.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(f"reply does not match the profile contract: {e}", raw_text=text) from e

    job_title = _clean(payload.job_title)
    years = _years(_clean(payload.years_experience))
    city, state_region, country = normalize_location(
        _clean(payload.city), _clean(payload.state_region), _clean(payload.country), _clean(payload.location)
    )

    return EnrichedProfile(
        seniority=normalize_seniority(_clean(payload.seniority), job_title or identity.job_title, years),
        role_types=_clean(payload.role_type),
        languages=_clean(payload.languages),
        frameworks=_clean(payload.frameworks),
        databases=_clean(payload.databases),
        cloud_platforms=_clean(payload.cloud_platforms),
        devops_tools=_clean(payload.devops_tools),
        cicd_tools=_clean(payload.cicd_tools),
        testing_frameworks=_clean(payload.testing_frameworks),
        paid_tools=_clean(payload.paid_tools),
        industries=_clean(payload.industries),
        years_experience=years,
        city=city,
        state_region=state_region,
        country=country,
        job_title=job_title,
        company=_clean(payload.company),
        buying_influence=_clean(payload.buying_influence),
        company_size=_clean(payload.company_size),
        open_source_activity=_clean(payload.open_source_activity),
    )


def open_source_activity(repo_count: int) -> str | None:
    if repo_count >= 20:
        return "maintainer"
    if repo_count >= 10:
        return "regular"
    if repo_count >= 3:
        return "occasional"
    if repo_count > 0:
        return "none"
    return None


def github_context(profile: GitHubProfile, repos: GitHubRepoData, readme: str | None) -> str:
    """Render GitHub data as extractor input."""
    lines = [f"GitHub profile (@{profile.login}):"]
    for label, value in (("Name", profile.name), ("Bio", profile.bio),
                         ("Company", profile.company), ("Location", profile.location)):
        if value:
            lines.append(f"  {label}: {value}")
    lines.append(f"  Public repos: {profile.public_repos}")
    lines.append(f"  Followers: {profile.followers}")
    if profile.created_at:
        lines.append(f"  Account created: {profile.created_at}")

    if repos.repo_count:
        ranked = repos.ranked_languages
        lines.append(f"\nGitHub repositories ({repos.repo_count} owned, non-fork):")
        lines.append("  Languages by repo count: " + ", ".join(f"{l} ({repos.languages[l]})" for l in ranked))
        if repos.topics:
            lines.append(f"  Topics across repos: {', '.join(repos.topics)}")
        if repos.descriptions:
            lines.append(f"  Repo descriptions: {' | '.join(repos.descriptions)}")
        if repos.oldest_repo_date:
            lines.append(f"  Oldest repo: {repos.oldest_repo_date}")

    if profile.account_years:
        lines.append(f"\nGitHub account age: ~{profile.account_years} years")
    if readme:
        lines.append(f"\nGitHub Profile README:\n{readme}")
    return "\n".join(lines)


def apply_github(profile: EnrichedProfile, github: GitHubProfile, repos: GitHubRepoData) -> EnrichedProfile:
    """Overlay facts read directly from GitHub onto a model-derived profile."""
    profile.github_username = github.login
    profile.twitter_username = github.twitter_username or profile.twitter_username
    profile.website_url = github.blog or profile.website_url
    profile.linkedin_url = github.linkedin_url or profile.linkedin_url
    if repos.ranked_languages:
        profile.languages = repos.ranked_languages
    profile.open_source_activity = open_source_activity(repos.repo_count) or profile.open_source_activity
    return profile


class StructuredExtractor:

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def extract(self, free_text: str, identity: Identity) -> EnrichedProfile:
        """Never raises on bad model output; returns an all-null profile instead."""
        reply = await self.llm.complete(build_profile_prompt(free_text, identity))
        try:
            return parse_extraction(reply, identity)
        except ExtractionError as e:
            logger.error("Extraction failed for %s: %s. Raw reply: %r", identity.name, e, e.raw_text)
            return EnrichedProfile()
