"""Full re-enrichment: GitHub data plus web search, read by the language model."""

import asyncio
import logging

import httpx

from ..db.developers import DeveloperStore
from ..enrichers.extractor import StructuredExtractor, apply_github, github_context
from ..enrichers.github import GitHubClient, username_from_github_url
from ..enrichers.reconcile import REENRICH_POLICY, reconcile
from ..enrichers.serp import SerperClient
from ..enrichers.types import EnrichmentResult, Identity
from ..enrichers.writer import MultiSinkWriter
from .base import BaseFlow


logger = logging.getLogger(__name__)

SOURCE = "github_claude"

# Fewer filled fields than this is reported as partial
ENRICHED_MIN_FIELDS = 3


class ReEnrichFlow(BaseFlow):
    """Rebuild a developer's profile from scratch.

    Every column the model can support is overwritten, and the result is
    mirrored to the CRM.
    """

    name = "re_enrich"
    result_type = EnrichmentResult

    def __init__(
        self,
        store: DeveloperStore,
        github: GitHubClient,
        serper: SerperClient,
        extractor: StructuredExtractor,
        writer: MultiSinkWriter,
        llm_timeout: float = 60.0,
    ):
        super().__init__(store)
        self.github = github
        self.serper = serper
        self.extractor = extractor
        self.writer = writer
        self.llm_timeout = llm_timeout

    async def gather_text(self, identity: Identity) -> tuple[str, tuple | None]:
        """Free text for the extractor, plus the raw GitHub data when found."""
        username = username_from_github_url(identity.github_url) or await self.github.find_user(identity)

        sections = []
        github = None
        if username:
            try:
                github = await self.github.fetch_all(username)
            except httpx.HTTPError as e:
                logger.warning("Re-enrich: GitHub fetch failed for @%s: %s", username, e)
            else:
                sections.append(github_context(*github))
        else:
            logger.info("Re-enrich: no GitHub for %s, using search results only", identity.name)

        search = await self.serper.search(identity)
        if search:
            sections.append(f"Web search results:\n{search}")
        return "\n\n".join(sections), github

    async def process(self, identity: Identity, row: dict) -> EnrichmentResult:
        free_text, github = await self.gather_text(identity)
        profile = await asyncio.wait_for(self.extractor.extract(free_text, identity), timeout=self.llm_timeout)
        if github:
            apply_github(profile, github[0], github[1])

        filled = profile.filled_count()
        if filled == 0:
            return EnrichmentResult(identity.external_id, identity.name, "failed", source=SOURCE, error="No data found")

        recon = reconcile(profile, row, REENRICH_POLICY)
        outcome = await self.writer.write(identity, recon.fields, source=SOURCE)

        return EnrichmentResult(
            identity.external_id,
            identity.name,
            "enriched" if filled >= ENRICHED_MIN_FIELDS else "partial",
            source=SOURCE,
            fields_updated=sorted(recon.fields),
            rejected=recon.rejected,
            warning="; ".join(outcome.warnings) or None,
        )
