"""LinkedIn enrichment flow: scrape, extract, classify skills, fill empty columns."""

import asyncio
import logging

from ..db.developers import DeveloperStore
from ..enrichers.extractor import StructuredExtractor
from ..enrichers.reconcile import AUGMENT_POLICY, classify_skills, merge_skills, reconcile
from ..enrichers.types import EnrichmentResult, Identity
from ..enrichers.writer import MultiSinkWriter
from ..errors import AuthenticationError, ProviderError
from ..scrapers.linkedin_profile import LinkedInProfileScraper, parse_skills
from .base import BaseFlow


logger = logging.getLogger(__name__)

SOURCE = "agentql_linkedin"


class LinkedInEnrichFlow(BaseFlow):
    """Scrape profiles one at a time, sleeping between scrapes.

    All scrapes share one session cookie. Once LinkedIn rejects it, the rest
    of the batch is failed without touching LinkedIn again.
    """

    name = "linkedin_enrich"
    result_type = EnrichmentResult

    def __init__(
        self,
        store: DeveloperStore,
        scraper: LinkedInProfileScraper,
        extractor: StructuredExtractor,
        writer: MultiSinkWriter,
        delay_seconds: float = 8.0,
        llm_timeout: float = 60.0,
    ):
        super().__init__(store)
        self.scraper = scraper
        self.extractor = extractor
        self.writer = writer
        self.delay_seconds = delay_seconds
        self.llm_timeout = llm_timeout
        self.auth_failed = False
        self.scrapes = 0

    async def setup(self):
        self.auth_failed = False
        self.scrapes = 0

    async def _scrape(self, url: str):
        if self.scrapes:
            await asyncio.sleep(self.delay_seconds)
        self.scrapes += 1
        return await self.scraper.scrape(url)

    async def process(self, identity: Identity, row: dict) -> EnrichmentResult:
        if not identity.linkedin_url:
            return EnrichmentResult(identity.external_id, identity.name, "no_linkedin")

        if self.auth_failed:
            return self.failed(identity.external_id, identity.name, "skipped, LinkedIn session was rejected")

        try:
            page = await self._scrape(identity.linkedin_url)
        except AuthenticationError as e:
            self.auth_failed = True
            return self.failed(identity.external_id, identity.name, f"{e}. {e.remediation}")
        except ProviderError as e:
            return self.failed(identity.external_id, identity.name, str(e))

        await self.store.update(identity.external_id, {
            "linkedin_raw_profile": {"url": page.url, "text": page.text, "scraped_at": page.scraped_at.isoformat()},
        })

        profile = await asyncio.wait_for(self.extractor.extract(page.text, identity), timeout=self.llm_timeout)
        buckets = classify_skills(parse_skills(page.text))
        merge_skills(profile, buckets)
        if buckets.unclassified:
            logger.info("Unclassified skills for %s: %s", identity.name, ", ".join(buckets.unclassified))

        recon = reconcile(profile, row, AUGMENT_POLICY, unclassified=buckets.unclassified)
        if not recon.fields:
            return EnrichmentResult(
                identity.external_id, identity.name, "partial", source=SOURCE,
                fields_updated=["linkedin_raw_profile"],
                unclassified=recon.unclassified,
                rejected=recon.rejected,
            )

        outcome = await self.writer.write(identity, recon.fields, source=SOURCE)
        return EnrichmentResult(
            identity.external_id,
            identity.name,
            "enriched",
            source=SOURCE,
            fields_updated=sorted(recon.fields) + ["linkedin_raw_profile"],
            unclassified=recon.unclassified,
            rejected=recon.rejected,
            warning="; ".join(outcome.warnings) or None,
        )
