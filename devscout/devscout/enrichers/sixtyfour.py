"""SixtyFour async lead enrichment.

Jobs take minutes to complete, so submission and polling are separate
calls. The caller stores the task id and polls on an explicit collect
action; nothing here loops or sleeps.
"""

import logging

import httpx

from ..config import SixtyFourConfig
from ..errors import ConfigError, ProviderError
from .types import AsyncTask, Identity


logger = logging.getLogger(__name__)

REQUESTED_FIELDS = {
    "github_url": "url for their github profile",
    "personal_email": "their personal email address (gmail, hey, proton, etc, not work email)",
    "twitter_url": "url for their twitter/x profile",
    "website_url": "url for their personal website or blog",
}


class SixtyFourClient:

    def __init__(self, config: SixtyFourConfig, http: httpx.AsyncClient):
        if not config.api_key:
            raise ConfigError("SIXTYFOUR_API_KEY is not set")
        self.config = config
        self.http = http

    def _headers(self) -> dict:
        return {"x-api-key": self.config.api_key, "Content-Type": "application/json"}

    async def submit(self, identity: Identity) -> str:
        """Start an enrichment job. Returns the task id."""
        lead_info = {"name": identity.name}
        if identity.job_title:
            lead_info["title"] = identity.job_title
        if identity.company:
            lead_info["company"] = identity.company
        if identity.city:
            lead_info["location"] = identity.city
        if identity.linkedin_url:
            lead_info["linkedin"] = identity.linkedin_url

        response = await self.http.post(
            f"{self.config.api_url}/enrich-lead-async",
            headers=self._headers(),
            json={"lead_info": lead_info, "struct": REQUESTED_FIELDS},
        )
        if response.status_code >= 400:
            raise ProviderError(f"SixtyFour submit failed: {response.status_code} {response.text[:200]}")

        task_id = response.json().get("task_id")
        if not task_id:
            raise ProviderError("SixtyFour submit returned no task_id")
        logger.info("SixtyFour: submitted %s for %s", task_id, identity.name)
        return task_id

    async def poll(self, task_id: str) -> AsyncTask:
        """Current state of a job. Any non-2xx response counts as failed."""
        response = await self.http.get(f"{self.config.api_url}/job-status/{task_id}", headers=self._headers())
        if response.status_code >= 400:
            logger.warning("SixtyFour poll %s returned %d", task_id, response.status_code)
            return AsyncTask(task_id=task_id, status="failed")

        data = response.json()
        status = data.get("status")

        if status == "completed":
            sd = data.get("structured_data") or {}
            alternative = sd.get("alternative_emails") or data.get("alternative_emails") or []
            return AsyncTask(
                task_id=task_id,
                status="completed",
                github_url=sd.get("github_url") or None,
                personal_email=sd.get("personal_email") or None,
                twitter_url=sd.get("twitter_url") or None,
                website_url=sd.get("website_url") or None,
                alternative_emails=[e for e in alternative if isinstance(e, str) and e],
                confidence_score=data.get("confidence_score"),
            )

        if status == "failed":
            return AsyncTask(task_id=task_id, status="failed")

        return AsyncTask(task_id=task_id, status="processing" if status == "processing" else "pending")
