"""Developer records in Supabase: the authoritative internal store."""

import logging

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from ..enrichers.types import Identity
from ..errors import SinkWriteError


logger = logging.getLogger(__name__)

DEVELOPER_COLUMNS = "*, profiles!inner(full_name, email)"


def to_identity(row: dict) -> Identity:
    profile = row.get("profiles") or {}
    return Identity(
        external_id=row["id"],
        name=profile.get("full_name") or "",
        email=profile.get("email"),
        linkedin_url=row.get("linkedin_url"),
        job_title=row.get("job_title"),
        company=row.get("current_company"),
        github_url=row.get("github_url"),
        website_url=row.get("website_url"),
        twitter_url=row.get("twitter_url"),
        city=row.get("city"),
        crm_person_id=row.get("folk_person_id"),
        crm_group_id=row.get("folk_group_id"),
        task_id=row.get("sixtyfour_task_id"),
    )


class DeveloperStore:

    def __init__(self, client: AsyncClient):
        self.client = client

    async def fetch(self, developer_ids: list[str]) -> dict[str, dict]:
        """Rows keyed by id. Ids that do not exist are absent."""
        result = await self.client.table("developers").select(DEVELOPER_COLUMNS).in_("id", developer_ids).execute()
        return {row["id"]: row for row in result.data or []}

    async def fetch_with_pending_tasks(self) -> list[dict]:
        result = await self.client.table("developers").select(DEVELOPER_COLUMNS).not_.is_(
            "sixtyfour_task_id", "null"
        ).execute()
        return result.data or []

    async def update(self, developer_id: str, fields: dict) -> None:
        try:
            await self.client.table("developers").update(fields).eq("id", developer_id).execute()
        except APIError as e:
            raise SinkWriteError(f"developers update failed for {developer_id}: {e.message}") from e
        except httpx.HTTPError as e:
            raise SinkWriteError(f"developers update failed for {developer_id}: {e}") from e

    async def log_activity(self, developer_id: str, action: str, details: dict) -> None:
        """Best-effort audit row; a failure here never fails the enrichment."""
        try:
            await self.client.table("developer_activity").insert({
                "developer_id": developer_id,
                "action": action,
                "details": details,
            }).execute()
        except APIError as e:
            logger.warning("Activity log failed for %s: %s", developer_id, e.message)
        except httpx.HTTPError as e:
            logger.warning("Activity log failed for %s: %s", developer_id, e)
