"""Folk CRM people API, used as a best-effort mirror of developer fields.

Docs: https://developer.folk.app/api-reference
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

import httpx

from ..config import FolkConfig


logger = logging.getLogger(__name__)

CrmStatus = Literal["ok", "skipped", "schema_mismatch", "failed"]

# Folk's 422 body when a custom field is not defined in the group
SCHEMA_MISMATCH_SIGNATURE = "does not exist in group"

# developer column -> Folk custom field name
CUSTOM_FIELD_NAMES = {
    "seniority": "Seniority level",
    "role_types": "Role type",
    "languages": "Primary programming languages",
    "frameworks": "Frameworks",
    "databases": "Databases",
    "industries": "Industries",
    "years_experience": "Years of professional experience",
    "location": "Location",
}
URL_COLUMNS = ("github_url", "twitter_url", "website_url", "linkedin_url")
EMAIL_COLUMNS = ("personal_email",)


@dataclass
class CrmOutcome:
    status: CrmStatus
    applied: list[str] = field(default_factory=list)
    warning: str | None = None


def crm_payload(fields: dict) -> tuple[list[str], list[str], dict]:
    """Split developer columns into Folk urls, emails and custom field values."""
    urls = [fields[c] for c in URL_COLUMNS if fields.get(c)]
    emails = [fields[c] for c in EMAIL_COLUMNS if fields.get(c)]
    emails += list(fields.get("alternative_emails") or [])

    custom: dict = {}
    for column, name in CUSTOM_FIELD_NAMES.items():
        value = fields.get(column)
        if value in (None, "", []):
            continue
        if column == "role_types":
            value = ", ".join(value)
        custom[name] = value
    return urls, emails, custom


def union(current: list[str], new: list[str]) -> list[str]:
    merged = list(current)
    seen = {v.lower().rstrip("/") for v in current}
    for value in new:
        key = value.lower().rstrip("/")
        if key not in seen:
            seen.add(key)
            merged.append(value)
    return merged


class FolkClient:

    def __init__(self, config: FolkConfig, http: httpx.AsyncClient):
        self.config = config
        self.http = http

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.config.api_key}", "Content-Type": "application/json"}

    async def get_person(self, person_id: str) -> dict:
        response = await self.http.get(f"{self.config.api_url}/people/{person_id}", headers=self._headers())
        response.raise_for_status()
        return response.json().get("data", {})

    async def _patch(self, person_id: str, body: dict) -> httpx.Response:
        return await self.http.patch(f"{self.config.api_url}/people/{person_id}", headers=self._headers(), json=body)

    async def update_person(self, person_id: str, group_id: str, fields: dict) -> CrmOutcome:
        """Mirror developer columns onto a Folk person.

        urls/emails are replaced wholesale by Folk, so current values are
        fetched and unioned first. Custom fields are patched separately so a
        group without them still gets the standard fields.
        """
        if not self.config.api_key:
            return CrmOutcome(status="skipped", warning="FOLK_API_KEY not set")

        urls, emails, custom = crm_payload(fields)
        applied: list[str] = []

        try:
            if urls or emails:
                person = await self.get_person(person_id)
                body = {}
                if urls:
                    body["urls"] = union(person.get("urls") or [], urls)
                if emails:
                    body["emails"] = union(person.get("emails") or [], emails)
                response = await self._patch(person_id, body)
                response.raise_for_status()
                applied += list(body)

            if custom:
                response = await self._patch(person_id, {"customFieldValues": {group_id: custom}})
                if response.status_code == 422 and SCHEMA_MISMATCH_SIGNATURE in response.text:
                    logger.warning(
                        "Folk group %s lacks custom fields, skipped custom fields for %s", group_id, person_id
                    )
                    return CrmOutcome(
                        status="schema_mismatch",
                        applied=applied,
                        warning="CRM group missing custom fields, data saved to internal store only",
                    )
                response.raise_for_status()
                applied.append("customFieldValues")

        except (httpx.HTTPError, ValueError) as e:
            # ValueError: a 2xx reply whose body is not JSON
            logger.warning("Folk update failed for %s: %s", person_id, e)
            return CrmOutcome(status="failed", applied=applied, warning=f"CRM sync failed: {e}")

        return CrmOutcome(status="ok", applied=applied)
