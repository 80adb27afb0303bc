"""SixtyFour submit and collect flows.

Submission stores the task id on the developer row; collection polls every
row that still has one. Terminal tasks clear the id, running ones keep it.
"""

import logging

from ..db.developers import DeveloperStore
from ..enrichers.reconcile import is_empty
from ..enrichers.sixtyfour import SixtyFourClient
from ..enrichers.types import AsyncTask, DiscoveryResult, Identity
from ..enrichers.writer import MultiSinkWriter
from .base import BaseFlow


logger = logging.getLogger(__name__)

TASK_COLUMNS = ("github_url", "personal_email", "twitter_url", "website_url")


def merge_alternative_emails(task: AsyncTask, row: dict, identity: Identity) -> list[str]:
    """New alternative emails, deduped against every address already on file."""
    known = {e.lower() for e in row.get("alternative_emails") or []}
    for email in (identity.email, row.get("personal_email"), task.personal_email):
        if email:
            known.add(email.lower())

    new = []
    for email in task.alternative_emails:
        if email.lower() not in known:
            known.add(email.lower())
            new.append(email)
    return new


def task_fields(task: AsyncTask, row: dict, identity: Identity) -> dict:
    """Columns a completed task may fill. Populated columns are left alone."""
    fields = {}
    for column in TASK_COLUMNS:
        value = getattr(task, column)
        if value and is_empty(row.get(column)):
            fields[column] = value

    new_emails = merge_alternative_emails(task, row, identity)
    if new_emails:
        fields["alternative_emails"] = list(row.get("alternative_emails") or []) + new_emails
    return fields


class SubmitFlow(BaseFlow):
    """Explicitly submit identities to SixtyFour. Needs a LinkedIn URL."""

    name = "sixtyfour_submit"

    def __init__(self, store: DeveloperStore, client: SixtyFourClient):
        super().__init__(store)
        self.client = client

    async def process(self, identity: Identity, row: dict) -> DiscoveryResult:
        if not identity.linkedin_url:
            return DiscoveryResult(identity.external_id, identity.name, "no_linkedin")

        if identity.task_id:
            # Job still outstanding; collect picks it up
            return DiscoveryResult(
                identity.external_id, identity.name, "pending", source="sixtyfour", task_id=identity.task_id
            )

        task_id = await self.client.submit(identity)
        await self.store.update(identity.external_id, {"sixtyfour_task_id": task_id})
        return DiscoveryResult(identity.external_id, identity.name, "pending", source="sixtyfour", task_id=task_id)


class CollectFlow(BaseFlow):
    """Poll every outstanding SixtyFour task once."""

    name = "sixtyfour_collect"

    def __init__(self, store: DeveloperStore, client: SixtyFourClient, writer: MultiSinkWriter):
        super().__init__(store)
        self.client = client
        self.writer = writer

    async def run(self, identity_ids: list[str] | None = None) -> dict:
        """Scans the store itself; takes no batch."""
        rows = await self.store.fetch_with_pending_tasks()
        if not rows:
            logger.info("No pending SixtyFour tasks")
            return {"results": []}
        return await self.process_rows([row["id"] for row in rows], {row["id"]: row for row in rows})

    async def process(self, identity: Identity, row: dict) -> DiscoveryResult:
        task = await self.client.poll(identity.task_id)

        if not task.is_terminal:
            return DiscoveryResult(
                identity.external_id, identity.name, "pending", source="sixtyfour", task_id=task.task_id
            )

        if task.status == "failed":
            await self.store.update(identity.external_id, {"sixtyfour_task_id": None})
            return DiscoveryResult(
                identity.external_id, identity.name, "failed", source="sixtyfour", error="SixtyFour task failed"
            )

        fields = task_fields(task, row, identity)
        outcome = await self.writer.write(identity, fields, source="sixtyfour")
        # Cleared only after the fields landed, so a failed write is retried on the next collect
        await self.store.update(identity.external_id, {"sixtyfour_task_id": None})

        return DiscoveryResult(
            identity.external_id,
            identity.name,
            "found" if fields else "not_found",
            source="sixtyfour",
            github_url=fields.get("github_url"),
            fields_found=sorted(fields),
            warning="; ".join(outcome.warnings) or None,
        )
