"""Write reconciled fields to the internal store, then mirror them to the CRM."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..crm.folk import CrmOutcome, FolkClient
from ..db.developers import DeveloperStore
from .types import Identity


logger = logging.getLogger(__name__)


@dataclass
class WriteOutcome:
    internal: bool
    crm: CrmOutcome | None = None
    warnings: list[str] = field(default_factory=list)


def mirror_fields(fields: dict) -> dict:
    """Fields as the CRM wants them: location collapsed into one string."""
    mirrored = dict(fields)
    parts = [fields.get(c) for c in ("city", "state_region", "country") if fields.get(c)]
    if parts:
        mirrored["location"] = ", ".join(parts)
    return mirrored


class MultiSinkWriter:
    """The store is authoritative, the CRM is best-effort.

    A store failure raises SinkWriteError and fails the identity. A CRM
    failure only adds a warning.
    """

    def __init__(self, store: DeveloperStore, crm: FolkClient | None = None):
        self.store = store
        self.crm = crm

    async def write(self, identity: Identity, fields: dict, source: str) -> WriteOutcome:
        if not fields:
            return WriteOutcome(internal=False)

        stamped = {**fields, "last_enriched_at": datetime.now(timezone.utc).isoformat()}
        await self.store.update(identity.external_id, stamped)
        outcome = WriteOutcome(internal=True)

        if self.crm and identity.crm_person_id and identity.crm_group_id:
            outcome.crm = await self.crm.update_person(
                identity.crm_person_id, identity.crm_group_id, mirror_fields(fields)
            )
            if outcome.crm.status in ("schema_mismatch", "failed") and outcome.crm.warning:
                outcome.warnings.append(outcome.crm.warning)

        await self.store.log_activity(identity.external_id, "enriched", {
            "source": source,
            "fields_updated": sorted(fields),
        })
        logger.info("Wrote %d fields for %s (%s)", len(fields), identity.name, source)
        return outcome
