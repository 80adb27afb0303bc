"""GitHub discovery flow."""

from ..db.developers import DeveloperStore
from ..enrichers.cascade import DiscoveryCascade, contact_columns
from ..enrichers.reconcile import is_empty
from ..enrichers.types import DiscoveryResult, Identity
from ..enrichers.writer import MultiSinkWriter
from .base import BaseFlow


class DiscoveryFlow(BaseFlow):
    """Find GitHub handles through the cascade.

    Handles found along the way (twitter, email, website, linkedin) are kept
    too, but only where the developer's column is still empty. Misses are
    never submitted to SixtyFour automatically; that is SubmitFlow.
    """

    name = "discovery"

    def __init__(self, store: DeveloperStore, cascade: DiscoveryCascade, writer: MultiSinkWriter):
        super().__init__(store)
        self.cascade = cascade
        self.writer = writer

    async def process(self, identity: Identity, row: dict) -> DiscoveryResult:
        run = await self.cascade.run(identity)
        if run.status == "already_has":
            return DiscoveryResult(identity.external_id, identity.name, "already_has", github_url=run.github_url)

        extras = {
            column: value for column, value in contact_columns(run.contacts).items()
            if is_empty(row.get(column))
        }
        fields = dict(extras)
        if run.github_url:
            fields["github_url"] = run.github_url

        outcome = await self.writer.write(identity, fields, source=run.source or "discovery")
        return DiscoveryResult(
            identity.external_id,
            identity.name,
            run.status,
            source=run.source,
            github_url=run.github_url,
            fields_found=sorted(extras),
            warning="; ".join(outcome.warnings) or None,
        )
