"""Base flow class with common batch logic."""

import logging
from abc import ABC, abstractmethod

from ..db.developers import DeveloperStore, to_identity
from ..enrichers.cascade import validate_batch
from ..enrichers.types import DiscoveryResult, EnrichmentResult, Identity


logger = logging.getLogger(__name__)

FlowResult = DiscoveryResult | EnrichmentResult


class BaseFlow(ABC):
    """Base class for all batch flows.

    One result per requested id, in request order. A failure on one identity
    is recorded in its own entry and never touches its siblings.
    """

    # Subclass must define
    name: str
    result_type: type[DiscoveryResult] | type[EnrichmentResult] = DiscoveryResult

    # Configurable
    max_batch_size: int = 10

    def __init__(self, store: DeveloperStore):
        self.store = store

    # ========== Subclass must implement ==========

    @abstractmethod
    async def process(self, identity: Identity, row: dict) -> FlowResult:
        """Process a single identity. Subclass implements specific logic."""
        raise NotImplementedError

    # ========== Subclass can override ==========

    async def setup(self):
        """Called before processing the batch."""
        pass

    async def teardown(self):
        """Called after processing the batch."""
        pass

    # ========== Common logic ==========

    def failed(self, identity_id: str, name: str, error: str) -> FlowResult:
        return self.result_type(identity_id=identity_id, name=name, status="failed", error=error)

    async def run(self, identity_ids: list[str]) -> dict:
        """Main entry point. Raises BatchValidationError before any work."""
        validate_batch(identity_ids, self.max_batch_size)
        rows = await self.store.fetch(identity_ids)
        return await self.process_rows(identity_ids, rows)

    async def process_rows(self, identity_ids: list[str], rows: dict[str, dict]) -> dict:
        logger.info("Processing %d %s identities...", len(identity_ids), self.name)

        results: list[FlowResult] = []
        await self.setup()
        try:
            for i, identity_id in enumerate(identity_ids):
                row = rows.get(identity_id)
                if row is None:
                    results.append(self.failed(identity_id, "", "not found"))
                    logger.warning("  [%d/%d] %s: not found", i + 1, len(identity_ids), identity_id)
                    continue

                identity = to_identity(row)
                try:
                    result = await self.process(identity, row)
                except Exception as e:
                    logger.exception("  [%d/%d] %s: error - %s", i + 1, len(identity_ids), identity.name, e)
                    result = self.failed(identity_id, identity.name, str(e) or type(e).__name__)
                else:
                    logger.info("  [%d/%d] %s: %s", i + 1, len(identity_ids), identity.name, result.status)
                results.append(result)
        finally:
            await self.teardown()

        failed = sum(1 for r in results if r.status == "failed")
        logger.info("%s done. Completed: %d, Failed: %d", self.name, len(results) - failed, failed)
        return {"results": [r.to_dict() for r in results]}
