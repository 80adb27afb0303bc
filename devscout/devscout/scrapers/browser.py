"""Remote browser sessions on Browserbase.

Each scrape gets its own isolated session (stealth fingerprint, proxy egress
in the configured country), and the session is always released afterwards.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx

from ..config import BrowserbaseConfig
from ..errors import ConfigError, ProviderError


logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    id: str
    connect_url: str


class BrowserbaseClient:

    def __init__(self, config: BrowserbaseConfig, http: httpx.AsyncClient):
        if not config.api_key or not config.project_id:
            raise ConfigError("BROWSERBASE_API_KEY and BROWSERBASE_PROJECT_ID must be set")
        self.config = config
        self.http = http

    def _headers(self) -> dict:
        return {"X-BB-API-Key": self.config.api_key, "Content-Type": "application/json"}

    async def create_session(self) -> BrowserSession:
        try:
            response = await self.http.post(
                f"{self.config.api_url}/sessions",
                headers=self._headers(),
                json={
                    "projectId": self.config.project_id,
                    "browserSettings": {
                        "fingerprint": {"devices": ["desktop"], "operatingSystems": ["macos"]},
                        "viewport": {"width": 1920, "height": 1080},
                    },
                    "proxies": [{"type": "browserbase", "geolocation": {"country": self.config.proxy_country}}],
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ProviderError(f"Browserbase session create failed: {e}") from e

        data = response.json()
        logger.debug("Browserbase session %s created", data["id"])
        return BrowserSession(id=data["id"], connect_url=data["connectUrl"])

    async def release_session(self, session_id: str) -> None:
        try:
            response = await self.http.post(
                f"{self.config.api_url}/sessions/{session_id}",
                headers=self._headers(),
                json={"projectId": self.config.project_id, "status": "REQUEST_RELEASE"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            # Sessions also expire server-side, so a failed release only leaks until timeout
            logger.warning("Browserbase release failed for %s: %s", session_id, e)
            return
        logger.debug("Browserbase session %s released", session_id)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[BrowserSession]:
        """A session that is released on exit, whether or not the body raised."""
        session = await self.create_session()
        try:
            yield session
        finally:
            await self.release_session(session.id)
