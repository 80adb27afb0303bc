import json

import httpx
import pytest

from devscout.crm.folk import CrmOutcome
from devscout.enrichers.extractor import StructuredExtractor
from devscout.errors import SinkWriteError


def make_row(developer_id: str, name: str = "Ada Lovelace", email: str = "ada@work.com", **columns) -> dict:
    """A developers row as returned with the profiles join."""
    row = {"id": developer_id, "profiles": {"full_name": name, "email": email}}
    row.update(columns)
    return row


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class FakeStore:
    """In-memory stand-in for DeveloperStore."""

    def __init__(self, rows: list[dict] | None = None, fail_updates: bool = False):
        self.rows = {row["id"]: row for row in rows or []}
        self.fail_updates = fail_updates
        self.fetch_calls = 0
        self.updates: list[tuple[str, dict]] = []
        self.activity: list[tuple[str, str, dict]] = []

    async def fetch(self, developer_ids):
        self.fetch_calls += 1
        return {i: self.rows[i] for i in developer_ids if i in self.rows}

    async def fetch_with_pending_tasks(self):
        self.fetch_calls += 1
        return [row for row in self.rows.values() if row.get("sixtyfour_task_id")]

    async def update(self, developer_id, fields):
        if self.fail_updates:
            raise SinkWriteError(f"developers update failed for {developer_id}: boom")
        self.updates.append((developer_id, fields))
        self.rows[developer_id].update(fields)

    async def log_activity(self, developer_id, action, details):
        self.activity.append((developer_id, action, details))


class FakeCrm:

    def __init__(self, outcome: CrmOutcome | None = None):
        self.outcome = outcome or CrmOutcome(status="ok", applied=["customFieldValues"])
        self.calls: list[tuple[str, str, dict]] = []

    async def update_person(self, person_id, group_id, fields):
        self.calls.append((person_id, group_id, fields))
        return self.outcome


class FakeLLM:

    def __init__(self, reply):
        self.reply = reply if isinstance(reply, str) else json.dumps(reply)
        self.prompts: list[str] = []

    async def complete(self, prompt):
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def crm():
    return FakeCrm()


@pytest.fixture
def extractor_for():
    def build(reply) -> StructuredExtractor:
        return StructuredExtractor(FakeLLM(reply))
    return build
