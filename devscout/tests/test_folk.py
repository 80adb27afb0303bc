import json

import httpx

from conftest import mock_client
from devscout.config import FolkConfig
from devscout.crm.folk import FolkClient, crm_payload, union


def folk(handler, api_key="folk-key") -> FolkClient:
    return FolkClient(FolkConfig(api_key=api_key), mock_client(handler))


FIELDS = {
    "github_url": "https://github.com/ada",
    "seniority": "senior",
    "role_types": ["backend", "devops"],
    "location": "London, United Kingdom",
}


async def test_urls_are_fetch_merged_then_custom_fields_patched():
    patches = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer folk-key"
        if request.method == "GET":
            return httpx.Response(200, json={"data": {"urls": ["https://ada.dev", "https://github.com/ada/"]}})
        patches.append(json.loads(request.content))
        return httpx.Response(200, json={"data": {}})

    outcome = await folk(handler).update_person("per_1", "grp_1", FIELDS)

    assert outcome.status == "ok"
    assert outcome.applied == ["urls", "customFieldValues"]
    assert patches[0] == {"urls": ["https://ada.dev", "https://github.com/ada/"]}
    assert patches[1] == {"customFieldValues": {"grp_1": {
        "Seniority level": "senior",
        "Role type": "backend, devops",
        "Location": "London, United Kingdom",
    }}}


async def test_missing_custom_fields_is_schema_mismatch():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"data": {"urls": []}})
        body = json.loads(request.content)
        if "customFieldValues" in body:
            return httpx.Response(422, json={"error": {"message": "Field 'Seniority level' does not exist in group grp_1"}})
        return httpx.Response(200, json={"data": {}})

    outcome = await folk(handler).update_person("per_1", "grp_1", FIELDS)

    assert outcome.status == "schema_mismatch"
    assert outcome.applied == ["urls"]
    assert "custom fields" in outcome.warning


async def test_other_http_errors_are_failed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    outcome = await folk(handler).update_person("per_1", "grp_1", FIELDS)

    assert outcome.status == "failed"
    assert "CRM sync failed" in outcome.warning


async def test_no_api_key_is_skipped():
    outcome = await folk(lambda r: httpx.Response(500), api_key="").update_person("per_1", "grp_1", FIELDS)
    assert outcome.status == "skipped"


def test_crm_payload_collects_emails():
    urls, emails, custom = crm_payload({"personal_email": "ada@gmail.com", "alternative_emails": ["a@b.co"], "years_experience": 9})
    assert urls == []
    assert emails == ["ada@gmail.com", "a@b.co"]
    assert custom == {"Years of professional experience": 9}


def test_union_ignores_case_and_trailing_slash():
    assert union(["https://GitHub.com/ada/"], ["https://github.com/ada", "https://x.com/ada"]) == [
        "https://GitHub.com/ada/", "https://x.com/ada",
    ]


async def test_non_json_person_body_is_failed_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    outcome = await folk(handler).update_person("per_1", "grp_1", FIELDS)

    assert outcome.status == "failed"
    assert outcome.applied == []
    assert "CRM sync failed" in outcome.warning
