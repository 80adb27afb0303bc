import httpx

from conftest import mock_client
from devscout.config import GitHubConfig
from devscout.enrichers.github import GitHubClient, names_overlap
from devscout.enrichers.types import Identity


def github(handler) -> GitHubClient:
    return GitHubClient(GitHubConfig(token="t"), mock_client(handler))


async def test_find_user_by_email_first():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.params.get("q"))
        assert request.headers["Authorization"] == "Bearer t"
        return httpx.Response(200, json={"items": [{"login": "ada"}]})

    identity = Identity(external_id="1", name="Ada Lovelace", email="ada@lovelace.dev", company="Acme")
    assert await github(handler).find_user(identity) == "ada"
    assert seen == ["ada@lovelace.dev in:email"]


async def test_find_user_accepts_linkedin_slug_when_names_overlap():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/search/users":
            return httpx.Response(200, json={"items": []})
        if request.url.path == "/users/ada-lovelace":
            return httpx.Response(200, json={"login": "ada-lovelace", "name": "Ada King Lovelace"})
        return httpx.Response(404)

    identity = Identity(
        external_id="1", name="Ada Lovelace", email="ada@work.com",
        linkedin_url="https://www.linkedin.com/in/ada-lovelace",
    )
    assert await github(handler).find_user(identity) == "ada-lovelace"


async def test_find_user_rejects_slug_owned_by_someone_else():
    queries = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/search/users":
            queries.append(request.url.params["q"])
            return httpx.Response(200, json={"items": []})
        return httpx.Response(200, json={"login": "jsmith", "name": "Jane Smith"})

    identity = Identity(
        external_id="1", name="Ada Lovelace", company="Acme",
        linkedin_url="https://www.linkedin.com/in/jsmith",
    )
    assert await github(handler).find_user(identity) is None
    assert queries == ["Ada Lovelace Acme in:name", "Ada Lovelace in:name"]


async def test_readme_falls_back_to_master():
    def handler(request: httpx.Request) -> httpx.Response:
        if "/main/" in request.url.path:
            return httpx.Response(404)
        return httpx.Response(200, text="# Hi\n" + "x" * 5000)

    readme = await github(handler).get_readme("ada")
    assert readme.startswith("# Hi")
    assert len(readme) == 3000


async def test_repo_data_skips_forks_and_ranks_languages():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[
            {"fork": False, "language": "Go", "description": "cli", "topics": ["cli"], "created_at": "2019-01-01T00:00:00Z"},
            {"fork": False, "language": "Rust", "topics": ["wasm"], "created_at": "2015-05-01T00:00:00Z"},
            {"fork": False, "language": "Rust"},
            {"fork": True, "language": "JavaScript"},
        ])

    data = await github(handler).get_repo_data("ada")

    assert data.repo_count == 3
    assert data.ranked_languages == ["Rust", "Go"]
    assert data.topics == ["cli", "wasm"]
    assert data.oldest_repo_date == "2015-05-01T00:00:00Z"


def test_names_overlap():
    assert names_overlap("Ada King", "Ada Lovelace")
    assert names_overlap("adal", "Ada")
    assert not names_overlap("Jane Smith", "Ada Lovelace")
