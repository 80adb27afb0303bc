from devscout.enrichers.links import (
    extract_contacts,
    extract_github_username,
    github_username_from_url,
    linkedin_slug,
    twitter_username_from_url,
)


def test_reserved_github_routes_are_never_usernames():
    urls = ["https://github.com/about", "https://github.com/octocat"]
    assert extract_github_username(urls) == "octocat"
    assert github_username_from_url("https://github.com/about") is None
    assert github_username_from_url("https://github.com/features/actions") is None


def test_repo_url_yields_owner():
    assert github_username_from_url("https://github.com/octocat/Hello-World") == "octocat"
    assert github_username_from_url("github.com/octocat/") == "octocat"


def test_non_profile_urls_are_rejected():
    assert github_username_from_url("https://gist.github.com/octocat") is None
    assert github_username_from_url("https://github.com/octocat/Hello-World/issues/1") is None
    assert extract_github_username([]) is None


def test_twitter_handles():
    assert twitter_username_from_url("https://x.com/ada_dev") == "ada_dev"
    assert twitter_username_from_url("https://twitter.com/@ada_dev/") == "ada_dev"
    assert twitter_username_from_url("https://twitter.com/intent") is None


def test_linkedin_slug():
    assert linkedin_slug("https://www.linkedin.com/in/ada-lovelace-123/") == "ada-lovelace-123"
    assert linkedin_slug("https://www.linkedin.com/company/acme") is None
    assert linkedin_slug(None) is None


def test_extract_contacts_one_per_type_in_link_order():
    contacts = extract_contacts(
        [
            "https://github.com/first",
            "https://github.com/second",
            "https://x.com/ada_dev",
            "mailto:ada@lovelace.dev?subject=hi",
            "https://www.linkedin.com/in/ada",
        ],
        source="website_crawl",
    )
    by_type = {c.contact_type: c.contact_value for c in contacts}
    assert by_type == {
        "github": "first",
        "twitter": "ada_dev",
        "email": "ada@lovelace.dev",
        "linkedin": "https://www.linkedin.com/in/ada",
    }
    assert all(c.source == "website_crawl" for c in contacts)


def test_extract_contacts_falls_back_to_text_email():
    contacts = extract_contacts([], text="logo@2x.png reach me at ada@lovelace.dev or noreply@example.com")
    assert [(c.contact_type, c.contact_value) for c in contacts] == [("email", "ada@lovelace.dev")]
