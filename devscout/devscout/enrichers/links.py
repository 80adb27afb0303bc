"""Social-link extraction shared by search results and website crawls."""

import re
from urllib.parse import urlparse

from .types import ContactItem


# GitHub's own top-level routes, never usernames
GITHUB_RESERVED = {
    "about", "features", "pricing", "enterprise", "login", "logout", "signup", "join",
    "explore", "marketplace", "topics", "trending", "collections", "sponsors",
    "settings", "organizations", "orgs", "search", "notifications", "issues",
    "pulls", "apps", "team", "teams", "customer-stories", "security", "readme",
    "site", "contact", "home", "new", "events", "codespaces", "copilot",
    "solutions", "resources", "nonprofit", "education", "dashboard", "github",
    "blog", "careers", "account", "sessions", "password_reset", "premium-support",
}

TWITTER_RESERVED = {
    "intent", "share", "home", "search", "hashtag", "i", "login", "signup",
    "explore", "settings", "notifications", "messages", "privacy", "tos",
}

GITHUB_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/([A-Za-z0-9](?:[A-Za-z0-9-]{0,38}))(?:/([A-Za-z0-9._-]+))?/?(?:[?#].*)?$",
    re.IGNORECASE,
)
TWITTER_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.|mobile\.)?(?:twitter\.com|x\.com)/@?([A-Za-z0-9_]{1,15})/?(?:[?#].*)?$",
    re.IGNORECASE,
)
LINKEDIN_PATTERN = re.compile(r"linkedin\.com/in/([A-Za-z0-9_%-]+)", re.IGNORECASE)
EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

# Addresses that show up on every site and are never the owner's
EMAIL_BLOCKLIST = ("example.com", "sentry.io", "wixpress.com", "noreply", "no-reply")


def github_username_from_url(url: str) -> str | None:
    """Return the owner of a github.com/<owner>[/<repo>] URL, or None."""
    match = GITHUB_PATTERN.match(url.strip())
    if not match:
        return None
    owner = match.group(1)
    if owner.lower() in GITHUB_RESERVED:
        return None
    return owner


def extract_github_username(urls: list[str]) -> str | None:
    """First acceptable GitHub owner from a ranked list of URLs."""
    for url in urls:
        username = github_username_from_url(url)
        if username:
            return username
    return None


def twitter_username_from_url(url: str) -> str | None:
    match = TWITTER_PATTERN.match(url.strip())
    if not match:
        return None
    handle = match.group(1)
    if handle.lower() in TWITTER_RESERVED:
        return None
    return handle


def linkedin_slug(url: str | None) -> str | None:
    """Extract the /in/<slug> segment of a LinkedIn profile URL."""
    if not url:
        return None
    match = LINKEDIN_PATTERN.search(url)
    return match.group(1) if match else None


def normalize_url(url: str) -> str:
    url = url.strip()
    return url if url.startswith("http") else f"https://{url}"


def host_of(url: str) -> str:
    host = urlparse(normalize_url(url)).netloc.lower()
    return host[4:] if host.startswith("www.") else host


def _plausible_email(email: str) -> bool:
    lowered = email.lower()
    if any(blocked in lowered for blocked in EMAIL_BLOCKLIST):
        return False
    # Image names like logo@2x.png match the pattern
    return not lowered.endswith((".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"))


def extract_contacts(urls: list[str], text: str = "", source: str = "") -> list[ContactItem]:
    """Pull GitHub/Twitter/LinkedIn handles and emails out of links and text.

    At most one contact per type is returned, the first in link order.
    """
    found: dict[str, ContactItem] = {}

    for url in urls:
        if url.lower().startswith("mailto:"):
            email = url[7:].split("?")[0].strip()
            if email and _plausible_email(email):
                found.setdefault("email", ContactItem("email", email, source))
            continue

        github = github_username_from_url(url)
        if github:
            found.setdefault("github", ContactItem("github", github, source))
            continue

        twitter = twitter_username_from_url(url)
        if twitter:
            found.setdefault("twitter", ContactItem("twitter", twitter, source))
            continue

        slug = linkedin_slug(url)
        if slug:
            found.setdefault("linkedin", ContactItem("linkedin", f"https://www.linkedin.com/in/{slug}", source))

    if "email" not in found and text:
        for match in EMAIL_PATTERN.finditer(text):
            if _plausible_email(match.group(0)):
                found["email"] = ContactItem("email", match.group(0), source)
                break

    return list(found.values())
