from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Literal


Source = Literal["github_api", "serper", "website_crawl", "website_google", "sixtyfour", "agentql_linkedin"]
DiscoveryStatus = Literal["found", "not_found", "already_has", "pending", "no_linkedin", "failed"]
EnrichStatus = Literal["enriched", "partial", "no_linkedin", "failed"]
TaskStatus = Literal["pending", "processing", "completed", "failed"]
OutcomeKind = Literal["found", "miss", "error"]
ContactType = Literal["email", "twitter", "linkedin", "github", "website"]

# Comma-separated string from a provider, or tags already split
Tags = str | list[str] | None


@dataclass(frozen=True)
class Identity:
    """One person to enrich, as read from the developers table."""
    external_id: str
    name: str
    email: str | None = None
    linkedin_url: str | None = None
    job_title: str | None = None
    company: str | None = None
    # Known handles
    github_url: str | None = None
    website_url: str | None = None
    twitter_url: str | None = None
    city: str | None = None
    # CRM mirror
    crm_person_id: str | None = None
    crm_group_id: str | None = None
    # Outstanding async enrichment task
    task_id: str | None = None


@dataclass
class EnrichedProfile:
    """Sparse profile. None means unknown, never false."""
    seniority: str | None = None
    role_types: Tags = None
    languages: Tags = None
    frameworks: Tags = None
    databases: Tags = None
    cloud_platforms: Tags = None
    devops_tools: Tags = None
    cicd_tools: Tags = None
    testing_frameworks: Tags = None
    paid_tools: Tags = None
    industries: Tags = None
    years_experience: float | None = None
    city: str | None = None
    state_region: str | None = None
    country: str | None = None
    job_title: str | None = None
    company: str | None = None
    github_username: str | None = None
    twitter_username: str | None = None
    website_url: str | None = None
    personal_email: str | None = None
    linkedin_url: str | None = None
    buying_influence: str | None = None
    company_size: str | None = None
    open_source_activity: str | None = None

    @property
    def location(self) -> str | None:
        parts = [p for p in (self.city, self.state_region, self.country) if p]
        return ", ".join(parts) if parts else None

    def filled_count(self) -> int:
        return sum(1 for f in fields(self) if getattr(self, f.name) not in (None, "", []))


@dataclass
class ContactItem:
    contact_type: ContactType
    contact_value: str
    source: str


@dataclass
class Outcome:
    """Result of one resolver attempt."""
    kind: OutcomeKind
    github_username: str | None = None
    contacts: list[ContactItem] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def miss(cls, contacts: list[ContactItem] | None = None) -> "Outcome":
        return cls(kind="miss", contacts=contacts or [])


def _compact(result) -> dict:
    return {k: v for k, v in asdict(result).items() if v is not None and v != []}


@dataclass
class DiscoveryResult:
    identity_id: str
    name: str
    status: DiscoveryStatus
    source: Source | None = None
    github_url: str | None = None
    task_id: str | None = None
    fields_found: list[str] = field(default_factory=list)
    warning: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return _compact(self)


@dataclass
class EnrichmentResult:
    """Per-identity entry of the re-enrich and LinkedIn flows."""
    identity_id: str
    name: str
    status: EnrichStatus
    source: str | None = None
    fields_updated: list[str] = field(default_factory=list)
    unclassified: list[str] = field(default_factory=list)
    rejected: dict = field(default_factory=dict)
    warning: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        data = _compact(self)
        if not self.rejected:
            data.pop("rejected", None)
        return data


@dataclass
class AsyncTask:
    task_id: str
    status: TaskStatus
    submitted_for: Identity | None = None
    github_url: str | None = None
    personal_email: str | None = None
    twitter_url: str | None = None
    website_url: str | None = None
    alternative_emails: list[str] = field(default_factory=list)
    confidence_score: float | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in ("completed", "failed")


@dataclass
class ScrapedPage:
    text: str
    url: str
    scraped_at: datetime
