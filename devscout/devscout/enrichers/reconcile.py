"""Map provider output onto developer columns and decide what may be written.

Every column has a rule: fill it only when the stored value is empty, or
always overwrite it. Enum columns are checked against their allow-lists
before anything is written, since the store rejects a whole update when one
enum value is invalid.
"""

from dataclasses import dataclass, field
from typing import Literal

from .types import EnrichedProfile, Tags


FieldRule = Literal["fill_if_empty", "always_overwrite"]

ENUM_VALUES: dict[str, tuple[str, ...]] = {
    "seniority": ("early_career", "senior", "leadership"),
    "buying_influence": ("individual_contributor", "team_influencer", "decision_maker", "budget_holder"),
    "company_size": ("1-10", "11-50", "51-200", "201-1000", "1001-5000", "5000+"),
    "open_source_activity": ("none", "occasional", "regular", "maintainer"),
}

# profile attribute -> developer column
SCALAR_COLUMNS = {
    "job_title": "job_title",
    "company": "current_company",
    "city": "city",
    "state_region": "state_region",
    "country": "country",
    "website_url": "website_url",
    "linkedin_url": "linkedin_url",
    "personal_email": "personal_email",
}
TAG_COLUMNS = {
    "role_types": "role_types",
    "languages": "languages",
    "frameworks": "frameworks",
    "databases": "databases",
    "cloud_platforms": "cloud_platforms",
    "devops_tools": "devops_tools",
    "cicd_tools": "cicd_tools",
    "testing_frameworks": "testing_frameworks",
    "paid_tools": "paid_tools",
    "industries": "industries",
}

ALL_COLUMNS = (
    list(SCALAR_COLUMNS.values())
    + list(ENUM_VALUES)
    + ["years_experience", "github_url", "twitter_url"]
    + list(TAG_COLUMNS.values())
)

REENRICH_POLICY: dict[str, FieldRule] = {column: "always_overwrite" for column in ALL_COLUMNS}
AUGMENT_POLICY: dict[str, FieldRule] = {column: "fill_if_empty" for column in ALL_COLUMNS}


# Fixed lookup sets for bucketing free-text skills
LANGUAGE_SKILLS = {
    "python", "javascript", "typescript", "java", "go", "golang", "rust", "c", "c++", "c#",
    "ruby", "php", "swift", "kotlin", "scala", "elixir", "erlang", "haskell", "clojure",
    "r", "dart", "lua", "perl", "objective-c", "sql", "bash", "shell", "f#", "ocaml",
    "zig", "julia", "solidity", "html", "css", "groovy", "matlab",
}
FRAMEWORK_SKILLS = {
    "react", "react.js", "reactjs", "next.js", "nextjs", "vue", "vue.js", "nuxt", "angular",
    "svelte", "django", "flask", "fastapi", "express", "express.js", "node.js", "nodejs",
    "nestjs", "spring", "spring boot", "rails", "ruby on rails", "laravel", "symfony",
    ".net", "asp.net", "flutter", "react native", "tensorflow", "pytorch", "pandas",
    "numpy", "scikit-learn", "tailwind", "tailwind css", "graphql", "redux", "jquery",
    "phoenix", "gin", "fiber", "actix", "electron", "remix", "astro", "langchain",
}
CLOUD_SKILLS = {
    "aws", "amazon web services", "gcp", "google cloud", "google cloud platform", "azure",
    "microsoft azure", "vercel", "netlify", "heroku", "digitalocean", "cloudflare",
    "firebase hosting", "fly.io", "render", "oracle cloud", "ibm cloud", "linode",
}
DATABASE_SKILLS = {
    "postgresql", "postgres", "mysql", "mariadb", "sqlite", "mongodb", "redis", "cassandra",
    "dynamodb", "elasticsearch", "firebase", "firestore", "supabase", "oracle", "sql server",
    "microsoft sql server", "cockroachdb", "neo4j", "snowflake", "bigquery", "clickhouse",
    "couchdb", "influxdb", "planetscale", "memcached",
}


@dataclass
class SkillBuckets:
    languages: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    cloud_platforms: list[str] = field(default_factory=list)
    databases: list[str] = field(default_factory=list)
    unclassified: list[str] = field(default_factory=list)


@dataclass
class Reconciliation:
    fields: dict = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)      # stored value kept
    rejected: dict = field(default_factory=dict)          # column -> out-of-enum value
    unclassified: list[str] = field(default_factory=list)


def to_tags(value: Tags) -> list[str]:
    """Split, trim, lowercase and dedupe, keeping first-seen order."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    tags: list[str] = []
    for item in items:
        tag = item.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def classify_skills(skills: list[str]) -> SkillBuckets:
    """Bucket skills; anything outside the lookup sets lands in unclassified."""
    buckets = SkillBuckets()
    for skill in skills:
        key = skill.strip().lower()
        if not key:
            continue
        if key in LANGUAGE_SKILLS:
            target = buckets.languages
        elif key in FRAMEWORK_SKILLS:
            target = buckets.frameworks
        elif key in CLOUD_SKILLS:
            target = buckets.cloud_platforms
        elif key in DATABASE_SKILLS:
            target = buckets.databases
        else:
            target = buckets.unclassified
            key = skill.strip()
        if key not in target:
            target.append(key)
    return buckets


def merge_skills(profile: EnrichedProfile, buckets: SkillBuckets) -> EnrichedProfile:
    """Union classified skills into the profile's tag fields."""
    for attr in ("languages", "frameworks", "cloud_platforms", "databases"):
        extra = getattr(buckets, attr)
        if extra:
            merged = to_tags(getattr(profile, attr))
            merged += [tag for tag in extra if tag not in merged]
            setattr(profile, attr, merged)
    return profile


def is_empty(value) -> bool:
    if value is None or value == "" or value == 0:
        return True
    return isinstance(value, (list, tuple, set)) and len(value) == 0


def _enum_value(column: str, raw) -> str | None:
    value = str(raw).strip()
    if column in ("seniority", "buying_influence", "open_source_activity"):
        value = value.lower()
    if column == "seniority" and value == "mid":
        value = "senior"
    return value if value in ENUM_VALUES[column] else None


def candidate_columns(profile: EnrichedProfile) -> tuple[dict, dict]:
    """All columns the profile has a valid value for, plus rejected enum values."""
    values: dict = {}
    rejected: dict = {}

    for attr, column in SCALAR_COLUMNS.items():
        value = getattr(profile, attr)
        if isinstance(value, str) and value.strip():
            values[column] = value.strip()

    for column in ENUM_VALUES:
        raw = getattr(profile, column)
        if raw is None or raw == "":
            continue
        value = _enum_value(column, raw)
        if value is None:
            rejected[column] = raw
        else:
            values[column] = value

    if profile.years_experience is not None and profile.years_experience > 0:
        values["years_experience"] = profile.years_experience

    if profile.github_username:
        values["github_url"] = f"https://github.com/{profile.github_username}"
    if profile.twitter_username:
        values["twitter_url"] = f"https://x.com/{profile.twitter_username.lstrip('@')}"

    for attr, column in TAG_COLUMNS.items():
        tags = to_tags(getattr(profile, attr))
        if tags:
            values[column] = tags

    return values, rejected


def reconcile(
    profile: EnrichedProfile,
    existing: dict,
    policy: dict[str, FieldRule],
    overwrite_keys: tuple[str, ...] | set[str] = (),
    unclassified: list[str] | None = None,
) -> Reconciliation:
    """Decide which columns to write for one developer record."""
    values, rejected = candidate_columns(profile)
    result = Reconciliation(rejected=rejected, unclassified=list(unclassified or []))

    for column, value in values.items():
        rule = policy.get(column, "fill_if_empty")
        if column in overwrite_keys:
            rule = "always_overwrite"
        if rule == "fill_if_empty" and not is_empty(existing.get(column)):
            result.skipped.append(column)
            continue
        result.fields[column] = value

    return result
