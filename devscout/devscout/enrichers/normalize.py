"""Deterministic clean-up of model output: seniority and location."""

import re

SENIORITY_VALUES = ("leadership", "senior", "early_career")

US_STATES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas", "CA": "California",
    "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware", "FL": "Florida", "GA": "Georgia",
    "HI": "Hawaii", "ID": "Idaho", "IL": "Illinois", "IN": "Indiana", "IA": "Iowa",
    "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada", "NH": "New Hampshire",
    "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York", "NC": "North Carolina",
    "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma", "OR": "Oregon", "PA": "Pennsylvania",
    "RI": "Rhode Island", "SC": "South Carolina", "SD": "South Dakota", "TN": "Tennessee",
    "TX": "Texas", "UT": "Utah", "VT": "Vermont", "VA": "Virginia", "WA": "Washington",
    "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming", "DC": "District of Columbia",
}
US_STATE_NAMES = {name.lower(): name for name in US_STATES.values()}

COUNTRY_ALIASES = {
    "us": "United States", "usa": "United States", "u.s.": "United States",
    "u.s.a.": "United States", "united states of america": "United States",
    "uk": "United Kingdom", "u.k.": "United Kingdom", "uae": "United Arab Emirates",
}

LEADERSHIP_TITLE = re.compile(r"\b(vp|vice president|director|head of|cto|ceo|cio|coo|chief|founder|co-founder|cofounder)\b", re.I)
SENIOR_TITLE = re.compile(r"\b(senior|sr\.?|staff|principal|lead|architect)\b", re.I)
EARLY_TITLE = re.compile(r"\b(junior|jr\.?|intern|internship|associate|entry[- ]level|graduate|trainee)\b", re.I)


def seniority_from_title(title: str | None, years: float | None = None) -> str | None:
    """Map a job title (and years of experience) onto the seniority enum."""
    if title:
        if LEADERSHIP_TITLE.search(title):
            return "leadership"
        if SENIOR_TITLE.search(title):
            return "senior"
        if EARLY_TITLE.search(title):
            return "early_career"
    if years is not None:
        return "senior" if years >= 5 else "early_career"
    return None


def normalize_seniority(raw: str | None, title: str | None, years: float | None) -> str | None:
    """In-enum model values pass; 'mid' becomes senior; otherwise fall back to the title.

    An out-of-enum value the title cannot rescue is returned as-is so that
    reconciliation rejects it visibly.
    """
    value = raw.strip().lower().replace("-", "_").replace(" ", "_") if raw else None
    if value in SENIORITY_VALUES:
        return value
    if value == "mid":
        return "senior"
    return seniority_from_title(title, years) or value


def expand_state(value: str | None) -> str | None:
    if not value:
        return None
    stripped = value.strip()
    if stripped.upper() in US_STATES:
        return US_STATES[stripped.upper()]
    return US_STATE_NAMES.get(stripped.lower(), stripped)


def expand_country(value: str | None) -> str | None:
    if not value:
        return None
    stripped = value.strip()
    return COUNTRY_ALIASES.get(stripped.lower(), stripped)


def is_us_state(value: str) -> bool:
    stripped = value.strip()
    return stripped.upper() in US_STATES or stripped.lower() in US_STATE_NAMES


def split_location(location: str | None) -> tuple[str | None, str | None, str | None]:
    """Decompose "city, state, country" into its parts.

    Two parts are read as city + country unless the second is a US state.
    A lone US state is a state; any other lone part is a city.
    """
    if not location:
        return None, None, None
    parts = [p.strip() for p in location.split(",") if p.strip()]
    if not parts:
        return None, None, None

    if len(parts) >= 3:
        return parts[0], expand_state(parts[1]), expand_country(parts[-1])

    if len(parts) == 2:
        first, second = parts
        if is_us_state(second):
            return first, expand_state(second), "United States"
        return first, None, expand_country(second)

    only = parts[0]
    if is_us_state(only):
        return None, expand_state(only), "United States"
    if only.lower() in COUNTRY_ALIASES:
        return None, None, expand_country(only)
    return only, None, None


def normalize_location(
    city: str | None,
    state_region: str | None,
    country: str | None,
    composite: str | None = None,
) -> tuple[str | None, str | None, str | None]:
    """Fill missing parts from a composite string, then expand abbreviations."""
    if composite and not (city or state_region or country):
        city, state_region, country = split_location(composite)

    state_region = expand_state(state_region)
    country = expand_country(country)
    if state_region and not country and state_region in US_STATE_NAMES.values():
        country = "United States"
    return city, state_region, country
