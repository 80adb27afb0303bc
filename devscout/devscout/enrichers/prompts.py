"""Prompt contracts for structured profile extraction."""

from .types import Identity

PROFILE_FIELDS = """{
  "seniority": one of "leadership", "senior", or "early_career" (leadership = VP/Director/Head of/CTO/CEO/Chief/Founder; senior = Senior/Staff/Principal/Lead/Architect or 5+ years; early_career = Junior/Intern/Associate/Entry-level or <5 years),
  "role_type": comma-separated from: "full-stack", "frontend", "backend", "mobile", "devops", "data-engineer",
  "languages": comma-separated programming languages mentioned or implied by their work,
  "frameworks": comma-separated frameworks/libraries (React, Django, Express, Next.js, FastAPI, etc.),
  "databases": comma-separated database technologies if mentioned (PostgreSQL, MongoDB, Redis, etc.),
  "cloud_platforms": comma-separated cloud providers if mentioned (AWS, GCP, Azure, Vercel, etc.),
  "paid_tools": comma-separated paid dev tools if mentioned,
  "devops_tools": comma-separated DevOps tools if mentioned (Docker, Kubernetes, Terraform, etc.),
  "cicd_tools": comma-separated CI/CD tools if mentioned (GitHub Actions, Jenkins, etc.),
  "testing_frameworks": comma-separated testing tools if mentioned (Jest, Pytest, Cypress, etc.),
  "buying_influence": one of "decision_maker", "budget_holder", "team_influencer", or "individual_contributor",
  "industries": comma-separated industries they've worked in (SaaS, FinTech, Healthcare, etc.),
  "company_size": estimate current company size ("1-10", "11-50", "51-200", "201-1000", "1001-5000", "5000+"),
  "years_experience": estimated total years of professional software development (number),
  "city": city name or null,
  "state_region": full state/region name (e.g. "California" not "CA") or null,
  "country": full country name (e.g. "United States" not "US") or null,
  "job_title": their current job title,
  "company": their current company name,
  "open_source_activity": one of "none", "occasional", "regular", or "maintainer" based on any OSS mentions
}"""


def known_fields(identity: Identity) -> list[str]:
    lines = [f"Person: {identity.name}"]
    if identity.email:
        lines.append(f"Email: {identity.email}")
    if identity.job_title:
        lines.append(f"Job title (on record): {identity.job_title}")
    if identity.company:
        lines.append(f"Company (on record): {identity.company}")
    if identity.linkedin_url:
        lines.append(f"LinkedIn: {identity.linkedin_url}")
    if identity.city:
        lines.append(f"City (on record): {identity.city}")
    return lines


def build_profile_prompt(free_text: str, identity: Identity) -> str:
    context = "\n".join(known_fields(identity))
    return f"""Analyze this developer's profile data and return a JSON object with the following fields.
Use ONLY the data provided. Do not make up information. If a field cannot be determined, use null.
The known fields identify who this is; ignore source text about a different person with the same name.

{context}

Source data:
{free_text or "(none)"}

Return a JSON object with these exact fields:
{PROFILE_FIELDS}

Return ONLY the JSON object, no markdown fences or extra text."""
