from devscout.enrichers.reconcile import (
    AUGMENT_POLICY,
    REENRICH_POLICY,
    classify_skills,
    is_empty,
    merge_skills,
    reconcile,
    to_tags,
)
from devscout.enrichers.types import EnrichedProfile


def test_fill_empty_keeps_existing_value():
    profile = EnrichedProfile(job_title="Staff Engineer")
    existing = {"job_title": "Engineer"}

    augment = reconcile(profile, existing, AUGMENT_POLICY)
    overwrite = reconcile(profile, existing, REENRICH_POLICY)

    assert "job_title" not in augment.fields
    assert augment.skipped == ["job_title"]
    assert overwrite.fields["job_title"] == "Staff Engineer"


def test_fill_empty_treats_blank_values_as_empty():
    profile = EnrichedProfile(job_title="Engineer", company="Acme", languages="python", years_experience=4)
    existing = {"job_title": "", "current_company": None, "languages": [], "years_experience": 0}

    result = reconcile(profile, existing, AUGMENT_POLICY)

    assert result.fields == {
        "job_title": "Engineer",
        "current_company": "Acme",
        "languages": ["python"],
        "years_experience": 4,
    }


def test_overwrite_keys_promote_single_columns():
    profile = EnrichedProfile(job_title="CTO", company="NewCo")
    existing = {"job_title": "Engineer", "current_company": "OldCo"}

    result = reconcile(profile, existing, AUGMENT_POLICY, overwrite_keys={"job_title"})

    assert result.fields == {"job_title": "CTO"}
    assert result.skipped == ["current_company"]


def test_out_of_enum_values_are_never_written():
    profile = EnrichedProfile(
        seniority="guru",
        buying_influence="Decision_Maker",
        company_size="huge",
        open_source_activity="Maintainer",
    )

    result = reconcile(profile, {}, REENRICH_POLICY)

    assert "seniority" not in result.fields
    assert "company_size" not in result.fields
    assert result.fields["buying_influence"] == "decision_maker"
    assert result.fields["open_source_activity"] == "maintainer"
    assert result.rejected == {"seniority": "guru", "company_size": "huge"}


def test_mid_seniority_maps_to_senior():
    assert reconcile(EnrichedProfile(seniority="mid"), {}, REENRICH_POLICY).fields["seniority"] == "senior"


def test_taxonomy_strings_become_tags():
    assert to_tags(" Python, go ,, PYTHON, Rust ") == ["python", "go", "rust"]
    assert to_tags(["React", "react", " Vue "]) == ["react", "vue"]
    assert to_tags(None) == []


def test_handles_become_urls():
    profile = EnrichedProfile(github_username="octocat", twitter_username="@octo")
    fields = reconcile(profile, {}, REENRICH_POLICY).fields
    assert fields["github_url"] == "https://github.com/octocat"
    assert fields["twitter_url"] == "https://x.com/octo"


def test_years_experience_must_be_positive():
    assert "years_experience" not in reconcile(EnrichedProfile(years_experience=0), {}, REENRICH_POLICY).fields
    assert "years_experience" not in reconcile(EnrichedProfile(years_experience=-2), {}, REENRICH_POLICY).fields


def test_classify_skills_buckets_and_reports_unclassified():
    buckets = classify_skills(["Python", "React", "AWS", "PostgreSQL", "Leadership", "python", "Public Speaking"])

    assert buckets.languages == ["python"]
    assert buckets.frameworks == ["react"]
    assert buckets.cloud_platforms == ["aws"]
    assert buckets.databases == ["postgresql"]
    assert buckets.unclassified == ["Leadership", "Public Speaking"]


def test_unclassified_skills_are_reported_not_written():
    profile = EnrichedProfile(languages="go")
    buckets = classify_skills(["Python", "Team Building"])
    merge_skills(profile, buckets)

    result = reconcile(profile, {}, AUGMENT_POLICY, unclassified=buckets.unclassified)

    assert result.fields["languages"] == ["go", "python"]
    assert result.unclassified == ["Team Building"]
    assert all("Team Building" not in str(v) for v in result.fields.values())


def test_is_empty():
    assert is_empty(None) and is_empty("") and is_empty(0) and is_empty([])
    assert not is_empty("x") and not is_empty(["a"]) and not is_empty(3)
