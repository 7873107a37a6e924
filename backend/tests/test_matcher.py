import pytest

from app.services.matcher import SkillMatcher
from app.services.profile import (
    CandidateProfile,
    CandidateSkillEntry,
    CandidateSnapshot,
    JobRequirements,
    SkillRequirement,
)
from app.services.skill_graph import SkillGraph
from factories import TODAY


def _profile(*entries: CandidateSkillEntry, years: float = 5) -> CandidateProfile:
    return CandidateProfile.build(CandidateSnapshot(candidate_id=1, years_experience=years, skills=entries), TODAY)


def _entry(skill_id: int, proficiency: int = 5, years: float = 5, months_ago: int | None = 1) -> CandidateSkillEntry:
    last_used = None
    if months_ago is not None:
        year, month = divmod(TODAY.year * 12 + TODAY.month - 1 - months_ago, 12)
        last_used = TODAY.replace(year=year, month=month + 1)
    return CandidateSkillEntry(skill_id=skill_id, proficiency=proficiency, years_experience=years, last_used_date=last_used)


def test_single_direct_skill_scores_full_marks():
    matcher = SkillMatcher()
    profile = _profile(_entry(1, proficiency=5, years=5, months_ago=1))
    job = JobRequirements(job_id=7, years_experience_required=0, required=(SkillRequirement(1, weight=10, minimum_years=2),))

    assert profile.get(1).recency_factor == 1.0
    assert matcher.score_skill(job.required[0], profile, SkillGraph()).weighted_score == pytest.approx(10)

    result = matcher.compute(profile, job, SkillGraph())

    assert result.required_score == pytest.approx(100)
    assert result.preferred_score == 100
    assert result.experience_score == 100
    assert result.overall_score == pytest.approx(100)


def test_job_without_requirements_is_a_perfect_match():
    result = SkillMatcher().compute(_profile(years=0), JobRequirements(job_id=1, years_experience_required=0), SkillGraph())

    assert result.overall_score == 100
    assert result.breakdown["required_skills"] == []
    assert result.breakdown["preferred_skills"] == []


def test_related_skill_fallback_uses_similarity():
    matcher = SkillMatcher()
    graph = SkillGraph.from_edges([(1, 2, 0.8), (2, 1, 0.8)])
    profile = _profile(_entry(2, proficiency=4, years=3, months_ago=6))
    requirement = SkillRequirement(1, weight=5, minimum_years=2)

    match = matcher.score_skill(requirement, profile, graph)

    assert match.match_type == "related"
    assert match.combined == pytest.approx(0.8 * 0.4 + 1.0 * 0.4 + 0.9 * 0.2)
    assert match.combined == pytest.approx(0.9)
    assert match.weighted_score == pytest.approx(0.8 * 0.9 * 5)

    category = matcher.aggregate([requirement], profile, graph)
    assert category.score == pytest.approx(0.8 * 0.9 * 5 / 5 * 100)


def test_related_years_ratio_uses_required_minimum_years():
    matcher = SkillMatcher()
    graph = SkillGraph.from_edges([(1, 2, 1.0)])
    profile = _profile(_entry(2, proficiency=5, years=2, months_ago=1))

    match = matcher.score_skill(SkillRequirement(1, weight=1, minimum_years=4), profile, graph)

    assert match.combined == pytest.approx(0.4 + 0.5 * 0.4 + 0.2)


def test_direct_match_wins_over_stronger_related_skill():
    matcher = SkillMatcher()
    graph = SkillGraph.from_edges([(1, 2, 1.0)])
    profile = _profile(
        _entry(1, proficiency=1, years=0, months_ago=None),
        _entry(2, proficiency=5, years=10, months_ago=1),
    )

    match = matcher.score_skill(SkillRequirement(1, weight=1, minimum_years=1), profile, graph)

    assert match.match_type == "direct"
    assert match.matched.entry.skill_id == 1
    assert match.weighted_score == pytest.approx(0.2 * 0.4 + 0.0 + 0.5 * 0.2)


def test_best_related_skill_is_kept():
    matcher = SkillMatcher()
    graph = SkillGraph.from_edges([(1, 2, 0.5), (1, 3, 0.9)])
    profile = _profile(_entry(2), _entry(3))

    match = matcher.score_skill(SkillRequirement(1, weight=2, minimum_years=0), profile, graph)

    assert match.matched.entry.skill_id == 3
    assert match.weighted_score == pytest.approx(0.9 * 1.0 * 2)


def test_no_direct_or_related_skill_contributes_nothing():
    match = SkillMatcher().score_skill(SkillRequirement(1, weight=3), _profile(_entry(9)), SkillGraph.from_edges([(1, 2, 0.7)]))

    assert match.match_type == "none"
    assert match.weighted_score == 0
    assert match.to_breakdown()["match_score"] == 0


def test_fallback_stays_one_hop():
    graph = SkillGraph.from_edges([(1, 2, 0.9), (2, 3, 0.9)])
    match = SkillMatcher().score_skill(SkillRequirement(1, weight=1), _profile(_entry(3)), graph)

    assert match.match_type == "none"


def test_zero_similarity_neighbour_is_not_a_match():
    graph = SkillGraph.from_edges([(1, 2, 0.0)])
    match = SkillMatcher().score_skill(SkillRequirement(1, weight=4, minimum_years=1), _profile(_entry(2)), graph)

    assert match.match_type == "none"
    breakdown = match.to_breakdown()
    assert breakdown["related_match"] is False
    assert breakdown["match_score"] == 0


def test_aggregate_stays_within_bounds():
    matcher = SkillMatcher()
    graph = SkillGraph.from_edges([(1, 2, 0.6)])
    profile = _profile(_entry(2, proficiency=3, years=1, months_ago=40), _entry(4, proficiency=5, years=20))
    requirement_sets = [
        [],
        [SkillRequirement(1, weight=5, minimum_years=3)],
        [SkillRequirement(4, weight=1, minimum_years=0), SkillRequirement(5, weight=9, minimum_years=2)],
        [SkillRequirement(4, weight=3, minimum_years=1)],
    ]

    for requirements in requirement_sets:
        score = matcher.aggregate(requirements, profile, graph).score
        assert 0 <= score <= 100

    assert matcher.aggregate([], profile, graph).score == 100


def test_zero_total_weight_scores_zero():
    category = SkillMatcher().aggregate([SkillRequirement(1, weight=0)], _profile(_entry(1)), SkillGraph())

    assert category.score == 0


@pytest.mark.parametrize(
    ("candidate_years", "required_years", "expected"),
    [
        (0, 0, 100),
        (3, -1, 100),
        (9, 6, 100),
        (6, 6, 90),
        (5, 6, 70),
        (4, 6, 50),
        (3, 6, 30),
        (2, 6, 10),
    ],
)
def test_experience_buckets(candidate_years, required_years, expected):
    assert SkillMatcher().experience_score(candidate_years, required_years) == expected


def test_experience_score_is_monotonic_in_ratio():
    matcher = SkillMatcher()
    scores = [matcher.experience_score(tenths / 10, 1) for tenths in range(0, 25)]

    assert all(later >= earlier for earlier, later in zip(scores, scores[1:]))


def test_overall_is_weighted_combination():
    matcher = SkillMatcher()
    graph = SkillGraph.from_edges([(1, 2, 0.7)])
    profile = _profile(_entry(2, proficiency=3, years=1, months_ago=14), _entry(3, proficiency=4, years=2), years=3)
    job = JobRequirements(
        job_id=4,
        years_experience_required=5,
        required=(SkillRequirement(1, weight=5, minimum_years=3), SkillRequirement(3, weight=2, minimum_years=4)),
        preferred=(SkillRequirement(6, weight=3, minimum_years=1),),
    )

    result = matcher.compute(profile, job, graph)

    assert result.overall_score == pytest.approx(
        0.6 * result.required_score + 0.3 * result.preferred_score + 0.1 * result.experience_score
    )
    assert result.preferred_score == 0
    assert result.experience_score == 50


def test_breakdown_reports_direct_and_related_matches():
    graph = SkillGraph.from_edges([(1, 2, 0.8)])
    profile = _profile(_entry(2, proficiency=4, years=3, months_ago=6), _entry(3, proficiency=5, years=5, months_ago=1))
    job = JobRequirements(
        job_id=2,
        years_experience_required=4,
        required=(SkillRequirement(3, weight=4, minimum_years=2, skill_name="SQL"), SkillRequirement(1, weight=5, minimum_years=2, skill_name="Python")),
    )

    breakdown = SkillMatcher().compute(profile, job, graph).breakdown

    first, second = breakdown["required_skills"]
    assert first["skill_id"] == 1
    assert first["related_match"] is True
    assert first["direct_match"] is False
    assert first["related_skill_id"] == 2
    assert first["similarity_score"] == 0.8
    assert first["match_score"] == pytest.approx(72)
    assert second["skill_name"] == "SQL"
    assert second["direct_match"] is True
    assert second["match_score"] == pytest.approx(100)
    assert breakdown["experience"] == {"candidate_years": 5, "job_required_years": 4, "score": 90}


def test_compute_is_deterministic():
    matcher = SkillMatcher()
    graph = SkillGraph.from_edges([(1, 2, 0.8), (1, 3, 0.8)])
    profile = _profile(_entry(2, proficiency=2), _entry(3, proficiency=2))
    job = JobRequirements(job_id=1, years_experience_required=2, required=(SkillRequirement(1, weight=3),))

    assert matcher.compute(profile, job, graph) == matcher.compute(profile, job, graph)
