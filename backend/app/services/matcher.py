from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from app.services.profile import CandidateProfile, JobRequirements, ProfileSkill, SkillRequirement
from app.services.skill_graph import SkillGraph


logger = logging.getLogger(__name__)

PROFICIENCY_WEIGHT = 0.4
YEARS_WEIGHT = 0.4
RECENCY_WEIGHT = 0.2

REQUIRED_SHARE = 0.6
PREFERRED_SHARE = 0.3
EXPERIENCE_SHARE = 0.1

MAX_PROFICIENCY = 5

# (minimum candidate/required ratio, score), largest threshold first.
EXPERIENCE_BUCKETS: tuple[tuple[float, float], ...] = (
    (1.5, 100.0),
    (1.0, 90.0),
    (0.8, 70.0),
    (0.6, 50.0),
    (0.4, 30.0),
)
EXPERIENCE_FLOOR = 10.0


@dataclass(frozen=True)
class SkillMatch:
    requirement: SkillRequirement
    match_type: str  # "direct", "related" or "none"
    matched: ProfileSkill | None = None
    similarity: float = 0.0
    combined: float = 0.0
    weighted_score: float = 0.0

    @property
    def sub_score(self) -> float:
        """Contribution on a 0-100 scale, independent of the requirement weight."""
        return self.similarity * self.combined * 100

    def to_breakdown(self) -> dict[str, Any]:
        requirement = self.requirement
        item: dict[str, Any] = {
            "skill_id": requirement.skill_id,
            "skill_name": requirement.skill_name,
            "importance_weight": requirement.weight,
            "minimum_years": requirement.minimum_years,
            "direct_match": self.match_type == "direct",
            "related_match": self.match_type == "related",
            "proficiency": 0,
            "years": 0,
            "recency": 0,
            "match_score": self.sub_score,
        }
        if self.matched is not None:
            entry = self.matched.entry
            item["proficiency"] = entry.proficiency
            item["years"] = entry.years_experience
            item["recency"] = self.matched.recency_factor
        if self.match_type == "related" and self.matched is not None:
            item["related_skill_id"] = self.matched.entry.skill_id
            item["related_skill_name"] = self.matched.entry.skill_name
            item["similarity_score"] = self.similarity
        return item


@dataclass(frozen=True)
class CategoryScore:
    score: float
    matches: tuple[SkillMatch, ...] = ()

    def breakdown(self) -> list[dict[str, Any]]:
        return [match.to_breakdown() for match in self.matches]


@dataclass(frozen=True)
class MatchComputation:
    candidate_id: int
    job_id: int
    overall_score: float
    required_score: float
    preferred_score: float
    experience_score: float
    breakdown: dict[str, Any] = field(default_factory=dict)


class SkillMatcher:
    def compute(self, profile: CandidateProfile, job: JobRequirements, graph: SkillGraph) -> MatchComputation:
        required = self.aggregate(job.required, profile, graph)
        preferred = self.aggregate(job.preferred, profile, graph)
        experience = self.experience_score(profile.years_experience, job.years_experience_required)

        overall = required.score * REQUIRED_SHARE + preferred.score * PREFERRED_SHARE + experience * EXPERIENCE_SHARE

        return MatchComputation(
            candidate_id=profile.candidate_id,
            job_id=job.job_id,
            overall_score=overall,
            required_score=required.score,
            preferred_score=preferred.score,
            experience_score=experience,
            breakdown={
                "required_skills": required.breakdown(),
                "preferred_skills": preferred.breakdown(),
                "experience": {
                    "candidate_years": profile.years_experience,
                    "job_required_years": job.years_experience_required,
                    "score": experience,
                },
            },
        )

    def aggregate(
        self,
        requirements: Iterable[SkillRequirement],
        profile: CandidateProfile,
        graph: SkillGraph,
    ) -> CategoryScore:
        ordered = sorted(requirements, key=lambda requirement: requirement.skill_id)
        if not ordered:
            return CategoryScore(score=100.0)

        matches = tuple(self.score_skill(requirement, profile, graph) for requirement in ordered)
        total_weight = sum(requirement.weight for requirement in ordered)
        if total_weight <= 0:
            return CategoryScore(score=0.0, matches=matches)

        raw_score = sum(match.weighted_score for match in matches)
        return CategoryScore(score=min(100.0, max(0.0, raw_score / total_weight * 100)), matches=matches)

    def score_skill(self, requirement: SkillRequirement, profile: CandidateProfile, graph: SkillGraph) -> SkillMatch:
        direct = profile.get(requirement.skill_id)
        if direct is not None:
            combined = self._combined_score(direct, requirement.minimum_years)
            return SkillMatch(
                requirement=requirement,
                match_type="direct",
                matched=direct,
                similarity=1.0,
                combined=combined,
                weighted_score=combined * requirement.weight,
            )

        best: SkillMatch | None = None
        best_score = 0.0
        for related_id, similarity in graph.related_skills(requirement.skill_id):
            related = profile.get(related_id)
            if related is None:
                continue
            # The years ratio is measured against the required skill's minimum.
            combined = self._combined_score(related, requirement.minimum_years)
            weighted = similarity * combined * requirement.weight
            if weighted > best_score:
                best_score = weighted
                best = SkillMatch(
                    requirement=requirement,
                    match_type="related",
                    matched=related,
                    similarity=similarity,
                    combined=combined,
                    weighted_score=weighted,
                )

        if best is None:
            return SkillMatch(requirement=requirement, match_type="none")

        logger.debug(
            "Skill %s matched through related skill %s (similarity %.2f)",
            requirement.skill_id,
            best.matched.entry.skill_id,
            best.similarity,
        )
        return best

    def experience_score(self, candidate_years: float, required_years: float) -> float:
        if required_years <= 0:
            return 100.0

        ratio = candidate_years / required_years
        for threshold, score in EXPERIENCE_BUCKETS:
            if ratio >= threshold:
                return score
        return EXPERIENCE_FLOOR

    def _combined_score(self, skill: ProfileSkill, minimum_years: float) -> float:
        entry = skill.entry
        proficiency_score = min(1.0, max(0.0, entry.proficiency / MAX_PROFICIENCY))
        years_score = min(1.0, entry.years_experience / max(1, minimum_years))
        return (
            proficiency_score * PROFICIENCY_WEIGHT
            + years_score * YEARS_WEIGHT
            + skill.recency_factor * RECENCY_WEIGHT
        )
