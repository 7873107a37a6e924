from __future__ import annotations

from collections import defaultdict
from typing import Iterable

RelatedSkill = tuple[int, float]


class SkillGraph:
    """Directed, 1-hop adjacency of skill id -> (related skill id, similarity)."""

    def __init__(self, adjacency: dict[int, tuple[RelatedSkill, ...]] | None = None) -> None:
        self._adjacency = dict(adjacency or {})

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[int, int, float]]) -> SkillGraph:
        grouped: dict[int, dict[int, float]] = defaultdict(dict)
        for skill_id, related_skill_id, similarity in edges:
            if skill_id == related_skill_id:
                continue
            grouped[skill_id][related_skill_id] = min(1.0, max(0.0, float(similarity)))
        return cls({skill_id: tuple(sorted(related.items())) for skill_id, related in grouped.items()})

    def related_skills(self, skill_id: int) -> tuple[RelatedSkill, ...]:
        return self._adjacency.get(skill_id, ())

    def __len__(self) -> int:
        return sum(len(related) for related in self._adjacency.values())
