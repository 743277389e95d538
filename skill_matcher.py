#!/usr/bin/env python3
from typing import AbstractSet, Iterable


def overlap_count(first: Iterable[str], second: Iterable[str]) -> int:
    return len(set(first) & set(second))


def skill_score(volunteer_skills: AbstractSet[str], required_skills: AbstractSet[str]) -> float:
    """Fracción de las skills requeridas que cubre el voluntario, en [0, 1].

    Sin skills requeridas no hay señal: el score es 0.
    """
    if not required_skills:
        return 0.0
    return overlap_count(volunteer_skills, required_skills) / len(required_skills)


def selected_skill_score(selected_skills: AbstractSet[str], posting_skills: AbstractSet[str], weight: float = 1.0) -> float:
    # en búsqueda el denominador son las skills del filtro, no las de la vacante
    if not selected_skills:
        return 0.0
    return overlap_count(selected_skills, posting_skills) / len(selected_skills) * weight


def matches_any(selected_skills: AbstractSet[str], posting_skills: AbstractSet[str]) -> bool:
    # semántica OR: basta una skill en común
    if not selected_skills:
        return True
    return overlap_count(selected_skills, posting_skills) > 0
