"""
Completeness scores for a parsed résumé.

Pure functions of the item counts plus a bonus for a substantial summary;
every sub-score is clamped so even an empty résumé gets a floor value.
"""
from __future__ import annotations
from typing import Any, Dict


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _count(resume: Dict[str, Any], key: str) -> int:
    return len(resume.get(key) or [])


def skills_score(n: int) -> int:
    return _clamp(n * 12 + (20 if n > 5 else 0), 30, 95)


def experience_score(n: int) -> int:
    return _clamp(n * 20 + (25 if n > 2 else 0), 20, 95)


def education_score(n: int) -> int:
    return _clamp(n * 25 + (15 if n > 1 else 0), 40, 90)


def summary_bonus(summary: str) -> int:
    length = len(summary or "")
    if length > 100:
        return 10
    if length > 50:
        return 5
    return 0


def score_resume(resume: Dict[str, Any] | None) -> Dict[str, int]:
    resume = resume or {}
    skills = skills_score(_count(resume, "skills"))
    experience = experience_score(_count(resume, "experience"))
    education = education_score(_count(resume, "education"))
    mean = round((skills + experience + education) / 3)
    overall = min(100, mean + summary_bonus(resume.get("summary") or ""))
    return {
        "skillsScore": skills,
        "experienceScore": experience,
        "educationScore": education,
        "overallScore": overall,
    }
