"""Tests for completeness scoring."""

from __future__ import annotations

import pytest  # type: ignore

from cleaner import new_resume
from scoring import score_resume


def _resume(skills=0, jobs=0, schools=0, summary=""):
    r = new_resume()
    r["skills"] = [{"name": f"s{i}", "level": 75, "category": "Other"} for i in range(skills)]
    r["experience"] = [{"company": f"c{i}"} for i in range(jobs)]
    r["education"] = [{"institution": f"u{i}"} for i in range(schools)]
    r["summary"] = summary
    return r


def test_empty_resume_scores_at_floor() -> None:
    assert score_resume(new_resume()) == {
        "skillsScore": 30,
        "experienceScore": 20,
        "educationScore": 40,
        "overallScore": 30,
    }


def test_missing_and_none_arrays() -> None:
    assert score_resume({}) == score_resume(new_resume())
    assert score_resume({"skills": None, "experience": None}) == score_resume(new_resume())
    assert score_resume(None)["overallScore"] == 30


def test_bonus_thresholds() -> None:
    scores = score_resume(_resume(skills=6, jobs=3, schools=2))
    assert scores["skillsScore"] == 92
    assert scores["experienceScore"] == 85
    assert scores["educationScore"] == 65
    assert scores["overallScore"] == 81


def test_upper_clamps() -> None:
    scores = score_resume(_resume(skills=20, jobs=10, schools=5, summary="x" * 200))
    assert scores == {
        "skillsScore": 95,
        "experienceScore": 95,
        "educationScore": 90,
        "overallScore": 100,
    }


@pytest.mark.parametrize("summary,bonus", [("x" * 50, 0), ("x" * 51, 5), ("x" * 101, 10)])
def test_summary_bonus(summary, bonus) -> None:
    base = score_resume(_resume())["overallScore"]
    assert score_resume(_resume(summary=summary))["overallScore"] == base + bonus


@pytest.mark.parametrize("field", ["skills", "jobs", "schools"])
def test_adding_items_never_lowers_scores(field) -> None:
    previous = score_resume(_resume())
    for n in range(1, 15):
        current = score_resume(_resume(**{field: n}))
        for key, value in current.items():
            assert value >= previous[key]
            assert 0 <= value <= 100
        previous = current
