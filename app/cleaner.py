"""
Shared clean-ups and schema normalisation.

Every parse path (LLM or rule-based) ends in clean_resume(), so downstream
code only ever sees the canonical schema from schema_resume.
"""
from __future__ import annotations
import copy, re, unicodedata
from typing import Any, Dict, List

from keywords import CATEGORY_HINTS, SKILL_ALIASES, SKILL_VOCABULARY
from schema_resume import RESUME_SCHEMA, SKILL_CATEGORIES

DEFAULT_SKILL_LEVEL = 75

_DELIMS = re.compile(r"[,;|•·▪●\n\t]|\s[-–—]\s|^[-–—*]\s*", re.M)
_EDGE_PUNCT = re.compile(r"^[\s\-–—*•:]+|[\s\-–—*•:.,;]+$")
_PRESENT = re.compile(r"^(present|current|now|ongoing|today)$", re.I)
_VOCAB_LOWER = {k.lower(): k for k in SKILL_VOCABULARY}


# ───────────────────────────────────────── helpers ──
def new_resume() -> Dict[str, Any]:
    return copy.deepcopy(RESUME_SCHEMA)


def smart_split(text: str) -> List[str]:
    """Split a list-like block on commas, bullets, pipes, dashes and newlines."""
    text = unicodedata.normalize("NFKC", text or "")
    return [t for t in (_EDGE_PUNCT.sub("", bit) for bit in _DELIMS.split(text)) if t]


def dedupe(items: List[str], limit: int | None = None) -> List[str]:
    seen, out = set(), []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return out[:limit] if limit else out


def canonical_skill(name: str) -> str:
    key = name.strip().lower()
    return SKILL_ALIASES.get(key) or _VOCAB_LOWER.get(key) or name.strip()


def categorize_skill(name: str) -> str:
    if name in SKILL_VOCABULARY:
        return SKILL_VOCABULARY[name]
    low = name.lower()
    for category, hints in CATEGORY_HINTS:
        if any(re.search(rf"\b{re.escape(h)}\b", low) for h in hints):
            return category
    return "Other"


def normalise_category(raw: Any, name: str) -> str:
    if isinstance(raw, str):
        for cat in SKILL_CATEGORIES:
            if raw.strip().lower() == cat.lower():
                return cat
    return categorize_skill(name)


def normalise_end_date(raw: Any) -> str:
    text = _text(raw)
    return "Present" if _PRESENT.match(text) else text


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(_text(v) for v in value if v).strip()
    return str(value).strip()


def _level(raw: Any) -> int:
    try:
        level = int(round(float(raw)))
    except (TypeError, ValueError):
        return DEFAULT_SKILL_LEVEL
    return max(0, min(100, level))


def _first(d: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if d.get(k):
            return d[k]
    return ""


def _items(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


# ───────────────────────────────────────── cleaner ──
def clean_resume(r: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce any parser payload (including legacy shapes) to the canonical schema."""
    r = r if isinstance(r, dict) else {}
    out = new_resume()

    # personal info
    info = r.get("personalInfo") or r.get("personal_info") or r.get("contact") or {}
    if not isinstance(info, dict):
        info = {}
    for key in out["personalInfo"]:
        out["personalInfo"][key] = _text(info.get(key))
    if not out["personalInfo"]["name"]:
        out["personalInfo"]["name"] = _text(r.get("name") or r.get("full_name"))

    out["summary"] = _text(r.get("summary"))

    # skills
    seen = set()
    for s in _items(r.get("skills")):
        if isinstance(s, str):
            s = {"name": s}
        if not isinstance(s, dict):
            continue
        name = canonical_skill(_text(s.get("name")))
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        out["skills"].append({
            "name": name,
            "level": _level(s.get("level")),
            "category": normalise_category(s.get("category"), name),
        })

    # experience
    for j in _items(r.get("experience")):
        if not isinstance(j, dict):
            continue
        achievements = j.get("achievements") or j.get("bullets") or []
        if isinstance(achievements, str):
            achievements = [achievements]
        job = {
            "company": _text(j.get("company")),
            "position": _text(_first(j, "position", "title", "role")),
            "startDate": _text(_first(j, "startDate", "start", "start_date")),
            "endDate": normalise_end_date(_first(j, "endDate", "end", "end_date")),
            "description": _text(j.get("description")),
            "achievements": [_text(a) for a in achievements if _text(a)],
        }
        if job["company"] or job["position"]:
            out["experience"].append(job)

    # education
    for e in _items(r.get("education")):
        if not isinstance(e, dict):
            continue
        edu = {
            "institution": _text(_first(e, "institution", "school", "university")),
            "degree": _text(e.get("degree")),
            "field": _text(_first(e, "field", "fieldOfStudy", "field_of_study")),
            "year": _text(_first(e, "year", "graduationYear", "endDate", "end")),
            "gpa": _text(e.get("gpa")),
        }
        if edu["institution"] or edu["degree"]:
            out["education"].append(edu)

    # certifications → guarantee dict shape
    for c in _items(r.get("certifications")):
        if isinstance(c, str):
            c = {"name": c}
        if isinstance(c, dict) and _text(_first(c, "name", "title")):
            out["certifications"].append({
                "name": _text(_first(c, "name", "title")),
                "issuer": _text(c.get("issuer")),
                "date": _text(_first(c, "date", "year")),
            })

    # languages → guarantee dict shape
    for lang in _items(r.get("languages")):
        if isinstance(lang, str):
            lang = {"name": lang}
        if isinstance(lang, dict) and _text(_first(lang, "name", "language")):
            out["languages"].append({
                "name": _text(_first(lang, "name", "language")),
                "proficiency": _text(lang.get("proficiency")),
            })
    return out


def to_legacy_shape(r: Dict[str, Any]) -> Dict[str, Any]:
    """Bare-string certifications/languages and snake_case personal info."""
    legacy = copy.deepcopy(r)
    legacy["personal_info"] = legacy.pop("personalInfo", {})
    legacy["certifications"] = [c["name"] for c in r.get("certifications", [])]
    legacy["languages"] = [lang["name"] for lang in r.get("languages", [])]
    return legacy
