"""
AI rewrite of a parsed résumé: a stronger summary, sharper experience
descriptions and skill suggestions. Falls back to a static payload when no
provider is configured or the model call fails.
"""

from __future__ import annotations
import json, logging, textwrap
from typing import Any, Dict, Optional

from config import Settings
from errors import AiExtractionError
from llm_client import LLMClient
from parser_llm import _extract_json

logger = logging.getLogger(__name__)

ENHANCE_TEMPERATURE = 0.7

_SYSTEM_PROMPT = (
    "You are an expert résumé writer and career strategist. Return ONLY valid "
    "JSON, no markdown and no explanations."
)

_USER_PROMPT = textwrap.dedent(
    """
Enhance the résumé below so it is compelling, professional and ATS friendly.
Use strong action verbs and industry keywords, turn responsibilities into
achievements and keep every statement truthful.

Required output format:
{{
  "enhancedSummary": "3-4 sentence professional summary",
  "improvedExperiences": [{{"description": "enhanced description, one per job in order"}}],
  "skillSuggestions": ["relevant skill the candidate should add"]
}}

Résumé:
{resume}
"""
)

NOT_CONFIGURED = {
    "enhancedSummary": "Professional summary enhancement requires an AI provider configuration.",
    "improvedExperiences": [],
    "skillSuggestions": [],
}

UNAVAILABLE = {
    "enhancedSummary": "Enhanced professional summary (AI enhancement temporarily unavailable)",
    "improvedExperiences": [],
    "skillSuggestions": [
        "Consider adding relevant technical skills",
        "Include soft skills",
        "Add industry certifications",
    ],
}


def _prompt_payload(resume: Dict[str, Any]) -> str:
    subset = {
        "summary": resume.get("summary", ""),
        "experience": [
            {k: job.get(k, "") for k in ("position", "company", "description", "achievements")}
            for job in resume.get("experience") or []
        ],
        "skills": [s["name"] for s in resume.get("skills") or []],
    }
    return json.dumps(subset, ensure_ascii=False, indent=2)


def _normalise(data: Dict[str, Any]) -> Dict[str, Any]:
    experiences = []
    for item in data.get("improvedExperiences") or []:
        if isinstance(item, str):
            item = {"description": item}
        if isinstance(item, dict) and item.get("description"):
            experiences.append({"description": str(item["description"]).strip()})
    return {
        "enhancedSummary": str(data.get("enhancedSummary") or "").strip(),
        "improvedExperiences": experiences,
        "skillSuggestions": [str(s).strip() for s in data.get("skillSuggestions") or [] if str(s).strip()],
    }


def enhance_resume(resume: Dict[str, Any], client: Optional[LLMClient],
                   settings: Settings | None = None) -> Dict[str, Any]:
    if client is None:
        logger.info("No AI provider configured, returning enhancement notice")
        return dict(NOT_CONFIGURED)

    settings = settings or Settings()
    messages = [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": _USER_PROMPT.format(resume=_prompt_payload(resume))},
    ]
    try:
        rsp = client.chat(model=settings.model, messages=messages, temperature=ENHANCE_TEMPERATURE)
        return _normalise(_extract_json(rsp.message.content))
    except AiExtractionError as exc:
        logger.warning("Resume enhancement failed: %s", exc.message)
        return {**UNAVAILABLE, "skillSuggestions": list(UNAVAILABLE["skillSuggestions"])}
