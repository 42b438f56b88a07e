# analyze_skill_gap.py
# Asks the generative collaborator which skills separate a user from a target role.
# Fail-open: any collaborator or parsing failure yields an empty GapAnalysis.

import json
import logging
from typing import List, Optional

from career_errors import GenerativeResponseError, MissingTargetRoleError
from career_models import GapAnalysis
from llm_client import GenerativeTextPort, call_with_timeout, parse_json_content, require_string_list

logger = logging.getLogger(__name__)

GAP_ANALYSIS_SYSTEM_PROMPT = """You are an expert career coach and skill-gap analyst.

TASK:
1. Compare the user's CURRENT SKILLS with what the TARGET ROLE requires in today's job market.
2. Identify the 5-7 most critical MISSING skills, ranked by priority (most critical first).
   - Do not list skills the user already has, including obvious synonyms
     (e.g. "JS" = "JavaScript", "K8s" = "Kubernetes").
   - Prefer concrete, learnable skills over generic traits.
3. Write 5-7 actionable recommendations that close those gaps.
   - Each recommendation is one sentence with a concrete action and a time box
     (e.g. "Spend 4 weeks building a REST API with FastAPI and deploy it to AWS").
   - Order recommendations to match the priority of the missing skills.

Return STRICT JSON only in this format:
{
  "missingSkills": ["System Design", "Kubernetes", ...],
  "recommendations": ["...", "..."]
}"""


def build_gap_payload(current_skills: List[str], target_role: str, current_role: Optional[str] = None) -> str:
    payload = {
        "currentRole": current_role or "not specified",
        "targetRole": target_role,
        "currentSkills": current_skills or [],
    }
    return json.dumps(payload, ensure_ascii=False)


def parse_gap_analysis(raw: str) -> GapAnalysis:
    """Validate generative output against {missingSkills: [str], recommendations: [str]}."""
    data = parse_json_content(raw)
    if not isinstance(data, dict):
        raise GenerativeResponseError("Gap analysis must be a JSON object")
    missing = [s.strip() for s in require_string_list(data, "missingSkills") if s.strip()]
    recommendations = [r.strip() for r in require_string_list(data, "recommendations") if r.strip()]
    return GapAnalysis(missing_skills=missing, recommendations=recommendations)


class GenerativeGapAnalyzer:
    """GenerativeGapAnalyzer: ranked missing skills and action recommendations for a role transition."""

    def __init__(self, llm: GenerativeTextPort):
        self.llm = llm

    async def analyze_gap(
        self,
        current_skills: List[str],
        target_role: str,
        current_role: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> GapAnalysis:
        """
        Args:
            current_skills: Skills the user already has (may be empty)
            target_role: Role the user is moving into (required)
            current_role: Role the user holds today, if known
            timeout: Seconds allowed for the generative call

        Returns:
            GapAnalysis ordered by priority. Empty (both lists) when the generative
            call fails in any way; callers treat that as "not enough data".
        """
        if not target_role or not target_role.strip():
            raise MissingTargetRoleError()

        skills = [s.strip() for s in (current_skills or []) if s and s.strip()]
        payload = build_gap_payload(skills, target_role.strip(), (current_role or "").strip() or None)

        try:
            raw = await call_with_timeout(
                self.llm.complete(GAP_ANALYSIS_SYSTEM_PROMPT, payload, json_mode=True), timeout
            )
            analysis = parse_gap_analysis(raw)
        except Exception as e:
            logger.warning("Skill gap analysis failed for '%s': %s", target_role, e)
            return GapAnalysis()

        logger.info(
            "Gap analysis for '%s': %d missing skills, %d recommendations",
            target_role, len(analysis.missing_skills), len(analysis.recommendations),
        )
        return analysis
