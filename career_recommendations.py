# career_recommendations.py
# Free-form career advice from the generative collaborator, split into discrete recommendations.

import logging
import re
from typing import List, Optional

from llm_client import GenerativeTextPort, call_with_timeout

logger = logging.getLogger(__name__)

# "1. ", "2.", and stacked markers like "1. 2. " left by some models
ORDINAL_MARKER = re.compile(r"^(?:\d+\.\s*)+")

CAREER_ADVICE_SYSTEM_PROMPT = """You are a career development expert specializing in career recommendations.
Your task is to generate personalized career development advice based on the user's missing skills.
Be specific, actionable, and practical in your recommendations.
Write one recommendation per line, as a numbered list."""


def normalize_recommendations(raw_text: str) -> List[str]:
    """
    Split generative advice text into an ordered list of recommendations.

    Blank lines are dropped, leading "1." style markers are stripped, and lines that are
    empty after stripping are dropped. Normalizing the joined output again is a no-op.
    """
    recommendations = []
    for line in (raw_text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        line = ORDINAL_MARKER.sub("", line).strip()
        if line:
            recommendations.append(line)
    return recommendations


class CareerAdvisor:
    def __init__(self, llm: GenerativeTextPort):
        self.llm = llm

    async def generate_recommendations(self, missing_skills: List[str], timeout: Optional[float] = None) -> List[str]:
        """Career-development actions for a set of skill gaps; empty on failure or with no gaps."""
        skills = [s.strip() for s in (missing_skills or []) if s and s.strip()]
        if not skills:
            return []

        prompt = f"Based on my skill gaps in: {', '.join(skills)}, what specific career development actions should I take?"
        try:
            raw = await call_with_timeout(self.llm.complete(CAREER_ADVICE_SYSTEM_PROMPT, prompt, json_mode=False), timeout)
        except Exception as e:
            logger.warning("Career recommendation generation failed: %s", e)
            return []

        return normalize_recommendations(raw)
