# rank_courses.py
# Scores candidate courses against a user's skill gaps.
# Primary: one batched generative call. Fallback: deterministic relatedness heuristic.

import json
import logging
from typing import List, Optional

from career_errors import GenerativeResponseError
from career_models import Course, UserContext
from llm_client import GenerativeTextPort, call_with_timeout, parse_json_content
from skill_normalization import is_exact_skill, is_related_skill

logger = logging.getLogger(__name__)

EXACT_MATCH_POINTS = 100
RELATED_MATCH_POINTS = 75

RANKING_SYSTEM_PROMPT = """You are a course recommendation expert. Score how well each course closes the user's skill gaps.

Score every course from 0 to 100 considering:
- **Skill Coverage**: does it teach the user's missing skills?
- **Difficulty Fit**: is the difficulty right for the user's experience (current role and skills)?
- **Learning Style**: does the format suit the user's learning styles and time commitment?
- **Breadth**: how many of the missing skills does it cover in one course?
- **Relevance**: how relevant is it to the target role?

Return JSON in this format, with exactly one integer per course, in the same order as the input courses:
{
  "scores": [85, 40, 72]
}"""


def build_ranking_payload(courses: List[Course], user: UserContext) -> str:
    payload = {
        "user": {
            "currentRole": user.current_role or "not specified",
            "targetRole": user.target_role,
            "currentSkills": user.current_skills,
            "missingSkills": user.missing_skills,
            "preferences": user.preferences.to_json_dict() if user.preferences else {},
        },
        "courses": [
            {
                "index": i,
                "title": c.title,
                "description": c.description[:300],
                "platform": c.platform,
                "difficulty": c.difficulty,
                "duration": c.duration,
                "skills": c.skills,
            }
            for i, c in enumerate(courses)
        ],
    }
    return json.dumps(payload, ensure_ascii=False)


def parse_scores(raw: str, expected: int) -> List[int]:
    """
    Accept a bare JSON array or {"scores": [...]} of integers 0-100, one per course.
    Anything else (wrong length, non-integers, out of range) rejects the whole response.
    """
    data = parse_json_content(raw)
    scores = data.get("scores") if isinstance(data, dict) else data
    if not isinstance(scores, list):
        raise GenerativeResponseError("Ranking response has no scores array")
    if len(scores) != expected:
        raise GenerativeResponseError(f"Expected {expected} scores, got {len(scores)}")
    for score in scores:
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
            raise GenerativeResponseError(f"Invalid score: {score!r}")
    return scores


def score_course_heuristically(course: Course, missing_skills: List[str]) -> int:
    """
    +100 for each (course skill, missing skill) pair that matches exactly (case-insensitive),
    +75 for each pair that is only related. Contributions compound; there is no cap.
    """
    score = 0
    for skill in course.skills:
        for missing in missing_skills:
            if is_exact_skill(skill, missing):
                score += EXACT_MATCH_POINTS
            elif is_related_skill(skill, missing):
                score += RELATED_MATCH_POINTS
    return score


def score_courses_heuristically(courses: List[Course], missing_skills: List[str]) -> List[int]:
    return [score_course_heuristically(c, missing_skills) for c in courses]


def attach_scores(courses: List[Course], scores: List[int]) -> List[Course]:
    """Return new Course records carrying aiMatchScore, sorted by descending score (stable)."""
    scored = [c.model_copy(update={"ai_match_score": s}) for c, s in zip(courses, scores)]
    return sorted(scored, key=lambda c: c.ai_match_score or 0, reverse=True)


class CourseRanker:
    def __init__(self, llm: GenerativeTextPort):
        self.llm = llm

    async def _score_with_llm(self, courses: List[Course], user: UserContext, timeout: Optional[float]) -> List[int]:
        raw = await call_with_timeout(
            self.llm.complete(RANKING_SYSTEM_PROMPT, build_ranking_payload(courses, user), json_mode=True),
            timeout,
        )
        return parse_scores(raw, len(courses))

    async def rank(self, courses: List[Course], user: UserContext, timeout: Optional[float] = None) -> List[Course]:
        """
        Score and sort candidate courses for a user.

        Args:
            courses: Candidate courses (unscored)
            user: Learner context; missing_skills drives the fallback scorer
            timeout: Seconds allowed for the generative scoring call

        Returns:
            RankedCourseList: new Course records with aiMatchScore, highest first,
            equal scores in input order.
        """
        if not courses:
            return []

        try:
            scores = await self._score_with_llm(courses, user, timeout)
            logger.info("Scored %d courses with the generative ranker", len(courses))
        except Exception as e:
            logger.warning("Generative course ranking failed, using heuristic scores: %s", e)
            scores = score_courses_heuristically(courses, user.missing_skills)

        return attach_scores(courses, scores)
