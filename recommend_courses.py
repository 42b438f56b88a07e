# recommend_courses.py
# Generative course candidates: asks the generative collaborator to synthesize courses
# for a user's missing skills, validated strictly against the Course shape.

import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from career_errors import GenerativeResponseError, MissingTargetRoleError
from career_models import Course, CourseRequest
from llm_client import GenerativeTextPort, call_with_timeout, parse_json_content

logger = logging.getLogger(__name__)

COURSE_GENERATION_SYSTEM_PROMPT = """You are a career development expert specializing in course recommendations.
Your task is to generate a list of high-quality online courses that would help the user acquire their missing skills.
For each missing skill, recommend 1-2 relevant courses from reputable platforms like Coursera, Udemy, edX, or similar.

Consider the user's target role, the skills they already have (do not teach those again),
and their preferences (industries, learning styles, weekly time commitment).

You must return a JSON object with the following exact structure:
{
  "courses": [
    {
      "id": "unique-id-1",
      "title": "Course Title",
      "description": "2-3 sentence description",
      "platform": "Platform Name",
      "difficulty": "Beginner|Intermediate|Advanced",
      "duration": "Duration (e.g., 6 weeks)",
      "skills": ["Skill 1", "Skill 2"],
      "url": "https://course-url.com",
      "price": "Free|$XX.XX",
      "rating": 4.5
    }
  ]
}

difficulty MUST be exactly one of "Beginner", "Intermediate", "Advanced"."""


def build_course_payload(request: CourseRequest) -> str:
    preferences = request.preferences.to_json_dict() if request.preferences else {}
    payload = {
        "targetRole": request.target_role,
        "currentSkills": request.current_skills,
        "missingSkills": request.missing_skills,
        "preferences": preferences,
    }
    return json.dumps(payload, ensure_ascii=False)


def parse_generated_courses(raw: str) -> List[Course]:
    """
    Validate {"courses": [Course, ...]}. One malformed course rejects the whole response.
    """
    data = parse_json_content(raw)
    if not isinstance(data, dict):
        raise GenerativeResponseError("Course response must be a JSON object")
    entries = data.get("courses")
    if not isinstance(entries, list):
        raise GenerativeResponseError("Course response has no 'courses' array")

    courses = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise GenerativeResponseError(f"Course {i} is not an object")
        try:
            course = Course.model_validate(entry)
        except ValidationError as e:
            raise GenerativeResponseError(f"Course {i} failed validation: {e}") from e
        if course.ai_match_score is not None and course.ai_match_score > 100:
            raise GenerativeResponseError(f"Course {i} has aiMatchScore outside 0-100")
        # Scores are CourseRanker's job; candidates start unscored
        courses.append(course.model_copy(update={"ai_match_score": None}))
    return courses


class GenerativeCourseSource:
    """CourseCandidateSource that synthesizes 1-2 courses per missing skill."""

    def __init__(self, llm: GenerativeTextPort):
        self.llm = llm

    async def fetch_candidates(self, request: CourseRequest, timeout: Optional[float] = None) -> List[Course]:
        """
        Args:
            request: target role, current skills, missing skills and preferences
            timeout: Seconds allowed for the generative call

        Returns:
            Validated candidate courses; empty when there are no missing skills
            (no call is made) or when the response is unusable.
        """
        if not request.target_role or not request.target_role.strip():
            raise MissingTargetRoleError()

        missing = [s.strip() for s in request.missing_skills if s and s.strip()]
        if not missing:
            return []

        request = request.model_copy(update={"missing_skills": missing})
        try:
            raw = await call_with_timeout(
                self.llm.complete(COURSE_GENERATION_SYSTEM_PROMPT, build_course_payload(request), json_mode=True),
                timeout,
            )
            courses = parse_generated_courses(raw)
        except Exception as e:
            logger.warning("Course generation failed for %d missing skills: %s", len(missing), e)
            return []

        logger.info("Generated %d candidate courses for %d missing skills", len(courses), len(missing))
        return courses
