# course_catalog.py
# Static course candidates: a curated catalog the caller already holds, plus a loader
# that normalizes loosely formatted third-party course records (Udemy/Coursera exports etc.).

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from career_models import Course, CourseRequest

logger = logging.getLogger(__name__)


# ---------- utils ----------
def _first(record: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _clean_str(value: Any) -> str:
    # pandas exports write missing cells as NaN / "nan"
    if value is None:
        return ""
    text = str(value).strip()
    return "" if text.lower() == "nan" else text


def normalize_price(price_value) -> Optional[str]:
    """Normalize price to "Free" or "$12.34"; None when no price is given."""
    if price_value is None or price_value == "":
        return None
    if isinstance(price_value, bool):
        return None
    if isinstance(price_value, (int, float)):
        if price_value == 0:
            return "Free"
        return f"${price_value:.2f}"
    price_str = str(price_value).strip()
    if price_str.lower() in ["free", "0", "0.0"]:
        return "Free"
    try:
        num_price = float(price_str.replace("$", "").replace(",", ""))
    except ValueError:
        return price_str
    if num_price == 0:
        return "Free"
    return f"${num_price:.2f}"


MAX_RATING = 5.0


def normalize_rating(rating_value) -> Optional[float]:
    """
    Star rating on a 0-5 scale, or None when missing or unusable.

    Accepts numbers and strings such as "4.6", "4.6/5" or "4.6 out of 5".
    Values outside 0-5 (and NaN) are dropped rather than clamped.
    """
    if rating_value is None or isinstance(rating_value, bool):
        return None
    text = _clean_str(rating_value).lower()
    for suffix in ("out of 5", "/5"):
        if text.endswith(suffix):
            text = text[: -len(suffix)].strip()
    try:
        rating = float(text)
    except ValueError:
        return None
    if not 0.0 <= rating <= MAX_RATING:
        return None
    return round(rating, 2)


def normalize_duration(duration_value, platform: str) -> str:
    """Normalize duration to string format."""
    if duration_value is None:
        return "N/A"
    if isinstance(duration_value, (int, float)):
        if platform == "Udemy":
            return f"{duration_value:g} hours"
        return f"{duration_value:g} weeks"
    return _clean_str(duration_value) or "N/A"


def normalize_level(level_value) -> str:
    """Normalize level to Beginner/Intermediate/Advanced."""
    level_lower = _clean_str(level_value).lower()
    if not level_lower or "beginner" in level_lower or "all" in level_lower or "introductory" in level_lower:
        return "Beginner"
    if "advanced" in level_lower or "expert" in level_lower or "professional" in level_lower:
        return "Advanced"
    return "Intermediate"


def normalize_skill_list(skills_value) -> List[str]:
    if isinstance(skills_value, list):
        return [_clean_str(s) for s in skills_value if _clean_str(s)]
    text = _clean_str(skills_value)
    if not text:
        return []
    separator = ";" if ";" in text else ","
    return [s.strip() for s in text.split(separator) if s.strip()]


def course_from_record(record: Dict[str, Any], index: int = 0) -> Optional[Course]:
    """
    Build a Course from a catalog record, tolerating the field names used by common exports.

    Args:
        record: Raw course record (dict)
        index: Position in the catalog, used for a fallback id

    Returns:
        Course, or None when the record has no usable title
    """
    title = _clean_str(_first(record, "title", "course_title", "name", "Course Name"))
    if not title:
        return None

    platform = _clean_str(_first(record, "platform", "_platform", "provider")) or "Unknown"
    skills = normalize_skill_list(_first(record, "skills", "skills_covered", "Skills"))
    description = _clean_str(
        _first(record, "description", "Description", "course_description", "headline", "summary")
    )
    if not description:
        description = f"Course covering {', '.join(skills) if skills else 'relevant skills'}"

    return Course(
        id=_clean_str(_first(record, "id", "course_id", "_id")) or f"course-{index + 1}",
        title=title,
        description=description,
        platform=platform,
        difficulty=normalize_level(_first(record, "difficulty", "level", "Level", "instructional_level")),
        duration=normalize_duration(
            _first(record, "duration", "content_duration", "Duration", "timeCommitment"), platform
        ),
        skills=skills,
        url=_clean_str(_first(record, "url", "link", "course_url", "Course URL")),
        price=normalize_price(_first(record, "price", "cost", "Price", "Cost")),
        rating=normalize_rating(_first(record, "rating", "Rating", "average_rating")),
    )


def load_course_catalog(path: Union[str, Path]) -> List[Course]:
    """
    Load a JSON course catalog: either a list of records or {"courses": [...]}.
    Records without a title are skipped.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    records = data.get("courses", []) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise ValueError(f"Course catalog {path} must contain a list of courses")

    courses = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            continue
        course = course_from_record(record, i)
        if course is None:
            logger.debug("Skipping catalog record %d without a title", i)
            continue
        courses.append(course)

    logger.info("Loaded %d courses from %s", len(courses), path)
    return courses


class StaticCourseSource:
    """CourseCandidateSource over a fixed catalog; never calls a collaborator."""

    def __init__(self, courses: List[Course]):
        self.courses = list(courses)

    async def fetch_candidates(self, request: Optional[CourseRequest] = None, timeout: Optional[float] = None) -> List[Course]:
        return list(self.courses)
