# generate_report.py
# Pipeline orchestrator: User → gap analysis → candidate courses → ranked course list.

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Callable, List, Optional, Protocol

from analyze_skill_gap import GenerativeGapAnalyzer
from career_errors import ConfigurationError, MissingTargetRoleError
from career_models import Course, CourseReport, CourseRequest, GapAnalysis, User, UserContext
from course_catalog import StaticCourseSource, load_course_catalog
from extract_job_skills import JobPostingSkillExtractor
from extract_skills import dedupe_skills
from job_board_client import AdzunaJobBoardClient
from llm_client import OpenAIChatClient
from rank_courses import CourseRanker
from recommend_courses import GenerativeCourseSource

logger = logging.getLogger(__name__)

GAP_SOURCES = ("ai", "postings")


class CourseCandidateSource(Protocol):
    async def fetch_candidates(self, request: CourseRequest, timeout: Optional[float] = None) -> List[Course]:
        ...


def collect_current_skills(user: User) -> List[str]:
    """User-declared skills followed by resume skills, case-insensitive duplicates removed."""
    resume_skills = user.resume_analysis.skills if user.resume_analysis else []
    return dedupe_skills(list(user.skills or []) + list(resume_skills))


def stored_gap_analysis(user: User) -> Optional[GapAnalysis]:
    analysis = user.resume_analysis
    if analysis is None or analysis.missing_skills is None:
        return None
    return GapAnalysis(missing_skills=analysis.missing_skills, recommendations=analysis.recommendations or [])


async def generate_report(
    user: User,
    course_source: CourseCandidateSource,
    ranker: CourseRanker,
    gap_analyzer: Optional[GenerativeGapAnalyzer] = None,
    posting_extractor: Optional[JobPostingSkillExtractor] = None,
    gap_source: str = "ai",
    timeout: Optional[float] = None,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> CourseReport:
    """
    Generate a skill-gap analysis and ranked course list for a user.

    Args:
        user: User record (target role required)
        course_source: StaticCourseSource or GenerativeCourseSource
        ranker: CourseRanker used on the candidates
        gap_analyzer: Used when gap_source == "ai"
        posting_extractor: Used when gap_source == "postings"
        gap_source: "ai" or "postings"; ignored when the user carries a stored analysis
        timeout: Seconds allowed for each collaborator call
        progress_callback: Called with a message before each step

    Returns:
        CourseReport with the gap analysis and ranked courses. An empty gap analysis
        yields an empty course list.
    """
    def step(msg: str):
        logger.info(msg)
        if progress_callback:
            progress_callback(msg)

    if not user.target_role or not user.target_role.strip():
        raise MissingTargetRoleError()
    if gap_source not in GAP_SOURCES:
        raise ValueError(f"gap_source must be one of {GAP_SOURCES}, got {gap_source!r}")

    target_role = user.target_role.strip()
    current_skills = collect_current_skills(user)
    preferences = user.preferences

    # Step 1: Skill gaps
    gap = stored_gap_analysis(user)
    if gap is not None:
        step("Using stored skill gap analysis...")
    elif gap_source == "postings":
        if posting_extractor is None:
            raise ConfigurationError("gap_source 'postings' needs a JobPostingSkillExtractor")
        step("Analyzing job postings for skill gaps...")
        industries = preferences.preferred_industries if preferences else []
        gap = await posting_extractor.analyze_skill_gaps(current_skills, target_role, industries, timeout=timeout)
    else:
        if gap_analyzer is None:
            raise ConfigurationError("gap_source 'ai' needs a GenerativeGapAnalyzer")
        step("Analyzing skill gaps...")
        gap = await gap_analyzer.analyze_gap(current_skills, target_role, user.current_role, timeout=timeout)

    if not gap.missing_skills:
        step("No missing skills found; skipping course recommendations.")
        return CourseReport(gap_analysis=gap, courses=[])

    # Step 2: Candidate courses
    step("Collecting candidate courses...")
    request = CourseRequest(
        target_role=target_role,
        current_skills=current_skills,
        missing_skills=gap.missing_skills,
        preferences=preferences,
    )
    candidates = await course_source.fetch_candidates(request, timeout=timeout)

    # Step 3: Rank
    step(f"Ranking {len(candidates)} candidate courses...")
    context = UserContext(
        target_role=target_role,
        current_role=user.current_role,
        current_skills=current_skills,
        missing_skills=gap.missing_skills,
        preferences=preferences,
    )
    courses = await ranker.rank(candidates, context, timeout=timeout)

    step("✅ Report generation complete!")
    return CourseReport(gap_analysis=gap, courses=courses)


def main():
    parser = argparse.ArgumentParser(description="Generate a skill-gap and course recommendation report.")
    parser.add_argument("user_file", help="JSON file with the user record")
    parser.add_argument("--catalog", help="JSON course catalog; generate courses with the LLM when omitted")
    parser.add_argument("--gap-source", choices=GAP_SOURCES, default="ai")
    parser.add_argument("--output", help="Also write the report to this file")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds allowed per collaborator call")
    args = parser.parse_args()

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"), stream=sys.stderr)

    try:
        with open(args.user_file, "r", encoding="utf-8") as f:
            user = User.model_validate(json.load(f))

        llm = OpenAIChatClient()
        course_source = StaticCourseSource(load_course_catalog(args.catalog)) if args.catalog else GenerativeCourseSource(llm)
        posting_extractor = JobPostingSkillExtractor(AdzunaJobBoardClient()) if args.gap_source == "postings" else None

        report = asyncio.run(
            generate_report(
                user,
                course_source,
                CourseRanker(llm),
                gap_analyzer=GenerativeGapAnalyzer(llm),
                posting_extractor=posting_extractor,
                gap_source=args.gap_source,
                timeout=args.timeout,
            )
        )
    except Exception as e:
        print(f"❌ Error generating report: {e}", file=sys.stderr)
        sys.exit(1)

    output = report.to_json_dict()
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2, ensure_ascii=False)
        print(f"✅ Report saved to {args.output}", file=sys.stderr)

    print(json.dumps(output, indent=2, ensure_ascii=False))
    print(f"Missing skills: {len(report.gap_analysis.missing_skills)}", file=sys.stderr)
    print(f"Recommended courses: {len(report.courses)}", file=sys.stderr)


if __name__ == "__main__":
    main()
