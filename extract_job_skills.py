# extract_job_skills.py
# Derives a frequency-ranked skill list for a target role from live job postings.
# Postings are scanned against the fixed TECHNICAL_SKILLS vocabulary; related spellings are merged.

import argparse
import asyncio
import json
import logging
import os
import sys
from collections import Counter
from typing import Iterable, List, Optional, Union

from dotenv import load_dotenv
from pydantic import ValidationError

from career_errors import InvalidInputError
from career_models import JobPosting, PostingGapAnalysis, SkillFrequency
from job_board_client import AdzunaJobBoardClient, JobPostingPort
from llm_client import call_with_timeout
from skill_normalization import (
    TECHNICAL_SKILLS,
    display_skill_name,
    is_related_skill,
    keyword_pattern,
)

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_KEYWORD_PATTERNS = [(skill, keyword_pattern(skill)) for skill in TECHNICAL_SKILLS]


def extract_skills_from_posting(posting: JobPosting) -> List[str]:
    """Return every vocabulary keyword mentioned in a posting's title or description."""
    text = f"{posting.title or ''}\n{posting.description or ''}".lower()
    if not text.strip():
        return []
    return [skill for skill, pattern in _KEYWORD_PATTERNS if pattern.search(text)]


def normalize_skill_frequencies(
    raw_skills: Iterable[Union[SkillFrequency, dict]]
) -> List[SkillFrequency]:
    """
    Merge related spellings of the same skill and sort by frequency.

    Each raw entry joins the first existing group whose representative is related to it
    (see is_related_skill); frequencies within a group are summed. The group keeps the
    display form of its first-seen spelling. Output is sorted by descending frequency,
    ties in first-seen order.

    Example:
        [{python, 10}, {Python programming, 5}, {SQL, 8}] → [{Python, 15}, {SQL, 8}]
    """
    groups: List[list] = []  # [representative, display_name, total]
    for entry in raw_skills:
        item = entry if isinstance(entry, SkillFrequency) else SkillFrequency.model_validate(entry)
        name = item.name.strip()
        if not name:
            continue
        for group in groups:
            if is_related_skill(group[0], name):
                group[2] += item.frequency
                break
        else:
            groups.append([name, display_skill_name(name), item.frequency])

    merged = [SkillFrequency(name=display, frequency=total) for _, display, total in groups]
    # sorted() is stable, so equal frequencies keep first-seen order
    return sorted(merged, key=lambda s: s.frequency, reverse=True)


class JobPostingSkillExtractor:
    """JobPostingSkillExtractor: skills in demand for a role, ranked by how many postings mention them."""

    def __init__(self, job_board: JobPostingPort):
        self.job_board = job_board

    async def extract(
        self,
        target_role: str,
        industries: Optional[List[str]] = None,
        timeout: Optional[float] = None,
    ) -> List[SkillFrequency]:
        """
        Args:
            target_role: Role to search postings for (required)
            industries: Optional industry keywords; empty broadens the search
            timeout: Seconds allowed for the posting search

        Returns:
            Frequency-ranked skills. Empty when no postings are found or the posting
            source fails.
        """
        if not target_role or not target_role.strip():
            raise InvalidInputError("Invalid role provided")
        role = target_role.strip()
        filters = {"industries": [i for i in (industries or []) if i and i.strip()]}

        logger.info("Fetching job postings for role: %s", role)
        try:
            postings = await call_with_timeout(self.job_board.search(role, filters), timeout)
        except Exception as e:
            logger.warning("Job posting search failed for '%s': %s", role, e)
            return []

        if not postings:
            logger.info("No job postings found for role: %s", role)
            return []

        # One count per posting that mentions the skill
        counts: Counter = Counter()
        for i, posting in enumerate(postings):
            if isinstance(posting, dict):
                try:
                    posting = JobPosting.model_validate(posting)
                except ValidationError as e:
                    logger.warning("Skipping unusable job posting %d for '%s': %s", i, role, e)
                    continue
            counts.update(extract_skills_from_posting(posting))

        raw = [SkillFrequency(name=skill, frequency=n) for skill, n in counts.items()]
        skills = normalize_skill_frequencies(raw)
        logger.info("Extracted %d skills from %d postings", len(skills), len(postings))
        return skills

    async def analyze_skill_gaps(
        self,
        current_skills: List[str],
        target_role: str,
        industries: Optional[List[str]] = None,
        timeout: Optional[float] = None,
    ) -> PostingGapAnalysis:
        """
        Skills postings ask for that the user does not already have, most frequent first.
        Posting-derived analyses carry no recommendations.
        """
        skills = await self.extract(target_role, industries, timeout=timeout)
        known = [s for s in (current_skills or []) if s and s.strip()]

        missing = [s for s in skills if not any(is_related_skill(s.name, k) for k in known)]
        return PostingGapAnalysis(
            missing_skills=[s.name for s in missing],
            recommendations=[],
            skill_frequency={s.name: s.frequency for s in missing},
        )


# CLI interface (only runs when script is executed directly)
def main():
    parser = argparse.ArgumentParser(description="Rank the skills job postings ask for in a role.")
    parser.add_argument("target_role", help='e.g. "Senior Software Engineer"')
    parser.add_argument("--industry", action="append", default=[], help="Industry keyword (repeatable)")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds allowed for the posting search")
    args = parser.parse_args()

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"), stream=sys.stderr)

    try:
        extractor = JobPostingSkillExtractor(AdzunaJobBoardClient())
        skills = asyncio.run(extractor.extract(args.target_role, args.industry, timeout=args.timeout))
    except Exception as e:
        print(f"❌ Error extracting job skills: {e}", file=sys.stderr)
        sys.exit(1)

    # Output JSON ONLY to stdout (for programmatic use)
    print(json.dumps([s.to_json_dict() for s in skills], indent=2, ensure_ascii=False))
    print(f"✅ Found {len(skills)} skills for '{args.target_role}'", file=sys.stderr)


if __name__ == "__main__":
    main()
