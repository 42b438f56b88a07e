# extract_skills.py
# Resume analysis: skills, experience, education and suggested roles from raw resume text.

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import List, Optional

from career_errors import GenerativeResponseError, InvalidInputError
from career_models import ResumeAnalysis
from llm_client import (
    GenerativeTextPort,
    OpenAIChatClient,
    call_with_timeout,
    parse_json_content,
    require_string_list,
)

logger = logging.getLogger(__name__)

# Resume text beyond this is dropped before the call
MAX_RESUME_CHARS = 12000

RESUME_SYSTEM_PROMPT = """You are an expert résumé parser.

Extract key information from the résumé text the user sends.

- skills: learnable technical and professional skills actually mentioned
  (languages, frameworks, tools, platforms, domain fields, leadership/communication skills).
  Normalize obvious variants ("JS" → "JavaScript", "K8s" → "Kubernetes").
- experience: one entry per role, "<Title> at <Company> (<years>)" when available.
- education: one entry per degree or certification.
- suggestedRoles: 3-5 roles this person is a strong candidate for next.

Do not invent anything that is not supported by the text.

Return STRICT JSON only in this format:
{
  "skills": ["Python", "SQL"],
  "experience": ["Data Analyst at Acme (2020-2023)"],
  "education": ["BSc Computer Science"],
  "suggestedRoles": ["Data Engineer"]
}"""


def dedupe_skills(skills: List[str]) -> List[str]:
    """Drop blanks and case-insensitive duplicates, keeping the first spelling."""
    out = []
    seen = set()
    for s in skills:
        name = s.strip()
        key = name.lower()
        if name and key not in seen:
            seen.add(key)
            out.append(name)
    return out


def parse_resume_analysis(raw: str) -> ResumeAnalysis:
    data = parse_json_content(raw)
    if not isinstance(data, dict):
        raise GenerativeResponseError("Resume analysis must be a JSON object")
    return ResumeAnalysis(
        skills=dedupe_skills(require_string_list(data, "skills")),
        experience=require_string_list(data, "experience"),
        education=require_string_list(data, "education"),
        suggested_roles=require_string_list(data, "suggestedRoles"),
    )


class ResumeAnalyzer:
    def __init__(self, llm: GenerativeTextPort):
        self.llm = llm

    async def analyze_resume(self, resume_text: str, timeout: Optional[float] = None) -> ResumeAnalysis:
        """
        Extract skills, experience, education and suggested roles from a resume.

        Returns an empty ResumeAnalysis when the generative call fails.
        """
        if not resume_text or not resume_text.strip():
            raise InvalidInputError("Resume text is required")

        text = resume_text.strip()[:MAX_RESUME_CHARS]
        try:
            raw = await call_with_timeout(self.llm.complete(RESUME_SYSTEM_PROMPT, text, json_mode=True), timeout)
            analysis = parse_resume_analysis(raw)
        except Exception as e:
            logger.warning("Resume analysis failed: %s", e)
            return ResumeAnalysis()

        logger.info("Resume analysis found %d skills", len(analysis.skills))
        return analysis


# --- CLI interface ---
def main():
    parser = argparse.ArgumentParser(description="Analyze a plain-text resume.")
    parser.add_argument("resume_file", help="Path to a .txt resume")
    args = parser.parse_args()

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"), stream=sys.stderr)

    try:
        with open(args.resume_file, "r", encoding="utf-8") as f:
            resume_text = f.read()
    except FileNotFoundError:
        print(f"❌ File '{args.resume_file}' not found.", file=sys.stderr)
        sys.exit(1)

    try:
        analyzer = ResumeAnalyzer(OpenAIChatClient())
        analysis = asyncio.run(analyzer.analyze_resume(resume_text))
    except Exception as e:
        print(f"❌ Error analyzing resume: {e}", file=sys.stderr)
        sys.exit(1)

    output_file = os.path.splitext(args.resume_file)[0] + "_analysis.json"
    with open(output_file, "w", encoding="utf-8") as out_f:
        json.dump(analysis.to_json_dict(), out_f, indent=2, ensure_ascii=False)

    print(json.dumps(analysis.to_json_dict(), indent=2, ensure_ascii=False))
    print(f"✅ Resume analysis saved to: {output_file}", file=sys.stderr)


if __name__ == "__main__":
    main()
