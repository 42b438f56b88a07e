from __future__ import annotations

import asyncio
import json

import pytest

from analyze_skill_gap import GenerativeGapAnalyzer
from career_errors import ConfigurationError, MissingTargetRoleError
from career_models import JobPosting, User
from course_catalog import StaticCourseSource
from extract_job_skills import JobPostingSkillExtractor
from generate_report import collect_current_skills, generate_report
from rank_courses import CourseRanker
from recommend_courses import GenerativeCourseSource


def make_user(**overrides) -> User:
    data = {
        "currentRole": "Software Engineer",
        "targetRole": "Senior Software Engineer",
        "skills": ["JavaScript", "React"],
        "preferences": {"preferredIndustries": ["SaaS"], "learningStyles": ["hands-on"]},
    }
    data.update(overrides)
    return User.model_validate(data)


def test_collect_current_skills_merges_resume_skills() -> None:
    user = make_user(resumeAnalysis={"skills": ["react", "Node.js"]})
    assert collect_current_skills(user) == ["JavaScript", "React", "Node.js"]


def test_report_from_job_postings(make_llm, make_job_board, course_factory) -> None:
    board = make_job_board(
        [
            JobPosting(title="Senior Engineer, System Design"),
            JobPosting(title="Architecture and System Design Lead"),
            JobPosting(title="Engineering Leadership Role"),
        ]
    )
    catalog = [
        course_factory("react", ["React"]),
        course_factory("lead", ["Leadership"]),
        course_factory("design", ["System Design", "Architecture"]),
    ]
    llm = make_llm(RuntimeError("ranking unavailable"))
    progress: list[str] = []

    report = asyncio.run(
        generate_report(
            make_user(),
            StaticCourseSource(catalog),
            CourseRanker(llm),
            posting_extractor=JobPostingSkillExtractor(board),
            gap_source="postings",
            progress_callback=progress.append,
        )
    )

    assert report.gap_analysis.missing_skills == ["System Design", "Architecture", "Leadership"]
    assert [c.id for c in report.courses] == ["design", "lead", "react"]
    assert [c.ai_match_score for c in report.courses] == [200, 100, 0]
    assert board.calls == [("Senior Software Engineer", {"industries": ["SaaS"]})]
    assert progress[-1] == "✅ Report generation complete!"

    output = report.to_json_dict()
    assert output["gapAnalysis"]["skillFrequency"] == {"System Design": 2, "Architecture": 1, "Leadership": 1}
    assert output["courses"][0]["aiMatchScore"] == 200


def test_report_from_generative_collaborator(make_llm) -> None:
    gap = {"missingSkills": ["Kubernetes"], "recommendations": ["Run a cluster for 4 weeks"]}
    courses = {
        "courses": [
            {
                "id": "k8s",
                "title": "Kubernetes Fundamentals",
                "description": "Clusters, pods and deployments.",
                "platform": "edX",
                "difficulty": "Beginner",
                "duration": "4 weeks",
                "skills": ["Kubernetes"],
                "url": "https://example.com/k8s",
            }
        ]
    }
    llm = make_llm(json.dumps(gap), json.dumps(courses), "[87]")

    report = asyncio.run(
        generate_report(make_user(), GenerativeCourseSource(llm), CourseRanker(llm), gap_analyzer=GenerativeGapAnalyzer(llm))
    )

    assert report.gap_analysis.recommendations == ["Run a cluster for 4 weeks"]
    assert [(c.id, c.ai_match_score) for c in report.courses] == [("k8s", 87)]
    assert len(llm.calls) == 3
    assert "skillFrequency" not in report.to_json_dict()["gapAnalysis"]


def test_stored_analysis_skips_gap_derivation(make_llm, course_factory) -> None:
    user = make_user(resumeAnalysis={"skills": ["Python"], "missingSkills": ["SQL"], "recommendations": ["Practice joins"]})
    llm = make_llm("[64]")

    report = asyncio.run(
        generate_report(user, StaticCourseSource([course_factory("sql", ["SQL"])]), CourseRanker(llm))
    )

    assert report.gap_analysis.missing_skills == ["SQL"]
    assert report.gap_analysis.recommendations == ["Practice joins"]
    assert report.courses[0].ai_match_score == 64
    assert len(llm.calls) == 1


def test_empty_gap_makes_no_course_calls(make_llm, course_factory) -> None:
    user = make_user(resumeAnalysis={"missingSkills": []})
    llm = make_llm("[50]")

    report = asyncio.run(generate_report(user, GenerativeCourseSource(llm), CourseRanker(llm)))

    assert report.gap_analysis.is_empty()
    assert report.courses == []
    assert llm.calls == []


def test_failed_gap_analysis_degrades_to_empty_report(make_llm) -> None:
    llm = make_llm(ConnectionError("network down"))
    report = asyncio.run(
        generate_report(make_user(), GenerativeCourseSource(llm), CourseRanker(llm), gap_analyzer=GenerativeGapAnalyzer(llm))
    )

    assert report.to_json_dict() == {"gapAnalysis": {"missingSkills": [], "recommendations": []}, "courses": []}
    assert len(llm.calls) == 1


@pytest.mark.parametrize("role", [None, "", "  "])
def test_target_role_is_required(make_llm, role) -> None:
    llm = make_llm()
    with pytest.raises(MissingTargetRoleError):
        asyncio.run(
            generate_report(
                make_user(targetRole=role), StaticCourseSource([]), CourseRanker(llm), gap_analyzer=GenerativeGapAnalyzer(llm)
            )
        )
    assert llm.calls == []


def test_unknown_gap_source_is_rejected(make_llm) -> None:
    llm = make_llm()
    with pytest.raises(ValueError, match="gap_source"):
        asyncio.run(generate_report(make_user(), StaticCourseSource([]), CourseRanker(llm), gap_source="survey"))


def test_missing_gap_collaborator_is_a_configuration_error(make_llm) -> None:
    llm = make_llm()
    with pytest.raises(ConfigurationError):
        asyncio.run(generate_report(make_user(), StaticCourseSource([]), CourseRanker(llm), gap_source="postings"))
