from __future__ import annotations

import asyncio
import json

import pytest

from analyze_skill_gap import GAP_ANALYSIS_SYSTEM_PROMPT, GenerativeGapAnalyzer, parse_gap_analysis
from career_errors import GenerativeResponseError, MissingTargetRoleError
from career_models import GapAnalysis

GAP_RESPONSE = json.dumps(
    {
        "missingSkills": ["System Design", "Kubernetes", " "],
        "recommendations": ["Spend 4 weeks on distributed systems fundamentals", "Deploy a service to a K8s cluster"],
    }
)


def test_analyze_gap_returns_collaborator_analysis(make_llm) -> None:
    llm = make_llm(GAP_RESPONSE)
    gap = asyncio.run(GenerativeGapAnalyzer(llm).analyze_gap(["JavaScript", " "], "Senior Software Engineer", "Developer"))

    assert gap.missing_skills == ["System Design", "Kubernetes"]
    assert len(gap.recommendations) == 2

    assert len(llm.calls) == 1
    call = llm.calls[0]
    assert call["system_prompt"] == GAP_ANALYSIS_SYSTEM_PROMPT
    assert call["json_mode"] is True
    assert json.loads(call["user_payload"]) == {
        "currentRole": "Developer",
        "targetRole": "Senior Software Engineer",
        "currentSkills": ["JavaScript"],
    }


def test_analyze_gap_fails_open_when_port_raises(make_llm, caplog) -> None:
    llm = make_llm(ConnectionError("network down"))
    gap = asyncio.run(GenerativeGapAnalyzer(llm).analyze_gap(["X"], "Role"))

    assert gap == GapAnalysis()
    assert gap.to_json_dict() == {"missingSkills": [], "recommendations": []}
    assert "network down" in caplog.text


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"missingSkills": ["Go"]',
        '["System Design"]',
        '{"missingSkills": ["Go"]}',
        '{"missingSkills": "Go", "recommendations": []}',
        '{"missingSkills": [1, 2], "recommendations": []}',
    ],
)
def test_analyze_gap_fails_open_on_garbled_output(make_llm, raw: str) -> None:
    gap = asyncio.run(GenerativeGapAnalyzer(make_llm(raw)).analyze_gap(["X"], "Role"))
    assert gap.is_empty()


def test_analyze_gap_fails_open_on_timeout(make_llm) -> None:
    llm = make_llm(GAP_RESPONSE, delay=0.5)
    gap = asyncio.run(GenerativeGapAnalyzer(llm).analyze_gap(["X"], "Role", timeout=0.01))
    assert gap.is_empty()


@pytest.mark.parametrize("role", ["", "  ", None])
def test_analyze_gap_requires_target_role(make_llm, role) -> None:
    llm = make_llm(GAP_RESPONSE)
    with pytest.raises(MissingTargetRoleError, match="Target role is required"):
        asyncio.run(GenerativeGapAnalyzer(llm).analyze_gap(["X"], role))
    assert llm.calls == []


def test_parse_gap_analysis_rejects_non_object() -> None:
    with pytest.raises(GenerativeResponseError):
        parse_gap_analysis("[]")
