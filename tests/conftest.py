from __future__ import annotations

import asyncio
from typing import Any

import pytest


class FakeLLM:
    """GenerativeTextPort double: replays queued responses (or raises queued exceptions) and records calls."""

    def __init__(self, *responses: Any, delay: float = 0.0) -> None:
        self.responses = list(responses)
        self.delay = delay
        self.calls: list[dict[str, Any]] = []

    async def complete(self, system_prompt: str, user_payload: str, json_mode: bool = True) -> str:
        self.calls.append({"system_prompt": system_prompt, "user_payload": user_payload, "json_mode": json_mode})
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.responses:
            raise RuntimeError("FakeLLM has no response queued")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class FakeJobBoard:
    """JobPostingPort double."""

    def __init__(self, postings: list[Any] | None = None, error: Exception | None = None) -> None:
        self.postings = postings or []
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    async def search(self, query: str, filters: dict) -> list[Any]:
        self.calls.append((query, filters))
        if self.error:
            raise self.error
        return list(self.postings)


@pytest.fixture()
def make_llm() -> type[FakeLLM]:
    return FakeLLM


@pytest.fixture()
def make_job_board() -> type[FakeJobBoard]:
    return FakeJobBoard


@pytest.fixture()
def course_factory():
    from career_models import Course

    def _make(course_id: str, skills: list[str], **overrides: Any) -> Course:
        data = {
            "id": course_id,
            "title": f"Course {course_id}",
            "description": f"Learn {', '.join(skills)}",
            "platform": "Coursera",
            "difficulty": "Intermediate",
            "duration": "6 weeks",
            "skills": skills,
            "url": f"https://example.com/{course_id}",
        }
        data.update(overrides)
        return Course.model_validate(data)

    return _make
