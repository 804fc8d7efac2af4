"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from resume_forge.clients.openai_provider import OpenAIProvider
from resume_forge.events.models import InMemoryEventLog
from resume_forge.models.payload import (
    CoverLetterPayload,
    ExperienceInput,
    ParsePayload,
    ResumePayload,
)
from resume_forge.pipeline.invoker import ModelInvoker


def make_provider(name: str, response: str | None = None, error: BaseException | None = None) -> AsyncMock:
    """Create a mock provider whose invoke() returns ``response`` or raises ``error``."""
    provider = AsyncMock(spec=OpenAIProvider)
    provider.name = name
    if error is not None:
        provider.invoke = AsyncMock(side_effect=error)
    else:
        provider.invoke = AsyncMock(return_value=response if response is not None else "{}")
    return provider


@pytest.fixture
def resume_json() -> dict:
    return {
        "title": "Staff Engineer",
        "summary": "Backend engineer with ten years of distributed systems experience.",
        "contact": {"fullName": "Jane Doe", "email": "jane@example.com", "phone": "555-0100"},
        "skills": ["Python", "Kubernetes", "PostgreSQL"],
        "experience": [
            {
                "company": "Acme",
                "position": "Senior Engineer",
                "startDate": "2019-03",
                "endDate": "",
                "current": True,
                "description": "Led the payments platform team.",
                "highlights": ["Cut p99 latency by 40%", "Migrated 30 services to Kubernetes"],
            }
        ],
        "education": [
            {"institution": "State University", "degree": "BSc", "field": "Computer Science",
             "startDate": "2010-09", "endDate": "2014-06"}
        ],
        "sections": [{"heading": "Projects", "bullets": ["Open-source rate limiter"]}],
        "keywords": ["distributed systems", "payments"],
    }


@pytest.fixture
def cover_letter_json() -> dict:
    return {
        "greeting": "Dear Hiring Manager,",
        "opening": "I am excited to apply for the Staff Engineer role at Globex.",
        "body": [
            "At Acme I led the payments platform team.",
            "I cut p99 latency by 40% while migrating 30 services.",
        ],
        "closing": "I would welcome the chance to discuss how I can help.",
        "signature": "Sincerely,\nJane Doe",
    }


@pytest.fixture
def parsed_resume_json() -> dict:
    return {
        "personalInfo": {
            "fullName": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "location": "Berlin",
            "linkedin": "linkedin.com/in/janedoe",
            "website": "",
            "summary": "Backend engineer.",
        },
        "experience": [
            {"id": "exp-1", "company": "Acme", "position": "Senior Engineer",
             "startDate": "2019-03", "endDate": "", "current": True, "description": "Payments."}
        ],
        "education": [
            {"id": "edu-1", "institution": "State University", "degree": "BSc",
             "field": "Computer Science", "startDate": "2010-09", "endDate": "2014-06", "current": False}
        ],
        "skills": ["Python", "Go"],
    }


@pytest.fixture
def resume_payload() -> ResumePayload:
    return ResumePayload(
        title="Staff Engineer",
        summary="Backend engineer with ten years of distributed systems experience.",
        skills=["Python", "Kubernetes"],
        experience=[
            ExperienceInput(company="Acme", role="Senior Engineer", impact="Cut p99 latency by 40%",
                            start="2019-03"),
        ],
    )


@pytest.fixture
def cover_letter_payload() -> CoverLetterPayload:
    return CoverLetterPayload(
        resume_id="res-123",
        job_title="Staff Engineer",
        company="Globex",
        job_description="Own the reliability of our payment rails.",
        tone="enthusiastic",
    )


@pytest.fixture
def parse_payload() -> ParsePayload:
    return ParsePayload(
        extracted_text="Jane Doe\njane@example.com | 555-0100\n\nEXPERIENCE\n• Acme, Senior Engineer 2019-03 - present",
    )


@pytest.fixture
def provider_factory():
    return make_provider


@pytest.fixture
def event_log() -> InMemoryEventLog:
    return InMemoryEventLog()


@pytest.fixture
def make_invoker(event_log):
    """Build a ModelInvoker from canned primary/secondary responses."""

    def _make(primary: str | dict | BaseException = "{}", secondary=None, timeout: float | None = 5.0):
        def _provider(name, value):
            if isinstance(value, BaseException):
                return make_provider(name, error=value)
            if isinstance(value, dict):
                value = json.dumps(value)
            return make_provider(name, response=value)

        second = _provider("ollama", secondary) if secondary is not None else None
        return ModelInvoker(_provider("openai", primary), second, timeout=timeout, events=event_log)

    return _make
