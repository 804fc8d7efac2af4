"""Pydantic models for the per-kind request payloads handed in by the routing layer."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from resume_forge.models.document import ResumeContact


class ExperienceInput(BaseModel):
    company: str
    role: str
    impact: str = ""
    start: str | None = None
    end: str | None = None


class ResumePayload(BaseModel):
    title: str
    summary: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceInput] = Field(default_factory=list)
    contact: ResumeContact | None = None


class CoverLetterPayload(BaseModel):
    resume_id: str
    job_title: str
    company: str
    job_description: str
    tone: Literal["professional", "enthusiastic", "executive"] = "professional"
    resume_highlights: str | None = None  # achievements pulled from the stored resume


class ParsePayload(BaseModel):
    extracted_text: str
    ocr_used: bool = False


Payload = ResumePayload | CoverLetterPayload | ParsePayload
