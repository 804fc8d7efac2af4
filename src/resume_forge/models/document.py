"""Pydantic models for the structured documents the pipeline produces."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class DocumentKind(str, Enum):
    RESUME = "resume"
    COVER_LETTER = "cover_letter"
    PARSED_RESUME = "parsed_resume"


class _DocumentModel(BaseModel):
    """Base for document parts: frozen, populated by JSON key or python name."""

    model_config = {
        "populate_by_name": True,
        "frozen": True,
        "str_strip_whitespace": True,
        # ids and years sometimes come back as JSON numbers
        "coerce_numbers_to_str": True,
    }

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value, info: ValidationInfo):
        # Models emit null for "unknown"; optional fields fall back to their default
        if value is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


class ExperienceEntry(_DocumentModel):
    id: str = ""
    company: str = Field(min_length=1)
    position: str = Field(min_length=1)
    start_date: str = Field("", alias="startDate")
    end_date: str = Field("", alias="endDate")
    current: bool = False
    description: str = ""
    highlights: list[str] = Field(default_factory=list)


class EducationEntry(_DocumentModel):
    id: str = ""
    institution: str = Field(min_length=1)
    degree: str = ""
    field: str = ""
    start_date: str = Field("", alias="startDate")
    end_date: str = Field("", alias="endDate")
    current: bool = False


class ResumeSection(_DocumentModel):
    heading: str = Field(min_length=1)
    bullets: list[str] = Field(default_factory=list)


class ResumeContact(_DocumentModel):
    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    location: str = ""
    website: str = ""


class ResumeDocument(_DocumentModel):
    title: str = ""
    summary: str = ""
    contact: ResumeContact | None = None
    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    sections: list[ResumeSection] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class CoverLetterDocument(_DocumentModel):
    greeting: str = ""
    opening: str = ""
    body: list[str] = Field(default_factory=list)
    closing: str = ""
    signature: str = ""

    @property
    def plain_text(self) -> str:
        """Letter content as plain paragraphs, the way it is stored as text."""
        parts = [self.greeting, self.opening, *self.body, self.closing, self.signature]
        return "\n\n".join(p for p in parts if p)


class ParsedResumeFields(_DocumentModel):
    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    summary: str = ""
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)


DocumentFields = ResumeDocument | CoverLetterDocument | ParsedResumeFields
