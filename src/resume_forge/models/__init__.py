"""Data models for the structured generation pipeline."""

from resume_forge.models.document import (
    CoverLetterDocument,
    DocumentKind,
    EducationEntry,
    ExperienceEntry,
    ParsedResumeFields,
    ResumeContact,
    ResumeDocument,
    ResumeSection,
)
from resume_forge.models.payload import (
    CoverLetterPayload,
    ExperienceInput,
    ParsePayload,
    ResumePayload,
)
from resume_forge.models.records import (
    ConfidenceLevel,
    ConfidenceReport,
    GenerationRequest,
    GenerationResult,
    ProviderAttempt,
    RenderedArtifact,
    ValidatedDocument,
)

__all__ = [
    "ConfidenceLevel",
    "ConfidenceReport",
    "CoverLetterDocument",
    "CoverLetterPayload",
    "DocumentKind",
    "EducationEntry",
    "ExperienceEntry",
    "ExperienceInput",
    "GenerationRequest",
    "GenerationResult",
    "ParsePayload",
    "ParsedResumeFields",
    "ProviderAttempt",
    "RenderedArtifact",
    "ResumeContact",
    "ResumeDocument",
    "ResumePayload",
    "ResumeSection",
    "ValidatedDocument",
]
