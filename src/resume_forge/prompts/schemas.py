"""Schema descriptors: one DocumentSchema per DocumentKind.

A schema lists every top-level field of a document, where it lives in the
model's JSON output, what shape it must have, and whether it is required.
The validator walks these descriptors field by field, and the prompt
templates embed ``output_format()`` so the model is asked for exactly the
shape the validator accepts.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

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


class FieldType(str, Enum):
    STRING = "string"
    STRING_LIST = "string_list"
    OBJECT_LIST = "object_list"
    OBJECT = "object"  # optional sub-object, None when absent


@dataclass(frozen=True)
class FieldSpec:
    name: str  # attribute on the document model
    key: str  # key in the model's JSON output
    type: FieldType
    required: bool = False
    item_model: type[BaseModel] | None = None
    parent: str | None = None  # enclosing JSON object, e.g. "personalInfo"
    id_prefix: str | None = None  # positional ids for list entries missing one
    description: str = ""

    def default(self):
        if self.type is FieldType.STRING:
            return ""
        if self.type in (FieldType.STRING_LIST, FieldType.OBJECT_LIST):
            return []
        return None


@dataclass(frozen=True)
class DocumentSchema:
    kind: DocumentKind
    model: type[BaseModel]
    fields: tuple[FieldSpec, ...]

    def __post_init__(self):
        names = [f.name for f in self.fields]
        if set(names) != set(self.model.model_fields):
            raise ValueError(
                f"Schema for {self.kind.value} does not cover {self.model.__name__} exactly"
            )

    def field_names(self) -> frozenset[str]:
        return frozenset(f.name for f in self.fields)

    def required_fields(self) -> frozenset[str]:
        return frozenset(f.name for f in self.fields if f.required)

    def output_format(self) -> str:
        """JSON skeleton describing the expected model output."""
        skeleton: dict = {}
        for f in self.fields:
            target = skeleton.setdefault(f.parent, {}) if f.parent else skeleton
            target[f.key] = _describe(f)
        return json.dumps(skeleton, indent=2, ensure_ascii=False)


def _describe(spec: FieldSpec):
    if spec.type is FieldType.STRING:
        return spec.description or "string"
    if spec.type is FieldType.STRING_LIST:
        return [spec.description or "string"]
    sample = _model_skeleton(spec.item_model)
    if spec.type is FieldType.OBJECT_LIST:
        return [sample]
    return sample


def _model_skeleton(model: type[BaseModel] | None) -> dict:
    if model is None:
        return {}
    out: dict = {}
    for name, info in model.model_fields.items():
        key = info.alias or name
        annotation = info.annotation
        if annotation is bool:
            out[key] = "boolean"
        elif annotation == list[str]:
            out[key] = ["string"]
        else:
            out[key] = "string"
    return out


RESUME_SCHEMA = DocumentSchema(
    kind=DocumentKind.RESUME,
    model=ResumeDocument,
    fields=(
        FieldSpec("title", "title", FieldType.STRING, required=True, description="target job title"),
        FieldSpec("summary", "summary", FieldType.STRING, required=True, description="2-4 sentence professional summary"),
        FieldSpec("contact", "contact", FieldType.OBJECT, item_model=ResumeContact),
        FieldSpec("skills", "skills", FieldType.STRING_LIST, description="skill"),
        FieldSpec("experience", "experience", FieldType.OBJECT_LIST, item_model=ExperienceEntry, id_prefix="exp"),
        FieldSpec("education", "education", FieldType.OBJECT_LIST, item_model=EducationEntry, id_prefix="edu"),
        FieldSpec("sections", "sections", FieldType.OBJECT_LIST, item_model=ResumeSection),
        FieldSpec("keywords", "keywords", FieldType.STRING_LIST, description="ATS keyword"),
    ),
)

COVER_LETTER_SCHEMA = DocumentSchema(
    kind=DocumentKind.COVER_LETTER,
    model=CoverLetterDocument,
    fields=(
        FieldSpec("greeting", "greeting", FieldType.STRING, required=True, description="salutation, e.g. Dear Hiring Manager"),
        FieldSpec("opening", "opening", FieldType.STRING, required=True, description="opening paragraph"),
        FieldSpec("body", "body", FieldType.STRING_LIST, description="body paragraph"),
        FieldSpec("closing", "closing", FieldType.STRING, required=True, description="closing paragraph"),
        FieldSpec("signature", "signature", FieldType.STRING, required=True, description="sign-off, e.g. Sincerely, Jane Doe"),
    ),
)

PARSED_RESUME_SCHEMA = DocumentSchema(
    kind=DocumentKind.PARSED_RESUME,
    model=ParsedResumeFields,
    fields=(
        FieldSpec("full_name", "fullName", FieldType.STRING, required=True, parent="personalInfo"),
        FieldSpec("email", "email", FieldType.STRING, required=True, parent="personalInfo"),
        FieldSpec("phone", "phone", FieldType.STRING, required=True, parent="personalInfo"),
        FieldSpec("location", "location", FieldType.STRING, parent="personalInfo"),
        FieldSpec("linkedin", "linkedin", FieldType.STRING, parent="personalInfo"),
        FieldSpec("website", "website", FieldType.STRING, parent="personalInfo"),
        FieldSpec("summary", "summary", FieldType.STRING, parent="personalInfo"),
        FieldSpec("experience", "experience", FieldType.OBJECT_LIST, item_model=ExperienceEntry, id_prefix="exp"),
        FieldSpec("education", "education", FieldType.OBJECT_LIST, item_model=EducationEntry, id_prefix="edu"),
        FieldSpec("skills", "skills", FieldType.STRING_LIST, description="skill"),
    ),
)

SCHEMAS: dict[DocumentKind, DocumentSchema] = {
    DocumentKind.RESUME: RESUME_SCHEMA,
    DocumentKind.COVER_LETTER: COVER_LETTER_SCHEMA,
    DocumentKind.PARSED_RESUME: PARSED_RESUME_SCHEMA,
}


def get_schema(kind: DocumentKind) -> DocumentSchema:
    return SCHEMAS[kind]
