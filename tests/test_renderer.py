"""Tests for HTML rendering of validated documents."""

from __future__ import annotations

from resume_forge.pipeline.validator import validate
from resume_forge.prompts.schemas import COVER_LETTER_SCHEMA, PARSED_RESUME_SCHEMA, RESUME_SCHEMA
from resume_forge.render import render


class TestResumeRendering:
    def test_title_in_h1(self, resume_json):
        artifact = render(validate(resume_json, RESUME_SCHEMA))
        assert "<h1>Staff Engineer</h1>" in artifact.html
        assert "<title>Staff Engineer</title>" in artifact.html

    def test_sections_rendered(self, resume_json):
        html = render(validate(resume_json, RESUME_SCHEMA)).html
        assert "Senior Engineer, Acme" in html
        assert "2019-03 - Present" in html
        assert "<li>Cut p99 latency by 40%</li>" in html
        assert "State University" in html
        assert "<h2>Projects</h2>" in html
        assert "<li>Kubernetes</li>" in html

    def test_values_are_escaped(self, resume_json):
        resume_json["title"] = "<script>alert(1)</script>"
        resume_json["skills"] = ['<img src=x onerror="boom">']
        html = render(validate(resume_json, RESUME_SCHEMA)).html

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "<img" not in html

    def test_empty_lists_omitted_but_scalars_kept(self):
        doc = validate("garbage", RESUME_SCHEMA)
        html = render(doc).html

        assert "<h1></h1>" in html
        assert '<section class="summary">' in html
        assert '<div class="contact">' in html
        assert "Experience" not in html
        assert "Skills" not in html
        assert "Keywords" not in html

    def test_blank_contact_fields_rendered_as_empty_elements(self, resume_json):
        resume_json["contact"] = {"fullName": "Jane Doe", "email": "", "phone": ""}
        html = render(validate(resume_json, RESUME_SCHEMA)).html

        assert '<span class="full-name">Jane Doe</span>' in html
        for name in ("email", "phone", "location", "website"):
            assert f'<span class="{name}"></span>' in html

    def test_rendering_is_deterministic(self, resume_json):
        doc = validate(resume_json, RESUME_SCHEMA)
        assert render(doc).html == render(doc).html

    def test_artifact_references_document(self, resume_json):
        doc = validate(resume_json, RESUME_SCHEMA)
        assert render(doc).source_document is doc


class TestCoverLetterRendering:
    def test_paragraphs(self, cover_letter_json):
        html = render(validate(cover_letter_json, COVER_LETTER_SCHEMA)).html
        assert '<p class="greeting">Dear Hiring Manager,</p>' in html
        assert html.count('<p class="body">') == 2
        assert "<title>Cover Letter</title>" in html

    def test_missing_fields_still_rendered(self):
        html = render(validate("{}", COVER_LETTER_SCHEMA)).html
        assert '<p class="signature"></p>' in html
        assert '<p class="body">' not in html


class TestParsedResumeRendering:
    def test_personal_fields(self, parsed_resume_json):
        html = render(validate(parsed_resume_json, PARSED_RESUME_SCHEMA)).html
        assert "<h1>Jane Doe</h1>" in html
        assert '<span class="email">jane@example.com</span>' in html
        assert "linkedin.com/in/janedoe" in html
        assert 'id="exp-1"' in html

    def test_empty_email_rendered_as_empty_element(self, parsed_resume_json):
        parsed_resume_json["personalInfo"]["email"] = ""
        html = render(validate(parsed_resume_json, PARSED_RESUME_SCHEMA)).html
        assert '<span class="email"></span>' in html

    def test_blank_optional_contact_fields_still_rendered(self, parsed_resume_json):
        for key in ("location", "linkedin", "website"):
            parsed_resume_json["personalInfo"][key] = ""
        html = render(validate(parsed_resume_json, PARSED_RESUME_SCHEMA)).html

        assert '<span class="location"></span>' in html
        assert '<span class="linkedin"></span>' in html
        assert '<span class="website"></span>' in html
