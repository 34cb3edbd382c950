"""
Test prompt building and Gemini response handling
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from app.core.errors import ServiceUnavailableError
from app.schemas.ResumeSchemas import GenerateResumeRequest
from app.workflows.resume.resume_generator import build_prompt, generate_resume, strip_code_fences


def make_request(**overrides):
    data = {
        "name": "Ada Lovelace",
        "skills": ["Python", "SQL"],
        "education": [{"degree": "BSc", "institution": "UCL", "year": "2020"}],
        "experience": [{"role": "Analyst", "company": "Babbage", "duration": "2y"}],
    }
    data.update(overrides)
    return GenerateResumeRequest(**data)


def fake_client(text):
    client = MagicMock()
    client.models.generate_content.return_value = MagicMock(text=text)
    return client


def test_prompt_includes_filled_sections():
    prompt = build_prompt(make_request(projects=[{"title": "Mill", "techStack": "Brass"}]))

    assert "- Name: Ada Lovelace" in prompt
    assert "- Skills: Python, SQL" in prompt
    assert "- Education: BSc from UCL (2020)" in prompt
    assert "- Experience: Analyst at Babbage (2y)" in prompt
    assert "- Projects: Mill (Tech: Brass)" in prompt
    assert "Internship Experience" not in prompt


def test_prompt_drops_legacy_experience_when_split_lists_present():
    prompt = build_prompt(make_request(
        jobExperience=[{"role": "Engineer", "company": "Acme", "duration": "1y", "description": "Built things"}],
    ))

    assert "- Job Experience: Engineer at Acme (1y): Built things" in prompt
    assert "- Experience:" not in prompt
    assert '"experience":' not in prompt


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


def test_generate_resume_parses_fenced_json():
    payload = {
        "summary": "Seasoned analyst.",
        "skills": {"languages": ["Python"], "data": ["SQL"]},
        "experience": [{"role": "Analyst", "company": "Babbage", "duration": "2y",
                        "description": "• One\n• Two\n• Three"}],
    }
    client = fake_client("```json\n" + json.dumps(payload) + "\n```")

    with patch("app.workflows.resume.resume_generator.get_genai_client", return_value=client):
        result = generate_resume(make_request())

    assert result.summary == "Seasoned analyst."
    assert result.skills == ["Python", "SQL"]
    assert result.experience[0].description.count("•") == 3
    assert result.projects == []
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["config"].response_mime_type == "application/json"


def test_generate_resume_invalid_json_is_service_error():
    with patch("app.workflows.resume.resume_generator.get_genai_client", return_value=fake_client("Sorry!")):
        with pytest.raises(ServiceUnavailableError) as exc_info:
            generate_resume(make_request())

    assert exc_info.value.status_code == 500


def test_generate_resume_client_failure_is_service_error():
    client = MagicMock()
    client.models.generate_content.side_effect = RuntimeError("quota exceeded")

    with patch("app.workflows.resume.resume_generator.get_genai_client", return_value=client):
        with pytest.raises(ServiceUnavailableError) as exc_info:
            generate_resume(make_request())

    assert exc_info.value.detail == "quota exceeded"


def test_missing_api_key_is_service_error(monkeypatch):
    from app.core.config import settings
    from app.workflows.resume import resume_generator

    monkeypatch.setattr(settings, "GOOGLE_API_KEY", None)
    monkeypatch.setattr(resume_generator, "_genai_client", None)

    with pytest.raises(ServiceUnavailableError):
        generate_resume(make_request())
