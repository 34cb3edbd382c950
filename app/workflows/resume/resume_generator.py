"""
Resume generation with Gemini.

Turns the builder form's raw notes into a polished summary and bullet-point
descriptions, returned as JSON shaped like the form itself.
"""
import json
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from app.core.config import settings
from app.core.errors import ServiceUnavailableError
from app.schemas.ResumeSchemas import ExperienceEntry, GeneratedResume, GenerateResumeRequest

logger = logging.getLogger(__name__)

_genai_client: Optional[genai.Client] = None

BULLETS = "• First achievement/responsibility\\n• Second achievement/responsibility\\n• Third achievement/responsibility"
PROJECT_BULLETS = "• First key feature/accomplishment\\n• Second key feature/accomplishment\\n• Third key feature/accomplishment"


def get_genai_client() -> genai.Client:
    """Shared client, created on first use."""
    global _genai_client
    if _genai_client is None:
        if not settings.GOOGLE_API_KEY:
            raise ServiceUnavailableError(
                "Resume generation failed", detail="GOOGLE_API_KEY is not configured"
            )
        _genai_client = genai.Client(api_key=settings.GOOGLE_API_KEY)
    return _genai_client


def _describe_roles(entries: List[ExperienceEntry]) -> str:
    parts = []
    for e in entries:
        base = f"{e.role} at {e.company} ({e.duration})"
        parts.append(f"{base}: {e.description}" if e.description else base)
    return "; ".join(parts)


def build_prompt(request: GenerateResumeRequest) -> str:
    """Prompt listing only the sections the user filled in.

    The legacy ``experience`` list is included only when both internship and
    job experience are empty.
    """
    use_legacy = bool(request.experience) and not request.internship and not request.jobExperience

    sections = [f"- Name: {request.name}", f"- Skills: {', '.join(request.skills)}"]
    output_fields = [
        '"summary": "Professional summary highlighting key strengths and experience"',
        '"skills": ["skill1", "skill2", ...]',
    ]

    if request.education:
        text = "; ".join(f"{e.degree} from {e.institution} ({e.year})" for e in request.education)
        sections.append(f"- Education: {text}")
        output_fields.append('"education": [{"degree": "...", "institution": "...", "year": "..."}]')
    if request.internship:
        sections.append(f"- Internship Experience: {_describe_roles(request.internship)}")
        output_fields.append(
            f'"internship": [{{"role": "...", "company": "...", "duration": "...", "description": "{BULLETS}"}}]'
        )
    if request.jobExperience:
        sections.append(f"- Job Experience: {_describe_roles(request.jobExperience)}")
        output_fields.append(
            f'"jobExperience": [{{"role": "...", "company": "...", "duration": "...", "description": "{BULLETS}"}}]'
        )
    if use_legacy:
        sections.append(f"- Experience: {_describe_roles(request.experience)}")
        output_fields.append(
            f'"experience": [{{"role": "...", "company": "...", "duration": "...", "description": "{BULLETS}"}}]'
        )
    if request.projects:
        text = "; ".join(
            f"{p.title} (Tech: {p.techStack}): {p.description}" if p.description
            else f"{p.title} (Tech: {p.techStack})"
            for p in request.projects
        )
        sections.append(f"- Projects: {text}")
        output_fields.append(
            f'"projects": [{{"title": "...", "techStack": "...", "description": "{PROJECT_BULLETS}"}}]'
        )

    section_text = "\n".join(sections)
    fields_text = ",\n  ".join(output_fields)
    return f"""
You are an expert resume writer. Create a professional and detailed resume summary and sections for:
{section_text}

IMPORTANT INSTRUCTIONS:
- Write a compelling professional summary (2-3 sentences)
- For EVERY internship, job, and project: Create AT LEAST 3 detailed bullet points in the description
- DO NOT condense multiple bullet points into a single line
- Each bullet point should start with a strong action verb and include quantifiable achievements when possible
- If the user provided multiple responsibilities/achievements, expand on each one separately
- Organize skills effectively into categories if applicable
- Keep individual bullet points clear and focused, but DO NOT reduce the number of points

Output JSON format with all provided sections:
{{
  {fields_text}
}}

CRITICAL: The description field MUST contain multiple bullet points separated by \\n (newline). Each bullet point must start with •. Minimum 3 bullet points per item.
"""


def strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def generate_resume(request: GenerateResumeRequest) -> GeneratedResume:
    """Expand the user's notes into resume content.

    Raises:
        ServiceUnavailableError: the model call failed or did not return the
            expected JSON object
    """
    prompt = build_prompt(request)
    try:
        response = get_genai_client().models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        raw = strip_code_fences(response.text or "")
        return GeneratedResume.model_validate(json.loads(raw))
    except ServiceUnavailableError:
        raise
    except ValueError as e:
        logger.error(f"Gemini returned unusable JSON: {e}")
        raise ServiceUnavailableError("Resume generation failed", detail=str(e))
    except Exception as e:
        logger.error(f"Gemini Error: {e}")
        raise ServiceUnavailableError("Resume generation failed", detail=str(e))
