from fastapi import APIRouter, Depends

from app.core.security import get_current_account_id
from app.schemas.ResumeSchemas import GeneratedResume, GenerateResumeRequest
from app.workflows.resume.resume_generator import generate_resume

router = APIRouter()


@router.post("/generate", response_model=GeneratedResume)
def generate(payload: GenerateResumeRequest, account_id: int = Depends(get_current_account_id)):
    """
    Expand the builder's notes into a summary and bullet-point descriptions.

    Runs in the threadpool; the Gemini client call is blocking.
    """
    return generate_resume(payload)
