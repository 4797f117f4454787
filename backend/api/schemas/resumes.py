"""
Resume, tailoring and client event schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from api.schemas.common import CamelRequest
from infrastructure.database.models import TailoringStatus

# ============================================================================
# Resumes
# ============================================================================


class ResumeSaveRequest(BaseModel):
    """Create a resume, or overwrite ``resume_id`` when given."""

    latex_content: str = Field(..., min_length=1)
    title: str | None = Field(None, max_length=255)
    is_primary: bool = False
    resume_id: str | None = None


class ResumePatchRequest(BaseModel):
    set_primary: bool = False


class ResumeResponse(BaseModel):
    id: str
    title: str
    latex_content: str
    is_primary: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Tailoring
# ============================================================================


class GenerationOptionsSchema(CamelRequest):
    include_cover_letter: bool = False
    include_standard_questions: bool = False
    custom_questions: list[str] = Field(default_factory=list, max_length=5)


class TailorResumeRequest(CamelRequest):
    job_offer: str = Field(..., min_length=1)
    resume_latex: str = Field(..., min_length=1)
    llm_provider: str = "claude"
    model: str | None = None
    generation_options: GenerationOptionsSchema = Field(default_factory=GenerationOptionsSchema)


class LatexFixesSchema(BaseModel):
    applied_fixes: list[str]
    remaining_errors: list[str]


class StandardAnswersSchema(BaseModel):
    why_this_job: str
    why_you_fit: str


class TailorResumeResponse(BaseModel):
    tailored_resume: str
    cover_letter: str | None = None
    standard_answers: StandardAnswersSchema | None = None
    custom_answers: list[str] | None = None
    latex_fixes: LatexFixesSchema | None = None
    latex_warnings: list[str] | None = None
    llm_provider: str
    model_used: str
    prompt_version: str


# ============================================================================
# Tailoring history
# ============================================================================


class TailoringHistoryCreateRequest(BaseModel):
    job_description: str = Field(..., min_length=1)
    tailored_resume_content: str = Field(..., min_length=1)
    llm_provider: str = Field(..., max_length=50)
    model_used: str = Field(..., max_length=100)
    job_title: str | None = Field(None, max_length=500)
    company_name: str | None = Field(None, max_length=500)
    job_url: str | None = Field(None, max_length=2000)
    original_resume_id: str | None = None
    original_resume_content: str | None = None
    generation_options: dict[str, Any] | None = None
    cover_letter_content: str | None = None
    standard_answers: dict[str, Any] | None = None
    custom_answers: list[str] | None = None
    prompt_version: str | None = Field(None, max_length=20)


class TailoringHistoryUpdateRequest(BaseModel):
    status: TailoringStatus | None = None
    notes: str | None = None
    applied_with_this_version: bool | None = None
    cover_letter_content: str | None = None


class TailoringHistoryResponse(BaseModel):
    id: str
    job_title: str | None
    company_name: str | None
    job_description: str
    job_url: str | None
    tailoring_date: datetime
    original_resume_id: str | None
    generation_options: dict[str, Any] | None
    tailored_resume_content: str
    cover_letter_content: str | None
    standard_answers: dict[str, Any] | None
    custom_answers: list[str] | None
    llm_provider: str
    model_used: str
    prompt_version: str | None
    status: str
    notes: str | None
    applied_with_this_version: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Events
# ============================================================================


class EventCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str | None = Field(None, max_length=100)
    is_error: bool = False
    error_message: str | None = None
    is_dev: bool = False


class EventResponse(BaseModel):
    id: str
    name: str
    category: str | None
    is_error: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
