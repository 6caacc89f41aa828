from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class CandidateProfile(BaseModel):
    """Fields of a candidate record needed to build a scoring prompt."""
    model_config = ConfigDict(extra='ignore')

    id: str
    full_name: str = ""
    email: Optional[str] = None
    experience_years: Optional[float] = Field(None, description="Total years of experience")
    resume_text: Optional[str] = None
    skills: Optional[str] = None
    status: Optional[str] = None
    job_id: Optional[str] = Field(None, description="Job the candidate is currently attached to")
