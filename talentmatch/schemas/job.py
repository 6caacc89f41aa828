from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class JobProfile(BaseModel):
    """Fields of a job record needed to build a scoring prompt."""
    model_config = ConfigDict(extra='ignore')

    id: str
    position: str = ""
    department: Optional[str] = None
    experience: Optional[str] = Field(None, description="Required experience, free text")
    job_description: Optional[str] = None
    expected_qualification: Optional[str] = None
    status: Optional[str] = None

class JobDescriptionRequest(BaseModel):
    position: str = Field(..., min_length=1)
    department: Optional[str] = None
    experience: Optional[str] = None
    role_experience: Optional[str] = Field(None, description="Years of role-relevant experience")
    language: str = "english"

class JobDescriptionResponse(BaseModel):
    job_description: str
