from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import List, Optional

from talentmatch.db.enums import Recommendation
from talentmatch.schemas.matching import BatchResponse, Score, TextList, utcnow

class InterviewSession(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: str
    status: Optional[str] = None
    candidate_id: Optional[str] = None
    archived: bool = False

class InterviewQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    category: str = "general"
    expected_answer: Optional[str] = Field(None, validation_alias=AliasChoices('expected_answer', 'expectedAnswer'))

class InterviewAnswer(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None

class EvaluateInterviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional so that a missing token is answered with 401 instead of a 422
    interview_token: Optional[str] = Field(None, validation_alias=AliasChoices('interview_token', 'interviewToken'))
    questions: List[InterviewQuestion] = []
    answers: List[InterviewAnswer] = []

class AnswerEvaluation(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    question_index: int = Field(..., ge=0, validation_alias=AliasChoices('question_index', 'questionIndex'))
    score: Score
    feedback: str = ""
    improvements: str = ""

class InterviewEvaluation(BaseModel):
    """Validated evaluation of one interview. Accepts camelCase keys from free-text replies."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    answer_evaluations: List[AnswerEvaluation] = Field(
        default_factory=list,
        validation_alias=AliasChoices('answer_evaluations', 'answerEvaluations')
    )
    overall_score: Score = Field(..., validation_alias=AliasChoices('overall_score', 'overallScore'))
    recommendation: Recommendation
    strengths: TextList = []
    weaknesses: TextList = []
    summary: str = ""
    evaluated_at: datetime = Field(default_factory=utcnow)

class InterviewEvaluationResponse(BatchResponse):
    interview_id: str
    evaluation: Optional[InterviewEvaluation] = None
