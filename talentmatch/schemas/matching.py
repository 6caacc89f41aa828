import math
from datetime import datetime, timezone
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from typing import Any, Dict, List, Optional, Annotated

from talentmatch.config.constants import SCORE_MIN, SCORE_MAX
from talentmatch.db.enums import Recommendation


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _round_score(value: Any) -> Any:
    """Round fractional scores half-up; range checks are left to the field bounds."""
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValueError(f"score is not numeric: {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("score must be finite")
        return int(math.floor(value + 0.5))
    return value


def _as_text_list(value: Any) -> Any:
    # Some prompts ask for a sentence, others for bullet points
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    return value


Score = Annotated[int, BeforeValidator(_round_score), Field(ge=SCORE_MIN, le=SCORE_MAX)]
TextList = Annotated[List[str], BeforeValidator(_as_text_list)]


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    match_score: Score
    skills_match: Optional[Score] = None
    experience_match: Optional[Score] = None
    recommendation: Recommendation
    strengths: TextList = []
    weaknesses: TextList = []
    summary: str = ""
    analyzed_at: datetime = Field(default_factory=utcnow)


class JobMatch(MatchResult):
    job_id: str


class CandidateJobsResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    matches: List[JobMatch] = Field(..., min_length=1)
    best_match_job_id: Optional[str] = None
    overall_summary: str = ""
    analyzed_at: datetime = Field(default_factory=utcnow)

    def best_match(self) -> JobMatch:
        """Highest match_score wins; ties go to the suggested best job, then list order."""
        def rank(indexed):
            index, match = indexed
            return (match.match_score, match.job_id == self.best_match_job_id, -index)
        return max(enumerate(self.matches), key=rank)[1]


class EvaluationUnit(BaseModel):
    """One (subject, target) pair submitted for scoring."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    subject_id: str
    target_id: Optional[str] = None
    subject: Any = None
    target: Any = None


class ItemError(BaseModel):
    subject_id: str
    message: str


class BatchResult(BaseModel):
    """Aggregate of one batch run. Only the scheduler writes to it."""
    total: int = 0
    succeeded: int = 0
    errors: List[ItemError] = []
    fatal_error: Optional[str] = None
    fatal_status_code: Optional[int] = None
    aborted: bool = False
    results: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @property
    def success(self) -> bool:
        if self.succeeded > 0:
            return True
        return self.total == 0 and self.fatal_error is None

    def record_success(self, subject_id: str, value: Any) -> None:
        self.succeeded += 1
        self.results[subject_id] = value

    def record_failure(self, subject_id: str, message: str) -> None:
        self.errors.append(ItemError(subject_id=subject_id, message=message))


class BatchResponse(BaseModel):
    success: bool
    total: int
    succeeded: int
    errors: List[ItemError] = []
    error: Optional[str] = None

    @classmethod
    def from_batch(cls, batch: BatchResult, **extra: Any) -> "BatchResponse":
        return cls(
            success=batch.success,
            total=batch.total,
            succeeded=batch.succeeded,
            errors=batch.errors,
            error=batch.fatal_error,
            **extra
        )


class JobCandidatesResponse(BatchResponse):
    job_id: str


class CandidateJobsResponse(BatchResponse):
    candidate_id: str
    match_results: Optional[CandidateJobsResult] = None
    best_match: Optional[JobMatch] = None


class CandidateAnalysisResponse(BatchResponse):
    candidate_id: str
    analysis: Optional[MatchResult] = None
