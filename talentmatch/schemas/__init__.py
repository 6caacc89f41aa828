from talentmatch.schemas.candidate import CandidateProfile
from talentmatch.schemas.job import JobProfile, JobDescriptionRequest, JobDescriptionResponse
from talentmatch.schemas.matching import (
    MatchResult,
    JobMatch,
    CandidateJobsResult,
    EvaluationUnit,
    ItemError,
    BatchResult,
    BatchResponse,
    JobCandidatesResponse,
    CandidateJobsResponse,
    CandidateAnalysisResponse
)
from talentmatch.schemas.interview import (
    InterviewSession,
    InterviewQuestion,
    InterviewAnswer,
    EvaluateInterviewRequest,
    AnswerEvaluation,
    InterviewEvaluation,
    InterviewEvaluationResponse
)

__all__ = [
    'CandidateProfile',
    'JobProfile',
    'JobDescriptionRequest',
    'JobDescriptionResponse',
    'MatchResult',
    'JobMatch',
    'CandidateJobsResult',
    'EvaluationUnit',
    'ItemError',
    'BatchResult',
    'BatchResponse',
    'JobCandidatesResponse',
    'CandidateJobsResponse',
    'CandidateAnalysisResponse',
    'InterviewSession',
    'InterviewQuestion',
    'InterviewAnswer',
    'EvaluateInterviewRequest',
    'AnswerEvaluation',
    'InterviewEvaluation',
    'InterviewEvaluationResponse'
]
