"""
Configuration constants for the evaluation pipeline.
Runtime-tunable values live in Settings; these are fixed by the prompts.
"""
from typing import Final, Tuple

from talentmatch.db.enums import JobStatus

# Prompt length limits (characters). Longer text is cut silently.
RESUME_CHAR_LIMIT: Final[int] = 2000           # single candidate vs single job
JOB_DESCRIPTION_CHAR_LIMIT: Final[int] = 1000  # single candidate vs single job
MULTI_JOB_RESUME_CHAR_LIMIT: Final[int] = 1000  # one candidate vs many jobs
MULTI_JOB_DESCRIPTION_CHAR_LIMIT: Final[int] = 500

PLACEHOLDER_TEXT: Final[str] = "Not provided"

# Score bounds shared by schemas and validation
SCORE_MIN: Final[int] = 0
SCORE_MAX: Final[int] = 100

# Tool (function) names the scoring service is forced to call
CANDIDATE_MATCH_FUNCTION: Final[str] = "evaluate_candidate_match"
CANDIDATE_JOBS_FUNCTION: Final[str] = "evaluate_candidate_matches"
INTERVIEW_EVALUATION_FUNCTION: Final[str] = "evaluate_interview_answers"

DEFAULT_ELIGIBLE_JOB_STATUSES: Final[Tuple[str, ...]] = (JobStatus.OPEN.value, JobStatus.ACTIVE.value, JobStatus.DRAFT.value)

# Table base names; see config.utils.get_table_name
CANDIDATES_TABLE: Final[str] = "candidates"
JOBS_TABLE: Final[str] = "jobs"
INTERVIEWS_TABLE: Final[str] = "ai_interviews"
