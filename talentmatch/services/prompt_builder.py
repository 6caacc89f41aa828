"""
Builds scoring requests: a deterministic prompt plus the function schema the
scoring service is forced to fill in.

Every score property is bounded to 0-100 and every recommendation property is
a closed enum, so a well-behaved service cannot return anything the response
normalizer would reject. Long free text (resumes, job descriptions) is cut to
the limits in config.constants; missing text is replaced by a placeholder so
that partial records can still be scored.
"""
from typing import Any, Dict, Optional, Sequence
import json
import logging

from talentmatch.config.settings import Settings
from talentmatch.config.constants import (
    RESUME_CHAR_LIMIT,
    JOB_DESCRIPTION_CHAR_LIMIT,
    MULTI_JOB_RESUME_CHAR_LIMIT,
    MULTI_JOB_DESCRIPTION_CHAR_LIMIT,
    PLACEHOLDER_TEXT,
    SCORE_MIN,
    SCORE_MAX,
    CANDIDATE_MATCH_FUNCTION,
    CANDIDATE_JOBS_FUNCTION,
    INTERVIEW_EVALUATION_FUNCTION,
)
from talentmatch.db.enums import Recommendation
from talentmatch.schemas.candidate import CandidateProfile
from talentmatch.schemas.job import JobProfile, JobDescriptionRequest
from talentmatch.schemas.interview import InterviewQuestion, InterviewAnswer
from talentmatch.schemas.inference import InferenceRequest

logger = logging.getLogger(__name__)

RECOMMENDATION_VALUES = [r.value for r in Recommendation]

EVALUATOR_SYSTEM_PROMPT = "You are an expert HR recruiter. Provide objective candidate assessments."
MULTI_JOB_SYSTEM_PROMPT = (
    "You are an expert HR recruiter specializing in candidate-job matching. "
    "Analyze candidate qualifications against job requirements and provide detailed match scores."
)
INTERVIEW_SYSTEM_PROMPT = "You are an expert HR evaluator. Always respond with valid JSON objects only."
JOB_DESCRIPTION_SYSTEM_PROMPT = (
    "You are an expert HR professional specializing in creating detailed, professional "
    "job descriptions for academic positions in colleges and universities."
)

LANGUAGE_NAMES = {"hindi": "Hindi", "telugu": "Telugu"}


def truncate(text: Optional[str], limit: int) -> Optional[str]:
    if text is None:
        return None
    return text[:limit]


def _or_placeholder(value: Any, field: str, subject_id: Optional[str] = None) -> str:
    """Substitute the placeholder for absent source fields instead of failing."""
    if value is None or (isinstance(value, str) and not value.strip()):
        logger.warning(f"Missing {field}; using placeholder", extra={"subject_id": subject_id})
        return PLACEHOLDER_TEXT
    return str(value)


def _score_property(description: str) -> Dict[str, Any]:
    return {"type": "number", "description": description, "minimum": SCORE_MIN, "maximum": SCORE_MAX}


def _string_list_property(description: str) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _recommendation_property() -> Dict[str, Any]:
    return {"type": "string", "enum": RECOMMENDATION_VALUES, "description": "Hiring recommendation"}


class PromptBuilder:
    def __init__(self, settings: Settings):
        self.evaluation_temperature = settings.evaluation_temperature
        self.generation_temperature = settings.generation_temperature

    def build_candidate_match_request(self, candidate: CandidateProfile, job: JobProfile) -> InferenceRequest:
        """One candidate scored against one job."""
        resume = _or_placeholder(truncate(candidate.resume_text, RESUME_CHAR_LIMIT), "resume_text", candidate.id)
        description = _or_placeholder(truncate(job.job_description, JOB_DESCRIPTION_CHAR_LIMIT), "job_description", candidate.id)

        prompt = f"""Analyze this candidate's qualifications against the job requirements.

Job Details:
- Position: {_or_placeholder(job.position, "position", candidate.id)}
- Required Experience: {job.experience or PLACEHOLDER_TEXT}
- Department: {job.department or PLACEHOLDER_TEXT}
- Job Description: {description}
- Required Qualifications: {job.expected_qualification or PLACEHOLDER_TEXT}

Candidate Profile:
- Name: {_or_placeholder(candidate.full_name, "full_name", candidate.id)}
- Experience: {_format_years(candidate.experience_years)}
- Resume: {resume}

Evaluate based on: skills match, experience alignment, qualification fit, and overall suitability."""

        parameters = {
            "type": "object",
            "properties": {
                "match_score": _score_property("Overall match score 0-100"),
                "skills_match": _score_property("Skills alignment score 0-100"),
                "experience_match": _score_property("Experience level match 0-100"),
                "strengths": _string_list_property("Key strengths (3-5 points)"),
                "weaknesses": _string_list_property("Gaps or concerns (2-4 points)"),
                "recommendation": _recommendation_property(),
                "summary": {"type": "string", "description": "Brief assessment summary (2-3 sentences)"},
            },
            "required": ["match_score", "strengths", "weaknesses", "recommendation", "summary"],
            "additionalProperties": False,
        }

        return InferenceRequest(
            system_prompt=EVALUATOR_SYSTEM_PROMPT,
            prompt=prompt,
            temperature=self.evaluation_temperature,
            function_name=CANDIDATE_MATCH_FUNCTION,
            function_description="Evaluate candidate fit for a job position",
            parameters=parameters,
        )

    def build_candidate_jobs_request(self, candidate: CandidateProfile, jobs: Sequence[JobProfile]) -> InferenceRequest:
        """One candidate scored against every job in a single call."""
        job_ids = [job.id for job in jobs]
        job_summaries = [
            {
                "id": job.id,
                "position": job.position,
                "department": job.department,
                "experience": job.experience,
                "description": truncate(job.job_description, MULTI_JOB_DESCRIPTION_CHAR_LIMIT) or "No description",
            }
            for job in jobs
        ]
        resume = _or_placeholder(truncate(candidate.resume_text, MULTI_JOB_RESUME_CHAR_LIMIT), "resume_text", candidate.id)

        prompt = f"""Analyze this candidate's fit for the available positions and provide match scores.

CANDIDATE:
Name: {_or_placeholder(candidate.full_name, "full_name", candidate.id)}
Experience: {_format_years(candidate.experience_years)}
Resume: {resume}

AVAILABLE POSITIONS:
{json.dumps(job_summaries, indent=2)}

Evaluate the candidate's fit for EACH position based on:
1. Skills match (technical and soft skills)
2. Experience level alignment
3. Domain/industry relevance
4. Overall qualification fit"""

        match_item = {
            "type": "object",
            "properties": {
                "job_id": {"type": "string", "enum": job_ids, "description": "Job ID"},
                "match_score": _score_property("Overall match score from 0-100"),
                "skills_match": _score_property("Skills alignment score 0-100"),
                "experience_match": _score_property("Experience level match 0-100"),
                "strengths": _string_list_property("Key strengths for this position"),
                "weaknesses": _string_list_property("Skill or experience gaps"),
                "recommendation": _recommendation_property(),
            },
            "required": ["job_id", "match_score", "skills_match", "experience_match", "strengths", "weaknesses", "recommendation"],
        }
        parameters = {
            "type": "object",
            "properties": {
                "matches": {"type": "array", "items": match_item},
                "best_match_job_id": {"type": "string", "enum": job_ids, "description": "ID of the best matching job"},
                "overall_summary": {
                    "type": "string",
                    "description": "Brief summary of candidate's overall fit across all positions",
                },
            },
            "required": ["matches", "best_match_job_id", "overall_summary"],
            "additionalProperties": False,
        }

        return InferenceRequest(
            system_prompt=MULTI_JOB_SYSTEM_PROMPT,
            prompt=prompt,
            temperature=self.evaluation_temperature,
            function_name=CANDIDATE_JOBS_FUNCTION,
            function_description="Evaluate candidate fit for multiple job positions with detailed scoring",
            parameters=parameters,
        )

    def build_interview_evaluation_request(
        self,
        questions: Sequence[InterviewQuestion],
        answers: Sequence[InterviewAnswer],
    ) -> InferenceRequest:
        """Answers scored against the question bank and its expected answers."""
        question_lines = "\n".join(
            f"Q{i + 1} ({q.category}): {q.question}\nExpected: {q.expected_answer or PLACEHOLDER_TEXT}"
            for i, q in enumerate(questions)
        )
        answer_lines = "\n".join(
            f"A{i + 1}: {a.answer or 'No answer given'}"
            for i, a in enumerate(answers)
        )

        prompt = f"""Evaluate the following interview answers and provide detailed feedback.

Questions and Expected Answers:
{question_lines}

Candidate Answers:
{answer_lines}

Evaluate each answer and provide:
1. A score from 0-100 for each answer
2. Feedback on what was good
3. Feedback on what could be improved
4. An overall score (0-100)
5. Overall strengths and weaknesses"""

        last_index = max(len(questions) - 1, 0)
        parameters = {
            "type": "object",
            "properties": {
                "answer_evaluations": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "question_index": {"type": "integer", "minimum": 0, "maximum": last_index},
                            "score": _score_property("Score for this answer 0-100"),
                            "feedback": {"type": "string", "description": "What was good about the answer"},
                            "improvements": {"type": "string", "description": "What could be improved"},
                        },
                        "required": ["question_index", "score", "feedback", "improvements"],
                    },
                },
                "overall_score": _score_property("Overall interview score 0-100"),
                "strengths": _string_list_property("Overall strengths"),
                "weaknesses": _string_list_property("Areas to improve"),
                "recommendation": _recommendation_property(),
                "summary": {"type": "string", "description": "Overall assessment of the candidate"},
            },
            "required": ["answer_evaluations", "overall_score", "strengths", "weaknesses", "recommendation", "summary"],
            "additionalProperties": False,
        }

        return InferenceRequest(
            system_prompt=INTERVIEW_SYSTEM_PROMPT,
            prompt=prompt,
            temperature=self.evaluation_temperature,
            function_name=INTERVIEW_EVALUATION_FUNCTION,
            function_description="Evaluate interview answers against the expected answers",
            parameters=parameters,
        )

    def build_job_description_request(self, request: JobDescriptionRequest) -> InferenceRequest:
        """Free-text generation; no output schema."""
        language = LANGUAGE_NAMES.get(request.language.lower(), "English")
        role_experience = f"{request.role_experience} years" if request.role_experience else "Not specified"

        prompt = f"""Generate a professional, comprehensive job description for an academic position with the following details:

Position: {request.position}
Department: {request.department or 'Not specified'}
Experience Level: {request.experience or 'Not specified'}
Role Relevant Experience: {role_experience}
Language: {language}

Please create a well-structured job description that includes:
1. A brief overview of the position
2. Key responsibilities and duties
3. Required qualifications and experience
4. Preferred skills and competencies
5. Any other relevant information for an academic institution

IMPORTANT: Write in plain text format without any markdown formatting. Do not use asterisks (*), hashes (#), or other markdown symbols. Use simple line breaks and proper punctuation instead.

The tone should be professional and suitable for a college HRMS system. Write in {language}."""

        return InferenceRequest(
            system_prompt=JOB_DESCRIPTION_SYSTEM_PROMPT,
            prompt=prompt,
            temperature=self.generation_temperature,
        )


def _format_years(years: Optional[float]) -> str:
    if years is None:
        return PLACEHOLDER_TEXT
    if float(years).is_integer():
        years = int(years)
    return f"{years} years"
