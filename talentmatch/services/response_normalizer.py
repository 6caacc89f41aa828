from typing import Any, Dict, List, Sequence, Type, TypeVar
import json
import logging
import re

from pydantic import BaseModel, ValidationError

from talentmatch.exceptions import MalformedResponse
from talentmatch.schemas.inference import StructuredPayload, ToolCallResult
from talentmatch.schemas.interview import InterviewEvaluation
from talentmatch.schemas.matching import CandidateJobsResult

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

CODE_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*\n?|\n?\s*```")


def strip_code_fences(content: str) -> str:
    """Remove markdown code fences wrapped around an embedded JSON document."""
    return CODE_FENCE_PATTERN.sub("", content).strip()


def _extract_json_object(text: str) -> Any:
    # Prose around the object: take the outermost {...}
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise MalformedResponse("No JSON object found in the response")
    try:
        return json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid AI response format: {e}")


def parse_payload(payload: StructuredPayload) -> Dict[str, Any]:
    """Turn either payload variant into a JSON object."""
    if isinstance(payload, ToolCallResult):
        try:
            parsed = json.loads(payload.arguments)
        except json.JSONDecodeError as e:
            logger.error(f"Tool call arguments are not valid JSON: {payload.arguments[:500]}")
            raise MalformedResponse(f"Invalid tool call arguments: {e}")
    else:
        cleaned = strip_code_fences(payload.content)
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            parsed = _extract_json_object(cleaned)

    if not isinstance(parsed, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _describe(error: ValidationError) -> str:
    details = [
        f"{'.'.join(str(part) for part in err['loc']) or 'payload'}: {err['msg']}"
        for err in error.errors()[:5]
    ]
    return "; ".join(details)


def validate(data: Dict[str, Any], model: Type[T]) -> T:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"{model.__name__} failed validation: {_describe(e)}")
        raise MalformedResponse(f"Invalid {model.__name__}: {_describe(e)}")


def normalize(payload: StructuredPayload, model: Type[T]) -> T:
    return validate(parse_payload(payload), model)


def normalize_candidate_jobs(payload: StructuredPayload, job_ids: Sequence[str]) -> CandidateJobsResult:
    """Validate a multi-job result, discarding matches for jobs that were never offered.

    Only the first match per job is kept.
    """
    data = parse_payload(payload)
    known = set(job_ids)

    matches = data.get("matches")
    if not isinstance(matches, list):
        raise MalformedResponse("Invalid CandidateJobsResult: matches must be a list")

    kept: List[Dict[str, Any]] = []
    seen = set()
    for match in matches:
        job_id = match.get("job_id") if isinstance(match, dict) else None
        if not isinstance(job_id, str) or job_id not in known or job_id in seen:
            continue
        seen.add(job_id)
        kept.append(match)
    if len(kept) != len(matches):
        logger.warning(f"Dropped {len(matches) - len(kept)} matches referring to unknown or repeated jobs")
    if not kept:
        raise MalformedResponse("No matches for any of the requested jobs")

    best = data.get("best_match_job_id")
    return validate({
        **data,
        "matches": kept,
        "best_match_job_id": best if isinstance(best, str) and best in known else None,
    }, CandidateJobsResult)


def normalize_interview_evaluation(payload: StructuredPayload, question_count: int) -> InterviewEvaluation:
    """Validate an interview evaluation whose answer indices must point at asked questions."""
    evaluation = normalize(payload, InterviewEvaluation)
    out_of_range = [
        a.question_index for a in evaluation.answer_evaluations
        if a.question_index >= question_count
    ]
    if out_of_range:
        raise MalformedResponse(
            f"Invalid InterviewEvaluation: question_index {out_of_range[0]} "
            f"out of range for {question_count} questions"
        )
    return evaluation
