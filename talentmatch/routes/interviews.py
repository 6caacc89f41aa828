from fastapi import APIRouter, HTTPException, Depends
import logging
import traceback

from talentmatch.dependencies import get_matching_service
from talentmatch.exceptions import PipelineError
from talentmatch.routes.common import raise_for_fatal
from talentmatch.schemas.interview import EvaluateInterviewRequest, InterviewEvaluationResponse
from talentmatch.services.matching_service import MatchingService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/interviews/evaluate", response_model=InterviewEvaluationResponse, tags=["Interviews"])
async def evaluate_interview_answers(
    request: EvaluateInterviewRequest,
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Evaluate a finished interview's answers and store the evaluation on the session."""
    if not request.interview_token:
        raise HTTPException(status_code=401, detail="Interview token is required")

    try:
        interview_id, batch = await matching_service.evaluate_interview(request)
    except PipelineError as e:
        logger.error(f"Error evaluating interview answers: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error evaluating interview answers: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        raise HTTPException(status_code=500, detail="Internal server error during interview evaluation.")

    raise_for_fatal(batch)
    return InterviewEvaluationResponse.from_batch(
        batch,
        interview_id=interview_id,
        evaluation=batch.results.get(interview_id)
    )
