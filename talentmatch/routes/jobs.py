from fastapi import APIRouter, HTTPException, Depends
import logging
import traceback

from talentmatch.dependencies import get_matching_service, get_job_description_service
from talentmatch.exceptions import PipelineError
from talentmatch.routes.common import require_identifier, raise_for_fatal
from talentmatch.schemas.job import JobDescriptionRequest, JobDescriptionResponse
from talentmatch.schemas.matching import JobCandidatesResponse
from talentmatch.services.matching_service import MatchingService
from talentmatch.services.job_description_service import JobDescriptionService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/jobs/{job_id}/match-candidates", response_model=JobCandidatesResponse, tags=["Jobs"])
async def match_candidates_to_job(
    job_id: str,
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Score every eligible candidate against a job and store the results."""
    job_id = require_identifier(job_id, "jobId")
    logger.info(f"Matching all candidates to job {job_id}")
    try:
        batch = await matching_service.match_candidates_to_job(job_id)
    except PipelineError as e:
        logger.error(f"Error matching candidates to job {job_id}: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error matching candidates to job {job_id}: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        raise HTTPException(status_code=500, detail="Internal server error during candidate matching.")

    raise_for_fatal(batch)
    return JobCandidatesResponse.from_batch(batch, job_id=job_id)

@router.post("/jobs/generate-description", response_model=JobDescriptionResponse, tags=["Jobs"])
async def generate_job_description(
    request: JobDescriptionRequest,
    job_description_service: JobDescriptionService = Depends(get_job_description_service)
):
    """Draft a plain-text job description."""
    try:
        description = await job_description_service.generate(request)
    except PipelineError as e:
        logger.error(f"Error generating job description: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return JobDescriptionResponse(job_description=description)
