from fastapi import APIRouter, HTTPException, Depends
import logging
import traceback

from talentmatch.dependencies import get_matching_service
from talentmatch.exceptions import PipelineError
from talentmatch.routes.common import require_identifier, raise_for_fatal
from talentmatch.schemas.matching import CandidateJobsResponse, CandidateAnalysisResponse
from talentmatch.services.matching_service import MatchingService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/candidates/{candidate_id}/match-jobs", response_model=CandidateJobsResponse, tags=["Candidates"])
async def match_candidate_to_jobs(
    candidate_id: str,
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Score a candidate against every open job and record the best match."""
    candidate_id = require_identifier(candidate_id, "candidateId")
    logger.info(f"Matching candidate {candidate_id} to jobs")
    try:
        batch = await matching_service.match_candidate_to_jobs(candidate_id)
    except PipelineError as e:
        logger.error(f"Error matching candidate {candidate_id} to jobs: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error matching candidate {candidate_id}: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        raise HTTPException(status_code=500, detail="Internal server error during job matching.")

    raise_for_fatal(batch)
    match_results, best_match = batch.results.get(candidate_id, (None, None))
    return CandidateJobsResponse.from_batch(
        batch,
        candidate_id=candidate_id,
        match_results=match_results,
        best_match=best_match
    )

@router.post("/candidates/{candidate_id}/analyze", response_model=CandidateAnalysisResponse, tags=["Candidates"])
async def analyze_candidate(
    candidate_id: str,
    matching_service: MatchingService = Depends(get_matching_service)
):
    """Score a candidate against the job they are attached to."""
    candidate_id = require_identifier(candidate_id, "candidateId")
    logger.info(f"Analyzing candidate {candidate_id}")
    try:
        batch = await matching_service.analyze_candidate(candidate_id)
    except PipelineError as e:
        logger.error(f"Error analyzing candidate {candidate_id}: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error analyzing candidate {candidate_id}: {str(e)}")
        logger.error(f"Traceback: {traceback.format_exc()}")
        raise HTTPException(status_code=500, detail="Internal server error during candidate analysis.")

    raise_for_fatal(batch)
    return CandidateAnalysisResponse.from_batch(
        batch,
        candidate_id=candidate_id,
        analysis=batch.results.get(candidate_id)
    )
